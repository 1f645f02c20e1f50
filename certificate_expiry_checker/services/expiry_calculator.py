"""
证书过期计算服务
"""
from datetime import datetime, timezone
from typing import Optional


class ExpiryCalculator:
    """证书过期计算器"""

    def __init__(self, days_buffer: int):
        """
        初始化过期计算器

        Args:
            days_buffer: 提前提醒天数
        """
        self.days_buffer = days_buffer

    def calculate_days_until_expiry(self, expiry_date: datetime, now: Optional[datetime] = None) -> int:
        """
        计算距离过期的天数

        Args:
            expiry_date: 过期时间
            now: 当前时间，默认为UTC当前时间

        Returns:
            int: 剩余整天数（向下取整，负数表示已过期）
        """
        now = now or datetime.now(timezone.utc)
        delta = expiry_date - now
        return delta.days

    def should_notify(self, days_left: int) -> bool:
        """剩余天数不超过阈值时需要通知"""
        return days_left <= self.days_buffer

    def describe(self, domain: str, days_left: int) -> str:
        """生成跳过通知时的日志内容"""
        return f"{days_left} days left till {domain} expiration > {self.days_buffer} days"
