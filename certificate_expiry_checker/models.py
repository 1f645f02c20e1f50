"""
数据模型定义
"""
from dataclasses import dataclass
from datetime import datetime
from typing import Optional


@dataclass(frozen=True)
class CertificateSnapshot:
    """单次握手获取的证书快照"""
    domain: str
    not_after: datetime
    valid_to: str
    issuer: str = "Unknown Issuer"
    subject: str = ""


@dataclass
class CheckOutcome:
    """单次检查结果"""
    domain: str
    days_left: int
    days_buffer: int
    notified: bool
    message_id: Optional[str] = None
    
    @property
    def is_expired(self) -> bool:
        """判断是否已过期"""
        return self.days_left < 0
