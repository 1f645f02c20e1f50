"""
日志服务
"""
import os
import logging
import traceback
from typing import Dict, Any, Optional

from ..models import CertificateSnapshot, CheckOutcome


class LoggerService:
    """日志服务实现"""

    def __init__(self, logger_name: str = "certificate_expiry_checker", log_level: Optional[str] = None):
        """
        初始化日志服务

        Args:
            logger_name: 日志器名称
            log_level: 日志级别，如果为None则从环境变量读取
        """
        self.logger_name = logger_name
        self.log_level = log_level or os.getenv('LOG_LEVEL', 'INFO')

        self.logger = logging.getLogger(logger_name)
        self._configure_logger()

    def _configure_logger(self):
        """配置日志器"""
        level = getattr(logging, self.log_level.upper(), logging.INFO)
        self.logger.setLevel(level)

        # 避免重复添加处理器（Lambda热启动会复用进程）
        if not self.logger.handlers:
            handler = logging.StreamHandler()
            handler.setLevel(level)

            formatter = logging.Formatter(
                '%(asctime)s - %(name)s - %(levelname)s - %(message)s',
                datefmt='%Y-%m-%d %H:%M:%S'
            )
            handler.setFormatter(formatter)

            self.logger.addHandler(handler)

        self.logger.propagate = False

    def log_check_start(self, domain: str, days_buffer: int):
        """记录检查开始"""
        self.logger.info(f"开始检查域名 {domain} 的证书，提醒阈值: {days_buffer} 天")

    def log_certificate_info(self, snapshot: CertificateSnapshot, days_left: int):
        """
        记录证书信息

        Args:
            snapshot: 证书快照
            days_left: 剩余天数
        """
        if days_left < 0:
            self.logger.warning(
                f"证书已过期 - 域名: {snapshot.domain}, "
                f"过期时间: {snapshot.valid_to}, "
                f"已过期: {abs(days_left)} 天, "
                f"颁发者: {snapshot.issuer}"
            )
        else:
            self.logger.info(
                f"证书信息 - 域名: {snapshot.domain}, "
                f"过期时间: {snapshot.valid_to}, "
                f"剩余天数: {days_left} 天, "
                f"颁发者: {snapshot.issuer}"
            )

    def log_skip(self, message: str):
        """记录证书状态正常、跳过通知"""
        self.logger.info(message)

    def log_notification_sent(self, domain: str, message_id: Optional[str]):
        """记录通知发送成功"""
        self.logger.info(f"域名 {domain} 的过期提醒已发送，MessageId: {message_id}")

    def log_notification_failed(self, domain: str, error: Exception):
        """
        记录通知发送失败

        通知失败不影响检查结果，只记录错误。
        """
        self.logger.error(
            f"域名 {domain} 的过期提醒发送失败: {type(error).__name__}: {str(error)}"
        )
        self.logger.debug(f"通知失败堆栈跟踪:\n{traceback.format_exc()}")

    def log_error(self, domain: str, error: Exception):
        """
        记录错误信息

        Args:
            domain: 域名
            error: 异常对象
        """
        self.logger.error(
            f"域名 {domain} 检查时发生错误: {type(error).__name__}: {str(error)}"
        )
        self.logger.debug(f"域名 {domain} 错误堆栈跟踪:\n{traceback.format_exc()}")

    def log_check_end(self, outcome: CheckOutcome):
        """记录检查结束"""
        self.logger.info(
            f"证书检查完成 - 域名: {outcome.domain}, "
            f"剩余天数: {outcome.days_left}, "
            f"阈值: {outcome.days_buffer}, "
            f"已通知: {'是' if outcome.notified else '否'}"
        )

    def log_configuration_info(self, config: Dict[str, Any]):
        """
        记录配置信息

        Args:
            config: 配置信息字典
        """
        safe_config = self._sanitize_config(config)

        self.logger.info("系统配置信息:")
        for key, value in safe_config.items():
            self.logger.info(f"  {key}: {value}")

    def _sanitize_config(self, config: Dict[str, Any]) -> Dict[str, Any]:
        """
        清理配置信息中的敏感数据

        Args:
            config: 原始配置

        Returns:
            Dict[str, Any]: 清理后的配置
        """
        sensitive_keys = {'password', 'secret', 'token', 'credential', 'key', 'sns_topic_arn'}
        sensitive_suffixes = ('_key', '_secret', '_password', '_token')

        safe_config = {}
        for key, value in config.items():
            key_lower = key.lower()
            is_sensitive = key_lower in sensitive_keys or key_lower.endswith(sensitive_suffixes)

            if is_sensitive and isinstance(value, str) and value:
                if value.startswith('arn:'):
                    # ARN只保留服务、区域和资源名，隐藏账号
                    parts = value.split(':')
                    if len(parts) >= 6:
                        safe_value = f"{':'.join(parts[:4])}:***:{parts[-1]}"
                    else:
                        safe_value = "***"
                else:
                    safe_value = value[:3] + "***" if len(value) > 3 else "***"
                safe_config[key] = safe_value
            else:
                safe_config[key] = value

        return safe_config
