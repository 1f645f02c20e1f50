"""
错误定义与处理服务
"""
import socket
import ssl
from datetime import datetime, timezone
from typing import Any, Dict
import logging


class CertificateCheckError(Exception):
    """证书检查相关错误的基类"""


class ConfigurationError(CertificateCheckError):
    """必需配置缺失或无效"""

    def __init__(self, variable: str, message: str):
        self.variable = variable
        super().__init__(message)


class CertificateFetchError(CertificateCheckError, ConnectionError):
    """无法完成TLS握手或读取证书"""

    def __init__(self, domain: str, message: str, suggested_action: str = ""):
        self.domain = domain
        self.suggested_action = suggested_action
        super().__init__(message)


class NotificationError(CertificateCheckError):
    """SNS通知发布失败"""

    def __init__(self, topic_arn: str, message: str):
        self.topic_arn = topic_arn
        super().__init__(message)


def describe_connection_error(error: Exception) -> str:
    """
    获取连接错误的建议处理方案

    Args:
        error: 异常对象

    Returns:
        str: 建议的处理方案
    """
    error_message = str(error).lower()

    if isinstance(error, socket.timeout):
        return "检查网络连接，考虑增加超时时间"
    elif isinstance(error, socket.gaierror):
        return "检查域名是否正确，DNS服务器是否可用"
    elif isinstance(error, ConnectionRefusedError):
        return "检查目标服务器是否运行，端口是否正确"
    elif isinstance(error, ssl.SSLError):
        if 'handshake failure' in error_message:
            return "SSL握手失败，检查SSL/TLS版本兼容性"
        return "SSL连接问题，检查服务器SSL配置"
    elif isinstance(error, UnicodeError):
        return "域名格式无效，检查是否包含空标签或超长标签"
    elif isinstance(error, ValueError):
        return "服务器返回的证书无法解析，检查服务器证书配置"
    elif 'network is unreachable' in error_message:
        return "网络不可达，检查网络连接和路由"
    elif 'no route to host' in error_message:
        return "无法路由到主机，检查防火墙和网络配置"
    return "检查网络连接和服务器状态"


class ConnectionErrorHandler:
    """TLS连接错误处理器（不重试）"""

    def __init__(self):
        self.logger = logging.getLogger(__name__)

    def handle_ssl_connection_error(self, domain: str, error: Exception) -> CertificateFetchError:
        """
        记录SSL连接错误并转换为 CertificateFetchError

        Args:
            domain: 域名
            error: 原始异常

        Returns:
            CertificateFetchError: 供调用方抛出的错误
        """
        error_info = self.build_error_info(domain, error)

        self.logger.error(
            f"域名 {domain} SSL连接错误 - {error_info['error_type']}: {error_info['error_message']}，"
            f"建议: {error_info['suggested_action']}"
        )

        return CertificateFetchError(
            domain,
            f"无法获取域名 {domain} 的证书: {error_info['error_type']}: {error_info['error_message']}",
            suggested_action=error_info['suggested_action']
        )

    def build_error_info(self, domain: str, error: Exception) -> Dict[str, Any]:
        """构建错误信息字典"""
        return {
            'domain': domain,
            'error_type': type(error).__name__,
            'error_message': str(error),
            'timestamp': datetime.now(timezone.utc).isoformat(),
            'suggested_action': describe_connection_error(error)
        }
