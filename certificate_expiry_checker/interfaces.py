"""
服务接口定义
"""
from abc import ABC, abstractmethod
from .models import CertificateSnapshot


class CertificateFetcherInterface(ABC):
    """证书获取器接口"""
    
    @abstractmethod
    def fetch(self, domain: str) -> CertificateSnapshot:
        """获取域名的叶子证书"""
        pass


class NotificationServiceInterface(ABC):
    """通知服务接口"""
    
    @abstractmethod
    def send_expiry_notification(self, snapshot: CertificateSnapshot, days_left: int) -> str:
        """发送证书即将过期通知，返回消息ID"""
        pass
    
    @abstractmethod
    def format_message(self, snapshot: CertificateSnapshot, days_left: int) -> str:
        """格式化通知内容"""
        pass
