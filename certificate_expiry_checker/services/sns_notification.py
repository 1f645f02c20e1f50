"""
SNS通知服务
"""
import os
from functools import lru_cache
from typing import Optional
import logging

import boto3
from botocore.exceptions import BotoCoreError, ClientError

from ..interfaces import NotificationServiceInterface
from ..models import CertificateSnapshot
from .error_handler import NotificationError


@lru_cache(maxsize=None)
def get_sns_client(region_name: str):
    """按区域复用SNS客户端，Lambda热启动时无需重复创建"""
    return boto3.client('sns', region_name=region_name)


def region_from_topic_arn(topic_arn: str) -> Optional[str]:
    """从SNS ARN中提取区域"""
    if topic_arn and topic_arn.startswith('arn:') and ':sns:' in topic_arn:
        parts = topic_arn.split(':')
        if len(parts) >= 6 and parts[3]:
            return parts[3]
    return None


class SNSNotificationService(NotificationServiceInterface):
    """SNS通知服务实现"""

    def __init__(self, topic_arn: str, sns_client=None, region_name: Optional[str] = None):
        """
        初始化SNS通知服务

        Args:
            topic_arn: SNS主题ARN
            sns_client: 预先创建的SNS客户端，为None时按区域复用缓存客户端
            region_name: AWS区域名称，如果为None则从ARN或环境变量检测
        """
        self.topic_arn = topic_arn
        self.region_name = (
            region_name
            or region_from_topic_arn(topic_arn)
            or os.getenv('AWS_REGION', 'us-east-1')
        )
        self.logger = logging.getLogger(__name__)
        self._sns_client = sns_client

    @property
    def sns_client(self):
        if self._sns_client is None:
            self._sns_client = get_sns_client(self.region_name)
            self.logger.debug(f"SNS客户端初始化成功，区域: {self.region_name}")
        return self._sns_client

    def send_expiry_notification(self, snapshot: CertificateSnapshot, days_left: int) -> str:
        """
        发送证书即将过期通知

        Args:
            snapshot: 证书快照
            days_left: 剩余天数

        Returns:
            str: SNS返回的MessageId

        Raises:
            NotificationError: 发布失败
        """
        subject = self.format_subject(snapshot)
        message = self.format_message(snapshot, days_left)

        try:
            response = self.sns_client.publish(
                TopicArn=self.topic_arn,
                Subject=subject,
                Message=message
            )
        except ClientError as e:
            error_code = e.response['Error']['Code']
            error_message = e.response['Error']['Message']
            raise NotificationError(
                self.topic_arn, f"SNS发送失败 - {error_code}: {error_message}"
            ) from e
        except BotoCoreError as e:
            raise NotificationError(
                self.topic_arn, f"发送SNS通知时发生错误: {str(e)}"
            ) from e

        message_id = response.get('MessageId')
        self.logger.info(f"SNS通知发送成功，MessageId: {message_id}")
        return message_id

    def format_message(self, snapshot: CertificateSnapshot, days_left: int) -> str:
        return (
            f"{snapshot.domain} certificate will expire in {days_left} days "
            f"on {snapshot.valid_to}."
        )

    def format_subject(self, snapshot: CertificateSnapshot) -> str:
        return f"{snapshot.domain} Certificate Expiring Soon"
