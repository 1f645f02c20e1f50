"""
SNS通知服务测试
"""
import pytest
import os
from unittest.mock import patch, MagicMock
from datetime import datetime, timezone
from botocore.exceptions import ClientError, EndpointConnectionError
from moto import mock_aws

from certificate_expiry_checker.services.sns_notification import (
    SNSNotificationService,
    get_sns_client,
    region_from_topic_arn
)
from certificate_expiry_checker.services.error_handler import NotificationError
from certificate_expiry_checker.models import CertificateSnapshot


class TestSNSNotificationService:
    """SNS通知服务测试类"""

    def setup_method(self):
        """测试前准备"""
        self.topic_arn = "arn:aws:sns:us-east-1:123456789012:cert-alerts"
        self.snapshot = CertificateSnapshot(
            domain="example.com",
            not_after=datetime(2030, 1, 11, 12, 0, 0, tzinfo=timezone.utc),
            valid_to="Jan 11 12:00:00 2030 GMT",
            issuer="Test CA"
        )
        get_sns_client.cache_clear()

    def teardown_method(self):
        """测试后清理"""
        get_sns_client.cache_clear()

    def test_region_from_topic_arn(self):
        """测试从ARN中提取区域"""
        assert region_from_topic_arn(self.topic_arn) == "us-east-1"
        assert region_from_topic_arn("arn:aws:sns:eu-west-1:123456789012:t") == "eu-west-1"
        assert region_from_topic_arn("not-an-arn") is None
        assert region_from_topic_arn("") is None

    def test_init_region_from_arn(self):
        """测试区域自动检测"""
        service = SNSNotificationService(topic_arn=self.topic_arn, sns_client=MagicMock())

        assert service.region_name == "us-east-1"

    @patch.dict(os.environ, {'AWS_REGION': 'ap-southeast-2'})
    def test_init_region_from_env(self):
        """测试ARN无法解析时使用环境变量区域"""
        service = SNSNotificationService(topic_arn="topic", sns_client=MagicMock())

        assert service.region_name == "ap-southeast-2"

    def test_init_explicit_region(self):
        """测试显式指定区域"""
        service = SNSNotificationService(
            topic_arn=self.topic_arn, sns_client=MagicMock(), region_name="us-west-2"
        )

        assert service.region_name == "us-west-2"

    @patch('certificate_expiry_checker.services.sns_notification.boto3')
    def test_client_created_lazily_and_reused(self, mock_boto3):
        """测试客户端延迟创建并按区域复用"""
        first = SNSNotificationService(topic_arn=self.topic_arn)
        second = SNSNotificationService(topic_arn=self.topic_arn)

        mock_boto3.client.assert_not_called()

        assert first.sns_client is second.sns_client
        mock_boto3.client.assert_called_once_with('sns', region_name='us-east-1')

    def test_format_subject(self):
        """测试主题格式"""
        service = SNSNotificationService(topic_arn=self.topic_arn, sns_client=MagicMock())

        assert service.format_subject(self.snapshot) == "example.com Certificate Expiring Soon"

    def test_format_message(self):
        """测试通知内容格式"""
        service = SNSNotificationService(topic_arn=self.topic_arn, sns_client=MagicMock())

        assert service.format_message(self.snapshot, 10) == (
            "example.com certificate will expire in 10 days on Jan 11 12:00:00 2030 GMT."
        )

    def test_send_expiry_notification(self):
        """测试发送通知"""
        mock_client = MagicMock()
        mock_client.publish.return_value = {'MessageId': 'msg-123'}
        service = SNSNotificationService(topic_arn=self.topic_arn, sns_client=mock_client)

        message_id = service.send_expiry_notification(self.snapshot, 10)

        assert message_id == 'msg-123'
        mock_client.publish.assert_called_once_with(
            TopicArn=self.topic_arn,
            Subject="example.com Certificate Expiring Soon",
            Message="example.com certificate will expire in 10 days on Jan 11 12:00:00 2030 GMT."
        )

    def test_send_client_error(self):
        """测试SNS返回错误"""
        mock_client = MagicMock()
        mock_client.publish.side_effect = ClientError(
            {'Error': {'Code': 'AuthorizationError', 'Message': 'Not authorized'}},
            'Publish'
        )
        service = SNSNotificationService(topic_arn=self.topic_arn, sns_client=mock_client)

        with pytest.raises(NotificationError, match="AuthorizationError") as exc_info:
            service.send_expiry_notification(self.snapshot, 10)

        assert exc_info.value.topic_arn == self.topic_arn
        assert mock_client.publish.call_count == 1

    def test_send_botocore_error(self):
        """测试网络层错误"""
        mock_client = MagicMock()
        mock_client.publish.side_effect = EndpointConnectionError(
            endpoint_url="https://sns.us-east-1.amazonaws.com"
        )
        service = SNSNotificationService(topic_arn=self.topic_arn, sns_client=mock_client)

        with pytest.raises(NotificationError):
            service.send_expiry_notification(self.snapshot, 10)

    @mock_aws
    def test_send_with_moto(self):
        """测试通过moto发布到真实主题"""
        import boto3

        sns = boto3.client('sns', region_name='us-east-1')
        topic_arn = sns.create_topic(Name='cert-alerts')['TopicArn']

        service = SNSNotificationService(topic_arn=topic_arn)
        message_id = service.send_expiry_notification(self.snapshot, 10)

        assert message_id

    @mock_aws
    def test_send_to_missing_topic_with_moto(self):
        """测试主题不存在"""
        service = SNSNotificationService(
            topic_arn="arn:aws:sns:us-east-1:123456789012:does-not-exist"
        )

        with pytest.raises(NotificationError):
            service.send_expiry_notification(self.snapshot, 10)
