"""
AWS Lambda函数入口点
"""
import asyncio
import os
from datetime import datetime, timezone
from typing import Any, Dict, Optional

from .interfaces import CertificateFetcherInterface, NotificationServiceInterface
from .models import CheckOutcome
from .services.config import CheckerConfig, load_config
from .services.certificate_fetcher import CertificateFetcher
from .services.error_handler import CertificateFetchError, ConfigurationError, NotificationError
from .services.expiry_calculator import ExpiryCalculator
from .services.logger import LoggerService
from .services.sns_notification import SNSNotificationService


class CertificateExpiryCheck:
    """证书过期检查：获取、比较、通知"""

    def __init__(
        self,
        config: CheckerConfig,
        notification_service: NotificationServiceInterface,
        certificate_fetcher: Optional[CertificateFetcherInterface] = None,
        expiry_calculator: Optional[ExpiryCalculator] = None,
        logger_service: Optional[LoggerService] = None
    ):
        """
        初始化检查器

        Args:
            config: 已校验的运行配置
            notification_service: 通知服务
            certificate_fetcher: 证书获取器，默认使用 CertificateFetcher
            expiry_calculator: 过期计算器，默认按配置阈值创建
            logger_service: 日志服务
        """
        self.config = config
        self.notification_service = notification_service
        self.certificate_fetcher = certificate_fetcher or CertificateFetcher()
        self.expiry_calculator = expiry_calculator or ExpiryCalculator(config.days_buffer)
        self.logger_service = logger_service or LoggerService(log_level=config.log_level)

    async def run(self, now: Optional[datetime] = None) -> CheckOutcome:
        """
        执行一次证书检查

        Args:
            now: 当前时间，默认为UTC当前时间

        Returns:
            CheckOutcome: 检查结果

        Raises:
            CertificateFetchError: 无法获取证书
        """
        domain = self.config.domain_name
        self.logger_service.log_check_start(domain, self.config.days_buffer)

        try:
            snapshot = await asyncio.to_thread(self.certificate_fetcher.fetch, domain)
        except CertificateFetchError as e:
            self.logger_service.log_error(domain, e)
            raise

        days_left = self.expiry_calculator.calculate_days_until_expiry(
            snapshot.not_after, now or datetime.now(timezone.utc)
        )
        self.logger_service.log_certificate_info(snapshot, days_left)

        outcome = CheckOutcome(
            domain=domain,
            days_left=days_left,
            days_buffer=self.config.days_buffer,
            notified=False
        )

        if not self.expiry_calculator.should_notify(days_left):
            self.logger_service.log_skip(self.expiry_calculator.describe(domain, days_left))
            self.logger_service.log_check_end(outcome)
            return outcome

        try:
            outcome.message_id = await asyncio.to_thread(
                self.notification_service.send_expiry_notification, snapshot, days_left
            )
            outcome.notified = True
            self.logger_service.log_notification_sent(domain, outcome.message_id)
        except NotificationError as e:
            # 通知失败不影响检查本身
            self.logger_service.log_notification_failed(domain, e)

        self.logger_service.log_check_end(outcome)
        return outcome


def build_check(
    config: CheckerConfig,
    sns_client=None,
    logger_service: Optional[LoggerService] = None
) -> CertificateExpiryCheck:
    """
    按配置组装检查器

    Args:
        config: 运行配置
        sns_client: 可选的SNS客户端，测试时可替换
        logger_service: 日志服务
    """
    notification_service = SNSNotificationService(
        topic_arn=config.sns_topic_arn,
        sns_client=sns_client,
        region_name=config.aws_region
    )
    return CertificateExpiryCheck(
        config=config,
        notification_service=notification_service,
        logger_service=logger_service
    )


async def main() -> None:
    """解析配置并执行一次检查，配置缺失或证书获取失败时抛出异常"""
    logger_service = LoggerService()

    try:
        config = load_config()
    except ConfigurationError as e:
        logger_service.logger.error(f"配置错误: {str(e)}")
        raise

    logger_service.log_configuration_info({
        'domain_name': config.domain_name,
        'sns_topic_arn': config.sns_topic_arn,
        'days_buffer': config.days_buffer,
        'log_level': config.log_level,
        'lambda_function_name': os.getenv('AWS_LAMBDA_FUNCTION_NAME', 'unknown')
    })

    check = build_check(config, logger_service=logger_service)
    await check.run()


def lambda_handler(event: Dict[str, Any], context: Any) -> None:
    """
    Lambda函数入口点

    Args:
        event: EventBridge触发事件（未使用）
        context: Lambda运行时上下文
    """
    asyncio.run(main())
