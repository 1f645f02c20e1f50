"""
运行配置解析服务
"""
import os
import re
from dataclasses import dataclass
from typing import Mapping, Optional
import logging

from .error_handler import ConfigurationError


DOMAIN_NAME_VAR = "DOMAIN_NAME"
SNS_TOPIC_ARN_VAR = "SNS_TOPIC_ARN"
DAYS_BUFFER_VAR = "DAYS_BUFFER"


@dataclass(frozen=True)
class CheckerConfig:
    """证书检查配置"""
    domain_name: str
    sns_topic_arn: str
    days_buffer: int
    log_level: str = "INFO"
    aws_region: Optional[str] = None


class ConfigLoader:
    """从环境变量解析配置"""

    def __init__(self, environ: Optional[Mapping[str, str]] = None):
        """
        初始化配置解析器

        Args:
            environ: 环境变量映射，默认为 os.environ
        """
        self.environ = os.environ if environ is None else environ
        self.logger = logging.getLogger(__name__)

        # 只接受十进制整数，可带负号
        self.days_buffer_pattern = re.compile(r'-?[0-9]+')

    def load(self) -> CheckerConfig:
        """
        解析并校验所有必需配置

        Returns:
            CheckerConfig: 配置对象

        Raises:
            ConfigurationError: 缺少必需变量或 DAYS_BUFFER 不是整数
        """
        domain_name = self._clean_domain(self._require(DOMAIN_NAME_VAR))
        if not domain_name:
            raise ConfigurationError(DOMAIN_NAME_VAR, f"{DOMAIN_NAME_VAR} not defined.")

        sns_topic_arn = self._require(SNS_TOPIC_ARN_VAR)
        days_buffer = self._parse_days_buffer(self._require(DAYS_BUFFER_VAR))

        return CheckerConfig(
            domain_name=domain_name,
            sns_topic_arn=sns_topic_arn,
            days_buffer=days_buffer,
            log_level=self._get("LOG_LEVEL") or "INFO",
            aws_region=self._get("AWS_REGION")
        )

    def _get(self, name: str) -> Optional[str]:
        value = (self.environ.get(name) or "").strip()
        return value or None

    def _require(self, name: str) -> str:
        value = self._get(name)
        if value is None:
            raise ConfigurationError(name, f"{name} not defined.")
        return value

    def _parse_days_buffer(self, raw: str) -> int:
        if not self.days_buffer_pattern.fullmatch(raw):
            raise ConfigurationError(
                DAYS_BUFFER_VAR,
                f"{DAYS_BUFFER_VAR} must be an integer, got {raw!r}."
            )
        return int(raw)

    def _clean_domain(self, domain: str) -> str:
        """
        清理域名格式，保留原有大小写

        Args:
            domain: 原始域名

        Returns:
            str: 去掉协议、路径和端口后的域名
        """
        # 移除协议前缀
        if domain.startswith('https://'):
            domain = domain[8:]
        elif domain.startswith('http://'):
            domain = domain[7:]

        # 移除路径部分
        if '/' in domain:
            domain = domain.split('/')[0]

        # 移除端口号
        if ':' in domain:
            domain = domain.split(':')[0]

        return domain.strip()


def load_config(environ: Optional[Mapping[str, str]] = None) -> CheckerConfig:
    """解析运行配置"""
    return ConfigLoader(environ).load()
