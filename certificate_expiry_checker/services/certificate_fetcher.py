"""
证书获取服务
"""
import ssl
import socket
from datetime import datetime
from typing import Optional
import logging

from cryptography import x509
from cryptography.x509.oid import NameOID

from ..interfaces import CertificateFetcherInterface
from ..models import CertificateSnapshot
from .error_handler import ConnectionErrorHandler


class CertificateFetcher(CertificateFetcherInterface):
    """通过TLS握手读取叶子证书，不校验证书链"""

    def __init__(self, port: int = 443, timeout: Optional[float] = None):
        """
        初始化证书获取器

        Args:
            port: SSL端口，默认443
            timeout: 连接超时时间（秒），None 表示使用系统默认值
        """
        self.port = port
        self.timeout = timeout
        self.logger = logging.getLogger(__name__)
        self.error_handler = ConnectionErrorHandler()

    def fetch(self, domain: str) -> CertificateSnapshot:
        """
        获取域名的证书快照

        Args:
            domain: 要检查的域名

        Returns:
            CertificateSnapshot: 证书快照

        Raises:
            CertificateFetchError: 域名无法解析、握手失败、未返回证书或证书无法解析
        """
        try:
            der_cert = self._get_peer_certificate(domain)
        except (OSError, ValueError) as e:
            # IDNA编码失败（如空标签或超长标签）会抛出 UnicodeError
            raise self.error_handler.handle_ssl_connection_error(domain, e) from e

        if not der_cert:
            raise self.error_handler.handle_ssl_connection_error(
                domain, ssl.SSLError(f"{domain} 未返回证书")
            )

        try:
            cert = x509.load_der_x509_certificate(der_cert)
            not_after = cert.not_valid_after_utc
        except ValueError as e:
            raise self.error_handler.handle_ssl_connection_error(domain, e) from e

        snapshot = CertificateSnapshot(
            domain=domain,
            not_after=not_after,
            valid_to=self.format_valid_to(not_after),
            issuer=self._parse_issuer(cert),
            subject=cert.subject.rfc4514_string()
        )
        self.logger.debug(f"域名 {domain} 证书过期时间: {snapshot.valid_to}, 颁发者: {snapshot.issuer}")
        return snapshot

    def _create_context(self) -> ssl.SSLContext:
        # 只读取证书元数据，不做信任校验
        context = ssl.create_default_context()
        context.check_hostname = False
        context.verify_mode = ssl.CERT_NONE
        return context

    def _get_peer_certificate(self, domain: str) -> Optional[bytes]:
        """
        建立TLS连接并返回DER格式的叶子证书

        Args:
            domain: 域名

        Returns:
            Optional[bytes]: DER编码证书
        """
        context = self._create_context()

        with socket.create_connection((domain, self.port), timeout=self.timeout) as sock:
            with context.wrap_socket(sock, server_hostname=domain) as ssock:
                return ssock.getpeercert(binary_form=True)

    def _parse_issuer(self, cert: x509.Certificate) -> str:
        """
        解析证书颁发者

        Args:
            cert: X.509证书

        Returns:
            str: 证书颁发者
        """
        for oid in (NameOID.ORGANIZATION_NAME, NameOID.COMMON_NAME):
            attributes = cert.issuer.get_attributes_for_oid(oid)
            if attributes:
                return str(attributes[0].value)

        return "Unknown Issuer"

    @staticmethod
    def format_valid_to(not_after: datetime) -> str:
        """按 OpenSSL notAfter 格式输出，如 'Dec  1 23:59:59 2024 GMT'"""
        return f"{not_after:%b} {not_after.day:2d} {not_after:%H:%M:%S %Y} GMT"
