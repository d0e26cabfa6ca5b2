"""
凭据模块
IPTV 服务器凭据、播放列表 URL 构建以及输入校验

凭据的加密存储不在本模块范围内，这里只负责构建 URL 和校验输入。
"""

import re
from dataclasses import dataclass
from typing import List, Optional
from urllib.parse import urlencode, urlparse

from .utils import URLProcessor


@dataclass
class PlaylistCredentials:
    """Xtream 风格的服务器凭据"""
    host: str
    username: str
    password: str

    def build_base_url(self) -> str:
        """构建基础 API URL"""
        clean_host = self.host.rstrip('/')
        query = urlencode({'username': self.username, 'password': self.password})
        return f"{clean_host}/get.php?{query}"

    def build_playlist_url(self) -> str:
        """构建 M3U-Plus 播放列表 URL"""
        return f"{self.build_base_url()}&type=m3u_plus&output=ts"

    def is_valid_host(self) -> bool:
        try:
            parsed = urlparse(self.host)
        except ValueError:
            return False
        return parsed.scheme in ('http', 'https') and bool(parsed.netloc)

    def is_valid(self) -> bool:
        """所有字段非空且主机地址有效"""
        return bool(
            self.host.strip()
            and self.username.strip()
            and self.password.strip()
            and self.is_valid_host()
        )

    def __repr__(self):
        return f"PlaylistCredentials(host={self.host!r}, username={self.username!r}, password='***')"


@dataclass
class ValidationResult:
    """校验结果"""
    is_valid: bool
    error_message: Optional[str] = None

    @classmethod
    def success(cls) -> 'ValidationResult':
        return cls(True)

    @classmethod
    def error(cls, message: str) -> 'ValidationResult':
        return cls(False, message)


class CredentialValidator:
    """凭据输入校验与清理"""

    HOST_PATTERN = re.compile(
        r'^(https?://)?'           # 协议（可选）
        r'([\w\-]+\.)*[\w\-]+'     # 域名
        r'(:\d+)?'                 # 端口（可选）
        r'(/.*)?$'                 # 路径（可选）
    )
    USERNAME_PATTERN = re.compile(r'^[a-zA-Z0-9._-]+$')

    @classmethod
    def validate_host(cls, host: str) -> ValidationResult:
        if not host or not host.strip():
            return ValidationResult.error("Host URL is required")

        trimmed = host.strip()
        if not cls.HOST_PATTERN.match(trimmed):
            return ValidationResult.error("Invalid URL format")

        parsed = urlparse(trimmed if trimmed.startswith('http') else f"http://{trimmed}")
        if parsed.scheme not in ('http', 'https'):
            return ValidationResult.error("Only HTTP and HTTPS protocols are supported")
        if not parsed.netloc:
            return ValidationResult.error("Invalid URL format")

        return ValidationResult.success()

    @classmethod
    def validate_username(cls, username: str) -> ValidationResult:
        username = username or ""
        if not username.strip():
            return ValidationResult.error("Username is required")
        if len(username) < 2:
            return ValidationResult.error("Username must be at least 2 characters")
        if len(username) > 50:
            return ValidationResult.error("Username must be less than 50 characters")
        if not cls.USERNAME_PATTERN.match(username):
            return ValidationResult.error(
                "Username can only contain letters, numbers, dots, underscores, and hyphens")
        return ValidationResult.success()

    @classmethod
    def validate_password(cls, password: str) -> ValidationResult:
        password = password or ""
        if not password.strip():
            return ValidationResult.error("Password is required")
        if len(password) < 3:
            return ValidationResult.error("Password must be at least 3 characters")
        if len(password) > 100:
            return ValidationResult.error("Password must be less than 100 characters")
        return ValidationResult.success()

    @classmethod
    def validate_credentials(cls, credentials: PlaylistCredentials) -> ValidationResult:
        """返回第一个校验失败的结果"""
        for result in (
            cls.validate_host(credentials.host),
            cls.validate_username(credentials.username),
            cls.validate_password(credentials.password),
        ):
            if not result.is_valid:
                return result
        return ValidationResult.success()

    @classmethod
    def validate_credentials_detailed(cls, credentials: PlaylistCredentials) -> List[str]:
        """返回全部校验错误"""
        checks = [
            ("Host", cls.validate_host(credentials.host)),
            ("Username", cls.validate_username(credentials.username)),
            ("Password", cls.validate_password(credentials.password)),
        ]
        return [f"{label}: {result.error_message}" for label, result in checks if not result.is_valid]

    @staticmethod
    def sanitize_host(host: str) -> str:
        """补全协议并去掉末尾的 /"""
        return URLProcessor.normalize_url(host)

    @staticmethod
    def sanitize_username(username: str) -> str:
        return username.strip()

    @staticmethod
    def sanitize_password(password: str) -> str:
        return password.strip()

    @classmethod
    def create_sanitized_credentials(cls, host: str, username: str, password: str) -> PlaylistCredentials:
        return PlaylistCredentials(
            host=cls.sanitize_host(host),
            username=cls.sanitize_username(username),
            password=cls.sanitize_password(password),
        )
