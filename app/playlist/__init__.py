"""
IPTV Playlist Ingest Package
M3U 播放列表获取与分类：带重试的下载、进度显示、频道/点播识别、逐行错误收集
"""

from .core.parser import M3UParser
from .core.service import PlaylistService
from .core.transport import HttpTransport
from .core.config import FetchConfig, ConfigTemplates
from .core.credentials import PlaylistCredentials, CredentialValidator
from .core.models import (
    MediaCategory,
    Channel,
    Movie,
    ParseResult,
    ContentData,
    Result
)

__version__ = "1.0.0"
__all__ = [
    # 基础功能
    "M3UParser",
    "PlaylistService",
    "HttpTransport",
    "FetchConfig",
    "ConfigTemplates",

    # 凭据
    "PlaylistCredentials",
    "CredentialValidator",

    # 数据模型
    "MediaCategory",
    "Channel",
    "Movie",
    "ParseResult",
    "ContentData",
    "Result"
]
