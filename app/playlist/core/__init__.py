"""
Playlist Ingest Core Module
核心获取与解析模块
"""

from .models import (
    MediaCategory,
    Channel,
    Movie,
    MediaRecord,
    ParseResult,
    ContentData,
    ConnectionStatus,
    Result
)
from .errors import (
    PlaylistError,
    NetworkError,
    FetchCancelledError,
    PlaylistFormatError,
    EntityValidationError,
    CredentialError
)
from .config import FetchConfig, ConfigTemplates
from .extractor import ExtinfInfo, parse_extinf
from .tokenizer import PlaylistTokenizer, PlaylistUnit, TokenizerState, tokenize
from .classifier import MOVIE_INDICATORS, classify
from .builder import build_record, generate_id, split_channel_number
from .parser import M3UParser, parse
from .transport import HttpTransport
from .credentials import PlaylistCredentials, CredentialValidator, ValidationResult
from .sources import PlaylistSource, SourceLoader
from .service import PlaylistService, filter_channels, filter_movies
from .progress import MonotonicProgress, ProgressBar
from .utils import (
    FileValidator,
    URLProcessor,
    RetryHandler,
    setup_logger,
    create_session,
    format_file_size,
    format_time,
    print_banner
)

__all__ = [
    # 数据模型
    "MediaCategory",
    "Channel",
    "Movie",
    "MediaRecord",
    "ParseResult",
    "ContentData",
    "ConnectionStatus",
    "Result",

    # 异常
    "PlaylistError",
    "NetworkError",
    "FetchCancelledError",
    "PlaylistFormatError",
    "EntityValidationError",
    "CredentialError",

    # 配置
    "FetchConfig",
    "ConfigTemplates",

    # 解析
    "ExtinfInfo",
    "parse_extinf",
    "PlaylistTokenizer",
    "PlaylistUnit",
    "TokenizerState",
    "tokenize",
    "MOVIE_INDICATORS",
    "classify",
    "build_record",
    "generate_id",
    "split_channel_number",
    "M3UParser",
    "parse",

    # 网络与服务
    "HttpTransport",
    "PlaylistCredentials",
    "CredentialValidator",
    "ValidationResult",
    "PlaylistSource",
    "SourceLoader",
    "PlaylistService",
    "filter_channels",
    "filter_movies",

    # 进度显示
    "MonotonicProgress",
    "ProgressBar",

    # 工具函数
    "FileValidator",
    "URLProcessor",
    "RetryHandler",
    "setup_logger",
    "create_session",
    "format_file_size",
    "format_time",
    "print_banner"
]
