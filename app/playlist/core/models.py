"""
数据模型模块
频道、点播影片、解析结果以及服务调用结果
"""

import time
from dataclasses import dataclass, field
from enum import Enum
from typing import Any, List, Optional, Union

from .errors import FetchCancelledError


class MediaCategory(Enum):
    """媒体分类枚举，同时作为条目的类型标签"""
    TV_CHANNELS = "TV Channels"
    MOVIES = "Movies"

    @property
    def display_name(self) -> str:
        return self.value

    @classmethod
    def from_string(cls, value: str) -> Optional['MediaCategory']:
        """按名称查找（不区分大小写），找不到返回 None"""
        if not value:
            return None
        for member in cls:
            if member.name.lower() == value.strip().lower():
                return member
        return None


@dataclass
class Channel:
    """直播频道"""
    id: str
    name: str
    stream_url: str
    number: Optional[int] = None
    group_title: Optional[str] = None
    logo_url: Optional[str] = None
    category: MediaCategory = field(default=MediaCategory.TV_CHANNELS, init=False)

    @property
    def display_title(self) -> str:
        return self.name

    @property
    def display_subtitle(self) -> Optional[str]:
        if self.number is None:
            return None
        return f"Channel {self.number}"

    @property
    def image_url(self) -> Optional[str]:
        return self.logo_url

    @property
    def playback_url(self) -> str:
        return self.stream_url

    @property
    def formatted_name(self) -> str:
        """带频道号的显示名称，例如 "5. CNN" """
        if self.number is not None:
            return f"{self.number}. {self.name}"
        return self.name

    def is_valid(self) -> bool:
        """id、名称、播放地址都不能为空"""
        return bool(self.id.strip() and self.name.strip() and self.stream_url.strip())

    def to_dict(self):
        return {
            'category': self.category.name,
            'id': self.id,
            'name': self.name,
            'number': self.number,
            'group_title': self.group_title,
            'logo_url': self.logo_url,
            'stream_url': self.stream_url,
        }


@dataclass
class Movie:
    """点播影片 / 剧集"""
    id: str
    title: str
    stream_url: str
    description: Optional[str] = None
    poster_url: Optional[str] = None
    duration: Optional[int] = None  # 毫秒
    year: Optional[int] = None
    genre: Optional[str] = None
    category: MediaCategory = field(default=MediaCategory.MOVIES, init=False)

    @property
    def display_title(self) -> str:
        return self.title

    @property
    def display_subtitle(self) -> Optional[str]:
        if self.year is not None and self.genre:
            return f"{self.year} • {self.genre}"
        if self.year is not None:
            return str(self.year)
        return self.genre or None

    @property
    def image_url(self) -> Optional[str]:
        return self.poster_url

    @property
    def playback_url(self) -> str:
        return self.stream_url

    @property
    def formatted_duration(self) -> Optional[str]:
        """格式化时长，例如 "1h 30m"；不足一分钟返回 None"""
        if self.duration is None:
            return None
        hours = self.duration // 3600000
        minutes = (self.duration % 3600000) // 60000
        if hours > 0:
            return f"{hours}h {minutes}m"
        if minutes > 0:
            return f"{minutes}m"
        return None

    def is_valid(self) -> bool:
        return bool(self.id.strip() and self.title.strip() and self.stream_url.strip())

    def to_dict(self):
        return {
            'category': self.category.name,
            'id': self.id,
            'title': self.title,
            'description': self.description,
            'poster_url': self.poster_url,
            'stream_url': self.stream_url,
            'duration': self.duration,
            'year': self.year,
            'genre': self.genre,
        }


# 标签联合类型：按 category 分支，而不是按运行时类型
MediaRecord = Union[Channel, Movie]


@dataclass
class ParseResult:
    """一次解析的结果"""
    channels: List[Channel] = field(default_factory=list)
    movies: List[Movie] = field(default_factory=list)
    errors: List[str] = field(default_factory=list)


@dataclass
class ContentData:
    """获取并解析后的内容"""
    channels: List[Channel] = field(default_factory=list)
    movies: List[Movie] = field(default_factory=list)
    errors: List[str] = field(default_factory=list)

    @property
    def total_items(self) -> int:
        return len(self.channels) + len(self.movies)

    def to_dict(self):
        return {
            'channels': [c.to_dict() for c in self.channels],
            'movies': [m.to_dict() for m in self.movies],
            'total_items': self.total_items,
            'errors': list(self.errors),
        }


@dataclass
class ConnectionStatus:
    """连接状态"""
    is_connected: bool
    server_url: str
    last_checked: float = field(default_factory=time.time)
    error_message: Optional[str] = None


@dataclass
class Result:
    """
    显式的成功/失败结果

    所有对外的网络与服务操作都返回 Result，而不是抛出异常。
    """
    success: bool
    data: Any = None
    message: str = ""
    exception: Optional[BaseException] = None

    @classmethod
    def ok(cls, data: Any = None) -> 'Result':
        return cls(success=True, data=data)

    @classmethod
    def fail(cls, message: str, exception: Optional[BaseException] = None) -> 'Result':
        return cls(success=False, message=message, exception=exception)

    @property
    def cancelled(self) -> bool:
        """失败是否由取消引起"""
        return isinstance(self.exception, FetchCancelledError)
