"""
条目构建模块
由一对 (元数据, URL) 构建最终的 Channel 或 Movie，并校验必填字段
"""

import math
import re
from typing import Optional, Tuple

from .classifier import classify
from .errors import EntityValidationError
from .extractor import ExtinfInfo
from .models import Channel, MediaCategory, MediaRecord, Movie


# "<数字><空格或点><其余>"，例如 "101. ESPN"
CHANNEL_NUMBER_PATTERN = re.compile(r'^(\d+)[.\s]+(.+)$')

SLUG_PATTERN = re.compile(r'[^a-z0-9]+')
MAX_ID_LENGTH = 50


def split_channel_number(title: str) -> Tuple[Optional[int], str]:
    """
    拆分频道号与名称

    "101. ESPN" -> (101, "ESPN")；没有前导数字时返回 (None, 原标题)
    """
    match = CHANNEL_NUMBER_PATTERN.match(title.strip())
    if not match:
        return None, title
    try:
        number = int(match.group(1))
    except ValueError:
        # 超出 int 的字符串转换上限
        return None, title
    return number, match.group(2).strip()


def generate_id(title: str) -> str:
    """由标题生成 id：小写、非 [a-z0-9] 的连续字符替换为 _、去掉首尾 _、截断到 50 个字符"""
    slug = SLUG_PATTERN.sub('_', title.lower()).strip('_')
    return slug[:MAX_ID_LENGTH]


def resolve_id(metadata: ExtinfInfo) -> str:
    if metadata.tvg_id and metadata.tvg_id.strip():
        return metadata.tvg_id
    return generate_id(metadata.title)


def duration_to_millis(seconds: float) -> Optional[int]:
    """秒转毫秒；<= 0 或溢出为无穷大时返回 None"""
    millis = seconds * 1000
    if seconds > 0 and math.isfinite(millis):
        return int(round(millis))
    return None


def build_channel(metadata: ExtinfInfo, stream_url: str) -> Channel:
    number, name = split_channel_number(metadata.title)
    return Channel(
        id=resolve_id(metadata),
        name=name,
        number=number,
        group_title=metadata.group_title,
        logo_url=metadata.tvg_logo,
        stream_url=stream_url,
    )


def build_movie(metadata: ExtinfInfo, stream_url: str) -> Movie:
    return Movie(
        id=resolve_id(metadata),
        title=metadata.title,
        description=metadata.group_title,
        poster_url=metadata.tvg_logo,
        stream_url=stream_url,
        duration=duration_to_millis(metadata.duration),
    )


def validate_record(record: MediaRecord):
    """缺少 id、显示名称或播放地址时抛出 EntityValidationError"""
    if not record.id.strip():
        raise EntityValidationError("missing id")
    if not record.display_title.strip():
        field_name = "name" if record.category is MediaCategory.TV_CHANNELS else "title"
        raise EntityValidationError(f"missing {field_name}")
    if not record.stream_url.strip():
        raise EntityValidationError("missing stream URL")


def build_record(metadata: ExtinfInfo, stream_url: str) -> MediaRecord:
    """
    分类并构建条目

    Args:
        metadata: #EXTINF 元数据
        stream_url: 播放地址

    Returns:
        MediaRecord: Channel 或 Movie

    Raises:
        EntityValidationError: 必填字段缺失，条目不应被输出
    """
    category = classify(metadata.group_title, metadata.title)
    if category is MediaCategory.MOVIES:
        record = build_movie(metadata, stream_url)
    else:
        record = build_channel(metadata, stream_url)

    validate_record(record)
    return record
