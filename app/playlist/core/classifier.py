"""
分类模块

根据分组名和标题中的关键词判断条目是点播影片还是直播频道。
这是尽力而为的启发式规则，并不核验内容本身，误判是可以接受的。
"""

from typing import Optional

from .models import MediaCategory


MOVIE_INDICATORS = frozenset({
    "movie", "movies", "film", "films", "cinema", "vod",
    "on demand", "series", "tv shows", "shows",
})


def contains_indicator(text: Optional[str]) -> bool:
    """文本（不区分大小写）是否包含任一点播关键词"""
    if not text:
        return False
    lowered = text.lower()
    return any(indicator in lowered for indicator in MOVIE_INDICATORS)


def is_movie_content(group_title: Optional[str], title: Optional[str]) -> bool:
    return contains_indicator(group_title) or contains_indicator(title)


def classify(group_title: Optional[str], title: Optional[str]) -> MediaCategory:
    """分组或标题命中关键词即为 MOVIES，否则为 TV_CHANNELS"""
    if is_movie_content(group_title, title):
        return MediaCategory.MOVIES
    return MediaCategory.TV_CHANNELS
