"""
M3U 解析模块
负责把播放列表文本解析为排好序的频道、点播列表和错误列表

解析是纯函数：没有 I/O，结果只取决于输入文本。
"""

from typing import List, Tuple

from .builder import build_record
from .errors import EntityValidationError
from .models import Channel, MediaCategory, Movie, ParseResult
from .tokenizer import PlaylistTokenizer


class M3UParser:
    """M3U / M3U-Plus 播放列表解析器"""

    def parse(self, content: str) -> ParseResult:
        """
        解析播放列表

        Args:
            content: 播放列表文本（可以以 #EXTM3U 开头）

        Returns:
            ParseResult: 频道按频道号升序（无频道号的排在最后，相同时保持输入顺序），
                         点播按标题升序，错误按行号排序
        """
        tokens = PlaylistTokenizer().tokenize(content or "")

        channels: List[Channel] = []
        movies: List[Movie] = []
        # (行号, 错误信息)
        errors: List[Tuple[int, str]] = [(e.line_number, str(e)) for e in tokens.errors]

        for unit in tokens.units:
            try:
                record = build_record(unit.metadata, unit.url)
            except (EntityValidationError, ValueError, OverflowError) as e:
                # 单个条目失败只记录错误，不影响其他条目
                errors.append((unit.line_number, f"line {unit.line_number}: invalid entry - {e}"))
                continue

            if record.category is MediaCategory.MOVIES:
                movies.append(record)
            else:
                channels.append(record)

        errors.sort(key=lambda item: item[0])

        return ParseResult(
            channels=self.sort_channels(channels),
            movies=self.sort_movies(movies),
            errors=[message for _, message in errors],
        )

    @staticmethod
    def sort_channels(channels: List[Channel]) -> List[Channel]:
        """按频道号升序，没有频道号的排在最后；sorted 是稳定排序"""
        return sorted(channels, key=lambda c: (c.number is None, c.number or 0))

    @staticmethod
    def sort_movies(movies: List[Movie]) -> List[Movie]:
        return sorted(movies, key=lambda m: m.title)


def parse(content: str) -> ParseResult:
    """便捷函数"""
    return M3UParser().parse(content)
