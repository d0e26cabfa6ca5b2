"""
分词模块
把原始播放列表文本切分为有序的 (元数据, URL) 单元，并记录按行号标注的错误
"""

import re
from dataclasses import dataclass, field
from enum import Enum
from typing import List, Optional, Tuple

from .errors import PlaylistFormatError
from .extractor import DIRECTIVE_PREFIX, ExtinfInfo, parse_extinf


LINE_BREAK_PATTERN = re.compile(r"\r\n|\r|\n")


class TokenizerState(Enum):
    """
    分词器状态

    AWAITING_DIRECTIVE: 没有待消费的元数据
    AWAITING_URL: 已有一条元数据，等待下一条 URL 行

    状态转移:
        AWAITING_DIRECTIVE --有效 #EXTINF--> AWAITING_URL
        AWAITING_URL --有效 #EXTINF--> AWAITING_URL（静默替换待消费的元数据）
        AWAITING_URL --URL 行--> AWAITING_DIRECTIVE（产出一个单元）
        AWAITING_DIRECTIVE --URL 行--> AWAITING_DIRECTIVE（记录错误，丢弃该行）
    无效的 #EXTINF 只记录错误，不改变状态；空行和其他 # 行在任何状态下都被忽略。
    """
    AWAITING_DIRECTIVE = "awaiting_directive"
    AWAITING_URL = "awaiting_url"


@dataclass
class PlaylistUnit:
    """一对元数据与播放地址"""
    metadata: ExtinfInfo
    url: str
    line_number: int


@dataclass
class TokenizeResult:
    units: List[PlaylistUnit] = field(default_factory=list)
    errors: List[PlaylistFormatError] = field(default_factory=list)


class PlaylistTokenizer:
    """两状态的播放列表分词器，每次 tokenize 调用使用独立的状态"""

    INVALID_DIRECTIVE = "invalid directive format"
    URL_WITHOUT_METADATA = "URL without metadata"

    def __init__(self):
        self.state = TokenizerState.AWAITING_DIRECTIVE
        self._pending: Optional[ExtinfInfo] = None

    def reset(self):
        self.state = TokenizerState.AWAITING_DIRECTIVE
        self._pending = None

    def tokenize(self, text: str) -> TokenizeResult:
        """
        切分文本

        Args:
            text: 播放列表文本

        Returns:
            TokenizeResult: 单元列表和格式错误列表（均按行号排序）
        """
        self.reset()
        result = TokenizeResult()

        for line_number, raw_line in enumerate(LINE_BREAK_PATTERN.split(text), start=1):
            line = raw_line.strip()
            if not line:
                continue

            if line.startswith(DIRECTIVE_PREFIX):
                self._on_directive(line, line_number, result)
            elif not line.startswith('#'):
                self._on_url(line, line_number, result)

        return result

    def _on_directive(self, line: str, line_number: int, result: TokenizeResult):
        metadata = parse_extinf(line, line_number)
        if metadata is None:
            result.errors.append(PlaylistFormatError(line_number, self.INVALID_DIRECTIVE))
            return

        self._pending = metadata
        self.state = TokenizerState.AWAITING_URL

    def _on_url(self, line: str, line_number: int, result: TokenizeResult):
        if self.state is TokenizerState.AWAITING_URL:
            result.units.append(PlaylistUnit(self._pending, line, line_number))
            self._pending = None
            self.state = TokenizerState.AWAITING_DIRECTIVE
        else:
            result.errors.append(PlaylistFormatError(line_number, self.URL_WITHOUT_METADATA))


def tokenize(text: str) -> Tuple[List[PlaylistUnit], List[PlaylistFormatError]]:
    """便捷函数：返回 (单元列表, 错误列表)"""
    result = PlaylistTokenizer().tokenize(text)
    return result.units, result.errors
