"""
#EXTINF 元数据提取模块

一行 #EXTINF 指令的格式::

    #EXTINF:<时长>[,]<信息>

<时长> 为秒数，可带符号和小数，<= 0 表示未知或直播。
<信息> 中可以出现 key="value" 形式的属性，其余部分即为标题。

已知限制：属性值中的转义引号（\\"）不被支持，值在第一个引号处结束。
"""

import re
from dataclasses import dataclass, field
from typing import Dict, Optional


DIRECTIVE_PREFIX = '#EXTINF:'

EXTINF_PATTERN = re.compile(r'^#EXTINF:([+-]?\d+(?:\.\d+)?),?(.*)$')

# 只识别这四个属性；重复出现时以最后一次为准
ATTRIBUTE_KEYS = ('tvg-id', 'tvg-name', 'tvg-logo', 'group-title')
ATTRIBUTE_PATTERN = re.compile(
    r'(' + '|'.join(re.escape(key) for key in ATTRIBUTE_KEYS) + r')="([^"]*)"'
)

WHITESPACE_PATTERN = re.compile(r'\s+')


@dataclass
class ExtinfInfo:
    """一行 #EXTINF 解析出的元数据"""
    duration: float
    title: str
    attributes: Dict[str, str] = field(default_factory=dict)
    line_number: int = 0

    @property
    def tvg_id(self) -> Optional[str]:
        return self.attributes.get('tvg-id')

    @property
    def tvg_name(self) -> Optional[str]:
        return self.attributes.get('tvg-name')

    @property
    def tvg_logo(self) -> Optional[str]:
        return self.attributes.get('tvg-logo')

    @property
    def group_title(self) -> Optional[str]:
        return self.attributes.get('group-title')

    @property
    def is_live(self) -> bool:
        """时长 <= 0 约定为直播/未知时长"""
        return self.duration <= 0


def extract_attributes(info: str) -> Dict[str, str]:
    """扫描 key="value" 属性，后出现的覆盖先出现的"""
    attributes = {}
    for match in ATTRIBUTE_PATTERN.finditer(info):
        attributes[match.group(1)] = match.group(2)
    return attributes


def extract_title(info: str) -> str:
    """
    去掉所有已识别的属性后得到标题

    空白被折叠为单个空格并去掉首尾空白；属性段之后用于分隔标题的逗号也会去掉。
    """
    title = ATTRIBUTE_PATTERN.sub('', info)
    title = WHITESPACE_PATTERN.sub(' ', title).strip()
    if title.startswith(','):
        title = title[1:].strip()
    return title


def parse_extinf(line: str, line_number: int = 0) -> Optional[ExtinfInfo]:
    """
    解析一行 #EXTINF 指令

    Args:
        line: 已去掉首尾空白的行
        line_number: 源文件中的行号（从 1 开始）

    Returns:
        Optional[ExtinfInfo]: 不符合最小格式 "#EXTINF:<数字>" 时返回 None
    """
    match = EXTINF_PATTERN.match(line)
    if not match:
        return None

    info = match.group(2) or ""

    return ExtinfInfo(
        duration=float(match.group(1)),
        title=extract_title(info),
        attributes=extract_attributes(info),
        line_number=line_number,
    )
