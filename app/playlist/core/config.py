"""
配置模块
定义播放列表获取的各种配置参数
"""

from dataclasses import dataclass, field, fields
from typing import Optional, Dict


@dataclass
class FetchConfig:
    """获取配置类"""

    # 超时配置（秒）
    connect_timeout: int = 30
    read_timeout: int = 60

    # 重试配置
    max_retries: int = 3
    retry_delay: float = 1.0  # 线性退避的基础延迟

    # 读取配置
    chunk_size: int = 8192

    # 请求头配置
    headers: Dict[str, str] = field(default_factory=lambda: {
        'User-Agent': 'IPTV-Playlist/1.0',
        'Accept': '*/*',
    })

    # 并发配置
    max_workers: int = 4

    # 其他配置
    verify_ssl: bool = True
    show_progress: bool = True
    enable_logging: bool = True
    log_file: Optional[str] = None

    def __post_init__(self):
        """初始化后处理"""
        if self.max_retries < 1:
            raise ValueError("max_retries 必须至少为 1")
        if self.retry_delay < 0:
            raise ValueError("retry_delay 不能为负数")

    @property
    def timeout(self):
        """requests 使用的 (connect, read) 超时元组"""
        return (self.connect_timeout, self.read_timeout)

    def update_headers(self, extra_headers: Dict[str, str]):
        """更新请求头"""
        self.headers.update(extra_headers)

    def to_dict(self):
        """转换为字典"""
        return {
            'connect_timeout': self.connect_timeout,
            'read_timeout': self.read_timeout,
            'max_retries': self.max_retries,
            'retry_delay': self.retry_delay,
            'chunk_size': self.chunk_size,
            'headers': dict(self.headers),
            'max_workers': self.max_workers,
            'verify_ssl': self.verify_ssl,
            'show_progress': self.show_progress,
            'enable_logging': self.enable_logging,
            'log_file': self.log_file,
        }

    @classmethod
    def from_dict(cls, data: Dict) -> 'FetchConfig':
        """从字典创建配置，忽略未知的键"""
        known = {f.name for f in fields(cls)}
        return cls(**{k: v for k, v in data.items() if k in known})


# 预设配置模板
class ConfigTemplates:
    """配置模板"""

    @staticmethod
    def fast():
        """快速配置：短超时、少重试"""
        return FetchConfig(
            max_retries=1,
            retry_delay=0.5,
            connect_timeout=5,
            read_timeout=15,
            max_workers=8,
        )

    @staticmethod
    def stable():
        """稳定配置"""
        return FetchConfig(
            max_retries=5,
            retry_delay=2.0,
            connect_timeout=15,
            read_timeout=90,
        )

    @staticmethod
    def low_bandwidth():
        """低带宽配置"""
        return FetchConfig(
            max_retries=3,
            retry_delay=3.0,
            read_timeout=120,
            chunk_size=4096,
            max_workers=2,
        )

    @staticmethod
    def get(name: str) -> FetchConfig:
        """按名称获取模板，未知名称返回默认配置"""
        templates = {
            'fast': ConfigTemplates.fast,
            'stable': ConfigTemplates.stable,
            'low_bandwidth': ConfigTemplates.low_bandwidth,
        }
        factory = templates.get(name)
        return factory() if factory else FetchConfig()
