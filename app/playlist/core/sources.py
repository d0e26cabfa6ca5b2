"""
播放列表来源模块
从 JSON 文件加载需要批量获取的播放列表来源
"""

import json
import os
from typing import Dict, List, Optional

from .credentials import PlaylistCredentials


class PlaylistSource:
    """一个播放列表来源：直接 URL 或服务器凭据"""

    def __init__(self, name: str, url: Optional[str] = None,
                 credentials: Optional[PlaylistCredentials] = None):
        if not url and credentials is None:
            raise ValueError(f"来源 {name!r} 必须提供 url 或 host/username/password")
        self.name = name
        self.url = url
        self.credentials = credentials

    def build_playlist_url(self) -> str:
        if self.url:
            return self.url
        return self.credentials.build_playlist_url()

    def is_valid(self) -> bool:
        if self.url:
            return True
        return self.credentials.is_valid()

    def to_dict(self) -> Dict:
        data = {'name': self.name}
        if self.url:
            data['url'] = self.url
        else:
            data['host'] = self.credentials.host
            data['username'] = self.credentials.username
            data['password'] = self.credentials.password
        return data

    def __repr__(self):
        target = self.url or repr(self.credentials)
        return f"PlaylistSource(name={self.name!r}, {target})"


class SourceLoader:
    """JSON 来源加载器"""

    @staticmethod
    def from_dict(item: Dict, index: int = 0) -> PlaylistSource:
        name = item.get('name') or f"source_{index + 1}"
        if item.get('url'):
            return PlaylistSource(name, url=item['url'])
        if all(item.get(key) for key in ('host', 'username', 'password')):
            credentials = PlaylistCredentials(
                host=item['host'],
                username=item['username'],
                password=item['password'],
            )
            return PlaylistSource(name, credentials=credentials)
        raise ValueError(f"来源 {name!r} 必须提供 url 或 host/username/password")

    @staticmethod
    def load_from_file(file_path: str) -> List[PlaylistSource]:
        """
        从JSON文件加载播放列表来源

        JSON格式示例:
        [
            {"name": "provider-a", "url": "http://example.com/playlist.m3u"},
            {
                "name": "provider-b",
                "host": "http://iptv.example.com:8080",
                "username": "user",
                "password": "secret"
            }
        ]

        Args:
            file_path: JSON文件路径

        Returns:
            List[PlaylistSource]: 来源列表
        """
        if not os.path.exists(file_path):
            raise FileNotFoundError(f"JSON文件不存在: {file_path}")

        with open(file_path, 'r', encoding='utf-8') as f:
            data = json.load(f)

        if not isinstance(data, list):
            raise ValueError("来源文件的顶层必须是列表")

        return [SourceLoader.from_dict(item, i) for i, item in enumerate(data)]

    @staticmethod
    def save_to_file(sources: List[PlaylistSource], file_path: str):
        """保存来源列表到JSON文件"""
        data = [source.to_dict() for source in sources]
        with open(file_path, 'w', encoding='utf-8') as f:
            json.dump(data, f, ensure_ascii=False, indent=2)
