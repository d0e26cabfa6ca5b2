"""
Playlist Ingest CLI Module
命令行接口模块
"""

from .cli import PlaylistCLI

__all__ = ["PlaylistCLI"]
