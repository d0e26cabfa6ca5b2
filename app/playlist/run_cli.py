"""
Playlist Ingest CLI 启动脚本
"""
import sys
import os

# 添加项目根目录到Python路径
root_dir = os.path.dirname(os.path.dirname(os.path.dirname(os.path.abspath(__file__))))
sys.path.insert(0, root_dir)

from app.playlist.cli.cli import main

if __name__ == "__main__":
    main()
