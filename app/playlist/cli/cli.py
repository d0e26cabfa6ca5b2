"""
命令行接口模块
获取 M3U 播放列表并输出频道/点播摘要
"""

import argparse
import json
import sys
import time
from typing import List, Optional

from ..core.config import FetchConfig, ConfigTemplates
from ..core.credentials import CredentialValidator
from ..core.models import ContentData
from ..core.progress import ProgressBar
from ..core.service import PlaylistService, filter_channels, filter_movies
from ..core.sources import SourceLoader
from ..core.utils import print_banner, format_time, FileValidator, URLProcessor


class PlaylistCLI:
    """播放列表命令行界面"""

    def __init__(self):
        self.service: Optional[PlaylistService] = None

    def build_parser(self) -> argparse.ArgumentParser:
        parser = argparse.ArgumentParser(
            description="IPTV Playlist Ingest - M3U 播放列表获取与分类",
            formatter_class=argparse.RawDescriptionHelpFormatter,
            epilog="""
使用示例:
  python -m app.playlist.cli.cli http://example.com/playlist.m3u
  python -m app.playlist.cli.cli --host http://iptv.example.com:8080 --username user --password secret
  python -m app.playlist.cli.cli --sources sources.json --profile stable
  python -m app.playlist.cli.cli http://example.com/playlist.m3u --search news --json
            """
        )

        # 来源参数
        parser.add_argument('url', nargs='?', help='播放列表URL')
        parser.add_argument('--host', help='服务器地址')
        parser.add_argument('--username', help='用户名')
        parser.add_argument('--password', help='密码')
        parser.add_argument('--sources', help='来源JSON文件（批量获取）')

        # 配置参数
        parser.add_argument('--profile', choices=['fast', 'stable', 'low_bandwidth'],
                            help='配置模板')
        parser.add_argument('--max-retries', type=int, help='最大尝试次数')
        parser.add_argument('--retry-delay', type=float, help='重试延迟(秒)')
        parser.add_argument('--connect-timeout', type=int, help='连接超时(秒)')
        parser.add_argument('--read-timeout', type=int, help='读取超时(秒)')
        parser.add_argument('--workers', type=int, help='批量获取的线程数')

        # 请求头参数
        parser.add_argument('--headers', help='自定义请求头 (JSON字符串或key=value格式)')
        parser.add_argument('--user-agent', help='自定义User-Agent')

        # 功能参数
        parser.add_argument('--no-ssl-verify', action='store_true', help='禁用SSL验证')
        parser.add_argument('--no-progress', action='store_true', help='禁用进度条')
        parser.add_argument('--no-logging', action='store_true', help='禁用日志')
        parser.add_argument('--log-file', help='日志文件路径')

        # 输出参数
        parser.add_argument('--search', help='按名称/标题搜索')
        parser.add_argument('--limit', type=int, default=20, help='每类最多显示的条目数')
        parser.add_argument('--show-errors', action='store_true', help='显示解析错误')
        parser.add_argument('--json', action='store_true', help='以JSON输出结果')
        parser.add_argument('--dry-run', action='store_true', help='试运行，不实际请求')

        return parser

    def parse_arguments(self, argv: Optional[List[str]] = None):
        """解析命令行参数"""
        return self.build_parser().parse_args(argv)

    def create_config_from_args(self, args) -> FetchConfig:
        """从参数创建配置"""
        config = ConfigTemplates.get(args.profile) if args.profile else FetchConfig()

        if args.max_retries is not None:
            config.max_retries = max(1, args.max_retries)
        if args.retry_delay is not None:
            config.retry_delay = args.retry_delay
        if args.connect_timeout:
            config.connect_timeout = args.connect_timeout
        if args.read_timeout:
            config.read_timeout = args.read_timeout
        if args.workers:
            config.max_workers = args.workers
        if args.no_ssl_verify:
            config.verify_ssl = False
        if args.no_progress or args.json:
            config.show_progress = False
        if args.no_logging:
            config.enable_logging = False
        if args.log_file:
            config.log_file = args.log_file

        if args.headers:
            self._parse_headers(config, args.headers)
        if args.user_agent:
            config.headers['User-Agent'] = args.user_agent

        return config

    def _parse_headers(self, config: FetchConfig, headers_str: str):
        """解析请求头字符串"""
        headers_str = headers_str.strip()

        # 尝试解析JSON
        if headers_str.startswith('{'):
            try:
                config.update_headers(json.loads(headers_str))
                return
            except json.JSONDecodeError:
                pass

        # 解析key=value格式
        headers = {}
        for part in headers_str.split(','):
            if '=' in part:
                key, value = part.split('=', 1)
                headers[key.strip()] = value.strip()

        config.update_headers(headers)

    def resolve_target(self, args):
        """
        根据参数得到 url_builder

        Returns:
            URL 字符串或凭据对象；参数无效时打印原因并返回 None
        """
        if args.host or args.username or args.password:
            credentials = CredentialValidator.create_sanitized_credentials(
                args.host or "", args.username or "", args.password or "")
            problems = CredentialValidator.validate_credentials_detailed(credentials)
            if problems:
                for problem in problems:
                    print(f"❌ {problem}")
                return None
            return credentials

        if not args.url:
            print("错误: 请提供URL、--host/--username/--password 或 --sources")
            print("使用 --help 查看帮助")
            return None

        url = URLProcessor.normalize_url(args.url)
        if not FileValidator.validate_url(url):
            print(f"❌ URL格式无效: {args.url}")
            return None
        return url

    def _print_content(self, content: ContentData, args):
        channels = content.channels
        movies = content.movies
        if args.search:
            channels = filter_channels(channels, args.search)
            movies = filter_movies(movies, args.search)

        if args.json:
            data = content.to_dict()
            data['channels'] = [c.to_dict() for c in channels]
            data['movies'] = [m.to_dict() for m in movies]
            print(json.dumps(data, ensure_ascii=False, indent=2))
            return

        print(f"\n频道: {len(content.channels)}, 点播: {len(content.movies)}, 共 {content.total_items} 项")
        if args.search:
            print(f"搜索 \"{args.search}\": {len(channels)} 个频道, {len(movies)} 个点播")

        if channels:
            print("\n📺 频道:")
            for channel in channels[:args.limit]:
                group = f"  [{channel.group_title}]" if channel.group_title else ""
                print(f"  {channel.formatted_name}{group}")
            if len(channels) > args.limit:
                print(f"  ... 还有 {len(channels) - args.limit} 个")

        if movies:
            print("\n🎬 点播:")
            for movie in movies[:args.limit]:
                duration = f"  ({movie.formatted_duration})" if movie.formatted_duration else ""
                print(f"  {movie.title}{duration}")
            if len(movies) > args.limit:
                print(f"  ... 还有 {len(movies) - args.limit} 个")

        if content.errors:
            if args.show_errors:
                print(f"\n⚠️  解析错误 ({len(content.errors)}):")
                for error in content.errors:
                    print(f"  {error}")
            else:
                print(f"\n⚠️  {len(content.errors)} 行解析失败（使用 --show-errors 查看）")

    def _ingest_single(self, target, config: FetchConfig, args) -> bool:
        start = time.time()
        with ProgressBar(enabled=config.show_progress) as bar:
            result = self.service.ingest(target, on_progress=bar)

        if not result.success:
            print(f"\n❌ {result.message}")
            return False

        if not args.json:
            print(f"\n✅ 获取完成，用时 {format_time(time.time() - start)}")
        self._print_content(result.data, args)
        return True

    def _ingest_batch(self, sources_file: str, config: FetchConfig, args) -> bool:
        try:
            sources = SourceLoader.load_from_file(sources_file)
        except (OSError, ValueError) as e:
            print(f"❌ 无法加载来源文件: {e}")
            return False

        results = self.service.ingest_many(sources)
        all_ok = all(result.success for _, result in results)

        # 来源名称可能重复，输出保持列表形式
        if args.json:
            summary = []
            for source, result in results:
                item = {'name': source.name}
                if result.success:
                    item.update(result.data.to_dict())
                else:
                    item['error'] = result.message
                summary.append(item)
            print(json.dumps(summary, ensure_ascii=False, indent=2))
            return all_ok

        for source, result in results:
            if result.success:
                content = result.data
                print(f"✅ {source.name}: {len(content.channels)} 个频道, {len(content.movies)} 个点播, "
                      f"{len(content.errors)} 个错误")
            else:
                print(f"❌ {source.name}: {result.message}")
        return all_ok

    def run(self, argv: Optional[List[str]] = None) -> bool:
        """主运行函数"""
        args = self.parse_arguments(argv)
        config = self.create_config_from_args(args)

        if not args.json:
            print_banner()

        target = None
        if not args.sources:
            target = self.resolve_target(args)
            if target is None:
                return False

        # 试运行模式
        if args.dry_run:
            print("试运行模式:")
            print(f"  来源: {args.sources or target!r}")
            print(f"  配置: {config.to_dict()}")
            return True

        self.service = PlaylistService(config)

        try:
            if args.sources:
                return self._ingest_batch(args.sources, config, args)
            return self._ingest_single(target, config, args)
        except KeyboardInterrupt:
            print("\n\n获取被用户中断")
            return False


def main():
    """主入口"""
    cli = PlaylistCLI()
    success = cli.run()
    sys.exit(0 if success else 1)


if __name__ == '__main__':
    main()
