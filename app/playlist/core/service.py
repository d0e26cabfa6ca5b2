"""
服务模块
把传输、解析组合为完整的获取流程，并提供连接测试、筛选和搜索等操作
"""

import threading
from concurrent.futures import ThreadPoolExecutor, as_completed
from typing import Any, Callable, List, Optional, Tuple

from .config import FetchConfig
from .credentials import PlaylistCredentials
from .errors import CredentialError, FetchCancelledError
from .models import Channel, ConnectionStatus, ContentData, Movie, Result
from .parser import M3UParser
from .progress import MonotonicProgress, ProgressCallback
from .transport import HttpTransport
from .utils import FileValidator, URLProcessor, setup_logger


# 总进度的分段：开始、下载结束（开始解析）、完成
PROGRESS_START = 0.1
PROGRESS_PARSE = 0.8


def filter_channels(channels: List[Channel], query: str) -> List[Channel]:
    """按名称、频道号或分组搜索频道（不区分大小写）"""
    needle = query.strip().lower()
    return [
        c for c in channels
        if needle in c.name.lower()
        or (c.number is not None and needle in str(c.number))
        or (c.group_title is not None and needle in c.group_title.lower())
    ]


def filter_movies(movies: List[Movie], query: str) -> List[Movie]:
    """按标题、描述或类型搜索点播"""
    needle = query.strip().lower()
    return [
        m for m in movies
        if needle in m.title.lower()
        or (m.description is not None and needle in m.description.lower())
        or (m.genre is not None and needle in m.genre.lower())
    ]


class PlaylistService:
    """
    播放列表服务

    每次 ingest 调用都会新建一个 HttpTransport（独立的会话）并在结束时关闭，
    调用之间不共享可变状态，可以在多个线程中并发使用同一个服务实例。
    """

    def __init__(self, config: FetchConfig = None,
                 transport_factory: Optional[Callable[[], HttpTransport]] = None):
        self.config = config or FetchConfig()

        self.logger = None
        if self.config.enable_logging:
            self.logger = setup_logger(__name__, self.config.log_file)

        self.parser = M3UParser()
        self._transport_factory = transport_factory or self._default_transport

    def _default_transport(self) -> HttpTransport:
        return HttpTransport(self.config, self.logger)

    def resolve_playlist_url(self, url_builder) -> str:
        """
        得到播放列表 URL

        Args:
            url_builder: URL 字符串、返回 URL 的无参函数，或带 build_playlist_url() 的对象

        Raises:
            CredentialError: 凭据无效或 URL 格式错误
        """
        if isinstance(url_builder, str):
            url = url_builder.strip()
        elif hasattr(url_builder, 'build_playlist_url'):
            is_valid = getattr(url_builder, 'is_valid', None)
            if is_valid is not None and not is_valid():
                raise CredentialError("Invalid credentials provided")
            url = url_builder.build_playlist_url()
        elif callable(url_builder):
            try:
                url = url_builder()
            except Exception as e:
                raise CredentialError(f"Failed to build playlist URL: {e}") from e
        else:
            raise CredentialError(f"Unsupported playlist source: {type(url_builder).__name__}")

        if not isinstance(url, str) or not FileValidator.validate_url(url):
            raise CredentialError(f"Invalid playlist URL: {url}")
        return url

    def ingest(self, url_builder, on_progress: Optional[ProgressCallback] = None,
               cancel_event: Optional[threading.Event] = None) -> Result:
        """
        获取并解析播放列表

        Args:
            url_builder: 见 resolve_playlist_url
            on_progress: 进度回调，取值 [0, 1]，单调不减
            cancel_event: 取消事件

        Returns:
            Result: 成功时 data 为 ContentData；失败时 message 描述原因
        """
        try:
            url = self.resolve_playlist_url(url_builder)
        except CredentialError as e:
            if self.logger:
                self.logger.error(f"输入无效: {e}")
            return Result.fail(str(e), e)

        progress = MonotonicProgress(on_progress, self.logger)
        progress.report(PROGRESS_START)

        span = PROGRESS_PARSE - PROGRESS_START
        transport = self._transport_factory()
        try:
            fetched = transport.fetch_with_progress(
                url,
                lambda fraction: progress.report(min(PROGRESS_PARSE, PROGRESS_START + fraction * span)),
                cancel_event
            )
        finally:
            transport.close()

        if not fetched.success:
            if fetched.cancelled:
                return Result.fail(fetched.message, fetched.exception)
            return Result.fail(f"Failed to download playlist: {fetched.message}", fetched.exception)

        # 取消后不返回部分结果
        if cancel_event is not None and cancel_event.is_set():
            error = FetchCancelledError()
            return Result.fail(str(error), error)

        progress.report(PROGRESS_PARSE)
        parsed = self.parser.parse(fetched.data)

        if parsed.errors and self.logger:
            self.logger.warning(f"播放列表解析出现 {len(parsed.errors)} 个错误: {'; '.join(parsed.errors[:5])}")

        content = ContentData(
            channels=parsed.channels,
            movies=parsed.movies,
            errors=parsed.errors,
        )
        progress.complete()

        if self.logger:
            self.logger.info(f"解析完成: {len(content.channels)} 个频道, {len(content.movies)} 个点播")

        return Result.ok(content)

    def ingest_many(self, sources: List, cancel_event: Optional[threading.Event] = None,
                    max_workers: Optional[int] = None) -> List[Tuple[Any, Result]]:
        """
        并发获取多个来源

        Args:
            sources: 带 name 属性和 build_playlist_url() 的来源列表（如 PlaylistSource）
            cancel_event: 所有任务共享的取消事件
            max_workers: 线程数，默认取配置中的 max_workers

        Returns:
            List[Tuple[source, Result]]: 与输入顺序一致，同名来源各自保留结果
        """
        if not sources:
            return []

        results: List[Optional[Result]] = [None] * len(sources)

        workers = max_workers or self.config.max_workers
        with ThreadPoolExecutor(max_workers=workers) as executor:
            futures = {
                executor.submit(self.ingest, source, None, cancel_event): index
                for index, source in enumerate(sources)
            }
            for future in as_completed(futures):
                results[futures[future]] = future.result()

        return list(zip(sources, results))

    def test_connection(self, credentials: PlaylistCredentials) -> Result:
        """测试服务器连通性，成功时 data 为 ConnectionStatus"""
        transport = self._transport_factory()
        try:
            result = transport.test_connection(credentials.build_base_url())
        finally:
            transport.close()

        if result.success:
            return Result.ok(ConnectionStatus(is_connected=True, server_url=credentials.host))
        return Result.fail(f"Connection failed: {result.message}", result.exception)

    def connect(self, credentials: PlaylistCredentials) -> Result:
        """校验凭据并确认服务器返回的是 M3U 播放列表"""
        if not credentials.is_valid():
            error = CredentialError("Invalid credentials provided")
            return Result.fail(str(error), error)

        transport = self._transport_factory()
        try:
            result = transport.fetch(credentials.build_playlist_url())
        finally:
            transport.close()

        if not result.success:
            return Result.fail(f"Connection failed: {result.message}", result.exception)
        if not FileValidator.looks_like_playlist(result.data):
            return Result.fail("Invalid response: Not a valid M3U playlist")
        return Result.ok(True)

    def get_channels(self, url_builder) -> Result:
        result = self.ingest(url_builder)
        if not result.success:
            return result
        return Result.ok(result.data.channels)

    def get_movies(self, url_builder) -> Result:
        result = self.ingest(url_builder)
        if not result.success:
            return result
        return Result.ok(result.data.movies)

    def search_channels(self, url_builder, query: str) -> Result:
        result = self.get_channels(url_builder)
        if not result.success:
            return result
        return Result.ok(filter_channels(result.data, query))

    def search_movies(self, url_builder, query: str) -> Result:
        result = self.get_movies(url_builder)
        if not result.success:
            return result
        return Result.ok(filter_movies(result.data, query))

    def get_channel_by_number(self, url_builder, number: int) -> Result:
        """按频道号查找，找不到时 data 为 None"""
        result = self.get_channels(url_builder)
        if not result.success:
            return result
        channel = next((c for c in result.data if c.number == number), None)
        return Result.ok(channel)

    @staticmethod
    def build_authenticated_stream_url(credentials: PlaylistCredentials, stream_url: str) -> str:
        """在播放地址上附加用户名和密码参数"""
        return URLProcessor.append_query_params(stream_url, {
            'username': credentials.username,
            'password': credentials.password,
        })
