"""
传输模块
通过 HTTP 获取播放列表文本，支持超时、有限次数的重试、进度回调和取消
"""

import logging
import threading
from typing import Optional

import requests

from .config import FetchConfig
from .errors import CredentialError, FetchCancelledError, NetworkError
from .models import Result
from .progress import MonotonicProgress, ProgressCallback
from .utils import FileValidator, RetryHandler, create_session, format_file_size, setup_logger


class HttpTransport:
    """
    播放列表 HTTP 传输

    每个实例拥有自己的 requests.Session，用完后调用 close() 或使用 with 语句释放。
    所有公开方法都返回 Result，不会抛出网络异常。
    """

    def __init__(self, config: FetchConfig = None, logger: Optional[logging.Logger] = None,
                 session: Optional[requests.Session] = None):
        self.config = config or FetchConfig()
        self.session = session or create_session(self.config.verify_ssl, self.config.headers)

        self.logger = logger
        if self.logger is None and self.config.enable_logging:
            self.logger = setup_logger(__name__, self.config.log_file)

        # 只有网络错误会被重试，取消不会
        self.retry_handler = RetryHandler(
            max_retries=self.config.max_retries,
            retry_delay=self.config.retry_delay,
            retry_on=(NetworkError,),
            logger=self.logger
        )

    def fetch(self, url: str, cancel_event: Optional[threading.Event] = None) -> Result:
        """
        获取 URL 的文本内容

        Args:
            url: 播放列表 URL
            cancel_event: 取消事件，被设置后放弃剩余的重试并关闭连接

        Returns:
            Result: 成功时 data 为文本；失败时 message 为最后一次尝试的错误信息
        """
        return self._fetch(url, None, cancel_event)

    def fetch_with_progress(self, url: str, on_progress: Optional[ProgressCallback] = None,
                            cancel_event: Optional[threading.Event] = None) -> Result:
        """
        与 fetch 相同，但按 已读字节数 / Content-Length 上报进度

        进度值单调不减，成功时保证最后一次上报为 1.0。
        服务器没有声明 Content-Length 时只上报最后的 1.0。
        """
        progress = MonotonicProgress(on_progress, self.logger)
        result = self._fetch(url, progress, cancel_event)
        if result.success:
            progress.complete()
        return result

    def test_connection(self, url: str, cancel_event: Optional[threading.Event] = None) -> Result:
        """
        用一次 HEAD 请求探测连通性，不下载内容，不重试

        Returns:
            Result: 成功时 data 为 True
        """
        invalid = self._reject_invalid_url(url)
        if invalid:
            return invalid
        if cancel_event is not None and cancel_event.is_set():
            error = FetchCancelledError()
            return Result.fail(str(error), error)

        try:
            response = self.session.head(url, timeout=self.config.timeout, allow_redirects=True)
            response.close()
            self._check_status(response)
        except requests.RequestException as e:
            error = NetworkError(str(e))
            return Result.fail(str(error), error)
        except NetworkError as e:
            return Result.fail(str(e), e)

        return Result.ok(True)

    def _fetch(self, url: str, progress: Optional[MonotonicProgress],
               cancel_event: Optional[threading.Event]) -> Result:
        invalid = self._reject_invalid_url(url)
        if invalid:
            return invalid

        try:
            text = self.retry_handler.execute_with_retry(
                self._attempt, url, progress, cancel_event, cancel_event=cancel_event)
        except FetchCancelledError as e:
            if self.logger:
                self.logger.info(f"请求已取消: {url}")
            return Result.fail(str(e), e)
        except NetworkError as e:
            if self.logger:
                self.logger.error(f"获取失败 {url}: {e}")
            return Result.fail(str(e), e)

        return Result.ok(text)

    def _attempt(self, url: str, progress: Optional[MonotonicProgress],
                 cancel_event: Optional[threading.Event]) -> str:
        """单次请求；失败时抛出 NetworkError"""
        try:
            with self.session.get(url, timeout=self.config.timeout, stream=True) as response:
                self._check_status(response)
                body = self._read_body(response, progress, cancel_event)
        except requests.RequestException as e:
            raise NetworkError(str(e)) from e

        if not body:
            raise NetworkError("Empty response body")

        if self.logger:
            self.logger.info(f"成功获取播放列表: {format_file_size(len(body))}")

        return body.decode('utf-8-sig', errors='replace')

    def _read_body(self, response, progress: Optional[MonotonicProgress],
                   cancel_event: Optional[threading.Event]) -> bytes:
        """分块读取响应体，块之间检查取消事件"""
        total = self._content_length(response)
        chunks = []
        read = 0

        for chunk in response.iter_content(chunk_size=self.config.chunk_size):
            if cancel_event is not None and cancel_event.is_set():
                raise FetchCancelledError()
            if not chunk:
                continue

            chunks.append(chunk)
            read += len(chunk)
            if progress is not None and total > 0:
                progress.report(read / total)

        return b''.join(chunks)

    @staticmethod
    def _content_length(response) -> int:
        try:
            return int(response.headers.get('Content-Length', 0))
        except (TypeError, ValueError):
            return 0

    @staticmethod
    def _check_status(response):
        if not 200 <= response.status_code < 300:
            raise NetworkError(f"HTTP {response.status_code}: {response.reason}", response.status_code)

    @staticmethod
    def _reject_invalid_url(url: str) -> Optional[Result]:
        if FileValidator.validate_url(url):
            return None
        error = CredentialError(f"Invalid URL: {url}")
        return Result.fail(str(error), error)

    def close(self):
        """关闭会话，释放连接"""
        self.session.close()

    def __enter__(self):
        return self

    def __exit__(self, exc_type, exc_val, exc_tb):
        self.close()
        return False
