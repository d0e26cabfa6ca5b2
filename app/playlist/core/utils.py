"""
工具模块
包含日志、HTTP 会话、重试和 URL 处理等实用工具
"""

import time
import logging
import threading
import warnings
from typing import Dict, Optional, Callable, Tuple, Type
from urllib.parse import urlparse, urlencode, unquote_plus, urlunparse

import requests
from urllib3.exceptions import InsecureRequestWarning

from .errors import FetchCancelledError


LOG_FORMAT = '%(asctime)s - %(levelname)s - %(message)s'


def setup_logger(name: str, log_file: Optional[str] = None, console_output: bool = True) -> logging.Logger:
    """
    配置并返回日志记录器

    Args:
        name: 日志记录器名称
        log_file: 日志文件路径，为 None 时不写文件
        console_output: 是否输出到控制台

    Returns:
        logging.Logger: 配置好的日志记录器
    """
    logger = logging.getLogger(name)

    # 避免重复添加 handler
    if logger.handlers:
        return logger

    logger.setLevel(logging.INFO)

    if log_file:
        file_handler = logging.FileHandler(log_file, encoding='utf-8')
        file_handler.setFormatter(logging.Formatter(LOG_FORMAT))
        logger.addHandler(file_handler)

    if console_output:
        console_handler = logging.StreamHandler()
        console_handler.setFormatter(logging.Formatter(LOG_FORMAT))
        logger.addHandler(console_handler)

    return logger


def create_session(verify_ssl: bool = True, headers: Optional[Dict[str, str]] = None) -> requests.Session:
    """
    创建配置好的 HTTP 会话

    Args:
        verify_ssl: 是否验证 SSL 证书
        headers: 自定义请求头

    Returns:
        requests.Session: 配置好的会话对象
    """
    session = requests.Session()
    session.verify = verify_ssl

    if not verify_ssl:
        warnings.filterwarnings('ignore', category=InsecureRequestWarning)

    if headers:
        session.headers.update(headers)

    return session


class RetryHandler:
    """
    重试处理器 - 线性退避策略

    第 k 次失败后等待 retry_delay * k 秒再发起下一次尝试。
    等待期间若取消事件被设置，立即放弃剩余的重试。
    """

    def __init__(
        self,
        max_retries: int = 3,
        retry_delay: float = 1.0,
        retry_on: Tuple[Type[BaseException], ...] = (Exception,),
        logger: Optional[logging.Logger] = None,
    ):
        """
        初始化重试处理器

        Args:
            max_retries: 最大尝试次数
            retry_delay: 基础重试延迟(秒)
            retry_on: 需要重试的异常类型
            logger: 日志记录器
        """
        self.max_retries = max_retries
        self.retry_delay = retry_delay
        self.retry_on = retry_on
        self.logger = logger

    def backoff_delay(self, attempt: int) -> float:
        """第 attempt 次（从 0 开始）失败后的等待时间"""
        return self.retry_delay * (attempt + 1)

    def _wait(self, delay: float, cancel_event: Optional[threading.Event]) -> bool:
        """等待 delay 秒，返回是否在等待期间被取消"""
        if cancel_event is not None:
            return cancel_event.wait(delay)
        time.sleep(delay)
        return False

    def execute_with_retry(self, func: Callable, *args, cancel_event: Optional[threading.Event] = None, **kwargs):
        """
        执行函数,失败时重试

        Args:
            func: 要执行的函数
            *args: 位置参数
            cancel_event: 取消事件
            **kwargs: 关键字参数

        Returns:
            函数执行结果

        Raises:
            FetchCancelledError: 被取消
            Exception: 重试失败后抛出最后一次的异常
        """
        last_exception = None

        for attempt in range(self.max_retries):
            if cancel_event is not None and cancel_event.is_set():
                raise FetchCancelledError()

            try:
                return func(*args, **kwargs)
            except FetchCancelledError:
                raise
            except self.retry_on as e:
                last_exception = e
                if attempt >= self.max_retries - 1:
                    break

                delay = self.backoff_delay(attempt)
                if self.logger:
                    self.logger.warning(
                        f"第 {attempt + 1}/{self.max_retries} 次尝试失败: {e}，{delay:.1f}s 后重试")
                if self._wait(delay, cancel_event):
                    raise FetchCancelledError()

        raise last_exception


class FileValidator:
    """内容与 URL 验证器"""

    @staticmethod
    def validate_url(url: str) -> bool:
        """验证URL格式"""
        if not url:
            return False
        try:
            result = urlparse(url)
        except ValueError:
            return False
        return result.scheme in ('http', 'https') and bool(result.netloc)

    @staticmethod
    def looks_like_playlist(content: str) -> bool:
        """粗略判断内容是否为 M3U 播放列表"""
        if not content:
            return False
        return content.strip().startswith('#EXTM3U') or '#EXTINF' in content


class URLProcessor:
    """URL处理器"""

    @staticmethod
    def normalize_url(url: str) -> str:
        """标准化URL：缺少协议时补上 http://，去掉末尾的 /"""
        url = url.strip()
        if not url.startswith(('http://', 'https://')):
            url = 'http://' + url
        return url.rstrip('/')

    @staticmethod
    def extract_domain(url: str) -> str:
        """提取域名"""
        try:
            return urlparse(url).netloc
        except ValueError:
            return ""

    @staticmethod
    def append_query_params(url: str, params: Dict[str, str]) -> str:
        """
        添加查询参数

        已有参数保持原样（包括重复的键和原始编码），只去掉与 params 同名的参数，
        新参数追加在末尾。
        """
        parsed = urlparse(url)
        kept = [
            part for part in parsed.query.split('&')
            if part and unquote_plus(part.split('=', 1)[0]) not in params
        ]
        if params:
            kept.append(urlencode(params))

        return urlunparse((
            parsed.scheme,
            parsed.netloc,
            parsed.path,
            parsed.params,
            '&'.join(kept),
            parsed.fragment
        ))


def format_file_size(size: int) -> str:
    """格式化文件大小"""
    for unit in ['B', 'KB', 'MB', 'GB']:
        if size < 1024.0:
            return f"{size:.2f} {unit}"
        size /= 1024.0
    return f"{size:.2f} TB"


def format_time(seconds: float) -> str:
    """格式化时间"""
    if seconds < 60:
        return f"{seconds:.1f}s"
    elif seconds < 3600:
        return f"{seconds/60:.1f}m"
    else:
        return f"{seconds/3600:.1f}h"


def print_banner():
    """打印欢迎横幅"""
    banner = """
        ╔══════════════════════════════════════════════════════════════╗
        ║                    IPTV Playlist Ingest v1.0                 ║
        ║                                                              ║
        ║  M3U 播放列表获取与分类                                      ║
        ║  支持错误重试、进度显示、频道/点播自动识别                   ║
        ╚══════════════════════════════════════════════════════════════╝
    """
    print(banner)
