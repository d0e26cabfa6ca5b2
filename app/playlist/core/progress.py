"""
进度模块
进度回调的单调性保证，以及基于 tqdm 的命令行进度条
"""

import sys
import logging
import threading
from typing import Callable, Optional

from tqdm import tqdm


ProgressCallback = Callable[[float], None]


def _clamp(value: float) -> float:
    return max(0.0, min(1.0, value))


class MonotonicProgress:
    """
    进度回调包装器

    - 上报值被限制在 [0, 1]
    - 上报值不会减小（比上次小的值直接丢弃）
    - 回调自身抛出的异常只记录日志，不会中断下载
    """

    def __init__(self, callback: Optional[ProgressCallback] = None, logger: Optional[logging.Logger] = None):
        self.callback = callback
        self.logger = logger
        self._last = 0.0
        self._lock = threading.Lock()

    @property
    def last_value(self) -> float:
        return self._last

    def report(self, fraction: float):
        if self.callback is None:
            return

        value = _clamp(fraction)
        with self._lock:
            if value < self._last:
                return
            self._last = value

        try:
            self.callback(value)
        except Exception as e:
            if self.logger:
                self.logger.warning(f"进度回调异常（已忽略）: {e}")

    def complete(self):
        self.report(1.0)

    __call__ = report


class ProgressBar:
    """把 [0, 1] 的进度回调显示为 tqdm 进度条"""

    def __init__(self, description: str = "下载播放列表", enabled: bool = True):
        self.enabled = enabled
        self._pbar: Optional[tqdm] = None
        if enabled:
            self._pbar = tqdm(
                total=100,
                desc=description,
                ncols=70,
                file=sys.stderr,
                leave=False,
                mininterval=0.1,
                bar_format='{desc} {bar} {percentage:3.0f}%'
            )

    def __call__(self, fraction: float):
        if self._pbar is None:
            return
        target = int(round(_clamp(fraction) * 100))
        if target > self._pbar.n:
            self._pbar.update(target - self._pbar.n)

    def close(self):
        if self._pbar is not None:
            self._pbar.close()
            self._pbar = None

    def __enter__(self):
        return self

    def __exit__(self, exc_type, exc_val, exc_tb):
        self.close()
        return False
