"""
配置与工具函数测试
"""

import threading

import pytest

from app.playlist.core.config import ConfigTemplates, FetchConfig
from app.playlist.core.errors import FetchCancelledError
from app.playlist.core.utils import (
    FileValidator,
    RetryHandler,
    URLProcessor,
    create_session,
    format_file_size,
    format_time,
)


def test_default_config():
    config = FetchConfig()

    assert config.max_retries == 3
    assert config.timeout == (30, 60)
    assert 'User-Agent' in config.headers
    assert 'max_retries' in config.to_dict()


def test_config_rejects_zero_attempts():
    with pytest.raises(ValueError):
        FetchConfig(max_retries=0)


def test_config_from_dict_ignores_unknown_keys():
    config = FetchConfig.from_dict({'max_retries': 5, 'unknown': True})

    assert config.max_retries == 5


def test_config_templates():
    assert ConfigTemplates.fast().max_retries == 1
    assert ConfigTemplates.stable().max_retries == 5
    assert ConfigTemplates.low_bandwidth().chunk_size == 4096
    assert ConfigTemplates.get('missing').max_retries == 3


def test_create_session_applies_headers():
    session = create_session(verify_ssl=False, headers={'X-Test': '1'})

    assert session.verify is False
    assert session.headers['X-Test'] == '1'
    session.close()


def test_retry_handler_succeeds_on_third_attempt():
    calls = []

    def flaky():
        calls.append(1)
        if len(calls) < 3:
            raise RuntimeError(f"attempt {len(calls)}")
        return "ok"

    handler = RetryHandler(max_retries=3, retry_delay=0)

    assert handler.execute_with_retry(flaky) == "ok"
    assert len(calls) == 3


def test_retry_handler_raises_last_error():
    calls = []

    def always_fails():
        calls.append(1)
        raise RuntimeError(f"attempt {len(calls)}")

    handler = RetryHandler(max_retries=3, retry_delay=0)

    with pytest.raises(RuntimeError, match="attempt 3"):
        handler.execute_with_retry(always_fails)


def test_retry_handler_linear_backoff(monkeypatch):
    delays = []
    monkeypatch.setattr("app.playlist.core.utils.time.sleep", delays.append)

    def always_fails():
        raise RuntimeError("boom")

    handler = RetryHandler(max_retries=3, retry_delay=1.5)

    with pytest.raises(RuntimeError):
        handler.execute_with_retry(always_fails)

    assert delays == [1.5, 3.0]


def test_retry_handler_does_not_retry_unlisted_errors():
    calls = []

    def fails():
        calls.append(1)
        raise KeyError("nope")

    handler = RetryHandler(max_retries=3, retry_delay=0, retry_on=(RuntimeError,))

    with pytest.raises(KeyError):
        handler.execute_with_retry(fails)
    assert len(calls) == 1


def test_retry_handler_cancel_during_wait_skips_remaining_attempts():
    cancel = threading.Event()
    calls = []

    def fails_and_cancels():
        calls.append(1)
        cancel.set()
        raise RuntimeError("boom")

    handler = RetryHandler(max_retries=3, retry_delay=30)

    with pytest.raises(FetchCancelledError):
        handler.execute_with_retry(fails_and_cancels, cancel_event=cancel)
    assert len(calls) == 1


def test_url_helpers():
    assert FileValidator.validate_url("https://example.com/list.m3u")
    assert not FileValidator.validate_url("ftp://example.com/list.m3u")
    assert not FileValidator.validate_url("invalid-url")
    assert not FileValidator.validate_url("")

    assert URLProcessor.normalize_url(" example.com:8080/ ") == "http://example.com:8080"
    assert URLProcessor.extract_domain("http://example.com/path") == "example.com"
    assert URLProcessor.append_query_params("http://s/x.ts?a=1", {'b': '2'}) == "http://s/x.ts?a=1&b=2"


def test_append_query_params_keeps_existing_query():
    url = "http://s/x.ts?id=1&id=2&q=a%20b&username=old#frag"

    assert URLProcessor.append_query_params(url, {'username': 'u', 'password': 'p'}) == (
        "http://s/x.ts?id=1&id=2&q=a%20b&username=u&password=p#frag"
    )


def test_looks_like_playlist():
    assert FileValidator.looks_like_playlist("#EXTM3U\n")
    assert FileValidator.looks_like_playlist("junk\n#EXTINF:-1,x\nhttp://s")
    assert not FileValidator.looks_like_playlist("<html></html>")
    assert not FileValidator.looks_like_playlist("")


def test_formatters():
    assert format_file_size(1024) == "1.00 KB"
    assert format_time(30) == "30.0s"
    assert format_time(90) == "1.5m"
