"""
凭据与来源文件测试
"""

import json

import pytest

from app.playlist.core.credentials import CredentialValidator, PlaylistCredentials
from app.playlist.core.sources import PlaylistSource, SourceLoader


def test_build_urls():
    credentials = PlaylistCredentials("http://iptv.example.com:8080/", "user", "secret")

    assert credentials.build_base_url() == "http://iptv.example.com:8080/get.php?username=user&password=secret"
    assert credentials.build_playlist_url() == (
        "http://iptv.example.com:8080/get.php?username=user&password=secret&type=m3u_plus&output=ts"
    )


def test_credentials_validity():
    assert PlaylistCredentials("https://host.tv", "user", "pass").is_valid()
    assert not PlaylistCredentials("host.tv", "user", "pass").is_valid()
    assert not PlaylistCredentials("ftp://host.tv", "user", "pass").is_valid()
    assert not PlaylistCredentials("http://host.tv", "", "pass").is_valid()


def test_repr_hides_password():
    assert "secret" not in repr(PlaylistCredentials("http://h", "u", "secret"))


@pytest.mark.parametrize("host, message", [
    ("", "Host URL is required"),
    ("not a host", "Invalid URL format"),
    ("ftp://host.tv", "Invalid URL format"),
])
def test_validate_host_errors(host, message):
    result = CredentialValidator.validate_host(host)

    assert not result.is_valid
    assert result.error_message == message


def test_validate_host_accepts_missing_scheme_and_port():
    assert CredentialValidator.validate_host("iptv.example.com:8080").is_valid
    assert CredentialValidator.validate_host("https://iptv.example.com/path").is_valid


@pytest.mark.parametrize("username, message", [
    ("", "Username is required"),
    ("a", "Username must be at least 2 characters"),
    ("a" * 51, "Username must be less than 50 characters"),
    ("bad name", "Username can only contain letters, numbers, dots, underscores, and hyphens"),
])
def test_validate_username_errors(username, message):
    assert CredentialValidator.validate_username(username).error_message == message


def test_validate_password():
    assert CredentialValidator.validate_password("").error_message == "Password is required"
    assert CredentialValidator.validate_password("ab").error_message == "Password must be at least 3 characters"
    assert not CredentialValidator.validate_password("x" * 101).is_valid
    assert CredentialValidator.validate_password("abc").is_valid


def test_validate_credentials_returns_first_and_detailed_all():
    credentials = PlaylistCredentials("", "a", "")

    assert CredentialValidator.validate_credentials(credentials).error_message == "Host URL is required"
    assert CredentialValidator.validate_credentials_detailed(credentials) == [
        "Host: Host URL is required",
        "Username: Username must be at least 2 characters",
        "Password: Password is required",
    ]


def test_create_sanitized_credentials():
    credentials = CredentialValidator.create_sanitized_credentials(" iptv.example.com/ ", " user ", " pass ")

    assert credentials == PlaylistCredentials("http://iptv.example.com", "user", "pass")


def test_load_sources_from_file(tmp_path):
    path = tmp_path / "sources.json"
    path.write_text(json.dumps([
        {"name": "direct", "url": "http://example.com/list.m3u"},
        {"name": "xtream", "host": "http://iptv.example.com", "username": "user", "password": "pass"},
    ]), encoding="utf-8")

    sources = SourceLoader.load_from_file(str(path))

    assert [s.name for s in sources] == ["direct", "xtream"]
    assert sources[0].build_playlist_url() == "http://example.com/list.m3u"
    assert sources[1].build_playlist_url().startswith("http://iptv.example.com/get.php?")


def test_sources_round_trip(tmp_path):
    path = tmp_path / "out.json"
    sources = [PlaylistSource("direct", url="http://example.com/list.m3u")]

    SourceLoader.save_to_file(sources, str(path))

    assert SourceLoader.load_from_file(str(path))[0].url == "http://example.com/list.m3u"


def test_load_sources_errors(tmp_path):
    with pytest.raises(FileNotFoundError):
        SourceLoader.load_from_file(str(tmp_path / "missing.json"))

    path = tmp_path / "bad.json"
    path.write_text(json.dumps([{"name": "broken"}]), encoding="utf-8")
    with pytest.raises(ValueError):
        SourceLoader.load_from_file(str(path))
