"""
条目构建测试
"""

import pytest

from app.playlist.core.builder import (
    build_record,
    duration_to_millis,
    generate_id,
    split_channel_number,
)
from app.playlist.core.errors import EntityValidationError
from app.playlist.core.extractor import parse_extinf
from app.playlist.core.models import MediaCategory


@pytest.mark.parametrize("title, expected", [
    ("101. ESPN", (101, "ESPN")),
    ("1. BBC World News", (1, "BBC World News")),
    ("5 CNN", (5, "CNN")),
    ("7 .. . Discovery", (7, "Discovery")),
    ("CNN International", (None, "CNN International")),
    ("2012", (None, "2012")),
    ("101.", (None, "101.")),
])
def test_split_channel_number(title, expected):
    assert split_channel_number(title) == expected


def test_generate_id_slug():
    assert generate_id("CNN International") == "cnn_international"
    assert generate_id("  --Hello, World!!  ") == "hello_world"
    assert generate_id("Ça va?") == "a_va"
    assert generate_id("!!!") == ""


def test_generate_id_truncates_to_50():
    slug = generate_id("a" * 40 + " " + "b" * 40)

    assert len(slug) == 50
    assert slug.startswith("a" * 40 + "_")


def test_duration_to_millis():
    assert duration_to_millis(5400) == 5400000
    assert duration_to_millis(1.25) == 1250
    assert duration_to_millis(0) is None
    assert duration_to_millis(-1) is None


def test_overflowing_numbers_degrade_to_none():
    assert duration_to_millis(float("inf")) is None
    assert duration_to_millis(1e306) is None

    title = "1" * 5000 + " ESPN"
    assert split_channel_number(title) == (None, title)


def test_build_channel_uses_tvg_id_and_splits_number():
    metadata = parse_extinf('#EXTINF:-1 tvg-id="espn" tvg-logo="http://l/espn.png" '
                            'group-title="Sports",101. ESPN')

    record = build_record(metadata, "http://s/espn")

    assert record.category is MediaCategory.TV_CHANNELS
    assert record.id == "espn"
    assert record.name == "ESPN"
    assert record.number == 101
    assert record.group_title == "Sports"
    assert record.logo_url == "http://l/espn.png"
    assert record.stream_url == "http://s/espn"


def test_build_channel_generates_id_from_full_title():
    metadata = parse_extinf('#EXTINF:-1 tvg-id="",5. Local News')

    record = build_record(metadata, "http://s/local")

    assert record.id == "5_local_news"
    assert record.name == "Local News"


def test_build_movie_fields():
    metadata = parse_extinf('#EXTINF:7200 tvg-logo="http://p/matrix.jpg" '
                            'group-title="Movies",The Matrix')

    record = build_record(metadata, "http://s/matrix")

    assert record.category is MediaCategory.MOVIES
    assert record.id == "the_matrix"
    assert record.title == "The Matrix"
    assert record.description == "Movies"
    assert record.poster_url == "http://p/matrix.jpg"
    assert record.duration == 7200000
    assert record.year is None
    assert record.genre is None


def test_movie_keeps_leading_number_in_title():
    metadata = parse_extinf('#EXTINF:-1 group-title="VOD",2001. A Space Odyssey')

    record = build_record(metadata, "http://s/2001")

    assert record.title == "2001. A Space Odyssey"
    assert record.duration is None


def test_build_rejects_missing_id():
    metadata = parse_extinf('#EXTINF:-1,!!!')

    with pytest.raises(EntityValidationError, match="missing id"):
        build_record(metadata, "http://s/x")


def test_build_rejects_missing_name():
    metadata = parse_extinf('#EXTINF:-1 tvg-id="abc",')

    with pytest.raises(EntityValidationError, match="missing name"):
        build_record(metadata, "http://s/x")


def test_build_rejects_missing_stream_url():
    metadata = parse_extinf('#EXTINF:-1,Name')

    with pytest.raises(EntityValidationError, match="missing stream URL"):
        build_record(metadata, "  ")
