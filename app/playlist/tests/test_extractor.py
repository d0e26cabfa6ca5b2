"""
元数据提取测试
"""

from app.playlist.core.extractor import extract_attributes, extract_title, parse_extinf


def test_parse_extinf_with_attributes_and_title():
    line = ('#EXTINF:-1 tvg-id="cnn" tvg-name="CNN" tvg-logo="http://example.com/cnn.png" '
            'group-title="News",CNN International')

    info = parse_extinf(line, 2)

    assert info is not None
    assert info.duration == -1
    assert info.is_live
    assert info.title == "CNN International"
    assert info.tvg_id == "cnn"
    assert info.tvg_name == "CNN"
    assert info.tvg_logo == "http://example.com/cnn.png"
    assert info.group_title == "News"
    assert info.line_number == 2


def test_parse_extinf_plain_title():
    info = parse_extinf("#EXTINF:-1,Valid Channel")

    assert info.title == "Valid Channel"
    assert info.attributes == {}


def test_parse_extinf_fractional_and_positive_duration():
    info = parse_extinf("#EXTINF:5400.5,Some Title")

    assert info.duration == 5400.5
    assert not info.is_live


def test_parse_extinf_signed_duration():
    assert parse_extinf("#EXTINF:+10,Title").duration == 10
    assert parse_extinf("#EXTINF:0,Title").is_live


def test_parse_extinf_rejects_missing_number():
    assert parse_extinf("#EXTINF:invalid line") is None
    assert parse_extinf("#EXTINF:") is None
    assert parse_extinf("#EXTINF:,Title") is None


def test_title_keeps_commas_inside_name():
    info = parse_extinf('#EXTINF:-1 group-title="News",Hello, World')

    assert info.title == "Hello, World"


def test_attribute_last_occurrence_wins():
    attributes = extract_attributes('tvg-logo="a.png" group-title="One" tvg-logo="b.png"')

    assert attributes == {'tvg-logo': 'b.png', 'group-title': 'One'}


def test_attribute_scan_is_order_independent():
    first = extract_attributes('group-title="G" tvg-id="x"')
    second = extract_attributes('tvg-id="x" group-title="G"')

    assert first == second


def test_empty_attribute_value_is_kept():
    info = parse_extinf('#EXTINF:-1 tvg-id="" group-title="",Name')

    assert info.tvg_id == ""
    assert info.group_title == ""
    assert info.title == "Name"


def test_extract_title_collapses_whitespace():
    assert extract_title('  tvg-id="a"   Multi    word\ttitle  ') == "Multi word title"
