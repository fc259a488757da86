from __future__ import annotations

from urllib.parse import parse_qsl, urlsplit

import pytest

from newsfeed_tui.exceptions import InvalidConfigurationError
from newsfeed_tui.query import build_query_url

BASE = "https://content.guardianapis.com/search"


@pytest.mark.parametrize("section", [None, "news", "sport"])
def test_build_query_url_params(section):
    url = build_query_url(BASE, section, 3, "test")
    parts = urlsplit(url)
    assert f"{parts.scheme}://{parts.netloc}{parts.path}" == BASE

    expected = {"page": "3", "format": "json", "api-key": "test"}
    if section:
        expected["section"] = section
    assert dict(parse_qsl(parts.query)) == expected


def test_build_query_url_order():
    url = build_query_url(BASE, "sport", 1, "test")
    assert url == f"{BASE}?section=sport&page=1&format=json&api-key=test"


def test_empty_section_is_no_filter():
    url = build_query_url(BASE, "", 1, "test")
    assert "section" not in dict(parse_qsl(urlsplit(url).query))


def test_existing_query_is_kept():
    url = build_query_url(BASE + "?order-by=newest", None, 2, "k")
    assert parse_qsl(urlsplit(url).query) == [
        ("order-by", "newest"),
        ("page", "2"),
        ("format", "json"),
        ("api-key", "k"),
    ]


def test_api_key_is_encoded():
    url = build_query_url(BASE, None, 1, "a b&c")
    assert dict(parse_qsl(urlsplit(url).query))["api-key"] == "a b&c"


@pytest.mark.parametrize(
    "base_url",
    [
        "",
        "not a url",
        "/search",
        "content.guardianapis.com/search",
        "ftp://x/y",
        "https://h:abc/search",
        "https://h:99999/search",
    ],
)
def test_invalid_base_url(base_url):
    with pytest.raises(InvalidConfigurationError):
        build_query_url(base_url, None, 1, "test")


def test_page_must_be_positive():
    with pytest.raises(ValueError):
        build_query_url(BASE, None, 0, "test")
