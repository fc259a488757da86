from __future__ import annotations

import json

import pytest

from newsfeed_tui.datamodels import Article
from newsfeed_tui.exceptions import MalformedResponseError
from newsfeed_tui.parser import parse_page

from conftest import DEEP_NESTING_BODY, HUGE_INT_BODY, make_body, make_result


def test_parse_page():
    body = make_body(2, [make_result("A"), make_result("B")])
    page = parse_page(body)
    assert page.page_number == 2
    assert [a.title for a in page.articles] == ["A", "B"]
    assert page.articles[0] == Article(
        "A", "2020-01-01T00:00:00Z", "https://example.com/A"
    )


def test_parse_empty_results():
    page = parse_page(make_body(1, []))
    assert page.articles == ()
    assert page.page_number == 1


@pytest.mark.parametrize(
    "body",
    [
        "",
        "   ",
        "not json",
        "{}",
        "[]",
        '{"response": []}',
        '{"response": {"results": []}}',
        '{"response": {"currentPage": "1", "results": []}}',
        '{"response": {"currentPage": true, "results": []}}',
        '{"response": {"currentPage": 1}}',
        '{"response": {"currentPage": 1, "results": {}}}',
        '{"response": {"currentPage": 0, "results": []}}',
        '{"response": {"currentPage": -1, "results": []}}',
        pytest.param(HUGE_INT_BODY, id="huge-int"),
        pytest.param(DEEP_NESTING_BODY, id="deep-nesting"),
    ],
)
def test_malformed_bodies(body):
    with pytest.raises(MalformedResponseError):
        parse_page(body)


def test_malformed_entries_are_skipped():
    bad_title = make_result("X")
    del bad_title["webTitle"]
    bad_url = make_result("Y")
    bad_url["webUrl"] = None
    body = json.dumps(
        {
            "response": {
                "currentPage": 1,
                "results": [make_result("A"), bad_title, "junk", bad_url, make_result("B")],
            }
        }
    )
    page = parse_page(body)
    assert [a.title for a in page.articles] == ["A", "B"]
