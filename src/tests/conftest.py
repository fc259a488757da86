from __future__ import annotations

import json

import pytest

from newsfeed_tui.config import FeedSettings


def make_body(current_page=1, results=None):
    return json.dumps({"response": {"currentPage": current_page, "results": results or []}})


def make_result(title, date="2020-01-01T00:00:00Z", url=None):
    return {
        "webTitle": title,
        "webPublicationDate": date,
        "webUrl": url or f"https://example.com/{title}",
    }


@pytest.fixture
def settings():
    return FeedSettings(base_url="https://content.guardianapis.com/search", api_key="test")


# Bodies that json.loads rejects with something other than JSONDecodeError.
HUGE_INT_BODY = '{"response":{"currentPage":%s,"results":[]}}' % ("1" * 5000)
DEEP_NESTING_BODY = "[" * 100000 + "]" * 100000
