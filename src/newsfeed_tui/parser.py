from __future__ import annotations

import json
import logging
from typing import Any, Dict, List, Optional

from .datamodels import Article, Page
from .exceptions import MalformedResponseError

logger = logging.getLogger("newsfeed")

ARTICLE_FIELDS = ("webTitle", "webPublicationDate", "webUrl")


def parse_page(body: str) -> Page:
    """
    Parse a search response body into a ``Page``.

    Raises MalformedResponseError when the body is empty, not JSON, or lacks
    ``response.currentPage`` / ``response.results``. Individual results that
    are missing a field are skipped so one bad record does not sink the page.
    """
    if not body or not body.strip():
        raise MalformedResponseError("Empty response body")
    try:
        data = json.loads(body)
    except (ValueError, RecursionError) as e:
        # JSONDecodeError is a ValueError; oversized ints and deep nesting are not
        raise MalformedResponseError(f"Invalid JSON: {e}") from e

    if not isinstance(data, dict):
        raise MalformedResponseError("Top-level JSON value is not an object")
    response = data.get("response")
    if not isinstance(response, dict):
        raise MalformedResponseError("Missing 'response' object")

    current_page = response.get("currentPage")
    # bool is an int subclass; JSON true/false is not a page number
    if not isinstance(current_page, int) or isinstance(current_page, bool):
        raise MalformedResponseError("Missing or non-integer 'currentPage'")
    if current_page < 1:
        raise MalformedResponseError(f"Invalid 'currentPage' {current_page}")

    results = response.get("results")
    if not isinstance(results, list):
        raise MalformedResponseError("Missing or non-array 'results'")

    articles: List[Article] = []
    for index, entry in enumerate(results):
        article = _to_article(entry)
        if article is None:
            logger.warning("Skipping malformed result #%d on page %d", index, current_page)
            continue
        articles.append(article)

    return Page(articles=tuple(articles), page_number=current_page)


def _to_article(entry: Any) -> Optional[Article]:
    if not isinstance(entry, dict):
        return None
    values: Dict[str, str] = {}
    for key in ARTICLE_FIELDS:
        value = entry.get(key)
        if not isinstance(value, str):
            return None
        values[key] = value
    return Article(
        title=values["webTitle"],
        published_at=values["webPublicationDate"],
        url=values["webUrl"],
    )
