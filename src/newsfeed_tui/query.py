from __future__ import annotations

from typing import List, Optional, Tuple
from urllib.parse import parse_qsl, urlencode, urlsplit, urlunsplit

from .exceptions import InvalidConfigurationError


def validate_base_url(base_url: str) -> str:
    """Return ``base_url`` if it is an absolute http(s) URL, else raise."""
    try:
        parts = urlsplit(base_url or "")
    except ValueError as e:
        raise InvalidConfigurationError(f"Invalid base URL {base_url!r}: {e}") from e
    if parts.scheme not in ("http", "https") or not parts.hostname:
        raise InvalidConfigurationError(
            f"Base URL must be an absolute http(s) URL, got {base_url!r}"
        )
    try:
        parts.port
    except ValueError as e:
        raise InvalidConfigurationError(f"Invalid port in base URL {base_url!r}: {e}") from e
    return base_url


def build_query_url(
    base_url: str, section: Optional[str], page: int, api_key: str
) -> str:
    """
    Build the search URL for one page of the feed.

    Existing query parameters on ``base_url`` are kept; ``section`` is only
    added when a filter is set.
    """
    validate_base_url(base_url)
    if page < 1:
        raise ValueError(f"page must be >= 1, got {page}")

    parts = urlsplit(base_url)
    params: List[Tuple[str, str]] = parse_qsl(parts.query, keep_blank_values=True)
    if section:
        params.append(("section", section))
    params.append(("page", str(page)))
    params.append(("format", "json"))
    params.append(("api-key", api_key))

    return urlunsplit(
        (parts.scheme, parts.netloc, parts.path, urlencode(params), parts.fragment)
    )
