from __future__ import annotations

import logging
import socket
from concurrent.futures import Future, ThreadPoolExecutor
from dataclasses import dataclass
from typing import Optional
from urllib.parse import urlsplit

import requests
from requests.adapters import HTTPAdapter
from urllib3.util.retry import Retry

from .config import CONNECT_TIMEOUT, READ_TIMEOUT, REQUEST_HEADERS
from .datamodels import Page
from .exceptions import (
    FetchError,
    HttpStatusError,
    InvalidUrlError,
    MalformedResponseError,
    NetworkFailure,
)
from .parser import parse_page

logger = logging.getLogger("newsfeed")


@dataclass(frozen=True)
class FetchResult:
    """Outcome of one fetch: either a page (possibly empty) or an error."""

    page: Optional[Page] = None
    error: Optional[FetchError] = None

    @property
    def ok(self) -> bool:
        return self.error is None and self.page is not None

    @property
    def is_empty(self) -> bool:
        return self.ok and not self.page.articles

    @classmethod
    def success(cls, page: Page) -> FetchResult:
        return cls(page=page)

    @classmethod
    def failure(cls, error: FetchError) -> FetchResult:
        return cls(error=error)


class NewsFetcher:
    def __init__(
        self,
        connect_timeout: float = CONNECT_TIMEOUT,
        read_timeout: float = READ_TIMEOUT,
        session: Optional[requests.Session] = None,
    ):
        self.timeout = (connect_timeout, read_timeout)
        self.session = session or self._create_session()
        self._executor: Optional[ThreadPoolExecutor] = None

    def _create_session(self) -> requests.Session:
        s = requests.Session()
        s.headers.update(REQUEST_HEADERS)
        # No transport retries; the user retries with refresh or load more.
        adapter = HTTPAdapter(max_retries=Retry(total=0, raise_on_status=False))
        s.mount("https://", adapter)
        s.mount("http://", adapter)
        return s

    def fetch(self, url: str) -> FetchResult:
        """Fetch and parse one page. Blocks; errors come back as values."""
        if not _is_absolute_url(url):
            logger.error("Refusing to fetch invalid URL %r", url)
            return FetchResult.failure(InvalidUrlError(f"Invalid URL: {url!r}"))

        try:
            logger.debug("Fetching %s", _redact(url))
            resp = self.session.get(url, timeout=self.timeout)
        except (
            requests.exceptions.InvalidURL,
            requests.exceptions.MissingSchema,
            requests.exceptions.InvalidSchema,
        ) as e:
            logger.error("Invalid URL %s: %s", _redact(url), e)
            return FetchResult.failure(InvalidUrlError(str(e)))
        except requests.RequestException as e:
            logger.warning("Network failure fetching %s: %s", _redact(url), e)
            return FetchResult.failure(NetworkFailure(str(e), cause=e))

        try:
            if resp.status_code != 200:
                logger.error("Error response code: %d", resp.status_code)
                return FetchResult.failure(HttpStatusError(resp.status_code))
            try:
                body = resp.content.decode("utf-8")
            except UnicodeDecodeError as e:
                return FetchResult.failure(
                    MalformedResponseError(f"Body is not valid UTF-8: {e}")
                )
        finally:
            resp.close()

        try:
            page = parse_page(body)
        except MalformedResponseError as e:
            logger.error("Problem parsing the news JSON results: %s", e)
            return FetchResult.failure(e)

        logger.debug("Fetched page %d with %d articles", page.page_number, len(page))
        return FetchResult.success(page)

    def submit(self, url: str) -> Future[FetchResult]:
        """Run ``fetch`` on the fetcher's worker thread."""
        if self._executor is None:
            self._executor = ThreadPoolExecutor(
                max_workers=1, thread_name_prefix="newsfeed-fetch"
            )
        return self._executor.submit(self.fetch, url)

    def close(self) -> None:
        if self._executor is not None:
            self._executor.shutdown(wait=False)
            self._executor = None
        self.session.close()


def is_connected(url: str, timeout: float = 3.0) -> bool:
    """Return True if a TCP connection to the host of ``url`` can be opened."""
    try:
        parts = urlsplit(url)
        port = parts.port or (443 if parts.scheme == "https" else 80)
    except ValueError as e:
        logger.debug("Connectivity check skipped for %r: %s", url, e)
        return False
    if not parts.hostname:
        return False
    try:
        with socket.create_connection((parts.hostname, port), timeout=timeout):
            return True
    except OSError as e:
        logger.debug("Connectivity check to %s failed: %s", parts.hostname, e)
        return False


def _is_absolute_url(url: str) -> bool:
    try:
        parts = urlsplit(url or "")
        parts.port
        return parts.scheme in ("http", "https") and bool(parts.hostname)
    except ValueError:
        return False


def _redact(url: str) -> str:
    """Hide the api-key value in log output."""
    if "api-key=" not in url:
        return url
    head, _, tail = url.partition("api-key=")
    _, amp, rest = tail.partition("&")
    return f"{head}api-key=***{amp}{rest}"
