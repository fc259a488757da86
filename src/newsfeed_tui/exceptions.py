from __future__ import annotations

from typing import Optional


class InvalidConfigurationError(ValueError):
    """Raised when the configured base URL or settings cannot be used."""


class FetchError(Exception):
    """Base class for failures returned (not raised) by ``NewsFetcher.fetch``."""


class InvalidUrlError(FetchError):
    """The request URL could not be parsed into an absolute URL."""


class NetworkFailure(FetchError):
    """Transport-level failure: DNS, TLS, timeout, connection reset."""

    def __init__(self, message: str, cause: Optional[BaseException] = None):
        super().__init__(message)
        self.cause = cause


class HttpStatusError(FetchError):
    """The server answered with something other than 200."""

    def __init__(self, code: int):
        super().__init__(f"Unexpected HTTP status {code}")
        self.code = code


class MalformedResponseError(FetchError):
    """The body was empty, not JSON, or missing required keys."""

    def __init__(self, detail: str):
        super().__init__(detail)
        self.detail = detail
