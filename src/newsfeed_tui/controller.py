from __future__ import annotations

import enum
import functools
import logging
import threading
from concurrent.futures import Future
from dataclasses import dataclass
from typing import Callable, Optional

from .config import FeedSettings
from .exceptions import FetchError, NetworkFailure
from .fetcher import FetchResult, NewsFetcher
from .query import build_query_url
from .store import FeedSnapshot, FeedStore

logger = logging.getLogger("newsfeed")


class FeedStatus(enum.Enum):
    LOADED = "loaded"
    EMPTY = "empty"
    END_OF_FEED = "end_of_feed"
    NO_CONNECTION = "no_connection"
    ERROR = "error"


@dataclass(frozen=True)
class FeedUpdate:
    status: FeedStatus
    snapshot: FeedSnapshot
    error: Optional[FetchError] = None
    replaced: bool = False


def _call_inline(fn: Callable[[], None]) -> None:
    fn()


class FeedController:
    """
    Sequences feed loads: builds the URL, hands it to the fetcher, and applies
    the result to the store.

    Completions are funnelled through ``dispatch`` so a UI can run them on its
    own thread. Each fetch carries the store generation it was issued under;
    results from before the latest reset are dropped.
    """

    def __init__(
        self,
        settings: FeedSettings,
        fetcher: Optional[NewsFetcher] = None,
        store: Optional[FeedStore] = None,
        is_connected: Optional[Callable[[], bool]] = None,
        dispatch: Optional[Callable[[Callable[[], None]], None]] = None,
        on_update: Optional[Callable[[FeedUpdate], None]] = None,
    ):
        self.settings = settings
        self.fetcher = fetcher or NewsFetcher(
            connect_timeout=settings.connect_timeout,
            read_timeout=settings.read_timeout,
        )
        self.store = store or FeedStore()
        self.is_connected = is_connected or (lambda: True)
        self.dispatch = dispatch or _call_inline
        self.on_update = on_update
        self.end_reached = False
        self._destroyed = False
        self._lock = threading.RLock()

    # --- triggers ---
    def start(self) -> bool:
        """Initial load of the first page."""
        with self._lock:
            if self._destroyed or self.store.is_loading:
                return False
            if not self.is_connected():
                self._emit(FeedStatus.NO_CONNECTION)
                return False
            self._reset()
            return self._issue()

    def refresh(self) -> bool:
        with self._lock:
            if self._destroyed or self.store.is_loading:
                logger.debug("Refresh ignored; a fetch is in flight")
                return False
            if not self.is_connected():
                self._emit(FeedStatus.NO_CONNECTION)
                return False
            self._reset()
            return self._issue()

    def load_more(self) -> bool:
        with self._lock:
            if self._destroyed or self.store.is_loading or self.end_reached:
                return False
            if not self.is_connected():
                self._emit(FeedStatus.NO_CONNECTION)
                return False
            return self._issue()

    def select_section(self, section: Optional[str]) -> bool:
        """Switch the topic filter and reload from page one."""
        with self._lock:
            if self._destroyed:
                return False
            changed = self.store.set_filter(section)
            if not changed:
                return False
            self.end_reached = False
            # Any in-flight fetch is now stale and will be discarded.
            self.store.mark_loading(False)
            if not self.is_connected():
                self._emit(FeedStatus.NO_CONNECTION)
                return False
            return self._issue()

    def destroy(self) -> None:
        with self._lock:
            if self._destroyed:
                return
            self._destroyed = True
            self.store.reset()
            self.store.mark_loading(False)
        self.fetcher.close()

    def snapshot(self) -> FeedSnapshot:
        with self._lock:
            return self.store.snapshot()

    # --- internals ---
    def _reset(self) -> None:
        self.store.reset()
        self.end_reached = False

    def _issue(self) -> bool:
        page = self.store.requested_page
        url = build_query_url(
            self.settings.base_url,
            self.store.filter_section,
            page,
            self.settings.api_key,
        )
        generation = self.store.generation
        was_first_page = page == 1
        self.store.mark_loading(True)
        logger.info(
            "Loading page %d (section=%s, generation=%d)",
            page,
            self.store.filter_section or "all",
            generation,
        )
        future = self.fetcher.submit(url)
        future.add_done_callback(
            functools.partial(self._on_done, generation, was_first_page)
        )
        return True

    def _on_done(
        self, generation: int, was_first_page: bool, future: Future[FetchResult]
    ) -> None:
        result = _result_of(future)
        self.dispatch(
            functools.partial(self._complete, generation, was_first_page, result)
        )

    def _complete(
        self, generation: int, was_first_page: bool, result: FetchResult
    ) -> None:
        with self._lock:
            if self._destroyed or generation != self.store.generation:
                logger.debug(
                    "Discarding stale result (generation %d, current %d)",
                    generation,
                    self.store.generation,
                )
                return
            self.store.mark_loading(False)
            if result.ok:
                self.store.apply_page(result.page, was_first_page)
                if result.page.articles:
                    status = FeedStatus.LOADED
                elif was_first_page:
                    status = FeedStatus.EMPTY
                else:
                    self.end_reached = True
                    status = FeedStatus.END_OF_FEED
                self._emit(status, replaced=was_first_page)
                return

            self.store.apply_failure()
            if isinstance(result.error, NetworkFailure):
                status = FeedStatus.NO_CONNECTION
            else:
                status = FeedStatus.ERROR
            self._emit(status, error=result.error)

    def _emit(
        self,
        status: FeedStatus,
        error: Optional[FetchError] = None,
        replaced: bool = False,
    ) -> None:
        if self.on_update is None:
            return
        self.on_update(
            FeedUpdate(
                status=status,
                snapshot=self.store.snapshot(),
                error=error,
                replaced=replaced,
            )
        )


def _result_of(future: Future[FetchResult]) -> FetchResult:
    if future.cancelled():
        return FetchResult.failure(NetworkFailure("Fetch was cancelled"))
    exc = future.exception()
    if exc is not None:
        logger.error("Fetch raised unexpectedly: %s", exc)
        return FetchResult.failure(FetchError(str(exc)))
    return future.result()
