from __future__ import annotations

import logging
from dataclasses import dataclass, field
from typing import List, Optional, Tuple

from .datamodels import Article, Page

logger = logging.getLogger("newsfeed")


@dataclass
class FeedState:
    items: List[Article] = field(default_factory=list)
    requested_page: int = 1
    is_loading: bool = False
    filter_section: Optional[str] = None
    # Bumped on every reset; fetches tagged with an older value are stale.
    generation: int = 0


@dataclass(frozen=True)
class FeedSnapshot:
    items: Tuple[Article, ...]
    requested_page: int
    is_loading: bool
    filter_section: Optional[str]
    generation: int


class FeedStore:
    """
    Accumulated feed items and paging counters.

    Pure state transitions; no network or parsing. Only the feed controller
    should call the mutating methods.
    """

    def __init__(self, filter_section: Optional[str] = None):
        self.state = FeedState(filter_section=filter_section or None)

    @property
    def items(self) -> List[Article]:
        return self.state.items

    @property
    def requested_page(self) -> int:
        return self.state.requested_page

    @property
    def is_loading(self) -> bool:
        return self.state.is_loading

    @property
    def filter_section(self) -> Optional[str]:
        return self.state.filter_section

    @property
    def generation(self) -> int:
        return self.state.generation

    def reset(self) -> None:
        self.state.items = []
        self.state.requested_page = 1
        self.state.generation += 1

    def set_filter(self, section: Optional[str]) -> bool:
        """Select a section filter; resets the feed when it changed."""
        section = section or None
        if section == self.state.filter_section:
            return False
        self.state.filter_section = section
        self.reset()
        return True

    def apply_page(self, page: Page, was_first_page: bool) -> None:
        if was_first_page:
            self.state.items = list(page.articles)
        else:
            self.state.items.extend(page.articles)
        self.state.requested_page = page.page_number + 1
        logger.debug(
            "Applied page %d (%d articles), %d items total",
            page.page_number,
            len(page.articles),
            len(self.state.items),
        )

    def apply_failure(self) -> None:
        logger.debug("Fetch failed; keeping %d items", len(self.state.items))

    def mark_loading(self, loading: bool) -> None:
        self.state.is_loading = loading

    def snapshot(self) -> FeedSnapshot:
        state = self.state
        return FeedSnapshot(
            items=tuple(state.items),
            requested_page=state.requested_page,
            is_loading=state.is_loading,
            filter_section=state.filter_section,
            generation=state.generation,
        )
