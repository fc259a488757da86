from __future__ import annotations
from dataclasses import dataclass
from typing import Optional, Tuple

# --- Data models ---
@dataclass(frozen=True)
class Article:
    title: str
    published_at: str
    url: str


@dataclass(frozen=True)
class Page:
    """One batch of articles plus the page number the server says it served."""

    articles: Tuple[Article, ...]
    page_number: int

    def __len__(self) -> int:
        return len(self.articles)


@dataclass(frozen=True)
class Section:
    title: str
    key: Optional[str] = None
