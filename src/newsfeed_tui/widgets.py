from __future__ import annotations

from textual.app import ComposeResult
from textual.containers import Horizontal
from textual.widgets import ListItem, Static
from textual.reactive import reactive
from rich.text import Text

from .datamodels import Article, Section


# --- UI Widgets ---
class SectionListItem(ListItem):
    def __init__(self, section: Section):
        super().__init__()
        self.section = section

    def compose(self) -> ComposeResult:
        yield Static(self.section.title)


class HeadlineItem(ListItem):
    def __init__(self, article: Article):
        super().__init__()
        self.article = article

    def compose(self) -> ComposeResult:
        with Horizontal(classes="headline-container"):
            yield Static(self.article.published_at, classes="headline-time")
            yield Static(self.article.title, classes="headline-title")


class StatusBar(Static):
    """Loading message, paging position and key hints, joined by bars."""

    loading_status = reactive("")
    keybinding_hint = reactive("")
    pages_loaded = reactive(0)
    article_count = reactive(0)

    def on_mount(self) -> None:
        self.refresh_status()

    def set_keybindings(self, hint: str) -> None:
        self.keybinding_hint = hint

    def set_paging(self, pages_loaded: int, article_count: int) -> None:
        self.pages_loaded = max(0, pages_loaded)
        self.article_count = article_count

    def paging_text(self) -> str:
        if not self.pages_loaded:
            return ""
        noun = "article" if self.article_count == 1 else "articles"
        return f"page {self.pages_loaded}, {self.article_count} {noun}"

    def refresh_status(self) -> None:
        parts = [self.loading_status, self.paging_text(), self.keybinding_hint]
        self.update(" | ".join(p for p in parts if p))

    def watch_loading_status(self, loading_status: str) -> None:
        self.refresh_status()

    def watch_keybinding_hint(self, keybinding_hint: str) -> None:
        self.refresh_status()

    def watch_pages_loaded(self, pages_loaded: int) -> None:
        self.refresh_status()

    def watch_article_count(self, article_count: int) -> None:
        self.refresh_status()

class EmptyState(Static):
    """Shown in place of the headlines when there is nothing to list."""

    def __init__(self, message: str, error: bool = False):
        style = "bold red" if error else "bold"
        super().__init__(Text(message, style=style))
