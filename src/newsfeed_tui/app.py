from __future__ import annotations

import logging
from typing import Any, Callable, List, Optional

from textual.app import App, ComposeResult
from textual.binding import Binding
from textual.containers import Horizontal, Vertical
from textual.message import Message
from textual.widgets import Header, ListView, LoadingIndicator, Rule, Static

from .config import UI_DEFAULTS, FeedSettings
from .controller import FeedController, FeedStatus, FeedUpdate
from .datamodels import Section
from .fetcher import is_connected
from .widgets import EmptyState, HeadlineItem, SectionListItem, StatusBar

logger = logging.getLogger("newsfeed")

STATUS_MESSAGES = {
    FeedStatus.NO_CONNECTION: "No connection.",
    FeedStatus.ERROR: "Something went wrong.",
    FeedStatus.EMPTY: "No results.",
    FeedStatus.END_OF_FEED: "No more articles.",
}


class FeedApp(App):
    class FetchCompleted(Message):
        """A fetch finished; apply its result on the app's thread."""

        def __init__(self, apply: Callable[[], None]):
            self.apply = apply
            super().__init__()

    TITLE = "News Feed"
    SUB_TITLE = "Overview"

    CSS = """
    #left { width: 24; }
    .pane-title { text-style: bold; padding: 0 1; }
    .headline-time { width: 22; color: $text-muted; }
    .headline-title { width: 1fr; }
    EmptyState { padding: 1 2; }
    """

    BINDINGS = [
        Binding("q", "quit", "Quit"),
        Binding("r", "refresh", "Refresh"),
        Binding("n", "load_more", "More"),
        Binding("left", "nav_left", "Navigate Left"),
        Binding("right", "nav_right", "Navigate Right"),
        Binding("ctrl+l", "toggle_left_pane", "Toggle Sections"),
    ]

    def __init__(
        self,
        settings: FeedSettings,
        theme: Optional[str] = None,
        config: Optional[dict[str, Any]] = None,
        initial_section: Optional[str] = None,
        controller: Optional[FeedController] = None,
        **kwargs: Any,
    ):
        super().__init__(**kwargs)
        self.feed_settings = settings
        self.config = config or {}
        self._theme_name = theme
        self.sections: List[Section] = list(settings.sections)
        self.current_section = self._find_section(initial_section)
        self._rendered = 0
        self.controller = controller or FeedController(
            settings,
            is_connected=lambda: is_connected(settings.base_url),
            dispatch=self._dispatch,
            on_update=self._on_feed_update,
        )
        if initial_section:
            self.controller.store.set_filter(self.current_section.key)

    def _find_section(self, key: Optional[str]) -> Section:
        for section in self.sections:
            if section.key == key or (key and section.title.lower() == key.lower()):
                return section
        return Section(title=key, key=key) if key else Section("Overview")

    def compose(self) -> ComposeResult:
        yield Header()
        with Horizontal(id="main"):
            with Vertical(id="left"):
                yield Static("Sections", classes="pane-title")
                yield ListView(
                    *[SectionListItem(s) for s in self.sections], id="sections-list"
                )
            yield Rule(orientation="vertical")
            with Vertical(id="right"):
                yield Static("Headlines", classes="pane-title")
                yield ListView(id="headlines-list")
        yield StatusBar()

    def on_mount(self) -> None:
        if self._theme_name:
            try:
                self.theme = self._theme_name
            except Exception as e:
                logger.warning("Unknown theme %s: %s", self._theme_name, e)
        self.sub_title = self.current_section.title

        keybindings_text = self.config.get("ui", {}).get(
            "statusbar_keybindings", UI_DEFAULTS["statusbar_keybindings"]
        )
        self.query_one(StatusBar).set_keybindings(
            keybindings_text.format(color="$accent")
        )
        self.query_one("#headlines-list", ListView).focus()
        self._begin_load(self.controller.start, f"Loading {self.current_section.title}...")

    def on_unmount(self) -> None:
        self.controller.destroy()

    # --- feed plumbing ---
    def _dispatch(self, fn: Callable[[], None]) -> None:
        """Run a fetch completion on the app's thread."""
        if not self.is_running:
            logger.debug("App not running; dropping fetch completion")
            return
        # post_message is thread-safe and never blocks the fetch worker
        self.post_message(self.FetchCompleted(fn))

    def on_feed_app_fetch_completed(self, message: FeedApp.FetchCompleted) -> None:
        message.apply()

    def _begin_load(self, trigger: Callable[[], bool], message: str) -> None:
        if trigger():
            self._clear_empty_state()
            self.query_one(StatusBar).loading_status = message
            if self.controller.store.requested_page == 1:
                self._reset_headlines()
                self.query_one("#headlines-list", ListView).mount(LoadingIndicator())

    def _on_feed_update(self, update: FeedUpdate) -> None:
        headlines = self.query_one("#headlines-list", ListView)
        try:
            headlines.query_one(LoadingIndicator).remove()
        except Exception:
            pass

        if update.replaced or len(update.snapshot.items) < self._rendered:
            self._reset_headlines()
        for article in update.snapshot.items[self._rendered :]:
            headlines.append(HeadlineItem(article))
        self._rendered = len(update.snapshot.items)
        if update.replaced and self._rendered:
            headlines.index = 0

        message = STATUS_MESSAGES.get(update.status, "")
        status_bar = self.query_one(StatusBar)
        status_bar.loading_status = message
        status_bar.set_paging(update.snapshot.requested_page - 1, self._rendered)
        if update.status is FeedStatus.LOADED:
            self._clear_empty_state()
        elif not self._rendered:
            self._show_empty_state(message, error=update.status is not FeedStatus.EMPTY)
        elif update.status in (FeedStatus.NO_CONNECTION, FeedStatus.ERROR):
            self.notify(message, severity="error")
        if update.error is not None:
            logger.error("Feed load failed: %s", update.error)

    def _reset_headlines(self) -> None:
        self.query_one("#headlines-list", ListView).clear()
        self._rendered = 0

    def _show_empty_state(self, message: str, error: bool) -> None:
        self._clear_empty_state()
        self.query_one("#right").mount(EmptyState(message, error=error))

    def _clear_empty_state(self) -> None:
        for widget in self.query(EmptyState):
            widget.remove()

    # --- events & actions ---
    def on_list_view_selected(self, event: ListView.Selected) -> None:
        if event.list_view.id == "sections-list":
            if isinstance(event.item, SectionListItem):
                self._select_section(event.item.section)

    def on_list_view_highlighted(self, event: ListView.Highlighted) -> None:
        if event.list_view.id != "headlines-list" or event.list_view.index is None:
            return
        # Highlight reached the last headline: fetch the next page.
        if event.list_view.index >= self._rendered - 1 and self._rendered:
            self.action_load_more()

    def _select_section(self, section: Section) -> None:
        self.current_section = section
        self.sub_title = section.title
        if self.controller.select_section(section.key):
            self._clear_empty_state()
            self.query_one(StatusBar).loading_status = f"Loading {section.title}..."
            self._reset_headlines()
            self.query_one("#headlines-list", ListView).mount(LoadingIndicator())
        elif not self.controller.store.items:
            self._reset_headlines()
        self.query_one("#headlines-list", ListView).focus()

    def action_refresh(self) -> None:
        self._begin_load(self.controller.refresh, "Refreshing...")

    def action_load_more(self) -> None:
        self._begin_load(self.controller.load_more, "Loading more...")

    def action_nav_left(self) -> None:
        try:
            if self.query_one("#headlines-list").has_focus:
                self.query_one("#sections-list").focus()
        except Exception:
            pass

    def action_nav_right(self) -> None:
        try:
            if self.query_one("#sections-list").has_focus:
                self.query_one("#headlines-list").focus()
        except Exception:
            pass

    def action_toggle_left_pane(self) -> None:
        """Toggle the left pane."""
        left_pane = self.query_one("#left")
        left_pane.display = not left_pane.display
