from __future__ import annotations

import logging
from concurrent.futures import Future
from typing import Any, Callable, Dict, List, Optional

from textual.app import App, ComposeResult
from textual.binding import Binding
from textual.widgets import Header, Input, ListItem, ListView

from .cache import ImageCache
from .config import (
    CACHE_DIR,
    GENERIC_LOAD_ERROR,
    GENERIC_LOAD_MORE_ERROR,
    IMAGE_CACHE_TTL,
    LOAD_MORE_THRESHOLD,
    UI_DEFAULTS,
)
from .datamodels import Article
from .images import ImageLoader
from .screens import ArticleDetailScreen, RetryScreen, SplashScreen
from .sources.base import ArticleFetcher
from .sources.spaceflight import SpaceflightFetcher
from .store import FetchResult, PaginatedArticleStore
from .themes import load_themes
from .widgets import ArticleItem, ErrorMessage, SkeletonItem, StatusBar

logger = logging.getLogger("spaceflight")

SKELETON_ROWS = 8


class SpaceflightApp(App):
    TITLE = "Spaceflight News"
    SUB_TITLE = "Latest launches, missions and science"

    CSS_PATH = "app.css"

    BINDINGS = [
        Binding("q", "quit", "Quit"),
        Binding("r", "refresh", "Refresh"),
        Binding("/", "focus_search", "Search"),
    ]

    def __init__(
        self,
        theme: Optional[str] = None,
        config: Optional[Dict[str, Any]] = None,
        search: Optional[str] = None,
        splash: bool = True,
        fetcher: Optional[ArticleFetcher] = None,
        image_loader: Optional[ImageLoader] = None,
        **kwargs: Any,
    ):
        super().__init__(**kwargs)
        self.config = config or {}
        self._theme_name = theme or self.config.get("theme") or "spaceflight-dark"
        self.initial_search = search
        self.show_splash = splash
        self.fetcher = fetcher or SpaceflightFetcher(self.config)
        self.image_loader = image_loader or ImageLoader(
            ImageCache(CACHE_DIR, self.config.get("image_cache_ttl", IMAGE_CACHE_TTL))
        )
        self.store = PaginatedArticleStore(
            self.fetcher,
            dispatch=self.call_from_thread,
            deduplicate=self.config.get("deduplicate_articles", False),
        )
        self._loading_more = False

    @property
    def theme_name(self) -> str:
        return self._theme_name

    def get_keybinding_style(self) -> str:
        return "$accent"

    def compose(self) -> ComposeResult:
        yield Header()
        yield Input(placeholder="Search articles...", id="search")
        yield ListView(id="articles-list")
        yield StatusBar()

    def on_mount(self) -> None:
        themes = load_themes(self.config)
        for theme in themes.values():
            self.register_theme(theme)
        if self._theme_name not in themes:
            logger.warning("Unknown theme %r, using spaceflight-dark", self._theme_name)
            self._theme_name = "spaceflight-dark"
        self.theme = self._theme_name

        keybindings_text = self.config.get("ui", {}).get(
            "statusbar_keybindings", UI_DEFAULTS["statusbar_keybindings"]
        )
        self._status_bar().set_keybindings(
            keybindings_text.format(color=self.get_keybinding_style())
        )
        if self.initial_search:
            self._search_input().value = self.initial_search
        self._articles_list().focus()

        splash_seconds = self.config.get("splash_seconds", 0)
        if self.show_splash and splash_seconds > 0:
            self.push_screen(
                SplashScreen(splash_seconds),
                lambda _: self.load_articles(self.initial_search),
            )
        else:
            self.load_articles(self.initial_search)

    def on_unmount(self) -> None:
        self.store.close()

    # The list screen stays at the bottom of the stack; detail and retry
    # screens are pushed over it while loads are still in flight.
    def _articles_list(self) -> ListView:
        return self.screen_stack[0].query_one("#articles-list", ListView)

    def _search_input(self) -> Input:
        return self.screen_stack[0].query_one("#search", Input)

    def _status_bar(self) -> StatusBar:
        return self.screen_stack[0].query_one(StatusBar)

    # --- Loading ---
    def load_articles(self, text: Optional[str] = None) -> None:
        """Replace the list with the first page, optionally filtered by ``text``."""
        self._status_bar().loading_status = (
            f"Searching for '{text}'..." if text else "Loading articles..."
        )
        articles_list = self._articles_list()
        articles_list.clear()
        articles_list.extend(SkeletonItem() for _ in range(SKELETON_ROWS))

        future = self.store.load_initial(text)
        future.add_done_callback(lambda f: self._on_articles_loaded(f, text))

    def load_more(self) -> None:
        if self._loading_more:
            return
        future = self.store.load_more()
        if future is None:
            return
        self._loading_more = True
        self._status_bar().loading_status = "Loading more..."
        future.add_done_callback(self._on_more_loaded)

    def _on_articles_loaded(self, future: Future, text: Optional[str]) -> None:
        result = _result_of(future)
        if result is None or not result.ok:
            if result is not None:
                logger.error("Initial load failed (search=%r): %s", text, result.error)
            self._render_articles(self.store.articles)
            self._show_retry(GENERIC_LOAD_ERROR, lambda: self.load_articles(text))
            return
        self._render_articles(result.articles)

    def _on_more_loaded(self, future: Future) -> None:
        self._loading_more = False
        result = _result_of(future)
        if result is None or not result.ok:
            if result is not None:
                logger.error("Load more failed: %s", result.error)
            self._update_status()
            self._show_retry(GENERIC_LOAD_MORE_ERROR, self.load_more)
            return
        articles_list = self._articles_list()
        articles_list.extend(ArticleItem(a) for a in result.articles)
        self._update_status()

    def _render_articles(self, articles: List[Article]) -> None:
        articles_list = self._articles_list()
        articles_list.clear()
        if not articles:
            articles_list.append(ListItem(ErrorMessage("No articles found."), disabled=True))
        else:
            articles_list.extend(ArticleItem(a) for a in articles)
        self._update_status()

    def _update_status(self) -> None:
        count = len(self.store.articles)
        more = " (scroll for more)" if self.store.has_more else ""
        search = self.store.search_text
        prefix = f"'{search}': " if search else ""
        self._status_bar().loading_status = f"{prefix}{count} articles{more}"

    def _show_retry(self, message: str, retry: Callable[[], None]) -> None:
        def on_dismiss(confirmed: Optional[bool]) -> None:
            if confirmed:
                retry()

        self.push_screen(RetryScreen(message), on_dismiss)

    # --- Events ---
    def on_list_view_highlighted(self, event: ListView.Highlighted) -> None:
        if event.list_view.id != "articles-list":
            return
        if not isinstance(event.item, ArticleItem):
            return
        index = event.list_view.index
        if index is not None and index >= len(self.store.articles) - LOAD_MORE_THRESHOLD:
            self.load_more()

    def on_list_view_selected(self, event: ListView.Selected) -> None:
        if isinstance(event.item, ArticleItem):
            self.push_screen(ArticleDetailScreen(event.item.article, self.image_loader))

    def on_input_submitted(self, event: Input.Submitted) -> None:
        if event.input.id != "search":
            return
        text = event.value.strip()
        if not text:
            return
        self.load_articles(text)
        self._articles_list().focus()

    # --- Actions ---
    def action_refresh(self) -> None:
        self._search_input().value = ""
        self.load_articles(None)

    def action_focus_search(self) -> None:
        self._search_input().focus()


def _result_of(future: Future) -> Optional[FetchResult]:
    try:
        return future.result()
    except Exception:
        logger.exception("Article load crashed")
        return None
