from __future__ import annotations

import logging
import webbrowser
from typing import Optional

from textual import events
from textual.app import ComposeResult
from textual.binding import Binding
from textual.containers import Center, Horizontal, Vertical, VerticalScroll
from textual.screen import ModalScreen, Screen
from textual.worker import Worker, WorkerState
from textual.widgets import Button, Footer, Header, Label, Markdown, Static

from .cache import CachedImage
from .datamodels import Article, format_published
from .images import ImageLoader, secure_url
from .widgets import StatusBar

logger = logging.getLogger("spaceflight")

SPLASH_FRAMES = ("🌍", "🌎", "🌏")
SPLASH_FRAME_INTERVAL = 0.15


class SplashScreen(Screen):
    """Spinning globe shown before the article list."""

    def __init__(self, duration: float):
        super().__init__()
        self.duration = duration
        self._frame = 0
        self._done = False

    def compose(self) -> ComposeResult:
        with Vertical(id="splash"):
            yield Static(SPLASH_FRAMES[0], id="splash-globe")
            yield Static("Spaceflight News", id="splash-title")

    def on_mount(self) -> None:
        self.set_interval(SPLASH_FRAME_INTERVAL, self._next_frame)
        self.set_timer(self.duration, self._finish)

    def on_key(self, event: events.Key) -> None:
        event.stop()
        self._finish()

    def _next_frame(self) -> None:
        self._frame = (self._frame + 1) % len(SPLASH_FRAMES)
        self.query_one("#splash-globe", Static).update(SPLASH_FRAMES[self._frame])

    def _finish(self) -> None:
        if self._done:
            return
        self._done = True
        self.dismiss()


class RetryScreen(ModalScreen[bool]):
    """Generic failure prompt; dismisses with ``True`` when retry is chosen."""

    BINDINGS = [
        Binding("escape", "cancel", "Cancel"),
        Binding("enter", "retry", "Retry", show=False),
    ]

    def __init__(self, message: str):
        super().__init__()
        self.message = message

    def compose(self) -> ComposeResult:
        with Vertical(id="retry-dialog"):
            yield Label(self.message, classes="error-title")
            with Horizontal(id="retry-buttons"):
                yield Button("Retry", id="retry", variant="primary")
                yield Button("Cancel", id="cancel")

    def on_button_pressed(self, event: Button.Pressed) -> None:
        self.dismiss(event.button.id == "retry")

    def action_retry(self) -> None:
        self.dismiss(True)

    def action_cancel(self) -> None:
        self.dismiss(False)


class ArticleDetailScreen(Screen):
    BINDINGS = [
        Binding("escape,q,b,left", "app.pop_screen", "Back"),
        Binding("o", "open_in_browser", "Open article"),
        Binding("i", "open_image", "Open image"),
        Binding("down", "scroll_down", "Scroll Down"),
        Binding("up", "scroll_up", "Scroll Up"),
    ]

    def __init__(self, article: Article, image_loader: ImageLoader):
        super().__init__()
        self.article = article
        self.image_loader = image_loader

    def compose(self) -> ComposeResult:
        article = self.article
        yield Header()
        with VerticalScroll(id="detail-scroll"):
            yield Static(article.display_title, classes="detail-title")
            yield Static(article.authors_formatted, classes="detail-authors")
            yield Static(
                format_published(article.published_date), classes="detail-date"
            )
            yield Static("🖼  loading image…", id="image-status", classes="detail-image")
            yield Markdown(article.plain_summary, id="detail-summary")
            with Center():
                yield Button("Read article", id="open-article", variant="primary")
        yield StatusBar()
        yield Footer()

    def on_mount(self) -> None:
        self.title = "Article detail"
        self.sub_title = self.article.display_title
        self.query_one("#detail-scroll").focus()

        keybinding_style = self.app.get_keybinding_style()
        self.query_one(StatusBar).set_keybindings(
            f"[b {keybinding_style}]o[/] to open, [b {keybinding_style}]i[/] for image"
        )
        self.run_worker(
            lambda: self.image_loader.load(self.article.image_url),
            name="image_loader",
            thread=True,
        )

    def on_worker_state_changed(self, event: Worker.StateChanged) -> None:
        if getattr(event.worker, "name", None) != "image_loader":
            return
        if event.state is WorkerState.SUCCESS:
            self._show_image_status(event.worker.result)
        elif event.state is WorkerState.ERROR:
            logger.error("Image loader worker failed: %s", event.worker.error)
            self._show_image_status(None)

    def _show_image_status(self, image: Optional[CachedImage]) -> None:
        status = self.query_one("#image-status", Static)
        if image is None:
            status.update("🖼  no image")
            return
        size_kb = max(1, round(len(image.data) / 1024))
        status.update(f"🖼  {image.content_type}, {size_kb} KB, press i to open")

    def on_button_pressed(self, event: Button.Pressed) -> None:
        if event.button.id == "open-article":
            self.action_open_in_browser()

    def action_open_in_browser(self) -> None:
        if self.article.url:
            webbrowser.open(self.article.url)
        else:
            self.app.notify("This article has no link.", severity="warning")

    def action_open_image(self) -> None:
        if self.article.image_url:
            webbrowser.open(secure_url(self.article.image_url))

    def action_scroll_down(self) -> None:
        self.query_one("#detail-scroll").scroll_down()

    def action_scroll_up(self) -> None:
        self.query_one("#detail-scroll").scroll_up()
