from __future__ import annotations

from textual.app import ComposeResult
from textual.containers import Horizontal
from textual.widgets import ListItem, Static
from textual.reactive import reactive
from rich.text import Text

from .datamodels import Article, format_published


# --- UI Widgets ---
class ArticleItem(ListItem):
    def __init__(self, article: Article):
        super().__init__()
        self.article = article

    def compose(self) -> ComposeResult:
        with Horizontal(classes="article-container"):
            yield Static(self.article.icon, classes="article-icon")
            yield Static(
                format_published(self.article.published_date, "only_date"),
                classes="article-date",
            )
            yield Static(self.article.display_title, classes="article-title")


class SkeletonItem(ListItem):
    """Placeholder row shown while the first page loads."""

    def __init__(self, bar_width: int = 48):
        super().__init__(classes="skeleton")
        self.bar_width = bar_width

    def compose(self) -> ComposeResult:
        with Horizontal(classes="article-container"):
            yield Static("░░", classes="article-icon")
            yield Static("░" * 10, classes="article-date")
            yield Static("░" * self.bar_width, classes="article-title")


class StatusBar(Static):
    loading_status = reactive("")
    keybinding_hint = reactive("")

    def on_mount(self) -> None:
        self.update_display()

    def set_keybindings(self, hint: str) -> None:
        """Set the keybinding hint text."""
        self.keybinding_hint = hint

    def update_display(self) -> None:
        """Update the status bar display."""
        status_items = []
        if self.loading_status:
            status_items.append(self.loading_status)

        if self.keybinding_hint:
            status_items.append(self.keybinding_hint)

        self.update(" | ".join(status_items))

    def watch_loading_status(self, loading_status: str) -> None:
        self.update_display()

    def watch_keybinding_hint(self, keybinding_hint: str) -> None:
        self.update_display()


class ErrorMessage(Static):
    def __init__(self, message: str):
        super().__init__(Text(message, style="bold red"))
