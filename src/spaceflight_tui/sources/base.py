from __future__ import annotations

from abc import ABC, abstractmethod
from typing import Optional

from ..datamodels import ArticlePage


class ArticleFetcher(ABC):
    """Abstract base class for an articles endpoint."""

    @abstractmethod
    def fetch_articles(
        self, search: Optional[str] = None, page_url: Optional[str] = None
    ) -> ArticlePage:
        """Fetch one page of articles.

        ``page_url`` is a cursor returned by a previous page and is requested
        verbatim; ``search`` only applies to a first page. Raises
        :class:`~spaceflight_tui.errors.FetchError` on failure.
        """
        pass
