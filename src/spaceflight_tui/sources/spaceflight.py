from __future__ import annotations

import logging
from typing import Any, Dict, List, Optional, Tuple
from urllib.parse import urlencode, urlsplit

import requests

from ..config import (
    API_BASE_URL,
    ARTICLE_ORDERING,
    DEFAULT_PAGE_SIZE,
    HTTP_TIMEOUT,
    REQUEST_HEADERS,
)
from ..datamodels import ArticlePage
from ..errors import DecodingError, InvalidURLError, NoDataError, TransportError
from .base import ArticleFetcher

logger = logging.getLogger("spaceflight")


class SpaceflightFetcher(ArticleFetcher):
    """Fetches article pages from the Spaceflight News API."""

    def __init__(
        self,
        config: Optional[Dict[str, Any]] = None,
        session: Optional[requests.Session] = None,
    ):
        self.config = config or {}
        self.base_url: str = self.config.get("api_base_url", API_BASE_URL)
        self.page_size: int = self.config.get("page_size", DEFAULT_PAGE_SIZE)
        self.timeout: float = self.config.get("http_timeout", HTTP_TIMEOUT)
        self.session = session or self._create_session()

    def _create_session(self) -> requests.Session:
        s = requests.Session()
        s.headers.update(REQUEST_HEADERS)
        return s

    def build_url(self, search: Optional[str] = None) -> str:
        """Build the first-page URL for an optional search term."""
        _check_absolute(self.base_url)
        params: List[Tuple[str, str]] = [
            ("ordering", ARTICLE_ORDERING),
            ("limit", str(self.page_size)),
        ]
        if search:
            params.append(("search", search))
        try:
            query = urlencode(params)
        except UnicodeEncodeError as e:
            raise InvalidURLError(f"Cannot encode search term {search!r}") from e
        separator = "&" if urlsplit(self.base_url).query else "?"
        return f"{self.base_url}{separator}{query}"

    def fetch_articles(
        self, search: Optional[str] = None, page_url: Optional[str] = None
    ) -> ArticlePage:
        if page_url is not None:
            _check_absolute(page_url)
            url = page_url
        else:
            url = self.build_url(search)

        logger.debug("Fetching %s", url)
        try:
            resp = self.session.get(url, timeout=self.timeout)
            resp.raise_for_status()
        except requests.RequestException as e:
            logger.warning("Request failed for %s: %s", url, e)
            raise TransportError(str(e), original=e) from e

        if not resp.content:
            logger.warning("Empty response body from %s", url)
            raise NoDataError(f"No data returned from {url}")

        try:
            payload = resp.json()
        except ValueError as e:
            logger.warning("Invalid JSON from %s: %s", url, e)
            raise DecodingError(f"Invalid JSON from {url}: {e}") from e

        page = ArticlePage.from_dict(payload)
        logger.debug(
            "Fetched %d articles from %s (next=%s)", len(page.results), url, page.next
        )
        return page


def _check_absolute(url: str) -> None:
    try:
        parts = urlsplit(url)
    except ValueError as e:
        raise InvalidURLError(f"Malformed URL {url!r}") from e
    if parts.scheme not in ("http", "https") or not parts.netloc:
        raise InvalidURLError(f"Not an absolute http(s) URL: {url!r}")
