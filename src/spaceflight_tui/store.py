"""Paginated article state shared by the list screen.

The store owns the loaded articles, the next-page cursor and the active search
term. Network calls run on an executor; every state change and every future
resolution goes through ``dispatch`` so that they happen on one designated
context (the Textual app thread, via ``App.call_from_thread``). Done-callbacks
added to the returned futures therefore also run on that context.
"""

from __future__ import annotations

import logging
import threading
from concurrent.futures import Executor, Future, InvalidStateError, ThreadPoolExecutor
from dataclasses import dataclass, field
from functools import partial
from typing import Any, Callable, List, Optional

from .datamodels import Article, ArticlePage
from .errors import FetchError
from .sources.base import ArticleFetcher

logger = logging.getLogger("spaceflight")

Dispatch = Callable[..., Any]


@dataclass(frozen=True)
class FetchResult:
    """Outcome of one store operation: articles on success, else an error."""

    articles: List[Article] = field(default_factory=list)
    error: Optional[FetchError] = None

    @property
    def ok(self) -> bool:
        return self.error is None


def _serialized_dispatch() -> Dispatch:
    lock = threading.Lock()

    def dispatch(fn: Callable[..., Any], *args: Any) -> Any:
        with lock:
            return fn(*args)

    return dispatch


class PaginatedArticleStore:
    def __init__(
        self,
        fetcher: ArticleFetcher,
        executor: Optional[Executor] = None,
        dispatch: Optional[Dispatch] = None,
        deduplicate: bool = False,
    ):
        self.fetcher = fetcher
        self.deduplicate = deduplicate
        self._owns_executor = executor is None
        self._executor = executor or ThreadPoolExecutor(
            max_workers=2, thread_name_prefix="articles"
        )
        self._dispatch = dispatch or _serialized_dispatch()
        self._articles: List[Article] = []
        self._next_page_url: Optional[str] = None
        self._search_text: Optional[str] = None
        self._generation = 0
        self._mutations = 0

    @property
    def articles(self) -> List[Article]:
        return list(self._articles)

    @property
    def next_page_url(self) -> Optional[str]:
        return self._next_page_url

    @property
    def search_text(self) -> Optional[str]:
        return self._search_text

    @property
    def has_more(self) -> bool:
        return self._next_page_url is not None

    def load_initial(self, text: Optional[str] = None) -> Future:
        """Start a new result set, optionally filtered by ``text``.

        Resolves to a :class:`FetchResult` carrying the full replaced list.
        """
        previous = (self._next_page_url, self._search_text)
        previous_generation = self._generation
        self._generation += 1
        generation = self._generation
        mutations = self._mutations
        self._next_page_url = None
        self._search_text = text
        logger.info("Loading articles (search=%r)", text)

        def apply(page: ArticlePage) -> List[Article]:
            self._articles = list(page.results)
            self._next_page_url = page.next
            return list(self._articles)

        def rollback() -> None:
            # A newer initial load owns the cursor now.
            if self._generation != generation:
                return
            self._search_text = previous[1]
            # Keep the cursor of a page applied since the reset.
            if self._mutations == mutations:
                self._next_page_url = previous[0]

        try:
            return self._submit(text, None, apply, rollback)
        except RuntimeError:
            self._generation = previous_generation
            self._next_page_url, self._search_text = previous
            raise

    def load_more(self) -> Optional[Future]:
        """Fetch the page after the current cursor and append it.

        Returns ``None`` without doing anything when there is no cursor.
        Otherwise resolves to a :class:`FetchResult` with only the appended
        articles.
        """
        page_url = self._next_page_url
        if page_url is None:
            logger.debug("No next page, skipping load more")
            return None
        logger.info("Loading more articles from %s", page_url)

        def apply(page: ArticlePage) -> List[Article]:
            new_articles = list(page.results)
            if self.deduplicate:
                new_articles = self._without_known(new_articles)
            self._articles.extend(new_articles)
            self._next_page_url = page.next
            return new_articles

        return self._submit(self._search_text, page_url, apply, None)

    def close(self) -> None:
        if self._owns_executor:
            self._executor.shutdown(wait=False)

    def _without_known(self, articles: List[Article]) -> List[Article]:
        seen = {a.id for a in self._articles if a.id is not None}
        out: List[Article] = []
        for a in articles:
            if a.id is not None:
                if a.id in seen:
                    continue
                seen.add(a.id)
            out.append(a)
        return out

    def _submit(
        self,
        search: Optional[str],
        page_url: Optional[str],
        apply: Callable[[ArticlePage], List[Article]],
        rollback: Optional[Callable[[], None]],
    ) -> Future:
        future: Future = Future()
        job = self._executor.submit(
            self._run, future, search, page_url, apply, rollback
        )
        job.add_done_callback(partial(_report_job, future))
        return future

    def _run(
        self,
        future: Future,
        search: Optional[str],
        page_url: Optional[str],
        apply: Callable[[ArticlePage], List[Article]],
        rollback: Optional[Callable[[], None]],
    ) -> None:
        try:
            page = self.fetcher.fetch_articles(search=search, page_url=page_url)
        except FetchError as e:
            logger.error("Article fetch failed: %s", e)
            self._dispatch(self._fail, future, e, rollback)
        except Exception as e:
            logger.exception("Unexpected error while fetching articles")
            self._dispatch(future.set_exception, e)
        else:
            self._dispatch(self._succeed, future, page, apply)

    def _succeed(
        self,
        future: Future,
        page: ArticlePage,
        apply: Callable[[ArticlePage], List[Article]],
    ) -> None:
        articles = apply(page)
        self._mutations += 1
        logger.debug(
            "Store now holds %d articles (next=%s)",
            len(self._articles),
            self._next_page_url,
        )
        future.set_result(FetchResult(articles=articles))

    def _fail(
        self,
        future: Future,
        error: FetchError,
        rollback: Optional[Callable[[], None]],
    ) -> None:
        if rollback is not None:
            rollback()
        future.set_result(FetchResult(error=error))


def _report_job(future: Future, job: Future) -> None:
    """Resolve ``future`` when the background job died before it could."""
    if job.cancelled():
        future.cancel()
        return
    error = job.exception()
    if error is None:
        return
    logger.error("Article job failed: %s", error, exc_info=error)
    try:
        future.set_exception(error)
    except InvalidStateError:
        # resolved before dispatch raised
        pass
