from __future__ import annotations

from dataclasses import dataclass, field
from datetime import datetime, timezone
from typing import Any, Dict, List, Optional, Tuple

from bs4 import BeautifulSoup

from .errors import DecodingError

PLANET_ICONS = ("🪐", "🌍", "🌑")

DATE_FORMATS = {
    "day_month_year_time": "%d %b %Y, %H:%M",
    "short_date_time": "%d/%m/%Y %H:%M",
    "only_date": "%d/%m/%Y",
    "only_time": "%H:%M",
    "iso_date": "%Y-%m-%dT%H:%M:%S%z",
}


def _field(obj: Dict[str, Any], key: str, types: Tuple[type, ...]) -> Any:
    """Return ``obj[key]`` if absent/null or of one of ``types``."""
    value = obj.get(key)
    if value is None:
        return None
    # bool is an int subclass but never a valid JSON integer here
    if isinstance(value, bool) and bool not in types:
        raise DecodingError(f"field {key!r}: expected {types[0].__name__}, got bool")
    if not isinstance(value, types):
        raise DecodingError(
            f"field {key!r}: expected {types[0].__name__}, got {type(value).__name__}"
        )
    return value


def _expect_object(obj: Any, what: str) -> Dict[str, Any]:
    if not isinstance(obj, dict):
        raise DecodingError(f"{what}: expected a JSON object, got {type(obj).__name__}")
    return obj


def parse_published(value: Optional[str]) -> Optional[datetime]:
    """Parse an ISO-8601 timestamp; naive values are taken as UTC."""
    if not value:
        return None
    text = value.strip()
    if text.endswith(("Z", "z")):
        text = text[:-1] + "+00:00"
    try:
        parsed = datetime.fromisoformat(text)
    except ValueError:
        return None
    if parsed.tzinfo is None:
        parsed = parsed.replace(tzinfo=timezone.utc)
    return parsed


def format_published(dt: datetime, style: str = "day_month_year_time") -> str:
    """Render ``dt`` in local time using one of ``DATE_FORMATS``."""
    return dt.astimezone().strftime(DATE_FORMATS[style])


# --- Data models ---
@dataclass(frozen=True)
class Author:
    name: Optional[str] = None

    @classmethod
    def from_dict(cls, obj: Any) -> Author:
        obj = _expect_object(obj, "author")
        return cls(name=_field(obj, "name", (str,)))


@dataclass(frozen=True)
class Article:
    id: Optional[int] = None
    title: Optional[str] = None
    summary: Optional[str] = None
    image_url: Optional[str] = None
    published_at: Optional[str] = None
    url: Optional[str] = None
    authors: Optional[Tuple[Author, ...]] = None

    @classmethod
    def from_dict(cls, obj: Any) -> Article:
        obj = _expect_object(obj, "article")
        authors = _field(obj, "authors", (list,))
        return cls(
            id=_field(obj, "id", (int,)),
            title=_field(obj, "title", (str,)),
            summary=_field(obj, "summary", (str,)),
            image_url=_field(obj, "image_url", (str,)),
            published_at=_field(obj, "published_at", (str,)),
            url=_field(obj, "url", (str,)),
            authors=(
                tuple(Author.from_dict(a) for a in authors)
                if authors is not None
                else None
            ),
        )

    @property
    def display_title(self) -> str:
        return self.title or ""

    @property
    def published_date(self) -> datetime:
        """Publication time, or now when missing or unparsable."""
        return parse_published(self.published_at) or datetime.now(timezone.utc)

    @property
    def authors_formatted(self) -> str:
        if not self.authors:
            return ""
        return "by " + ", ".join(a.name or "" for a in self.authors)

    @property
    def plain_summary(self) -> str:
        if not self.summary:
            return ""
        return BeautifulSoup(self.summary, "lxml").get_text(" ", strip=True)

    @property
    def icon(self) -> str:
        return PLANET_ICONS[(self.id or 0) % len(PLANET_ICONS)]


@dataclass(frozen=True)
class ArticlePage:
    results: List[Article] = field(default_factory=list)
    count: Optional[int] = None
    previous: Optional[str] = None
    next: Optional[str] = None

    @classmethod
    def from_dict(cls, obj: Any) -> ArticlePage:
        obj = _expect_object(obj, "response")
        results = _field(obj, "results", (list,)) or []
        return cls(
            results=[Article.from_dict(r) for r in results],
            count=_field(obj, "count", (int,)),
            previous=_field(obj, "previous", (str,)),
            next=_field(obj, "next", (str,)),
        )
