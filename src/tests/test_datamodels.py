from __future__ import annotations

import re
from datetime import datetime, timedelta, timezone

import pytest

from spaceflight_tui.datamodels import (
    PLANET_ICONS,
    Article,
    ArticlePage,
    Author,
    format_published,
    parse_published,
)
from spaceflight_tui.errors import DecodingError


def test_article_from_full_object():
    article = Article.from_dict(
        {
            "id": 42,
            "title": "Starliner docks",
            "summary": "Boeing's capsule reached the ISS.",
            "image_url": "http://img.example/42.jpg",
            "published_at": "2024-06-07T17:34:00Z",
            "url": "https://news.example/42",
            "authors": [{"name": "Ada"}, {"name": "Grace"}],
            "featured": False,
        }
    )
    assert article.id == 42
    assert article.title == "Starliner docks"
    assert article.authors == (Author("Ada"), Author("Grace"))
    assert article.published_date == datetime(2024, 6, 7, 17, 34, tzinfo=timezone.utc)


def test_article_with_every_field_missing():
    article = Article.from_dict({})
    assert article == Article()
    assert article.display_title == ""
    assert article.authors_formatted == ""
    assert article.plain_summary == ""


def test_null_fields_are_absent():
    article = Article.from_dict({"id": None, "title": None, "authors": None})
    assert article.id is None
    assert article.authors is None


@pytest.mark.parametrize(
    "obj",
    [
        {"id": "42"},
        {"id": True},
        {"title": 3},
        {"authors": "Ada"},
        {"authors": [{"name": 1}]},
        {"authors": ["Ada"]},
    ],
)
def test_wrong_field_types_raise(obj):
    with pytest.raises(DecodingError):
        Article.from_dict(obj)


def test_authors_formatted():
    article = Article(authors=(Author("Ada"), Author(None), Author("Grace")))
    assert article.authors_formatted == "by Ada, , Grace"
    assert Article(authors=()).authors_formatted == ""


def test_published_date_falls_back_to_now():
    now = datetime.now(timezone.utc)
    for value in (None, "", "yesterday"):
        published = Article(published_at=value).published_date
        assert abs(published - now) < timedelta(seconds=5)


def test_parse_published_variants():
    assert parse_published("2024-01-01T00:00:00Z") == datetime(
        2024, 1, 1, tzinfo=timezone.utc
    )
    assert parse_published("2024-01-01T00:00:00.123000Z").microsecond == 123000
    assert parse_published("2024-01-01T02:00:00+02:00") == datetime(
        2024, 1, 1, tzinfo=timezone.utc
    )
    assert parse_published("2024-01-01T00:00:00").tzinfo is timezone.utc
    assert parse_published("not a date") is None


def test_format_published_day_month_year_time():
    text = format_published(datetime(2024, 1, 15, 12, 0, tzinfo=timezone.utc))
    assert re.fullmatch(r"\d{2} \w{3} 2024, \d{2}:\d{2}", text)


def test_format_published_unknown_style():
    with pytest.raises(KeyError):
        format_published(datetime.now(timezone.utc), "fancy")


def test_plain_summary_strips_markup():
    article = Article(summary="<p>Launch <b>scrubbed</b> due to weather.</p>")
    assert article.plain_summary == "Launch scrubbed due to weather."


def test_icon_is_stable_per_id():
    assert Article(id=7).icon == Article(id=7).icon
    assert Article().icon == PLANET_ICONS[0]
    assert {Article(id=i).icon for i in range(3)} == set(PLANET_ICONS)


def test_page_without_results_is_empty():
    page = ArticlePage.from_dict({"count": 5, "next": None, "previous": None})
    assert page.results == []
    assert page.count == 5
    assert page.next is None


def test_page_next_cursor_is_kept_verbatim():
    cursor = "https://api.example/v4/articles/?limit=10&offset=10&search=mars%20rover"
    page = ArticlePage.from_dict({"results": [], "next": cursor})
    assert page.next == cursor


@pytest.mark.parametrize("obj", [[], "text", None, {"results": {}}, {"next": 1}])
def test_page_wrong_shape_raises(obj):
    with pytest.raises(DecodingError):
        ArticlePage.from_dict(obj)
