from __future__ import annotations

import os
from unittest.mock import MagicMock, patch

import pytest
import requests

from spaceflight_tui.cache import CachedImage, ImageCache
from spaceflight_tui.images import ImageLoader, secure_url

PNG = b"\x89PNG\r\n\x1a\nfake"


def _image_response(content=PNG, content_type="image/png"):
    resp = MagicMock()
    resp.content = content
    resp.headers = {"Content-Type": content_type}
    return resp


@pytest.fixture
def cache(tmp_path):
    return ImageCache(cache_dir=str(tmp_path / "images"), ttl=3600)


@pytest.fixture
def session():
    s = MagicMock()
    s.get.return_value = _image_response()
    return s


@pytest.fixture
def loader(cache, session):
    return ImageLoader(cache, session=session, timeout=5)


def test_secure_url():
    assert secure_url("http://img.example/a.png") == "https://img.example/a.png"
    assert secure_url("https://img.example/a.png") == "https://img.example/a.png"
    assert secure_url("ftp://img.example/a.png") == "ftp://img.example/a.png"


def test_load_upgrades_http_and_caches(loader, session):
    image = loader.load("http://img.example/a.png")
    assert image == CachedImage(content_type="image/png", data=PNG)
    session.get.assert_called_once_with("https://img.example/a.png", timeout=5)

    # both spellings hit the same cache entry
    assert loader.load("https://img.example/a.png") == image
    assert loader.load("http://img.example/a.png") == image
    assert session.get.call_count == 1


def test_load_empty_url(loader, session):
    assert loader.load(None) is None
    assert loader.load("") is None
    session.get.assert_not_called()


def test_load_transport_failure_keeps_placeholder(loader, session, cache):
    session.get.side_effect = requests.Timeout("slow")
    assert loader.load("https://img.example/a.png") is None
    assert cache.get("https://img.example/a.png") is None


def test_load_http_error(loader, session):
    resp = _image_response()
    resp.raise_for_status.side_effect = requests.HTTPError("404")
    session.get.return_value = resp
    assert loader.load("https://img.example/missing.png") is None


def test_load_rejects_non_image(loader, session):
    session.get.return_value = _image_response(
        content=b"<html></html>", content_type="text/html; charset=utf-8"
    )
    assert loader.load("https://img.example/a.png") is None


def test_load_rejects_empty_body(loader, session):
    session.get.return_value = _image_response(content=b"")
    assert loader.load("https://img.example/a.png") is None


def test_content_type_parameters_are_dropped(loader, session):
    session.get.return_value = _image_response(content_type="image/jpeg; q=0.9")
    assert loader.load("https://img.example/a.jpg").content_type == "image/jpeg"


def test_cache_persists_to_disk(tmp_path):
    cache_dir = str(tmp_path / "images")
    ImageCache(cache_dir, ttl=3600).set("k", CachedImage("image/gif", b"GIF89a"))

    fresh = ImageCache(cache_dir, ttl=3600)
    assert fresh.get("k") == CachedImage("image/gif", b"GIF89a")


def test_cache_expiry(tmp_path):
    cache_dir = str(tmp_path / "images")
    ImageCache(cache_dir, ttl=3600).set("k", CachedImage("image/gif", b"GIF89a"))

    assert ImageCache(cache_dir, ttl=-1).get("k") is None


def test_memory_entry_expires(tmp_path):
    cache = ImageCache(str(tmp_path), ttl=60)
    with patch("spaceflight_tui.cache.time") as clock:
        clock.time.return_value = 1000.0
        cache.set("k", CachedImage("image/png", PNG))
        assert cache.get("k") == CachedImage("image/png", PNG)

        clock.time.return_value = 1061.0
        assert cache.get("k") is None
    assert "k" not in cache._memory


def test_memory_layer_evicts_least_recently_used(tmp_path):
    cache = ImageCache(str(tmp_path), ttl=3600, max_entries=2)
    cache.set("a", CachedImage("image/png", PNG))
    cache.set("b", CachedImage("image/png", PNG))
    cache.get("a")
    cache.set("c", CachedImage("image/png", PNG))
    assert list(cache._memory) == ["a", "c"]

    # evicted entries are still read back from disk
    assert cache.get("b") == CachedImage("image/png", PNG)
    assert list(cache._memory) == ["c", "b"]


def test_corrupt_cache_file_is_a_miss(tmp_path):
    cache = ImageCache(str(tmp_path), ttl=3600)
    with open(cache._get_cache_path("k"), "w") as f:
        f.write("{not json")
    assert cache.get("k") is None


def test_cache_clear(cache):
    cache.set("k", CachedImage("image/png", PNG))
    cache.clear()
    assert cache.get("k") is None
    assert os.listdir(cache.cache_dir) == []
