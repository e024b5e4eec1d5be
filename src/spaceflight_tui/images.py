from __future__ import annotations

import logging
from typing import Optional

import requests

from .cache import CachedImage, ImageCache
from .config import HTTP_TIMEOUT, REQUEST_HEADERS

logger = logging.getLogger("spaceflight")


def secure_url(url: str) -> str:
    """Upgrade a plain ``http://`` URL to ``https://``."""
    if url.startswith("http://"):
        return "https://" + url[len("http://"):]
    return url


class ImageLoader:
    def __init__(
        self,
        cache: ImageCache,
        session: Optional[requests.Session] = None,
        timeout: float = HTTP_TIMEOUT,
    ):
        self.cache = cache
        self.timeout = timeout
        if session is None:
            session = requests.Session()
            session.headers.update({"User-Agent": REQUEST_HEADERS["User-Agent"]})
        self.session = session

    def load(self, url: Optional[str]) -> Optional[CachedImage]:
        """Return the image at ``url``, or ``None`` to keep the placeholder."""
        if not url:
            return None
        url = secure_url(url)

        cached = self.cache.get(url)
        if cached is not None:
            return cached

        try:
            resp = self.session.get(url, timeout=self.timeout)
            resp.raise_for_status()
        except requests.RequestException as e:
            logger.debug("Image fetch failed for %s: %s", url, e)
            return None

        content_type = resp.headers.get("Content-Type", "").split(";")[0].strip()
        if not resp.content or not content_type.startswith("image/"):
            logger.debug("Ignoring non-image response from %s (%s)", url, content_type)
            return None

        image = CachedImage(content_type=content_type, data=resp.content)
        self.cache.set(url, image)
        return image
