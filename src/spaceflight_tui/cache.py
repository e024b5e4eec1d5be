from __future__ import annotations

import base64
import binascii
import hashlib
import json
import logging
import os
import time
from collections import OrderedDict
from dataclasses import dataclass
from typing import Optional, Tuple

logger = logging.getLogger("spaceflight")

MEMORY_CACHE_ENTRIES = 64


@dataclass(frozen=True)
class CachedImage:
    content_type: str
    data: bytes


class ImageCache:
    """Two-level image cache: an in-memory LRU in front of JSON files on disk.

    Both layers honour ``ttl``; the memory layer keeps at most
    ``max_entries`` images.
    """

    def __init__(
        self, cache_dir: str, ttl: int, max_entries: int = MEMORY_CACHE_ENTRIES
    ):
        self.cache_dir = cache_dir
        self.ttl = ttl
        self.max_entries = max_entries
        self._memory: OrderedDict[str, Tuple[float, CachedImage]] = OrderedDict()
        os.makedirs(self.cache_dir, exist_ok=True)

    def _get_cache_path(self, key: str) -> str:
        hashed_key = hashlib.sha256(key.encode()).hexdigest()
        return os.path.join(self.cache_dir, f"{hashed_key}.json")

    def _expired(self, timestamp: float) -> bool:
        return time.time() - timestamp > self.ttl

    def _remember(self, key: str, timestamp: float, image: CachedImage) -> None:
        self._memory[key] = (timestamp, image)
        self._memory.move_to_end(key)
        while len(self._memory) > self.max_entries:
            evicted, _ = self._memory.popitem(last=False)
            logger.debug("Evicted %s from memory cache", evicted)

    def get(self, key: str) -> Optional[CachedImage]:
        entry = self._memory.get(key)
        if entry is not None:
            timestamp, image = entry
            if not self._expired(timestamp):
                logger.debug("Memory cache hit for key: %s", key)
                self._memory.move_to_end(key)
                return image
            del self._memory[key]

        cache_path = self._get_cache_path(key)
        if not os.path.exists(cache_path):
            return None

        try:
            with open(cache_path, "r") as f:
                data = json.load(f)

            timestamp = data.get("timestamp", 0)
            if self._expired(timestamp):
                logger.debug("Cache expired for key: %s", key)
                return None

            image = CachedImage(
                content_type=data["content_type"],
                data=base64.b64decode(data["data"]),
            )
        except (IOError, KeyError, binascii.Error, json.JSONDecodeError) as e:
            logger.warning("Failed to read from cache file %s: %s", cache_path, e)
            return None

        logger.debug("Disk cache hit for key: %s", key)
        self._remember(key, timestamp, image)
        return image

    def set(self, key: str, image: CachedImage) -> None:
        timestamp = time.time()
        self._remember(key, timestamp, image)
        cache_path = self._get_cache_path(key)
        data = {
            "timestamp": timestamp,
            "content_type": image.content_type,
            "data": base64.b64encode(image.data).decode("ascii"),
        }
        try:
            with open(cache_path, "w") as f:
                json.dump(data, f)
            logger.debug("Cache set for key: %s", key)
        except IOError as e:
            logger.warning("Failed to write to cache file %s: %s", cache_path, e)

    def clear(self) -> None:
        """Clear all items from the cache."""
        self._memory.clear()
        for filename in os.listdir(self.cache_dir):
            file_path = os.path.join(self.cache_dir, filename)
            try:
                if os.path.isfile(file_path):
                    os.unlink(file_path)
            except OSError as e:
                logger.error("Failed to delete cache file %s: %s", file_path, e)
        logger.info("Cache cleared.")
