"""
Product Cache

Time-bounded read-through cache of fetched product nodes, stored as a JSON
file {"data": [...], "timestamp": <unix seconds>}. Refreshes happen one at a
time from the calling command, so there is a single writer.
"""

import json
import logging
import os
import time
from typing import Any, Callable, Dict, List, Optional

logger = logging.getLogger(__name__)

ProductNodes = List[Dict[str, Any]]


class ProductCache:
    """
    JSON file cache for product nodes.

    Usage:
        cache = ProductCache("cache/products_cache.json", ttl_seconds=3600)
        nodes = cache.get_or_fetch(lambda: fetch_product_nodes(client, vendor))
    """

    def __init__(self, path: str, ttl_seconds: int = 3600, clock: Callable[[], float] = time.time):
        """
        Initialize the cache.

        Args:
            path: Cache file path
            ttl_seconds: Entries older than this are ignored
            clock: Time source (seconds since epoch)
        """
        self.path = path
        self.ttl_seconds = ttl_seconds
        self._clock = clock

    def load(self) -> Optional[ProductNodes]:
        """
        Read cached nodes.

        Returns:
            Cached nodes, or None if the file is missing, unreadable or expired
        """
        if not os.path.exists(self.path):
            return None

        try:
            with open(self.path, "r", encoding="utf-8") as f:
                payload = json.load(f)
        except (OSError, ValueError) as e:
            logger.warning("Could not read cache %s: %s", self.path, e)
            return None

        data = payload.get("data") if isinstance(payload, dict) else None
        timestamp = payload.get("timestamp") if isinstance(payload, dict) else None
        if not isinstance(data, list) or not isinstance(timestamp, (int, float)):
            logger.warning("Ignoring malformed cache file %s", self.path)
            return None

        age = self._clock() - timestamp
        if age > self.ttl_seconds:
            logger.info("Cache expired (%.0fs old, ttl %ds)", age, self.ttl_seconds)
            return None

        logger.info("Loaded %d products from cache (%.0fs old)", len(data), age)
        return data

    def save(self, data: ProductNodes) -> None:
        """Write nodes with the current timestamp."""
        directory = os.path.dirname(self.path)
        if directory:
            os.makedirs(directory, exist_ok=True)

        payload = {"data": data, "timestamp": self._clock()}
        with open(self.path, "w", encoding="utf-8") as f:
            json.dump(payload, f, ensure_ascii=False)
        logger.debug("Saved %d products to cache %s", len(data), self.path)

    def get_or_fetch(self, fetch: Callable[[], ProductNodes], refresh: bool = False) -> ProductNodes:
        """
        Return cached nodes, or fetch and store fresh ones.

        Args:
            fetch: Callable returning fresh nodes
            refresh: Skip the cache and always fetch

        Returns:
            Product nodes
        """
        if not refresh:
            cached = self.load()
            if cached is not None:
                return cached

        data = fetch()
        self.save(data)
        return data
