"""Media Store — addressable URLs for binary vendor output.

Some vendors answer with raw image or audio bytes instead of a URL. Rather
than inlining those bytes into the JSON response, adapters park them here and
return a URL served by ``GET /api/v1/media/{blob_id}``.

The store is process-local, bounded (oldest entries evicted first) and
expiring. It is the only mutable state shared between concurrent requests,
hence the lock.
"""

from __future__ import annotations

import logging
import threading
import time
import uuid
from collections import OrderedDict
from dataclasses import dataclass

logger = logging.getLogger(__name__)

MEDIA_ROUTE_PREFIX = "/api/v1/media"


@dataclass(frozen=True)
class StoredMedia:
    data: bytes
    content_type: str
    expires_at: float  # time.monotonic()


class MediaStore:
    def __init__(self, base_url: str = "", ttl_seconds: float = 3600, max_items: int = 256):
        if max_items < 1:
            raise ValueError(f"max_items must be at least 1, got {max_items}")
        self.base_url = base_url.rstrip("/")
        self.ttl_seconds = ttl_seconds
        self.max_items = max_items
        self._items: OrderedDict[str, StoredMedia] = OrderedDict()
        self._lock = threading.Lock()

    def put(self, data: bytes, content_type: str) -> str:
        """Store ``data`` and return its public URL."""
        blob_id = uuid.uuid4().hex
        now = time.monotonic()
        with self._lock:
            self._prune(now)
            while len(self._items) >= self.max_items:
                evicted, _ = self._items.popitem(last=False)
                logger.debug("Media store full, evicted %s", evicted)
            self._items[blob_id] = StoredMedia(data=data, content_type=content_type, expires_at=now + self.ttl_seconds)
        return self.url_for(blob_id)

    def get(self, blob_id: str) -> StoredMedia | None:
        now = time.monotonic()
        with self._lock:
            item = self._items.get(blob_id)
            if item is None:
                return None
            if item.expires_at <= now:
                del self._items[blob_id]
                return None
            return item

    def url_for(self, blob_id: str) -> str:
        return f"{self.base_url}{MEDIA_ROUTE_PREFIX}/{blob_id}"

    def __len__(self) -> int:
        with self._lock:
            return len(self._items)

    def _prune(self, now: float) -> None:
        expired = [key for key, item in self._items.items() if item.expires_at <= now]
        for key in expired:
            del self._items[key]
