import logging
import threading
from collections import OrderedDict
from typing import Any, Optional

logger = logging.getLogger("uvicorn.error")


def cache_key(user_id: str, data_type: str) -> str:
    return f"{user_id}-{data_type}"


class ResponseCache:
    """
    Small in-memory cache for the demo stats endpoint, keyed by user and data type.

    Unbounded unless ``maxsize`` is given, in which case the least recently
    used entry is evicted.
    """

    def __init__(self, maxsize: Optional[int] = None):
        self._entries: OrderedDict[str, Any] = OrderedDict()
        self._lock = threading.Lock()
        self.maxsize = maxsize
        self.hits = 0
        self.misses = 0

    def get(self, key: str) -> Optional[Any]:
        with self._lock:
            if key in self._entries:
                self.hits += 1
                self._entries.move_to_end(key)
                logger.debug(f"[Cache] HIT: {key}")
                return self._entries[key]
            self.misses += 1
            logger.debug(f"[Cache] MISS: {key}")
            return None

    def put(self, key: str, value: Any) -> None:
        with self._lock:
            self._entries[key] = value
            self._entries.move_to_end(key)
            if self.maxsize is not None and len(self._entries) > self.maxsize:
                evicted, _ = self._entries.popitem(last=False)
                logger.debug(f"[Cache] EVICT: {evicted}")

    def clear(self) -> None:
        with self._lock:
            size_before = len(self._entries)
            self._entries.clear()
            self.hits = 0
            self.misses = 0
        logger.info(f"[Cache] Cleared {size_before} entries")

    def stats(self) -> dict:
        with self._lock:
            total = self.hits + self.misses
            return {
                "size": len(self._entries),
                "maxsize": self.maxsize,
                "hits": self.hits,
                "misses": self.misses,
                "hit_rate": f"{(self.hits / total * 100) if total else 0:.1f}%",
            }

    def __contains__(self, key: str) -> bool:
        with self._lock:
            return key in self._entries

    def __len__(self) -> int:
        with self._lock:
            return len(self._entries)
