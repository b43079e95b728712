# fixmyprompts/utils/cache.py
from __future__ import annotations
import threading
import time
import hashlib
from dataclasses import dataclass
from typing import Any, Callable, Dict, Optional


def normalize_prompt(prompt: str) -> str:
    # normalize whitespace + trim
    p = (prompt or "").strip()
    p = " ".join(p.split())
    return p


def prompt_key(*parts: str) -> str:
    raw = "|".join(parts).encode("utf-8", errors="ignore")
    return hashlib.sha256(raw).hexdigest()


@dataclass
class CacheItem:
    value: Any
    expires_at: float


class TTLCache:
    """
    Fixed-capacity key -> value map where every entry expires after ttl_seconds.
    When full, set() evicts the oldest inserted entry; incr() never drops a
    live counter. Safe to share across the FastAPI threadpool.
    """

    def __init__(
        self,
        ttl_seconds: int = 600,
        max_items: int = 500,
        clock: Callable[[], float] = time.time,
    ):
        self.ttl = ttl_seconds
        self.max_items = max_items
        self.clock = clock
        self.store: Dict[str, CacheItem] = {}
        self.evictions = 0
        self._lock = threading.Lock()

    def __len__(self) -> int:
        with self._lock:
            return len(self.store)

    def get(self, key: str) -> Optional[Any]:
        with self._lock:
            item = self.store.get(key)
            if not item:
                return None
            if self.clock() > item.expires_at:
                self.store.pop(key, None)
                return None
            return item.value

    def set(self, key: str, value: Any) -> None:
        with self._lock:
            now = self.clock()
            self._purge(now)
            self.store.pop(key, None)
            # dicts keep insertion order, so the first key is the oldest
            while self.store and len(self.store) >= self.max_items:
                self.store.pop(next(iter(self.store)))
                self.evictions += 1
            self.store[key] = CacheItem(value=value, expires_at=now + self.ttl)

    def incr(self, key: str) -> Optional[int]:
        """
        Increment a counter. A new counter starts at 1 and expires ttl
        seconds after creation; increments do not extend it.
        Returns None when the store is full of live counters.
        """
        with self._lock:
            now = self.clock()
            item = self.store.get(key)
            if item is not None and now <= item.expires_at:
                item.value += 1
                return item.value

            self.store.pop(key, None)
            if len(self.store) >= self.max_items:
                self._purge(now)
                if len(self.store) >= self.max_items:
                    return None
            self.store[key] = CacheItem(value=1, expires_at=now + self.ttl)
            return 1

    def clear(self) -> None:
        with self._lock:
            self.store.clear()

    def _purge(self, now: float) -> None:
        expired = [k for k, v in self.store.items() if now > v.expires_at]
        for k in expired:
            self.store.pop(k, None)


class SimpleRateLimiter:
    """
    Fixed window: allow N requests per window_seconds per client key (e.g., IP).
    Counters live in an injectable TTLCache so state can be shared or reset.
    New keys are refused while the store is full of live counters.
    """

    def __init__(
        self,
        max_requests: int = 20,
        window_seconds: int = 60,
        store: Optional[TTLCache] = None,
    ):
        self.max_requests = max_requests
        self.window = window_seconds
        self.store = store if store is not None else TTLCache(
            ttl_seconds=window_seconds, max_items=10_000)

    def allow(self, client_key: str) -> bool:
        count = self.store.incr(client_key)
        return count is not None and count <= self.max_requests

    def reset(self) -> None:
        self.store.clear()
