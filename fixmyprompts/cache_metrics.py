from __future__ import annotations

from dataclasses import dataclass, field, fields
from typing import Dict
import threading
import time


@dataclass
class RewriteStats:
    """Counters for the rewrite proxy and its cache."""
    name: str = "rewrite"
    requests: int = 0
    successes: int = 0
    failures: int = 0
    rate_limited: int = 0
    hits: int = 0
    misses: int = 0
    sets: int = 0
    last_reset_ts: float = field(default_factory=time.time)
    _lock: threading.Lock = field(default_factory=threading.Lock, repr=False, compare=False)

    def incr(self, counter: str, amount: int = 1) -> None:
        # sync endpoints run in a threadpool
        with self._lock:
            setattr(self, counter, getattr(self, counter) + amount)

    def hit_rate(self) -> float:
        total = self.hits + self.misses
        return (self.hits / total) if total else 0.0

    def to_dict(self) -> Dict:
        with self._lock:
            d = {f.name: getattr(self, f.name) for f in fields(self) if not f.name.startswith("_")}
        d["hit_rate"] = self.hit_rate()
        d["uptime_seconds"] = int(time.time() - self.last_reset_ts)
        return d


def reset_stats(stats: RewriteStats) -> None:
    with stats._lock:
        stats.requests = 0
        stats.successes = 0
        stats.failures = 0
        stats.rate_limited = 0
        stats.hits = 0
        stats.misses = 0
        stats.sets = 0
        stats.last_reset_ts = time.time()
