# fixmyprompts/storage/feedback.py
from __future__ import annotations
import json
import logging
import threading
import time
from pathlib import Path
from typing import Dict, Any, List, Union

logger = logging.getLogger(__name__)


class FeedbackStore:
    """Append-only JSONL log of thumbs up/down votes."""

    def __init__(self, path: Union[str, Path]):
        self.path = Path(path)
        self._lock = threading.Lock()

    def append(self, liked: bool, score: int) -> Dict[str, Any]:
        event = {"liked": bool(liked), "score": int(score), "ts": time.time()}
        with self._lock:
            self.path.parent.mkdir(parents=True, exist_ok=True)
            with self.path.open("a", encoding="utf-8") as f:
                f.write(json.dumps(event, ensure_ascii=False) + "\n")
        return event

    def read_recent(self, limit: int = 200) -> List[Dict[str, Any]]:
        if not self.path.exists():
            return []
        lines = self.path.read_text(encoding="utf-8").splitlines()[-limit:]
        out = []
        for ln in lines:
            try:
                out.append(json.loads(ln))
            except json.JSONDecodeError:
                logger.debug("skipping malformed feedback line")
                continue
        return out

    def summary(self, limit: int = 500) -> Dict[str, Any]:
        events = [e for e in self.read_recent(limit=limit) if isinstance(e, dict)]
        likes = sum(1 for e in events if e.get("liked") is True)
        scores = [e["score"] for e in events if isinstance(e.get("score"), (int, float))]
        return {
            "events": len(events),
            "likes": likes,
            "dislikes": len(events) - likes,
            "avg_score": round(sum(scores) / len(scores), 1) if scores else None,
        }
