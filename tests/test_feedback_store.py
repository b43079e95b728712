"""Tests for the JSONL feedback sink."""

import json

from fixmyprompts.storage.feedback import FeedbackStore


def test_summary_of_missing_file(tmp_path):
    store = FeedbackStore(tmp_path / "nope" / "feedback.jsonl")
    assert store.read_recent() == []
    assert store.summary() == {"events": 0, "likes": 0, "dislikes": 0, "avg_score": None}


def test_append_and_summary(tmp_path):
    store = FeedbackStore(tmp_path / "sub" / "feedback.jsonl")
    event = store.append(True, 80)
    store.append(False, 45)

    assert event["liked"] is True
    assert event["score"] == 80
    assert "ts" in event

    lines = store.path.read_text(encoding="utf-8").splitlines()
    assert [json.loads(ln)["liked"] for ln in lines] == [True, False]
    assert store.summary() == {"events": 2, "likes": 1, "dislikes": 1, "avg_score": 62.5}


def test_malformed_lines_are_skipped(tmp_path):
    path = tmp_path / "feedback.jsonl"
    path.write_text('{"liked": true, "score": 90}\nnot json\n', encoding="utf-8")
    store = FeedbackStore(path)
    assert len(store.read_recent()) == 1
    assert store.summary()["likes"] == 1


def test_read_recent_limit(tmp_path):
    store = FeedbackStore(tmp_path / "feedback.jsonl")
    for i in range(5):
        store.append(i % 2 == 0, i * 10)
    recent = store.read_recent(limit=2)
    assert [e["score"] for e in recent] == [30, 40]
