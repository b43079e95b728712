"""Tests for badge/label helpers and the sidebar checklist."""

import pytest

from fixmyprompts.scorer.dimensions import Dimension
from fixmyprompts.scorer.prompt_score import score
from fixmyprompts.scorer.quality import (
    BADGE_AMBER,
    BADGE_EMPTY,
    BADGE_GREEN,
    BADGE_RED,
    badge,
    quality_label,
    rewrite_recommended,
)
from fixmyprompts.scorer.report import build_report


class TestBadge:
    def test_no_prompt(self):
        assert badge(None) == {"text": "–", "color": BADGE_EMPTY}

    @pytest.mark.parametrize("value,color", [
        (100, BADGE_GREEN), (75, BADGE_GREEN), (74, BADGE_AMBER),
        (50, BADGE_AMBER), (49, BADGE_RED), (0, BADGE_RED),
    ])
    def test_colors(self, value, color):
        assert badge(value) == {"text": str(value), "color": color}


@pytest.mark.parametrize("value,label", [(90, "strong"), (75, "strong"), (60, "medium"), (45, "weak")])
def test_quality_label(value, label):
    assert quality_label(value) == label


def test_solid_prompt_threshold():
    assert rewrite_recommended(89) is True
    assert rewrite_recommended(90) is False


class TestReport:
    def test_one_item_per_dimension_in_order(self):
        items = build_report("", score(""))
        assert [i.dimension for i in items] == [d.value for d in Dimension]

    def test_failed_and_passed_details(self):
        items = {i.dimension: i for i in build_report("", score(""))}

        assert items["length"].passed is False
        assert items["length"].title == "Length"
        assert "0 characters" in items["length"].detail
        assert "50-250" in items["length"].detail

        assert items["clarity"].passed is False
        assert "verb" in items["clarity"].detail

        assert items["vagueness"].passed is True
        assert items["vagueness"].detail == "Nice job keeping vagueness on point."

    def test_length_detail_uses_char_count(self):
        text = "short prompt for a test"
        items = {i.dimension: i for i in build_report(text, score(text))}
        assert f"{len(text)} characters" in items["length"].detail

    def test_to_dict(self):
        item = build_report("", score(""))[0]
        assert set(item.to_dict()) == {"dimension", "title", "passed", "detail"}
