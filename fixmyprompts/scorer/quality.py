# fixmyprompts/scorer/quality.py

from typing import Dict, Optional

# Score thresholds used by the extension badge and sidebar
STRONG_THRESHOLD = 75
MEDIUM_THRESHOLD = 50
SOLID_PROMPT_THRESHOLD = 90

BADGE_GREEN = "#2ecc71"
BADGE_AMBER = "#f39c12"
BADGE_RED = "#e74c3c"
BADGE_EMPTY = "#9e9e9e"


def quality_label(score: int) -> str:
    """
    Return weak/medium/strong based on score
    """
    if score >= STRONG_THRESHOLD:
        return "strong"
    elif score >= MEDIUM_THRESHOLD:
        return "medium"
    else:
        return "weak"


def badge(score: Optional[int]) -> Dict[str, str]:
    """
    Toolbar badge for a score. None means there is no prompt yet.
    """
    if score is None:
        return {"text": "–", "color": BADGE_EMPTY}

    label = quality_label(score)
    color = {"strong": BADGE_GREEN, "medium": BADGE_AMBER}.get(label, BADGE_RED)
    return {"text": str(int(round(score))), "color": color}


def rewrite_recommended(score: int) -> bool:
    # 90+ is shown as "Solid prompt" and the one-click rewrite is disabled
    return score < SOLID_PROMPT_THRESHOLD
