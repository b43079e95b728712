# fixmyprompts/scorer/dimensions.py
from __future__ import annotations

from enum import Enum
from typing import Dict, Tuple


class Dimension(str, Enum):
    """
    Fixed quality dimensions. Declaration order is also the tie-break
    order when ranking tips.
    """
    LENGTH = "length"
    CLARITY = "clarity"
    SPECIFICITY = "specificity"
    VAGUENESS = "vagueness"
    DUPLICATION = "duplication"
    VARIETY = "variety"


# Maximum penalty per dimension; must sum to 100
WEIGHTS: Dict[Dimension, int] = {
    Dimension.LENGTH: 25,
    Dimension.CLARITY: 15,
    Dimension.SPECIFICITY: 15,
    Dimension.VAGUENESS: 15,
    Dimension.DUPLICATION: 10,
    Dimension.VARIETY: 20,
}

# Length bands (characters)
MIN_LENGTH = 20
MAX_LENGTH = 500
IDEAL_MIN_LENGTH = 50
IDEAL_MAX_LENGTH = 250

# Variety thresholds on distinct/total token ratio
VARIETY_FULL_CREDIT = 0.8
VARIETY_HALF_CREDIT = 0.5

ACTION_VERBS: Tuple[str, ...] = (
    "explain", "generate", "compare", "summarize", "write", "list",
)

SPECIFIC_PHRASES: Tuple[str, ...] = (
    "for", "to a", "to an", "as a", "as an", "in the style of", "json", "table",
)

VAGUE_WORDS: Tuple[str, ...] = (
    "good", "nice", "interesting", "cool", "beautiful",
)
