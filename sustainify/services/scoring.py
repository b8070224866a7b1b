"""Heuristic brand-likelihood scoring for text candidates.

Scores are additive and only clamped at the end, so several strong signals
(large, high up, trademark symbol) saturate at 100.
"""

import re
from dataclasses import dataclass
from typing import Optional
import logging

from .combiner import TextCandidate
from .exclusion import is_obviously_not_brand
from .geometry import BoundingPoly, area, relative_y

logger = logging.getLogger(__name__)

BASE_SCORE = 50

# (min area exclusive, bonus), checked in order
AREA_BONUSES = [(5000, 35), (3000, 25), (1000, 15)]

# (max relative y exclusive, bonus), checked in order
POSITION_BONUSES = [(0.4, 25), (0.6, 15)]

TRADEMARK_PATTERN = re.compile(r"[™®©]")
TRADEMARK_BONUS = 40

BRAND_LENGTH_RANGE = (3, 20)
LENGTH_BONUS = 10


@dataclass(frozen=True)
class ScoredCandidate:
    """A text candidate with its brand confidence (0-100)."""
    candidate: TextCandidate
    confidence: int

    @property
    def text(self) -> str:
        return self.candidate.text

    @property
    def combined(self) -> bool:
        return self.candidate.combined


def score_brand_candidate(text: str, box: Optional[BoundingPoly]) -> int:
    """
    Score how likely a text fragment is the product's brand.

    Returns:
        0 when the text is excluded outright, otherwise 0-100
    """
    if is_obviously_not_brand(text):
        logger.debug(f"Scoring {text!r}: excluded as obvious non-brand")
        return 0

    score = BASE_SCORE

    # Prominence - bigger text is more likely the brand
    box_area = area(box)
    for threshold, bonus in AREA_BONUSES:
        if box_area > threshold:
            score += bonus
            logger.debug(f"Scoring {text!r}: area={box_area} (+{bonus})")
            break

    # Brands sit high on the pack
    position = relative_y(box)
    for threshold, bonus in POSITION_BONUSES:
        if position < threshold:
            score += bonus
            logger.debug(f"Scoring {text!r}: y={position:.2f} (+{bonus})")
            break

    if TRADEMARK_PATTERN.search(text):
        score += TRADEMARK_BONUS
        logger.debug(f"Scoring {text!r}: trademark symbol (+{TRADEMARK_BONUS})")

    low, high = BRAND_LENGTH_RANGE
    if low <= len(text) <= high:
        score += LENGTH_BONUS

    final = max(0, min(100, score))
    logger.debug(f"Scoring {text!r}: final={final}")
    return final


def score_candidate(candidate: TextCandidate) -> ScoredCandidate:
    """Attach a confidence score to a text candidate."""
    return ScoredCandidate(
        candidate=candidate,
        confidence=score_brand_candidate(candidate.text, candidate.bounding_box),
    )
