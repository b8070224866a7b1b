"""OCR-based brand detection.

Used when Product Search has nothing confident to offer. Text fragments are
combined, scored, and the best candidate above the acceptance threshold is
returned. If nothing clears it, the most prominent non-junk text is offered
as a low-confidence best guess.
"""

from typing import Optional, List, Sequence
import logging

from .combiner import TextCandidate, combine_nearby_text
from .exclusion import is_obviously_not_brand
from .geometry import area
from .results import BrandResult, BrandMethod
from .scoring import ScoredCandidate, score_candidate
from .vision import DetectedTextBlock

logger = logging.getLogger(__name__)

# Minimum score for a scored candidate to be taken as the brand
OCR_ACCEPT_SCORE = 30

# Fixed confidence for the most-prominent-text fallback
BEST_GUESS_CONFIDENCE = 25


def rank_candidates(candidates: Sequence[TextCandidate]) -> List[ScoredCandidate]:
    """Score candidates, drop excluded ones, order by confidence (stable)."""
    scored = [score_candidate(c) for c in candidates]
    kept = [s for s in scored if s.confidence > 0]
    return sorted(kept, key=lambda s: s.confidence, reverse=True)


def best_guess(candidates: Sequence[TextCandidate]) -> Optional[BrandResult]:
    """Largest candidate that is not obvious junk, at a fixed low confidence."""
    valid = [c for c in candidates if not is_obviously_not_brand(c.text)]
    if not valid:
        return None

    guess = max(valid, key=lambda c: area(c.bounding_box))
    logger.info(f"Best guess fallback: {guess.text!r} (area: {area(guess.bounding_box)})")
    return BrandResult(
        name=guess.text,
        confidence=BEST_GUESS_CONFIDENCE,
        method=BrandMethod.OCR_BEST_GUESS,
    )


def extract_brand_from_ocr(text_annotations: Sequence[DetectedTextBlock]) -> Optional[BrandResult]:
    """
    Pick a brand from raw OCR output.

    Args:
        text_annotations: Vision text annotations; the first entry is the
            aggregate full text and is skipped

    Returns:
        BrandResult, or None when no usable text was found
    """
    blocks = list(text_annotations[1:])
    if not blocks:
        logger.info("No individual text blocks found for OCR fallback")
        return None

    candidates = combine_nearby_text(blocks)
    ranked = rank_candidates(candidates)

    top = ", ".join(f"{s.text!r} ({s.confidence}%)" for s in ranked[:3])
    logger.info(f"OCR top candidates: [{top}]")

    for scored in ranked:
        if scored.confidence >= OCR_ACCEPT_SCORE:
            method = BrandMethod.OCR_TEXT_COMBINATION if scored.combined else BrandMethod.OCR_FALLBACK
            logger.info(f"OCR selected brand: {scored.text!r} with {scored.confidence}% confidence")
            return BrandResult(name=scored.text, confidence=scored.confidence, method=method)

    logger.info("No high-confidence OCR brand found, trying best guess fallback")
    return best_guess(candidates)
