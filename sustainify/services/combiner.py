"""Reassemble brand names split across several OCR fragments.

Logos are often detected as separate words ("Coca" / "Cola"). Besides every
original fragment, nearby fragments are paired into combined candidates.

Pairing is greedy in (i, j) order: the first fragment within range wins and
both fragments are claimed, so three-way splits are only partially rebuilt.
"""

from dataclasses import dataclass
from typing import Optional, List, Sequence, Tuple, FrozenSet
import logging

from .geometry import BoundingPoly, distance, enclosing_box
from .vision import DetectedTextBlock

logger = logging.getLogger(__name__)

# Max distance between top-left corners of two fragments to combine them
COMBINE_RADIUS_PX = 200


@dataclass(frozen=True)
class TextCandidate:
    """A possible brand string, either one fragment or a combined pair."""
    text: str
    bounding_box: Optional[BoundingPoly]
    combined: bool
    source_indices: Tuple[int, ...]


def _single(block: DetectedTextBlock, index: int) -> TextCandidate:
    return TextCandidate(
        text=block.text.strip(),
        bounding_box=block.bounding_box,
        combined=False,
        source_indices=(index,),
    )


def _pair(first: DetectedTextBlock, second: DetectedTextBlock, i: int, j: int) -> Optional[TextCandidate]:
    box = enclosing_box([first.bounding_box, second.bounding_box])
    if box is None:
        return None
    return TextCandidate(
        text=f"{first.text.strip()} {second.text.strip()}".strip(),
        bounding_box=box,
        combined=True,
        source_indices=(i, j),
    )


def _top_left(block: DetectedTextBlock):
    return block.bounding_box.top_left if block.bounding_box else None


def _find_partner(
    blocks: Sequence[DetectedTextBlock],
    i: int,
    claimed: FrozenSet[int],
) -> Optional[int]:
    """First unclaimed j > i whose top-left corner is within range of block i."""
    anchor = _top_left(blocks[i])
    if anchor is None:
        return None
    for j in range(i + 1, len(blocks)):
        if j in claimed:
            continue
        other = _top_left(blocks[j])
        if other is None:
            continue
        if distance(anchor, other) < COMBINE_RADIUS_PX:
            return j
    return None


def combine_nearby_text(blocks: Sequence[DetectedTextBlock]) -> List[TextCandidate]:
    """
    Build brand candidates from individual text fragments.

    Args:
        blocks: Text fragments, excluding the aggregate full-text entry

    Returns:
        One candidate per fragment (in input order), followed by combined
        candidates for each greedily matched pair of nearby fragments
    """
    candidates = [_single(block, i) for i, block in enumerate(blocks)]

    claimed: FrozenSet[int] = frozenset()
    for i in range(len(blocks)):
        if i in claimed:
            continue
        j = _find_partner(blocks, i, claimed)
        if j is None:
            continue
        combined = _pair(blocks[i], blocks[j], i, j)
        if combined is not None:
            candidates.append(combined)
            claimed = claimed | {i, j}

    logger.debug(f"Combined {len(blocks)} text blocks into {len(candidates)} candidates")
    return candidates
