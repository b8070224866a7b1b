"""Rough image quality estimate from detection results."""

from typing import Sequence

from .vision import DetectedTextBlock, DetectedLabel
from .results import round_half_up

BASE_QUALITY = 50
DEFAULT_TEXT_CONFIDENCE = 0.8  # the text API does not always report confidence
MIN_QUALITY = 10
MAX_QUALITY = 95


def calculate_image_quality(
    text_annotations: Sequence[DetectedTextBlock],
    labels: Sequence[DetectedLabel],
) -> int:
    """
    Estimate how readable the photo was (10-95).

    More text blocks, more labels and higher detection confidence all
    indicate a clearer image. The first text annotation is the aggregate
    full text and is not counted.
    """
    quality = float(BASE_QUALITY)

    if text_annotations:
        blocks = text_annotations[1:]
        count = len(blocks)

        if count > 10:
            quality += 20
        elif count > 5:
            quality += 10
        elif count < 3:
            quality -= 15

        confidences = [
            b.confidence if b.confidence is not None else DEFAULT_TEXT_CONFIDENCE
            for b in blocks
        ]
        avg_confidence = sum(confidences) / max(count, 1)
        quality += (avg_confidence - 0.5) * 40

    if labels:
        avg_label = sum(l.score for l in labels) / len(labels)
        quality += (avg_label - 0.5) * 30

        if len(labels) > 8:
            quality += 10
        elif len(labels) < 3:
            quality -= 10

    return max(MIN_QUALITY, min(MAX_QUALITY, round_half_up(quality)))
