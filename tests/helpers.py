"""Builders and fakes shared by the test modules."""

import io
import time
from typing import Optional, List

from PIL import Image

from sustainify.services.geometry import BoundingPoly
from sustainify.services.vision import (
    DetectedTextBlock,
    DetectedLabel,
    ProductMatch,
    ProductLabel,
)


def rect(left: int, top: int, width: int, height: int) -> BoundingPoly:
    """Axis-aligned box clockwise from top-left."""
    return BoundingPoly.from_points([
        [left, top],
        [left + width, top],
        [left + width, top + height],
        [left, top + height],
    ])


def make_block(text: str, left: int, top: int, width: int, height: int, confidence: Optional[float] = None) -> DetectedTextBlock:
    return DetectedTextBlock(text=text, bounding_box=rect(left, top, width, height), confidence=confidence)


def make_annotations(*blocks: DetectedTextBlock) -> List[DetectedTextBlock]:
    """Text detection output: aggregate full text first, then the fragments."""
    if not blocks:
        return []
    full_text = "\n".join(b.text for b in blocks)
    return [DetectedTextBlock(text=full_text, bounding_box=rect(0, 0, 1000, 1000))] + list(blocks)


def coca_cola_blocks() -> List[DetectedTextBlock]:
    """Logo detected as two small fragments 15px apart."""
    return [
        make_block("Coca", 10, 10, 40, 20),
        make_block("Cola", 25, 10, 40, 20),
    ]


def make_product(display_name: str, score: float, labels: Optional[dict] = None) -> ProductMatch:
    return ProductMatch(
        score=score,
        display_name=display_name,
        category="packagedgoods-v1",
        labels=[ProductLabel(key=k, value=v) for k, v in (labels or {}).items()],
    )


def png_bytes(width: int = 300, height: int = 200) -> bytes:
    img = Image.new("RGB", (width, height), color="white")
    pixels = img.load()
    for i in range(50, min(250, width)):
        for j in range(50, min(150, height)):
            if (i + j) % 10 < 5:
                pixels[i, j] = (0, 0, 0)
    buffer = io.BytesIO()
    img.save(buffer, format="PNG")
    return buffer.getvalue()


class FakeVisionClient:
    """In-memory VisionClient with canned detections and optional failures."""

    is_ready = True

    def __init__(
        self,
        text_annotations: Optional[List[DetectedTextBlock]] = None,
        labels: Optional[List[DetectedLabel]] = None,
        products: Optional[List[ProductMatch]] = None,
        text_error: Optional[Exception] = None,
        label_error: Optional[Exception] = None,
        search_error: Optional[Exception] = None,
        search_delay: float = 0.0,
        text_delay: float = 0.0,
        label_delay: float = 0.0,
    ):
        self.text_annotations = text_annotations or []
        self.labels = labels or []
        self.products = products or []
        self.text_error = text_error
        self.label_error = label_error
        self.search_error = search_error
        self.search_delay = search_delay
        self.text_delay = text_delay
        self.label_delay = label_delay
        self.calls: List[str] = []

    def detect_text(self, image_bytes: bytes) -> List[DetectedTextBlock]:
        self.calls.append("detect_text")
        if self.text_delay:
            time.sleep(self.text_delay)
        if self.text_error:
            raise self.text_error
        return list(self.text_annotations)

    def detect_labels(self, image_bytes: bytes) -> List[DetectedLabel]:
        self.calls.append("detect_labels")
        if self.label_delay:
            time.sleep(self.label_delay)
        if self.label_error:
            raise self.label_error
        return list(self.labels)

    def search_products(self, image_bytes: bytes) -> List[ProductMatch]:
        self.calls.append("search_products")
        if self.search_delay:
            time.sleep(self.search_delay)
        if self.search_error:
            raise self.search_error
        return list(self.products)
