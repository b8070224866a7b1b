"""Product identification pipeline.

Flow for one image:
1. Text detection, label detection and Product Search run concurrently.
2. A Product Search hit with confidence >= 60 is accepted as the brand.
3. Otherwise OCR-based detection runs; its result (or, failing that, the
   weaker Product Search hit) is accepted if it clears the threshold for
   its source: 50 for Product Search, 25 for OCR.
4. Without a brand, the image labels are classified into a food/product
   category, and failing that the product is reported as unknown.
"""

import asyncio
from dataclasses import dataclass, field
from enum import Enum
from typing import Optional, List, Tuple, TypeVar, Callable
import logging

from .food import identify_food_type
from .ocr_fallback import extract_brand_from_ocr
from .product_search import ProductSearchStrategy
from .quality import calculate_image_quality
from .results import BrandResult, IdentificationResult
from .vision import (
    VisionClient,
    VisionServiceError,
    DetectedTextBlock,
    DetectedLabel,
    INVALID_ARGUMENT,
    PERMISSION_DENIED,
    RESOURCE_EXHAUSTED,
    UNAVAILABLE,
)
from ..config import Settings, get_settings

logger = logging.getLogger(__name__)

T = TypeVar("T")


class ErrorKind(str, Enum):
    """Request-level failures, with HTTP status and user-facing message."""
    NO_IMAGE = "no_image"
    EMPTY_IMAGE = "empty_image"
    INVALID_IMAGE = "invalid_image"
    ACCESS_DENIED = "access_denied"
    QUOTA_EXCEEDED = "quota_exceeded"
    UNAVAILABLE = "unavailable"
    INTERNAL = "internal"

    @property
    def status_code(self) -> int:
        return _ERROR_STATUS[self]

    @property
    def message(self) -> str:
        return _ERROR_MESSAGES[self]


_ERROR_STATUS = {
    ErrorKind.NO_IMAGE: 400,
    ErrorKind.EMPTY_IMAGE: 400,
    ErrorKind.INVALID_IMAGE: 400,
    ErrorKind.ACCESS_DENIED: 403,
    ErrorKind.QUOTA_EXCEEDED: 429,
    ErrorKind.UNAVAILABLE: 503,
    ErrorKind.INTERNAL: 500,
}

_ERROR_MESSAGES = {
    ErrorKind.NO_IMAGE: "No image file provided",
    ErrorKind.EMPTY_IMAGE: "Invalid image data",
    ErrorKind.INVALID_IMAGE: "Invalid image format or corrupted image data",
    ErrorKind.ACCESS_DENIED: "Vision API access denied. Check authentication credentials",
    ErrorKind.QUOTA_EXCEEDED: "Vision API quota exceeded. Please try again later",
    ErrorKind.UNAVAILABLE: "Vision API temporarily unavailable",
    ErrorKind.INTERNAL: "Internal server error",
}

_VISION_CODE_KINDS = {
    INVALID_ARGUMENT: ErrorKind.INVALID_IMAGE,
    PERMISSION_DENIED: ErrorKind.ACCESS_DENIED,
    RESOURCE_EXHAUSTED: ErrorKind.QUOTA_EXCEEDED,
    UNAVAILABLE: ErrorKind.UNAVAILABLE,
}


def classify_vision_error(code: Optional[int]) -> ErrorKind:
    """Map a vision service status code onto a request error kind."""
    return _VISION_CODE_KINDS.get(code, ErrorKind.INTERNAL)


class IdentificationError(Exception):
    """Identification could not produce a result for this request."""

    def __init__(self, kind: ErrorKind, detail: Optional[str] = None):
        super().__init__(detail or kind.message)
        self.kind = kind
        self.detail = detail

    @classmethod
    def from_vision_error(cls, error: VisionServiceError) -> "IdentificationError":
        return cls(classify_vision_error(error.code), detail=error.message)


@dataclass
class IdentificationOutcome:
    """Identification result plus the raw detections behind it."""
    result: IdentificationResult
    extracted_text: str = ""
    all_labels: List[str] = field(default_factory=list)
    image_quality: int = 0


class BrandIdentifier:
    """Runs the brand -> food -> unknown fallback chain for one image."""

    def __init__(self, client: VisionClient, settings: Optional[Settings] = None):
        self.client = client
        self.settings = settings or get_settings()
        self.product_search = ProductSearchStrategy(
            client, timeout_seconds=self.settings.product_search_timeout_seconds
        )

    async def identify(self, image_bytes: bytes) -> IdentificationOutcome:
        """
        Identify the product in an image.

        Raises:
            IdentificationError: empty image, or both text and label
                detection failed
        """
        if not image_bytes:
            raise IdentificationError(ErrorKind.EMPTY_IMAGE)

        (text_annotations, text_error), (labels, label_error), product_result = await asyncio.gather(
            self._detect(self.client.detect_text, image_bytes, "Text"),
            self._detect(self.client.detect_labels, image_bytes, "Label"),
            self.product_search.detect(image_bytes),
        )

        if text_error is not None and label_error is not None:
            raise IdentificationError.from_vision_error(text_error)

        extracted_text = text_annotations[0].text if text_annotations else ""
        all_labels = [label.description for label in labels]
        image_quality = calculate_image_quality(text_annotations, labels)
        logger.info(
            f"Detected {max(len(text_annotations) - 1, 0)} text blocks, {len(labels)} labels, "
            f"image quality {image_quality}"
        )

        brand = self._select_brand(product_result, text_annotations)
        if brand is not None and brand.confidence >= self._min_confidence(brand):
            logger.info(f"Brand detected: {brand.name} (confidence: {brand.confidence}%, method: {brand.method.value})")
            result = IdentificationResult.from_brand(brand)
        else:
            result = self._classify_without_brand(labels)

        return IdentificationOutcome(
            result=result,
            extracted_text=extracted_text,
            all_labels=all_labels,
            image_quality=image_quality,
        )

    def _select_brand(
        self,
        product_result: Optional[BrandResult],
        text_annotations: List[DetectedTextBlock],
    ) -> Optional[BrandResult]:
        """Confident Product Search hit, else OCR, else the weak Product Search hit."""
        if product_result is not None:
            if product_result.confidence >= self.settings.product_search_skip_ocr_confidence:
                logger.info(f"Product Search successful: {product_result.name}")
                return product_result
            logger.info(f"Product Search found result but low confidence: {product_result.confidence}%")

        logger.info("Falling back to OCR-based brand detection...")
        ocr_result = extract_brand_from_ocr(text_annotations)
        if ocr_result is not None:
            return ocr_result

        if product_result is None:
            logger.info("Both Product Search and OCR failed to find brand")
        return product_result

    def _min_confidence(self, brand: BrandResult) -> int:
        if brand.from_product_search:
            return self.settings.product_search_accept_confidence
        return self.settings.ocr_accept_confidence

    def _classify_without_brand(self, labels: List[DetectedLabel]) -> IdentificationResult:
        food = identify_food_type(labels)
        if food is not None:
            return IdentificationResult.from_food(food)
        logger.info("No brand or food type could be identified")
        return IdentificationResult.unknown()

    async def _detect(
        self,
        call: Callable[[bytes], List[T]],
        image_bytes: bytes,
        name: str,
    ) -> Tuple[List[T], Optional[VisionServiceError]]:
        """Run one detection call; failures yield an empty list and the error."""
        try:
            results = await asyncio.wait_for(
                asyncio.to_thread(call, image_bytes),
                timeout=self.settings.detection_timeout_seconds,
            )
            return list(results or []), None
        except asyncio.TimeoutError:
            logger.error(f"{name} detection timed out after {self.settings.detection_timeout_seconds}s")
            return [], VisionServiceError(f"{name} detection timed out", code=UNAVAILABLE)
        except VisionServiceError as e:
            logger.error(f"{name} detection failed: {e.message} (code={e.code})")
            return [], e
        except Exception as e:
            logger.exception(f"{name} detection failed: {e}")
            return [], VisionServiceError(str(e))
