"""Brand detection through the vision service's Product Search index.

Primary strategy: match the photo against a packaged-goods catalog and read
the brand off the top match. Any failure (API error, quota, timeout) just
means "no result" so the OCR strategy can take over.
"""

import asyncio
import re
from typing import Optional, List, Callable, Pattern
import logging

from .exclusion import is_obviously_not_brand
from .results import BrandResult, BrandMethod, round_half_up
from .vision import (
    VisionClient,
    VisionServiceError,
    ProductMatch,
    PERMISSION_DENIED,
    RESOURCE_EXHAUSTED,
)

logger = logging.getLogger(__name__)

BrandExtractor = Callable[[str], Optional[str]]

DEFAULT_TIMEOUT_SECONDS = 10.0
BRAND_LABEL_KEYS = ("brand", "manufacturer")


def _leading_group(pattern: Pattern) -> BrandExtractor:
    def extract(display_name: str) -> Optional[str]:
        match = pattern.match(display_name)
        return match.group(1).strip() if match else None
    return extract


# Tried in order, first plausible match wins
BRAND_NAME_EXTRACTORS: List[BrandExtractor] = [
    # "Brand Name - Product Description"
    _leading_group(re.compile(r"([^-]+)\s*-")),
    # "Brand Name Product Description" (one or two capitalized words)
    _leading_group(re.compile(r"([A-Z][a-zA-Z'&-]*(?:\s+[A-Z][a-zA-Z'&-]*)?)")),
    # First run of capitalized words
    _leading_group(re.compile(r"([A-Z][a-z]+(?:\s+[A-Z][a-z]+)*)")),
]


def extract_brand_from_product_name(display_name: str) -> Optional[str]:
    """Pull the brand out of a catalog display name, or None."""
    if not display_name:
        return None

    for extractor in BRAND_NAME_EXTRACTORS:
        brand = extractor(display_name)
        if brand and len(brand) >= 2 and not is_obviously_not_brand(brand):
            return brand

    return None


def brand_from_labels(match: ProductMatch) -> Optional[str]:
    """Value of the first brand/manufacturer product label."""
    for label in match.labels:
        key = (label.key or "").lower()
        if any(k in key for k in BRAND_LABEL_KEYS):
            return label.value
    return None


def brand_from_match(match: ProductMatch) -> Optional[str]:
    """Display name patterns, then labels, then the first word of the name."""
    brand = extract_brand_from_product_name(match.display_name)
    if not brand:
        brand = brand_from_labels(match)
    if not brand and match.display_name:
        words = match.display_name.split()
        brand = words[0] if words else None
    return brand


class ProductSearchStrategy:
    """Runs Product Search against the vision service with a hard timeout."""

    def __init__(self, client: VisionClient, timeout_seconds: float = DEFAULT_TIMEOUT_SECONDS):
        self.client = client
        self.timeout_seconds = timeout_seconds

    async def detect(self, image_bytes: bytes) -> Optional[BrandResult]:
        """
        Identify the brand of the pictured product.

        Never raises: errors and timeouts are logged and reported as None.
        """
        logger.info("Attempting Product Search brand detection...")
        try:
            matches = await asyncio.wait_for(
                asyncio.to_thread(self.client.search_products, image_bytes),
                timeout=self.timeout_seconds,
            )
        except asyncio.TimeoutError:
            logger.warning(f"Product Search timeout after {self.timeout_seconds}s")
            return None
        except VisionServiceError as e:
            self._log_api_error(e)
            return None
        except Exception as e:
            logger.error(f"Product Search failed: {e}")
            return None

        if not matches:
            logger.info("No Product Search results found")
            return None

        top = matches[0]
        brand = brand_from_match(top)
        if not brand:
            logger.info("Product found but no clear brand identified")
            return None

        confidence = round_half_up((top.score or 0) * 100)
        logger.info(f"Product Search found brand: {brand!r} (confidence: {confidence}%)")
        return BrandResult(
            name=brand,
            confidence=confidence,
            method=BrandMethod.PRODUCT_SEARCH,
            product_info=top.to_info(),
        )

    def _log_api_error(self, error: VisionServiceError) -> None:
        if error.code == PERMISSION_DENIED:
            logger.error("Product Search API access denied - check project configuration")
        elif error.code == RESOURCE_EXHAUSTED:
            logger.error("Product Search API quota exceeded")
        else:
            logger.error(f"Product Search failed: {error.message} (code={error.code})")
