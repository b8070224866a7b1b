"""Result value objects produced by the identification pipeline."""

from dataclasses import dataclass
from enum import Enum
from typing import Optional, Dict, Any


class BrandMethod(str, Enum):
    """How a brand was found."""
    PRODUCT_SEARCH = "product_search"
    OCR_TEXT_COMBINATION = "ocr_text_combination"
    OCR_FALLBACK = "ocr_fallback"
    OCR_BEST_GUESS = "ocr_best_guess"


class FoodMethod(str, Enum):
    """How a food/product category was found."""
    ENHANCED_CATEGORIZATION = "enhanced_categorization"
    FALLBACK_LABEL = "fallback_label"


class ResultType(str, Enum):
    BRAND = "brand"
    FOOD = "food"
    UNKNOWN = "unknown"


@dataclass(frozen=True)
class BrandResult:
    """A brand identified by one of the detection strategies."""
    name: str
    confidence: int
    method: BrandMethod
    product_info: Optional[Dict[str, Any]] = None

    @property
    def from_product_search(self) -> bool:
        return self.method == BrandMethod.PRODUCT_SEARCH


@dataclass(frozen=True)
class FoodResult:
    """A product category derived from image labels."""
    name: str
    category: str
    confidence: int
    method: FoodMethod


UNKNOWN_PRODUCT_NAME = "Unknown Product"


@dataclass(frozen=True)
class IdentificationResult:
    """Final outcome of one identification request."""
    type: ResultType
    name: str
    confidence: int
    method: str
    category: Optional[str] = None
    product_info: Optional[Dict[str, Any]] = None

    @classmethod
    def from_brand(cls, brand: BrandResult) -> "IdentificationResult":
        return cls(
            type=ResultType.BRAND,
            name=brand.name,
            confidence=brand.confidence,
            method=brand.method.value,
            product_info=brand.product_info,
        )

    @classmethod
    def from_food(cls, food: FoodResult) -> "IdentificationResult":
        return cls(
            type=ResultType.FOOD,
            name=food.name,
            confidence=food.confidence,
            method=food.method.value,
            category=food.category,
        )

    @classmethod
    def unknown(cls) -> "IdentificationResult":
        """Result when neither a brand nor a category could be found."""
        return cls(type=ResultType.UNKNOWN, name=UNKNOWN_PRODUCT_NAME, confidence=0, method="none")


def round_half_up(value: float) -> int:
    """Round a non-negative score to the nearest integer, .5 rounding up."""
    return int(value + 0.5)
