"""Services for product identification: vision backends, brand heuristics, classification."""

from .vision import (
    VisionClient,
    VisionServiceError,
    DetectedTextBlock,
    DetectedLabel,
    ProductMatch,
    ProductLabel,
    build_vision_client,
)
from .geometry import BoundingPoly, Vertex
from .results import BrandResult, BrandMethod, FoodResult, FoodMethod, IdentificationResult, ResultType
from .identification import BrandIdentifier, IdentificationOutcome, IdentificationError, ErrorKind
from .preprocessing import ImagePreprocessor

__all__ = [
    "VisionClient",
    "VisionServiceError",
    "DetectedTextBlock",
    "DetectedLabel",
    "ProductMatch",
    "ProductLabel",
    "build_vision_client",
    "BoundingPoly",
    "Vertex",
    "BrandResult",
    "BrandMethod",
    "FoodResult",
    "FoodMethod",
    "IdentificationResult",
    "ResultType",
    "BrandIdentifier",
    "IdentificationOutcome",
    "IdentificationError",
    "ErrorKind",
    "ImagePreprocessor",
]
