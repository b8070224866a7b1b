"""Image-recognition collaborator interface and the value types it returns.

Backends (Google Cloud Vision, local EasyOCR) implement ``VisionClient``
and raise ``VisionServiceError`` for every upstream failure, so the
identification pipeline never sees SDK-specific exceptions.
"""

from dataclasses import dataclass, field
from typing import Optional, List, Dict, Any, Protocol
import logging

from .geometry import BoundingPoly
from ..config import Settings

logger = logging.getLogger(__name__)


# gRPC status codes surfaced by the vision service
INVALID_ARGUMENT = 3
PERMISSION_DENIED = 7
RESOURCE_EXHAUSTED = 8
UNAVAILABLE = 14


class VisionServiceError(Exception):
    """Failure reported by (or while talking to) the vision service."""

    def __init__(self, message: str, code: Optional[int] = None):
        super().__init__(message)
        self.message = message
        self.code = code


@dataclass(frozen=True)
class DetectedTextBlock:
    """A recognized text fragment and where it sits in the image."""
    text: str
    bounding_box: Optional[BoundingPoly] = None
    confidence: Optional[float] = None


@dataclass(frozen=True)
class DetectedLabel:
    """An image label with the service's score (0-1)."""
    description: str
    score: float


@dataclass(frozen=True)
class ProductLabel:
    """Key/value metadata attached to a catalog product."""
    key: str
    value: str


@dataclass(frozen=True)
class ProductMatch:
    """A catalog product matched by Product Search."""
    score: float
    display_name: str = ""
    category: Optional[str] = None
    labels: List[ProductLabel] = field(default_factory=list)

    def to_info(self) -> Dict[str, Any]:
        """Product details echoed back to the client."""
        return {
            "displayName": self.display_name,
            "category": self.category,
            "labels": [{"key": l.key, "value": l.value} for l in self.labels],
        }


class VisionClient(Protocol):
    """
    Image-recognition operations consumed by the identification pipeline.

    ``detect_text`` follows the vision service convention: the first block is
    the aggregate full text of the image, individual fragments follow.
    All methods are blocking and may raise ``VisionServiceError``.
    """

    @property
    def is_ready(self) -> bool: ...

    def detect_text(self, image_bytes: bytes) -> List[DetectedTextBlock]: ...

    def detect_labels(self, image_bytes: bytes) -> List[DetectedLabel]: ...

    def search_products(self, image_bytes: bytes) -> List[ProductMatch]: ...


def build_vision_client(settings: Settings) -> VisionClient:
    """Create the vision backend selected in settings."""
    backend = settings.vision_backend.lower()

    if backend == "google":
        from .google_vision import GoogleVisionClient
        return GoogleVisionClient.from_settings(settings)

    if backend == "easyocr":
        from .ocr import EasyOCRVisionClient
        client = EasyOCRVisionClient(settings)
        if not client.initialize():
            logger.warning("EasyOCR engine failed to initialize - will retry on first request")
        return client

    raise ValueError(f"Unknown vision backend: {settings.vision_backend!r}")
