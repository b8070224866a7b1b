"""Google Cloud Vision backend."""

from typing import Optional, List, Any
import logging

from google.api_core import exceptions as google_exceptions
from google.auth import exceptions as auth_exceptions
from google.cloud import vision

from .geometry import BoundingPoly, Vertex
from .vision import (
    VisionServiceError,
    DetectedTextBlock,
    DetectedLabel,
    ProductMatch,
    ProductLabel,
)
from ..config import Settings

logger = logging.getLogger(__name__)


def _status_code(error: google_exceptions.GoogleAPIError) -> Optional[int]:
    """Numeric gRPC status of an API exception, when it carries one."""
    grpc_code = getattr(error, "grpc_status_code", None)
    if grpc_code is None:
        return None
    value = getattr(grpc_code, "value", None)
    if isinstance(value, tuple) and value:
        return value[0]
    return None


def _to_bounding_poly(poly: Any) -> Optional[BoundingPoly]:
    vertices = list(getattr(poly, "vertices", None) or [])
    if not vertices:
        return None
    return BoundingPoly(vertices=[Vertex(x=int(v.x or 0), y=int(v.y or 0)) for v in vertices])


class GoogleVisionClient:
    """VisionClient backed by ``google.cloud.vision.ImageAnnotatorClient``."""

    def __init__(
        self,
        client: Any,
        product_set: Optional[str] = None,
        product_categories: Optional[List[str]] = None,
        max_results: int = 10,
    ):
        self._client = client
        self.product_set = product_set
        self.product_categories = product_categories or ["packagedgoods-v1"]
        self.max_results = max_results

    @classmethod
    def from_settings(cls, settings: Settings) -> "GoogleVisionClient":
        """Create the SDK client from API key / project settings."""
        client_options = {}
        if settings.google_api_key:
            client_options["api_key"] = settings.google_api_key
        if settings.google_project_id:
            client_options["quota_project_id"] = settings.google_project_id

        try:
            client = vision.ImageAnnotatorClient(client_options=client_options or None)
        except (google_exceptions.GoogleAPIError, auth_exceptions.GoogleAuthError) as e:
            logger.error(f"Failed to initialize Google Vision client: {e}")
            raise VisionServiceError(
                "Google Cloud Vision API authentication failed. Please check credentials.",
                code=_status_code(e),
            ) from e

        logger.info("Google Vision client initialized successfully")
        return cls(
            client,
            product_set=settings.product_set,
            product_categories=settings.product_categories,
            max_results=settings.product_search_max_results,
        )

    @property
    def is_ready(self) -> bool:
        return self._client is not None

    def detect_text(self, image_bytes: bytes) -> List[DetectedTextBlock]:
        response = self._call("Text detection", self._client.text_detection, image=vision.Image(content=image_bytes))
        return [
            DetectedTextBlock(
                text=annotation.description or "",
                bounding_box=_to_bounding_poly(annotation.bounding_poly),
                confidence=annotation.confidence or None,
            )
            for annotation in response.text_annotations
        ]

    def detect_labels(self, image_bytes: bytes) -> List[DetectedLabel]:
        response = self._call("Label detection", self._client.label_detection, image=vision.Image(content=image_bytes))
        return [
            DetectedLabel(description=label.description, score=float(label.score))
            for label in response.label_annotations
        ]

    def search_products(self, image_bytes: bytes) -> List[ProductMatch]:
        params = {"product_categories": self.product_categories, "filter": ""}
        if self.product_set:
            params["product_set"] = self.product_set

        request = {
            "image": vision.Image(content=image_bytes),
            "features": [{"type_": vision.Feature.Type.PRODUCT_SEARCH, "max_results": self.max_results}],
            "image_context": {"product_search_params": params},
        }
        response = self._call("Product Search", self._client.annotate_image, request)

        matches = []
        for result in response.product_search_results.results:
            product = result.product
            if not product:
                continue
            matches.append(ProductMatch(
                score=float(result.score or 0),
                display_name=product.display_name or "",
                category=product.product_category or None,
                labels=[ProductLabel(key=l.key, value=l.value) for l in product.product_labels],
            ))
        return matches

    def _call(self, operation: str, method, *args, **kwargs):
        """Invoke an SDK method and normalise every failure to VisionServiceError."""
        try:
            response = method(*args, **kwargs)
        except google_exceptions.GoogleAPIError as e:
            raise VisionServiceError(f"{operation} failed: {e}", code=_status_code(e)) from e

        error = getattr(response, "error", None)
        if error is not None and error.message:
            raise VisionServiceError(f"{operation} failed: {error.message}", code=error.code or None)
        return response
