"""Pydantic models for request/response schemas."""

from .schemas import (
    ProductResult,
    IdentifyResponse,
    UploadTestResponse,
    HealthResponse,
)

__all__ = [
    "ProductResult",
    "IdentifyResponse",
    "UploadTestResponse",
    "HealthResponse",
]
