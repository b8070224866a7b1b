"""Pydantic schemas for API responses.

Field names are snake_case in Python and camelCase on the wire, which is
what the frontend reads.
"""

from pydantic import BaseModel, Field
from typing import Optional, Any, Dict

from ..services.identification import IdentificationOutcome
from ..services.results import IdentificationResult


class ProductResult(BaseModel):
    """Identified brand, food category, or unknown product."""
    type: str
    name: str
    confidence: int = Field(ge=0, le=100)
    method: str
    category: Optional[str] = None
    product_info: Optional[Dict[str, Any]] = Field(None, alias="productInfo")

    class Config:
        populate_by_name = True
        json_schema_extra = {
            "example": {
                "type": "brand",
                "name": "Coca Cola",
                "confidence": 90,
                "method": "ocr_text_combination",
            }
        }

    @classmethod
    def from_result(cls, result: IdentificationResult) -> "ProductResult":
        return cls(
            type=result.type.value,
            name=result.name,
            confidence=result.confidence,
            method=result.method,
            category=result.category,
            product_info=result.product_info,
        )


class IdentifyResponse(BaseModel):
    """Response for brand identification."""
    success: bool
    result: Optional[ProductResult] = None
    extracted_text: Optional[str] = Field(None, alias="extractedText")
    all_labels: list[str] = Field(default_factory=list, alias="allLabels")
    image_quality: Optional[int] = Field(None, alias="imageQuality")
    error: Optional[str] = None

    class Config:
        populate_by_name = True

    @classmethod
    def from_outcome(cls, outcome: IdentificationOutcome) -> "IdentifyResponse":
        return cls(
            success=True,
            result=ProductResult.from_result(outcome.result),
            extracted_text=outcome.extracted_text,
            all_labels=outcome.all_labels,
            image_quality=outcome.image_quality,
        )

    @classmethod
    def failure(cls, error: str) -> "IdentifyResponse":
        return cls(success=False, error=error)


class UploadTestResponse(BaseModel):
    """Upload probe response."""
    success: bool
    filename: Optional[str] = None
    content_type: Optional[str] = Field(None, alias="contentType")
    size_bytes: Optional[int] = Field(None, alias="sizeBytes")
    width: Optional[int] = None
    height: Optional[int] = None
    format: Optional[str] = None
    error: Optional[str] = None

    class Config:
        populate_by_name = True


class HealthResponse(BaseModel):
    """Health check response."""
    status: str
    version: str
    vision_backend: str
    vision_ready: bool
