"""API route definitions."""

import time
from typing import Optional
import logging

from fastapi import APIRouter, Depends, File, Request, UploadFile
from fastapi.responses import JSONResponse

from ..models import IdentifyResponse, UploadTestResponse, HealthResponse
from ..services import (
    BrandIdentifier,
    ErrorKind,
    IdentificationError,
    ImagePreprocessor,
    VisionClient,
    VisionServiceError,
    build_vision_client,
)
from ..config import get_settings
from .. import __version__

logger = logging.getLogger(__name__)
router = APIRouter()


def get_vision_client(request: Request) -> Optional[VisionClient]:
    """Vision backend created at startup, or None if startup could not build it."""
    return getattr(request.app.state, "vision_client", None)


def _build_vision_client(request: Request) -> VisionClient:
    """Retry creating the vision backend that failed at startup."""
    client = build_vision_client(get_settings())
    request.app.state.vision_client = client
    return client


def get_preprocessor() -> ImagePreprocessor:
    return ImagePreprocessor(get_settings())


def _error_response(kind: ErrorKind, message: Optional[str] = None) -> JSONResponse:
    body = IdentifyResponse.failure(message or kind.message)
    return JSONResponse(status_code=kind.status_code, content=body.model_dump(by_alias=True))


@router.get("/health", response_model=HealthResponse, tags=["System"])
async def health_check(request: Request):
    """Check API health and vision backend readiness."""
    client = getattr(request.app.state, "vision_client", None)
    return HealthResponse(
        status="healthy",
        version=__version__,
        vision_backend=get_settings().vision_backend,
        vision_ready=bool(client is not None and client.is_ready),
    )


@router.post(
    "/identify-brand",
    response_model=IdentifyResponse,
    responses={
        400: {"model": IdentifyResponse, "description": "Missing or invalid image"},
        403: {"model": IdentifyResponse, "description": "Vision API access denied"},
        429: {"model": IdentifyResponse, "description": "Vision API quota exceeded"},
        500: {"model": IdentifyResponse, "description": "Processing error"},
        503: {"model": IdentifyResponse, "description": "Vision API unavailable"},
    },
    tags=["Identification"],
)
async def identify_brand(
    request: Request,
    image: Optional[UploadFile] = File(None, description="Product photo (JPEG, PNG or WebP, max 10MB)"),
    vision_client: Optional[VisionClient] = Depends(get_vision_client),
    preprocessor: ImagePreprocessor = Depends(get_preprocessor),
):
    """
    Identify the brand of a photographed product.

    Falls back to a food/product category when no brand can be read, and to
    "Unknown Product" when nothing can be identified.
    """
    start_time = time.time()

    if image is None:
        return _error_response(ErrorKind.NO_IMAGE)

    image_bytes = await image.read()
    validation = preprocessor.validate_image(image_bytes, image.filename or "unknown", image.content_type)
    if not validation.is_valid:
        kind = ErrorKind.EMPTY_IMAGE if validation.is_empty else ErrorKind.INVALID_IMAGE
        return _error_response(kind, validation.error)

    logger.info(f"Processing image: {image.filename}, Size: {len(image_bytes)} bytes")

    try:
        if vision_client is None:
            vision_client = _build_vision_client(request)
        identifier = BrandIdentifier(vision_client, get_settings())
        outcome = await identifier.identify(image_bytes)
    except IdentificationError as e:
        logger.error(f"Identification failed ({e.kind.value}): {e}")
        return _error_response(e.kind)
    except VisionServiceError as e:
        logger.error(f"Vision backend unavailable (code={e.code}): {e}")
        return _error_response(IdentificationError.from_vision_error(e).kind)
    except Exception as e:
        logger.exception(f"Error in brand identification: {e}")
        return _error_response(ErrorKind.INTERNAL)

    elapsed_ms = int((time.time() - start_time) * 1000)
    result = outcome.result
    logger.info(f"Identified {result.type.value}: {result.name} ({result.confidence}%, {result.method}) in {elapsed_ms}ms")

    return IdentifyResponse.from_outcome(outcome)


@router.post("/test-upload", response_model=UploadTestResponse, tags=["Identification"])
async def test_upload(
    image: Optional[UploadFile] = File(None, description="Image to check"),
    preprocessor: ImagePreprocessor = Depends(get_preprocessor),
):
    """Check that an image upload is accepted, without calling the vision service."""
    if image is None:
        return JSONResponse(
            status_code=400,
            content=UploadTestResponse(success=False, error=ErrorKind.NO_IMAGE.message).model_dump(by_alias=True),
        )

    image_bytes = await image.read()
    validation = preprocessor.validate_image(image_bytes, image.filename or "unknown", image.content_type)
    if not validation.is_valid:
        return JSONResponse(
            status_code=400,
            content=UploadTestResponse(success=False, error=validation.error).model_dump(by_alias=True),
        )

    info = preprocessor.get_image_info(image_bytes)
    return UploadTestResponse(
        success=True,
        filename=image.filename,
        content_type=image.content_type,
        size_bytes=info["size_bytes"],
        width=info["width"],
        height=info["height"],
        format=info["format"],
    )
