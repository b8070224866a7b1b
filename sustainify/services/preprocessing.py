"""Upload validation and image decoding."""

import io
from dataclasses import dataclass
from typing import Optional
import logging

import cv2
import numpy as np
from PIL import Image, UnidentifiedImageError

from ..config import Settings, get_settings

logger = logging.getLogger(__name__)


def load_image(image_bytes: bytes) -> np.ndarray:
    """Decode image bytes into an OpenCV BGR array."""
    # Use PIL to handle various formats, then convert to OpenCV
    pil_image = Image.open(io.BytesIO(image_bytes))

    if pil_image.mode != "RGB":
        pil_image = pil_image.convert("RGB")

    image = np.array(pil_image)
    return cv2.cvtColor(image, cv2.COLOR_RGB2BGR)


@dataclass
class UploadValidation:
    """Outcome of checking an uploaded image."""
    is_valid: bool
    error: str = ""
    is_empty: bool = False


class ImagePreprocessor:
    """Checks uploaded images before they are sent for recognition."""

    def __init__(self, settings: Optional[Settings] = None):
        self.settings = settings or get_settings()

    def get_image_info(self, image_bytes: bytes) -> dict:
        """Get basic image information without decoding pixel data."""
        pil_image = Image.open(io.BytesIO(image_bytes))
        return {
            "format": pil_image.format,
            "mode": pil_image.mode,
            "width": pil_image.width,
            "height": pil_image.height,
            "size_bytes": len(image_bytes),
            "size_mb": len(image_bytes) / (1024 * 1024),
        }

    def validate_image(
        self,
        image_bytes: bytes,
        filename: str,
        content_type: Optional[str] = None,
    ) -> UploadValidation:
        """
        Validate an upload: non-empty, allowed type, within size limit, decodable.
        """
        if not image_bytes:
            return UploadValidation(is_valid=False, error="Invalid image data", is_empty=True)

        ext = filename.rsplit(".", 1)[-1].lower() if "." in filename else ""
        type_ok = content_type in self.settings.allowed_content_types if content_type else False
        if not type_ok and ext not in self.settings.allowed_extensions:
            return UploadValidation(
                is_valid=False,
                error="Invalid file type. Only JPEG, PNG, JPG, and WebP are allowed.",
            )

        size_mb = len(image_bytes) / (1024 * 1024)
        if size_mb > self.settings.max_upload_size_mb:
            return UploadValidation(
                is_valid=False,
                error=f"Image exceeds {self.settings.max_upload_size_mb}MB upload limit. Please resize or compress.",
            )

        try:
            with Image.open(io.BytesIO(image_bytes)) as img:
                img.verify()
        except (UnidentifiedImageError, OSError, SyntaxError) as e:
            logger.warning(f"Rejected unreadable upload {filename!r}: {e}")
            return UploadValidation(is_valid=False, error="Invalid image format or corrupted image data")

        return UploadValidation(is_valid=True)
