"""Tests for image preprocessing service."""

import pytest
import numpy as np
from PIL import Image
import io

from sustainify.services.preprocessing import ImagePreprocessor, load_image
from sustainify.config import Settings
from helpers import png_bytes


@pytest.fixture
def preprocessor():
    """Create preprocessor instance."""
    return ImagePreprocessor(Settings(max_upload_size_mb=1))


@pytest.fixture
def sample_image_bytes():
    return png_bytes(200, 100)


class TestValidateImage:
    """Test ImagePreprocessor.validate_image."""

    def test_valid_image(self, preprocessor, sample_image_bytes):
        """Test validation passes for valid image."""
        validation = preprocessor.validate_image(sample_image_bytes, "test.png", "image/png")
        assert validation.is_valid is True
        assert validation.error == ""

    def test_empty_image(self, preprocessor):
        """Test empty upload is flagged as empty."""
        validation = preprocessor.validate_image(b"", "test.png", "image/png")
        assert validation.is_valid is False
        assert validation.is_empty is True
        assert validation.error == "Invalid image data"

    def test_extension_accepted_without_content_type(self, preprocessor, sample_image_bytes):
        """Test allowed extension is enough without content type."""
        assert preprocessor.validate_image(sample_image_bytes, "photo.PNG").is_valid is True

    def test_content_type_accepted_without_extension(self, preprocessor, sample_image_bytes):
        """Test allowed content type is enough without extension."""
        assert preprocessor.validate_image(sample_image_bytes, "blob", "image/png").is_valid is True

    def test_invalid_type(self, preprocessor, sample_image_bytes):
        """Test disallowed file type is rejected."""
        validation = preprocessor.validate_image(sample_image_bytes, "label.gif", "image/gif")
        assert validation.is_valid is False
        assert validation.is_empty is False
        assert "Invalid file type" in validation.error

    def test_oversized_image(self, preprocessor):
        """Test upload over the size limit is rejected."""
        oversized = b"\x00" * (1024 * 1024 + 1)
        validation = preprocessor.validate_image(oversized, "big.jpg", "image/jpeg")
        assert validation.is_valid is False
        assert "1MB" in validation.error

    def test_corrupted_image(self, preprocessor):
        """Test undecodable bytes are rejected."""
        validation = preprocessor.validate_image(b"this is not a picture", "fake.jpg", "image/jpeg")
        assert validation.is_valid is False
        assert validation.error == "Invalid image format or corrupted image data"


class TestImageInfo:
    """Test image metadata and decoding."""

    def test_get_image_info(self, preprocessor, sample_image_bytes):
        """Test image metadata is reported."""
        info = preprocessor.get_image_info(sample_image_bytes)

        assert info["format"] == "PNG"
        assert info["width"] == 200
        assert info["height"] == 100
        assert info["size_bytes"] == len(sample_image_bytes)

    def test_load_image_returns_bgr_array(self, sample_image_bytes):
        """Test image decodes to a BGR array."""
        image = load_image(sample_image_bytes)

        assert isinstance(image, np.ndarray)
        assert image.shape == (100, 200, 3)

    def test_load_image_converts_grayscale(self):
        """Test grayscale images decode to three channels."""
        img = Image.new("L", (40, 30), color=128)
        buffer = io.BytesIO()
        img.save(buffer, format="PNG")

        image = load_image(buffer.getvalue())

        assert image.shape == (30, 40, 3)
