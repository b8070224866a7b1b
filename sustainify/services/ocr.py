"""Local OCR backend using EasyOCR (PyTorch-based, runs offline).

Text-only: label detection and Product Search need the cloud service, so
this backend returns no labels and no product matches. Identification then
relies on the OCR strategy alone.
"""

import os
import re
import threading
import unicodedata
from typing import Optional, List, Any
import logging

import numpy as np

from .geometry import BoundingPoly
from .preprocessing import load_image
from .vision import VisionServiceError, DetectedTextBlock, DetectedLabel, ProductMatch, INVALID_ARGUMENT
from ..config import Settings, get_settings

logger = logging.getLogger(__name__)


def normalize_text(text: str) -> str:
    """
    Normalize OCR text output.
    - Unicode NFKC normalization
    - Collapse whitespace
    - Strip leading/trailing whitespace
    """
    normalized = unicodedata.normalize("NFKC", text)
    normalized = re.sub(r"\s+", " ", normalized)
    return normalized.strip()


def _reading_order(blocks: List[DetectedTextBlock]) -> List[DetectedTextBlock]:
    """Sort blocks by line (bucketed on median height), then left-to-right."""
    def top(b: DetectedTextBlock) -> int:
        return min(v.y for v in b.bounding_box.vertices)

    def left(b: DetectedTextBlock) -> int:
        return min(v.x for v in b.bounding_box.vertices)

    heights = [max(v.y for v in b.bounding_box.vertices) - top(b) for b in blocks]
    line_h = int(np.median(heights)) if heights else 20
    line_h = max(12, min(line_h, 60))
    return sorted(blocks, key=lambda b: (top(b) // line_h, left(b)))


class EasyOCRVisionClient:
    """EasyOCR wrapper implementing the text part of VisionClient."""

    def __init__(self, settings: Optional[Settings] = None, reader: Any = None):
        self.settings = settings or get_settings()
        self._reader = reader
        self._lock = threading.Lock()
        self._semaphore = threading.Semaphore(self.settings.ocr_max_concurrent)

    def initialize(self) -> bool:
        """
        Load the EasyOCR model. Thread-safe, safe to call repeatedly.

        Returns:
            True if the reader is ready
        """
        with self._lock:
            if self._reader is not None:
                return True

            try:
                import easyocr
                import torch

                num_threads = int(os.environ.get("TORCH_NUM_THREADS", min(4, os.cpu_count() or 2)))
                torch.set_num_threads(num_threads)

                logger.info(f"Initializing EasyOCR engine with {num_threads} threads...")
                self._reader = easyocr.Reader(
                    self.settings.easyocr_languages,
                    gpu=False,
                    model_storage_directory=self.settings.easyocr_model_dir,
                    verbose=False,
                )
                logger.info("EasyOCR initialized successfully")
                return True

            except Exception as e:
                logger.exception(f"Failed to initialize EasyOCR: {e}")
                return False

    @property
    def is_ready(self) -> bool:
        return self._reader is not None

    def detect_text(self, image_bytes: bytes) -> List[DetectedTextBlock]:
        """Run OCR; the first returned block is the full text in reading order."""
        if not self.is_ready and not self.initialize():
            raise VisionServiceError("OCR engine not initialized")

        try:
            image = load_image(image_bytes)
        except Exception as e:
            raise VisionServiceError(f"Unable to decode image: {e}", code=INVALID_ARGUMENT) from e

        with self._semaphore:
            try:
                detections = self._reader.readtext(image, decoder="greedy", batch_size=1, paragraph=False)
            except Exception as e:
                raise VisionServiceError(f"OCR processing failed: {e}") from e

        blocks = []
        for bbox_points, text, confidence in detections or []:
            normalized = normalize_text(text)
            if not normalized:
                continue
            blocks.append(DetectedTextBlock(
                text=normalized,
                bounding_box=BoundingPoly.from_points(bbox_points),
                confidence=float(confidence),
            ))

        if not blocks:
            logger.warning("OCR returned no results")
            return []

        full_text = " ".join(b.text for b in _reading_order(blocks))
        return [DetectedTextBlock(text=full_text)] + blocks

    def detect_labels(self, image_bytes: bytes) -> List[DetectedLabel]:
        return []

    def search_products(self, image_bytes: bytes) -> List[ProductMatch]:
        return []
