"""Application configuration."""

from pydantic_settings import BaseSettings
from functools import lru_cache
from typing import Optional


class Settings(BaseSettings):
    """Application settings loaded from environment variables."""
    
    # App settings
    app_name: str = "Sustain-ify API"
    debug: bool = False
    log_level: str = "INFO"
    
    # CORS - frontend runs on a separate dev server
    cors_origins: list[str] = ["*"]
    
    # Upload limits
    max_upload_size_mb: int = 10
    allowed_content_types: set = {"image/jpeg", "image/jpg", "image/png", "image/webp"}
    allowed_extensions: set = {"png", "jpg", "jpeg", "webp"}
    
    # Vision backend: "google" (Cloud Vision) or "easyocr" (local, text only)
    vision_backend: str = "google"
    google_api_key: Optional[str] = None
    google_project_id: Optional[str] = None
    
    # Product Search
    product_set: Optional[str] = None  # projects/<p>/locations/<l>/productSets/<id>
    product_categories: list[str] = ["packagedgoods-v1"]
    product_search_max_results: int = 10
    product_search_timeout_seconds: float = 10.0
    
    # Text/label detection has no bound upstream; keep requests from hanging
    detection_timeout_seconds: float = 15.0
    
    # Arbitration thresholds (0-100)
    product_search_skip_ocr_confidence: int = 60  # accept without running OCR
    product_search_accept_confidence: int = 50  # final acceptance for product search hits
    ocr_accept_confidence: int = 25  # final acceptance for OCR-derived brands
    
    # EasyOCR backend
    easyocr_languages: list[str] = ["en"]
    easyocr_model_dir: Optional[str] = None
    ocr_max_concurrent: int = 1  # CPU-bound, no benefit from concurrency
    
    class Config:
        env_file = ".env"
        env_file_encoding = "utf-8"


@lru_cache
def get_settings() -> Settings:
    """Get cached settings instance."""
    return Settings()
