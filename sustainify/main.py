"""FastAPI application entry point."""

import logging
from contextlib import asynccontextmanager
from fastapi import FastAPI
from fastapi.middleware.cors import CORSMiddleware

from .api import router
from .services import VisionServiceError, build_vision_client
from .config import get_settings
from . import __version__

settings = get_settings()

# Configure logging
logging.basicConfig(
    level=settings.log_level.upper(),
    format="%(asctime)s - %(name)s - %(levelname)s - %(message)s"
)
logger = logging.getLogger(__name__)


@asynccontextmanager
async def lifespan(app: FastAPI):
    """Application lifespan manager - handles startup and shutdown."""
    # Startup
    logger.info("Starting Sustain-ify API...")
    settings = get_settings()

    # Create vision client once and share it across requests
    try:
        app.state.vision_client = build_vision_client(settings)
        logger.info(f"Vision backend '{settings.vision_backend}' ready")
    except VisionServiceError as e:
        app.state.vision_client = None
        logger.warning(f"Vision backend failed to initialize - will retry on first request: {e}")

    logger.info(f"API ready - Version {__version__}")

    yield

    # Shutdown
    logger.info("Shutting down Sustain-ify API...")


def create_app() -> FastAPI:
    """Create and configure FastAPI application."""
    settings = get_settings()

    app = FastAPI(
        title=settings.app_name,
        description="""
## Sustain-ify Product Identification API

Photograph a product and find out what it is.

### Features
- **Product Search**: Match the photo against a packaged-goods catalog
- **OCR Brand Detection**: Read the brand from the packaging text
- **Category Fallback**: Classify unbranded items (snacks, beverages, produce...)

### Quick Start
1. Use `/api/health` to check API status
2. Use `/api/test-upload` to check an image is accepted
3. Use `/api/identify-brand` to identify a product
        """,
        version=__version__,
        lifespan=lifespan,
        docs_url="/docs",
        redoc_url="/redoc",
    )

    app.add_middleware(
        CORSMiddleware,
        allow_origins=settings.cors_origins,
        allow_credentials=True,
        allow_methods=["GET", "POST", "OPTIONS"],
        allow_headers=["*"],
    )

    app.include_router(router, prefix="/api")

    @app.get("/", include_in_schema=False)
    async def root():
        return {
            "message": "Sustain-ify API",
            "version": __version__,
            "docs": "/docs"
        }

    return app


# Create app instance
app = create_app()
