# Standard library imports
from pathlib import Path
from contextlib import asynccontextmanager
import logging

# External package imports
from dotenv import load_dotenv
from fastapi import FastAPI
from fastapi.middleware.cors import CORSMiddleware

# Local application imports
from .api.v1 import device_router
from .core.config import get_settings
from .infrastructure.db import close_database

logger = logging.getLogger(__name__)


@asynccontextmanager
async def lifespan(app: FastAPI):
    """
    Lifespan context manager for startup/shutdown events.

    The MongoDB client is created lazily on first use and closed on shutdown.
    """
    logger.info("Eco-Rent API starting")

    yield

    try:
        close_database()
        logger.info("MongoDB client closed")
    except Exception as e:
        logger.error(f"Error closing MongoDB client: {e}", exc_info=True)

    logger.info("Application shutdown complete")


def create_application() -> FastAPI:
    """
    Create and configure FastAPI application.

    This function sets up the FastAPI application with:
    - Environment variable loading
    - CORS middleware configuration
    - API route registration

    Returns:
        Configured FastAPI application instance
    """
    # Load environment variables from .env file
    env_path = Path(__file__).resolve().parent.parent / ".env"
    load_dotenv(env_path)

    settings = get_settings()

    application = FastAPI(
        title="Eco-Rent API",
        version="1.0.0",
        description="Device rental marketplace backend",
        lifespan=lifespan
    )

    application.add_middleware(
        CORSMiddleware,
        allow_origins=settings.cors_origins,
        allow_credentials="*" not in settings.cors_origins,
        allow_methods=["GET", "POST", "PUT", "DELETE"],
        allow_headers=["*"],
    )

    application.include_router(device_router, prefix="/api/devices")

    @application.get("/health", tags=["system"])
    async def health() -> dict:
        return {"status": "ok"}

    return application


# Create application instance
app = create_application()
