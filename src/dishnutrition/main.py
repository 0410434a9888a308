"""FastAPI application entry point."""

import os
from collections.abc import AsyncIterator
from contextlib import asynccontextmanager

from fastapi import FastAPI
from fastapi.middleware.cors import CORSMiddleware

from dishnutrition.config import get_settings
from dishnutrition.estimate.service import build_service
from dishnutrition.logging_config import configure_logging, get_logger
from dishnutrition.routers import estimates_router

settings = get_settings()

# Configure logging on module load
configure_logging(log_level=settings.log_level)
logger = get_logger(__name__)


@asynccontextmanager
async def lifespan(app: FastAPI) -> AsyncIterator[None]:
    """Application lifespan handler for startup and shutdown events."""
    logger.info("Starting Dish Nutrition API")

    # Tests may install their own service before startup
    if getattr(app.state, "service", None) is None:
        app.state.service = build_service(settings)

    yield

    logger.info("Shutting down Dish Nutrition API")
    try:
        await app.state.service.close()
    except Exception as e:
        logger.warning(f"Error closing service clients: {e}")


app = FastAPI(
    title="Dish Nutrition API",
    description="Per-serving nutrition estimates for dishes from household recipes",
    version="0.1.0",
    lifespan=lifespan,
)

app.add_middleware(
    CORSMiddleware,
    allow_origins=settings.allowed_origins.split(","),
    allow_credentials=True,
    allow_methods=["*"],
    allow_headers=["*"],
)

app.include_router(estimates_router)


@app.get("/health")
async def health_check() -> dict:
    """Basic health check endpoint."""
    return {"status": "ok", "service": "dishnutrition-api"}


@app.get("/")
async def root() -> dict:
    """Root endpoint with API information."""
    return {
        "name": "Dish Nutrition API",
        "version": "0.1.0",
        "docs": "/docs",
        "health": "/health",
    }


def run() -> None:
    """Serve the API with uvicorn."""
    import uvicorn

    uvicorn.run(
        "dishnutrition.main:app",
        host=os.getenv("HOST", "127.0.0.1"),
        port=int(os.getenv("PORT", "8000")),
        reload=settings.is_development,
        log_config=None,
    )
