"""Health check endpoints."""

import structlog
from fastapi import APIRouter, HTTPException, Request
from fastapi.responses import PlainTextResponse

from src.core.books.errors import StorageError

logger = structlog.get_logger(__name__)

router = APIRouter(tags=["Health"])


@router.get("/health")
async def health_check() -> dict:
    """Basic health check endpoint."""
    return {"status": "healthy"}


@router.get("/health/ready")
async def readiness_check(request: Request) -> dict:
    """Readiness check - verifies the book store can be read."""
    repository = request.app.state.book_repository
    try:
        books = await repository.check_readable()
    except StorageError as e:
        logger.warning("Readiness check failed", error=str(e))
        raise HTTPException(status_code=503, detail="Book store unreadable")
    return {
        "status": "ready",
        "app": request.app.state.settings.app_name,
        "storage_backend": repository.storage.name,
        "books": books,
    }


@router.get("/health/live")
async def liveness_check() -> dict:
    """Liveness check - verifies service is running."""
    return {"status": "alive"}


@router.get("/hello", response_class=PlainTextResponse)
async def hello() -> str:
    """Plain-text greeting."""
    return "Hello World!"
