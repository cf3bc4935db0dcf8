"""FastAPI application entry point."""

from contextlib import asynccontextmanager

from fastapi import FastAPI, Request
from fastapi.exceptions import RequestValidationError
from fastapi.middleware.cors import CORSMiddleware
from fastapi.responses import JSONResponse
from prometheus_client import CollectorRegistry
from prometheus_fastapi_instrumentator import Instrumentator
from starlette.exceptions import HTTPException as StarletteHTTPException

from src.api.routes import books_router, health_router
from src.config import Settings, get_settings
from src.core.books.repository import BookRepository
from src.core.books.storage import create_storage
from src.utils.logging import setup_logging

VERSION = "1.0.0"


# Messages for malformed input, by (location, field)
VALIDATION_MESSAGES = {
    ("body", "title"): "Title is required",
    ("query", "title"): "Title query parameter is required",
    ("body", "rating"): "Rating must be an integer between 1 and 5",
    ("path", "book_id"): "Book ID must be an integer",
}


def _validation_message(request: Request, errors: list[dict]) -> str:
    if not errors:
        return "Invalid request"
    loc = tuple(errors[0].get("loc", ()))
    if loc == ("body",):
        # No JSON object at all
        field = "rating" if request.url.path.endswith("/rate") else "title"
        return VALIDATION_MESSAGES[("body", field)]
    return VALIDATION_MESSAGES.get(loc[:2], errors[0].get("msg", "Invalid request"))


async def http_exception_handler(request: Request, exc: StarletteHTTPException) -> JSONResponse:
    """Report HTTP errors as {"error": message}."""
    return JSONResponse(
        status_code=exc.status_code,
        content={"error": exc.detail},
        headers=getattr(exc, "headers", None),
    )


async def validation_exception_handler(request: Request, exc: RequestValidationError) -> JSONResponse:
    """Report malformed input as 400 with a message naming the bad field."""
    return JSONResponse(
        status_code=400,
        content={"error": _validation_message(request, exc.errors())},
    )


def create_app(settings: Settings | None = None) -> FastAPI:
    """Build the application and its book repository."""
    settings = settings or get_settings()

    @asynccontextmanager
    async def lifespan(app: FastAPI):
        """Application lifespan handler for startup and shutdown."""
        setup_logging(debug=settings.debug)
        await app.state.book_repository.initialize()
        yield

    app = FastAPI(
        title=settings.app_name,
        description="Book catalog with titles and 1-5 ratings",
        version=VERSION,
        lifespan=lifespan,
        docs_url="/docs",
        redoc_url="/redoc",
        openapi_url="/openapi.json",
    )

    app.state.settings = settings
    app.state.book_repository = BookRepository(
        create_storage(settings),
        seed_titles=settings.seed_titles,
    )

    app.add_exception_handler(StarletteHTTPException, http_exception_handler)
    app.add_exception_handler(RequestValidationError, validation_exception_handler)

    # CORS middleware
    app.add_middleware(
        CORSMiddleware,
        allow_origins=["*"],
        allow_credentials=True,
        allow_methods=["*"],
        allow_headers=["*"],
    )

    # Prometheus metrics
    Instrumentator(registry=CollectorRegistry()).instrument(app).expose(app, endpoint="/metrics")

    # Include routers
    app.include_router(health_router)
    app.include_router(books_router)

    @app.get("/")
    async def api_info():
        """API information endpoint."""
        return {
            "service": settings.app_name,
            "version": VERSION,
            "docs": "/docs",
            "openapi": "/openapi.json",
            "health": "/health",
            "books": "/books",
            "search": "/books/search",
            "stats": "/books/stats",
        }

    return app


app = create_app()


if __name__ == "__main__":
    import uvicorn

    settings = get_settings()
    uvicorn.run(
        "src.main:app",
        host=settings.host,
        port=settings.port,
        reload=settings.debug,
        workers=settings.workers,
    )
