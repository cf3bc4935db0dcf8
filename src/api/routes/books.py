"""Book catalog API endpoints."""

from typing import Annotated

import structlog
from fastapi import APIRouter, Depends, HTTPException, Query, Request, Response

from src.api.schemas.books import (
    Book,
    BookStats,
    BookTitleRequest,
    RatingRequest,
    RatingResponse,
)
from src.core.books.errors import DuplicateTitleError, StorageError, ValidationError
from src.core.books.repository import BookRepository

logger = structlog.get_logger(__name__)

router = APIRouter(prefix="/books", tags=["Books"])


def get_book_repository(request: Request) -> BookRepository:
    """Get the repository created for this application."""
    return request.app.state.book_repository


Repository = Annotated[BookRepository, Depends(get_book_repository)]


def _storage_failure(e: StorageError) -> HTTPException:
    logger.error("Book store failure", error=str(e))
    return HTTPException(status_code=500, detail="Database error")


# --- Queries ---
# Reads never fail: an unreadable store lists as an empty catalog.


@router.get("", response_model=list[Book])
async def list_books(repository: Repository) -> list[Book]:
    """List all books in the order they were added."""
    return await repository.get_all()


@router.get("/search", response_model=list[Book])
async def search_books(
    repository: Repository,
    title: str = Query(..., description="Case-insensitive title substring"),
) -> list[Book]:
    """Search books by title."""
    if not title.strip():
        raise HTTPException(status_code=400, detail="Title query parameter is required")
    return await repository.search(title)


@router.get("/stats", response_model=BookStats)
async def get_stats(repository: Repository) -> BookStats:
    """Get book and rating totals and the average rating."""
    return await repository.compute_stats()


@router.get("/{book_id}", response_model=Book)
async def get_book(book_id: int, repository: Repository) -> Book:
    """Get a book by ID."""
    book = await repository.get_by_id(book_id)
    if not book:
        raise HTTPException(status_code=404, detail="Book not found")
    return book


# --- Mutations ---


@router.post("", response_model=Book, status_code=201)
async def create_book(request: BookTitleRequest, repository: Repository) -> Book:
    """Add a new book with no ratings."""
    try:
        return await repository.create(request.title)
    except (DuplicateTitleError, ValidationError) as e:
        raise HTTPException(status_code=400, detail=str(e))
    except StorageError as e:
        raise _storage_failure(e)


@router.put("/{book_id}", response_model=Book)
async def update_book(book_id: int, request: BookTitleRequest, repository: Repository) -> Book:
    """Rename a book. Its ratings are kept."""
    try:
        book = await repository.update(book_id, request.title)
    except (DuplicateTitleError, ValidationError) as e:
        raise HTTPException(status_code=400, detail=str(e))
    except StorageError as e:
        raise _storage_failure(e)

    if not book:
        raise HTTPException(status_code=404, detail="Book not found")
    return book


@router.delete("/{book_id}", status_code=204)
async def delete_book(book_id: int, repository: Repository) -> Response:
    """Delete a book."""
    try:
        deleted = await repository.delete(book_id)
    except StorageError as e:
        raise _storage_failure(e)

    if not deleted:
        raise HTTPException(status_code=404, detail="Book not found")
    return Response(status_code=204)


@router.post("/{book_id}/rate", response_model=RatingResponse)
async def rate_book(book_id: int, request: RatingRequest, repository: Repository) -> RatingResponse:
    """Add a 1-5 rating to a book."""
    try:
        book = await repository.add_rating(book_id, request.rating)
    except ValidationError as e:
        raise HTTPException(status_code=400, detail=str(e))
    except StorageError as e:
        raise _storage_failure(e)

    if not book:
        raise HTTPException(status_code=404, detail="Book not found")
    return RatingResponse(message="Rating added successfully", book=book)
