"""API schemas."""

from src.api.schemas.books import Book, BookStats, BookTitleRequest, RatingRequest, RatingResponse

__all__ = ["Book", "BookStats", "BookTitleRequest", "RatingRequest", "RatingResponse"]
