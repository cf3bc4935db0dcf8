"""Book schemas."""

from typing import Annotated, Any

from pydantic import BaseModel, ConfigDict, Field, field_validator
from pydantic.alias_generators import to_camel

Rating = Annotated[int, Field(ge=1, le=5)]


class Book(BaseModel):
    """A book with its ratings."""
    id: int = Field(gt=0, description="Unique book identifier")
    title: str = Field(min_length=1, description="Book title")
    ratings: list[Rating] = Field(default_factory=list, description="Ratings in the order they were given")


class BookTitleRequest(BaseModel):
    """Request to create a book or rename one."""
    title: str = Field(..., min_length=1)

    @field_validator("title")
    @classmethod
    def strip_title(cls, value: str) -> str:
        value = value.strip()
        if not value:
            raise ValueError("Title is required")
        return value


class RatingRequest(BaseModel):
    """Request to rate a book.

    The value is checked by the repository after the book is found, so a
    missing book is reported before a malformed rating.
    """
    rating: Any = Field(default=None, description="Integer rating between 1 and 5")


class RatingResponse(BaseModel):
    """Response after a rating was recorded."""
    message: str
    book: Book


class BookStats(BaseModel):
    """Aggregate statistics over all books."""

    model_config = ConfigDict(alias_generator=to_camel, populate_by_name=True)

    total_books: int = Field(description="Number of books")
    total_ratings: int = Field(description="Number of ratings across all books")
    average_rating: float = Field(description="Mean of all ratings, 0 when there are none")
