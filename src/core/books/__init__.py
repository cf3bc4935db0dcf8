"""Book management module."""

from src.core.books.errors import (
    BookRepositoryError,
    DuplicateTitleError,
    StorageError,
    ValidationError,
)
from src.core.books.repository import BookRepository
from src.core.books.storage import BookStorage, InMemoryStorage, JsonFileStorage, create_storage

__all__ = [
    "BookRepository",
    "BookRepositoryError",
    "BookStorage",
    "DuplicateTitleError",
    "InMemoryStorage",
    "JsonFileStorage",
    "StorageError",
    "ValidationError",
    "create_storage",
]
