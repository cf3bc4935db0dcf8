"""Backing stores for the book repository."""

import json
import os
import tempfile
from abc import ABC, abstractmethod
from pathlib import Path
from typing import Optional

import structlog
from pydantic import ValidationError as PydanticValidationError

from src.api.schemas.books import Book
from src.config import Settings
from src.core.books.errors import StorageError

logger = structlog.get_logger(__name__)


class BookStorage(ABC):
    """Abstract base class for book backing stores.

    A store always holds the complete record set. Reads return every book in
    storage order and writes replace the whole set.
    """

    @property
    @abstractmethod
    def name(self) -> str:
        """Return the backend identifier."""
        pass

    @abstractmethod
    def exists(self) -> bool:
        """Return whether the store has been created."""
        pass

    @abstractmethod
    def load(self) -> list[Book]:
        """
        Read all books.

        Returns:
            Books in storage order, empty if the store does not exist yet

        Raises:
            StorageError: If the store cannot be read or parsed
        """
        pass

    @abstractmethod
    def save(self, books: list[Book]) -> None:
        """
        Replace the stored set with ``books``.

        Raises:
            StorageError: If the store cannot be written
        """
        pass


class JsonFileStorage(BookStorage):
    """Pretty-printed JSON array on disk."""

    def __init__(self, path: Path | str) -> None:
        self._path = Path(path)

    @property
    def name(self) -> str:
        return "file"

    @property
    def path(self) -> Path:
        return self._path

    def exists(self) -> bool:
        return self._path.exists()

    def load(self) -> list[Book]:
        if not self._path.exists():
            return []

        try:
            raw = json.loads(self._path.read_text(encoding="utf-8"))
        except (OSError, ValueError) as e:
            raise StorageError(f"Failed to read {self._path}: {e}") from e

        if not isinstance(raw, list):
            raise StorageError(f"Failed to read {self._path}: expected a JSON array")

        try:
            return [Book.model_validate(item) for item in raw]
        except PydanticValidationError as e:
            raise StorageError(f"Failed to read {self._path}: {e}") from e

    def _file_mode(self) -> int:
        if self._path.exists():
            return self._path.stat().st_mode & 0o777
        umask = os.umask(0)
        os.umask(umask)
        return 0o666 & ~umask

    def save(self, books: list[Book]) -> None:
        payload = json.dumps([b.model_dump() for b in books], indent=2)
        tmp_name: Optional[str] = None
        try:
            self._path.parent.mkdir(parents=True, exist_ok=True)
            # Write beside the target so the final replace stays on one filesystem
            fd, tmp_name = tempfile.mkstemp(
                dir=self._path.parent, prefix=f".{self._path.name}.", suffix=".tmp"
            )
            with os.fdopen(fd, "w", encoding="utf-8") as f:
                f.write(payload)
            # mkstemp creates 0600; keep the mode a plain open() would give
            os.chmod(tmp_name, self._file_mode())
            os.replace(tmp_name, self._path)
        except OSError as e:
            if tmp_name and os.path.exists(tmp_name):
                os.unlink(tmp_name)
            raise StorageError(f"Failed to write {self._path}: {e}") from e

        logger.debug("Book store written", path=str(self._path), books=len(books))


class InMemoryStorage(BookStorage):
    """Process-local list, lost on restart."""

    def __init__(self, books: list[Book] | None = None) -> None:
        self._books: list[Book] | None = (
            [b.model_copy(deep=True) for b in books] if books is not None else None
        )

    @property
    def name(self) -> str:
        return "memory"

    def exists(self) -> bool:
        return self._books is not None

    def load(self) -> list[Book]:
        if self._books is None:
            return []
        return [b.model_copy(deep=True) for b in self._books]

    def save(self, books: list[Book]) -> None:
        self._books = [b.model_copy(deep=True) for b in books]


def create_storage(settings: Settings) -> BookStorage:
    """Build the backing store selected by configuration."""
    if settings.storage_backend == "memory":
        return InMemoryStorage()
    return JsonFileStorage(settings.data_file)
