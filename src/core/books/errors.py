"""Book repository errors."""


class BookRepositoryError(RuntimeError):
    """Base class for failures raised by the book repository."""


class ValidationError(BookRepositoryError):
    """Raised when a title or rating is malformed."""


class DuplicateTitleError(BookRepositoryError):
    """Raised when a title collides with an existing book's title."""

    def __init__(self, title: str) -> None:
        super().__init__("Book with this title already exists")
        self.title = title


class StorageError(BookRepositoryError):
    """Raised when the backing store cannot be read or written."""
