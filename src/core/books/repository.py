"""Book repository backed by a whole-set store."""

import asyncio
from typing import Any, Optional

import structlog

from src.api.schemas.books import Book, BookStats
from src.core.books.errors import DuplicateTitleError, StorageError, ValidationError
from src.core.books.storage import BookStorage

logger = structlog.get_logger(__name__)

DEFAULT_SEED_TITLES = ("The Great Gatsby", "To Kill a Mockingbird", "1984")

MIN_RATING = 1
MAX_RATING = 5
RATING_ERROR = "Rating must be an integer between 1 and 5"


def _title_key(title: str) -> str:
    return title.strip().lower()


def _clean_title(title: str) -> str:
    if not isinstance(title, str) or not title.strip():
        raise ValidationError("Title is required")
    return title.strip()


def _clean_rating(rating: Any) -> int:
    # bool is an int subclass but never a rating; 5.0 counts as an integer
    if isinstance(rating, bool):
        raise ValidationError(RATING_ERROR)
    if isinstance(rating, float) and rating.is_integer():
        rating = int(rating)
    if not isinstance(rating, int) or not MIN_RATING <= rating <= MAX_RATING:
        raise ValidationError(RATING_ERROR)
    return rating


def _next_id(books: list[Book]) -> int:
    return max((b.id for b in books), default=0) + 1


def _find(books: list[Book], book_id: int) -> Optional[Book]:
    for book in books:
        if book.id == book_id:
            return book
    return None


class BookRepository:
    """
    CRUD, search and statistics over the book catalog.

    Every call loads the full set from storage, and every mutation writes the
    full set back before returning. There is no locking: concurrent mutations
    race and the last write wins.
    """

    def __init__(
        self,
        storage: BookStorage,
        seed_titles: list[str] | tuple[str, ...] = DEFAULT_SEED_TITLES,
    ) -> None:
        self._storage = storage
        self._seed_titles = list(seed_titles)

    @property
    def storage(self) -> BookStorage:
        return self._storage

    async def _load(self) -> list[Book]:
        return await asyncio.to_thread(self._storage.load)

    async def _save(self, books: list[Book]) -> None:
        await asyncio.to_thread(self._storage.save, books)

    async def initialize(self) -> None:
        """Seed the store with the starter books if it does not exist yet."""
        if await asyncio.to_thread(self._storage.exists):
            logger.info("Book store already initialized", backend=self._storage.name)
            return

        books = [Book(id=i, title=title, ratings=[]) for i, title in enumerate(self._seed_titles, 1)]
        await self._save(books)
        logger.info("Book store seeded", backend=self._storage.name, books=len(books))

    async def _read(self) -> list[Book]:
        # Queries see an unreadable store as an empty catalog; mutations use _load
        try:
            return await self._load()
        except StorageError as e:
            logger.warning("Book store unreadable, treating as empty", error=str(e))
            return []

    async def check_readable(self) -> int:
        """Load the store, raising StorageError if it is unreadable.

        Returns:
            Number of stored books
        """
        return len(await self._load())

    async def get_all(self) -> list[Book]:
        """List all books in storage order."""
        return await self._read()

    async def get_by_id(self, book_id: int) -> Optional[Book]:
        """Get a book by ID."""
        return _find(await self._read(), book_id)

    async def create(self, title: str) -> Book:
        """
        Add a book with no ratings.

        Args:
            title: Book title, surrounding whitespace is dropped

        Returns:
            The stored book with its assigned ID

        Raises:
            ValidationError: If the title is blank
            DuplicateTitleError: If another book already has this title
            StorageError: If the store cannot be read or written
        """
        title = _clean_title(title)
        books = await self._load()

        key = _title_key(title)
        if any(_title_key(b.title) == key for b in books):
            raise DuplicateTitleError(title)

        book = Book(id=_next_id(books), title=title, ratings=[])
        books.append(book)
        await self._save(books)

        logger.info("Book created", book_id=book.id, title=book.title)
        return book

    async def update(self, book_id: int, title: str) -> Optional[Book]:
        """Rename a book. Returns None if it does not exist."""
        title = _clean_title(title)
        books = await self._load()

        book = _find(books, book_id)
        if book is None:
            return None

        key = _title_key(title)
        if any(b.id != book_id and _title_key(b.title) == key for b in books):
            raise DuplicateTitleError(title)

        book.title = title
        await self._save(books)

        logger.info("Book updated", book_id=book_id, title=title)
        return book

    async def delete(self, book_id: int) -> bool:
        """Delete a book. Returns False if it does not exist."""
        books = await self._load()

        remaining = [b for b in books if b.id != book_id]
        if len(remaining) == len(books):
            return False

        await self._save(remaining)
        logger.info("Book deleted", book_id=book_id)
        return True

    async def search(self, term: str) -> list[Book]:
        """Find books whose title contains ``term``, ignoring case."""
        needle = _title_key(term)
        return [b for b in await self._read() if needle in b.title.lower()]

    async def compute_stats(self) -> BookStats:
        """Aggregate book and rating counts over the current catalog."""
        books = await self._read()

        total_ratings = sum(len(b.ratings) for b in books)
        rating_sum = sum(sum(b.ratings) for b in books)

        return BookStats(
            total_books=len(books),
            total_ratings=total_ratings,
            average_rating=rating_sum / total_ratings if total_ratings else 0.0,
        )

    async def add_rating(self, book_id: int, rating: Any) -> Optional[Book]:
        """
        Append a rating to a book.

        The book is looked up first, so a missing book returns None even when
        the rating is malformed.

        Raises:
            ValidationError: If the rating is not an integer between 1 and 5
            StorageError: If the store cannot be read or written
        """
        books = await self._load()
        book = _find(books, book_id)
        if book is None:
            return None

        rating = _clean_rating(rating)

        book.ratings.append(rating)
        await self._save(books)

        logger.info("Book rated", book_id=book_id, rating=rating, ratings=len(book.ratings))
        return book
