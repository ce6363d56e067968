"""
In-memory store for book records.

``BookStore`` owns the reading list of one application instance.
Records are kept in a plain list in insertion order; lookups are
linear, which is adequate for a personal reading list.  Nothing is
persisted: a new store (and therefore every restart) starts empty.

The store performs all request validation so that handlers only
translate its exceptions into HTTP responses:

* :class:`BookValidationError` for a missing or disallowed field value.
* :class:`BookNotFoundError` for an unknown id.

Methods never await, so when called from ``async`` handlers each
operation completes before another request can touch the store.
"""

from __future__ import annotations

import logging
import uuid
from typing import Any, List, Optional

from reading_list_api.app.schemas.book import BookRead, BookStatus

logger = logging.getLogger(__name__)

INVALID_STATUS_MESSAGE = (
    "Status is invalid. Accepted statuses: read | to_read | reading"
)
EMPTY_FIELDS_MESSAGE = "Title, Status or Author is empty"
NON_TEXT_FIELDS_MESSAGE = "Title and Author must be text"
INVALID_ID_MESSAGE = "missing or invalid id"
UNKNOWN_ID_MESSAGE = "Book id does not exist"


class BookValidationError(ValueError):
    """Raised when a request carries a missing or disallowed value."""


class BookNotFoundError(LookupError):
    """Raised when no record matches the requested id."""

    def __init__(self, book_id: str) -> None:
        super().__init__(UNKNOWN_ID_MESSAGE)
        self.book_id = book_id


def _is_valid_status(status: Any) -> bool:
    return isinstance(status, str) and status in BookStatus.values()


def _is_blank(value: Any) -> bool:
    return value is None or (isinstance(value, str) and not value.strip())


class BookStore:
    """Process-local collection of book records."""

    def __init__(self) -> None:
        self._books: List[BookRead] = []

    def __len__(self) -> int:
        return len(self._books)

    @property
    def count(self) -> int:
        return len(self._books)

    def create(
        self,
        title: Any,
        author: Any,
        status: Any,
    ) -> BookRead:
        """Validate and append a new record, returning it.

        The status is checked before the other fields so a request
        with a bad status always reports the status problem.
        """
        if not _is_valid_status(status):
            raise BookValidationError(INVALID_STATUS_MESSAGE)
        if _is_blank(title) or _is_blank(author):
            raise BookValidationError(EMPTY_FIELDS_MESSAGE)
        if not isinstance(title, str) or not isinstance(author, str):
            raise BookValidationError(NON_TEXT_FIELDS_MESSAGE)

        book = BookRead(
            id=str(uuid.uuid4()),
            title=title,
            author=author,
            status=BookStatus(status),
        )
        self._books.append(book)
        logger.info(
            "Book added: %s by %s (%s) - id: %s",
            book.title,
            book.author,
            book.status.value,
            book.id,
        )
        logger.info("Total books: %d", self.count)
        return book.model_copy()

    def update_status(self, book_id: str, status: Any) -> BookRead:
        """Change the status of an existing record.

        Unknown ids are reported before an invalid status, so a bad
        request against a missing record is a 404 rather than a 400.
        """
        if _is_blank(book_id):
            raise BookValidationError(INVALID_ID_MESSAGE)
        book = self._find(book_id)
        if book is None:
            raise BookNotFoundError(book_id)
        if not _is_valid_status(status):
            raise BookValidationError(INVALID_STATUS_MESSAGE)

        book.status = BookStatus(status)
        logger.info("Book status updated: %s -> %s", book.title, book.status.value)
        return book.model_copy()

    def list(self) -> List[BookRead]:
        """Return every record in insertion order."""
        logger.debug("Fetching all books. Total count: %d", self.count)
        return [book.model_copy() for book in self._books]

    def get(self, book_id: str) -> BookRead:
        if _is_blank(book_id):
            raise BookValidationError(INVALID_ID_MESSAGE)
        book = self._find(book_id)
        if book is None:
            raise BookNotFoundError(book_id)
        return book.model_copy()

    def delete(self, book_id: str) -> str:
        """Remove a record and return its id."""
        if _is_blank(book_id):
            raise BookValidationError(INVALID_ID_MESSAGE)
        for index, book in enumerate(self._books):
            if book.id == book_id:
                del self._books[index]
                logger.info("Book deleted: %s by %s", book.title, book.author)
                logger.info("Remaining books: %d", self.count)
                return book_id
        raise BookNotFoundError(book_id)

    def clear(self) -> None:
        self._books.clear()

    def _find(self, book_id: str) -> Optional[BookRead]:
        return next((b for b in self._books if b.id == book_id), None)
