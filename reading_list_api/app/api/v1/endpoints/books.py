"""
Book endpoints for API v1.

These routes expose CRUD operations over the reading list.  All
validation happens in :class:`BookStore`; the handlers translate its
exceptions into 400 and 404 responses.  The list endpoint returns a
mapping of id to record, the shape the existing web front end expects.
The collection answers with and without a trailing slash.
"""

import logging
from typing import Dict

from fastapi import APIRouter, Depends, HTTPException, status

from reading_list_api.app.api.deps import get_book_store
from reading_list_api.app.schemas.book import (
    BookCreate,
    BookDeleted,
    BookRead,
    BookStatusRead,
    BookStatusUpdate,
)
from reading_list_api.app.services.book_store import (
    BookNotFoundError,
    BookStore,
    BookValidationError,
)

logger = logging.getLogger(__name__)

router = APIRouter()


def _to_http_error(exc: Exception) -> HTTPException:
    if isinstance(exc, BookNotFoundError):
        return HTTPException(status_code=status.HTTP_404_NOT_FOUND, detail=str(exc))
    return HTTPException(status_code=status.HTTP_400_BAD_REQUEST, detail=str(exc))


@router.post("", response_model=BookRead, status_code=status.HTTP_201_CREATED)
@router.post("/", response_model=BookRead, status_code=status.HTTP_201_CREATED, include_in_schema=False)
async def create_book(
    book_in: BookCreate,
    store: BookStore = Depends(get_book_store),
) -> BookRead:
    """Add a book.  Title, author and a valid status are required."""
    try:
        return store.create(book_in.title, book_in.author, book_in.status)
    except BookValidationError as e:
        raise _to_http_error(e) from e


@router.put("/{book_id}", response_model=BookStatusRead)
async def update_book_status(
    book_id: str,
    update: BookStatusUpdate,
    store: BookStore = Depends(get_book_store),
) -> BookStatusRead:
    """Change the status of a book.

    Returns 404 for an unknown id and 400 for an invalid status.
    """
    try:
        book = store.update_status(book_id, update.status)
    except (BookValidationError, BookNotFoundError) as e:
        raise _to_http_error(e) from e
    return BookStatusRead(id=book.id, status=book.status)


@router.get("", response_model=Dict[str, BookRead])
@router.get("/", response_model=Dict[str, BookRead], include_in_schema=False)
async def list_books(store: BookStore = Depends(get_book_store)) -> Dict[str, BookRead]:
    """Return every book keyed by id, in insertion order."""
    books = store.list()
    logger.debug("Returning books: %s", [b.id for b in books])
    return {book.id: book for book in books}


@router.get("/{book_id}", response_model=BookRead)
async def get_book(book_id: str, store: BookStore = Depends(get_book_store)) -> BookRead:
    try:
        return store.get(book_id)
    except (BookValidationError, BookNotFoundError) as e:
        raise _to_http_error(e) from e


@router.delete("/{book_id}", response_model=BookDeleted)
async def delete_book(book_id: str, store: BookStore = Depends(get_book_store)) -> BookDeleted:
    """Remove a book.  Returns 404 if the id is unknown."""
    try:
        return BookDeleted(id=store.delete(book_id))
    except (BookValidationError, BookNotFoundError) as e:
        raise _to_http_error(e) from e
