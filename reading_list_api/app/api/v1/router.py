"""
Top-level router for version 1 of the API.

The book routes are mounted under ``/books``; the application mounts
this router under ``/reading-list``.  The health check is a separate
router because it lives at the server root.
"""

from fastapi import APIRouter

from .endpoints import books, health

router = APIRouter()

router.include_router(books.router, prefix="/books", tags=["books"])

health_router = health.router
