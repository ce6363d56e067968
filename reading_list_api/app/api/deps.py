"""
Shared FastAPI dependencies.

The book store lives on ``app.state`` so every application instance
(and every test) works against its own collection.
"""

from fastapi import Request

from reading_list_api.app.services.book_store import BookStore


def get_book_store(request: Request) -> BookStore:
    return request.app.state.book_store
