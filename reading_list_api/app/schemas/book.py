"""
Pydantic schemas for book records.

Request bodies are deliberately permissive (every field optional and
of any JSON type) so that the store can report which constraint a
request violated with the service's own error messages instead of the
framework's generic validation output.  Response models describe the
records exactly as they appear on the wire.
"""

from enum import Enum
from typing import Any, Optional

from pydantic import BaseModel, Field


class BookStatus(str, Enum):
    """Reading status of a book."""

    TO_READ = "to_read"
    READING = "reading"
    READ = "read"

    @classmethod
    def values(cls) -> list[str]:
        return [s.value for s in cls]


class BookCreate(BaseModel):
    """Schema for adding a book to the reading list."""

    title: Optional[Any] = Field(None, examples=["Dune"])
    author: Optional[Any] = Field(None, examples=["Frank Herbert"])
    status: Optional[Any] = Field(None, examples=["to_read"])


class BookStatusUpdate(BaseModel):
    """Schema for changing the status of a book."""

    status: Optional[Any] = Field(None, examples=["reading"])


class BookRead(BaseModel):
    """Schema for reading a book record."""

    id: str
    title: str
    author: str
    status: BookStatus

    model_config = {
        "from_attributes": True,
    }


class BookStatusRead(BaseModel):
    id: str
    status: BookStatus


class BookDeleted(BaseModel):
    id: str
