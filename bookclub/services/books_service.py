"""Reading list adapter (remote `books` sheet)."""
from __future__ import annotations

from typing import List

from bookclub.services import collection_sync
from bookclub.services.entities import Book
from bookclub.services.local_mirror import BOOKS_KEY, LocalMirror


def list_books(mirror: LocalMirror) -> List[Book]:
    return collection_sync.fetch(mirror, BOOKS_KEY, "getBooks", Book)


def save_book(mirror: LocalMirror, book: Book) -> Book:
    """Add a book; newest entries go first in the mirror."""
    return collection_sync.append(mirror, BOOKS_KEY, "saveBook", book, timestamp_field="created_at", prepend=True)


def delete_book(mirror: LocalMirror, book_id: str) -> None:
    collection_sync.remove(mirror, BOOKS_KEY, "deleteBook", book_id)


__all__ = ["list_books", "save_book", "delete_book"]
