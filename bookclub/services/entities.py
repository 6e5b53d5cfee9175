"""UI-facing entity types.

Attributes follow the remote column names; `as_dict()` produces the camelCase
shape the UI (and the local mirror) works with.
"""
from __future__ import annotations

from dataclasses import dataclass, replace
from typing import Any, ClassVar, Dict, Mapping, Optional

from bookclub.services import schema as sheet_schema
from bookclub.services.errors import ValidationError

PENDING = "pending"
CONFIRMED = "confirmed"
REJECTED = "rejected"


class _SheetEntity:
    SCHEMA: ClassVar[sheet_schema.SheetSchema]
    sync_status: Optional[str]

    @classmethod
    def from_dict(cls, data: Mapping[str, Any]):
        kwargs = {}
        for col in cls.SCHEMA.columns:
            if col.key in data:
                kwargs[col.name] = col.coerce(data.get(col.key))
        status = data.get("syncStatus")
        if isinstance(status, str) and status:
            kwargs["sync_status"] = status
        return cls(**kwargs)

    @classmethod
    def from_row(cls, row: Mapping[str, Any]):
        return cls.from_dict(cls.SCHEMA.from_row(row))

    def as_dict(self) -> Dict[str, Any]:
        payload = {c.key: getattr(self, c.name) for c in self.SCHEMA.columns}
        if self.sync_status:
            payload["syncStatus"] = self.sync_status
        return payload

    def to_row(self) -> Dict[str, Any]:
        return self.SCHEMA.to_row(self.as_dict())

    def validate(self) -> None:
        for col in self.SCHEMA.columns:
            if not col.required:
                continue
            value = getattr(self, col.name)
            if value is None or (isinstance(value, str) and not value.strip()):
                raise ValidationError(f"{col.key} is required")

    def with_status(self, status: Optional[str], **changes):
        return replace(self, sync_status=status, **changes)


@dataclass
class Book(_SheetEntity):
    SCHEMA: ClassVar[sheet_schema.SheetSchema] = sheet_schema.BOOKS

    id: Optional[str] = None
    title: str = ""
    author: str = ""
    cover_url: Optional[str] = None
    date_read: Optional[str] = None
    rating: Optional[float] = None
    notes: Optional[str] = None
    added_by: str = ""
    is_member: bool = False
    created_at: Optional[str] = None
    sync_status: Optional[str] = None


@dataclass
class StudyGuide(_SheetEntity):
    SCHEMA: ClassVar[sheet_schema.SheetSchema] = sheet_schema.STUDY_GUIDES

    id: Optional[str] = None
    title: str = ""
    book_title: str = ""
    file_url: Optional[str] = None
    file_name: Optional[str] = None
    file_size: int = 0
    uploaded_at: Optional[str] = None
    sync_status: Optional[str] = None


@dataclass
class VotingOption(_SheetEntity):
    SCHEMA: ClassVar[sheet_schema.SheetSchema] = sheet_schema.VOTING_OPTIONS

    id: Optional[str] = None
    book_title: str = ""
    author: str = ""
    suggested_by: str = ""
    is_member: bool = False
    votes: int = 0
    created_at: Optional[str] = None
    sync_status: Optional[str] = None


@dataclass
class GenreVote(_SheetEntity):
    SCHEMA: ClassVar[sheet_schema.SheetSchema] = sheet_schema.GENRE_VOTES

    id: str = ""
    name: str = ""
    votes: int = 0
    sync_status: Optional[str] = None


@dataclass
class GenreVoteRecord(_SheetEntity):
    SCHEMA: ClassVar[sheet_schema.SheetSchema] = sheet_schema.USER_GENRE_HISTORY

    email: str = ""
    genre_name: str = ""
    voted_at: Optional[str] = None
    sync_status: Optional[str] = None


@dataclass
class UserProfile:
    """Session identity: display name plus email."""

    name: str
    email: str = ""

    def as_dict(self) -> Dict[str, str]:
        return {"name": self.name, "email": self.email}


__all__ = [
    "PENDING",
    "CONFIRMED",
    "REJECTED",
    "Book",
    "StudyGuide",
    "VotingOption",
    "GenreVote",
    "GenreVoteRecord",
    "UserProfile",
]
