"""Explicit column schemas for every remote collection.

Each collection lists its sheet headers in order, with a type and the key the
UI uses for the same field. Adapters map rows through these definitions and
the remote script can fetch the same lists via `schema_manifest()`, so the
header-name lookups on both sides agree.
"""
from __future__ import annotations

import math
from dataclasses import dataclass
from typing import Any, Dict, Iterable, Mapping, Optional, Tuple

from bookclub.services.errors import SchemaError

KINDS = ("str", "number", "int", "bool", "timestamp")
IDENTIFIER_COLUMNS = ("id", "email")
VOTES_COLUMN = "votes"


def coerce_bool(value: Any) -> bool:
    if value is True:
        return True
    if isinstance(value, str):
        return value.strip().upper() == "TRUE"
    return False


def coerce_number(value: Any) -> Optional[float]:
    if value is None or isinstance(value, bool):
        return None
    if isinstance(value, int):
        return value
    if isinstance(value, float):
        number = value
    else:
        text = str(value).strip()
        if not text:
            return None
        try:
            number = float(text)
        except ValueError:
            return None
    if not math.isfinite(number):
        return None
    return int(number) if number.is_integer() else number


def coerce_count(value: Any) -> int:
    number = coerce_number(value)
    if number is None:
        return 0
    return max(0, int(number))


def coerce_text(value: Any) -> Optional[str]:
    if value is None:
        return None
    return value if isinstance(value, str) else str(value)


_COERCERS = {
    "str": coerce_text,
    "timestamp": coerce_text,
    "number": coerce_number,
    "int": coerce_count,
    "bool": coerce_bool,
}

_ROW_DEFAULTS = {
    "str": "",
    "timestamp": "",
    "number": 0,
    "int": 0,
    "bool": False,
}


@dataclass(frozen=True)
class Column:
    name: str
    key: str
    kind: str = "str"
    required: bool = False
    remote_assigned: bool = False

    def coerce(self, value: Any) -> Any:
        return _COERCERS[self.kind](value)


@dataclass(frozen=True)
class SheetSchema:
    sheet: str
    columns: Tuple[Column, ...]

    @property
    def identifier(self) -> Column:
        return self.columns[0]

    def column(self, name: str) -> Column:
        for col in self.columns:
            if col.name == name:
                return col
        raise KeyError(f"{self.sheet} has no column {name!r}")

    @property
    def vote_column(self) -> Column:
        return self.column(VOTES_COLUMN)

    def from_row(self, row: Mapping[str, Any]) -> Dict[str, Any]:
        """Remote row (sheet headers) to UI-shaped dict, coercing values."""
        return {c.key: c.coerce(row.get(c.name)) for c in self.columns}

    def to_row(self, entity: Mapping[str, Any]) -> Dict[str, Any]:
        """UI-shaped dict to remote row; remote-assigned columns are left out."""
        row: Dict[str, Any] = {}
        for col in self.columns:
            if col.remote_assigned:
                continue
            value = col.coerce(entity.get(col.key))
            row[col.name] = _ROW_DEFAULTS[col.kind] if value is None else value
        return row


BOOKS = SheetSchema("books", (
    Column("id", "id", remote_assigned=True),
    Column("title", "title", required=True),
    Column("author", "author", required=True),
    Column("cover_url", "coverUrl"),
    Column("date_read", "dateRead"),
    Column("rating", "rating", "number"),
    Column("notes", "notes"),
    Column("added_by", "addedBy", required=True),
    Column("is_member", "isMember", "bool"),
    Column("created_at", "createdAt", "timestamp", remote_assigned=True),
))

STUDY_GUIDES = SheetSchema("study_guides", (
    Column("id", "id", remote_assigned=True),
    Column("title", "title", required=True),
    Column("book_title", "bookTitle", required=True),
    Column("file_url", "fileUrl"),
    Column("file_name", "fileName"),
    Column("file_size", "fileSize", "int"),
    Column("uploaded_at", "uploadedAt", "timestamp", remote_assigned=True),
))

VOTING_OPTIONS = SheetSchema("voting_options", (
    Column("id", "id", remote_assigned=True),
    Column("book_title", "bookTitle", required=True),
    Column("author", "author", required=True),
    Column("suggested_by", "suggestedBy", required=True),
    Column("is_member", "isMember", "bool"),
    Column("votes", "votes", "int"),
    Column("created_at", "createdAt", "timestamp", remote_assigned=True),
))

GENRE_VOTES = SheetSchema("genre_votes", (
    Column("id", "id", required=True),
    Column("name", "name"),
    Column("votes", "votes", "int"),
))

USERS = SheetSchema("users", (
    Column("email", "email", required=True),
    Column("name", "name"),
    Column("is_admin", "isAdmin", "bool"),
    Column("last_active", "lastActive", "timestamp"),
))

USER_GENRE_HISTORY = SheetSchema("user_genre_history", (
    Column("email", "email", required=True),
    Column("genre_name", "genreName", required=True),
    Column("voted_at", "votedAt", "timestamp"),
))

SCHEMAS: Dict[str, SheetSchema] = {
    s.sheet: s for s in (BOOKS, STUDY_GUIDES, VOTING_OPTIONS, GENRE_VOTES, USERS, USER_GENRE_HISTORY)
}
COUNTER_SHEETS = ("voting_options", "genre_votes")


def validate_schema(schema: SheetSchema) -> None:
    if not schema.columns:
        raise SchemaError(f"{schema.sheet}: no columns defined")
    seen_names = set()
    seen_keys = set()
    for col in schema.columns:
        if col.kind not in KINDS:
            raise SchemaError(f"{schema.sheet}.{col.name}: unknown kind {col.kind!r}")
        if col.name in seen_names:
            raise SchemaError(f"{schema.sheet}: duplicate column {col.name!r}")
        if col.key in seen_keys:
            raise SchemaError(f"{schema.sheet}: duplicate key {col.key!r}")
        seen_names.add(col.name)
        seen_keys.add(col.key)
    if schema.identifier.name not in IDENTIFIER_COLUMNS:
        raise SchemaError(f"{schema.sheet}: first column must be an identifier, got {schema.identifier.name!r}")


def validate_schemas(schemas: Optional[Iterable[SheetSchema]] = None) -> None:
    by_sheet = {s.sheet: s for s in (schemas if schemas is not None else SCHEMAS.values())}
    for schema in by_sheet.values():
        validate_schema(schema)
    for sheet in COUNTER_SHEETS:
        if sheet not in by_sheet:
            continue
        try:
            votes = by_sheet[sheet].vote_column
        except KeyError:
            raise SchemaError(f"{sheet}: missing {VOTES_COLUMN!r} column") from None
        if votes.kind != "int":
            raise SchemaError(f"{sheet}.{VOTES_COLUMN}: must be an int column")


def schema_manifest() -> Dict[str, list]:
    return {
        sheet: [{"name": c.name, "kind": c.kind} for c in schema.columns]
        for sheet, schema in SCHEMAS.items()
    }


__all__ = [
    "Column",
    "SheetSchema",
    "BOOKS",
    "STUDY_GUIDES",
    "VOTING_OPTIONS",
    "GENRE_VOTES",
    "USERS",
    "USER_GENRE_HISTORY",
    "SCHEMAS",
    "coerce_bool",
    "coerce_number",
    "coerce_count",
    "validate_schemas",
    "schema_manifest",
]
