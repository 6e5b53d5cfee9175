"""ORM models for the local mirror DB."""
from __future__ import annotations

import datetime

from sqlalchemy import (
    Column,
    DateTime,
    Integer,
    String,
    Text,
    UniqueConstraint,
)
from sqlalchemy.orm import declarative_base

Base = declarative_base()


class MirrorEntry(Base):
    """One JSON-encoded value per (session scope, storage key).

    Plays the role of browser local storage: each scope holds one ordered
    sequence per collection plus the current-user record.
    """

    __tablename__ = "mirror_entries"

    id = Column(Integer, primary_key=True, autoincrement=True)
    scope = Column(String(64), nullable=False, index=True)
    key = Column(String(64), nullable=False)
    value = Column(Text, nullable=False, default="")
    updated_at = Column(
        DateTime,
        default=datetime.datetime.utcnow,
        onupdate=datetime.datetime.utcnow,
        nullable=False,
    )

    __table_args__ = (
        UniqueConstraint("scope", "key", name="uq_mirror_scope_key"),
    )

    def as_dict(self) -> dict:
        return {
            "id": self.id,
            "scope": self.scope,
            "key": self.key,
            "value": self.value,
            "updated_at": self.updated_at.isoformat() if self.updated_at else None,
        }

    def __repr__(self) -> str:  # pragma: no cover
        return f"<MirrorEntry scope={self.scope} key={self.key}>"


__all__ = ["Base", "MirrorEntry"]
