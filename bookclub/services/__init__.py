"""Service exports."""

from .errors import RemoteStoreError, ValidationError, SchemaError
from .entities import (
    Book,
    StudyGuide,
    VotingOption,
    GenreVote,
    GenreVoteRecord,
    UserProfile,
)
from .local_mirror import LocalMirror
from . import (
    sheets_gateway,
    schema,
    collection_sync,
    books_service,
    study_guides_service,
    voting_service,
    genre_votes_service,
    profile_service,
)

__all__ = [
    "RemoteStoreError",
    "ValidationError",
    "SchemaError",
    "Book",
    "StudyGuide",
    "VotingOption",
    "GenreVote",
    "GenreVoteRecord",
    "UserProfile",
    "LocalMirror",
    "sheets_gateway",
    "schema",
    "collection_sync",
    "books_service",
    "study_guides_service",
    "voting_service",
    "genre_votes_service",
    "profile_service",
]
