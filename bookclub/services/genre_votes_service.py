"""Genre voting adapter (remote `genre_votes` + `user_genre_history` sheets).

Reads always yield exactly the canonical genres, in canonical order; counts
missing from the remote store or the mirror are reported as zero.
"""
from __future__ import annotations

from typing import Dict, Iterable, List, Optional

from bookclub.services import collection_sync, sheets_gateway
from bookclub.services.entities import CONFIRMED, GenreVote, GenreVoteRecord, UserProfile
from bookclub.services.errors import RemoteStoreError, ValidationError
from bookclub.services.local_mirror import GENRE_HISTORY_KEY, GENRE_VOTES_KEY, LocalMirror
from bookclub.services.schema import coerce_count
from bookclub.utils.identity import normalize_email
from bookclub.utils.logging import get_logger

LOG = get_logger("bookclub.genre_votes")

GENRES = (
    "Action/Adventure",
    "Historical Fiction",
    "Drama / Literary Fiction",
    "Romance",
    "Sci-Fi",
    "Fantasy",
    "Mystery / Thriller",
    "Horror",
)


def canonical_genres(counts: Optional[Dict[str, int]] = None) -> List[GenreVote]:
    counts = counts or {}
    return [GenreVote(id=name, name=name, votes=counts.get(name, 0)) for name in GENRES]


def _counts(items: Iterable[dict]) -> Dict[str, int]:
    counts: Dict[str, int] = {}
    for item in items:
        name = item.get("id") or item.get("name")
        if isinstance(name, str) and name in GENRES:
            counts[name] = coerce_count(item.get("votes"))
    return counts


def list_genre_votes(mirror: LocalMirror) -> List[GenreVote]:
    try:
        remote = sheets_gateway.call("getGenreVotes")
    except RemoteStoreError as exc:
        LOG.error("Genre votes read rejected by remote store: %s", exc.message)
        return canonical_genres()
    if remote is None:
        return canonical_genres(_counts(mirror.read_list(GENRE_VOTES_KEY)))
    rows = remote if isinstance(remote, list) else []
    genres = canonical_genres(_counts(r for r in rows if isinstance(r, dict)))
    mirror.write_list(GENRE_VOTES_KEY, [g.with_status(CONFIRMED).as_dict() for g in genres])
    return genres


def vote_for_genre(mirror: LocalMirror, identity: UserProfile, genre_name: str) -> GenreVoteRecord:
    """Add one vote for `genre_name` on behalf of `identity`.

    Raises ValidationError when the identity has no email or the genre is
    not one of GENRES.
    """
    email = normalize_email(identity.email if identity else None)
    if not email:
        raise ValidationError("Set your email in your profile before voting")
    if genre_name not in GENRES:
        raise ValidationError(f"Unknown genre: {genre_name}")
    record = GenreVoteRecord(email=email, genre_name=genre_name, voted_at=collection_sync.utc_timestamp())

    if not mirror.read_list(GENRE_VOTES_KEY):
        mirror.write_list(GENRE_VOTES_KEY, [g.as_dict() for g in canonical_genres()])
    collection_sync.increment(
        mirror,
        GENRE_VOTES_KEY,
        "voteGenre",
        genre_name,
        payload={"name": genre_name, "email": email, "history": record.to_row()},
    )
    return record


def reset_genre_votes(mirror: LocalMirror) -> None:
    collection_sync.clear(
        mirror,
        GENRE_VOTES_KEY,
        "resetGenreVotes",
        replacement=[g.as_dict() for g in canonical_genres()],
    )
    mirror.write_list(GENRE_HISTORY_KEY, [])


def user_genre_history(mirror: LocalMirror, identity: UserProfile) -> List[GenreVoteRecord]:
    email = normalize_email(identity.email if identity else None)
    if not email:
        return []
    records = collection_sync.fetch(mirror, GENRE_HISTORY_KEY, "getUserHistory", GenreVoteRecord, payload={"email": email})
    return [r for r in records if normalize_email(r.email) == email]


def leading_genre(genres: List[GenreVote]) -> Optional[GenreVote]:
    ranked = sorted(genres, key=lambda g: g.votes, reverse=True)
    if ranked and ranked[0].votes > 0:
        return ranked[0]
    return None


__all__ = [
    "GENRES",
    "canonical_genres",
    "list_genre_votes",
    "vote_for_genre",
    "reset_genre_votes",
    "user_genre_history",
    "leading_genre",
]
