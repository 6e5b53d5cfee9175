"""Next-book voting adapter (remote `voting_options` sheet)."""
from __future__ import annotations

from dataclasses import replace
from typing import List, Optional

from bookclub.services import collection_sync
from bookclub.services.entities import VotingOption
from bookclub.services.local_mirror import VOTES_KEY, LocalMirror


def list_voting_options(mirror: LocalMirror) -> List[VotingOption]:
    return collection_sync.fetch(mirror, VOTES_KEY, "getVotes", VotingOption)


def save_voting_option(mirror: LocalMirror, option: VotingOption) -> VotingOption:
    """Nominate a book. New nominations always start with zero votes."""
    return collection_sync.append(mirror, VOTES_KEY, "saveVote", replace(option, votes=0), timestamp_field="created_at")


def vote_for_option(mirror: LocalMirror, option_id: str) -> Optional[VotingOption]:
    updated = collection_sync.increment(mirror, VOTES_KEY, "vote", option_id)
    return VotingOption.from_dict(updated) if updated else None


def clear_voting_options(mirror: LocalMirror) -> None:
    collection_sync.clear(mirror, VOTES_KEY, "clearVotes")


def rank_options(options: List[VotingOption]) -> List[VotingOption]:
    return sorted(options, key=lambda o: o.votes, reverse=True)


def leading_option(options: List[VotingOption]) -> Optional[VotingOption]:
    ranked = rank_options(options)
    return ranked[0] if ranked else None


__all__ = [
    "list_voting_options",
    "save_voting_option",
    "vote_for_option",
    "clear_voting_options",
    "rank_options",
    "leading_option",
]
