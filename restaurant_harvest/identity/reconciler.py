from __future__ import annotations

import logging
from dataclasses import dataclass, field
from typing import Literal, Sequence, TypeVar

from ..storage.models import Rating, ReviewSentiment

logger = logging.getLogger(__name__)

RowT = TypeVar("RowT", Rating, ReviewSentiment)

INVALID_USER_ID = 0
INVALID_REVIEW_ID = "0"


@dataclass
class UserIdAssignment:
    ratings: list[Rating]
    user_ids: dict[str, int] = field(default_factory=dict)


@dataclass
class SentimentReassignment:
    rows: list[ReviewSentiment]
    user_lookup: dict[str, int] = field(default_factory=dict)
    review_ids: dict[tuple[int, str], str] = field(default_factory=dict)


def transient_key(user_id: int, restaurant_id: str) -> str:
    """Key a sentiment row by ``<user_id>_<restaurant_id>`` before reconciliation."""
    return f"{user_id}_{restaurant_id}"


def split_transient_key(key: str) -> tuple[int, str]:
    # Place ids may contain underscores; the user id never does.
    user_part, _, restaurant_id = str(key).partition("_")
    try:
        return int(user_part), restaurant_id
    except ValueError:
        return INVALID_USER_ID, restaurant_id


def reassign_user_ids(ratings: Sequence[Rating]) -> UserIdAssignment:
    """
    Give every distinct ``source_user_name`` one ``user_id`` from 1..k.

    Ids follow first-encounter order, so a table that only ever grows at the
    end keeps the ids of its existing reviewers. Two people sharing a
    display name share an id.
    """
    user_ids: dict[str, int] = {}
    updated: list[Rating] = []
    for rating in ratings:
        user_id = user_ids.setdefault(rating.source_user_name, len(user_ids) + 1)
        updated.append(rating.model_copy(update={"user_id": user_id}))

    logger.info("Reassigned %d ratings to %d unique users", len(updated), len(user_ids))
    return UserIdAssignment(ratings=updated, user_ids=user_ids)


def with_transient_keys(rows: Sequence[ReviewSentiment]) -> list[ReviewSentiment]:
    """Re-key already reconciled rows so they can go through another pass."""
    return [
        row.model_copy(update={"review_id": transient_key(row.user_id, row.restaurant_id)})
        for row in rows
    ]


def reassign_review_sentiment_ids(
    rows: Sequence[ReviewSentiment],
    old_ratings: Sequence[Rating],
    new_ratings: Sequence[Rating],
) -> SentimentReassignment:
    """
    Move sentiment rows from transient keys to global ids.

    ``old_ratings`` carry the ids the transient keys were built from;
    ``new_ratings`` carry the reconciled global ids. The two sides are joined
    on ``(restaurant_id, review_text)`` because ``user_id`` is not stable
    across the boundary. Rows that cannot be resolved come back with the
    sentinel ids and are left for :func:`clean_invalid_ids`. Identical texts
    at one restaurant are told apart by ``source_user_name``.
    """
    by_content: dict[tuple[str, str], list[Rating]] = {}
    for rating in new_ratings:
        by_content.setdefault((rating.restaurant_id, rating.review_text), []).append(rating)

    user_lookup: dict[str, int] = {}
    for old in old_ratings:
        candidates = by_content.get((old.restaurant_id, old.review_text), [])
        match = next(
            (c for c in candidates if c.source_user_name == old.source_user_name),
            candidates[0] if candidates else None,
        )
        if match is None:
            logger.debug("No reconciled rating for %s at %s", old.source_user_name, old.restaurant_id)
            continue
        user_lookup[transient_key(old.user_id, old.restaurant_id)] = match.user_id

    review_ids: dict[tuple[int, str], str] = {}
    updated: list[ReviewSentiment] = []
    unresolved = duplicates = 0
    for row in rows:
        _, restaurant_id = split_transient_key(row.review_id)
        user_id = user_lookup.get(row.review_id, INVALID_USER_ID)

        if user_id == INVALID_USER_ID:
            unresolved += 1
            review_id = INVALID_REVIEW_ID
        elif (user_id, restaurant_id) in review_ids:
            duplicates += 1
            continue
        else:
            review_id = str(len(review_ids) + 1)
            review_ids[(user_id, restaurant_id)] = review_id

        updated.append(
            row.model_copy(
                update={"review_id": review_id, "user_id": user_id, "restaurant_id": restaurant_id}
            )
        )

    if unresolved:
        logger.warning("%d sentiment rows have no matching rating", unresolved)
    if duplicates:
        logger.warning("Dropped %d sentiment rows that resolved to an existing review", duplicates)
    logger.info("Assigned %d review ids", len(review_ids))
    return SentimentReassignment(rows=updated, user_lookup=user_lookup, review_ids=review_ids)


def clean_invalid_ids(
    rows: Sequence[RowT], kind: Literal["ratings", "review_sentiment"]
) -> tuple[list[RowT], int]:
    """Drop rows carrying the invalid sentinel ids; return the kept rows and the count removed."""
    if kind == "ratings":
        kept = [row for row in rows if row.user_id != INVALID_USER_ID]
    elif kind == "review_sentiment":
        kept = [
            row
            for row in rows
            if row.user_id != INVALID_USER_ID and row.review_id not in (INVALID_REVIEW_ID, "", None)
        ]
    else:
        raise ValueError(f"Unknown table kind: {kind!r}")

    removed = len(rows) - len(kept)
    if removed:
        logger.warning("Removed %d %s rows with invalid ids", removed, kind)
    return kept, removed
