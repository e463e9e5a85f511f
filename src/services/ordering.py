"""
Ordering rules for a user's bookmark list.

Bookmarks are displayed pinned-first, then by `order` descending, then by id
descending. New bookmarks take `max(order) + 1` so they land at the top of the
unpinned tier without shifting anything else. An explicit reorder rewrites
`order` to the 1-based position of each id in the submitted list, one scoped
UPDATE per id, so a later position means a higher `order` and therefore an
earlier place in the listing.
"""
import logging
from collections.abc import Sequence

from sqlalchemy import func, select, update
from sqlalchemy.ext.asyncio import AsyncSession
from sqlalchemy.sql.elements import UnaryExpression

from models.bookmark import Bookmark
from services.exceptions import InvalidReorderError

logger = logging.getLogger(__name__)


def display_order() -> tuple[UnaryExpression, ...]:
    """ORDER BY clauses for listing: pin tier, then order, then id (all descending)."""
    return (
        Bookmark.is_pinned.desc(),
        Bookmark.order.desc(),
        Bookmark.id.desc(),
    )


async def next_order(db: AsyncSession, user_id: int) -> int:
    """Return the order value for a new bookmark: one more than the user's current max (0 if none)."""
    result = await db.execute(
        select(func.coalesce(func.max(Bookmark.order), 0)).where(
            Bookmark.user_id == user_id,
        ),
    )
    return int(result.scalar_one()) + 1


async def validate_reorder(
    db: AsyncSession,
    user_id: int,
    bookmark_ids: Sequence[int],
) -> None:
    """
    Check that the ids are exactly the user's bookmarks, each listed once.

    Raises:
        InvalidReorderError: On duplicates, unknown/foreign ids, or missing ids.
    """
    if len(set(bookmark_ids)) != len(bookmark_ids):
        raise InvalidReorderError("bookmark_ids contains duplicates")

    result = await db.execute(select(Bookmark.id).where(Bookmark.user_id == user_id))
    owned = set(result.scalars().all())
    submitted = set(bookmark_ids)

    if submitted - owned:
        raise InvalidReorderError("bookmark_ids contains unknown bookmarks")
    if owned - submitted:
        raise InvalidReorderError("bookmark_ids must include every bookmark")


async def apply_reorder(
    db: AsyncSession,
    user_id: int,
    bookmark_ids: Sequence[int],
) -> int:
    """
    Assign `order = position + 1` to each id, scoped to the owner.

    Each id is a separate single-row UPDATE filtered by (id, user_id); ids that
    don't belong to the user match nothing and are skipped without error.
    Duplicate ids are applied in sequence, so the last position wins.

    Returns:
        Number of rows actually updated.

    Note:
        Does not commit. Caller (session generator) handles commit at request end.
    """
    updated = 0
    for position, bookmark_id in enumerate(bookmark_ids, start=1):
        result = await db.execute(
            update(Bookmark)
            .where(Bookmark.id == bookmark_id, Bookmark.user_id == user_id)
            .values(order=position),
        )
        updated += result.rowcount

    if updated != len(bookmark_ids):
        logger.info(
            "Reorder for user_id=%s matched %s of %s ids",
            user_id, updated, len(bookmark_ids),
        )
    return updated
