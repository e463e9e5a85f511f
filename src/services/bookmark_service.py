"""Service layer for bookmark CRUD, pin and reorder operations."""
import logging
from collections.abc import Sequence

from sqlalchemy import delete, select
from sqlalchemy.ext.asyncio import AsyncSession

from models.bookmark import Bookmark
from schemas.bookmark import BookmarkCreate, BookmarkUpdate
from services import ordering

logger = logging.getLogger(__name__)


async def list_bookmarks(db: AsyncSession, user_id: int) -> list[Bookmark]:
    """Return all of the user's bookmarks in display order (pinned first, then newest order)."""
    result = await db.execute(
        select(Bookmark)
        .where(Bookmark.user_id == user_id)
        .order_by(*ordering.display_order()),
    )
    return list(result.scalars().all())


async def get_bookmark(
    db: AsyncSession,
    user_id: int,
    bookmark_id: int,
) -> Bookmark | None:
    """
    Get a bookmark by ID, scoped to user.

    Returns:
        The bookmark if it exists and belongs to the user, None otherwise.
    """
    result = await db.execute(
        select(Bookmark).where(
            Bookmark.id == bookmark_id,
            Bookmark.user_id == user_id,
        ),
    )
    return result.scalar_one_or_none()


async def create_bookmark(
    db: AsyncSession,
    user_id: int,
    data: BookmarkCreate,
) -> Bookmark:
    """
    Create a new bookmark at the top of the user's unpinned bookmarks.

    Args:
        db: Database session.
        user_id: User ID to create the bookmark for.
        data: Bookmark creation data (title and url already validated non-blank).

    Returns:
        The created bookmark, with generated id and timestamps.

    Note:
        Does not commit. Caller (session generator) handles commit at request end.
    """
    bookmark = Bookmark(
        user_id=user_id,
        title=data.title,
        url=data.url,
        note=data.note or "",
        order=await ordering.next_order(db, user_id),
        is_pinned=False,
    )
    db.add(bookmark)
    await db.flush()
    await db.refresh(bookmark)
    return bookmark


async def update_bookmark(
    db: AsyncSession,
    user_id: int,
    bookmark_id: int,
    data: BookmarkUpdate,
) -> Bookmark | None:
    """
    Update a bookmark's title, url and note.

    Empty title/url are ignored; note is always overwritten (see BookmarkUpdate).

    Returns:
        The updated bookmark, or None if not found for this user.
    """
    bookmark = await get_bookmark(db, user_id, bookmark_id)
    if bookmark is None:
        return None

    for field, value in data.changes().items():
        setattr(bookmark, field, value)

    await db.flush()
    await db.refresh(bookmark)
    return bookmark


async def delete_bookmark(
    db: AsyncSession,
    user_id: int,
    bookmark_id: int,
) -> bool:
    """
    Permanently delete a bookmark.

    Other bookmarks keep their order values; the gap is harmless.

    Returns:
        True if a row was deleted, False if no bookmark matched for this user.
    """
    result = await db.execute(
        delete(Bookmark).where(
            Bookmark.id == bookmark_id,
            Bookmark.user_id == user_id,
        ),
    )
    return result.rowcount > 0


async def toggle_pin(
    db: AsyncSession,
    user_id: int,
    bookmark_id: int,
) -> Bookmark | None:
    """
    Flip a bookmark's pinned flag. Its order value is left untouched.

    Returns:
        The updated bookmark, or None if not found for this user.
    """
    bookmark = await get_bookmark(db, user_id, bookmark_id)
    if bookmark is None:
        return None

    bookmark.is_pinned = not bookmark.is_pinned
    await db.flush()
    await db.refresh(bookmark)
    return bookmark


async def reorder_bookmarks(
    db: AsyncSession,
    user_id: int,
    bookmark_ids: Sequence[int],
    strict: bool = False,
) -> int:
    """
    Rewrite order values from a client-supplied id sequence.

    Best-effort: ids that don't belong to the user are silently skipped unless
    strict mode is on.

    Returns:
        Number of bookmarks whose order was updated.

    Raises:
        InvalidReorderError: In strict mode, if the ids aren't the user's full,
            duplicate-free bookmark set.
    """
    if strict:
        await ordering.validate_reorder(db, user_id, bookmark_ids)
    return await ordering.apply_reorder(db, user_id, bookmark_ids)
