"""Bookmark CRUD, pin and reorder endpoints."""
from typing import Annotated

from fastapi import APIRouter, Depends, HTTPException, Path
from sqlalchemy.ext.asyncio import AsyncSession

from api.dependencies import get_app_settings, get_async_session, get_current_user
from core.config import Settings
from core.security import AuthenticatedUser
from schemas.auth import MessageResponse
from schemas.bookmark import (
    MAX_BOOKMARK_ID,
    BookmarkCreate,
    BookmarkReorder,
    BookmarkResponse,
    BookmarkUpdate,
)
from services import bookmark_service
from services.exceptions import InvalidReorderError

router = APIRouter(prefix="/bookmarks", tags=["bookmarks"])


@router.get("", response_model=list[BookmarkResponse])
async def list_bookmarks(
    current_user: AuthenticatedUser = Depends(get_current_user),
    db: AsyncSession = Depends(get_async_session),
) -> list[BookmarkResponse]:
    """List the current user's bookmarks, pinned first, then by order (highest first)."""
    bookmarks = await bookmark_service.list_bookmarks(db, current_user.id)
    return [BookmarkResponse.model_validate(b) for b in bookmarks]


@router.post("", response_model=BookmarkResponse, status_code=201)
async def create_bookmark(
    data: BookmarkCreate,
    current_user: AuthenticatedUser = Depends(get_current_user),
    db: AsyncSession = Depends(get_async_session),
) -> BookmarkResponse:
    """Create a new bookmark at the top of the unpinned list."""
    bookmark = await bookmark_service.create_bookmark(db, current_user.id, data)
    return BookmarkResponse.model_validate(bookmark)


@router.post("/reorder", response_model=MessageResponse)
async def reorder_bookmarks(
    data: BookmarkReorder,
    current_user: AuthenticatedUser = Depends(get_current_user),
    db: AsyncSession = Depends(get_async_session),
    settings: Settings = Depends(get_app_settings),
) -> MessageResponse:
    """
    Set bookmark order from a list of ids.

    The id at index i gets order i + 1. Ids that aren't yours are ignored.
    """
    try:
        await bookmark_service.reorder_bookmarks(
            db, current_user.id, data.bookmark_ids, strict=settings.strict_reorder,
        )
    except InvalidReorderError as e:
        raise HTTPException(status_code=400, detail=str(e))
    return MessageResponse(message="Bookmarks reordered successfully")


@router.put("/{bookmark_id}", response_model=BookmarkResponse)
async def update_bookmark(
    bookmark_id: Annotated[int, Path(ge=1, le=MAX_BOOKMARK_ID)],
    data: BookmarkUpdate,
    current_user: AuthenticatedUser = Depends(get_current_user),
    db: AsyncSession = Depends(get_async_session),
) -> BookmarkResponse:
    """Update a bookmark. Empty title/url are ignored; note is always replaced."""
    bookmark = await bookmark_service.update_bookmark(
        db, current_user.id, bookmark_id, data,
    )
    if bookmark is None:
        raise HTTPException(status_code=404, detail="Bookmark not found")
    return BookmarkResponse.model_validate(bookmark)


@router.delete("/{bookmark_id}", response_model=MessageResponse)
async def delete_bookmark(
    bookmark_id: Annotated[int, Path(ge=1, le=MAX_BOOKMARK_ID)],
    current_user: AuthenticatedUser = Depends(get_current_user),
    db: AsyncSession = Depends(get_async_session),
) -> MessageResponse:
    """Delete a bookmark."""
    deleted = await bookmark_service.delete_bookmark(db, current_user.id, bookmark_id)
    if not deleted:
        raise HTTPException(status_code=404, detail="Bookmark not found")
    return MessageResponse(message="Bookmark deleted successfully")


@router.post("/{bookmark_id}/pin", response_model=BookmarkResponse)
async def toggle_pin(
    bookmark_id: Annotated[int, Path(ge=1, le=MAX_BOOKMARK_ID)],
    current_user: AuthenticatedUser = Depends(get_current_user),
    db: AsyncSession = Depends(get_async_session),
) -> BookmarkResponse:
    """Pin or unpin a bookmark."""
    bookmark = await bookmark_service.toggle_pin(db, current_user.id, bookmark_id)
    if bookmark is None:
        raise HTTPException(status_code=404, detail="Bookmark not found")
    return BookmarkResponse.model_validate(bookmark)
