"""
IDOR (Insecure Direct Object Reference) security tests.

These tests verify that users cannot modify, pin, reorder, or see bookmarks
belonging to other users by manipulating bookmark IDs.

OWASP Reference: A01:2021 - Broken Access Control
"""
import pytest
from httpx import AsyncClient
from sqlalchemy import select
from sqlalchemy.ext.asyncio import AsyncSession

from models.bookmark import Bookmark
from models.user import User


async def add_bookmark(db_session: AsyncSession, user: User, title: str, order: int) -> Bookmark:
    """Insert a bookmark directly for the given user."""
    bookmark = Bookmark(
        user_id=user.id,
        title=title,
        url=f"https://example.com/{title}",
        note="private",
        order=order,
    )
    db_session.add(bookmark)
    await db_session.flush()
    await db_session.refresh(bookmark)
    return bookmark


@pytest.fixture
async def user_a_bookmark(db_session: AsyncSession, test_user: User) -> Bookmark:
    """Bookmark owned by test_user."""
    return await add_bookmark(db_session, test_user, "user-a", 1)


@pytest.fixture
async def user_b_bookmark(db_session: AsyncSession, other_user: User) -> Bookmark:
    """Bookmark owned by other_user."""
    return await add_bookmark(db_session, other_user, "user-b", 1)


class TestBookmarkIDOR:
    """Test IDOR protection for bookmark resources."""

    async def test__update_bookmark__returns_404_for_other_users_bookmark(
        self,
        other_client: AsyncClient,
        user_a_bookmark: Bookmark,
        db_session: AsyncSession,
    ) -> None:
        """User B cannot update User A's bookmark."""
        response = await other_client.put(
            f"/api/bookmarks/{user_a_bookmark.id}",
            json={"title": "Hacked by User B", "note": ""},
        )

        # 404, not 403, so ids can't be enumerated
        assert response.status_code == 404
        assert response.json()["error"] == "Bookmark not found"

        await db_session.refresh(user_a_bookmark)
        assert user_a_bookmark.title == "user-a"
        assert user_a_bookmark.note == "private"

    async def test__delete_bookmark__returns_404_for_other_users_bookmark(
        self,
        other_client: AsyncClient,
        user_a_bookmark: Bookmark,
        db_session: AsyncSession,
    ) -> None:
        """User B cannot delete User A's bookmark."""
        response = await other_client.delete(f"/api/bookmarks/{user_a_bookmark.id}")

        assert response.status_code == 404
        assert response.json()["error"] == "Bookmark not found"

        result = await db_session.execute(
            select(Bookmark.id).where(Bookmark.id == user_a_bookmark.id),
        )
        assert result.scalar_one_or_none() == user_a_bookmark.id

    async def test__pin_bookmark__returns_404_for_other_users_bookmark(
        self,
        other_client: AsyncClient,
        user_a_bookmark: Bookmark,
        db_session: AsyncSession,
    ) -> None:
        """User B cannot pin User A's bookmark."""
        response = await other_client.post(f"/api/bookmarks/{user_a_bookmark.id}/pin")

        assert response.status_code == 404
        assert response.json()["error"] == "Bookmark not found"

        await db_session.refresh(user_a_bookmark)
        assert user_a_bookmark.is_pinned is False

    async def test__list_bookmarks__excludes_other_users_data(
        self,
        other_client: AsyncClient,
        user_a_bookmark: Bookmark,
        user_b_bookmark: Bookmark,
    ) -> None:
        """User B's list does not include User A's bookmarks."""
        response = await other_client.get("/api/bookmarks")

        assert response.status_code == 200
        ids = [b["id"] for b in response.json()]
        assert ids == [user_b_bookmark.id]
        assert user_a_bookmark.id not in ids

    async def test__reorder__ignores_other_users_bookmark(
        self,
        other_client: AsyncClient,
        user_a_bookmark: Bookmark,
        user_b_bookmark: Bookmark,
        db_session: AsyncSession,
    ) -> None:
        """A foreign id in a reorder request is skipped; the owner's row is untouched."""
        response = await other_client.post(
            "/api/bookmarks/reorder",
            json={"bookmark_ids": [user_b_bookmark.id, user_a_bookmark.id]},
        )

        assert response.status_code == 200

        await db_session.refresh(user_a_bookmark)
        await db_session.refresh(user_b_bookmark)
        assert user_a_bookmark.order == 1
        assert user_b_bookmark.order == 1


class TestAuthenticationRequired:
    """Bookmark endpoints reject requests without a valid token."""

    @pytest.mark.parametrize(
        ("method", "path"),
        [
            ("GET", "/api/bookmarks"),
            ("POST", "/api/bookmarks"),
            ("PUT", "/api/bookmarks/1"),
            ("DELETE", "/api/bookmarks/1"),
            ("POST", "/api/bookmarks/1/pin"),
            ("POST", "/api/bookmarks/reorder"),
        ],
    )
    async def test__bookmark_endpoints__require_token(
        self,
        client: AsyncClient,
        method: str,
        path: str,
    ) -> None:
        """Unauthenticated requests get 401 before any input is read."""
        response = await client.request(method, path)

        assert response.status_code == 401
        assert "error" in response.json()
