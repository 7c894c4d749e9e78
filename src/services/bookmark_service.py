"""
Service layer for bookmark CRUD operations.

Every function takes the owning user's id as a required positional argument and
filters on it, so a bookmark is only ever visible to the user who created it.
A bookmark that exists but belongs to someone else is reported exactly like one
that does not exist.
"""
import logging

from sqlalchemy import select
from sqlalchemy.ext.asyncio import AsyncSession

from models.bookmark import Bookmark
from schemas.bookmark import BookmarkCreate, BookmarkUpdate

logger = logging.getLogger(__name__)

# bookmarks.id is a 32-bit INTEGER; larger ids can't exist and can't be bound
MAX_BOOKMARK_ID = 2**31 - 1


class BookmarkNotFoundError(Exception):
    """Raised when a bookmark does not exist or is not owned by the user."""

    def __init__(self, bookmark_id: int) -> None:
        self.bookmark_id = bookmark_id
        super().__init__("Bookmark not found")


async def get_bookmarks(db: AsyncSession, user_id: int) -> list[Bookmark]:
    """Get all bookmarks for a user in insertion order."""
    result = await db.execute(
        select(Bookmark)
        .where(Bookmark.user_id == user_id)
        .order_by(Bookmark.id),
    )
    return list(result.scalars().all())


async def create_bookmark(
    db: AsyncSession,
    user_id: int,
    data: BookmarkCreate,
) -> Bookmark:
    """
    Create a new bookmark owned by the user.

    Note: Does not commit. Caller (session generator) handles commit at request end.
    """
    bookmark = Bookmark(
        user_id=user_id,
        title=data.title,
        description=data.description,
        link=data.link,
    )
    db.add(bookmark)
    await db.flush()
    # Load server-generated timestamps
    await db.refresh(bookmark)
    logger.info(
        "bookmark_created",
        extra={"user_id": user_id, "bookmark_id": bookmark.id},
    )
    return bookmark


async def get_bookmark(
    db: AsyncSession,
    user_id: int,
    bookmark_id: int,
) -> Bookmark:
    """
    Get a bookmark by ID, scoped to user.

    Raises:
        BookmarkNotFoundError: If the bookmark doesn't exist or belongs to another user.
    """
    if not 1 <= bookmark_id <= MAX_BOOKMARK_ID:
        raise BookmarkNotFoundError(bookmark_id)

    result = await db.execute(
        select(Bookmark).where(
            Bookmark.id == bookmark_id,
            Bookmark.user_id == user_id,
        ),
    )
    bookmark = result.scalar_one_or_none()
    if bookmark is None:
        raise BookmarkNotFoundError(bookmark_id)
    return bookmark


async def update_bookmark(
    db: AsyncSession,
    user_id: int,
    bookmark_id: int,
    data: BookmarkUpdate,
) -> Bookmark:
    """
    Apply the fields present in `data` to a bookmark; other fields are left as-is.

    Raises:
        BookmarkNotFoundError: If the bookmark doesn't exist or belongs to another user.

    Note: Does not commit. Caller (session generator) handles commit at request end.
    """
    bookmark = await get_bookmark(db, user_id, bookmark_id)

    update_data = data.model_dump(exclude_unset=True)
    for field, value in update_data.items():
        setattr(bookmark, field, value)

    await db.flush()
    await db.refresh(bookmark)
    logger.info(
        "bookmark_updated",
        extra={
            "user_id": user_id,
            "bookmark_id": bookmark_id,
            "fields": sorted(update_data),
        },
    )
    return bookmark


async def delete_bookmark(
    db: AsyncSession,
    user_id: int,
    bookmark_id: int,
) -> None:
    """
    Delete a bookmark.

    Raises:
        BookmarkNotFoundError: If the bookmark doesn't exist (including already
            deleted) or belongs to another user.

    Note: Does not commit. Caller (session generator) handles commit at request end.
    """
    bookmark = await get_bookmark(db, user_id, bookmark_id)
    await db.delete(bookmark)
    await db.flush()
    logger.info(
        "bookmark_deleted",
        extra={"user_id": user_id, "bookmark_id": bookmark_id},
    )
