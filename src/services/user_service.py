"""Service layer for user accounts: registration, credentials, and profile."""
import logging

from sqlalchemy import select
from sqlalchemy.exc import IntegrityError
from sqlalchemy.ext.asyncio import AsyncSession

from core.security import hash_password, verify_password
from models.user import User
from schemas.user import UserUpdate

logger = logging.getLogger(__name__)


class EmailAlreadyExistsError(Exception):
    """Raised when an email is already registered to another account."""

    def __init__(self, email: str) -> None:
        self.email = email
        super().__init__("Credentials taken")


class InvalidCredentialsError(Exception):
    """Raised when an email/password pair does not match an account."""

    def __init__(self) -> None:
        super().__init__("Credentials incorrect")


async def _flush_user(db: AsyncSession, email: str) -> None:
    """
    Flush pending user changes.

    The lookup before an insert/update can race with another request; the unique
    index on users.email is the final check.
    """
    try:
        await db.flush()
    except IntegrityError as e:
        await db.rollback()
        if "email" in str(e.orig):
            raise EmailAlreadyExistsError(email) from e
        raise


async def get_user_by_id(db: AsyncSession, user_id: int) -> User | None:
    """Get a user by ID. Returns None if not found."""
    result = await db.execute(select(User).where(User.id == user_id))
    return result.scalar_one_or_none()


async def get_user_by_email(db: AsyncSession, email: str) -> User | None:
    """Get a user by (normalized) email. Returns None if not found."""
    result = await db.execute(select(User).where(User.email == email))
    return result.scalar_one_or_none()


async def create_user(
    db: AsyncSession,
    email: str,
    password: str,
    first_name: str | None = None,
    last_name: str | None = None,
) -> User:
    """
    Register a new user with a hashed password.

    Raises:
        EmailAlreadyExistsError: If the email is already registered.

    Note: Does not commit. Caller (session generator) handles commit at request end.
    """
    if await get_user_by_email(db, email) is not None:
        raise EmailAlreadyExistsError(email)

    user = User(
        email=email,
        hashed_password=hash_password(password),
        first_name=first_name,
        last_name=last_name,
    )
    db.add(user)
    await _flush_user(db, email)
    await db.refresh(user)
    logger.info("user_created", extra={"user_id": user.id})
    return user


async def authenticate_user(db: AsyncSession, email: str, password: str) -> User:
    """
    Return the user matching the email/password pair.

    Unknown email and wrong password raise the same error so callers can't
    tell which emails are registered.

    Raises:
        InvalidCredentialsError: If no user matches.
    """
    user = await get_user_by_email(db, email)
    if user is None or not verify_password(password, user.hashed_password):
        logger.warning("signin_failed")
        raise InvalidCredentialsError
    return user


async def update_user(db: AsyncSession, user: User, data: UserUpdate) -> User:
    """
    Apply the fields present in `data` to the user's profile.

    Raises:
        EmailAlreadyExistsError: If changing to an email another user has.

    Note: Does not commit. Caller (session generator) handles commit at request end.
    """
    update_data = data.model_dump(exclude_unset=True)

    new_email = update_data.get("email")
    if new_email is not None and new_email != user.email:
        existing = await get_user_by_email(db, new_email)
        if existing is not None:
            raise EmailAlreadyExistsError(new_email)

    for field, value in update_data.items():
        setattr(user, field, value)

    await _flush_user(db, new_email or user.email)
    await db.refresh(user)
    logger.info(
        "user_updated",
        extra={"user_id": user.id, "fields": sorted(update_data)},
    )
    return user
