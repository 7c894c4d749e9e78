"""Password hashing and access token helpers."""
from datetime import UTC, datetime, timedelta

import jwt
from fastapi import HTTPException, status
from werkzeug.security import check_password_hash, generate_password_hash

from core.config import Settings


def hash_password(password: str) -> str:
    """Hash a plaintext password for storage."""
    return generate_password_hash(password)


def verify_password(password: str, hashed_password: str) -> bool:
    """Check a plaintext password against a stored hash."""
    return check_password_hash(hashed_password, password)


def create_access_token(user_id: int, settings: Settings) -> str:
    """
    Issue a signed access token for a user.

    The token carries the user id in the `sub` claim (as a string, per RFC 7519)
    and expires after `access_token_expire_minutes`.
    """
    now = datetime.now(UTC)
    payload = {
        "sub": str(user_id),
        "iat": now,
        "exp": now + timedelta(minutes=settings.access_token_expire_minutes),
    }
    return jwt.encode(payload, settings.jwt_secret, algorithm=settings.jwt_algorithm)


def _unauthorized(detail: str) -> HTTPException:
    return HTTPException(
        status_code=status.HTTP_401_UNAUTHORIZED,
        detail=detail,
        headers={"WWW-Authenticate": "Bearer"},
    )


def decode_access_token(token: str, settings: Settings) -> int:
    """
    Decode and validate an access token, returning the user id.

    Raises:
        HTTPException: 401 if the token is expired, tampered with, or malformed.
    """
    try:
        payload = jwt.decode(
            token,
            settings.jwt_secret,
            algorithms=[settings.jwt_algorithm],
            options={"require": ["sub", "exp"]},
        )
    except jwt.ExpiredSignatureError:
        raise _unauthorized("Token has expired")
    except jwt.PyJWTError as e:
        raise _unauthorized(f"Invalid token: {e}")

    try:
        return int(payload["sub"])
    except (TypeError, ValueError):
        raise _unauthorized("Invalid token: malformed sub claim")
