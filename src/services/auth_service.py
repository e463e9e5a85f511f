"""Service layer for account registration and login."""
import hmac
import logging

from sqlalchemy import select
from sqlalchemy.exc import IntegrityError
from sqlalchemy.ext.asyncio import AsyncSession

from core.config import Settings
from core.security import (
    burn_password_check,
    create_access_token,
    hash_password,
    verify_password,
)
from models.user import User
from schemas.auth import LoginRequest, RegisterRequest
from services.exceptions import (
    DuplicateUsernameError,
    InvalidCredentialsError,
    InvalidRegistrationCodeError,
)

logger = logging.getLogger(__name__)


async def get_user_by_username(db: AsyncSession, username: str) -> User | None:
    """Look up a user by exact username."""
    result = await db.execute(select(User).where(User.username == username))
    return result.scalar_one_or_none()


async def register_user(
    db: AsyncSession,
    data: RegisterRequest,
    settings: Settings,
) -> User:
    """
    Register a new account.

    Args:
        db: Database session.
        data: Username, password and registration verification code.
        settings: Provides the expected registration code.

    Returns:
        The created user. No session is issued; the client must log in.

    Raises:
        InvalidRegistrationCodeError: If the verification code is wrong.
        DuplicateUsernameError: If the username is already taken.

    Note:
        Does not commit. Caller (session generator) handles commit at request end.
    """
    if not hmac.compare_digest(
        data.verification_code.encode(), settings.registration_code.encode(),
    ):
        logger.info("Registration rejected: invalid verification code")
        raise InvalidRegistrationCodeError()

    if await get_user_by_username(db, data.username) is not None:
        raise DuplicateUsernameError(data.username)

    user = User(username=data.username, password_hash=hash_password(data.password))
    db.add(user)
    try:
        await db.flush()
    except IntegrityError as e:
        await db.rollback()
        # Fallback for race condition: unique constraint on username
        raise DuplicateUsernameError(data.username) from e
    await db.refresh(user)

    logger.info("Registered user id=%s username=%s", user.id, user.username)
    return user


async def login(
    db: AsyncSession,
    data: LoginRequest,
    settings: Settings,
) -> tuple[User, str]:
    """
    Authenticate a user and issue a 24-hour session token.

    Returns:
        Tuple of (user, token).

    Raises:
        InvalidCredentialsError: For an unknown username or a wrong password.
    """
    user = await get_user_by_username(db, data.username)
    if user is None:
        burn_password_check(data.password)
        logger.info("Login failed for username=%s", data.username)
        raise InvalidCredentialsError()

    if not verify_password(data.password, user.password_hash):
        logger.info("Login failed for username=%s", data.username)
        raise InvalidCredentialsError()

    token = create_access_token(
        user.id,
        user.username,
        settings.jwt_secret_key,
        settings.jwt_algorithm,
    )
    return user, token
