"""Password hashing and session token primitives."""
from dataclasses import dataclass
from datetime import UTC, datetime, timedelta
from functools import cache

import jwt
from argon2 import PasswordHasher
from argon2 import exceptions as argon_exc

# Session tokens are valid for exactly this long after issuance.
ACCESS_TOKEN_TTL = timedelta(hours=24)

REQUIRED_CLAIMS = ["exp", "iat", "user_id", "username"]

_password_hasher = PasswordHasher()


class AuthenticationError(Exception):
    """Raised when a session token is missing, malformed, forged, or expired."""

    def __init__(self, message: str = "Unauthenticated") -> None:
        super().__init__(message)


@dataclass(frozen=True)
class AuthenticatedUser:
    """Identity asserted by a verified session token."""

    id: int
    username: str


def hash_password(password: str) -> str:
    """Return an argon2 verifier for the password."""
    return _password_hasher.hash(password)


def verify_password(password: str, password_hash: str) -> bool:
    """Check a password against a stored verifier without raising."""
    try:
        return _password_hasher.verify(password_hash, password)
    except (argon_exc.VerificationError, argon_exc.InvalidHashError):
        return False


@cache
def _dummy_hash() -> str:
    return _password_hasher.hash("not-a-real-password")


def burn_password_check(password: str) -> None:
    """
    Spend the same work as a real verification against a throwaway hash.

    Called when the username doesn't exist so unknown-user and wrong-password
    logins take comparable time.
    """
    verify_password(password, _dummy_hash())


def create_access_token(
    user_id: int,
    username: str,
    secret_key: str,
    algorithm: str = "HS256",
    now: datetime | None = None,
) -> str:
    """
    Issue a signed session token for a user.

    Args:
        user_id: Account id bound into the token.
        username: Account username bound into the token.
        secret_key: Signing secret.
        algorithm: JWT signing algorithm.
        now: Issuance time; defaults to the current UTC time.

    Returns:
        The encoded JWT. Expires exactly ACCESS_TOKEN_TTL after `now`.
    """
    issued_at = now or datetime.now(UTC)
    payload = {
        "user_id": user_id,
        "username": username,
        "iat": issued_at,
        "exp": issued_at + ACCESS_TOKEN_TTL,
    }
    return jwt.encode(payload, secret_key, algorithm=algorithm)


def decode_access_token(
    token: str,
    secret_key: str,
    algorithm: str = "HS256",
) -> AuthenticatedUser:
    """
    Verify a session token and return the identity it asserts.

    Raises:
        AuthenticationError: If the signature is invalid, the token has
            expired, or any required claim is missing or mistyped.
    """
    try:
        payload = jwt.decode(
            token,
            secret_key,
            algorithms=[algorithm],
            options={"require": REQUIRED_CLAIMS},
        )
    except jwt.ExpiredSignatureError as e:
        raise AuthenticationError("Token has expired") from e
    except jwt.PyJWTError as e:
        raise AuthenticationError("Invalid token") from e

    user_id = payload["user_id"]
    username = payload["username"]
    # bool is an int subclass
    if not isinstance(user_id, int) or isinstance(user_id, bool) or not isinstance(username, str):
        raise AuthenticationError("Invalid token")

    return AuthenticatedUser(id=user_id, username=username)
