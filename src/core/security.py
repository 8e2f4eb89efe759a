"""
Credentials: Argon2id password hashes and HS256 bearer tokens.

A bearer token identifies a user by id (``sub``) and carries the e-mail for
log readability only; the user row is always reloaded, so a token never
grants more than the current account state. Tokens live for
``ACCESS_TOKEN_EXPIRE_MINUTES`` (a week by default) and are not refreshed.
"""

import logging
import uuid
from datetime import UTC, datetime, timedelta
from typing import Any

from argon2 import PasswordHasher
from argon2.exceptions import InvalidHashError, VerificationError, VerifyMismatchError
from jose import JWTError, jwt

from src.core.config import settings
from src.exceptions import InvalidTokenError

logger = logging.getLogger(__name__)

MIN_PASSWORD_LENGTH = 6

ALGORITHM = "HS256"
TOKEN_TYPE_ACCESS = "access"

# Parameters come from settings so tests can run with cheap hashing
pwd_hasher = PasswordHasher(
    time_cost=settings.argon2_time_cost,
    memory_cost=settings.argon2_memory_cost,
    parallelism=settings.argon2_parallelism,
)


# =============================================================================
# Passwords
# =============================================================================


def hash_password(password: str) -> str:
    """Return an Argon2id hash (``$argon2id$v=19$m=...``) with a random salt."""
    return pwd_hasher.hash(password)


def verify_password(password: str, hashed_password: str | None) -> bool:
    """
    Check a password against a stored hash.

    Accounts created through Google sign-in store no hash and never match.
    A malformed hash is treated as a mismatch.
    """
    if not hashed_password:
        return False
    try:
        return pwd_hasher.verify(hashed_password, password)
    except (VerifyMismatchError, VerificationError, InvalidHashError):
        return False


# =============================================================================
# Bearer tokens
# =============================================================================


def issue_access_token(
    user_id: uuid.UUID | str,
    email: str | None = None,
    lifetime: timedelta | None = None,
) -> str:
    """
    Sign an access token for a user.

    Args:
        user_id: Subject of the token
        email: Informational claim
        lifetime: Overrides the configured lifetime (tests use a negative one)

    Returns:
        Compact JWS string for ``Authorization: Bearer``
    """
    issued_at = datetime.now(UTC)
    expires_at = issued_at + (lifetime or timedelta(minutes=settings.access_token_expire_minutes))

    claims: dict[str, Any] = {
        "sub": str(user_id),
        "type": TOKEN_TYPE_ACCESS,
        "iat": issued_at,
        "exp": expires_at,
        "jti": uuid.uuid4().hex,
    }
    if email:
        claims["email"] = email
    return jwt.encode(claims, settings.secret_key, algorithm=ALGORITHM)


def decode_token(token: str) -> dict[str, Any]:
    """
    Verify signature and expiry and return the claims.

    Raises:
        JWTError: Bad signature, expired, or not a JWT at all
    """
    return jwt.decode(token, settings.secret_key, algorithms=[ALGORITHM])


def read_access_token(token: str) -> uuid.UUID:
    """
    Resolve a bearer token to the user id it was issued for.

    Raises:
        InvalidTokenError: Token fails verification, is not an access token,
            or its subject is not a user id
    """
    try:
        claims = decode_token(token)
    except JWTError as e:
        logger.warning(f"Rejected bearer token: {e}")
        raise InvalidTokenError()

    if claims.get("type") != TOKEN_TYPE_ACCESS:
        logger.warning(f"Rejected bearer token of type {claims.get('type')!r}")
        raise InvalidTokenError("Invalid token type")

    try:
        return uuid.UUID(str(claims.get("sub")))
    except ValueError:
        logger.warning(f"Rejected bearer token with subject {claims.get('sub')!r}")
        raise InvalidTokenError("Invalid token payload")
