"""
Password hashing and access token helpers.

Passwords are stored as PBKDF2-HMAC-SHA256 digests with a random per-user
salt. Access tokens are HS256 JWTs signed with ``Settings.jwt_secret``.
"""
import hashlib
import hmac
import logging
import secrets
from datetime import UTC, datetime, timedelta
from typing import Any

import jwt

from core.config import Settings
from services.exceptions import AuthError

logger = logging.getLogger(__name__)

PASSWORD_HASH_SCHEME = "pbkdf2_sha256"
SALT_BYTES = 16


def hash_password(password: str, iterations: int) -> str:
    """
    Hash a plain text password.

    Returns ``pbkdf2_sha256$<iterations>$<salt_hex>$<digest_hex>``. The iteration
    count travels with the hash and verify_password uses it.
    """
    salt = secrets.token_bytes(SALT_BYTES)
    digest = hashlib.pbkdf2_hmac("sha256", password.encode("utf-8"), salt, iterations)
    return f"{PASSWORD_HASH_SCHEME}${iterations}${salt.hex()}${digest.hex()}"


def verify_password(password: str, stored_hash: str) -> bool:
    """Check a plain text password against a stored hash in constant time."""
    try:
        scheme, iterations, salt_hex, digest_hex = stored_hash.split("$")
        if scheme != PASSWORD_HASH_SCHEME:
            return False
        salt = bytes.fromhex(salt_hex)
        expected = bytes.fromhex(digest_hex)
        rounds = int(iterations)
    except ValueError:
        logger.warning("malformed_password_hash")
        return False

    digest = hashlib.pbkdf2_hmac("sha256", password.encode("utf-8"), salt, rounds)
    return hmac.compare_digest(digest, expected)


def create_access_token(
    user_id: int,
    email: str,
    settings: Settings,
    now: datetime | None = None,
) -> str:
    """Issue a signed access token for a user, valid for jwt_expire_minutes."""
    issued_at = now or datetime.now(UTC)
    payload = {
        "sub": str(user_id),
        "email": email,
        "iat": issued_at,
        "exp": issued_at + timedelta(minutes=settings.jwt_expire_minutes),
    }
    return jwt.encode(payload, settings.jwt_secret, algorithm=settings.jwt_algorithm)


def decode_access_token(token: str, settings: Settings) -> dict[str, Any]:
    """
    Decode and validate an access token.

    Raises:
        AuthError: If the token is expired, badly signed or missing claims.
    """
    try:
        return jwt.decode(
            token,
            settings.jwt_secret,
            algorithms=[settings.jwt_algorithm],
            options={"require": ["exp", "sub"]},
        )
    except jwt.ExpiredSignatureError:
        raise AuthError("Token has expired") from None
    except jwt.PyJWTError as e:
        # Full reason stays server-side
        logger.warning("jwt_invalid", extra={"error": str(e)})
        raise AuthError("Invalid token") from e
