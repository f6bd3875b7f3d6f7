# vgen/core/security.py
"""
Security module for authentication and authorization.
Handles password hashing, JWT token creation/validation and password reset tokens.
"""
import re
import hashlib
import secrets
import datetime as dt
import jwt  # PyJWT
from passlib.context import CryptContext

from vgen.config import settings

# Password hashing context
# Argon2 is a modern, secure password hashing algorithm
pwd_context = CryptContext(
    schemes=["argon2"],  # Use Argon2 for password hashing
    deprecated="auto",   # Automatically handle deprecated schemes
)

JWT_ALG = "HS256"  # JWT signing algorithm (HMAC SHA-256)
RESET_TOKEN_TTL_MINUTES = 10  # Password reset links are short-lived

_DURATION_RE = re.compile(r"^\s*(\d+)\s*([smhd]?)\s*$")
_DURATION_UNITS = {"": 1, "s": 1, "m": 60, "h": 3600, "d": 86400}


def parse_duration(value: str) -> dt.timedelta:
    """
    Parse a compact duration string such as "7d", "12h", "30m" or "3600".

    Raises:
        ValueError: If the value does not match the supported format
    """
    match = _DURATION_RE.match(str(value))
    if not match:
        raise ValueError(f"Invalid duration: {value!r}")
    amount, unit = match.groups()
    return dt.timedelta(seconds=int(amount) * _DURATION_UNITS[unit])


def hash_password(plain: str) -> str:
    """
    Hash a plain text password using Argon2.

    Args:
        plain: Plain text password to hash

    Returns:
        Hashed password string (safe to store in database)
    """
    return pwd_context.hash(plain)


def verify_password(plain: str, hashed: str | None) -> bool:
    """
    Verify a plain text password against a hashed password.

    Args:
        plain: Plain text password to verify
        hashed: Hashed password from the user record

    Returns:
        True if password matches, False otherwise (including unknown hash formats)
    """
    if not hashed:
        return False
    try:
        return pwd_context.verify(plain, hashed)
    except ValueError:
        return False


def create_access_token(user_id: str, role: str = "user") -> str:
    """
    Create a JWT access token for user authentication.

    Args:
        user_id: Unique user identifier (UUID string)
        role: User role ("user" or "admin")

    Returns:
        Encoded JWT token string

    Token payload includes:
        - sub: Subject (user ID)
        - role: User role for authorization
        - iat: Issued at timestamp
        - exp: Expiration timestamp (now + JWT_EXPIRE)
    """
    now = dt.datetime.now(dt.timezone.utc)
    payload = {
        "sub": user_id,
        "role": role,
        "iat": now,
        "exp": now + parse_duration(settings.jwt_expire),
    }
    return jwt.encode(payload, settings.jwt_secret, algorithm=JWT_ALG)


def decode_access_token(token: str) -> dict:
    """
    Decode and validate a JWT access token.

    Raises:
        jwt.ExpiredSignatureError: If token has expired
        jwt.InvalidTokenError: If token is invalid or malformed
    """
    return jwt.decode(token, settings.jwt_secret, algorithms=[JWT_ALG])


def hash_token(token: str) -> str:
    """sha256 hex digest, used for reset tokens and session tokens at rest."""
    return hashlib.sha256(token.encode("utf-8")).hexdigest()


def generate_reset_token() -> tuple[str, str, dt.datetime]:
    """
    Create a password reset token.

    Returns:
        (raw_token, hashed_token, expires_at). Only the hash is stored; the raw
        token goes into the reset link.
    """
    raw = secrets.token_hex(32)
    expires = dt.datetime.now(dt.timezone.utc) + dt.timedelta(minutes=RESET_TOKEN_TTL_MINUTES)
    return raw, hash_token(raw), expires
