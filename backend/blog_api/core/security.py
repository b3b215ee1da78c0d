# blog_api/core/security.py
"""
Security module for authentication primitives.
Handles password hashing and the signed bearer-token format.

Token lifecycle (expiry, revocation, abilities) lives in ``blog_api.core.tokens``;
this module only knows how to sign and verify the bearer string itself.
"""
import datetime as dt
import hashlib
import secrets

import jwt  # PyJWT
from passlib.context import CryptContext

from blog_api.config import settings

# Password hashing context
# Argon2 is a modern, secure password hashing algorithm
pwd_context = CryptContext(
    schemes=["argon2"],  # Use Argon2 for password hashing
    deprecated="auto",   # Automatically handle deprecated schemes
)

# JWT configuration
JWT_SECRET = settings.jwt_secret  # Secret key for bearer signing (use strong secret in production)
JWT_ALG = "HS256"  # JWT signing algorithm (HMAC SHA-256)

def hash_password(plain: str) -> str:
    """
    Hash a plain text password using Argon2.

    Args:
        plain: Plain text password to hash

    Returns:
        Hashed password string (safe to store in database)
    """
    return pwd_context.hash(plain)

def verify_password(plain: str, hashed: str) -> bool:
    """
    Verify a plain text password against a hashed password.

    Args:
        plain: Plain text password to verify
        hashed: Hashed password from database

    Returns:
        True if password matches, False otherwise
    """
    return pwd_context.verify(plain, hashed)

def sha256_hex(raw: str) -> str:
    """Non-reversible fingerprint of a bearer string, as stored in the database."""
    return hashlib.sha256(raw.encode("utf-8")).hexdigest()

def create_access_token(user_id: int, token_id: int, abilities: list[str]) -> str:
    """
    Create the signed bearer string for an issued token record.

    The payload points at the ``personal_access_tokens`` row (``jti``); expiry is
    enforced against that row rather than an ``exp`` claim, so an expired
    record can be detected and purged on first use.

    Args:
        user_id: Owner of the token
        token_id: Primary key of the token record
        abilities: Scopes granted to the token ("*" = unrestricted)

    Returns:
        Encoded JWT token string

    Token payload includes:
        - sub: Subject (user ID)
        - jti: Token record ID
        - abilities: Granted scopes
        - iat: Issued at timestamp
        - nonce: Random value so two tokens for the same record never collide
    """
    payload = {
        "sub": str(user_id),
        "jti": str(token_id),
        "abilities": list(abilities),
        "iat": dt.datetime.now(dt.timezone.utc),
        "nonce": secrets.token_urlsafe(16),
    }
    return jwt.encode(payload, JWT_SECRET, algorithm=JWT_ALG)

def decode_access_token(token: str) -> dict:
    """
    Decode and verify the signature of a bearer string.

    Args:
        token: JWT token string to decode

    Returns:
        Decoded token payload dictionary

    Raises:
        jwt.InvalidTokenError: If token is invalid, tampered with or malformed
    """
    return jwt.decode(
        token,
        JWT_SECRET,
        algorithms=[JWT_ALG],
        options={"require": ["sub", "jti"]},
    )
