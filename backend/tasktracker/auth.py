from __future__ import annotations

import hashlib
import hmac
import secrets
import time
from typing import Any

import jwt

from .config import Settings

HASH_ALGO = "pbkdf2_sha256"
DEFAULT_PBKDF2_ITERS = 200000
SALT_BYTES = 16
KEY_BYTES = 32


def _derive(pw: str, salt: bytes, iters: int, length: int = KEY_BYTES) -> bytes:
    return hashlib.pbkdf2_hmac("sha256", pw.encode("utf-8"), salt, iters, dklen=length)


def hash_password(pw: str, iters: int = DEFAULT_PBKDF2_ITERS) -> str:
    """Encode as ``pbkdf2_sha256$<iters>$<salt hex>$<key hex>``."""
    salt = secrets.token_bytes(SALT_BYTES)
    return "$".join([HASH_ALGO, str(iters), salt.hex(), _derive(pw, salt, iters).hex()])


def verify_password(pw: str, pw_hash: str) -> bool:
    parts = pw_hash.split("$")
    if len(parts) != 4 or parts[0] != HASH_ALGO:
        return False
    try:
        iters = int(parts[1])
        salt = bytes.fromhex(parts[2])
        expected = bytes.fromhex(parts[3])
        return hmac.compare_digest(_derive(pw, salt, iters, len(expected)), expected)
    except (ValueError, OverflowError):
        return False


def unusable_password_hash(iters: int = DEFAULT_PBKDF2_ITERS) -> str:
    """Hash of a random secret nobody knows; used for accounts created via Google."""
    return hash_password(secrets.token_urlsafe(32), iters)


def make_token(user_id: str, settings: Settings) -> str:
    now = int(time.time())
    payload: dict[str, Any] = {
        "sub": user_id,
        "iat": now,
        "exp": now + settings.session_ttl_seconds,
    }
    return jwt.encode(payload, settings.jwt_secret, algorithm=settings.jwt_alg)


def decode_token(token: str, settings: Settings) -> dict[str, Any]:
    """Raises jwt.PyJWTError when the token is malformed, expired or badly signed."""
    return jwt.decode(
        token,
        settings.jwt_secret,
        algorithms=[settings.jwt_alg],
        options={"require": ["sub", "exp"]},
    )
