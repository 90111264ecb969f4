"""Session token signing and request fingerprinting for the auth layer.

Session and OAuth-state tokens are JWTs signed with AUTH_SECRET (python-jose).
Verification never raises: an invalid, expired or mistyped token is None.
"""

from __future__ import annotations

import hashlib
from datetime import datetime, timedelta, timezone
from typing import Any

from jose import JWTError, jwt

from src.constellation.config import Settings

SESSION_COOKIE_NAME = "constellation.session-token"
STATE_COOKIE_NAME = "constellation.oauth-state"

STATE_TOKEN_TTL = timedelta(minutes=10)


# ── Token Creation ────────────────────────────────────────────────────────────


def _encode(settings: Settings, claims: dict[str, Any], token_type: str, ttl: timedelta) -> str:
    now = datetime.now(timezone.utc)
    to_encode = dict(claims)
    to_encode.update({
        "iat": now,
        "exp": now + ttl,
        "type": token_type,
    })
    return jwt.encode(to_encode, settings.AUTH_SECRET, algorithm=settings.AUTH_JWT_ALGORITHM)


def create_session_token(settings: Settings, claims: dict[str, Any]) -> str:
    """Create a session token. claims should carry at least sub and email."""
    return _encode(
        settings, claims, "session", timedelta(days=settings.AUTH_SESSION_MAX_AGE_DAYS)
    )


def create_state_token(settings: Settings, state: str, callback_url: str) -> str:
    """Short-lived token binding an OAuth state value to the post-login destination."""
    return _encode(
        settings, {"state": state, "callback_url": callback_url}, "oauth_state", STATE_TOKEN_TTL
    )


# ── Token Verification ────────────────────────────────────────────────────────


def verify_token(settings: Settings, token: str | None, token_type: str) -> dict[str, Any] | None:
    """Decode a token of the expected type, or return None."""
    if not token or not settings.AUTH_SECRET:
        return None
    try:
        payload = jwt.decode(
            token,
            settings.AUTH_SECRET,
            algorithms=[settings.AUTH_JWT_ALGORITHM],
        )
    except JWTError:
        return None
    if payload.get("type") != token_type:
        return None
    return payload


# ── Request Fingerprinting ────────────────────────────────────────────────────


def hash_ip(ip: str | None) -> str | None:
    """Truncated SHA-256 of a client IP, for audit rows without storing the address."""
    if not ip:
        return None
    return hashlib.sha256(ip.encode("utf-8")).hexdigest()[:16]


def client_ip(headers: Any, fallback: str | None) -> str | None:
    """First X-Forwarded-For hop, else the socket peer address."""
    forwarded = headers.get("x-forwarded-for")
    if forwarded:
        return forwarded.split(",")[0].strip() or fallback
    return fallback
