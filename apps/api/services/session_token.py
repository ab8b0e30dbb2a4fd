"""Signed session tokens for dashboard API access."""

from datetime import datetime, timedelta, timezone
from typing import Any, Dict, Optional

from jose import JWTError, jwt

from config import settings


SESSION_TOKEN_TYPE = "trendzo_session"

ROLE_VIEWER = "viewer"
ROLE_EDITOR = "editor"
ROLE_ADMIN = "admin"
KNOWN_ROLES = {ROLE_VIEWER, ROLE_EDITOR, ROLE_ADMIN}


def create_session_token(
    user_id: str,
    role: str = ROLE_VIEWER,
    expires_hours: Optional[int] = None,
) -> Dict[str, Any]:
    if role not in KNOWN_ROLES:
        raise ValueError(f"Unknown dashboard role: {role}")

    now = datetime.now(timezone.utc)
    ttl_hours = int(expires_hours or settings.JWT_EXPIRATION_HOURS or 24)
    expires_at = now + timedelta(hours=max(ttl_hours, 1))
    claims: Dict[str, Any] = {
        "sub": user_id,
        "role": role,
        "type": SESSION_TOKEN_TYPE,
        "iat": int(now.timestamp()),
        "exp": int(expires_at.timestamp()),
    }
    return {
        "token": jwt.encode(claims, settings.JWT_SECRET, algorithm=settings.JWT_ALGORITHM),
        "expires_at": int(expires_at.timestamp()),
    }


def decode_session_token(token: str) -> Dict[str, Any]:
    """Decode a session token, raising ValueError when it cannot be trusted."""
    try:
        payload = jwt.decode(token, settings.JWT_SECRET, algorithms=[settings.JWT_ALGORITHM])
    except JWTError as exc:
        raise ValueError("Invalid or expired session token.") from exc

    if str(payload.get("type", "")).strip() != SESSION_TOKEN_TYPE:
        raise ValueError("Invalid session token type.")
    if not str(payload.get("sub", "")).strip():
        raise ValueError("Session token missing subject.")
    if payload.get("role") not in KNOWN_ROLES:
        raise ValueError("Session token carries an unknown role.")
    return payload
