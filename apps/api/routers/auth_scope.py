"""Authentication and role checks for the analytics API."""

from dataclasses import dataclass
from typing import Callable

from fastapi import Depends, HTTPException
from fastapi.security import HTTPAuthorizationCredentials, HTTPBearer

from services.session_token import ROLE_VIEWER, decode_session_token


auth_scheme = HTTPBearer(auto_error=False)


@dataclass
class AuthContext:
    user_id: str
    role: str = ROLE_VIEWER


async def get_auth_context(
    credentials: HTTPAuthorizationCredentials = Depends(auth_scheme),
) -> AuthContext:
    """Resolve the dashboard user from a Bearer session token."""
    if not credentials or credentials.scheme.lower() != "bearer":
        raise HTTPException(status_code=401, detail="Missing Bearer session token.")

    try:
        payload = decode_session_token(credentials.credentials)
    except ValueError as exc:
        raise HTTPException(status_code=401, detail=str(exc)) from exc

    return AuthContext(user_id=str(payload["sub"]), role=str(payload["role"]))


def require_role(*roles: str) -> Callable[..., AuthContext]:
    """Return a dependency that admits only sessions holding one of `roles`."""
    allowed = frozenset(roles)

    async def _dependency(auth: AuthContext = Depends(get_auth_context)) -> AuthContext:
        if auth.role not in allowed:
            raise HTTPException(
                status_code=403,
                detail=f"Role '{auth.role}' may not perform this action.",
            )
        return auth

    return _dependency
