from __future__ import annotations

from collections.abc import AsyncIterator, Callable

import structlog
from competency_hub.core.auth import TokenError, create_access_token, decode_access_token
from competency_hub.domain import Role, User
from competency_hub.infrastructure.db.session import get_session
from fastapi import Depends, HTTPException, status
from fastapi.security import HTTPAuthorizationCredentials, HTTPBearer
from sqlalchemy.ext.asyncio import AsyncSession
from structlog.contextvars import bind_contextvars

bearer_scheme = HTTPBearer(auto_error=False)
logger = structlog.get_logger()


async def get_current_user(
    credentials: HTTPAuthorizationCredentials | None = Depends(bearer_scheme),  # noqa: B008
) -> User:
    """Resolve the authenticated user from a bearer token."""
    if credentials is None:
        raise _unauthorized("Missing bearer token")

    try:
        payload = decode_access_token(credentials.credentials)
    except TokenError as exc:
        raise _unauthorized(str(exc)) from exc

    user_id = payload.get("sub")
    if not user_id:
        raise _unauthorized("Token missing subject")

    user = User(user_id=user_id, email=payload.get("email", ""), roles=list(payload["roles"]))
    bind_contextvars(user_id=user.user_id, effective_role=user.effective_role.value)
    return user


def require_effective_role(minimum: Role | str) -> Callable[[User], User]:
    """Dependency factory admitting users whose effective role is at least ``minimum``."""
    required = Role(minimum)

    def dependency(user: User = Depends(get_current_user)) -> User:  # noqa: B008
        if user.effective_role < required:
            logger.info(
                "access_denied",
                user_id=user.user_id,
                effective_role=user.effective_role.value,
                required_role=required.value,
            )
            raise _forbidden("Insufficient role privileges")
        return user

    return dependency


def issue_smoke_token(user_id: str, *, role: Role, email: str | None = None) -> str:
    """Generate a signed token for manual smoke testing."""
    return create_access_token(user_id, roles=[role.value], email=email)


async def get_db_session() -> AsyncIterator[AsyncSession]:
    """Provide an async SQLAlchemy session for API handlers."""
    async for session in get_session():
        yield session


def _unauthorized(detail: str) -> HTTPException:
    return HTTPException(status_code=status.HTTP_401_UNAUTHORIZED, detail=detail)


def _forbidden(detail: str) -> HTTPException:
    return HTTPException(status_code=status.HTTP_403_FORBIDDEN, detail=detail)
