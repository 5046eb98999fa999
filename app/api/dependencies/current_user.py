"""Dependency that provides the authenticated user from the request."""

from __future__ import annotations

from fastapi import Depends, status

from app.api.dependencies.unit_of_work import UnitOfWork, get_uow
from app.core.auth import oauth2_scheme, verify_token
from app.core.errors import build_http_error
from app.db.models.user import User


def _user_id_from_token(token: str) -> int | None:
    payload = verify_token(token)
    if payload is None:
        return None
    subject = payload.get("sub")
    if not isinstance(subject, str) or not subject.isdigit():
        return None
    return int(subject)


async def get_current_user(
    token: str = Depends(oauth2_scheme), uow: UnitOfWork = Depends(get_uow)
) -> User:
    """Resolve the bearer token to a stored user, or fail with 401."""
    user_id = _user_id_from_token(token)
    user = await uow.auth_service.get_user_by_id(user_id) if user_id is not None else None
    if user is None:
        raise build_http_error(
            status_code=status.HTTP_401_UNAUTHORIZED,
            error="unauthorized",
            message="Could not validate credentials",
            headers={"WWW-Authenticate": "Bearer"},
        )
    return user
