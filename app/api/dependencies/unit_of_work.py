"""Unit of Work: one transaction per request, session-scoped services from registry."""

from __future__ import annotations

from collections.abc import AsyncIterator
from typing import Any, cast

from fastapi import Request
from sqlalchemy.ext.asyncio import AsyncSession

from app.db.session import get_session_maker
from app.services.account_service import AccountService
from app.services.auth_service import AuthService


class UnitOfWork:
    """Holds the request's session and exposes session-scoped services from the registry."""

    def __init__(self, session: AsyncSession, services: dict[str, Any]) -> None:
        self._session = session
        self._services = services
        self._auth_service: AuthService | None = None
        self._account_service: AccountService | None = None

    def _resolve(self, key: str) -> Any:
        service = self._services[key]
        if callable(service):
            return service(self._session)
        return service

    @property
    def auth_service(self) -> AuthService:
        """Session-scoped auth service."""
        if self._auth_service is None:
            self._auth_service = cast(AuthService, self._resolve("auth_service"))
        return self._auth_service

    @property
    def account_service(self) -> AccountService:
        """Session-scoped TikTok account service."""
        if self._account_service is None:
            self._account_service = cast(AccountService, self._resolve("account_service"))
        return self._account_service


async def get_uow(request: Request) -> AsyncIterator[UnitOfWork]:
    """Per-request dependency: one session, commit on success, rollback on exception."""
    session_maker = get_session_maker()
    async with session_maker() as session:
        try:
            yield UnitOfWork(session, request.app.state.services)
            await session.commit()
        except Exception:
            await session.rollback()
            raise
