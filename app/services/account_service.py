"""TikTok account service - linking, listing and refreshing a user's accounts."""

from __future__ import annotations

import logging
from collections.abc import Callable
from dataclasses import dataclass

from sqlalchemy import insert, select
from sqlalchemy.ext.asyncio import AsyncSession

from app.core.profile_url import parse_profile_handle
from app.db.models.tiktok_account import TikTokAccount
from app.services.ingestion_service import IngestionReport, IngestionService
from app.services.video_service import VideoService
from app.tiktok.client import TikTokClient, TikTokServiceError
from app.tiktok.schemas import TikTokProfile

logger = logging.getLogger(__name__)


class AccountError(Exception):
    """Base error for TikTok account operations."""

    def __init__(self, message: str, error_code: str) -> None:
        super().__init__(message)
        self.error_code = error_code


class AccountNotFoundError(AccountError):
    """Raised when an account does not exist or belongs to another user."""

    def __init__(self, message: str = "TikTok account not found") -> None:
        super().__init__(message, "account_not_found")


@dataclass(frozen=True)
class LinkedAccount:
    account: TikTokAccount
    ingestion: IngestionReport


class AccountService:
    """Operations on the TikTok accounts a user has linked."""

    def __init__(
        self,
        session: AsyncSession,
        tiktok_client: TikTokClient,
        ingestion_service: IngestionService | None = None,
    ) -> None:
        self._session = session
        self._tiktok_client = tiktok_client
        self.videos = VideoService(session)
        self._ingestion_service = ingestion_service or IngestionService(
            tiktok_client, self.videos
        )

    async def link_account(self, user_id: int, profile_url: str) -> LinkedAccount:
        """Link a TikTok profile to a user and ingest its videos.

        The provider is only consulted on a best-effort basis: an unverifiable
        profile is still linked and receives placeholder videos.

        Raises:
            ProfileUrlError: If the URL is not a TikTok profile URL.
            VideoReplaceError: If the videos could not be stored; nothing is linked.
        """
        handle = parse_profile_handle(profile_url)
        await self._verify_profile(handle)

        result = await self._session.execute(
            insert(TikTokAccount)
            .values(user_id=user_id, username=handle, profile_url=profile_url.strip())
            .returning(TikTokAccount)
        )
        account = result.scalar_one()
        logger.info("Linked TikTok account", extra={"account_id": account.id, "handle": handle})

        report = await self._ingestion_service.ingest(account.id, account.username)
        return LinkedAccount(account=account, ingestion=report)

    async def _verify_profile(self, handle: str) -> TikTokProfile | None:
        try:
            return await self._tiktok_client.fetch_profile(handle)
        except TikTokServiceError as e:
            logger.warning(
                "Could not verify TikTok profile; linking anyway",
                extra={"handle": handle, "error_code": e.error_code},
            )
            return None

    async def list_accounts(self, user_id: int) -> list[TikTokAccount]:
        result = await self._session.execute(
            select(TikTokAccount).where(TikTokAccount.user_id == user_id).order_by(TikTokAccount.id)
        )
        return list(result.scalars().all())

    async def get_account(self, user_id: int, account_id: int) -> TikTokAccount:
        """Return an account owned by ``user_id``.

        Raises:
            AccountNotFoundError: If it does not exist or is owned by someone else.
        """
        result = await self._session.execute(
            select(TikTokAccount).where(
                TikTokAccount.id == account_id, TikTokAccount.user_id == user_id
            )
        )
        account = result.scalar_one_or_none()
        if account is None:
            raise AccountNotFoundError()
        return account

    async def refresh_account(self, user_id: int, account_id: int) -> IngestionReport:
        """Re-fetch an owned account's videos, replacing the stored set."""
        account = await self.get_account(user_id, account_id)
        return await self._ingestion_service.ingest(account.id, account.username)


def account_service_factory_provider(
    tiktok_client: TikTokClient,
) -> Callable[[AsyncSession], AccountService]:
    """Return a factory that builds an AccountService sharing one provider client."""

    def factory(session: AsyncSession) -> AccountService:
        return AccountService(session, tiktok_client)

    return factory
