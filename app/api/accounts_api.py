"""TikTok account endpoints: link, list, refresh and per-account video analytics."""

from __future__ import annotations

from fastapi import APIRouter, Depends, Query, Request, status

from app.api.dependencies import UnitOfWork, get_current_user, get_uow
from app.api.openapi_responses import (
    ErrorExample,
    account_not_found_response,
    error_responses,
    merge_responses,
    rate_limited_response,
    storage_unavailable_response,
    unauthorized_response,
)
from app.api.schemas.account_request_models import LinkAccountRequest
from app.api.schemas.account_response_models import (
    AccountResponse,
    AccountSummaryResponse,
    IngestionReportResponse,
    LinkAccountResponse,
    VideoResponse,
)
from app.core.errors import http_error_from
from app.core.profile_url import ProfileUrlError
from app.core.rate_limit import (
    ACCOUNT_LINK_RATE_LIMIT,
    ACCOUNT_REFRESH_RATE_LIMIT,
    limit,
    rate_limit_account_key,
    rate_limit_user_or_ip_key,
)
from app.db.models.tiktok_account import TikTokAccount
from app.db.models.user import User
from app.services.account_service import AccountNotFoundError
from app.services.video_service import VideoMetric, VideoReplaceError

router = APIRouter()

DEFAULT_RANKING_LIMIT = 3
MAX_RANKING_LIMIT = 50

_READ_RESPONSES = merge_responses(
    unauthorized_response(), account_not_found_response(), rate_limited_response()
)


async def _owned_account(account_id: int, user: User, uow: UnitOfWork) -> TikTokAccount:
    try:
        return await uow.account_service.get_account(user.id, account_id)
    except AccountNotFoundError as e:
        raise http_error_from(e, status.HTTP_404_NOT_FOUND) from e


@router.post(
    "",
    summary="Link TikTok account",
    description=(
        "Link a TikTok profile by URL and fetch its videos. When live data is "
        "unavailable the account is populated with placeholder videos."
    ),
    response_model=LinkAccountResponse,
    status_code=status.HTTP_201_CREATED,
    responses=merge_responses(
        error_responses(
            ErrorExample(
                status_code=status.HTTP_400_BAD_REQUEST,
                error="invalid_profile_url",
                message="Invalid TikTok profile URL format. Expected tiktok.com/@username.",
                description="Profile URL rejected",
            )
        ),
        unauthorized_response(),
        storage_unavailable_response(),
        rate_limited_response(),
    ),
)
@limit(ACCOUNT_LINK_RATE_LIMIT, key_func=rate_limit_user_or_ip_key)
async def link_account(
    request: Request,
    request_data: LinkAccountRequest,
    current_user: User = Depends(get_current_user),
    uow: UnitOfWork = Depends(get_uow),
) -> LinkAccountResponse:
    try:
        linked = await uow.account_service.link_account(current_user.id, request_data.profile_url)
    except ProfileUrlError as e:
        raise http_error_from(e, status.HTTP_400_BAD_REQUEST) from e
    except VideoReplaceError as e:
        raise http_error_from(e, status.HTTP_503_SERVICE_UNAVAILABLE) from e
    return LinkAccountResponse(
        account=AccountResponse.model_validate(linked.account),
        ingestion=IngestionReportResponse.model_validate(linked.ingestion),
    )


@router.get(
    "",
    summary="List linked TikTok accounts",
    response_model=list[AccountResponse],
    responses=merge_responses(unauthorized_response(), rate_limited_response()),
)
async def list_accounts(
    request: Request,
    current_user: User = Depends(get_current_user),
    uow: UnitOfWork = Depends(get_uow),
) -> list[AccountResponse]:
    accounts = await uow.account_service.list_accounts(current_user.id)
    return [AccountResponse.model_validate(account) for account in accounts]


@router.get(
    "/{account_id}",
    summary="Get a linked TikTok account",
    response_model=AccountResponse,
    responses=_READ_RESPONSES,
)
async def get_account(
    request: Request,
    account_id: int,
    current_user: User = Depends(get_current_user),
    uow: UnitOfWork = Depends(get_uow),
) -> AccountResponse:
    return AccountResponse.model_validate(await _owned_account(account_id, current_user, uow))


@router.post(
    "/{account_id}/refresh",
    summary="Refresh account videos",
    description="Re-fetch the account's videos and replace every stored video in one step.",
    response_model=IngestionReportResponse,
    responses=merge_responses(_READ_RESPONSES, storage_unavailable_response()),
)
@limit(ACCOUNT_REFRESH_RATE_LIMIT, key_func=rate_limit_account_key)
async def refresh_account(
    request: Request,
    account_id: int,
    current_user: User = Depends(get_current_user),
    uow: UnitOfWork = Depends(get_uow),
) -> IngestionReportResponse:
    try:
        report = await uow.account_service.refresh_account(current_user.id, account_id)
    except AccountNotFoundError as e:
        raise http_error_from(e, status.HTTP_404_NOT_FOUND) from e
    except VideoReplaceError as e:
        raise http_error_from(e, status.HTTP_503_SERVICE_UNAVAILABLE) from e
    return IngestionReportResponse.model_validate(report)


@router.get(
    "/{account_id}/videos",
    summary="List account videos",
    response_model=list[VideoResponse],
    responses=_READ_RESPONSES,
)
async def list_videos(
    request: Request,
    account_id: int,
    current_user: User = Depends(get_current_user),
    uow: UnitOfWork = Depends(get_uow),
) -> list[VideoResponse]:
    account = await _owned_account(account_id, current_user, uow)
    videos = await uow.account_service.videos.list_videos(account.id)
    return [VideoResponse.model_validate(video) for video in videos]


@router.get(
    "/{account_id}/videos/top",
    summary="Top-performing videos",
    description="Videos ranked by the chosen metric, highest first.",
    response_model=list[VideoResponse],
    responses=_READ_RESPONSES,
)
async def top_videos(
    request: Request,
    account_id: int,
    limit: int = Query(DEFAULT_RANKING_LIMIT, ge=1, le=MAX_RANKING_LIMIT),
    metric: VideoMetric = Query(VideoMetric.VIEWS),
    current_user: User = Depends(get_current_user),
    uow: UnitOfWork = Depends(get_uow),
) -> list[VideoResponse]:
    account = await _owned_account(account_id, current_user, uow)
    videos = await uow.account_service.videos.top_videos(account.id, limit, metric)
    return [VideoResponse.model_validate(video) for video in videos]


@router.get(
    "/{account_id}/videos/bottom",
    summary="Lowest-performing videos",
    description="Videos ranked by the chosen metric, lowest first.",
    response_model=list[VideoResponse],
    responses=_READ_RESPONSES,
)
async def bottom_videos(
    request: Request,
    account_id: int,
    limit: int = Query(DEFAULT_RANKING_LIMIT, ge=1, le=MAX_RANKING_LIMIT),
    metric: VideoMetric = Query(VideoMetric.VIEWS),
    current_user: User = Depends(get_current_user),
    uow: UnitOfWork = Depends(get_uow),
) -> list[VideoResponse]:
    account = await _owned_account(account_id, current_user, uow)
    videos = await uow.account_service.videos.bottom_videos(account.id, limit, metric)
    return [VideoResponse.model_validate(video) for video in videos]


@router.get(
    "/{account_id}/summary",
    summary="Account engagement summary",
    response_model=AccountSummaryResponse,
    responses=_READ_RESPONSES,
)
async def account_summary(
    request: Request,
    account_id: int,
    current_user: User = Depends(get_current_user),
    uow: UnitOfWork = Depends(get_uow),
) -> AccountSummaryResponse:
    account = await _owned_account(account_id, current_user, uow)
    summary = await uow.account_service.videos.summarize(account.id)
    return AccountSummaryResponse.model_validate(summary)
