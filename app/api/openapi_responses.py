"""Reusable OpenAPI ``responses=`` fragments for the shared error envelope."""

from __future__ import annotations

from dataclasses import dataclass
from typing import Any

from fastapi import status

from app.core.errors import ErrorResponse

Responses = dict[int | str, dict[str, Any]]


@dataclass(frozen=True)
class ErrorExample:
    status_code: int
    error: str
    message: str
    description: str
    summary: str | None = None
    details: Any | None = None
    example_name: str | None = None


def error_responses(*examples: ErrorExample) -> Responses:
    """Group error examples by status code into a FastAPI ``responses`` mapping."""
    responses: Responses = {}
    for example in examples:
        response = responses.setdefault(
            example.status_code,
            {
                "model": ErrorResponse,
                "description": example.description,
                "content": {"application/json": {"examples": {}}},
            },
        )

        payload: dict[str, Any] = {"error": example.error, "message": example.message}
        if example.details is not None:
            payload["details"] = example.details

        response["content"]["application/json"]["examples"][
            example.example_name or example.error
        ] = {"summary": example.summary or example.description, "value": payload}

    return responses


def merge_responses(*fragments: Responses) -> Responses:
    """Combine fragments; examples sharing a status code are merged."""
    merged: Responses = {}
    for fragment in fragments:
        for status_code, response in fragment.items():
            existing = merged.get(status_code)
            if existing is None:
                merged[status_code] = {
                    **response,
                    "content": {
                        "application/json": {
                            "examples": dict(response["content"]["application/json"]["examples"])
                        }
                    },
                }
                continue
            existing["content"]["application/json"]["examples"].update(
                response["content"]["application/json"]["examples"]
            )
    return merged


def rate_limited_response(description: str = "Rate limit exceeded") -> Responses:
    return error_responses(
        ErrorExample(
            status_code=status.HTTP_429_TOO_MANY_REQUESTS,
            error="rate_limited",
            message="Too many requests",
            description=description,
            summary="Too many requests",
        )
    )


def unauthorized_response(description: str = "Missing or invalid token") -> Responses:
    return error_responses(
        ErrorExample(
            status_code=status.HTTP_401_UNAUTHORIZED,
            error="unauthorized",
            message="Could not validate credentials",
            description=description,
            summary="Unauthorized",
        )
    )


def account_not_found_response() -> Responses:
    return error_responses(
        ErrorExample(
            status_code=status.HTTP_404_NOT_FOUND,
            error="account_not_found",
            message="TikTok account not found",
            description="Account does not exist or belongs to another user",
        )
    )


def storage_unavailable_response() -> Responses:
    return error_responses(
        ErrorExample(
            status_code=status.HTTP_503_SERVICE_UNAVAILABLE,
            error="storage_unavailable",
            message="Could not store account videos. Try again later.",
            description="Videos could not be stored; previously stored videos are unchanged",
        )
    )
