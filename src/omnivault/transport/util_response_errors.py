# SPDX-License-Identifier: MIT
# Copyright (c) 2025 OmniNode Team
"""Classification of non-2xx Vault responses into client errors."""

from __future__ import annotations

from omnivault.errors import (
    ClientError,
    ModelVaultErrorContext,
    NotFoundError,
    PermissionDeniedError,
    RateLimitedError,
    ServerError,
    VaultResponseError,
)
from omnivault.models import ModelTransportResponse


def parse_retry_after(value: str | None) -> float | None:
    """Parse a ``Retry-After`` header given in seconds.

    HTTP-date values and garbage are ignored.
    """
    if not value:
        return None
    try:
        seconds = float(value.strip())
    except ValueError:
        return None
    return seconds if seconds >= 0 else None


def error_for_response(
    response: ModelTransportResponse,
    context: ModelVaultErrorContext | None = None,
) -> VaultResponseError:
    """Build the error for a non-2xx response.

    Status Mapping:
        404 → NotFoundError
        401, 403 → PermissionDeniedError
        429 → RateLimitedError (carries Retry-After)
        5xx → ServerError
        other → ClientError
    """
    status = response.status
    errors = response.errors
    detail = "; ".join(errors) if errors else "no error detail"
    message = f"Vault returned HTTP {status}: {detail}"

    if status == 404:
        return NotFoundError(message, context=context, status=status, errors=errors)
    if status in (401, 403):
        return PermissionDeniedError(
            message, context=context, status=status, errors=errors
        )
    if status == 429:
        headers = {k.lower(): v for k, v in response.headers.items()}
        return RateLimitedError(
            message,
            context=context,
            status=status,
            errors=errors,
            retry_after=parse_retry_after(headers.get("retry-after")),
        )
    if status >= 500:
        return ServerError(message, context=context, status=status, errors=errors)
    return ClientError(message, context=context, status=status, errors=errors)


__all__ = ["error_for_response", "parse_retry_after"]
