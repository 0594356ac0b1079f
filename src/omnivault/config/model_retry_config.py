# SPDX-License-Identifier: MIT
# Copyright (c) 2025 OmniNode Team
"""Retry Configuration Model.

Retries are bounded by a deadline rather than an attempt count: every call
gets ``deadline = started_at + max_retry_duration`` and a retry is only
scheduled if it would start before that deadline.
"""

from __future__ import annotations

from pydantic import BaseModel, ConfigDict, Field

from omnivault.errors import NetworkError, RateLimitedError, VaultResponseError

DEFAULT_RETRYABLE_STATUS_CODES: frozenset[int] = frozenset({429, *range(500, 600)})


class ModelRetryConfig(BaseModel):
    """Deadline-bounded retry configuration shared by all execution strategies.

    Attributes:
        retry_interval: Base delay in seconds before a retry
        max_retry_duration: Seconds after the first attempt during which
            retries may still start
        backoff_multiplier: Multiplier applied per retry (1.0 = fixed interval)
        max_retry_interval: Cap on a single retry delay in seconds
        retryable_status_codes: HTTP status codes treated as retryable

    Example:
        >>> config = ModelRetryConfig(retry_interval=0.2, max_retry_duration=5.0)
        >>> config.is_retryable(NetworkError("connection refused"))
        True
    """

    model_config = ConfigDict(frozen=True, extra="forbid")

    retry_interval: float = Field(
        default=0.5,
        gt=0.0,
        le=60.0,
        description="Base delay in seconds before a retry",
    )
    max_retry_duration: float = Field(
        default=10.0,
        ge=0.0,
        le=3600.0,
        description="Seconds after the first attempt during which retries may start",
    )
    backoff_multiplier: float = Field(
        default=1.0,
        ge=1.0,
        le=10.0,
        description="Multiplier applied to the delay on each retry",
    )
    max_retry_interval: float = Field(
        default=30.0,
        gt=0.0,
        description="Cap on a single retry delay in seconds",
    )
    retryable_status_codes: frozenset[int] = Field(
        default=DEFAULT_RETRYABLE_STATUS_CODES,
        description="HTTP status codes treated as retryable",
    )

    def is_retryable(self, error: BaseException) -> bool:
        """Classify an error as retryable or terminal.

        Pure function of the error: transport failures are always retryable,
        response errors are retryable when their status is allow-listed, and
        everything else is terminal.
        """
        if isinstance(error, NetworkError):
            return True
        if isinstance(error, VaultResponseError):
            return error.status in self.retryable_status_codes
        return False

    def delay_for(self, attempt: int, error: BaseException | None = None) -> float:
        """Return the delay before retry number ``attempt`` (1-based)."""
        exponent = max(attempt - 1, 0)
        delay = min(
            self.retry_interval * (self.backoff_multiplier**exponent),
            self.max_retry_interval,
        )
        if isinstance(error, RateLimitedError) and error.retry_after is not None:
            delay = max(delay, error.retry_after)
        return delay


__all__ = ["DEFAULT_RETRYABLE_STATUS_CODES", "ModelRetryConfig"]
