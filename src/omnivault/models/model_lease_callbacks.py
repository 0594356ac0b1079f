# SPDX-License-Identifier: MIT
# Copyright (c) 2025 OmniNode Team
"""Lease lifecycle callback set supplied at read time."""

from __future__ import annotations

from collections.abc import Callable
from typing import Any

from pydantic import BaseModel, ConfigDict, Field


class ModelLeaseCallbacks(BaseModel):
    """Optional callbacks fired by the maintenance scheduler.

    Callbacks run on the callback dispatcher's executor, never on the
    scheduler loop. Exceptions they raise are logged and dropped.

    Attributes:
        on_renew: Called with the new record after a successful renewal
        on_rotate: Called with the new record after a successful rotation
        on_error: Called with ``(error, stale_record)`` when maintenance fails
    """

    model_config = ConfigDict(frozen=True, extra="forbid")

    on_renew: Callable[[Any], Any] | None = Field(default=None)
    on_rotate: Callable[[Any], Any] | None = Field(default=None)
    on_error: Callable[[BaseException, Any], Any] | None = Field(default=None)


__all__ = ["ModelLeaseCallbacks"]
