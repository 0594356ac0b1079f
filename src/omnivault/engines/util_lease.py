# SPDX-License-Identifier: MIT
# Copyright (c) 2025 OmniNode Team
"""Helpers turning Vault responses into lease records."""

from __future__ import annotations

from collections.abc import Callable, Mapping
from typing import Any

from omnivault.models import ModelLeaseCallbacks, ModelLeaseRecord


def callbacks_from(
    callbacks: ModelLeaseCallbacks | Mapping[str, Any] | None,
) -> ModelLeaseCallbacks:
    """Normalize caller-supplied callbacks into a ModelLeaseCallbacks."""
    if callbacks is None:
        return ModelLeaseCallbacks()
    if isinstance(callbacks, ModelLeaseCallbacks):
        return callbacks
    return ModelLeaseCallbacks.model_validate(dict(callbacks))


def lease_record_from_response(
    key: str,
    response: Mapping[str, Any],
    *,
    value: Any,
    issued_at: float,
    renewable: bool | None = None,
    renewal_window: float | None = None,
    renew_increment: int | None = None,
    callbacks: ModelLeaseCallbacks | Mapping[str, Any] | None = None,
    rotate_fn: Callable[[], Any] | None = None,
) -> ModelLeaseRecord | None:
    """Build a lease record from a leased secret response.

    Returns None when the response carries no lease (no ``lease_id`` and no
    ``lease_duration``), as for KV reads.

    Args:
        key: Cache key of the record
        response: Response body with ``lease_id``/``lease_duration``/``renewable``
        value: Payload stored in the record
        issued_at: Epoch seconds when the response was received
        renewable: Override the server's renewable flag (False disables renewal)
        renewal_window: Per-lease maintenance window
        renew_increment: Requested renewal extension
        callbacks: Lifecycle callbacks
        rotate_fn: Thunk issuing a fresh record
    """
    lease_id = response.get("lease_id") or None
    duration = response.get("lease_duration")
    if not lease_id and not duration:
        return None
    server_renewable = bool(response.get("renewable"))
    return ModelLeaseRecord(
        key=key,
        lease_id=lease_id,
        value=value,
        issued_at=issued_at,
        duration=float(duration or 0),
        renewable=server_renewable if renewable is None else renewable and server_renewable,
        renewal_window=renewal_window,
        renew_increment=renew_increment,
        callbacks=callbacks_from(callbacks),
        rotate_fn=rotate_fn,
    )


def synthesize_lease(
    key: str,
    value: Any,
    ttl: float,
    *,
    issued_at: float,
    renewal_window: float | None = None,
    callbacks: ModelLeaseCallbacks | Mapping[str, Any] | None = None,
    rotate_fn: Callable[[], Any] | None = None,
) -> ModelLeaseRecord:
    """Build a pseudo-lease for a secret that Vault does not lease.

    The record has no server lease id and is never renewable; it expires
    after ``ttl`` seconds unless ``rotate_fn`` refreshes it.
    """
    return ModelLeaseRecord(
        key=key,
        value=value,
        issued_at=issued_at,
        duration=float(ttl),
        renewable=False,
        renewal_window=renewal_window,
        callbacks=callbacks_from(callbacks),
        rotate_fn=rotate_fn,
    )


__all__ = ["callbacks_from", "lease_record_from_response", "synthesize_lease"]
