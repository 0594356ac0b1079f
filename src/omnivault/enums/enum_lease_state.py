# SPDX-License-Identifier: MIT
# Copyright (c) 2025 OmniNode Team
"""Lease State Enumeration.

Defines the lifecycle states of a cached lease record as driven by the
maintenance scheduler.
"""

from enum import Enum


class EnumLeaseState(str, Enum):
    """Lifecycle state of a lease record.

    State Transitions:
        ACTIVE → RENEWAL_PENDING: Lease entered its renewal window (renewable)
        ACTIVE → ROTATING: Lease entered its renewal window (not renewable)
        RENEWAL_PENDING → ACTIVE: Renewal succeeded, record replaced
        RENEWAL_PENDING → ROTATING: Renewal failed terminally
        ROTATING → ACTIVE: Rotation succeeded, new record stored
        ROTATING → ERRORED: Rotation failed, record removed after on_error
        ACTIVE → EXPIRED: Lease passed its expiry with no maintenance possible;
            the sweep removes it from the cache
    """

    ACTIVE = "active"
    RENEWAL_PENDING = "renewal_pending"
    ROTATING = "rotating"
    EXPIRED = "expired"
    ERRORED = "errored"

    @property
    def is_in_flight(self) -> bool:
        """Return True when a maintenance operation owns the record."""
        return self in (EnumLeaseState.RENEWAL_PENDING, EnumLeaseState.ROTATING)


__all__ = ["EnumLeaseState"]
