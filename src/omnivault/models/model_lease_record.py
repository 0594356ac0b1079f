# SPDX-License-Identifier: MIT
# Copyright (c) 2025 OmniNode Team
"""Lease Record Model.

A lease record is one unit of time-bound material currently held by the
client: a dynamic credential, a leased secret, a synthesized pseudo-lease for
a KV read with a TTL, or the client's own auth token.

Records are immutable. Renewal and rotation produce a new record that
replaces the old one in the lease cache wholesale; nothing is merged and no
field is updated in place.
"""

from __future__ import annotations

from collections.abc import Callable
from typing import Any

from pydantic import BaseModel, ConfigDict, Field, computed_field

from omnivault.enums import EnumLeaseState
from omnivault.models.model_lease_callbacks import ModelLeaseCallbacks


class ModelLeaseRecord(BaseModel):
    """Immutable record of a lease held in the lease cache.

    Attributes:
        key: Stable cache identifier (lease id or engine/mount/path key)
        lease_id: Server lease id, None for synthesized leases
        value: Opaque payload owned by this record
        issued_at: Epoch seconds at which the lease was issued or renewed
        duration: Lease duration in seconds from ``issued_at``
        renewable: Whether Vault allows renewing the lease
        renewal_window: Seconds before expiry to start maintenance
            (None uses the client default)
        renew_increment: Requested extension in seconds for renewals
        callbacks: Lifecycle callbacks supplied by the caller
        state: Lifecycle state driven by the maintenance scheduler
        rotate_fn: Thunk issuing a fresh record; None if not rotatable
        renew_fn: Custom renewer taking this record and returning a new one
    """

    model_config = ConfigDict(
        frozen=True,
        extra="forbid",
        arbitrary_types_allowed=True,
    )

    key: str = Field(min_length=1)
    lease_id: str | None = Field(default=None)
    value: Any = Field(default=None)
    issued_at: float
    duration: float = Field(ge=0.0)
    renewable: bool = Field(default=False)
    renewal_window: float | None = Field(default=None, ge=0.0)
    renew_increment: int | None = Field(default=None, ge=1)
    callbacks: ModelLeaseCallbacks = Field(default_factory=ModelLeaseCallbacks)
    state: EnumLeaseState = Field(default=EnumLeaseState.ACTIVE)
    rotate_fn: Callable[[], Any] | None = Field(default=None, repr=False)
    renew_fn: Callable[[Any], Any] | None = Field(default=None, repr=False)

    @computed_field  # type: ignore[prop-decorator]
    @property
    def expires_at(self) -> float:
        """Epoch seconds at which the lease expires."""
        return self.issued_at + self.duration

    @property
    def leased(self) -> bool:
        """Return True when the record refers to a real server lease."""
        return bool(self.lease_id)

    @property
    def rotatable(self) -> bool:
        """Return True when the record can be rotated."""
        return self.rotate_fn is not None

    def time_remaining(self, now: float) -> float:
        """Return seconds until expiry (negative once expired)."""
        return self.expires_at - now

    def expires_within(self, seconds: float, now: float) -> bool:
        """Return True if the lease expires within ``seconds`` of ``now``."""
        return self.expires_at - now <= seconds

    def is_expired(self, now: float) -> bool:
        """Return True if the lease has expired."""
        return now >= self.expires_at

    def with_state(self, state: EnumLeaseState) -> ModelLeaseRecord:
        """Return a copy of this record in the given state."""
        return self.model_copy(update={"state": state})

    def renewed(
        self,
        *,
        issued_at: float,
        duration: float,
        renewable: bool,
        lease_id: str | None = None,
    ) -> ModelLeaseRecord:
        """Return the replacement record for a successful renewal.

        Expiry is recomputed from the fresh server response; the previous
        duration is never extrapolated.
        """
        return self.model_copy(
            update={
                "issued_at": issued_at,
                "duration": float(duration),
                "renewable": renewable,
                "lease_id": lease_id or self.lease_id,
                "state": EnumLeaseState.ACTIVE,
            }
        )

    def inherit(self, previous: ModelLeaseRecord) -> ModelLeaseRecord:
        """Carry maintenance settings from ``previous`` onto a rotated record.

        Fields the fresh record already sets explicitly are kept.
        """
        update: dict[str, Any] = {"state": EnumLeaseState.ACTIVE}
        if self.rotate_fn is None:
            update["rotate_fn"] = previous.rotate_fn
        if self.renew_fn is None:
            update["renew_fn"] = previous.renew_fn
        if self.renewal_window is None:
            update["renewal_window"] = previous.renewal_window
        if self.renew_increment is None:
            update["renew_increment"] = previous.renew_increment
        if self.callbacks == ModelLeaseCallbacks():
            update["callbacks"] = previous.callbacks
        return self.model_copy(update=update)


__all__ = ["ModelLeaseRecord"]
