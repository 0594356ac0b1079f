# SPDX-License-Identifier: MIT
# Copyright (c) 2025 OmniNode Team
"""Lease management endpoints under ``sys/leases``."""

from __future__ import annotations

import logging
from typing import Any

from omnivault.client import MISSING, VaultClient
from omnivault.utils import join_path

logger = logging.getLogger(__name__)


class SysLeases:
    """Request shaper for ``sys/leases``.

    Renewals and revocations made here keep the lease cache in step:
    a renewed lease's cached record gets the new expiry, a revoked lease's
    record is dropped.
    """

    def __init__(self, client: VaultClient) -> None:
        self._client = client

    def read_lease(self, lease_id: str) -> Any:
        """Return Vault's view of a lease (issue time, expiry, ttl, renewable)."""
        return self._client.call_api(
            "sys.leases.read",
            "PUT",
            "sys/leases/lookup",
            body={"lease_id": lease_id},
            transform=lambda r: r.get("data", {}),
        )

    def list_leases(self, prefix: str, *, not_found: Any = MISSING) -> Any:
        """List lease ids under ``prefix`` (requires sudo)."""
        return self._client.call_api(
            "sys.leases.list",
            "LIST",
            join_path("sys/leases/lookup", prefix),
            transform=lambda r: list(r.get("data", {}).get("keys", [])),
            not_found=not_found,
        )

    def renew_lease(self, lease_id: str, increment: int | None = None) -> Any:
        """Renew a lease and return Vault's renewal response."""
        body: dict[str, Any] = {"lease_id": lease_id}
        if increment is not None:
            body["increment"] = increment

        def transform(response: dict[str, Any]) -> dict[str, Any]:
            record = self._client.cache.find(lease_id)
            duration = response.get("lease_duration")
            if record is not None and isinstance(duration, int | float):
                renewed = record.renewed(
                    issued_at=self._client.now(),
                    duration=duration,
                    renewable=bool(response.get("renewable", record.renewable)),
                    lease_id=response.get("lease_id"),
                )
                if self._client.cache.compare_and_set(record.key, record, renewed):
                    logger.debug(
                        "Updated cached lease after renewal",
                        extra={"lease_key": record.key},
                    )
            return response

        return self._client.call_api(
            "sys.leases.renew",
            "PUT",
            "sys/leases/renew",
            body=body,
            transform=transform,
        )

    def revoke_lease(self, lease_id: str) -> Any:
        """Revoke a lease immediately and drop it from the cache."""
        return self._client.revoke_lease(lease_id)


__all__ = ["SysLeases"]
