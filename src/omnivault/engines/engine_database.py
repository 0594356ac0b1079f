# SPDX-License-Identifier: MIT
# Copyright (c) 2025 OmniNode Team
"""Database secrets engine: dynamic credentials with lease maintenance."""

from __future__ import annotations

import logging
from collections.abc import Mapping
from typing import Any

from omnivault.client import VaultClient
from omnivault.engines.util_lease import lease_record_from_response
from omnivault.errors import MalformedResponseError, ModelVaultErrorContext
from omnivault.models import ModelLeaseCallbacks, ModelLeaseRecord
from omnivault.utils import join_path, lease_key

logger = logging.getLogger(__name__)


class DatabaseSecretsEngine:
    """Request shaper for a database secrets engine mount.

    Generated credentials are cached under ``database:<mount>:<role>`` with
    their lease. The maintenance scheduler renews the lease while Vault
    allows it; with ``rotate=True`` it issues fresh credentials once the
    lease can no longer be renewed and fires ``on_rotate``.

    Example:
        >>> db = DatabaseSecretsEngine(client)
        >>> creds = db.generate_credentials(
        ...     "readonly",
        ...     rotate=True,
        ...     callbacks={"on_rotate": lambda record: pool.reconnect(record.value)},
        ... )
        >>> creds["username"]
        'v-token-readonly-8Yb2'
    """

    def __init__(self, client: VaultClient, mount: str = "database") -> None:
        self._client = client
        self.mount = mount

    def _cache_key(self, role: str) -> str:
        return lease_key("database", self.mount, role)

    def _credentials_from(self, response: Mapping[str, Any], role: str) -> dict[str, Any]:
        data = response.get("data")
        if not isinstance(data, dict):
            raise MalformedResponseError(
                "Database credentials response has no data",
                context=ModelVaultErrorContext(
                    operation="database.generate_credentials",
                    target_name=join_path(self.mount, "creds", role),
                ),
            )
        return data

    def _record_from(
        self,
        response: Mapping[str, Any],
        role: str,
        *,
        renew: bool = True,
        renew_within: float | None = None,
        renew_increment: int | None = None,
        rotate: bool = False,
        callbacks: ModelLeaseCallbacks | Mapping[str, Any] | None = None,
    ) -> ModelLeaseRecord | None:
        return lease_record_from_response(
            self._cache_key(role),
            response,
            value=self._credentials_from(response, role),
            issued_at=self._client.now(),
            renewable=None if renew else False,
            renewal_window=renew_within,
            renew_increment=renew_increment,
            callbacks=callbacks,
            rotate_fn=(lambda: self._issue(role, renew=renew)) if rotate else None,
        )

    def _issue(self, role: str, renew: bool = True) -> ModelLeaseRecord:
        """Generate credentials synchronously without caching them.

        The rotated record inherits maintenance settings from the record it
        replaces.

        Raises:
            MalformedResponseError: If the response carries no lease.
        """
        response = self._client.request(
            "GET",
            join_path(self.mount, "creds", role),
            operation="database.generate_credentials",
        )
        record = self._record_from(response, role, renew=renew)
        if record is None:
            raise MalformedResponseError(
                "Database credentials response has no lease",
                context=ModelVaultErrorContext(
                    operation="database.generate_credentials",
                    target_name=join_path(self.mount, "creds", role),
                ),
            )
        return record

    def generate_credentials(
        self,
        role: str,
        *,
        refresh: bool = False,
        renew: bool = True,
        renew_within: float | None = None,
        renew_increment: int | None = None,
        rotate: bool = False,
        callbacks: ModelLeaseCallbacks | Mapping[str, Any] | None = None,
    ) -> Any:
        """Generate (or return cached) credentials for ``role``.

        Args:
            role: Database role name
            refresh: Always generate new credentials
            renew: Renew the lease in the background while Vault allows it
            renew_within: Seconds before expiry to start maintenance
            renew_increment: Requested lease extension in seconds
            rotate: Issue new credentials when the lease cannot be renewed
            callbacks: Lifecycle callbacks (on_renew, on_rotate, on_error)

        Returns:
            The credentials mapping in the client's strategy shape
        """
        key = self._cache_key(role)
        if not refresh:
            cached = self._client.cache.live_value(key, self._client.now())
            if cached is not None:
                return self._client.cached_response(
                    cached, operation="database.generate_credentials"
                )

        def transform(response: dict[str, Any]) -> dict[str, Any]:
            record = self._record_from(
                response,
                role,
                renew=renew,
                renew_within=renew_within,
                renew_increment=renew_increment,
                rotate=rotate,
                callbacks=callbacks,
            )
            if record is not None:
                self._client.cache.put(record)
                logger.info(
                    "Generated database credentials",
                    extra={
                        "lease_key": key,
                        "ttl_seconds": record.duration,
                        "renewable": record.renewable,
                    },
                )
            return self._credentials_from(response, role)

        return self._client.call_api(
            "database.generate_credentials",
            "GET",
            join_path(self.mount, "creds", role),
            transform=transform,
        )


__all__ = ["DatabaseSecretsEngine"]
