# SPDX-License-Identifier: MIT
# Copyright (c) 2025 OmniNode Team
"""Token authentication.

A renewable client token is cached as lease ``auth:token`` with a custom
renewer calling ``auth/token/renew-self``, so the maintenance scheduler keeps
the client's own token alive alongside its secrets.

Security:
    The token is never logged and never stored in the lease record; the
    record's value holds only the non-secret lookup metadata.
"""

from __future__ import annotations

import logging
from typing import Any

from pydantic import SecretStr

from omnivault.client import VaultClient
from omnivault.errors import MalformedResponseError
from omnivault.models import ModelLeaseRecord

logger = logging.getLogger(__name__)

TOKEN_LEASE_KEY = "auth:token"

# Lookup fields that are safe to keep in memory outside the adapter.
_TOKEN_METADATA_FIELDS: tuple[str, ...] = (
    "accessor",
    "creation_ttl",
    "display_name",
    "entity_id",
    "expire_time",
    "policies",
    "renewable",
    "ttl",
    "type",
)


class TokenAuth:
    """Token auth method bound to a client."""

    def __init__(self, client: VaultClient) -> None:
        self._client = client

    def login(self, token: str | SecretStr) -> Any:
        """Use ``token`` for all further requests and look it up.

        Renewable tokens with a TTL are registered for background renewal.

        Returns:
            The token's lookup metadata in the client's strategy shape
        """
        self._client.token = token
        self._client.invalidate(TOKEN_LEASE_KEY)

        def transform(response: dict[str, Any]) -> dict[str, Any]:
            metadata = self._metadata_from(response)
            ttl = metadata.get("ttl") or 0
            if metadata.get("renewable") and ttl > 0:
                self._client.cache.put(
                    ModelLeaseRecord(
                        key=TOKEN_LEASE_KEY,
                        value=metadata,
                        issued_at=self._client.now(),
                        duration=float(ttl),
                        renewable=True,
                        renew_fn=self._renew_token_record,
                    )
                )
                logger.info(
                    "Client token registered for renewal",
                    extra={"ttl_seconds": ttl, "accessor": metadata.get("accessor")},
                )
            return metadata

        return self._client.call_api(
            "auth.token.login",
            "GET",
            "auth/token/lookup-self",
            transform=transform,
        )

    def lookup_self(self) -> Any:
        """Return the current token's lookup metadata."""
        return self._client.call_api(
            "auth.token.lookup_self",
            "GET",
            "auth/token/lookup-self",
            transform=self._metadata_from,
        )

    def renew_self(self, increment: int | None = None) -> Any:
        """Renew the current token and return Vault's ``auth`` block."""
        return self._client.call_api(
            "auth.token.renew_self",
            "POST",
            "auth/token/renew-self",
            body={"increment": f"{increment}s"} if increment else {},
            transform=self._auth_from,
        )

    @staticmethod
    def _metadata_from(response: dict[str, Any]) -> dict[str, Any]:
        data = response.get("data")
        if not isinstance(data, dict):
            raise MalformedResponseError("Token lookup response has no data")
        return {k: data[k] for k in _TOKEN_METADATA_FIELDS if k in data}

    @staticmethod
    def _auth_from(response: dict[str, Any]) -> dict[str, Any]:
        auth = response.get("auth")
        if not isinstance(auth, dict):
            raise MalformedResponseError("Token renewal response has no auth block")
        return {k: v for k, v in auth.items() if k != "client_token"}

    def _renew_token_record(self, record: ModelLeaseRecord) -> ModelLeaseRecord:
        """Renew the client token; used as the ``auth:token`` record's renewer."""
        body = {"increment": f"{record.renew_increment}s"} if record.renew_increment else {}
        response = self._client.request(
            "POST",
            "auth/token/renew-self",
            body=body,
            operation="auth.token.renew_self",
        )
        auth = self._auth_from(response)
        duration = auth.get("lease_duration")
        if not isinstance(duration, int | float):
            raise MalformedResponseError("Token renewal response has no lease_duration")
        return record.renewed(
            issued_at=self._client.now(),
            duration=duration,
            renewable=bool(auth.get("renewable")),
        )


__all__ = ["TOKEN_LEASE_KEY", "TokenAuth"]
