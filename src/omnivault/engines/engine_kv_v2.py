# SPDX-License-Identifier: MIT
# Copyright (c) 2025 OmniNode Team
"""KV version 2 secrets engine.

KV secrets carry no server lease. A read with ``ttl`` caches the secret under
a synthesized pseudo-lease so repeated reads are served from memory until the
TTL runs out; with ``rotate=True`` the maintenance scheduler re-reads the
secret before the pseudo-lease expires and fires ``on_rotate``.
"""

from __future__ import annotations

from collections.abc import Mapping
from typing import Any

from omnivault.client import MISSING, VaultClient
from omnivault.engines.util_lease import synthesize_lease
from omnivault.errors import MalformedResponseError, ModelVaultErrorContext
from omnivault.models import ModelLeaseCallbacks, ModelLeaseRecord
from omnivault.utils import join_path, lease_key


class KVv2SecretsEngine:
    """Request shaper for a KV v2 mount.

    Example:
        >>> kv = KVv2SecretsEngine(client, mount="secret")
        >>> kv.read_secret("app/config", ttl=300)
        {'db_host': 'postgres.internal'}
    """

    def __init__(self, client: VaultClient, mount: str = "secret") -> None:
        self._client = client
        self.mount = mount

    def _cache_key(self, path: str) -> str:
        return lease_key("kv-v2", self.mount, path)

    def _secret_from(self, response: Mapping[str, Any], path: str) -> dict[str, Any]:
        data = response.get("data")
        secret = data.get("data") if isinstance(data, dict) else None
        if not isinstance(secret, dict):
            raise MalformedResponseError(
                "KV v2 read response has no data",
                context=ModelVaultErrorContext(
                    operation="kv.read_secret",
                    target_name=join_path(self.mount, "data", path),
                ),
            )
        return secret

    def _issue(self, path: str, ttl: float) -> ModelLeaseRecord:
        """Read the secret synchronously and wrap it in a fresh pseudo-lease."""
        response = self._client.request(
            "GET",
            join_path(self.mount, "data", path),
            operation="kv.read_secret",
        )
        return synthesize_lease(
            self._cache_key(path),
            self._secret_from(response, path),
            ttl,
            issued_at=self._client.now(),
        )

    def read_secret(
        self,
        path: str,
        *,
        version: int | None = None,
        ttl: float | None = None,
        refresh: bool = False,
        not_found: Any = MISSING,
        rotate: bool = False,
        renewal_window: float | None = None,
        callbacks: ModelLeaseCallbacks | Mapping[str, Any] | None = None,
    ) -> Any:
        """Read the secret data at ``path``.

        Args:
            path: Secret path within the mount
            version: Specific version to read (bypasses the cache)
            ttl: Cache the result under a pseudo-lease of this many seconds
            refresh: Always read from Vault, replacing any cached value
            not_found: Value returned instead of raising NotFoundError
            rotate: Re-read the secret in the background before the TTL ends
            renewal_window: Seconds before the TTL ends to re-read
            callbacks: Lifecycle callbacks for the pseudo-lease

        Returns:
            The secret's key/value data in the client's strategy shape
        """
        key = self._cache_key(path)
        if version is None and not refresh:
            cached = self._client.cache.live_value(key, self._client.now())
            if cached is not None:
                return self._client.cached_response(cached, operation="kv.read_secret")

        def transform(response: dict[str, Any]) -> dict[str, Any]:
            secret = self._secret_from(response, path)
            if ttl and version is None:
                self._client.cache.put(
                    synthesize_lease(
                        key,
                        secret,
                        ttl,
                        issued_at=self._client.now(),
                        renewal_window=renewal_window,
                        callbacks=callbacks,
                        rotate_fn=(lambda: self._issue(path, ttl)) if rotate else None,
                    )
                )
            return secret

        return self._client.call_api(
            "kv.read_secret",
            "GET",
            join_path(self.mount, "data", path),
            params={"version": version} if version is not None else None,
            transform=transform,
            not_found=not_found,
        )

    def write_secret(
        self,
        path: str,
        data: Mapping[str, Any],
        *,
        cas: int | None = None,
    ) -> Any:
        """Write a new version of the secret at ``path``.

        Returns:
            The version metadata Vault reports for the write
        """
        self._client.invalidate(self._cache_key(path))
        body: dict[str, Any] = {"data": dict(data)}
        if cas is not None:
            body["options"] = {"cas": cas}
        return self._client.call_api(
            "kv.write_secret",
            "POST",
            join_path(self.mount, "data", path),
            body=body,
            transform=lambda response: response.get("data", {}),
        )

    def delete_secret(self, path: str) -> Any:
        """Soft-delete the latest version of the secret at ``path``."""
        self._client.invalidate(self._cache_key(path))
        return self._client.call_api(
            "kv.delete_secret",
            "DELETE",
            join_path(self.mount, "data", path),
            transform=lambda _: None,
        )

    def list_secrets(self, path: str = "", *, not_found: Any = MISSING) -> Any:
        """List the keys under ``path``. Folder keys end with ``/``."""
        return self._client.call_api(
            "kv.list_secrets",
            "LIST",
            join_path(self.mount, "metadata", path),
            transform=lambda response: list(response.get("data", {}).get("keys", [])),
            not_found=not_found,
        )


__all__ = ["KVv2SecretsEngine"]
