# SPDX-License-Identifier: MIT
# Copyright (c) 2025 OmniNode Team
"""Transit secrets engine: encryption as a service."""

from __future__ import annotations

import base64
from typing import Any

from omnivault.client import VaultClient
from omnivault.errors import MalformedResponseError, ModelVaultErrorContext
from omnivault.utils import join_path


def _b64(value: str | bytes) -> str:
    if isinstance(value, str):
        value = value.encode("utf-8")
    return base64.b64encode(value).decode("ascii")


class TransitSecretsEngine:
    """Request shaper for a transit mount.

    Plaintext and context are base64-encoded on the way in; decrypted
    plaintext is decoded back to bytes.
    """

    def __init__(self, client: VaultClient, mount: str = "transit") -> None:
        self._client = client
        self.mount = mount

    def _field(self, response: dict[str, Any], name: str, operation: str, path: str) -> Any:
        data = response.get("data")
        if not isinstance(data, dict) or name not in data:
            raise MalformedResponseError(
                f"Transit response has no {name}",
                context=ModelVaultErrorContext(operation=operation, target_name=path),
            )
        return data[name]

    def encrypt(
        self,
        key: str,
        plaintext: str | bytes,
        *,
        context: str | bytes | None = None,
    ) -> Any:
        """Encrypt ``plaintext`` with the named key and return the ciphertext."""
        path = join_path(self.mount, "encrypt", key)
        body = {"plaintext": _b64(plaintext)}
        if context is not None:
            body["context"] = _b64(context)
        return self._client.call_api(
            "transit.encrypt",
            "POST",
            path,
            body=body,
            transform=lambda r: self._field(r, "ciphertext", "transit.encrypt", path),
        )

    def decrypt(
        self,
        key: str,
        ciphertext: str,
        *,
        context: str | bytes | None = None,
    ) -> Any:
        """Decrypt ``ciphertext`` with the named key and return plaintext bytes."""
        path = join_path(self.mount, "decrypt", key)
        body = {"ciphertext": ciphertext}
        if context is not None:
            body["context"] = _b64(context)

        def transform(response: dict[str, Any]) -> bytes:
            encoded = self._field(response, "plaintext", "transit.decrypt", path)
            return base64.b64decode(encoded)

        return self._client.call_api(
            "transit.decrypt", "POST", path, body=body, transform=transform
        )

    def read_key(self, key: str) -> Any:
        """Return the named key's configuration (never key material)."""
        return self._client.call_api(
            "transit.read_key",
            "GET",
            join_path(self.mount, "keys", key),
            transform=lambda r: r.get("data", {}),
        )


__all__ = ["TransitSecretsEngine"]
