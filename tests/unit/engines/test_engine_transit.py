# SPDX-License-Identifier: MIT
# Copyright (c) 2025 OmniNode Team
"""Unit tests for TransitSecretsEngine."""

from __future__ import annotations

import base64
from unittest.mock import MagicMock

import pytest

from omnivault.client import VaultClient
from omnivault.engines import TransitSecretsEngine
from omnivault.errors import MalformedResponseError


@pytest.fixture
def transit(vault_client: VaultClient) -> TransitSecretsEngine:
    """Provide a transit engine on the default mount."""
    return TransitSecretsEngine(vault_client)


class TestTransit:
    """Test encryption helpers."""

    def test_encrypt_encodes_plaintext_and_context(
        self, transit: TransitSecretsEngine, mock_transport: MagicMock
    ) -> None:
        """Test plaintext and context are base64-encoded."""
        mock_transport.call.return_value = {"data": {"ciphertext": "vault:v1:abc"}}

        assert transit.encrypt("orders", "4111-1111", context=b"tenant-1") == "vault:v1:abc"

        args, kwargs = mock_transport.call.call_args
        assert args == ("POST", "transit/encrypt/orders")
        assert kwargs["body"] == {
            "plaintext": base64.b64encode(b"4111-1111").decode("ascii"),
            "context": base64.b64encode(b"tenant-1").decode("ascii"),
        }

    def test_decrypt_returns_bytes(
        self, transit: TransitSecretsEngine, mock_transport: MagicMock
    ) -> None:
        """Test decrypted plaintext is decoded to bytes."""
        mock_transport.call.return_value = {
            "data": {"plaintext": base64.b64encode(b"4111-1111").decode("ascii")}
        }

        assert transit.decrypt("orders", "vault:v1:abc") == b"4111-1111"
        assert mock_transport.call.call_args.kwargs["body"] == {"ciphertext": "vault:v1:abc"}

    def test_missing_field_is_malformed(
        self, transit: TransitSecretsEngine, mock_transport: MagicMock
    ) -> None:
        """Test a response without the expected field raises."""
        mock_transport.call.return_value = {"data": {}}

        with pytest.raises(MalformedResponseError):
            transit.encrypt("orders", "x")

    def test_read_key(self, vault_client: VaultClient, mock_transport: MagicMock) -> None:
        """Test key configuration is read from the keys path of the mount."""
        transit = TransitSecretsEngine(vault_client, mount="eaas")
        mock_transport.call.return_value = {"data": {"type": "aes256-gcm96"}}

        assert transit.read_key("orders") == {"type": "aes256-gcm96"}
        assert mock_transport.call.call_args.args == ("GET", "eaas/keys/orders")
