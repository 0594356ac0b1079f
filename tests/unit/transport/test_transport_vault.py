# SPDX-License-Identifier: MIT
# Copyright (c) 2025 OmniNode Team
"""Unit tests for VaultTransport.

Tests cover:
- hvac client construction from configuration
- One raw request per send, with no retries
- Body decoding for 2xx, 204, JSON errors and HTML error pages
- Transport failures mapped to NetworkError
"""

from __future__ import annotations

from collections.abc import Callable
from unittest.mock import MagicMock, patch

import hvac
import pytest
import requests

from omnivault.config import ModelVaultClientConfig
from omnivault.errors import (
    MalformedResponseError,
    NetworkError,
    NotFoundError,
    ServerError,
)
from omnivault.models import ModelCallDescriptor
from omnivault.transport import VaultTransport


@pytest.fixture
def hvac_client() -> MagicMock:
    """Provide a mocked hvac client with a raw adapter."""
    client = MagicMock()
    client.token = "s.test1234567890"
    return client


@pytest.fixture
def transport(
    client_config: ModelVaultClientConfig, hvac_client: MagicMock
) -> VaultTransport:
    """Provide a transport wired to the mocked hvac client."""
    return VaultTransport(client_config, client=hvac_client)


class TestTransportConstruction:
    """Test hvac client creation."""

    def test_creates_hvac_client_with_raw_adapter(
        self, client_config: ModelVaultClientConfig
    ) -> None:
        """Test configuration flows into hvac.Client."""
        with patch("omnivault.transport.transport_vault.hvac.Client") as mock_client:
            transport = VaultTransport(client_config)

        mock_client.assert_called_once_with(
            url="https://vault.example.com:8200",
            token="s.test1234567890",
            namespace="engineering",
            verify=True,
            timeout=30.0,
            adapter=hvac.adapters.RawAdapter,
        )
        assert transport.hvac_client is mock_client.return_value

    def test_token_property_delegates(
        self, transport: VaultTransport, hvac_client: MagicMock
    ) -> None:
        """Test the token is read from and written to the hvac client."""
        assert transport.token == "s.test1234567890"

        transport.token = "s.rotated"

        assert hvac_client.token == "s.rotated"


class TestTransportSend:
    """Test single request behavior."""

    def test_send_passes_options(
        self,
        transport: VaultTransport,
        hvac_client: MagicMock,
        raw_response: Callable[..., MagicMock],
    ) -> None:
        """Test method, path and options reach the raw adapter."""
        hvac_client.adapter.request.return_value = raw_response(
            200, {"data": {"ok": True}}, headers={"Content-Type": "application/json"}
        )

        response = transport.send(
            "put", "/sys/leases/renew/", {"json": {"lease_id": "abc"}}
        )

        hvac_client.adapter.request.assert_called_once_with(
            "PUT",
            "/v1/sys/leases/renew",
            raise_exception=False,
            json={"lease_id": "abc"},
            params=None,
            headers=None,
        )
        assert response.status == 200
        assert response.body == {"data": {"ok": True}}
        assert response.headers["Content-Type"] == "application/json"

    def test_send_returns_error_responses_as_data(
        self,
        transport: VaultTransport,
        hvac_client: MagicMock,
        raw_response: Callable[..., MagicMock],
    ) -> None:
        """Test non-2xx responses are returned, not raised."""
        hvac_client.adapter.request.return_value = raw_response(
            503, {"errors": ["Vault is sealed"]}
        )

        response = transport.send("GET", "sys/health")

        assert response.ok is False
        assert response.errors == ["Vault is sealed"]

    def test_no_content_decodes_to_empty_body(
        self,
        transport: VaultTransport,
        hvac_client: MagicMock,
        raw_response: Callable[..., MagicMock],
    ) -> None:
        """Test 204 responses have an empty body."""
        hvac_client.adapter.request.return_value = raw_response(204)

        assert transport.send("DELETE", "secret/data/app").body == {}

    def test_html_error_page_becomes_errors(
        self,
        transport: VaultTransport,
        hvac_client: MagicMock,
        raw_response: Callable[..., MagicMock],
    ) -> None:
        """Test an undecodable error body is kept as an error string."""
        hvac_client.adapter.request.return_value = raw_response(
            502, text="<html>Bad Gateway</html>"
        )

        response = transport.send("GET", "sys/health")

        assert response.errors == ["<html>Bad Gateway</html>"]

    def test_undecodable_success_body_raises(
        self,
        transport: VaultTransport,
        hvac_client: MagicMock,
        raw_response: Callable[..., MagicMock],
    ) -> None:
        """Test a 2xx body that is not JSON raises MalformedResponseError."""
        hvac_client.adapter.request.return_value = raw_response(200, text="not json")

        with pytest.raises(MalformedResponseError):
            transport.send("GET", "secret/data/app")

    def test_non_object_body_raises(
        self, transport: VaultTransport, hvac_client: MagicMock
    ) -> None:
        """Test a JSON body that is not an object raises MalformedResponseError."""
        raw = MagicMock(spec=requests.Response)
        raw.status_code = 200
        raw.content = b"[1, 2]"
        raw.headers = {}
        raw.json.return_value = [1, 2]
        hvac_client.adapter.request.return_value = raw

        with pytest.raises(MalformedResponseError):
            transport.send("GET", "secret/data/app")

    def test_request_exception_becomes_network_error(
        self, transport: VaultTransport, hvac_client: MagicMock
    ) -> None:
        """Test connection failures raise NetworkError chained to the cause."""
        cause = requests.exceptions.ConnectionError("connection refused")
        hvac_client.adapter.request.side_effect = cause
        descriptor = ModelCallDescriptor(operation="kv.read_secret", path="secret/data/app")

        with pytest.raises(NetworkError) as exc_info:
            transport.send("GET", "secret/data/app", descriptor=descriptor)

        assert exc_info.value.__cause__ is cause
        assert exc_info.value.correlation_id == descriptor.correlation_id
        assert hvac_client.adapter.request.call_count == 1


class TestTransportCall:
    """Test body extraction and error classification."""

    def test_call_returns_body(
        self,
        transport: VaultTransport,
        hvac_client: MagicMock,
        raw_response: Callable[..., MagicMock],
    ) -> None:
        """Test 2xx bodies are returned."""
        hvac_client.adapter.request.return_value = raw_response(
            200, {"data": {"keys": ["a", "b"]}}
        )

        body = transport.call("LIST", "secret/metadata/app", params={"list": "true"})

        assert body == {"data": {"keys": ["a", "b"]}}
        assert hvac_client.adapter.request.call_args.kwargs["params"] == {"list": "true"}

    def test_call_raises_classified_error(
        self,
        transport: VaultTransport,
        hvac_client: MagicMock,
        raw_response: Callable[..., MagicMock],
    ) -> None:
        """Test non-2xx responses raise the mapped error with call context."""
        hvac_client.adapter.request.return_value = raw_response(404, {"errors": []})
        descriptor = ModelCallDescriptor(operation="kv.read_secret", path="secret/data/x")

        with pytest.raises(NotFoundError) as exc_info:
            transport.call("GET", "secret/data/x", descriptor=descriptor)

        assert exc_info.value.status == 404
        assert exc_info.value.operation == "kv.read_secret"

    def test_call_never_retries(
        self,
        transport: VaultTransport,
        hvac_client: MagicMock,
        raw_response: Callable[..., MagicMock],
    ) -> None:
        """Test a retryable status is raised after one request."""
        hvac_client.adapter.request.return_value = raw_response(503, {"errors": ["sealed"]})

        with pytest.raises(ServerError):
            transport.call("GET", "sys/health")

        assert hvac_client.adapter.request.call_count == 1

    def test_close_closes_adapter(
        self, transport: VaultTransport, hvac_client: MagicMock
    ) -> None:
        """Test close releases the HTTP session."""
        transport.close()

        hvac_client.adapter.close.assert_called_once_with()


class TestTransportRequestUrl:
    """Test the URL hvac's raw adapter actually requests."""

    def test_paths_are_sent_under_v1(
        self,
        client_config: ModelVaultClientConfig,
        raw_response: Callable[..., MagicMock],
    ) -> None:
        """Test API paths are resolved against the /v1 prefix of the server."""
        transport = VaultTransport(client_config)

        with patch.object(
            requests.Session,
            "request",
            return_value=raw_response(200, {"data": {"id": "abc"}}),
        ) as mock_request:
            body = transport.call(
                "PUT", "/sys/leases/lookup/", body={"lease_id": "abc"}
            )

        assert body == {"data": {"id": "abc"}}
        mock_request.assert_called_once()
        kwargs = mock_request.call_args.kwargs
        assert kwargs["method"] == "PUT"
        assert kwargs["url"] == "https://vault.example.com:8200/v1/sys/leases/lookup"
        assert kwargs["json"] == {"lease_id": "abc"}
        assert kwargs["headers"]["X-Vault-Token"] == "s.test1234567890"
