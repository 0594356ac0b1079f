# SPDX-License-Identifier: MIT
# Copyright (c) 2025 OmniNode Team
"""Vault HTTP transport built on hvac's raw adapter.

The transport performs exactly one HTTP round trip per ``send``. It never
retries; retrying is the execution strategy's job. hvac is used with
``RawAdapter`` so non-2xx responses come back as data instead of hvac
exceptions, and the status classification stays in one place.

Security:
    - The token lives only inside the hvac adapter and the SecretStr config
    - Request bodies and response bodies are never logged
"""

from __future__ import annotations

import logging
from typing import Any

import hvac
import requests

from omnivault.config import ModelVaultClientConfig
from omnivault.errors import (
    MalformedResponseError,
    ModelVaultErrorContext,
    NetworkError,
)
from omnivault.models import ModelCallDescriptor, ModelTransportResponse
from omnivault.transport.util_response_errors import error_for_response
from omnivault.utils import trim_path

logger = logging.getLogger(__name__)


class VaultTransport:
    """Single-request invoker for the Vault HTTP API.

    Paths are relative to ``/v1`` (for example ``database/creds/readonly``).

    Example:
        >>> transport = VaultTransport(config)
        >>> transport.call("GET", "sys/health")
    """

    def __init__(
        self,
        config: ModelVaultClientConfig,
        client: hvac.Client | None = None,
    ) -> None:
        """Initialize the transport.

        Args:
            config: Client configuration (url, token, namespace, TLS, timeout)
            client: Pre-built hvac client, mainly for tests
        """
        self._config = config
        self._client = client if client is not None else self._create_hvac_client(config)

    @staticmethod
    def _create_hvac_client(config: ModelVaultClientConfig) -> hvac.Client:
        return hvac.Client(
            url=config.url,
            token=config.token.get_secret_value() if config.token else None,
            namespace=config.namespace,
            verify=config.verify_ssl,
            timeout=config.timeout_seconds,
            adapter=hvac.adapters.RawAdapter,
        )

    @property
    def hvac_client(self) -> hvac.Client:
        """Return the underlying hvac client."""
        return self._client

    @property
    def token(self) -> str | None:
        """Return the current client token."""
        return self._client.token

    @token.setter
    def token(self, value: str | None) -> None:
        self._client.token = value

    def send(
        self,
        method: str,
        path: str,
        options: dict[str, Any] | None = None,
        descriptor: ModelCallDescriptor | None = None,
    ) -> ModelTransportResponse:
        """Perform one HTTP request and return the decoded response.

        Args:
            method: HTTP method (GET, PUT, POST, DELETE or LIST)
            path: API path relative to ``/v1``
            options: Request options: ``json`` body, query ``params``, ``headers``
            descriptor: Call metadata used for logging and error context

        Returns:
            The response, whatever its status

        Raises:
            NetworkError: If no HTTP response was received.
            MalformedResponseError: If the body is not a JSON object.
        """
        options = options or {}
        context = (
            descriptor.error_context()
            if descriptor is not None
            else ModelVaultErrorContext(operation=method.lower(), target_name=path)
        )
        log_extra = descriptor.log_extra() if descriptor is not None else {"path": path}

        try:
            raw = self._client.adapter.request(
                method.upper(),
                f"/v1/{trim_path(path)}",
                raise_exception=False,
                json=options.get("json"),
                params=options.get("params"),
                headers=options.get("headers"),
            )
        except requests.exceptions.RequestException as e:
            logger.debug(
                "Vault request failed before a response was received",
                extra={**log_extra, "error_type": type(e).__name__},
            )
            raise NetworkError(
                f"Vault request failed: {type(e).__name__}",
                context=context,
            ) from e

        response = ModelTransportResponse(
            status=raw.status_code,
            body=self._decode_body(raw, context),
            headers=dict(raw.headers),
        )
        logger.debug(
            "Vault response received",
            extra={**log_extra, "status": response.status},
        )
        return response

    @staticmethod
    def _decode_body(
        raw: requests.Response, context: ModelVaultErrorContext
    ) -> dict[str, Any]:
        if raw.status_code == 204 or not raw.content:
            return {}
        try:
            body = raw.json()
        except ValueError as e:
            if raw.status_code >= 400:
                # Error pages from proxies and load balancers are often HTML.
                return {"errors": [raw.text[:200]]}
            raise MalformedResponseError(
                "Vault response body is not valid JSON",
                context=context,
                status=raw.status_code,
            ) from e
        if not isinstance(body, dict):
            raise MalformedResponseError(
                "Vault response body is not a JSON object",
                context=context,
                status=raw.status_code,
            )
        return body

    def call(
        self,
        method: str,
        path: str,
        *,
        body: dict[str, Any] | None = None,
        params: dict[str, Any] | None = None,
        descriptor: ModelCallDescriptor | None = None,
    ) -> dict[str, Any]:
        """Perform one request and return the body of a 2xx response.

        Raises:
            NetworkError: If no HTTP response was received.
            MalformedResponseError: If the body cannot be decoded.
            VaultResponseError: For non-2xx responses (classified by status).
        """
        options: dict[str, Any] = {}
        if body is not None:
            options["json"] = body
        if params is not None:
            options["params"] = params
        response = self.send(method, path, options, descriptor=descriptor)
        if response.ok:
            return response.body

        context = (
            descriptor.error_context()
            if descriptor is not None
            else ModelVaultErrorContext(operation=method.lower(), target_name=path)
        )
        raise error_for_response(response, context)

    def close(self) -> None:
        """Close the underlying HTTP session."""
        self._client.adapter.close()


__all__ = ["VaultTransport"]
