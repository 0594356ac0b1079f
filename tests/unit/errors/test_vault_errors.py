# SPDX-License-Identifier: MIT
# Copyright (c) 2025 OmniNode Team
"""Unit tests for the error hierarchy and response classification."""

from __future__ import annotations

from uuid import uuid4

import pytest

from omnivault.errors import (
    ClientError,
    ModelVaultErrorContext,
    NotFoundError,
    PermissionDeniedError,
    RateLimitedError,
    ServerError,
    VaultClientError,
    VaultResponseError,
)
from omnivault.models import ModelTransportResponse
from omnivault.transport import error_for_response, parse_retry_after


class TestErrorHierarchy:
    """Test error structure."""

    def test_context_fields_exposed(self) -> None:
        """Test operation and correlation ID come from the context."""
        correlation_id = uuid4()
        error = VaultClientError(
            "failed",
            context=ModelVaultErrorContext(
                operation="kv.read_secret", correlation_id=correlation_id
            ),
            attempt=2,
        )

        assert error.operation == "kv.read_secret"
        assert error.correlation_id == correlation_id
        assert error.extra_context == {"attempt": 2}
        assert str(error) == "failed"

    def test_without_context(self) -> None:
        """Test errors without context report None fields."""
        error = VaultClientError("failed")

        assert error.operation is None
        assert error.correlation_id is None

    def test_not_found_is_client_error(self) -> None:
        """Test 404 errors are a kind of terminal client error."""
        assert issubclass(NotFoundError, ClientError)
        assert issubclass(PermissionDeniedError, ClientError)
        assert issubclass(ClientError, VaultResponseError)

    def test_chaining_preserves_cause(self) -> None:
        """Test errors chain with raise ... from."""
        original = ConnectionError("reset")

        with pytest.raises(ServerError) as exc_info:
            try:
                raise original
            except ConnectionError as e:
                raise ServerError("upstream", status=502) from e

        assert exc_info.value.__cause__ is original


class TestErrorForResponse:
    """Test status to error mapping."""

    @pytest.mark.parametrize(
        ("status", "expected"),
        [
            (404, NotFoundError),
            (401, PermissionDeniedError),
            (403, PermissionDeniedError),
            (429, RateLimitedError),
            (500, ServerError),
            (503, ServerError),
            (400, ClientError),
            (412, ClientError),
        ],
    )
    def test_status_mapping(self, status: int, expected: type) -> None:
        """Test each status maps to its error class."""
        error = error_for_response(ModelTransportResponse(status=status))

        assert type(error) is expected
        assert error.status == status

    def test_message_includes_vault_errors(self) -> None:
        """Test the message and errors list carry Vault's error strings."""
        context = ModelVaultErrorContext(operation="database.generate_credentials")
        response = ModelTransportResponse(
            status=400, body={"errors": ["unknown role: admin"]}
        )

        error = error_for_response(response, context)

        assert str(error) == "Vault returned HTTP 400: unknown role: admin"
        assert error.errors == ["unknown role: admin"]
        assert error.context is context

    def test_rate_limited_carries_retry_after(self) -> None:
        """Test the Retry-After header is read case-insensitively."""
        response = ModelTransportResponse(status=429, headers={"retry-after": "7"})

        error = error_for_response(response)

        assert isinstance(error, RateLimitedError)
        assert error.retry_after == 7.0


class TestParseRetryAfter:
    """Test Retry-After parsing."""

    @pytest.mark.parametrize(
        ("value", "expected"),
        [
            ("3", 3.0),
            (" 1.5 ", 1.5),
            (None, None),
            ("", None),
            ("-1", None),
            ("Wed, 21 Oct 2015 07:28:00 GMT", None),
        ],
    )
    def test_parse(self, value: str | None, expected: float | None) -> None:
        """Test numeric values parse and everything else is ignored."""
        assert parse_retry_after(value) == expected
