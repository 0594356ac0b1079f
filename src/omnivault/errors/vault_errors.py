# SPDX-License-Identifier: MIT
# Copyright (c) 2025 OmniNode Team
"""Vault Client Error Classes.

Error Hierarchy:
    VaultClientError (base client error)
    ├── ProtocolConfigurationError
    ├── NetworkError
    ├── MalformedResponseError
    ├── VaultResponseError
    │   ├── ServerError
    │   ├── RateLimitedError
    │   └── ClientError
    │       ├── NotFoundError
    │       └── PermissionDeniedError
    ├── LeaseNotRenewableError
    └── RotationFailedError

All errors:
    - Support proper error chaining with `raise ... from e`
    - Accept ModelVaultErrorContext for bundled context parameters
    - Expose the correlation ID of the call that failed

Whether an error is retried is not decided here; see
ModelRetryConfig.is_retryable for the classification.
"""

from __future__ import annotations

from uuid import UUID

from omnivault.errors.model_vault_error_context import ModelVaultErrorContext


class VaultClientError(Exception):
    """Base error class for the Vault client runtime.

    Structured Fields (via ModelVaultErrorContext):
        operation: Operation being performed
        target_name: Request path or lease key
        correlation_id: Call correlation ID
        namespace: Vault namespace

    Example:
        >>> context = ModelVaultErrorContext(operation="kv.read_secret")
        >>> raise VaultClientError("Operation failed", context=context)
    """

    def __init__(
        self,
        message: str,
        context: ModelVaultErrorContext | None = None,
        **extra_context: object,
    ) -> None:
        """Initialize VaultClientError with structured fields.

        Args:
            message: Human-readable error message
            context: Bundled error context (operation, target, correlation ID)
            **extra_context: Additional context information
        """
        super().__init__(message)
        self.message = message
        self.context = context
        self.extra_context: dict[str, object] = dict(extra_context)

    @property
    def correlation_id(self) -> UUID | None:
        """Return the correlation ID of the failed call, if known."""
        return self.context.correlation_id if self.context else None

    @property
    def operation(self) -> str | None:
        """Return the operation name, if known."""
        return self.context.operation if self.context else None

    def __str__(self) -> str:
        return self.message


class ProtocolConfigurationError(VaultClientError):
    """Raised when client configuration validation fails."""


class NetworkError(VaultClientError):
    """Raised when the transport fails before an HTTP status is received.

    Covers connection refusals, DNS failures, TLS errors and socket timeouts.
    Always retryable up to the call deadline.
    """


class MalformedResponseError(VaultClientError):
    """Raised when a response body cannot be decoded or lacks required fields."""


class VaultResponseError(VaultClientError):
    """Raised when Vault answers with a non-2xx status.

    Attributes:
        status: HTTP status code of the response
        errors: Error messages reported by Vault in the response body
    """

    def __init__(
        self,
        message: str,
        context: ModelVaultErrorContext | None = None,
        status: int = 0,
        errors: list[str] | None = None,
        **extra_context: object,
    ) -> None:
        """Initialize VaultResponseError.

        Args:
            message: Human-readable error message
            context: Bundled error context
            status: HTTP status code
            errors: Error messages from the response body
            **extra_context: Additional context information
        """
        super().__init__(message, context=context, **extra_context)
        self.status = status
        self.errors: list[str] = list(errors or [])


class ServerError(VaultResponseError):
    """Raised for 5xx responses (sealed, standby, internal errors)."""


class RateLimitedError(VaultResponseError):
    """Raised for 429 responses.

    Attributes:
        retry_after: Seconds the server asked us to wait, if it said so
    """

    def __init__(
        self,
        message: str,
        context: ModelVaultErrorContext | None = None,
        status: int = 429,
        errors: list[str] | None = None,
        retry_after: float | None = None,
        **extra_context: object,
    ) -> None:
        super().__init__(
            message, context=context, status=status, errors=errors, **extra_context
        )
        self.retry_after = retry_after


class ClientError(VaultResponseError):
    """Raised for 4xx responses other than rate limiting. Terminal."""


class NotFoundError(ClientError):
    """Raised for 404 responses.

    Call sites may downgrade this to a caller-supplied default value.
    """


class PermissionDeniedError(ClientError):
    """Raised for 401 and 403 responses."""


class LeaseNotRenewableError(VaultClientError):
    """Raised when Vault refuses to renew a lease.

    Internal signal that sends the maintenance scheduler down the rotation
    path; never surfaced to foreground callers.
    """


class RotationFailedError(VaultClientError):
    """Raised when rotating a lease fails.

    Terminal for that lease. Delivered only through the lease's on_error
    callback; the underlying failure is available as ``__cause__``.
    """


__all__ = [
    "ClientError",
    "LeaseNotRenewableError",
    "MalformedResponseError",
    "NetworkError",
    "NotFoundError",
    "PermissionDeniedError",
    "ProtocolConfigurationError",
    "RateLimitedError",
    "RotationFailedError",
    "ServerError",
    "VaultClientError",
    "VaultResponseError",
]
