# SPDX-License-Identifier: MIT
# Copyright (c) 2025 OmniNode Team
"""Vault Client Errors Module.

Exports:
    ModelVaultErrorContext: Configuration model for bundled error context
    VaultClientError: Base client error class
    ProtocolConfigurationError: Configuration validation errors
    NetworkError: Transport-level failures (retryable)
    MalformedResponseError: Undecodable or incomplete responses (terminal)
    VaultResponseError: Base class for non-2xx responses
    ServerError: 5xx responses (retryable)
    RateLimitedError: 429 responses (retryable)
    ClientError: Other 4xx responses (terminal)
    NotFoundError: 404 responses (terminal, may downgrade to a default)
    PermissionDeniedError: 401/403 responses (terminal)
    LeaseNotRenewableError: Internal signal to fall back to rotation
    RotationFailedError: Rotation failure, surfaced only via on_error

Correlation ID Assignment:
    Every call gets a correlation ID from its ModelCallDescriptor. Errors
    raised while serving the call carry it in their context so log lines and
    exceptions can be matched up.

Error Sanitization Guidelines:
    NEVER include in error messages or context:
        - Vault tokens, wrapping tokens, or secret values
        - Credential pairs returned by dynamic engines

    SAFE to include:
        - Request paths and lease keys
        - Operation names and HTTP status codes
        - Error strings returned by Vault
        - Correlation IDs
"""

from omnivault.errors.model_vault_error_context import ModelVaultErrorContext
from omnivault.errors.vault_errors import (
    ClientError,
    LeaseNotRenewableError,
    MalformedResponseError,
    NetworkError,
    NotFoundError,
    PermissionDeniedError,
    ProtocolConfigurationError,
    RateLimitedError,
    RotationFailedError,
    ServerError,
    VaultClientError,
    VaultResponseError,
)

__all__ = [
    "ClientError",
    "LeaseNotRenewableError",
    "MalformedResponseError",
    "ModelVaultErrorContext",
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
