# SPDX-License-Identifier: MIT
# Copyright (c) 2025 OmniNode Team
"""Vault Client Configuration Model.

This module provides the Pydantic configuration model for the Vault client
runtime: server connection, execution strategy selection, lease maintenance
tuning and retry policy.

Security Note:
    The token field uses SecretStr to prevent accidental logging of
    sensitive credentials. Tokens should come from environment variables,
    never from configuration files.
"""

from __future__ import annotations

import os
from collections.abc import Mapping
from typing import Any

from pydantic import (
    BaseModel,
    ConfigDict,
    Field,
    SecretStr,
    field_validator,
    model_validator,
)

from omnivault.config.model_retry_config import ModelRetryConfig
from omnivault.enums import EnumExecutionStrategy
from omnivault.errors import ModelVaultErrorContext, ProtocolConfigurationError

# Retry options accepted at the top level and moved into the nested model.
_LIFTED_RETRY_OPTIONS: tuple[str, ...] = ("max_retry_duration", "retry_interval")


class ModelVaultClientConfig(BaseModel):
    """Configuration for the Vault client runtime.

    Security Policy:
        - The token field uses SecretStr to prevent accidental logging
        - Never log or expose token values in error messages
        - Use verify_ssl=True in production environments

    Attributes:
        url: Vault server URL (required, e.g., "https://vault.example.com:8200")
        token: Vault authentication token (SecretStr for security, optional)
        namespace: Vault namespace for Vault Enterprise (optional)
        timeout_seconds: Per-request timeout in seconds (1.0-300.0, default 30.0)
        verify_ssl: Whether to verify SSL certificates (default True)
        execution_strategy: How call results are delivered (default blocking)
        renewal_window: Seconds before expiry to start maintenance (default 600)
        check_period: Seconds between maintenance scans (default 60)
        check_jitter: Maximum random delay in seconds applied to each
            maintenance job (default 20)
        retry: Deadline-bounded retry configuration
        max_concurrent_operations: Size of the request thread pool (default 10)
        maintenance_workers: Size of the maintenance worker pool (default 4)
        callback_workers: Size of the default callback pool (default 2)

    Example:
        >>> config = ModelVaultClientConfig(
        ...     url="https://vault.example.com:8200",
        ...     token=SecretStr("s.1234567890abcdefghijklmnopqrstuv"),
        ...     execution_strategy="future",
        ...     max_retry_duration=30.0,
        ... )
        >>> config.retry.max_retry_duration
        30.0
        >>> print(config.token)
        **********
    """

    model_config = ConfigDict(
        frozen=True,
        extra="forbid",
        from_attributes=True,
    )

    url: str = Field(
        description="Vault server URL (e.g., 'https://vault.example.com:8200')",
    )
    token: SecretStr | None = Field(
        default=None,
        description="Vault authentication token (use SecretStr for security)",
    )
    namespace: str | None = Field(
        default=None,
        description="Vault namespace for Vault Enterprise",
    )
    timeout_seconds: float = Field(
        default=30.0,
        ge=1.0,
        le=300.0,
        description="Per-request timeout in seconds",
    )
    verify_ssl: bool = Field(
        default=True,
        description="Whether to verify SSL certificates",
    )
    execution_strategy: EnumExecutionStrategy = Field(
        default=EnumExecutionStrategy.BLOCKING,
        description="How call results are delivered to callers",
    )
    renewal_window: float = Field(
        default=600.0,
        ge=0.0,
        description="Seconds before lease expiry to start renewal or rotation",
    )
    check_period: float = Field(
        default=60.0,
        gt=0.0,
        description="Seconds between maintenance scans",
    )
    check_jitter: float = Field(
        default=20.0,
        ge=0.0,
        description="Maximum random delay in seconds applied to each maintenance job",
    )
    retry: ModelRetryConfig = Field(
        default_factory=ModelRetryConfig,
        description="Deadline-bounded retry configuration",
    )
    max_concurrent_operations: int = Field(
        default=10,
        ge=1,
        le=100,
        description="Maximum concurrent Vault requests (thread pool size)",
    )
    maintenance_workers: int = Field(
        default=4,
        ge=1,
        le=64,
        description="Maximum concurrent renew/rotate jobs",
    )
    callback_workers: int = Field(
        default=2,
        ge=1,
        le=64,
        description="Threads in the default callback pool",
    )

    @model_validator(mode="before")
    @classmethod
    def _lift_retry_options(cls, data: Any) -> Any:
        """Accept retry options at the top level and nest them under ``retry``."""
        if not isinstance(data, Mapping):
            return data
        lifted = {k: data[k] for k in _LIFTED_RETRY_OPTIONS if k in data}
        if not lifted:
            return data
        data = {k: v for k, v in data.items() if k not in _LIFTED_RETRY_OPTIONS}
        retry = data.get("retry")
        if isinstance(retry, ModelRetryConfig):
            data["retry"] = retry.model_copy(update=lifted)
        else:
            data["retry"] = {**(retry or {}), **lifted}
        return data

    @field_validator("url")
    @classmethod
    def _validate_url(cls, value: str) -> str:
        if not value.startswith(("http://", "https://")):
            raise ValueError(
                f"Vault url must start with 'http://' or 'https://', got: {value!r}"
            )
        return value.rstrip("/")

    @classmethod
    def from_env(
        cls,
        environ: Mapping[str, str] | None = None,
        **overrides: Any,
    ) -> ModelVaultClientConfig:
        """Build a configuration from the standard Vault environment variables.

        Reads ``VAULT_ADDR``, ``VAULT_TOKEN`` and ``VAULT_NAMESPACE``; keyword
        overrides take precedence.

        Raises:
            ProtocolConfigurationError: If no server address is available.
        """
        env = os.environ if environ is None else environ
        data: dict[str, Any] = {}
        if env.get("VAULT_ADDR"):
            data["url"] = env["VAULT_ADDR"]
        if env.get("VAULT_TOKEN"):
            data["token"] = SecretStr(env["VAULT_TOKEN"].strip())
        if env.get("VAULT_NAMESPACE"):
            data["namespace"] = env["VAULT_NAMESPACE"]
        data.update(overrides)
        if "url" not in data:
            raise ProtocolConfigurationError(
                "Missing VAULT_ADDR - Vault server URL required",
                context=ModelVaultErrorContext(operation="load_config"),
            )
        return cls.model_validate(data)


__all__ = ["ModelVaultClientConfig"]
