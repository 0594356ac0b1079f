# SPDX-License-Identifier: MIT
# Copyright (c) 2025 OmniNode Team
"""Configuration models for the omnivault package."""

from omnivault.config.model_retry_config import (
    DEFAULT_RETRYABLE_STATUS_CODES,
    ModelRetryConfig,
)
from omnivault.config.model_vault_client_config import ModelVaultClientConfig

__all__ = [
    "DEFAULT_RETRYABLE_STATUS_CODES",
    "ModelRetryConfig",
    "ModelVaultClientConfig",
]
