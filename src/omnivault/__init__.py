# SPDX-License-Identifier: MIT
# Copyright (c) 2025 OmniNode Team
"""OmniVault - Vault client runtime with lease lifecycle management.

This package provides a client for HashiCorp Vault built around two pieces:

- A pluggable request-execution pipeline: every call flows through one
  execution strategy (blocking, deferred or future) sharing the same
  deadline-bounded retry logic
- A lease lifecycle manager: issued credentials are cached and renewed or
  rotated in the background before they expire

Key Components:
    - VaultClient: Explicit client context with start/stop lifecycle
    - LeaseCache / MaintenanceScheduler / CallbackDispatcher: lease lifecycle
    - BlockingStrategy / DeferredStrategy / FutureStrategy: execution flavors
    - KVv2SecretsEngine, DatabaseSecretsEngine, TransitSecretsEngine,
      SysLeases, TokenAuth: request shapers for common Vault endpoints
"""

from omnivault.auth import TokenAuth
from omnivault.client import VaultClient
from omnivault.config import ModelRetryConfig, ModelVaultClientConfig
from omnivault.engines import (
    DatabaseSecretsEngine,
    KVv2SecretsEngine,
    SysLeases,
    TransitSecretsEngine,
)
from omnivault.enums import EnumExecutionStrategy, EnumLeaseState
from omnivault.models import ModelLeaseCallbacks, ModelLeaseRecord

__all__: list[str] = [
    "DatabaseSecretsEngine",
    "EnumExecutionStrategy",
    "EnumLeaseState",
    "KVv2SecretsEngine",
    "ModelLeaseCallbacks",
    "ModelLeaseRecord",
    "ModelRetryConfig",
    "ModelVaultClientConfig",
    "SysLeases",
    "TokenAuth",
    "TransitSecretsEngine",
    "VaultClient",
]
