# SPDX-License-Identifier: MIT
# Copyright (c) 2025 OmniNode Team
"""Vault client context."""

from omnivault.client.vault_client import MISSING, VaultClient

__all__ = ["MISSING", "VaultClient"]
