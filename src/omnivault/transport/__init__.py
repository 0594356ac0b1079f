# SPDX-License-Identifier: MIT
# Copyright (c) 2025 OmniNode Team
"""Vault HTTP transport."""

from omnivault.transport.transport_vault import VaultTransport
from omnivault.transport.util_response_errors import (
    error_for_response,
    parse_retry_after,
)

__all__ = ["VaultTransport", "error_for_response", "parse_retry_after"]
