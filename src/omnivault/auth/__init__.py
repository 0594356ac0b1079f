# SPDX-License-Identifier: MIT
# Copyright (c) 2025 OmniNode Team
"""Authentication methods."""

from omnivault.auth.auth_token import TOKEN_LEASE_KEY, TokenAuth

__all__ = ["TOKEN_LEASE_KEY", "TokenAuth"]
