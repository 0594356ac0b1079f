# SPDX-License-Identifier: MIT
# Copyright (c) 2025 OmniNode Team
"""Enumerations for the omnivault package."""

from omnivault.enums.enum_execution_strategy import EnumExecutionStrategy
from omnivault.enums.enum_lease_state import EnumLeaseState

__all__ = [
    "EnumExecutionStrategy",
    "EnumLeaseState",
]
