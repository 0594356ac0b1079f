# SPDX-License-Identifier: MIT
# Copyright (c) 2025 OmniNode Team
"""Utility helpers for the omnivault package."""

from omnivault.utils.util_paths import join_path, lease_key, trim_path
from omnivault.utils.util_timers import schedule_after

__all__ = [
    "join_path",
    "lease_key",
    "schedule_after",
    "trim_path",
]
