# SPDX-License-Identifier: MIT
# Copyright (c) 2025 OmniNode Team
"""Lease lifecycle management: cache, background maintenance and callbacks."""

from omnivault.lease.callback_dispatcher import CallbackDispatcher
from omnivault.lease.lease_cache import LeaseCache
from omnivault.lease.maintenance_scheduler import LeaseRenewer, MaintenanceScheduler

__all__ = [
    "CallbackDispatcher",
    "LeaseCache",
    "LeaseRenewer",
    "MaintenanceScheduler",
]
