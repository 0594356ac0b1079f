# SPDX-License-Identifier: MIT
# Copyright (c) 2025 OmniNode Team
"""Secret engine request shapers."""

from omnivault.engines.engine_database import DatabaseSecretsEngine
from omnivault.engines.engine_kv_v2 import KVv2SecretsEngine
from omnivault.engines.engine_sys_leases import SysLeases
from omnivault.engines.engine_transit import TransitSecretsEngine
from omnivault.engines.util_lease import (
    callbacks_from,
    lease_record_from_response,
    synthesize_lease,
)

__all__ = [
    "DatabaseSecretsEngine",
    "KVv2SecretsEngine",
    "SysLeases",
    "TransitSecretsEngine",
    "callbacks_from",
    "lease_record_from_response",
    "synthesize_lease",
]
