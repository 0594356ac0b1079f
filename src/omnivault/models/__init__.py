# SPDX-License-Identifier: MIT
# Copyright (c) 2025 OmniNode Team
"""Data models for the omnivault package."""

from omnivault.models.model_call_descriptor import ModelCallDescriptor
from omnivault.models.model_lease_callbacks import ModelLeaseCallbacks
from omnivault.models.model_lease_record import ModelLeaseRecord
from omnivault.models.model_transport_response import ModelTransportResponse

__all__ = [
    "ModelCallDescriptor",
    "ModelLeaseCallbacks",
    "ModelLeaseRecord",
    "ModelTransportResponse",
]
