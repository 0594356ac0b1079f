# SPDX-License-Identifier: MIT
# Copyright (c) 2025 OmniNode Team
"""Execution Strategy Enumeration.

Defines the closed set of execution strategy flavors a client can be
configured with. The flavor decides how a call's result is delivered to the
caller; retry behavior is shared by all flavors.
"""

from enum import Enum


class EnumExecutionStrategy(str, Enum):
    """Execution strategy flavors for Vault client calls.

    Attributes:
        BLOCKING: The calling thread blocks until the call resolves; terminal
            errors are raised.
        DEFERRED: A ResponseHandle is returned immediately; terminal errors
            are delivered as values unless explicitly raised.
        FUTURE: A concurrent.futures.Future is returned immediately; terminal
            errors raise when the result is accessed.
    """

    BLOCKING = "blocking"
    DEFERRED = "deferred"
    FUTURE = "future"


__all__ = ["EnumExecutionStrategy"]
