# SPDX-License-Identifier: MIT
# Copyright (c) 2025 OmniNode Team
"""Request execution pipeline.

Every Vault call flows through one execution strategy, chosen per client:

    - BlockingStrategy: ``invoke`` returns the value, errors raise
    - DeferredStrategy: ``invoke`` returns a ResponseHandle, errors are values
    - FutureStrategy: ``invoke`` returns a concurrent.futures.Future

All three share deadline-bounded retries through MixinExecutionRetry.
"""

from omnivault.flow.mixin_execution_retry import MixinExecutionRetry
from omnivault.flow.model_call_state import CallState
from omnivault.flow.protocol_execution_strategy import ProtocolExecutionStrategy
from omnivault.flow.response_handle import ResponseHandle
from omnivault.flow.strategy_blocking import BlockingStrategy
from omnivault.flow.strategy_deferred import DeferredStrategy
from omnivault.flow.strategy_factory import create_execution_strategy
from omnivault.flow.strategy_future import FutureStrategy, as_asyncio

__all__ = [
    "BlockingStrategy",
    "CallState",
    "DeferredStrategy",
    "FutureStrategy",
    "MixinExecutionRetry",
    "ProtocolExecutionStrategy",
    "ResponseHandle",
    "as_asyncio",
    "create_execution_strategy",
]
