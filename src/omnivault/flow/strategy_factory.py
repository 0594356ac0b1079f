# SPDX-License-Identifier: MIT
# Copyright (c) 2025 OmniNode Team
"""Execution strategy factory."""

from __future__ import annotations

import time
from collections.abc import Callable

from omnivault.config import ModelRetryConfig
from omnivault.enums import EnumExecutionStrategy
from omnivault.errors import ModelVaultErrorContext, ProtocolConfigurationError
from omnivault.flow.protocol_execution_strategy import ProtocolExecutionStrategy
from omnivault.flow.strategy_blocking import BlockingStrategy
from omnivault.flow.strategy_deferred import DeferredStrategy
from omnivault.flow.strategy_future import FutureStrategy

_STRATEGIES: dict[EnumExecutionStrategy, type[ProtocolExecutionStrategy]] = {
    EnumExecutionStrategy.BLOCKING: BlockingStrategy,
    EnumExecutionStrategy.DEFERRED: DeferredStrategy,
    EnumExecutionStrategy.FUTURE: FutureStrategy,
}


def create_execution_strategy(
    strategy_type: EnumExecutionStrategy | str,
    retry_config: ModelRetryConfig | None = None,
    clock: Callable[[], float] = time.monotonic,
) -> ProtocolExecutionStrategy:
    """Build the execution strategy selected by ``strategy_type``.

    Raises:
        ProtocolConfigurationError: If the strategy type is unknown.
    """
    try:
        strategy_cls = _STRATEGIES[EnumExecutionStrategy(strategy_type)]
    except ValueError as e:
        raise ProtocolConfigurationError(
            f"Unknown execution strategy: {strategy_type!r}",
            context=ModelVaultErrorContext(operation="create_execution_strategy"),
            valid_strategies=[s.value for s in EnumExecutionStrategy],
        ) from e
    return strategy_cls(retry_config=retry_config, clock=clock)  # type: ignore[call-arg]


__all__ = ["create_execution_strategy"]
