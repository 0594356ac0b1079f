# SPDX-License-Identifier: MIT
# Copyright (c) 2025 OmniNode Team
"""Blocking execution strategy: calls return values and raise errors."""

from __future__ import annotations

import time
from collections.abc import Callable
from typing import Any

from omnivault.config import ModelRetryConfig
from omnivault.enums import EnumExecutionStrategy
from omnivault.flow.mixin_execution_retry import MixinExecutionRetry
from omnivault.flow.model_call_state import CallState
from omnivault.flow.response_handle import ResponseHandle
from omnivault.models import ModelCallDescriptor


class BlockingStrategy(MixinExecutionRetry):
    """Run each call to completion on the caller's thread.

    ``invoke`` waits for the call's handle (including any retries) and
    returns the value; terminal errors are raised to the caller. This is
    also the strategy the maintenance scheduler runs its jobs through.
    """

    strategy_type = EnumExecutionStrategy.BLOCKING

    def __init__(
        self,
        retry_config: ModelRetryConfig | None = None,
        clock: Callable[[], float] = time.monotonic,
    ) -> None:
        self._init_execution_retry(retry_config=retry_config, clock=clock)

    def _create_handle(self) -> ResponseHandle[Any]:
        return ResponseHandle()

    def _resolve_success(self, handle: ResponseHandle[Any], value: Any) -> None:
        handle.set_result(value)

    def _resolve_error(self, handle: ResponseHandle[Any], error: BaseException) -> None:
        handle.set_error(error)

    def invoke(
        self,
        descriptor: ModelCallDescriptor,
        attempt_fn: Callable[[CallState], Any],
    ) -> Any:
        """Run the call and return its value.

        Raises:
            VaultClientError: The terminal error of the call.
        """
        state = self._start(descriptor, attempt_fn)
        return state.handle.result()

    def await_result(
        self,
        handle: Any,
        timeout: float | None = None,
        timeout_value: Any = None,
    ) -> Any:
        """Return ``handle`` unchanged unless it is still a pending handle."""
        if not isinstance(handle, ResponseHandle):
            return handle
        return handle.result(timeout, default=timeout_value)


__all__ = ["BlockingStrategy"]
