# SPDX-License-Identifier: MIT
# Copyright (c) 2025 OmniNode Team
"""Deferred execution strategy: calls return response handles.

Reading a failed handle returns the error as a value. Callers that prefer
exceptions pass ``raise_errors=True`` to ``await_result``.
"""

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


class DeferredStrategy(MixinExecutionRetry):
    """Return a ResponseHandle immediately and resolve it in the background."""

    strategy_type = EnumExecutionStrategy.DEFERRED

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
    ) -> ResponseHandle[Any]:
        """Start the call and return its handle."""
        return self._start(descriptor, attempt_fn).handle

    def await_result(
        self,
        handle: Any,
        timeout: float | None = None,
        timeout_value: Any = None,
        *,
        raise_errors: bool = False,
    ) -> Any:
        """Wait for a handle and return its value or its error.

        Args:
            handle: Handle returned by ``invoke`` (other values pass through)
            timeout: Seconds to wait, None to wait indefinitely
            timeout_value: Returned if the handle is unresolved at the timeout
            raise_errors: Raise the terminal error instead of returning it
        """
        if not isinstance(handle, ResponseHandle):
            return handle
        if raise_errors:
            return handle.result(timeout, default=timeout_value)
        return handle.value(timeout, default=timeout_value)


__all__ = ["DeferredStrategy"]
