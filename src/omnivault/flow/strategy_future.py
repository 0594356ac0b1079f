# SPDX-License-Identifier: MIT
# Copyright (c) 2025 OmniNode Team
"""Future execution strategy backed by ``concurrent.futures.Future``.

Futures compose with ``concurrent.futures.wait``/``as_completed`` and can be
bridged into asyncio code with ``as_asyncio``.
"""

from __future__ import annotations

import asyncio
import time
from collections.abc import Callable
from concurrent.futures import Future, wait
from typing import Any

from omnivault.config import ModelRetryConfig
from omnivault.enums import EnumExecutionStrategy
from omnivault.flow.mixin_execution_retry import MixinExecutionRetry
from omnivault.flow.model_call_state import CallState
from omnivault.models import ModelCallDescriptor


class FutureStrategy(MixinExecutionRetry):
    """Return a running Future and resolve it in the background.

    Terminal errors are raised by ``Future.result()``.
    """

    strategy_type = EnumExecutionStrategy.FUTURE

    def __init__(
        self,
        retry_config: ModelRetryConfig | None = None,
        clock: Callable[[], float] = time.monotonic,
    ) -> None:
        self._init_execution_retry(retry_config=retry_config, clock=clock)

    def _create_handle(self) -> Future[Any]:
        future: Future[Any] = Future()
        future.set_running_or_notify_cancel()
        return future

    def _resolve_success(self, handle: Future[Any], value: Any) -> None:
        handle.set_result(value)

    def _resolve_error(self, handle: Future[Any], error: BaseException) -> None:
        handle.set_exception(error)

    def invoke(
        self,
        descriptor: ModelCallDescriptor,
        attempt_fn: Callable[[CallState], Any],
    ) -> Future[Any]:
        """Start the call and return its future."""
        return self._start(descriptor, attempt_fn).handle

    def await_result(
        self,
        handle: Any,
        timeout: float | None = None,
        timeout_value: Any = None,
    ) -> Any:
        """Wait for a future and return its result, raising terminal errors.

        Returns ``timeout_value`` if the future is still pending at the
        timeout; the call keeps running.
        """
        if not isinstance(handle, Future):
            return handle
        done, _ = wait([handle], timeout=timeout)
        if not done:
            return timeout_value
        return handle.result()


def as_asyncio(handle: Future[Any]) -> asyncio.Future[Any]:
    """Wrap a strategy future for awaiting inside the running event loop."""
    return asyncio.wrap_future(handle)


__all__ = ["FutureStrategy", "as_asyncio"]
