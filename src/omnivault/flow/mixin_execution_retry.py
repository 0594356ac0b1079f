# SPDX-License-Identifier: MIT
# Copyright (c) 2025 OmniNode Team
"""Deadline-bounded retry mixin shared by all execution strategies.

This module provides the invoke/on_success/on_error machinery once, so the
blocking, deferred and future flavors differ only in how a handle is created,
resolved and awaited.

Retry Semantics:
    - Every call gets ``deadline = started_at + max_retry_duration``
    - A retryable error schedules another attempt after ``delay_for(n)``
      only if ``now + delay < deadline``
    - No attempt starts at or after the deadline
    - Retries run on timer threads; the reporting thread never sleeps

Usage:
    ```python
    from omnivault.flow.mixin_execution_retry import MixinExecutionRetry

    class DeferredStrategy(MixinExecutionRetry):
        def __init__(self, retry_config=None):
            self._init_execution_retry(retry_config=retry_config)

        def _create_handle(self):
            return ResponseHandle()
        ...
    ```

Integration Requirements:
    Classes using this mixin must:
    1. Call ``_init_execution_retry()`` during initialization
    2. Implement ``_create_handle``, ``_resolve_success`` and ``_resolve_error``
    3. Start calls with ``_start()`` and return the handle's public view
"""

from __future__ import annotations

import logging
import time
from collections.abc import Callable
from typing import Any

from omnivault.config import ModelRetryConfig
from omnivault.flow.model_call_state import CallState
from omnivault.models import ModelCallDescriptor
from omnivault.utils import schedule_after

logger = logging.getLogger(__name__)


class MixinExecutionRetry:
    """Shared call lifecycle for execution strategies.

    Attributes:
        _retry_config: Retry policy for every call started by this strategy
        _clock: Monotonic clock used for deadlines
    """

    _retry_config: ModelRetryConfig
    _clock: Callable[[], float]

    def _init_execution_retry(
        self,
        retry_config: ModelRetryConfig | None = None,
        clock: Callable[[], float] = time.monotonic,
    ) -> None:
        """Initialize retry state.

        Args:
            retry_config: Retry policy (defaults to ModelRetryConfig())
            clock: Clock used for call deadlines
        """
        self._retry_config = retry_config or ModelRetryConfig()
        self._clock = clock

    @property
    def retry_config(self) -> ModelRetryConfig:
        """Return the retry policy of this strategy."""
        return self._retry_config

    def _create_handle(self) -> Any:
        raise NotImplementedError

    def _resolve_success(self, handle: Any, value: Any) -> None:
        raise NotImplementedError

    def _resolve_error(self, handle: Any, error: BaseException) -> None:
        raise NotImplementedError

    def _start(
        self,
        descriptor: ModelCallDescriptor,
        attempt_fn: Callable[[CallState], Any],
    ) -> CallState:
        """Create the call state and run the first attempt immediately."""
        now = self._clock()
        state = CallState(
            descriptor=descriptor,
            attempt_fn=attempt_fn,
            handle=self._create_handle(),
            started_at=now,
            deadline=now + self._retry_config.max_retry_duration,
        )
        self._run_attempt(state)
        return state

    def _run_attempt(self, state: CallState) -> None:
        if state.resolved:
            return
        last_error = state.last_error
        if last_error is not None and self._clock() >= state.deadline:
            # Timer fired late; the deadline has passed.
            self._finish_with_error(state, last_error)
            return

        attempt = state.begin_attempt()
        logger.debug(
            "Starting Vault call attempt",
            extra={**state.descriptor.log_extra(), "attempt": attempt},
        )
        try:
            state.attempt_fn(state)
        except Exception as e:
            self.on_error(state, e)

    def on_success(self, state: CallState, value: Any) -> None:
        """Resolve the call with ``value``.

        Reports after the first one for the same attempt are ignored.
        """
        if not state.close_report():
            logger.debug(
                "Ignoring duplicate success report",
                extra=state.descriptor.log_extra(),
            )
            return
        state.mark_resolved()
        self._resolve_success(state.handle, value)

    def on_error(self, state: CallState, error: BaseException) -> None:
        """Retry the call or resolve it with ``error``.

        Retryable errors schedule another attempt on a timer thread if it
        would start before the deadline; everything else resolves the call.
        """
        if not state.close_report():
            logger.debug(
                "Ignoring duplicate error report",
                extra={
                    **state.descriptor.log_extra(),
                    "error_type": type(error).__name__,
                },
            )
            return
        state.last_error = error

        if self._retry_config.is_retryable(error):
            delay = self._retry_config.delay_for(state.attempts, error)
            if self._clock() + delay < state.deadline:
                logger.debug(
                    "Retrying Vault call after retryable error",
                    extra={
                        **state.descriptor.log_extra(),
                        "attempt": state.attempts,
                        "backoff_seconds": delay,
                        "error_type": type(error).__name__,
                    },
                )
                schedule_after(
                    delay,
                    self._run_attempt,
                    state,
                    name=f"vault-retry-{state.descriptor.operation}",
                )
                return
            logger.warning(
                "Vault call retry deadline exhausted",
                extra={
                    **state.descriptor.log_extra(),
                    "attempts": state.attempts,
                    "error_type": type(error).__name__,
                },
            )

        self._finish_with_error(state, error)

    def _finish_with_error(self, state: CallState, error: BaseException) -> None:
        state.mark_resolved()
        self._resolve_error(state.handle, error)


__all__ = ["MixinExecutionRetry"]
