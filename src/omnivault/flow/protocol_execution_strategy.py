# SPDX-License-Identifier: MIT
# Copyright (c) 2025 OmniNode Team
"""Execution strategy protocol.

Every flavor implements the same four operations. Clients pick a flavor once,
at construction time, and every call goes through it; call sites never branch
on the flavor.
"""

from __future__ import annotations

from collections.abc import Callable
from typing import Any, Protocol, runtime_checkable

from omnivault.enums import EnumExecutionStrategy
from omnivault.flow.model_call_state import CallState
from omnivault.models import ModelCallDescriptor


@runtime_checkable
class ProtocolExecutionStrategy(Protocol):
    """Operation table shared by all execution strategy flavors."""

    strategy_type: EnumExecutionStrategy

    def invoke(
        self,
        descriptor: ModelCallDescriptor,
        attempt_fn: Callable[[CallState], Any],
    ) -> Any:
        """Start a call and return the flavor's public view of its result."""
        ...

    def on_success(self, state: CallState, value: Any) -> None:
        """Report a successful attempt."""
        ...

    def on_error(self, state: CallState, error: BaseException) -> None:
        """Report a failed attempt; retries or resolves with the error."""
        ...

    def await_result(
        self,
        handle: Any,
        timeout: float | None = None,
        timeout_value: Any = None,
    ) -> Any:
        """Wait for a result returned by ``invoke``."""
        ...


__all__ = ["ProtocolExecutionStrategy"]
