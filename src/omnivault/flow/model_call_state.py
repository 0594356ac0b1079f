# SPDX-License-Identifier: MIT
# Copyright (c) 2025 OmniNode Team
"""Per-call state shared between an execution strategy and its attempts."""

from __future__ import annotations

import threading
from collections.abc import Callable
from dataclasses import dataclass, field
from typing import Any

from omnivault.models import ModelCallDescriptor


@dataclass(eq=False)
class CallState:
    """Mutable state of one logical call across its attempts.

    Each attempt opens a report slot; exactly one ``on_success``/``on_error``
    report is accepted per attempt and nothing is accepted once the call is
    resolved. This is what keeps a handle from being resolved twice.

    Attributes:
        descriptor: Call metadata
        attempt_fn: Function performing one attempt; receives this state
        handle: Flavor-specific result container
        started_at: Clock reading when the call started
        deadline: Clock reading after which no attempt may start
        attempts: Number of attempts started so far
        last_error: Most recent error reported by an attempt
    """

    descriptor: ModelCallDescriptor
    attempt_fn: Callable[[CallState], Any]
    handle: Any
    started_at: float
    deadline: float
    attempts: int = 0
    last_error: BaseException | None = None
    _resolved: bool = field(default=False, repr=False)
    _report_open: bool = field(default=False, repr=False)
    _lock: threading.Lock = field(default_factory=threading.Lock, repr=False)

    @property
    def resolved(self) -> bool:
        """Return True once the call's handle has been resolved."""
        return self._resolved

    def begin_attempt(self) -> int:
        """Open the report slot for a new attempt and return its number."""
        with self._lock:
            self.attempts += 1
            self._report_open = True
            return self.attempts

    def close_report(self) -> bool:
        """Claim the current attempt's report slot.

        Returns:
            True for the first report of an open attempt, False otherwise
        """
        with self._lock:
            if self._resolved or not self._report_open:
                return False
            self._report_open = False
            return True

    def mark_resolved(self) -> None:
        """Record that the handle is being resolved."""
        with self._lock:
            self._resolved = True
            self._report_open = False


__all__ = ["CallState"]
