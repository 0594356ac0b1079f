# SPDX-License-Identifier: MIT
# Copyright (c) 2025 OmniNode Team
"""Single-assignment response container used by the blocking and deferred
execution strategies.

A ResponseHandle holds a value that becomes available later, exactly once,
either as a success value or as a failure. The first resolution wins; later
attempts to resolve are ignored and reported through the boolean return
value.
"""

from __future__ import annotations

import threading
from typing import Any, Generic, TypeVar

T = TypeVar("T")


class ResponseHandle(Generic[T]):
    """Thread-safe, write-once result container.

    Unlike ``concurrent.futures.Future``, reading a failed handle with
    ``value()`` returns the error instead of raising it; ``result()`` raises.

    Example:
        >>> handle = ResponseHandle()
        >>> handle.set_result({"username": "v-app-1"})
        True
        >>> handle.set_error(RuntimeError("late"))
        False
        >>> handle.value()
        {'username': 'v-app-1'}
    """

    def __init__(self) -> None:
        self._event = threading.Event()
        self._lock = threading.Lock()
        self._value: T | None = None
        self._error: BaseException | None = None

    def _resolve(self, value: T | None, error: BaseException | None) -> bool:
        with self._lock:
            if self._event.is_set():
                return False
            self._value = value
            self._error = error
            self._event.set()
        return True

    def set_result(self, value: T) -> bool:
        """Resolve the handle with a success value.

        Returns:
            True if this call resolved the handle, False if it was already resolved
        """
        return self._resolve(value, None)

    def set_error(self, error: BaseException) -> bool:
        """Resolve the handle with a failure.

        Returns:
            True if this call resolved the handle, False if it was already resolved
        """
        return self._resolve(None, error)

    def done(self) -> bool:
        """Return True once the handle has been resolved."""
        return self._event.is_set()

    def wait(self, timeout: float | None = None) -> bool:
        """Block until resolved or until ``timeout`` seconds pass.

        Returns:
            True if the handle is resolved
        """
        return self._event.wait(timeout)

    def error(self) -> BaseException | None:
        """Return the failure without blocking, or None if pending or successful."""
        return self._error if self._event.is_set() else None

    def value(self, timeout: float | None = None, default: Any = None) -> Any:
        """Return the success value or the error instance.

        Blocks until resolved; returns ``default`` if ``timeout`` elapses first.
        """
        if not self._event.wait(timeout):
            return default
        if self._error is not None:
            return self._error
        return self._value

    def result(self, timeout: float | None = None, default: Any = None) -> Any:
        """Return the success value, raising the error if the call failed.

        Blocks until resolved; returns ``default`` if ``timeout`` elapses first.
        """
        if not self._event.wait(timeout):
            return default
        if self._error is not None:
            raise self._error
        return self._value

    def __repr__(self) -> str:
        if not self._event.is_set():
            status = "pending"
        elif self._error is not None:
            status = f"failed: {type(self._error).__name__}"
        else:
            status = "resolved"
        return f"<ResponseHandle {status}>"


__all__ = ["ResponseHandle"]
