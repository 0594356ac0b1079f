# SPDX-License-Identifier: MIT
# Copyright (c) 2025 OmniNode Team
"""Lease lifecycle callback dispatcher.

User callbacks (on_renew, on_rotate, on_error) never run on the maintenance
loop or worker threads. A slow or failing callback cannot delay maintenance
of other leases.
"""

from __future__ import annotations

import logging
from collections.abc import Callable
from concurrent.futures import Executor, Future, ThreadPoolExecutor
from typing import Any

logger = logging.getLogger(__name__)


class CallbackDispatcher:
    """Run lifecycle callbacks on a dedicated executor.

    Exceptions raised by callbacks are logged and never propagated.

    Attributes:
        owns_executor: True when the dispatcher created its executor and
            is responsible for shutting it down
    """

    def __init__(
        self,
        executor: Executor | None = None,
        max_workers: int = 2,
    ) -> None:
        """Initialize the dispatcher.

        Args:
            executor: Caller-supplied executor (not shut down by ``shutdown``)
            max_workers: Size of the owned pool when no executor is supplied
        """
        self.owns_executor = executor is None
        self._executor: Executor = executor or ThreadPoolExecutor(
            max_workers=max_workers,
            thread_name_prefix="vault_callback_",
        )

    def dispatch(
        self,
        callback: Callable[..., Any] | None,
        *args: Any,
    ) -> Future[None] | None:
        """Submit ``callback(*args)`` to the callback executor.

        Returns:
            The submitted future, or None if there was nothing to run or the
            executor no longer accepts work
        """
        if callback is None:
            return None
        name = getattr(callback, "__name__", type(callback).__name__)
        try:
            return self._executor.submit(self._run, callback, name, args)
        except RuntimeError:
            logger.warning(
                "Callback executor is shut down, dropping callback",
                extra={"callback": name},
            )
            return None

    @staticmethod
    def _run(callback: Callable[..., Any], name: str, args: tuple[Any, ...]) -> None:
        try:
            callback(*args)
        except Exception:
            logger.exception(
                "Lease lifecycle callback raised",
                extra={"callback": name},
            )

    def shutdown(self, wait: bool = True) -> None:
        """Shut down the executor if this dispatcher created it."""
        if self.owns_executor:
            self._executor.shutdown(wait=wait)


__all__ = ["CallbackDispatcher"]
