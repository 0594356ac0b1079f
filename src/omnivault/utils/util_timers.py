# SPDX-License-Identifier: MIT
# Copyright (c) 2025 OmniNode Team
"""Deferred execution helpers backed by daemon timer threads."""

from __future__ import annotations

import threading
from collections.abc import Callable
from typing import Any


def schedule_after(
    delay_seconds: float,
    func: Callable[..., Any],
    *args: Any,
    name: str | None = None,
) -> threading.Timer:
    """Run ``func(*args)`` on a daemon timer thread after ``delay_seconds``.

    The calling thread is never blocked. The returned timer may be cancelled
    until it fires.

    Args:
        delay_seconds: Delay before ``func`` runs (negative values run at once)
        func: Callable to run
        *args: Positional arguments for ``func``
        name: Optional thread name

    Returns:
        The started timer
    """
    timer = threading.Timer(max(delay_seconds, 0.0), func, args=args)
    timer.daemon = True
    if name:
        timer.name = name
    timer.start()
    return timer


__all__ = ["schedule_after"]
