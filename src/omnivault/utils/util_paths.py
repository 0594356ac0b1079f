# SPDX-License-Identifier: MIT
# Copyright (c) 2025 OmniNode Team
"""Vault API path helpers."""

from __future__ import annotations


def trim_path(path: str) -> str:
    """Remove leading and trailing slashes from a path segment."""
    return path.strip("/")


def join_path(*parts: str) -> str:
    """Join path segments with single slashes after trimming each one.

    Empty segments are skipped.

    Example:
        >>> join_path("/database/", "creds", "readonly/")
        'database/creds/readonly'
    """
    return "/".join(t for t in (trim_path(p) for p in parts) if t)


def lease_key(engine: str, mount: str, path: str) -> str:
    """Build the cache key for a secret read from ``engine`` at ``mount``."""
    return f"{engine}:{trim_path(mount)}:{trim_path(path)}"


__all__ = ["join_path", "lease_key", "trim_path"]
