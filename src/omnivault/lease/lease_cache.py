# SPDX-License-Identifier: MIT
# Copyright (c) 2025 OmniNode Team
"""Concurrent in-memory lease cache.

Maps lease keys to immutable ModelLeaseRecord instances. Every operation
holds one short lock; no lock is held while calling into Vault or user code.
State transitions use ``compare_and_set`` with identity comparison, so a
record that was replaced concurrently is never overwritten by a stale
transition.
"""

from __future__ import annotations

import threading
from typing import Any

from omnivault.enums import EnumLeaseState
from omnivault.models import ModelLeaseRecord


class LeaseCache:
    """Thread-safe map from lease key to lease record.

    Exactly one record is kept per key; ``put`` replaces wholesale.

    Example:
        >>> cache = LeaseCache()
        >>> cache.put(record)
        >>> cache.get(record.key) is record
        True
    """

    def __init__(self) -> None:
        self._lock = threading.Lock()
        self._records: dict[str, ModelLeaseRecord] = {}

    def get(self, key: str) -> ModelLeaseRecord | None:
        """Return the record stored under ``key``, if any."""
        with self._lock:
            return self._records.get(key)

    def find(self, key_or_lease_id: str) -> ModelLeaseRecord | None:
        """Return the record with the given key or server lease id."""
        with self._lock:
            record = self._records.get(key_or_lease_id)
            if record is not None:
                return record
            for candidate in self._records.values():
                if candidate.lease_id == key_or_lease_id:
                    return candidate
            return None

    def put(self, record: ModelLeaseRecord) -> ModelLeaseRecord | None:
        """Store ``record``, replacing any record with the same key.

        Returns:
            The replaced record, or None
        """
        with self._lock:
            previous = self._records.get(record.key)
            self._records[record.key] = record
            return previous

    def remove(self, key: str) -> ModelLeaseRecord | None:
        """Remove and return the record stored under ``key``."""
        with self._lock:
            return self._records.pop(key, None)

    def remove_if(self, key: str, expected: ModelLeaseRecord) -> bool:
        """Remove the record under ``key`` only if it is ``expected``."""
        with self._lock:
            if self._records.get(key) is not expected:
                return False
            del self._records[key]
            return True

    def compare_and_set(
        self,
        key: str,
        expected: ModelLeaseRecord,
        new: ModelLeaseRecord,
    ) -> bool:
        """Replace the record under ``key`` with ``new`` if it is ``expected``.

        ``new`` may carry a different key; it is stored under its own key
        and the old entry is dropped.

        Returns:
            True if the swap happened
        """
        with self._lock:
            if self._records.get(key) is not expected:
                return False
            if new.key != key:
                del self._records[key]
            self._records[new.key] = new
            return True

    def snapshot(self) -> list[ModelLeaseRecord]:
        """Return a point-in-time list of all records."""
        with self._lock:
            return list(self._records.values())

    def live_value(self, key: str, now: float) -> Any | None:
        """Return the value under ``key`` if the record has not expired."""
        record = self.get(key)
        if record is None or record.is_expired(now):
            return None
        return record.value

    def sweep_expired(self, now: float) -> list[ModelLeaseRecord]:
        """Remove expired records that no maintenance job owns.

        Returns:
            The removed records, moved to the EXPIRED state
        """
        with self._lock:
            expired = [
                r
                for r in self._records.values()
                if r.is_expired(now) and not r.state.is_in_flight
            ]
            for record in expired:
                del self._records[record.key]
        return [record.with_state(EnumLeaseState.EXPIRED) for record in expired]

    def clear(self) -> None:
        """Remove every record."""
        with self._lock:
            self._records.clear()

    def __len__(self) -> int:
        with self._lock:
            return len(self._records)

    def __contains__(self, key: object) -> bool:
        with self._lock:
            return key in self._records


__all__ = ["LeaseCache"]
