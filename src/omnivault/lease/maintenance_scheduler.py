# SPDX-License-Identifier: MIT
# Copyright (c) 2025 OmniNode Team
"""Background lease maintenance.

The MaintenanceScheduler keeps cached leases valid by renewing or rotating
them before they expire. One loop thread wakes every ``check_period``, scans
a snapshot of the lease cache and hands due leases to a small worker pool.
Lifecycle callbacks are handed to the CallbackDispatcher and never run on
the loop or on the workers.

Lease State Machine:
    ACTIVE → RENEWAL_PENDING: Due and renewable
    ACTIVE → ROTATING: Due, not renewable (or already expired) and rotatable
    RENEWAL_PENDING → ACTIVE: Renewal succeeded, record replaced
    RENEWAL_PENDING → ACTIVE: Retryable failures exhausted the deadline;
        the next tick tries again
    RENEWAL_PENDING → ROTATING: Renewal failed terminally and the lease is
        rotatable
    ROTATING → ACTIVE: Rotation succeeded, new record stored (possibly
        under a new key)
    ROTATING → ERRORED: Rotation failed; on_error fires and the record is
        removed

Concurrency:
    The transition into RENEWAL_PENDING/ROTATING is a compare-and-set on the
    cache. Only the scan that wins the swap submits a job, and no job is
    submitted for a key that already has one pending, so at most one
    renew-or-rotate operation is in flight per key. This holds even when
    ticks overlap or a caller replaces the record mid-renewal.

Jitter:
    Each job starts after a random delay in ``[0, check_jitter]`` so that
    leases issued together are not renewed together.
"""

from __future__ import annotations

import logging
import random
import threading
import time
from collections.abc import Callable
from concurrent.futures import Future, ThreadPoolExecutor
from dataclasses import dataclass, field

from omnivault.config import ModelRetryConfig
from omnivault.enums import EnumLeaseState
from omnivault.errors import (
    LeaseNotRenewableError,
    MalformedResponseError,
    RotationFailedError,
)
from omnivault.flow import BlockingStrategy, CallState
from omnivault.lease.callback_dispatcher import CallbackDispatcher
from omnivault.lease.lease_cache import LeaseCache
from omnivault.models import ModelCallDescriptor, ModelLeaseRecord
from omnivault.utils import schedule_after

logger = logging.getLogger(__name__)

LeaseRenewer = Callable[[ModelLeaseRecord], ModelLeaseRecord]


@dataclass(eq=False)
class _MaintenanceJob:
    """One scheduled renew-or-rotate operation for an in-flight record."""

    key: str
    record: ModelLeaseRecord
    timer: threading.Timer | None = field(default=None, repr=False)
    future: Future[None] | None = field(default=None, repr=False)
    started: bool = False
    cancelled: bool = False


class MaintenanceScheduler:
    """Periodic renew/rotate/expire loop over a LeaseCache.

    Example:
        >>> scheduler = MaintenanceScheduler(
        ...     cache, client.renew_lease_record, dispatcher,
        ...     renewal_window=600.0, check_period=60.0, check_jitter=20.0,
        ... )
        >>> scheduler.start()
        >>> ...
        >>> scheduler.stop()
    """

    def __init__(
        self,
        cache: LeaseCache,
        renewer: LeaseRenewer,
        dispatcher: CallbackDispatcher,
        *,
        renewal_window: float = 600.0,
        check_period: float = 60.0,
        check_jitter: float = 20.0,
        retry_config: ModelRetryConfig | None = None,
        max_workers: int = 4,
        clock: Callable[[], float] = time.time,
        rng: random.Random | None = None,
    ) -> None:
        """Initialize the scheduler.

        Args:
            cache: Lease cache to maintain
            renewer: Default renewer, used when a record has no ``renew_fn``
            dispatcher: Dispatcher for lifecycle callbacks
            renewal_window: Default seconds before expiry to start maintenance
            check_period: Seconds between scans
            check_jitter: Maximum random delay in seconds before each job
            retry_config: Retry policy for renew and rotate calls
            max_workers: Maximum concurrent renew/rotate jobs
            clock: Wall clock in epoch seconds, compared with lease expiry
            rng: Random source for jitter
        """
        self._cache = cache
        self._renewer = renewer
        self._dispatcher = dispatcher
        self._renewal_window = renewal_window
        self._check_period = check_period
        self._check_jitter = check_jitter
        self._max_workers = max_workers
        self._clock = clock
        self._rng = rng or random.Random()
        self._strategy = BlockingStrategy(retry_config=retry_config)

        self._stop_event = threading.Event()
        self._thread: threading.Thread | None = None
        self._executor: ThreadPoolExecutor | None = None
        self._pending: dict[str, _MaintenanceJob] = {}
        self._pending_cond = threading.Condition()

    @property
    def is_running(self) -> bool:
        """Return True while the loop thread is alive."""
        return self._thread is not None and self._thread.is_alive()

    def start(self) -> None:
        """Start the periodic loop thread. No-op if already running."""
        if self.is_running:
            return
        self._stop_event.clear()
        self._thread = threading.Thread(
            target=self._loop,
            name="vault-lease-maintenance",
            daemon=True,
        )
        self._thread.start()
        logger.info(
            "Lease maintenance started",
            extra={
                "check_period_seconds": self._check_period,
                "check_jitter_seconds": self._check_jitter,
                "renewal_window_seconds": self._renewal_window,
            },
        )

    def stop(self, wait: bool = True) -> None:
        """Stop the loop and the workers.

        Jobs that have not started are cancelled and their records go back to
        ACTIVE. Jobs already running finish when ``wait`` is True.
        """
        self._stop_event.set()
        thread = self._thread
        if thread is not None and thread is not threading.current_thread():
            thread.join()
        self._thread = None

        with self._pending_cond:
            unstarted = [job for job in self._pending.values() if not job.started]
            for job in unstarted:
                job.cancelled = True
                if job.timer is not None:
                    job.timer.cancel()
                if job.future is not None:
                    job.future.cancel()
                del self._pending[job.key]
            executor, self._executor = self._executor, None
            self._pending_cond.notify_all()

        for job in unstarted:
            self._cache.compare_and_set(
                job.key, job.record, job.record.with_state(EnumLeaseState.ACTIVE)
            )
        if executor is not None:
            executor.shutdown(wait=wait, cancel_futures=True)

        logger.info(
            "Lease maintenance stopped",
            extra={"cancelled_jobs": len(unstarted)},
        )

    def wait_idle(self, timeout: float | None = None) -> bool:
        """Block until no maintenance job is pending.

        Returns:
            True if idle, False if ``timeout`` elapsed first
        """
        with self._pending_cond:
            return self._pending_cond.wait_for(lambda: not self._pending, timeout)

    def _loop(self) -> None:
        while not self._stop_event.wait(self._check_period):
            try:
                self.tick()
            except Exception:
                logger.exception("Lease maintenance tick failed")

    def tick(self) -> list[str]:
        """Scan the cache once and schedule maintenance for due leases.

        Expired records that no job owns are removed after the scan.

        Returns:
            Keys of the leases a job was scheduled for
        """
        now = self._clock()
        scheduled: list[str] = []
        for record in self._cache.snapshot():
            try:
                if self._schedule_if_due(record, now):
                    scheduled.append(record.key)
            except Exception:
                logger.exception(
                    "Failed to schedule lease maintenance",
                    extra={"lease_key": record.key},
                )

        for expired in self._cache.sweep_expired(now):
            logger.warning(
                "Lease expired, removed from cache",
                extra={
                    "lease_key": expired.key,
                    "state": expired.state.value,
                    "expires_at": expired.expires_at,
                },
            )
        return scheduled

    def _schedule_if_due(self, record: ModelLeaseRecord, now: float) -> bool:
        if record.state is not EnumLeaseState.ACTIVE:
            return False
        window = (
            record.renewal_window
            if record.renewal_window is not None
            else self._renewal_window
        )
        if not record.expires_within(window, now):
            return False

        if record.renewable and not record.is_expired(now):
            target = EnumLeaseState.RENEWAL_PENDING
        elif record.rotatable:
            target = EnumLeaseState.ROTATING
        else:
            return False

        in_flight = record.with_state(target)
        if not self._cache.compare_and_set(record.key, record, in_flight):
            return False
        if not self._submit(in_flight):
            self._cache.compare_and_set(record.key, in_flight, record)
            return False

        logger.debug(
            "Lease due for maintenance",
            extra={
                "lease_key": record.key,
                "state": target.value,
                "seconds_remaining": record.time_remaining(now),
            },
        )
        return True

    def _submit(self, record: ModelLeaseRecord) -> bool:
        job = _MaintenanceJob(key=record.key, record=record)
        delay = self._rng.uniform(0.0, self._check_jitter) if self._check_jitter else 0.0
        with self._pending_cond:
            if self._stop_event.is_set():
                return False
            if job.key in self._pending:
                # A replaced record can be due while the old job still runs.
                logger.debug(
                    "Lease maintenance already in flight, skipping",
                    extra={"lease_key": job.key},
                )
                return False
            self._pending[job.key] = job
            job.timer = schedule_after(
                delay, self._enqueue, job, name="vault-lease-jitter"
            )
        return True

    def _enqueue(self, job: _MaintenanceJob) -> None:
        with self._pending_cond:
            if job.cancelled:
                return
            if self._executor is None:
                self._executor = ThreadPoolExecutor(
                    max_workers=self._max_workers,
                    thread_name_prefix="vault_lease_",
                )
            job.future = self._executor.submit(self._run_job, job)

    def _run_job(self, job: _MaintenanceJob) -> None:
        with self._pending_cond:
            if job.cancelled:
                return
            job.started = True
        try:
            if job.record.state is EnumLeaseState.RENEWAL_PENDING:
                self._renew(job.record)
            else:
                self._rotate(job.record)
        except Exception:
            logger.exception(
                "Lease maintenance job failed",
                extra={"lease_key": job.key},
            )
            # Never leave the record owned by a job that is gone.
            self._cache.compare_and_set(
                job.key, job.record, job.record.with_state(EnumLeaseState.ACTIVE)
            )
        finally:
            with self._pending_cond:
                if self._pending.get(job.key) is job:
                    del self._pending[job.key]
                self._pending_cond.notify_all()

    def _invoke(
        self,
        operation: str,
        record: ModelLeaseRecord,
        produce: Callable[[], object],
    ) -> ModelLeaseRecord:
        descriptor = ModelCallDescriptor(operation=operation, path=record.key)

        def attempt(state: CallState) -> None:
            fresh = produce()
            if not isinstance(fresh, ModelLeaseRecord):
                raise MalformedResponseError(
                    f"{operation} did not return a lease record",
                    context=descriptor.error_context(),
                )
            self._strategy.on_success(state, fresh)

        return self._strategy.invoke(descriptor, attempt)

    def _renew(self, record: ModelLeaseRecord) -> None:
        renew_fn = record.renew_fn or self._renewer
        try:
            fresh = self._invoke("lease.renew", record, lambda: renew_fn(record))
        except Exception as e:
            self._handle_renew_failure(record, e)
            return

        if fresh.state is not EnumLeaseState.ACTIVE:
            fresh = fresh.with_state(EnumLeaseState.ACTIVE)
        if not self._cache.compare_and_set(record.key, record, fresh):
            logger.info(
                "Lease changed during renewal, discarding renewed record",
                extra={"lease_key": record.key},
            )
            return

        logger.info(
            "Renewed lease",
            extra={"lease_key": fresh.key, "ttl_seconds": fresh.duration},
        )
        self._dispatcher.dispatch(fresh.callbacks.on_renew, fresh)

    def _handle_renew_failure(self, record: ModelLeaseRecord, error: Exception) -> None:
        log_extra = {"lease_key": record.key, "error_type": type(error).__name__}

        if self._strategy.retry_config.is_retryable(error):
            logger.warning(
                "Lease renewal retries exhausted, retrying on next check",
                extra=log_extra,
            )
            self._cache.compare_and_set(
                record.key, record, record.with_state(EnumLeaseState.ACTIVE)
            )
            return

        if record.rotatable:
            logger.warning("Lease renewal failed, rotating lease", extra=log_extra)
            rotating = record.with_state(EnumLeaseState.ROTATING)
            if self._cache.compare_and_set(record.key, record, rotating):
                self._rotate(rotating)
            return

        logger.warning(
            "Lease renewal failed and lease cannot be rotated",
            extra=log_extra,
        )
        stale = record.model_copy(
            update={"renewable": False, "state": EnumLeaseState.ACTIVE}
        )
        if not self._cache.compare_and_set(record.key, record, stale):
            return
        if isinstance(error, LeaseNotRenewableError):
            failure = error
        else:
            failure = LeaseNotRenewableError(
                f"Lease {record.key} could not be renewed",
                context=getattr(error, "context", None),
            )
            failure.__cause__ = error
        self._dispatcher.dispatch(stale.callbacks.on_error, failure, stale)

    def _rotate(self, record: ModelLeaseRecord) -> None:
        try:
            fresh = self._rotated_record(record)
        except RotationFailedError as e:
            errored = record.with_state(EnumLeaseState.ERRORED)
            self._cache.remove_if(record.key, record)
            logger.error(
                "Lease rotation failed, lease removed",
                extra={
                    "lease_key": record.key,
                    "correlation_id": str(e.correlation_id),
                    "error_type": type(e.__cause__).__name__,
                },
            )
            self._dispatcher.dispatch(record.callbacks.on_error, e, errored)
            return

        if not self._cache.compare_and_set(record.key, record, fresh):
            logger.info(
                "Lease changed during rotation, discarding rotated record",
                extra={"lease_key": record.key},
            )
            return

        logger.info(
            "Rotated lease",
            extra={
                "lease_key": record.key,
                "new_lease_key": fresh.key,
                "ttl_seconds": fresh.duration,
            },
        )
        self._dispatcher.dispatch(fresh.callbacks.on_rotate, fresh)

    def _rotated_record(self, record: ModelLeaseRecord) -> ModelLeaseRecord:
        """Issue a fresh record for ``record``.

        Raises:
            RotationFailedError: If the rotation call failed, chained to
                the underlying error.
        """
        rotate_fn = record.rotate_fn
        if rotate_fn is None:
            raise RotationFailedError(f"Lease {record.key} is not rotatable")
        try:
            fresh = self._invoke("lease.rotate", record, rotate_fn)
        except Exception as e:
            raise RotationFailedError(
                f"Failed to rotate lease {record.key}: {e}",
                context=getattr(e, "context", None),
            ) from e
        return fresh.inherit(record)


__all__ = ["LeaseRenewer", "MaintenanceScheduler"]
