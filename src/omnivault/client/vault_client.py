# SPDX-License-Identifier: MIT
# Copyright (c) 2025 OmniNode Team
"""Vault client context.

The VaultClient bundles everything a running client needs: configuration,
transport, execution strategy, lease cache, maintenance scheduler and
callback dispatcher. There is no module-level client state; every engine
takes a client explicitly.

Thread Pool Management:
    - Transport calls run on a bounded ThreadPoolExecutor
      (``max_concurrent_operations`` workers) so deferred and future calls
      never occupy the caller's thread
    - Maintenance jobs and callbacks have their own pools

Usage:
    ```python
    from omnivault import DatabaseSecretsEngine, VaultClient

    with VaultClient.from_config({"url": "https://vault:8200", "token": "..."}) as client:
        creds = DatabaseSecretsEngine(client).generate_credentials("readonly")
    ```
"""

from __future__ import annotations

import logging
import random
import time
from collections.abc import Callable, Mapping
from concurrent.futures import Executor, Future, ThreadPoolExecutor
from typing import Any

from pydantic import SecretStr, ValidationError

from omnivault.config import ModelVaultClientConfig
from omnivault.errors import (
    ClientError,
    LeaseNotRenewableError,
    MalformedResponseError,
    ModelVaultErrorContext,
    NotFoundError,
    ProtocolConfigurationError,
)
from omnivault.flow import CallState, ProtocolExecutionStrategy, create_execution_strategy
from omnivault.lease import CallbackDispatcher, LeaseCache, MaintenanceScheduler
from omnivault.models import ModelCallDescriptor, ModelLeaseRecord
from omnivault.transport import VaultTransport

logger = logging.getLogger(__name__)

# Sentinel for "no default": NotFoundError propagates.
MISSING: Any = object()


class VaultClient:
    """Explicit client context with start/stop lifecycle.

    Attributes:
        config: Validated client configuration
        cache: Lease cache shared by engines and the maintenance scheduler
        strategy: Execution strategy every call flows through
        scheduler: Background lease maintenance
    """

    def __init__(
        self,
        config: ModelVaultClientConfig,
        *,
        transport: VaultTransport | None = None,
        strategy: ProtocolExecutionStrategy | None = None,
        cache: LeaseCache | None = None,
        callback_executor: Executor | None = None,
        clock: Callable[[], float] = time.time,
        rng: random.Random | None = None,
    ) -> None:
        """Initialize the client.

        Args:
            config: Client configuration
            transport: Transport override (defaults to an hvac-backed transport)
            strategy: Strategy override (defaults to ``config.execution_strategy``)
            cache: Lease cache override
            callback_executor: Dedicated executor for lease callbacks
            clock: Wall clock in epoch seconds used for lease timestamps
            rng: Random source for maintenance jitter
        """
        self.config = config
        self._clock = clock
        self._transport = transport or VaultTransport(config)
        self.strategy = strategy or create_execution_strategy(
            config.execution_strategy, config.retry
        )
        self.cache = cache or LeaseCache()
        self._dispatcher = CallbackDispatcher(
            callback_executor, max_workers=config.callback_workers
        )
        self._executor = ThreadPoolExecutor(
            max_workers=config.max_concurrent_operations,
            thread_name_prefix="vault_client_",
        )
        self.scheduler = MaintenanceScheduler(
            self.cache,
            self.renew_lease_record,
            self._dispatcher,
            renewal_window=config.renewal_window,
            check_period=config.check_period,
            check_jitter=config.check_jitter,
            retry_config=config.retry,
            max_workers=config.maintenance_workers,
            clock=clock,
            rng=rng,
        )

    @classmethod
    def from_config(
        cls, data: Mapping[str, Any] | ModelVaultClientConfig, **kwargs: Any
    ) -> VaultClient:
        """Build a client from a configuration mapping.

        Raises:
            ProtocolConfigurationError: If the configuration is invalid.
        """
        if isinstance(data, ModelVaultClientConfig):
            return cls(data, **kwargs)
        try:
            config = ModelVaultClientConfig.model_validate(dict(data))
        except ValidationError as e:
            raise ProtocolConfigurationError(
                f"Invalid Vault client configuration: {e.error_count()} error(s)",
                context=ModelVaultErrorContext(operation="load_config"),
            ) from e
        return cls(config, **kwargs)

    @classmethod
    def from_env(cls, **kwargs: Any) -> VaultClient:
        """Build a client from ``VAULT_ADDR``/``VAULT_TOKEN``/``VAULT_NAMESPACE``."""
        return cls(ModelVaultClientConfig.from_env(), **kwargs)

    # Lifecycle

    @property
    def is_running(self) -> bool:
        """Return True while background maintenance is running."""
        return self.scheduler.is_running

    @property
    def dispatcher(self) -> CallbackDispatcher:
        """Return the lease callback dispatcher."""
        return self._dispatcher

    @property
    def transport(self) -> VaultTransport:
        """Return the HTTP transport."""
        return self._transport

    def start(self) -> VaultClient:
        """Start background lease maintenance."""
        self.scheduler.start()
        logger.info(
            "Vault client started",
            extra={
                "url": self.config.url,
                "namespace": self.config.namespace,
                "execution_strategy": self.strategy.strategy_type.value,
                "thread_pool_max_workers": self.config.max_concurrent_operations,
            },
        )
        return self

    def stop(self) -> None:
        """Stop maintenance and release every pool and the transport."""
        self.scheduler.stop()
        self._executor.shutdown(wait=True)
        self._dispatcher.shutdown(wait=True)
        self._transport.close()
        logger.info("Vault client stopped", extra={"url": self.config.url})

    def __enter__(self) -> VaultClient:
        return self.start()

    def __exit__(self, *exc_info: object) -> None:
        self.stop()

    # Authentication

    @property
    def token(self) -> str | None:
        """Return the current client token."""
        return self._transport.token

    @token.setter
    def token(self, value: str | SecretStr | None) -> None:
        if isinstance(value, SecretStr):
            value = value.get_secret_value()
        self._transport.token = value

    # Calls

    def descriptor(
        self,
        operation: str,
        *,
        method: str | None = None,
        path: str | None = None,
    ) -> ModelCallDescriptor:
        """Build the descriptor of a new call in this client's namespace."""
        return ModelCallDescriptor(
            operation=operation,
            method=method,
            path=path,
            namespace=self.config.namespace,
        )

    def request(
        self,
        method: str,
        path: str,
        *,
        body: dict[str, Any] | None = None,
        params: dict[str, Any] | None = None,
        operation: str | None = None,
    ) -> dict[str, Any]:
        """Perform one request synchronously, without the execution strategy.

        Raises:
            VaultClientError: Classified transport or response error.
        """
        descriptor = self.descriptor(
            operation or f"{method.lower()} {path}", method=method, path=path
        )
        return self._transport.call(
            method, path, body=body, params=params, descriptor=descriptor
        )

    def call(
        self,
        operation: str,
        fn: Callable[[], Any],
        *,
        path: str | None = None,
        not_found: Any = MISSING,
        descriptor: ModelCallDescriptor | None = None,
    ) -> Any:
        """Run ``fn`` on the I/O pool through the execution strategy.

        Each attempt submits ``fn`` to the pool; its outcome is reported to
        the strategy, which resolves the call or schedules a retry.

        Args:
            operation: Operation name for logs and errors
            fn: Zero-argument callable performing the work of one attempt
            path: Request path or lease key, for logs and errors
            not_found: Value returned instead of raising NotFoundError
            descriptor: Prebuilt descriptor (overrides operation and path)

        Returns:
            The result in the shape of the configured strategy
        """
        descriptor = descriptor or self.descriptor(operation, path=path)

        def attempt(state: CallState) -> None:
            future = self._executor.submit(fn)
            future.add_done_callback(
                lambda f: self._report(state, f, not_found)
            )

        return self.strategy.invoke(descriptor, attempt)

    def _report(self, state: CallState, future: Future[Any], not_found: Any) -> None:
        try:
            value = future.result()
        except NotFoundError as e:
            if not_found is MISSING:
                self.strategy.on_error(state, e)
            else:
                self.strategy.on_success(state, not_found)
        except Exception as e:
            self.strategy.on_error(state, e)
        else:
            self.strategy.on_success(state, value)

    def call_api(
        self,
        operation: str,
        method: str,
        path: str,
        *,
        body: dict[str, Any] | None = None,
        params: dict[str, Any] | None = None,
        transform: Callable[[dict[str, Any]], Any] | None = None,
        not_found: Any = MISSING,
    ) -> Any:
        """Perform an API request through the execution strategy.

        ``transform`` runs inside each attempt on the response body, so a
        transform that raises fails the attempt like a transport error.
        """
        descriptor = self.descriptor(operation, method=method, path=path)

        def fn() -> Any:
            response = self._transport.call(
                method, path, body=body, params=params, descriptor=descriptor
            )
            return transform(response) if transform is not None else response

        return self.call(operation, fn, not_found=not_found, descriptor=descriptor)

    def cached_response(self, value: Any, operation: str = "cache.read") -> Any:
        """Return ``value`` in the shape of the configured strategy."""
        descriptor = self.descriptor(operation)
        return self.strategy.invoke(
            descriptor, lambda state: self.strategy.on_success(state, value)
        )

    def await_result(
        self,
        handle: Any,
        timeout: float | None = None,
        timeout_value: Any = None,
        **kwargs: Any,
    ) -> Any:
        """Wait for a result returned by this client's calls."""
        return self.strategy.await_result(
            handle, timeout=timeout, timeout_value=timeout_value, **kwargs
        )

    # Leases

    def now(self) -> float:
        """Return the client's wall clock reading in epoch seconds."""
        return self._clock()

    def lease(self, key_or_lease_id: str) -> ModelLeaseRecord | None:
        """Return the cached record with the given key or lease id."""
        return self.cache.find(key_or_lease_id)

    def invalidate(self, key: str) -> ModelLeaseRecord | None:
        """Drop a cached record without contacting Vault."""
        record = self.cache.remove(key)
        if record is not None:
            logger.debug("Invalidated cached lease", extra={"lease_key": key})
        return record

    def renew_lease_record(self, record: ModelLeaseRecord) -> ModelLeaseRecord:
        """Renew a server lease and return its replacement record.

        This is the default renewer of the maintenance scheduler.

        Raises:
            LeaseNotRenewableError: If Vault refuses to renew the lease.
            MalformedResponseError: If the response lacks a lease duration.
        """
        descriptor = self.descriptor(
            "sys.leases.renew", method="PUT", path="sys/leases/renew"
        )
        if not record.lease_id:
            raise LeaseNotRenewableError(
                f"Lease {record.key} has no server lease id",
                context=descriptor.error_context(),
            )
        body: dict[str, Any] = {"lease_id": record.lease_id}
        if record.renew_increment is not None:
            body["increment"] = record.renew_increment

        try:
            response = self._transport.call(
                "PUT", "sys/leases/renew", body=body, descriptor=descriptor
            )
        except ClientError as e:
            if any("not renewable" in message for message in e.errors):
                raise LeaseNotRenewableError(
                    f"Lease {record.key} is not renewable",
                    context=e.context,
                ) from e
            raise

        duration = response.get("lease_duration")
        if not isinstance(duration, int | float):
            raise MalformedResponseError(
                "Lease renewal response has no lease_duration",
                context=descriptor.error_context(),
            )
        return record.renewed(
            issued_at=self._clock(),
            duration=duration,
            renewable=bool(response.get("renewable", record.renewable)),
            lease_id=response.get("lease_id"),
        )

    def revoke_lease(self, key_or_lease_id: str) -> Any:
        """Revoke a lease on the server and drop it from the cache.

        Records without a server lease (synthesized KV leases) are only
        dropped from the cache.
        """
        record = self.cache.find(key_or_lease_id)
        if record is not None and not record.leased:
            self.cache.remove_if(record.key, record)
            return self.cached_response(None, operation="sys.leases.revoke")

        lease_id = record.lease_id if record is not None else key_or_lease_id

        def forget(_: dict[str, Any]) -> None:
            if record is not None:
                self.cache.remove(record.key)
                logger.info("Revoked lease", extra={"lease_key": record.key})

        return self.call_api(
            "sys.leases.revoke",
            "PUT",
            "sys/leases/revoke",
            body={"lease_id": lease_id},
            transform=forget,
        )


__all__ = ["MISSING", "VaultClient"]
