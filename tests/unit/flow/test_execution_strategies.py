# SPDX-License-Identifier: MIT
# Copyright (c) 2025 OmniNode Team
"""Unit tests for the blocking, deferred and future execution strategies.

Tests cover:
- A success reported via on_success is returned exactly once
- Terminal errors raise (blocking, future) or are returned (deferred)
- await_result timeouts return the sentinel without cancelling the call
- Duplicate reports for one attempt never resolve twice
- Future interop with concurrent.futures and asyncio
"""

from __future__ import annotations

import threading
from concurrent.futures import Future, wait

import pytest

from omnivault.config import ModelRetryConfig
from omnivault.errors import ClientError, ServerError
from omnivault.flow import (
    BlockingStrategy,
    CallState,
    DeferredStrategy,
    FutureStrategy,
    ResponseHandle,
    as_asyncio,
)
from omnivault.models import ModelCallDescriptor


@pytest.fixture
def descriptor() -> ModelCallDescriptor:
    """Provide a call descriptor."""
    return ModelCallDescriptor(operation="test.call", method="GET", path="secret/data/app")


@pytest.fixture
def no_retry() -> ModelRetryConfig:
    """Provide a retry policy that never retries."""
    return ModelRetryConfig(max_retry_duration=0.0)


class TestBlockingStrategy:
    """Test BlockingStrategy semantics."""

    def test_invoke_returns_reported_value(self, descriptor: ModelCallDescriptor) -> None:
        """Test invoke returns the value passed to on_success."""
        strategy = BlockingStrategy()

        result = strategy.invoke(
            descriptor, lambda state: strategy.on_success(state, {"value": 42})
        )

        assert result == {"value": 42}

    def test_invoke_raises_terminal_error(self, descriptor: ModelCallDescriptor) -> None:
        """Test a terminal error is raised to the caller."""
        strategy = BlockingStrategy()
        error = ClientError("permission denied", status=400)

        with pytest.raises(ClientError) as exc_info:
            strategy.invoke(descriptor, lambda state: strategy.on_error(state, error))

        assert exc_info.value is error

    def test_exception_in_attempt_is_reported_as_error(
        self, descriptor: ModelCallDescriptor
    ) -> None:
        """Test an exception raised by attempt_fn resolves the call with it."""
        strategy = BlockingStrategy()

        def attempt(state: CallState) -> None:
            raise ValueError("bad input")

        with pytest.raises(ValueError, match="bad input"):
            strategy.invoke(descriptor, attempt)

    def test_invoke_waits_for_report_from_another_thread(
        self, descriptor: ModelCallDescriptor
    ) -> None:
        """Test invoke blocks until a background thread reports."""
        strategy = BlockingStrategy()

        def attempt(state: CallState) -> None:
            threading.Timer(0.02, strategy.on_success, args=(state, "late")).start()

        assert strategy.invoke(descriptor, attempt) == "late"

    def test_duplicate_reports_resolve_once(self, descriptor: ModelCallDescriptor) -> None:
        """Test only the first report of an attempt counts."""
        strategy = BlockingStrategy()

        def attempt(state: CallState) -> None:
            strategy.on_success(state, "first")
            strategy.on_success(state, "second")
            strategy.on_error(state, ClientError("ignored", status=400))

        assert strategy.invoke(descriptor, attempt) == "first"

    def test_await_result_passes_plain_values_through(self) -> None:
        """Test await_result on a plain value returns it unchanged."""
        strategy = BlockingStrategy()

        assert strategy.await_result({"a": 1}) == {"a": 1}

    def test_await_result_on_pending_handle_times_out(self) -> None:
        """Test await_result on a pending handle returns the timeout value."""
        strategy = BlockingStrategy()

        result = strategy.await_result(ResponseHandle(), timeout=0.01, timeout_value="timeout")

        assert result == "timeout"


class TestDeferredStrategy:
    """Test DeferredStrategy semantics."""

    def test_invoke_returns_handle(self, descriptor: ModelCallDescriptor) -> None:
        """Test invoke returns a ResponseHandle resolved with the value."""
        strategy = DeferredStrategy()

        handle = strategy.invoke(descriptor, lambda state: strategy.on_success(state, "ok"))

        assert isinstance(handle, ResponseHandle)
        assert strategy.await_result(handle) == "ok"

    def test_terminal_error_returned_as_value(self, descriptor: ModelCallDescriptor) -> None:
        """Test a terminal error is returned by await_result, not raised."""
        strategy = DeferredStrategy()
        error = ClientError("invalid path", status=400)

        handle = strategy.invoke(descriptor, lambda state: strategy.on_error(state, error))

        assert strategy.await_result(handle) is error

    def test_raise_errors_raises_terminal_error(
        self, descriptor: ModelCallDescriptor
    ) -> None:
        """Test raise_errors=True raises the terminal error."""
        strategy = DeferredStrategy()
        error = ClientError("invalid path", status=400)

        handle = strategy.invoke(descriptor, lambda state: strategy.on_error(state, error))

        with pytest.raises(ClientError):
            strategy.await_result(handle, raise_errors=True)

    def test_timeout_returns_sentinel_and_call_continues(
        self, descriptor: ModelCallDescriptor
    ) -> None:
        """Test a timeout returns the sentinel without cancelling the call."""
        strategy = DeferredStrategy()
        captured: list[CallState] = []

        handle = strategy.invoke(descriptor, captured.append)

        assert strategy.await_result(handle, timeout=0.01, timeout_value="timeout") == "timeout"

        strategy.on_success(captured[0], "eventually")
        assert strategy.await_result(handle, timeout=1.0) == "eventually"

    def test_invoke_does_not_block_on_retries(
        self, descriptor: ModelCallDescriptor
    ) -> None:
        """Test a retryable error schedules a retry without blocking invoke."""
        strategy = DeferredStrategy(
            ModelRetryConfig(retry_interval=0.05, max_retry_duration=5.0)
        )
        calls: list[int] = []

        def attempt(state: CallState) -> None:
            calls.append(state.attempts)
            if state.attempts == 1:
                strategy.on_error(state, ServerError("sealed", status=503))
            else:
                strategy.on_success(state, "recovered")

        handle = strategy.invoke(descriptor, attempt)

        assert handle.done() is False
        assert strategy.await_result(handle, timeout=2.0) == "recovered"
        assert calls == [1, 2]


class TestFutureStrategy:
    """Test FutureStrategy semantics."""

    def test_invoke_returns_future(self, descriptor: ModelCallDescriptor) -> None:
        """Test invoke returns a resolved concurrent.futures.Future."""
        strategy = FutureStrategy()

        future = strategy.invoke(descriptor, lambda state: strategy.on_success(state, 7))

        assert isinstance(future, Future)
        assert future.result(timeout=1.0) == 7
        assert strategy.await_result(future) == 7

    def test_terminal_error_raises_on_result(
        self, descriptor: ModelCallDescriptor, no_retry: ModelRetryConfig
    ) -> None:
        """Test a terminal error raises when the result is accessed."""
        strategy = FutureStrategy(no_retry)
        error = ServerError("internal error", status=500)

        future = strategy.invoke(descriptor, lambda state: strategy.on_error(state, error))

        with pytest.raises(ServerError):
            future.result(timeout=1.0)
        with pytest.raises(ServerError):
            strategy.await_result(future)

    def test_timeout_returns_sentinel(self, descriptor: ModelCallDescriptor) -> None:
        """Test await_result on a pending future returns the timeout value."""
        strategy = FutureStrategy()

        future = strategy.invoke(descriptor, lambda state: None)

        assert strategy.await_result(future, timeout=0.01, timeout_value="timeout") == "timeout"
        assert future.running() is True

    def test_composes_with_concurrent_futures_wait(
        self, descriptor: ModelCallDescriptor
    ) -> None:
        """Test futures from several calls can be waited on together."""
        strategy = FutureStrategy()

        def attempt(state: CallState) -> None:
            threading.Timer(0.01, strategy.on_success, args=(state, state.attempts)).start()

        futures = [strategy.invoke(descriptor, attempt) for _ in range(3)]
        done, not_done = wait(futures, timeout=2.0)

        assert len(done) == 3
        assert not not_done

    @pytest.mark.asyncio
    async def test_as_asyncio_awaits_result(self, descriptor: ModelCallDescriptor) -> None:
        """Test a strategy future can be awaited from asyncio code."""
        strategy = FutureStrategy()

        def attempt(state: CallState) -> None:
            threading.Timer(0.01, strategy.on_success, args=(state, "async-ok")).start()

        future = strategy.invoke(descriptor, attempt)

        assert await as_asyncio(future) == "async-ok"
