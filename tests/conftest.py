# SPDX-License-Identifier: MIT
# Copyright (c) 2025 OmniNode Team
"""Pytest configuration and shared fixtures for omnivault tests."""

from __future__ import annotations

import json
import threading
from collections.abc import Callable, Generator
from concurrent.futures import Executor, Future
from typing import Any
from unittest.mock import MagicMock

import pytest
import requests
from pydantic import SecretStr

from omnivault.client import VaultClient
from omnivault.config import ModelRetryConfig, ModelVaultClientConfig
from omnivault.models import ModelLeaseCallbacks, ModelLeaseRecord
from omnivault.transport import VaultTransport

# =============================================================================
# Test Doubles
# =============================================================================


class FakeClock:
    """Manually advanced wall clock (epoch seconds)."""

    def __init__(self, start: float = 1_700_000_000.0) -> None:
        self.now = start
        self.start = start
        self._lock = threading.Lock()

    def __call__(self) -> float:
        with self._lock:
            return self.now

    def advance(self, seconds: float) -> float:
        with self._lock:
            self.now += seconds
            return self.now

    def set_elapsed(self, seconds: float) -> float:
        """Set the clock to ``start + seconds``."""
        with self._lock:
            self.now = self.start + seconds
            return self.now


class ImmediateExecutor(Executor):
    """Executor running every submitted callable inline."""

    def submit(self, fn: Callable[..., Any], /, *args: Any, **kwargs: Any) -> Future[Any]:
        future: Future[Any] = Future()
        try:
            result = fn(*args, **kwargs)
        except BaseException as e:
            future.set_exception(e)
        else:
            future.set_result(result)
        return future


def make_raw_response(
    status: int,
    body: dict[str, Any] | None = None,
    headers: dict[str, str] | None = None,
    text: str | None = None,
) -> MagicMock:
    """Build a mocked ``requests.Response`` as returned by hvac's RawAdapter."""
    response = MagicMock(spec=requests.Response)
    response.status_code = status
    response.headers = headers or {}
    if text is not None:
        response.content = text.encode("utf-8")
        response.text = text
        response.json.side_effect = ValueError("Expecting value")
    elif body is None:
        response.content = b""
        response.text = ""
        response.json.side_effect = ValueError("Expecting value")
    else:
        payload = json.dumps(body)
        response.content = payload.encode("utf-8")
        response.text = payload
        response.json.return_value = body
    return response


# =============================================================================
# Fixtures
# =============================================================================


@pytest.fixture
def fake_clock() -> FakeClock:
    """Provide a manually advanced clock."""
    return FakeClock()


@pytest.fixture
def immediate_executor() -> ImmediateExecutor:
    """Provide an executor that runs callbacks inline."""
    return ImmediateExecutor()


@pytest.fixture
def fast_retry() -> ModelRetryConfig:
    """Provide a retry policy with short intervals for fast tests."""
    return ModelRetryConfig(retry_interval=0.01, max_retry_duration=0.2)


@pytest.fixture
def vault_config() -> dict[str, Any]:
    """Provide test Vault client configuration."""
    return {
        "url": "https://vault.example.com:8200",
        "token": "s.test1234567890",
        "namespace": "engineering",
        "timeout_seconds": 30.0,
        "verify_ssl": True,
        "check_jitter": 0.0,
        "max_retry_duration": 0.2,
        "retry_interval": 0.01,
    }


@pytest.fixture
def client_config(vault_config: dict[str, Any]) -> ModelVaultClientConfig:
    """Provide a validated client configuration."""
    return ModelVaultClientConfig.model_validate(
        {**vault_config, "token": SecretStr(vault_config["token"])}
    )


@pytest.fixture
def mock_transport() -> MagicMock:
    """Provide a mocked VaultTransport."""
    return MagicMock(spec=VaultTransport)


@pytest.fixture
def vault_client(
    client_config: ModelVaultClientConfig,
    mock_transport: MagicMock,
    immediate_executor: ImmediateExecutor,
    fake_clock: FakeClock,
) -> Generator[VaultClient, None, None]:
    """Provide a blocking client wired to a mocked transport."""
    client = VaultClient(
        client_config,
        transport=mock_transport,
        callback_executor=immediate_executor,
        clock=fake_clock,
    )
    yield client
    client.stop()


@pytest.fixture
def make_record(fake_clock: FakeClock) -> Callable[..., ModelLeaseRecord]:
    """Provide a factory for lease records issued at the fake clock's time."""

    def _make(
        key: str = "database:database:readonly",
        *,
        duration: float = 3600.0,
        renewable: bool = True,
        lease_id: str | None = "database/creds/readonly/abc123",
        value: Any = None,
        callbacks: ModelLeaseCallbacks | None = None,
        issued_at: float | None = None,
        **kwargs: Any,
    ) -> ModelLeaseRecord:
        return ModelLeaseRecord(
            key=key,
            lease_id=lease_id,
            value=value if value is not None else {"username": "v-user", "password": "pw"},
            issued_at=fake_clock() if issued_at is None else issued_at,
            duration=duration,
            renewable=renewable,
            callbacks=callbacks or ModelLeaseCallbacks(),
            **kwargs,
        )

    return _make


@pytest.fixture
def raw_response() -> Callable[..., MagicMock]:
    """Provide the mocked ``requests.Response`` factory."""
    return make_raw_response
