"""
Shared fixtures for the gitignore client tests.

- clock: controllable epoch-millisecond clock
- sleeps: records backoff sleeps instead of waiting
- make_client: builds a ServiceClient over an httpx.MockTransport handler
"""

from typing import Callable

import httpx
import pytest

from gitignore_client.services import client as client_module
from gitignore_client.services.client import ServiceClient


class FakeClock:
    def __init__(self, now: int = 1_000_000):
        self.now = now

    def __call__(self) -> int:
        return self.now

    def advance(self, ms: int) -> None:
        self.now += ms


@pytest.fixture
def clock() -> FakeClock:
    return FakeClock()


@pytest.fixture
def sleeps(monkeypatch) -> list[float]:
    recorded: list[float] = []

    async def fake_sleep(seconds: float) -> None:
        recorded.append(seconds)

    monkeypatch.setattr(client_module, "_sleep", fake_sleep)
    return recorded


@pytest.fixture
def make_client() -> Callable[..., ServiceClient]:
    def factory(handler, **kwargs) -> ServiceClient:
        http_client = httpx.AsyncClient(transport=httpx.MockTransport(handler))
        return ServiceClient(http_client=http_client, **kwargs)

    return factory
