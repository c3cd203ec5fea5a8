"""Shared fixtures."""

import pytest

from tests.fakes import BASE_URL, FakeClock, FakeHttp, login_response
from wallosctl.client import WallosClient


@pytest.fixture
def http() -> FakeHttp:
    fake = FakeHttp()
    fake.route("POST", "/login.php", login_response())
    return fake


@pytest.fixture
def clock() -> FakeClock:
    return FakeClock()


@pytest.fixture
def client(http: FakeHttp, clock: FakeClock) -> WallosClient:
    return WallosClient(
        BASE_URL,
        api_key="key-123",
        username="admin",
        password="secret",
        http=http,
        clock=clock,
    )
