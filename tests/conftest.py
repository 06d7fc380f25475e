"""Shared pytest fixtures for the VTEX alert service tests."""
import sys
sys.dont_write_bytecode = True

import pytest  # noqa: E402

from helpers import FakeLogStore, FakeOrderClient, FakeSender, LogRecorder  # noqa: E402
from vtexalert.config import BlipConfig, Settings  # noqa: E402


@pytest.fixture
def settings() -> Settings:
    return Settings(
        blip=BlipConfig(
            endpoint="https://blip.example.com/commands",
            auth="Key test-blip-key",
            campaign_name_prefix="Hidramais",
            flow_id="flow-123",
            masterstate="master-456",
        ),
    )


@pytest.fixture
def log_store() -> FakeLogStore:
    return FakeLogStore()


@pytest.fixture
def order_client() -> FakeOrderClient:
    return FakeOrderClient()


@pytest.fixture
def sender() -> FakeSender:
    return FakeSender()


@pytest.fixture
def recorder() -> LogRecorder:
    return LogRecorder()
