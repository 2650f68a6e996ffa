"""Pytest configuration and fixtures."""

import os

# Keep test runs independent of the developer's environment
# This must be done before transit_norm.core.config loads settings
os.environ["OTEL_ENABLED"] = "false"
os.environ["NETWORK_CATALOG_PATH"] = ""
os.environ["LOG_LEVEL"] = "INFO"

from collections.abc import Generator

import pytest

from transit_norm.schemas.network_config import NetworkConfig
from transit_norm.services.adapter_registry import AdapterRegistry, reset_registry
from transit_norm.services.adapter_service import NetworkAdapter

from tests.fixtures.otel import otel_enabled_provider, reset_tracer_provider  # noqa: F401
from tests.helpers.network_data import make_config


@pytest.fixture
def demo_config() -> NetworkConfig:
    """Small network configuration used across service tests."""
    return make_config()


@pytest.fixture
def demo_adapter(demo_config: NetworkConfig) -> NetworkAdapter:
    return NetworkAdapter(demo_config)


@pytest.fixture
def demo_registry(demo_config: NetworkConfig) -> AdapterRegistry:
    """Registry with the demo network and a second network, holding at most two adapters."""
    other = make_config(network_id="other", products="B")
    return AdapterRegistry({"demo": demo_config, "other": other}, max_size=2)


@pytest.fixture(autouse=True)
def reset_process_registry() -> Generator[None]:
    """Discard the process-wide adapter registry around each test."""
    reset_registry()
    yield
    reset_registry()
