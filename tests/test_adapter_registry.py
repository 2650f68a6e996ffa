"""Tests for the adapter registry and its LRU cache."""

import json
import threading
from pathlib import Path

import pytest

from transit_norm.core.config import settings
from transit_norm.core.exceptions import UnknownNetworkError
from transit_norm.networks.catalog import NetworkId
from transit_norm.services import adapter_registry
from transit_norm.services.adapter_registry import AdapterRegistry, get_adapter, get_registry, reset_registry
from transit_norm.services.adapter_service import NetworkAdapter

from tests.helpers.network_data import make_config


def make_registry(*network_ids: str, max_size: int) -> AdapterRegistry:
    return AdapterRegistry({network_id: make_config(network_id=network_id) for network_id in network_ids}, max_size)


class TestAdapterRegistry:
    """Tests for AdapterRegistry.get and caching."""

    def test_get_returns_cached_instance(self, demo_registry: AdapterRegistry) -> None:
        adapter = demo_registry.get("demo")
        assert isinstance(adapter, NetworkAdapter)
        assert demo_registry.get("demo") is adapter
        assert demo_registry.get("other") is not adapter

    def test_unknown_network_raises(self, demo_registry: AdapterRegistry) -> None:
        with pytest.raises(UnknownNetworkError, match="Unknown network 'nowhere'. Available networks: demo, other"):
            demo_registry.get("nowhere")
        assert demo_registry.cached_ids() == []

    def test_contains(self, demo_registry: AdapterRegistry) -> None:
        assert "demo" in demo_registry
        assert "nowhere" not in demo_registry
        assert 42 not in demo_registry

    def test_available_networks_sorted(self) -> None:
        registry = make_registry("vrs", "avv_aachen", "bvg", max_size=3)
        assert registry.available_networks() == ["avv_aachen", "bvg", "vrs"]

    def test_least_recently_used_is_evicted(self) -> None:
        """Test that the adapter unused for longest is dropped when the cache is full."""
        registry = make_registry("a", "b", "c", max_size=2)
        first_a = registry.get("a")
        registry.get("b")
        registry.get("a")
        registry.get("c")

        assert registry.cached_ids() == ["a", "c"]
        assert registry.get("a") is first_a

    def test_evicted_adapter_is_rebuilt(self) -> None:
        registry = make_registry("a", "b", max_size=1)
        first_a = registry.get("a")
        registry.get("b")

        rebuilt = registry.get("a")
        assert rebuilt is not first_a
        assert rebuilt.network_id == "a"
        assert registry.cached_ids() == ["a"]

    def test_clear(self, demo_registry: AdapterRegistry) -> None:
        demo_registry.get("demo")
        demo_registry.clear()
        assert demo_registry.cached_ids() == []

    def test_rejects_non_positive_size(self) -> None:
        with pytest.raises(ValueError, match="at least 1"):
            make_registry("a", max_size=0)

    def test_default_size_from_settings(self, monkeypatch: pytest.MonkeyPatch) -> None:
        monkeypatch.setattr(settings, "ADAPTER_CACHE_SIZE", 5)
        assert AdapterRegistry({}).max_size == 5

    def test_enum_and_string_ids_share_an_adapter(self) -> None:
        registry = AdapterRegistry({"vrs": make_config(network_id="vrs")}, max_size=2)
        assert registry.get(NetworkId.VRS) is registry.get("vrs")
        assert NetworkId.VRS in registry
        assert registry.cached_ids() == ["vrs"]

    def test_concurrent_get_returns_one_instance(self) -> None:
        """Test that threads racing to build an adapter all receive the same instance."""
        registry = make_registry("demo", max_size=4)
        adapters: list[NetworkAdapter] = []
        barrier = threading.Barrier(10)

        def get_adapter_after_barrier() -> None:
            barrier.wait()
            adapters.append(registry.get("demo"))

        threads = [threading.Thread(target=get_adapter_after_barrier) for _ in range(10)]
        for thread in threads:
            thread.start()
        for thread in threads:
            thread.join()

        assert len(adapters) == 10
        assert all(adapter is adapters[0] for adapter in adapters)


class TestProcessRegistry:
    """Tests for the process-wide registry."""

    def test_get_registry_is_singleton(self) -> None:
        assert get_registry() is get_registry()

    def test_get_registry_uses_builtin_catalog(self) -> None:
        registry = get_registry()
        assert [network.value for network in NetworkId] == registry.available_networks()

    def test_get_adapter(self) -> None:
        adapter = get_adapter(NetworkId.MVV)
        assert adapter.network_id == "mvv"
        assert get_adapter("mvv") is adapter

    def test_reset_registry(self) -> None:
        registry = get_registry()
        reset_registry()
        assert adapter_registry._registry is None
        assert get_registry() is not registry

    def test_get_registry_merges_catalog_file(self, tmp_path: Path, monkeypatch: pytest.MonkeyPatch) -> None:
        path = tmp_path / "networks.json"
        path.write_text(json.dumps([{"network_id": "zz_demo", "products": "?B"}]), encoding="utf-8")
        monkeypatch.setattr(settings, "NETWORK_CATALOG_PATH", str(path))

        registry = get_registry()

        assert "zz_demo" in registry
        assert "vrs" in registry

    def test_get_registry_uses_cache_size_setting(self, monkeypatch: pytest.MonkeyPatch) -> None:
        monkeypatch.setattr(settings, "ADAPTER_CACHE_SIZE", 3)
        assert get_registry().max_size == 3
