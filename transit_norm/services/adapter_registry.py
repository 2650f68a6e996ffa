"""Registry of network adapters with a bounded LRU cache."""

import enum
import threading
from collections import OrderedDict
from collections.abc import Mapping

import structlog

from transit_norm.core.config import settings
from transit_norm.core.exceptions import UnknownNetworkError
from transit_norm.networks.catalog import load_catalog
from transit_norm.schemas.network_config import NetworkConfig
from transit_norm.services.adapter_service import NetworkAdapter

logger = structlog.get_logger(__name__)


class AdapterRegistry:
    """
    Hands out one cached NetworkAdapter per network id.

    Repeated calls return the same adapter while it stays cached. The cache
    is a bounded LRU: the least recently used adapter is dropped once more
    than `max_size` networks are cached, and is rebuilt on its next use.

    Adapters are built outside the lock. When two threads build the same
    adapter concurrently, the first one stored wins and both get it.
    """

    def __init__(self, configs: Mapping[str, NetworkConfig], max_size: int | None = None) -> None:
        """
        Initialize registry with the available network configurations.

        Args:
            configs: Mapping of network id to configuration
            max_size: Maximum cached adapters (default: ADAPTER_CACHE_SIZE setting)

        Raises:
            ValueError: If max_size is less than 1
        """
        size = settings.ADAPTER_CACHE_SIZE if max_size is None else max_size
        if size < 1:
            msg = f"Adapter cache size must be at least 1, got {size}"
            raise ValueError(msg)
        self.max_size = size
        self._configs = dict(configs)
        self._cache: OrderedDict[str, NetworkAdapter] = OrderedDict()
        self._lock = threading.Lock()

    def __contains__(self, network_id: object) -> bool:
        return isinstance(network_id, str) and _key(network_id) in self._configs

    def available_networks(self) -> list[str]:
        return sorted(self._configs)

    def cached_ids(self) -> list[str]:
        """Cached network ids, least recently used first."""
        with self._lock:
            return list(self._cache)

    def get(self, network_id: str) -> NetworkAdapter:
        """
        Get the adapter for a network, building it on first use.

        Args:
            network_id: Network identifier (a NetworkId member or its value)

        Returns:
            The cached adapter for the network

        Raises:
            UnknownNetworkError: If no configuration exists for the id
        """
        network_id = _key(network_id)
        with self._lock:
            if (adapter := self._cache.get(network_id)) is not None:
                self._cache.move_to_end(network_id)
                return adapter

        if (config := self._configs.get(network_id)) is None:
            raise UnknownNetworkError(network_id, self.available_networks())

        built = NetworkAdapter(config)

        with self._lock:
            if (adapter := self._cache.get(network_id)) is not None:
                # Another thread stored one first
                self._cache.move_to_end(network_id)
                return adapter
            self._cache[network_id] = built
            while len(self._cache) > self.max_size:
                evicted, _ = self._cache.popitem(last=False)
                logger.debug("adapter_evicted", network=evicted, max_size=self.max_size)

        logger.debug("adapter_created", network=network_id)
        return built

    def clear(self) -> None:
        """Drop all cached adapters."""
        with self._lock:
            self._cache.clear()


def _key(network_id: str) -> str:
    """Plain string key for a network id; NetworkId members hash by name, not value."""
    if isinstance(network_id, enum.Enum):
        return str(network_id.value)
    return network_id


# Module-level globals for lazy initialization
_registry: AdapterRegistry | None = None
_registry_lock = threading.Lock()


def get_registry() -> AdapterRegistry:
    """
    Get or create the process-wide registry (lazy initialization).

    Built from the network catalog, including the NETWORK_CATALOG_PATH file
    when configured. Thread-safe via double-checked locking.

    Returns:
        AdapterRegistry: Shared registry
    """
    global _registry  # noqa: PLW0603
    if _registry is None:
        with _registry_lock:
            if _registry is None:  # Double-checked locking
                catalog = load_catalog(settings.NETWORK_CATALOG_PATH)
                _registry = AdapterRegistry(catalog, max_size=settings.ADAPTER_CACHE_SIZE)
                logger.info("adapter_registry_created", network_count=len(catalog), max_size=_registry.max_size)
    return _registry


def get_adapter(network_id: str) -> NetworkAdapter:
    """Get an adapter from the process-wide registry."""
    return get_registry().get(network_id)


def reset_registry() -> None:
    """Discard the process-wide registry so the next call rebuilds it from current settings."""
    global _registry  # noqa: PLW0603
    with _registry_lock:
        _registry = None
