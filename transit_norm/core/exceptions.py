"""Exceptions raised while normalizing raw feed fields."""

from __future__ import annotations

from typing import TYPE_CHECKING

if TYPE_CHECKING:
    from transit_norm.types.raw_feed import RawLineHints


class NormalizationError(Exception):
    """Base exception for normalization errors."""

    pass


class UnrecognizedCategoryError(NormalizationError):
    """Raised when no rule, product index or abbreviation classifies a line."""

    def __init__(self, hints: RawLineHints, network: str | None = None) -> None:
        self.hints = hints
        self.network = network
        where = f" on network '{network}'" if network else ""
        super().__init__(f"Unrecognized line category{where}: {hints.describe()}")


class UnmappedProductIndexError(NormalizationError):
    """Raised when a raw mode index falls outside the network's product table."""

    def __init__(self, index: int, network: str, table_size: int) -> None:
        self.index = index
        self.network = network
        self.table_size = table_size
        coverage = f"table covers 0..{table_size - 1}" if table_size else "table is empty"
        super().__init__(f"Product index {index} is not mapped for network '{network}' ({coverage})")


class UnknownNetworkError(NormalizationError):
    """Raised when the registry has no configuration for a network id."""

    def __init__(self, network_id: str, available: list[str] | None = None) -> None:
        self.network_id = network_id
        self.available = available or []
        message = f"Unknown network '{network_id}'"
        if self.available:
            message += f". Available networks: {', '.join(self.available)}"
        super().__init__(message)
