"""Test data factories for network configurations and raw hints."""

from typing import Any

from transit_norm.schemas.network_config import NetworkConfig
from transit_norm.types.raw_feed import RawLineHints


def make_hints(**overrides: Any) -> RawLineHints:
    """
    Build raw line hints.

    Args:
        **overrides: Hint fields to set (all default to None)

    Returns:
        RawLineHints
    """
    return RawLineHints(**overrides)


def make_config(**overrides: Any) -> NetworkConfig:
    """
    Build a small network configuration.

    The default product table maps index 0 to UNKNOWN (filtered), 1 to
    high speed trains, 2 to regional trains, 3 to suburban trains, 4 to
    trams and 5 to buses.

    Args:
        **overrides: Configuration fields to replace

    Returns:
        Validated NetworkConfig
    """
    data: dict[str, Any] = {
        "network_id": "demo",
        "products": "?IRSTB",
        "category_rules": [
            {"tag": "replacement", "when": {"long_name": "Schienenersatzverkehr"}, "product": "B", "label": "SEV"},
        ],
        "abbreviations": {"ME": "R"},
        "name_split": {"places": {"AC": "Aachen"}, "template": "first_comma"},
        "styles": {
            "B12": {"background": "#FFFF00"},
            "BN": {"background": "#000000"},
            "BSB": {"background": "#00919D", "foreground": "#FFFFFF"},
        },
        "style_prefixes": ["BSB"],
    }
    data.update(overrides)
    return NetworkConfig.model_validate(data)
