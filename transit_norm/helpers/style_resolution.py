"""
Style resolution helpers.

Style keys are the product code followed by the label ("B12", "UVictoria").
Resolution is total and tries, in order:

1. The network's own table: exact key, configured key prefixes, the
   product-wide key ("B") and the night bus key ("BN") for bus labels
   starting with "N"
2. The shared table of fixed-iconography lines (London Underground etc.)
3. The per-product default style
4. The global fallback style
"""

from collections.abc import Mapping
from types import MappingProxyType

from transit_norm.schemas.network_config import NetworkConfig
from transit_norm.schemas.taxonomy import (
    BLACK,
    BLUE,
    DKGRAY,
    GRAY,
    RED,
    WHITE,
    Line,
    Product,
    Shape,
    Style,
)

FALLBACK_STYLE = Style(shape=Shape.ROUNDED, background=DKGRAY, foreground=WHITE)

STANDARD_STYLES: Mapping[Product, Style] = MappingProxyType(
    {
        Product.HIGH_SPEED_TRAIN: Style(shape=Shape.RECT, background=WHITE, foreground=RED, border=RED),
        Product.REGIONAL_TRAIN: Style(shape=Shape.RECT, background=GRAY, foreground=WHITE),
        Product.SUBURBAN_TRAIN: Style(shape=Shape.CIRCLE, background="#006e34", foreground=WHITE),
        Product.SUBWAY: Style(shape=Shape.RECT, background="#003090", foreground=WHITE),
        Product.TRAM: Style(shape=Shape.RECT, background="#cc0000", foreground=WHITE),
        Product.BUS: Style(background="#993399", foreground=WHITE),
        Product.ON_DEMAND: Style(background="#00695c", foreground=WHITE),
        Product.FERRY: Style(shape=Shape.CIRCLE, background=BLUE, foreground=WHITE),
        Product.UNKNOWN: Style(background=DKGRAY, foreground=WHITE),
    }
)

# Lines with the same iconography on every network that serves them
SHARED_LINE_STYLES: Mapping[str, Style] = MappingProxyType(
    {
        # London Underground
        "UBakerloo": Style(shape=Shape.RECT, background="#B36305", foreground=WHITE),
        "UCentral": Style(shape=Shape.RECT, background="#E32017", foreground=WHITE),
        "UCircle": Style(shape=Shape.RECT, background="#FFD300", foreground=BLACK),
        "UDistrict": Style(shape=Shape.RECT, background="#00782A", foreground=WHITE),
        "UHammersmith & City": Style(shape=Shape.RECT, background="#F3A9BB", foreground=BLACK),
        "UJubilee": Style(shape=Shape.RECT, background="#A0A5A9", foreground=WHITE),
        "UMetropolitan": Style(shape=Shape.RECT, background="#9B0056", foreground=WHITE),
        "UNorthern": Style(shape=Shape.RECT, background=BLACK, foreground=WHITE),
        "UPiccadilly": Style(shape=Shape.RECT, background="#003688", foreground=WHITE),
        "UVictoria": Style(shape=Shape.RECT, background="#0098D4", foreground=WHITE),
        "UWaterloo & City": Style(shape=Shape.RECT, background="#95CDBA", foreground=BLACK),
        # Rail
        "SDLR": Style(shape=Shape.RECT, background="#00A4A7", foreground=WHITE),
        "SElizabeth": Style(shape=Shape.RECT, background="#6950A1", foreground=WHITE),
        "SLO": Style(shape=Shape.RECT, background="#EE7C0E", foreground=WHITE),
        # Trams
        "TTramlink": Style(shape=Shape.RECT, background="#84B817", foreground=WHITE),
    }
)

SHARED_STYLE_PREFIXES: tuple[str, ...] = ("SLO", "TTramlink")


def style_key(label: str | None, product: Product | None) -> str:
    """
    Build the style table key for a label.

    Examples:
        >>> style_key("12", Product.BUS)
        'B12'
        >>> style_key("B12", None)
        'B12'
    """
    return (product.code if product is not None else "") + (label or "")


def product_for_key(key: str) -> Product | None:
    """Product encoded by the first character of a style key, if any."""
    if not key:
        return None
    try:
        return Product.from_code(key[0])
    except ValueError:
        return None


def _match_prefix(key: str, prefixes: tuple[str, ...], table: Mapping[str, Style]) -> Style | None:
    for prefix in prefixes:
        if key.startswith(prefix) and prefix in table:
            return table[prefix]
    return None


class StyleResolver:
    """Resolves line styles for one network. Never returns None."""

    def __init__(self, config: NetworkConfig) -> None:
        self.config = config

    def resolve(self, line: Line) -> Style:
        return self.resolve_label(line.label, line.product)

    def resolve_label(self, label: str | None, product: Product | None = None) -> Style:
        """
        Resolve a style for a label where no full Line is available.

        Args:
            label: Line label ("12"), or a full style key ("B12") when product is None
            product: Product of the line, if known

        Returns:
            The most specific configured style
        """
        key = style_key(label, product)
        if product is None:
            product = product_for_key(key)
        styles = self.config.styles

        if key and (style := styles.get(key)) is not None:
            return style
        if key and (style := _match_prefix(key, self.config.style_prefixes, styles)) is not None:
            return style
        if product is not None:
            if (style := styles.get(product.code)) is not None:
                return style
            if product is Product.BUS and key[1:].startswith("N") and (style := styles.get("BN")) is not None:
                return style

        if key and (style := SHARED_LINE_STYLES.get(key)) is not None:
            return style
        if key and (style := _match_prefix(key, SHARED_STYLE_PREFIXES, SHARED_LINE_STYLES)) is not None:
            return style

        if product is not None and (style := STANDARD_STYLES.get(product)) is not None:
            return style
        return FALLBACK_STYLE
