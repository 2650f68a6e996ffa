"""Tests for line style resolution."""

import pytest

from transit_norm.helpers.style_resolution import (
    FALLBACK_STYLE,
    SHARED_LINE_STYLES,
    STANDARD_STYLES,
    StyleResolver,
    product_for_key,
    style_key,
)
from transit_norm.schemas.taxonomy import BLACK, Line, Product, Shape, Style

from tests.helpers.network_data import make_config


@pytest.fixture
def resolver() -> StyleResolver:
    """Resolver with styles B12, BN and the BSB prefix."""
    return StyleResolver(make_config())


class TestStyleKeys:
    """Tests for style key helpers."""

    def test_style_key(self) -> None:
        assert style_key("12", Product.BUS) == "B12"
        assert style_key(None, Product.BUS) == "B"
        assert style_key("B12", None) == "B12"
        assert style_key(None, None) == ""

    def test_product_for_key(self) -> None:
        assert product_for_key("SS1") is Product.SUBURBAN_TRAIN
        assert product_for_key("X1") is None
        assert product_for_key("") is None


class TestStyleResolver:
    """Tests for StyleResolver lookup order."""

    def test_exact_network_key(self, resolver: StyleResolver) -> None:
        assert resolver.resolve_label("12", Product.BUS).background == 0xFFFFFF00

    def test_exact_key_without_product(self, resolver: StyleResolver) -> None:
        assert resolver.resolve_label("B12").background == 0xFFFFFF00

    def test_network_prefix(self, resolver: StyleResolver) -> None:
        """Test that 'SB60' picks up the configured 'BSB' prefix style."""
        assert resolver.resolve_label("SB60", Product.BUS).background == 0xFF00919D

    def test_night_bus(self, resolver: StyleResolver) -> None:
        assert resolver.resolve_label("N5", Product.BUS).background == BLACK

    def test_night_bus_key_only_for_buses(self, resolver: StyleResolver) -> None:
        assert resolver.resolve_label("N5", Product.TRAM) == STANDARD_STYLES[Product.TRAM]

    def test_product_wide_key_before_night_bus(self) -> None:
        config = make_config(
            styles={"B": {"background": "#0000FF"}, "BN": {"background": "#000000"}},
            style_prefixes=[],
        )
        assert StyleResolver(config).resolve_label("N5", Product.BUS).background == 0xFF0000FF

    def test_shared_line_style(self, resolver: StyleResolver) -> None:
        assert resolver.resolve_label("Victoria", Product.SUBWAY) == SHARED_LINE_STYLES["UVictoria"]

    def test_shared_prefix_style(self, resolver: StyleResolver) -> None:
        assert resolver.resolve_label("LO Mildmay", Product.SUBURBAN_TRAIN) == SHARED_LINE_STYLES["SLO"]

    def test_network_style_overrides_shared(self) -> None:
        config = make_config(styles={"UVictoria": {"background": "#000000"}}, style_prefixes=[])
        assert StyleResolver(config).resolve_label("Victoria", Product.SUBWAY).background == BLACK

    def test_standard_style_per_product(self, resolver: StyleResolver) -> None:
        style = resolver.resolve_label("99", Product.BUS)
        assert style == STANDARD_STYLES[Product.BUS]
        assert style.shape is Shape.ROUNDED

    def test_fallback_for_product_without_default(self, resolver: StyleResolver) -> None:
        assert resolver.resolve_label("1", Product.CABLECAR) == FALLBACK_STYLE

    def test_fallback_without_label_or_product(self, resolver: StyleResolver) -> None:
        assert resolver.resolve_label(None) == FALLBACK_STYLE
        assert resolver.resolve_label("X12") == FALLBACK_STYLE

    @pytest.mark.parametrize("product", list(Product))
    def test_resolution_is_total(self, resolver: StyleResolver, product: Product) -> None:
        assert isinstance(resolver.resolve_label("zzz", product), Style)
        assert isinstance(resolver.resolve_label(None, product), Style)

    def test_resolve_line(self, resolver: StyleResolver) -> None:
        line = Line(product=Product.BUS, label="12")
        assert resolver.resolve(line) == resolver.resolve_label("12", Product.BUS)

    def test_high_speed_default_has_border(self, resolver: StyleResolver) -> None:
        assert resolver.resolve_label("ICE 599", Product.HIGH_SPEED_TRAIN).has_border
