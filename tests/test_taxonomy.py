"""Tests for the canonical taxonomy and raw feed types."""

import pytest
from pydantic import ValidationError

from transit_norm.schemas.taxonomy import (
    BLACK,
    BLUE,
    TRANSPARENT,
    UNKNOWN_PLACE,
    WHITE,
    YELLOW,
    Line,
    LineAttr,
    PlacePair,
    Product,
    Shape,
    Style,
    argb,
    blue,
    derive_foreground_color,
    green,
    parse_color,
    perceived_brightness,
    red,
    rgb,
)
from transit_norm.types.raw_feed import RawLineHints


class TestProduct:
    """Tests for Product codes and ordering."""

    @pytest.mark.parametrize(
        ("code", "product"),
        [
            ("I", Product.HIGH_SPEED_TRAIN),
            ("R", Product.REGIONAL_TRAIN),
            ("S", Product.SUBURBAN_TRAIN),
            ("U", Product.SUBWAY),
            ("T", Product.TRAM),
            ("B", Product.BUS),
            ("P", Product.ON_DEMAND),
            ("F", Product.FERRY),
            ("C", Product.CABLECAR),
            ("?", Product.UNKNOWN),
        ],
    )
    def test_from_code_and_code_are_inverse(self, code: str, product: Product) -> None:
        """Test that every product code parses to its product and back."""
        assert Product.from_code(code) is product
        assert product.code == code

    def test_from_code_rejects_unknown_code(self) -> None:
        """Test that an unknown code raises ValueError."""
        with pytest.raises(ValueError, match="Unknown product code: 'X'"):
            Product.from_code("X")

    def test_order_follows_display_order(self) -> None:
        """Test that trains sort before buses and UNKNOWN sorts last."""
        ordered = sorted(Product, key=lambda product: product.order)
        assert ordered[0] is Product.HIGH_SPEED_TRAIN
        assert ordered[-1] is Product.UNKNOWN
        assert Product.SUBWAY.order < Product.BUS.order


class TestColors:
    """Tests for color parsing and brightness helpers."""

    def test_parse_six_digit_color_is_opaque(self) -> None:
        assert parse_color("#123456") == 0xFF123456

    def test_parse_eight_digit_color_keeps_alpha(self) -> None:
        assert parse_color("#80123456") == 0x80123456

    def test_parse_color_without_hash_raises(self) -> None:
        with pytest.raises(ValueError, match="Unknown color"):
            parse_color("123456")

    def test_parse_color_with_bad_digits_raises(self) -> None:
        with pytest.raises(ValueError, match="Not a number"):
            parse_color("#12345g")

    def test_channel_helpers(self) -> None:
        """Test packing and unpacking channels."""
        color = rgb(0x12, 0x34, 0x56)
        assert color == 0xFF123456
        assert argb(0, 0x12, 0x34, 0x56) == 0x00123456
        assert (red(color), green(color), blue(color)) == (0x12, 0x34, 0x56)

    def test_perceived_brightness_range(self) -> None:
        assert perceived_brightness(BLACK) == 0.0
        assert perceived_brightness(WHITE) == pytest.approx(255 / 256)

    def test_derive_foreground_for_light_background_is_black(self) -> None:
        assert derive_foreground_color(YELLOW) == BLACK

    def test_derive_foreground_for_dark_background_is_white(self) -> None:
        assert derive_foreground_color(BLUE) == WHITE


class TestStyle:
    """Tests for the Style model."""

    def test_foreground_derived_when_missing(self) -> None:
        """Test that a missing foreground is derived from the background."""
        assert Style(background="#FFFF00").foreground == BLACK
        assert Style(background="#123456").foreground == WHITE

    def test_explicit_none_foreground_is_derived(self) -> None:
        assert Style(background=BLUE, foreground=None).foreground == WHITE

    def test_explicit_foreground_is_kept(self) -> None:
        assert Style(background="#FFFF00", foreground="#FF0000").foreground == 0xFFFF0000

    def test_defaults(self) -> None:
        style = Style(background=BLUE)
        assert style.shape is Shape.ROUNDED
        assert style.background2 == TRANSPARENT
        assert not style.has_border

    def test_rejects_out_of_range_color(self) -> None:
        with pytest.raises(ValidationError):
            Style(background=-1)

    def test_rejects_invalid_color_string(self) -> None:
        with pytest.raises(ValidationError, match="Unknown color"):
            Style(background="red")

    def test_is_frozen(self) -> None:
        style = Style(background=BLUE)
        with pytest.raises(ValidationError):
            style.background = WHITE  # type: ignore[misc]

    def test_to_hex(self) -> None:
        """Test rendering colors as #aarrggbb strings."""
        style = Style(shape=Shape.RECT, background="#123456", border="#FF0000")
        assert style.to_hex() == {
            "shape": "rect",
            "background": "#ff123456",
            "background2": None,
            "foreground": "#ffffffff",
            "border": "#ffff0000",
        }


class TestLine:
    """Tests for the Line model."""

    def test_unknown_product_is_filtered(self) -> None:
        assert Line(product=Product.UNKNOWN).is_filtered
        assert not Line(product=Product.BUS, label="12").is_filtered

    def test_has_attr(self) -> None:
        line = Line(product=Product.BUS, label="SEV", attrs=frozenset({LineAttr.SERVICE_REPLACEMENT}))
        assert line.has_attr(LineAttr.SERVICE_REPLACEMENT)
        assert not line.has_attr(LineAttr.LINE_AIRPORT)

    def test_sort_key_orders_by_product_then_label(self) -> None:
        lines = [
            Line(product=Product.BUS, label="12"),
            Line(product=Product.SUBURBAN_TRAIN, label="S2"),
            Line(product=Product.BUS, label="1"),
            Line(product=Product.HIGH_SPEED_TRAIN, label=None),
        ]
        labels = [line.label for line in sorted(lines, key=lambda line: line.sort_key)]
        assert labels == [None, "S2", "1", "12"]


class TestPlacePair:
    """Tests for PlacePair."""

    def test_default_place_is_unknown(self) -> None:
        pair = PlacePair(name="Hauptbahnhof")
        assert pair.place == UNKNOWN_PLACE
        assert not pair.has_place

    def test_has_place(self) -> None:
        assert PlacePair(place="Aachen", name="Hauptbahnhof").has_place


class TestRawLineHints:
    """Tests for RawLineHints."""

    def test_blank_hints_are_none(self) -> None:
        hints = RawLineHints(symbol="  ", short_name="", long_name=" Express ")
        assert hints.symbol is None
        assert hints.short_name is None
        assert hints.long_name == "Express"

    def test_hint_by_field_name(self) -> None:
        assert RawLineHints(category_type="ICE").hint("category_type") == "ICE"

    def test_hint_rejects_unknown_field(self) -> None:
        with pytest.raises(ValueError, match="Unknown hint field: 'mode'"):
            RawLineHints(mode=1).hint("mode")

    def test_describe(self) -> None:
        assert RawLineHints(mode=3, symbol="S1").describe() == "mode=3, symbol='S1'"
        assert RawLineHints().describe() == "no hints"
