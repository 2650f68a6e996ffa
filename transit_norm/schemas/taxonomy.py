"""Canonical transit taxonomy: products, lines, styles and place pairs."""

import enum
from typing import Any

from pydantic import BaseModel, ConfigDict, Field, field_validator, model_validator

# ==================== Products ====================


class Product(str, enum.Enum):
    """Canonical transport product.

    UNKNOWN is a meaningful value: the network explicitly filters that mode.
    """

    HIGH_SPEED_TRAIN = "high_speed_train"
    REGIONAL_TRAIN = "regional_train"
    SUBURBAN_TRAIN = "suburban_train"
    SUBWAY = "subway"
    TRAM = "tram"
    BUS = "bus"
    ON_DEMAND = "on_demand"
    FERRY = "ferry"
    CABLECAR = "cablecar"
    UNKNOWN = "unknown"

    @property
    def code(self) -> str:
        """One-character product code (e.g. 'I' for high speed trains)."""
        return _PRODUCT_CODES[self]

    @property
    def order(self) -> int:
        """Display order position, following PRODUCT_ORDER."""
        return PRODUCT_ORDER.index(self.code)

    @classmethod
    def from_code(cls, code: str) -> "Product":
        """
        Parse a one-character product code.

        Raises:
            ValueError: If the code is not a known product code

        Examples:
            >>> Product.from_code("S")
            <Product.SUBURBAN_TRAIN: 'suburban_train'>
        """
        for product, product_code in _PRODUCT_CODES.items():
            if product_code == code:
                return product
        msg = f"Unknown product code: {code!r}"
        raise ValueError(msg)


_PRODUCT_CODES: dict[Product, str] = {
    Product.HIGH_SPEED_TRAIN: "I",
    Product.REGIONAL_TRAIN: "R",
    Product.SUBURBAN_TRAIN: "S",
    Product.SUBWAY: "U",
    Product.TRAM: "T",
    Product.BUS: "B",
    Product.ON_DEMAND: "P",
    Product.FERRY: "F",
    Product.CABLECAR: "C",
    Product.UNKNOWN: "?",
}

PRODUCT_ORDER = "IRSUTBPFC?"

TRAIN_PRODUCTS: frozenset[Product] = frozenset(
    {Product.HIGH_SPEED_TRAIN, Product.REGIONAL_TRAIN, Product.SUBURBAN_TRAIN}
)

# ==================== Colors ====================

BLACK = 0xFF000000
DKGRAY = 0xFF444444
GRAY = 0xFF888888
LTGRAY = 0xFFCCCCCC
WHITE = 0xFFFFFFFF
RED = 0xFFFF0000
GREEN = 0xFF00FF00
BLUE = 0xFF0000FF
YELLOW = 0xFFFFFF00
CYAN = 0xFF00FFFF
MAGENTA = 0xFFFF00FF
TRANSPARENT = 0


def parse_color(value: str) -> int:
    """
    Parse a '#rrggbb' or '#aarrggbb' color string into a 32-bit ARGB integer.

    Six-digit colors are fully opaque.

    Args:
        value: Color string starting with '#'

    Returns:
        ARGB integer

    Raises:
        ValueError: If the string is not a valid color

    Examples:
        >>> hex(parse_color("#123456"))
        '0xff123456'
        >>> hex(parse_color("#80123456"))
        '0x80123456'
    """
    if not (len(value) in (7, 9) and value.startswith("#")):
        msg = f"Unknown color: {value!r}"
        raise ValueError(msg)
    try:
        color = int(value[1:], 16)
    except ValueError as e:
        msg = f"Not a number: {value!r}"
        raise ValueError(msg) from e
    if len(value) == 7:
        color |= 0xFF000000
    return color


def argb(alpha: int, red: int, green: int, blue: int) -> int:
    """Pack channel values (0-255) into an ARGB integer."""
    return (alpha << 24) | (red << 16) | (green << 8) | blue


def rgb(red: int, green: int, blue: int) -> int:
    """Pack channel values into a fully opaque ARGB integer."""
    return argb(0xFF, red, green, blue)


def red(color: int) -> int:
    return (color >> 16) & 0xFF


def green(color: int) -> int:
    return (color >> 8) & 0xFF


def blue(color: int) -> int:
    return color & 0xFF


def perceived_brightness(color: int) -> float:
    """
    Perceived brightness of a color in the range [0, 1).

    Uses the W3C AERT weighting of the red, green and blue channels.

    Examples:
        >>> perceived_brightness(BLACK)
        0.0
        >>> round(perceived_brightness(WHITE), 3)
        0.996
    """
    return (0.299 * red(color) + 0.587 * green(color) + 0.114 * blue(color)) / 256


def derive_foreground_color(background: int) -> int:
    """
    Pick a readable text color for a background.

    Examples:
        >>> derive_foreground_color(rgb(33, 110, 180)) == WHITE
        True
        >>> derive_foreground_color(rgb(242, 201, 49)) == BLACK
        True
    """
    if perceived_brightness(background) < 0.5:
        return WHITE
    return BLACK


def _coerce_color(value: Any) -> Any:
    if isinstance(value, str):
        return parse_color(value)
    return value


# ==================== Styles ====================


class Shape(str, enum.Enum):
    """Badge shape used when rendering a line label."""

    RECT = "rect"
    ROUNDED = "rounded"
    CIRCLE = "circle"


class Style(BaseModel):
    """Visual style of a line badge.

    Colors are ARGB integers; '#rrggbb' and '#aarrggbb' strings are accepted
    on construction. When no foreground is given it is derived from the
    background's brightness.
    """

    model_config = ConfigDict(frozen=True)

    shape: Shape = Shape.ROUNDED
    background: int = Field(..., ge=0, le=0xFFFFFFFF)
    background2: int = Field(default=TRANSPARENT, ge=0, le=0xFFFFFFFF)  # Second color for split badges
    foreground: int = Field(default=BLACK, ge=0, le=0xFFFFFFFF)
    border: int = Field(default=TRANSPARENT, ge=0, le=0xFFFFFFFF)  # TRANSPARENT = no border

    @field_validator("background", "background2", "foreground", "border", mode="before")
    @classmethod
    def parse_color_strings(cls, v: Any) -> Any:
        """Accept hex color strings for any color field."""
        return _coerce_color(v)

    @model_validator(mode="before")
    @classmethod
    def derive_missing_foreground(cls, data: Any) -> Any:
        """Fill in a readable foreground when only a background is given."""
        if isinstance(data, dict) and data.get("foreground") is None and data.get("background") is not None:
            data = {**data, "foreground": derive_foreground_color(_coerce_color(data["background"]))}
        return data

    @property
    def has_border(self) -> bool:
        return self.border != TRANSPARENT

    def to_hex(self) -> dict[str, str | None]:
        """
        Render the style with '#aarrggbb' color strings.

        Returns:
            Mapping of field name to hex color (None for unset optional colors)
            plus the shape name
        """
        return {
            "shape": self.shape.value,
            "background": f"#{self.background:08x}",
            "background2": f"#{self.background2:08x}" if self.background2 != TRANSPARENT else None,
            "foreground": f"#{self.foreground:08x}",
            "border": f"#{self.border:08x}" if self.has_border else None,
        }


# ==================== Lines ====================


class LineAttr(str, enum.Enum):
    """Optional line attributes passed through from the feed."""

    CIRCLE_CLOCKWISE = "circle_clockwise"
    CIRCLE_ANTICLOCKWISE = "circle_anticlockwise"
    SERVICE_REPLACEMENT = "service_replacement"
    LINE_AIRPORT = "line_airport"
    WHEEL_CHAIR_ACCESS = "wheel_chair_access"
    BICYCLE_CARRIAGE = "bicycle_carriage"


class Line(BaseModel):
    """Canonical transit line."""

    model_config = ConfigDict(frozen=True)

    id: str | None = None  # Upstream line id, opaque
    network: str | None = None
    product: Product
    label: str | None = None  # Short badge text, e.g. "S1" or "ICE 599"
    name: str | None = None  # Long display name, e.g. "ICE 599 (599)"
    attrs: frozenset[LineAttr] = frozenset()

    @property
    def is_filtered(self) -> bool:
        """True when the network explicitly filters this line's mode."""
        return self.product is Product.UNKNOWN

    def has_attr(self, attr: LineAttr) -> bool:
        return attr in self.attrs

    @property
    def sort_key(self) -> tuple[int, str]:
        """Sort by product display order, then label."""
        return (self.product.order, self.label or "")


# ==================== Places ====================

UNKNOWN_PLACE = ""


class PlacePair(BaseModel):
    """A display string split into its place (town) and name parts."""

    model_config = ConfigDict(frozen=True)

    place: str = UNKNOWN_PLACE
    name: str

    @property
    def has_place(self) -> bool:
        return self.place != UNKNOWN_PLACE
