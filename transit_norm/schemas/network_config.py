"""Pydantic schemas for per-network adapter configuration.

Everything here is built once when an adapter is constructed and is
read-only afterwards: models are frozen, sequences are tuples and mappings
are wrapped in MappingProxyType.
"""

import enum
import re
import string
from collections.abc import Iterable, Mapping
from types import MappingProxyType
from typing import Any

from pydantic import BaseModel, ConfigDict, Field, RootModel, field_validator, model_validator

from transit_norm.core.exceptions import UnmappedProductIndexError
from transit_norm.schemas.taxonomy import TRAIN_PRODUCTS, Product, Style
from transit_norm.types.raw_feed import HINT_FIELDS, RawLineHints


def _coerce_product(value: Any) -> Any:
    """Accept one-character product codes wherever a Product is expected."""
    if isinstance(value, str) and len(value) == 1:
        return Product.from_code(value)
    return value


def _freeze_mapping(value: Mapping[str, Any]) -> Mapping[str, Any]:
    return MappingProxyType(dict(value))


# ==================== Product Index Table ====================


class ProductIndexTable(RootModel[tuple[Product, ...]]):
    """Products indexed by the upstream mode-of-transport ordinal.

    UNKNOWN entries mean the network explicitly filters that mode. Lookups
    outside the table are configuration defects and always raise.
    """

    model_config = ConfigDict(frozen=True)

    @field_validator("root", mode="before")
    @classmethod
    def parse_product_codes(cls, v: Any) -> Any:
        """Accept a code string ('?RSUTB') or a list of names/codes."""
        if isinstance(v, str):
            return tuple(Product.from_code(code) for code in v)
        if isinstance(v, Iterable):
            return tuple(_coerce_product(item) for item in v)
        return v

    def __len__(self) -> int:
        return len(self.root)

    def lookup(self, index: int, network: str) -> Product:
        """
        Map a raw mode index to its coarse product.

        Args:
            index: Upstream mode ordinal
            network: Network id, used for the error

        Returns:
            The Product at that position (possibly UNKNOWN)

        Raises:
            UnmappedProductIndexError: If index is outside the table

        Examples:
            >>> table = ProductIndexTable.model_validate("?IRS")
            >>> table.lookup(2, "demo")
            <Product.REGIONAL_TRAIN: 'regional_train'>
        """
        if not 0 <= index < len(self.root):
            raise UnmappedProductIndexError(index, network, len(self.root))
        return self.root[index]

    def products_from_bitmask(self, mask: int, network: str) -> frozenset[Product]:
        """
        Decode a product bitmask where bit i selects table index i.

        UNKNOWN entries are not returned.

        Raises:
            UnmappedProductIndexError: If a set bit lies beyond the table
        """
        if mask < 0:
            msg = f"Product bitmask must be non-negative, got {mask}"
            raise ValueError(msg)
        products = set()
        index = 0
        while mask:
            if mask & 1:
                if (product := self.lookup(index, network)) is not Product.UNKNOWN:
                    products.add(product)
            mask >>= 1
            index += 1
        return frozenset(products)

    def bitmask_for(self, products: Iterable[Product]) -> int:
        """
        Encode products as a bitmask, setting every index mapped to one of them.

        Examples:
            >>> table = ProductIndexTable.model_validate("IIRB")
            >>> table.bitmask_for([Product.HIGH_SPEED_TRAIN])
            3
        """
        wanted = set(products)
        mask = 0
        for index, product in enumerate(self.root):
            if product in wanted:
                mask |= 1 << index
        return mask


# ==================== Name Splitting ====================


class SplitTemplate(str, enum.Enum):
    """Generic templates for splitting a combined "place, name" display string.

    Group 1 of each pattern is the first part in text order.
    """

    FIRST_COMMA = "first_comma"  # "A, B, C" -> "A" | "B, C"
    LAST_COMMA = "last_comma"  # "A, B, C" -> "A, B" | "C"
    NEXT_TO_LAST_COMMA = "next_to_last_comma"  # "A, B, C" -> "A" | "B, C", splitting at the penultimate comma
    ONE_COMMA = "one_comma"  # exactly one comma
    PARENTHESES = "parentheses"  # "Name (Place)", optionally followed by "(U)", "(S)" or "(S+U)"
    POSTCODE = "postcode"  # "12345 Place, Street 1"

    @property
    def pattern(self) -> re.Pattern[str]:
        return _SPLIT_PATTERNS[self]


_SPLIT_PATTERNS: dict[SplitTemplate, re.Pattern[str]] = {
    SplitTemplate.FIRST_COMMA: re.compile(r"([^,]*),\s*(.*)"),
    SplitTemplate.LAST_COMMA: re.compile(r"(.*),\s*([^,]*)"),
    SplitTemplate.NEXT_TO_LAST_COMMA: re.compile(r"(.*),\s*([^,]*,[^,]*)"),
    SplitTemplate.ONE_COMMA: re.compile(r"([^,]*),\s*([^,]*)"),
    # Group 3 is a trailing rapid transit marker that stays with the name
    SplitTemplate.PARENTHESES: re.compile(r"(.*?)\s+\(([^()]{4,})\)(?:\s+(\((?:U|S|S\+U)\)))?"),
    SplitTemplate.POSTCODE: re.compile(r"(\d{4,5}\s+[^,]+),\s+(.*)"),
}


class NameSplitConfig(BaseModel):
    """Rules for splitting a display string into place and name.

    Attributes:
        places: Literal place names found as prefix or suffix, mapped to the
            canonical place (e.g. {"AC": "Aachen"}). Order is significant.
        prefix_separators: Separators allowed between a leading place and the name
        suffix_separators: Separators allowed between the name and a trailing place
        template: Generic split template tried when no literal place matches
        place_first: True if template group 1 is the place; False to swap groups
            (PARENTHESES and "Name, Place" feeds need False)
        fallback_template: Second template tried when `template` does not match
        fallback_place_first: Group order of the fallback template
        min_place_length: Shortest place a template may produce
        max_place_length: Longest place a template may produce (None: unbounded)
    """

    model_config = ConfigDict(frozen=True)

    places: Mapping[str, str] = Field(default_factory=lambda: MappingProxyType({}))
    prefix_separators: tuple[str, ...] = (", ", " ", "-")
    suffix_separators: tuple[str, ...] = (", ",)
    template: SplitTemplate | None = None
    place_first: bool = True
    fallback_template: SplitTemplate | None = None
    fallback_place_first: bool = True
    min_place_length: int = Field(default=1, ge=1)
    max_place_length: int | None = Field(default=None, ge=1)

    @field_validator("places", mode="before")
    @classmethod
    def places_list_is_identity(cls, v: Any) -> Any:
        """A plain list of places maps each place to itself."""
        if isinstance(v, list | tuple):
            if duplicates := sorted({place for place in v if v.count(place) > 1}):
                msg = f"Duplicate place entries: {', '.join(duplicates)}"
                raise ValueError(msg)
            return {place: place for place in v}
        return v

    @field_validator("places", mode="after")
    @classmethod
    def freeze_places(cls, v: Mapping[str, str]) -> Mapping[str, str]:
        for literal, canonical in v.items():
            if not literal.strip() or not canonical.strip():
                msg = f"Place entries must be non-blank, got {literal!r} -> {canonical!r}"
                raise ValueError(msg)
        return _freeze_mapping(v)

    @field_validator("prefix_separators", "suffix_separators", mode="after")
    @classmethod
    def separators_not_empty(cls, v: tuple[str, ...]) -> tuple[str, ...]:
        if any(not sep for sep in v):
            msg = "Separators must be non-empty strings"
            raise ValueError(msg)
        return v

    @model_validator(mode="after")
    def reject_overlapping_places(self) -> "NameSplitConfig":
        """Reject place entries that could both match the same display string."""
        literals = list(self.places)
        for literal in literals:
            for other in literals:
                if literal == other:
                    continue
                if any(other.startswith(literal + sep) for sep in self.prefix_separators) or any(
                    other.endswith(sep + literal) for sep in self.suffix_separators
                ):
                    msg = f"Place {literal!r} overlaps place {other!r}"
                    raise ValueError(msg)
        return self

    @model_validator(mode="after")
    def validate_templates(self) -> "NameSplitConfig":
        if self.fallback_template is not None and self.template is None:
            msg = "fallback_template requires a template"
            raise ValueError(msg)
        if self.max_place_length is not None and self.max_place_length < self.min_place_length:
            msg = f"max_place_length {self.max_place_length} is below min_place_length {self.min_place_length}"
            raise ValueError(msg)
        return self

    def templates(self) -> list[tuple[SplitTemplate, bool]]:
        """Configured templates with their group order, in the order they are tried."""
        candidates = [(self.template, self.place_first), (self.fallback_template, self.fallback_place_first)]
        return [(template, place_first) for template, place_first in candidates if template is not None]

    def place_length_allowed(self, place: str) -> bool:
        if len(place) < self.min_place_length:
            return False
        return self.max_place_length is None or len(place) <= self.max_place_length


# ==================== Category Rules ====================

_FORMATTER = string.Formatter()


class CategoryRule(BaseModel):
    """Network-specific classification rule, evaluated before the shared tables.

    A rule matches when the mode (if given) equals the raw mode index, every
    `when` hint equals its value exactly, and every `when_pattern` regex
    fully matches its hint. The label template may reference hint fields
    and named groups from the patterns, e.g. "{category_type}{number}".

    Examples:
        >>> rule = CategoryRule(
        ...     tag="hkx",
        ...     mode=0,
        ...     when={"long_name": "Hamburg-Köln-Express"},
        ...     product="I",
        ... )
    """

    model_config = ConfigDict(frozen=True)

    tag: str = Field(..., min_length=1)
    mode: int | None = None
    when: Mapping[str, str] = Field(default_factory=lambda: MappingProxyType({}))
    when_pattern: Mapping[str, re.Pattern[str]] = Field(default_factory=lambda: MappingProxyType({}))
    product: Product
    label: str | None = None  # None: derive the label from the product

    @field_validator("product", mode="before")
    @classmethod
    def parse_product_code(cls, v: Any) -> Any:
        return _coerce_product(v)

    @field_validator("when", "when_pattern", mode="after")
    @classmethod
    def validate_hint_fields(cls, v: Mapping[str, Any]) -> Mapping[str, Any]:
        if unknown := sorted(set(v) - set(HINT_FIELDS)):
            msg = f"Unknown hint field(s): {', '.join(unknown)}. Must be among: {', '.join(HINT_FIELDS)}"
            raise ValueError(msg)
        return _freeze_mapping(v)

    @model_validator(mode="after")
    def validate_condition_and_label(self) -> "CategoryRule":
        if self.mode is None and not self.when and not self.when_pattern:
            msg = f"Category rule {self.tag!r} has no conditions"
            raise ValueError(msg)
        if self.label is not None:
            available = set(HINT_FIELDS)
            for pattern in self.when_pattern.values():
                available.update(pattern.groupindex)
            used = {name for _, name, _, _ in _FORMATTER.parse(self.label) if name is not None}
            if missing := sorted(used - available):
                msg = f"Category rule {self.tag!r} label uses unknown field(s): {', '.join(missing)}"
                raise ValueError(msg)
        return self

    def match(self, hints: RawLineHints) -> dict[str, str] | None:
        """
        Test the rule against raw hints.

        Returns:
            Named regex groups captured by the rule (possibly empty) if it
            matches, None otherwise
        """
        if self.mode is not None and hints.mode != self.mode:
            return None
        for field, expected in self.when.items():
            if hints.hint(field) != expected:
                return None
        groups: dict[str, str] = {}
        for field, pattern in self.when_pattern.items():
            value = hints.hint(field)
            if value is None or (m := pattern.fullmatch(value)) is None:
                return None
            groups.update({name: group for name, group in m.groupdict().items() if group is not None})
        return groups

    def render_label(self, hints: RawLineHints, groups: Mapping[str, str]) -> str | None:
        """Fill the label template from hints and captured groups."""
        if self.label is None:
            return None
        values = {field: hints.hint(field) or "" for field in HINT_FIELDS}
        values.update(groups)
        return " ".join(self.label.format_map(values).split()) or None


# ==================== Network Config ====================


class NetworkConfig(BaseModel):
    """Complete static configuration for one network adapter."""

    model_config = ConfigDict(frozen=True)

    network_id: str = Field(..., min_length=1)
    products: ProductIndexTable
    category_rules: tuple[CategoryRule, ...] = ()
    abbreviations: Mapping[str, Product] = Field(default_factory=lambda: MappingProxyType({}))
    refine_products: frozenset[Product] = TRAIN_PRODUCTS
    name_split: NameSplitConfig = Field(default_factory=NameSplitConfig)
    poi_split: NameSplitConfig | None = None  # None: use name_split
    address_split: NameSplitConfig | None = None  # None: use name_split
    # Keyed by product code + label, e.g. "B12"
    styles: Mapping[str, Style] = Field(default_factory=lambda: MappingProxyType({}))
    style_prefixes: tuple[str, ...] = ()  # Style keys that also match as a label-key prefix, e.g. "BSB"

    @model_validator(mode="after")
    def style_prefixes_have_styles(self) -> "NetworkConfig":
        if missing := [prefix for prefix in self.style_prefixes if prefix not in self.styles]:
            msg = f"Style prefixes without a style: {', '.join(missing)}"
            raise ValueError(msg)
        return self

    @field_validator("abbreviations", mode="before")
    @classmethod
    def normalize_abbreviations(cls, v: Any) -> Any:
        """Upper-case keys and accept product codes as values."""
        if isinstance(v, Mapping):
            return {key.upper(): _coerce_product(product) for key, product in v.items()}
        return v

    @field_validator("refine_products", mode="before")
    @classmethod
    def parse_refine_codes(cls, v: Any) -> Any:
        if isinstance(v, str):
            return frozenset(Product.from_code(code) for code in v)
        if isinstance(v, Iterable):
            return frozenset(_coerce_product(item) for item in v)
        return v

    @field_validator("abbreviations", "styles", mode="after")
    @classmethod
    def freeze_tables(cls, v: Mapping[str, Any]) -> Mapping[str, Any]:
        if any(not key.strip() for key in v):
            msg = "Table keys must be non-blank"
            raise ValueError(msg)
        return _freeze_mapping(v)
