"""
Line normalization helpers.

Turns a raw mode index plus textual hints into a canonical Line. The
evaluation order is fixed:

1. Network category rules, first match wins
2. Product index table lookup for the raw mode (UNKNOWN = explicitly filtered)
3. Abbreviation refinement for refinable products, or when no mode was given
4. Otherwise the category is unrecognized

Everything here is a pure function of the hints and the network configuration.
"""

from transit_norm.core.exceptions import UnrecognizedCategoryError
from transit_norm.helpers.abbreviations import classify_abbreviation, extract_abbreviation
from transit_norm.schemas.network_config import NetworkConfig
from transit_norm.schemas.taxonomy import Line, Product
from transit_norm.types.raw_feed import RawLineHints

# Products labelled by their short line number rather than the full symbol
NUMBER_LABELLED_PRODUCTS = frozenset({Product.BUS, Product.TRAM, Product.ON_DEMAND})


def collapse_whitespace(text: str | None) -> str | None:
    """
    Collapse runs of whitespace and strip; empty results become None.

    Examples:
        >>> collapse_whitespace("  ICE   599 ")
        'ICE 599'
        >>> collapse_whitespace("   ") is None
        True
    """
    if text is None:
        return None
    return " ".join(text.split()) or None


def derive_label(product: Product, hints: RawLineHints) -> str | None:
    """
    Derive the short badge label for a line.

    Buses, trams and on-demand services prefer the short name, then the
    category number when the symbol ends with it, then the symbol. All other
    products prefer the symbol, then category type and number.

    Args:
        product: Classified product
        hints: Raw line hints

    Returns:
        Label with whitespace collapsed, or None if no hint provides one

    Examples:
        >>> derive_label(Product.BUS, RawLineHints(symbol="Bus 42", category_number="42"))
        '42'
        >>> derive_label(Product.HIGH_SPEED_TRAIN, RawLineHints(category_type="ICE", category_number="599"))
        'ICE 599'
    """
    symbol = hints.symbol
    number = hints.category_number
    if product in NUMBER_LABELLED_PRODUCTS:
        if hints.short_name:
            return collapse_whitespace(hints.short_name)
        if symbol and number and symbol.endswith(number):
            return collapse_whitespace(number)
        return collapse_whitespace(symbol or number)
    if symbol:
        return collapse_whitespace(symbol)
    parts = [part for part in (hints.category_type, number) if part]
    return collapse_whitespace(" ".join(parts))


def derive_long_name(label: str | None, hints: RawLineHints) -> str | None:
    """
    Derive the long display name for a line.

    Uses the long name hint when present, otherwise the label with the
    category number appended in parentheses unless the label already ends
    with it.

    Examples:
        >>> derive_long_name("ICE Sprinter", RawLineHints(category_number="599"))
        'ICE Sprinter (599)'
        >>> derive_long_name("ICE 599", RawLineHints(category_number="599"))
        'ICE 599'
    """
    if hints.long_name:
        return collapse_whitespace(hints.long_name)
    number = hints.category_number
    if label is None:
        return collapse_whitespace(number)
    if number and not label.endswith(number):
        return f"{label} ({number})"
    return label


def category_abbreviation(hints: RawLineHints) -> str | None:
    """Category abbreviation: the category type, else the leading letters of symbol or short name."""
    if hints.category_type:
        return hints.category_type.strip().upper()
    return extract_abbreviation(hints.symbol) or extract_abbreviation(hints.short_name)


class LineNormalizer:
    """Classifies raw line hints into canonical Lines for one network."""

    def __init__(self, config: NetworkConfig) -> None:
        self.config = config

    @property
    def network(self) -> str:
        return self.config.network_id

    def classify(self, hints: RawLineHints) -> tuple[Product, str | None]:
        """
        Classify hints into a product and an optional rule-supplied label.

        Raises:
            UnmappedProductIndexError: If the mode index is outside the product table
            UnrecognizedCategoryError: If nothing classifies the hints
        """
        for rule in self.config.category_rules:
            if (groups := rule.match(hints)) is not None:
                return rule.product, rule.render_label(hints, groups)

        abbreviation = category_abbreviation(hints)

        if hints.mode is not None:
            coarse = self.config.products.lookup(hints.mode, self.network)
            if coarse is Product.UNKNOWN or coarse not in self.config.refine_products:
                return coarse, None
            refined = classify_abbreviation(abbreviation, self.config.abbreviations)
            return refined or coarse, None

        if (product := classify_abbreviation(abbreviation, self.config.abbreviations)) is not None:
            return product, None

        raise UnrecognizedCategoryError(hints, network=self.network)

    def normalize(self, hints: RawLineHints) -> Line:
        """
        Normalize raw hints into a Line.

        Args:
            hints: Raw line fields from the feed

        Returns:
            Canonical Line; lines with product UNKNOWN are filtered, not failed

        Raises:
            UnmappedProductIndexError: If the mode index is outside the product table
            UnrecognizedCategoryError: If nothing classifies the hints
        """
        product, rule_label = self.classify(hints)
        label = rule_label or derive_label(product, hints)
        return Line(
            id=hints.line_id,
            network=self.network,
            product=product,
            label=label,
            name=derive_long_name(label, hints),
            attrs=hints.attrs,
        )
