"""
Shared category abbreviation table used across networks.

Maps upper-cased category abbreviations found in feeds (train type codes,
bus and ferry markers) to canonical products. Network-specific overrides
are consulted before this table.
"""

import re
from collections.abc import Mapping
from types import MappingProxyType

from transit_norm.schemas.taxonomy import Product


def _entries(product: Product, *abbreviations: str) -> dict[str, Product]:
    return dict.fromkeys(abbreviations, product)


SHARED_ABBREVIATIONS = MappingProxyType(
    {
        # Intercity
        **_entries(
            Product.HIGH_SPEED_TRAIN,
            "EC", "EN", "D", "EIC", "ICE", "IC", "ICT", "ICN", "CNL", "OEC", "OIC", "RJ", "RJX",
            "THA", "TGV", "DNZ", "AIR", "ECB", "LYN", "NZ", "INZ", "RHI", "RHT", "TGD", "IRX",
            "ES", "EST", "EM", "A", "AVE", "ARC", "ALS", "TAL", "TLG", "HOT", "X2", "X", "FYR",
            "SC", "FLUG", "TLK", "INT", "HKX", "NJ", "FLX", "ECE",
        ),  # fmt: skip
        # Regional
        **_entries(
            Product.REGIONAL_TRAIN,
            "ATR", "ZUG", "R", "DPN", "RB", "RE", "IR", "IRE", "HEX", "WFB", "RT", "REX", "OS",
            "SP", "EZ", "ARZ", "OE", "MR", "PE", "NE", "MRB", "ERB", "HLB", "VIA", "HSB", "OSB",
            "VBG", "AKN", "OLA", "UBB", "PEG", "NWB", "CAN", "BRB", "SBB", "VEC", "TLX", "HZL",
            "ABR", "CB", "WEG", "NEB", "ME", "MER", "ALX", "EB", "VEN", "BOB", "SBS", "SES", "EVB",
            "STB", "AG", "PRE", "DBG", "SHB", "NOB", "RTB", "BLB", "NBE", "SOE", "SDG", "VE", "DAB",
            "WTB", "BE", "ARR", "HTB", "FEG", "NEG", "RBG", "MBB", "VEB", "LEO", "VX", "MSB", "P",
            "ÖBA", "KTB", "ERX", "ATZ", "ATB", "CAT", "EXTRA", "EXT", "KD", "KM", "EX", "PCC", "ZR",
            "WB", "RNV",
        ),  # fmt: skip
        # Suburban
        **_entries(Product.SUBURBAN_TRAIN, "S", "SBAHN", "BSB", "SWE", "RER", "WKD", "SKM", "SKW"),
        # Subway
        **_entries(Product.SUBWAY, "U", "UBAHN", "MET", "METRO"),
        # Tram
        **_entries(Product.TRAM, "STR", "TRAM", "TRA", "STRWLB", "SCHW-B"),
        # Bus
        **_entries(
            Product.BUS,
            "BUS", "NFB", "SEV", "BUSSEV", "BSV", "FB", "TRO", "RFB", "RUF", "NB", "OBUS",
        ),  # fmt: skip
        # On demand
        **_entries(Product.ON_DEMAND, "RFT", "LT", "AST", "ALT", "BUXI", "TAXI"),
        # Ferry
        **_entries(Product.FERRY, "SCHIFF", "FÄHRE", "FÄH", "FAE", "SCH", "AS", "KAT", "BAT", "BAV"),
        # Cable car
        **_entries(Product.CABLECAR, "SEILBAHN", "SB", "ZAHNR", "GB", "LB", "FUN", "SL"),
    }
)

# Abbreviations that also match as a prefix (e.g. "AST12", "ALT74ALT")
SHARED_ABBREVIATION_PREFIXES: tuple[tuple[str, Product], ...] = (
    ("AST", Product.ON_DEMAND),
    ("ALT", Product.ON_DEMAND),
    ("BUXI", Product.ON_DEMAND),
)

_LEADING_LETTERS = re.compile(r"([^\W\d_]+(?:-[^\W\d_]+)?)")


def extract_abbreviation(text: str | None) -> str | None:
    """
    Extract the leading category letters from a line symbol.

    Args:
        text: Symbol or short name, e.g. "ICE 599" or "RE7"

    Returns:
        Upper-cased leading letters, or None if the text starts otherwise

    Examples:
        >>> extract_abbreviation("ICE 599")
        'ICE'
        >>> extract_abbreviation("re7")
        'RE'
        >>> extract_abbreviation("42") is None
        True
    """
    if not text:
        return None
    if m := _LEADING_LETTERS.match(text.strip()):
        return m.group(1).upper()
    return None


def classify_abbreviation(
    abbreviation: str | None,
    overrides: Mapping[str, Product] | None = None,
) -> Product | None:
    """
    Classify a category abbreviation.

    Network overrides are consulted first, then the shared table, then the
    shared prefix rules.

    Args:
        abbreviation: Category abbreviation (case-insensitive)
        overrides: Network-specific abbreviation table with upper-case keys

    Returns:
        The classified Product, or None if the abbreviation is unknown

    Examples:
        >>> classify_abbreviation("ice")
        <Product.HIGH_SPEED_TRAIN: 'high_speed_train'>
        >>> classify_abbreviation("RE", {"RE": Product.SUBURBAN_TRAIN})
        <Product.SUBURBAN_TRAIN: 'suburban_train'>
        >>> classify_abbreviation("XYZ") is None
        True
    """
    if not abbreviation or not abbreviation.strip():
        return None
    key = abbreviation.strip().upper()
    if overrides and (product := overrides.get(key)) is not None:
        return product
    if (product := SHARED_ABBREVIATIONS.get(key)) is not None:
        return product
    for prefix, prefixed_product in SHARED_ABBREVIATION_PREFIXES:
        if key.startswith(prefix):
            return prefixed_product
    return None
