"""
Name splitting helpers.

Splits combined "place + name" display strings from feeds into a PlacePair.
Exactly one branch applies per string, tried in order:

1. Literal place list (prefix or suffix with configured separators)
2. The network's generic split template, then its fallback template
3. Passthrough with an unknown place

Splitting never raises.
"""

from transit_norm.schemas.network_config import NameSplitConfig, NetworkConfig, SplitTemplate
from transit_norm.schemas.taxonomy import UNKNOWN_PLACE, PlacePair
from transit_norm.types.raw_feed import LocationKind


def split_literal_place(raw: str, config: NameSplitConfig) -> PlacePair | None:
    """
    Split on a configured literal place at the start or end of the string.

    Args:
        raw: Stripped display string
        config: Split configuration with the place list

    Returns:
        PlacePair with the canonical place and the remaining name, or None
        if no place matches with a non-empty remainder

    Examples:
        >>> config = NameSplitConfig(places={"AC": "Aachen"})
        >>> split_literal_place("AC, Hauptbahnhof", config)
        PlacePair(place='Aachen', name='Hauptbahnhof')
        >>> split_literal_place("Bushof, AC", config)
        PlacePair(place='Aachen', name='Bushof')
    """
    for literal, canonical in config.places.items():
        for separator in config.prefix_separators:
            if raw.startswith(literal + separator) and (name := raw[len(literal) + len(separator) :].strip()):
                return PlacePair(place=canonical, name=name)
        for separator in config.suffix_separators:
            if raw.endswith(separator + literal) and (name := raw[: -len(separator + literal)].strip()):
                return PlacePair(place=canonical, name=name)
    return None


def split_with_template(raw: str, template: SplitTemplate, *, place_first: bool = True) -> PlacePair | None:
    """
    Split with a generic template.

    Args:
        raw: Stripped display string
        template: Template to apply
        place_first: True if the first group is the place, False if it is the name

    Returns:
        PlacePair if the template matches with both parts non-empty, None otherwise

    Examples:
        >>> split_with_template("Powell St, San Francisco", SplitTemplate.LAST_COMMA, place_first=False)
        PlacePair(place='San Francisco', name='Powell St')
        >>> split_with_template("Bahnhof", SplitTemplate.FIRST_COMMA) is None
        True
        >>> split_with_template("Alexanderplatz (Berlin) (S+U)", SplitTemplate.PARENTHESES, place_first=False)
        PlacePair(place='Berlin', name='Alexanderplatz (S+U)')
    """
    m = template.pattern.fullmatch(raw)
    if m is None:
        return None
    first, second = m.group(1).strip(), m.group(2).strip()
    if not first or not second:
        return None
    place, name = (first, second) if place_first else (second, first)
    if m.re.groups > 2 and (suffix := m.group(3)):
        name = f"{name} {suffix}"
    return PlacePair(place=place, name=name)


def split_display_name(raw: str | None, config: NameSplitConfig) -> PlacePair:
    """
    Split a display string into place and name.

    Args:
        raw: Display string from the feed (None and blank are allowed)
        config: Split configuration

    Returns:
        PlacePair; the place is UNKNOWN_PLACE when no rule applies
    """
    if raw is None or not (text := raw.strip()):
        return PlacePair(place=UNKNOWN_PLACE, name="")

    if pair := split_literal_place(text, config):
        return pair
    for template, place_first in config.templates():
        pair = split_with_template(text, template, place_first=place_first)
        if pair is not None and config.place_length_allowed(pair.place):
            return pair
    return PlacePair(place=UNKNOWN_PLACE, name=text)


class NameSplitter:
    """Splits station, POI and address names for one network."""

    def __init__(self, config: NetworkConfig) -> None:
        self.config = config

    def config_for(self, kind: LocationKind) -> NameSplitConfig:
        """POI and address configs fall back to the station config."""
        if kind is LocationKind.POI and self.config.poi_split is not None:
            return self.config.poi_split
        if kind is LocationKind.ADDRESS and self.config.address_split is not None:
            return self.config.address_split
        return self.config.name_split

    def split(self, raw: str | None, kind: LocationKind = LocationKind.STATION) -> PlacePair:
        return split_display_name(raw, self.config_for(kind))
