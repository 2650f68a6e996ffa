"""Type definitions for raw fields extracted from upstream feeds.

Upstream protocol clients hand these values to the normalizer unchanged;
nothing here is interpreted yet.
"""

import enum

from pydantic import BaseModel, ConfigDict, field_validator

from transit_norm.schemas.taxonomy import LineAttr


class LocationKind(str, enum.Enum):
    """Kind of location a display string belongs to."""

    STATION = "station"
    POI = "poi"
    ADDRESS = "address"


# Hint fields that may appear in category rule conditions and label templates
HINT_FIELDS = (
    "symbol",
    "short_name",
    "long_name",
    "category_type",
    "category_number",
    "category_name",
)


class RawLineHints(BaseModel):
    """Raw line fields as extracted from a feed.

    All textual hints are optional. Blank strings are treated as absent.
    """

    model_config = ConfigDict(frozen=True)

    mode: int | None = None  # Upstream mode-of-transport ordinal
    symbol: str | None = None  # e.g. "ICE 599", "S1", "N12"
    short_name: str | None = None  # e.g. "12"
    long_name: str | None = None  # e.g. "Hamburg-Köln-Express"
    category_type: str | None = None  # e.g. "ICE", "RE", "Bus"
    category_number: str | None = None  # e.g. "599"
    category_name: str | None = None  # e.g. "InterCityExpress"
    line_id: str | None = None
    attrs: frozenset[LineAttr] = frozenset()

    @field_validator(*HINT_FIELDS, "line_id", mode="before")
    @classmethod
    def blank_is_none(cls, v: str | None) -> str | None:
        """Strip hints and treat empty strings as missing."""
        if isinstance(v, str):
            v = v.strip()
            return v or None
        return v

    def hint(self, field: str) -> str | None:
        """Return a textual hint by field name."""
        if field not in HINT_FIELDS:
            msg = f"Unknown hint field: {field!r}. Must be one of: {', '.join(HINT_FIELDS)}"
            raise ValueError(msg)
        return getattr(self, field)

    def describe(self) -> str:
        """Compact description of the populated hints, for error messages and logs."""
        parts = [f"mode={self.mode}"] if self.mode is not None else []
        parts.extend(f"{field}={value!r}" for field in HINT_FIELDS if (value := getattr(self, field)) is not None)
        return ", ".join(parts) if parts else "no hints"
