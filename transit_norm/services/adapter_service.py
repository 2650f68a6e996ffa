"""Network adapter service: per-network normalization of lines, names and styles."""

from collections.abc import Iterable

import structlog
from pydantic import BaseModel, ConfigDict

from transit_norm.core.config import settings
from transit_norm.core.exceptions import NormalizationError, UnmappedProductIndexError
from transit_norm.core.telemetry import service_span
from transit_norm.helpers.line_normalization import LineNormalizer
from transit_norm.helpers.name_splitting import NameSplitter
from transit_norm.helpers.style_resolution import StyleResolver
from transit_norm.schemas.network_config import NetworkConfig
from transit_norm.schemas.taxonomy import Line, PlacePair, Product, Style
from transit_norm.types.raw_feed import LocationKind, RawLineHints

logger = structlog.get_logger(__name__)


class LineFailure(BaseModel):
    """A line that could not be normalized within a batch."""

    model_config = ConfigDict(frozen=True)

    index: int  # Position in the input batch
    hints: RawLineHints
    error_type: str  # Exception class name, e.g. "UnrecognizedCategoryError"
    error: str


class LineBatchResult(BaseModel):
    """Result from normalize_lines operation."""

    lines: list[Line]
    failures: list[LineFailure]
    filtered_count: int  # Lines with product UNKNOWN dropped from `lines`


class NetworkAdapter:
    """
    Normalizes raw feed fields for one network.

    Composes the line normalizer, name splitter and style resolver over a
    single immutable NetworkConfig, so an adapter is safe to share between
    threads.
    """

    def __init__(self, config: NetworkConfig) -> None:
        """
        Initialize adapter with its network configuration.

        Args:
            config: Validated network configuration
        """
        self.config = config
        self._normalizer = LineNormalizer(config)
        self._splitter = NameSplitter(config)
        self._resolver = StyleResolver(config)

    def __repr__(self) -> str:
        return f"NetworkAdapter(network_id={self.network_id!r})"

    @property
    def network_id(self) -> str:
        return self.config.network_id

    # ==================== Single Items ====================

    def normalize_line(self, hints: RawLineHints) -> Line:
        """
        Normalize one line.

        Raises:
            UnmappedProductIndexError: If the mode index is outside the product table
            UnrecognizedCategoryError: If nothing classifies the hints
        """
        return self._normalizer.normalize(hints)

    def split_name(self, raw: str | None, kind: LocationKind = LocationKind.STATION) -> PlacePair:
        """Split a station, POI or address display string. Never raises."""
        return self._splitter.split(raw, kind)

    def resolve_style(self, line: Line) -> Style:
        return self._resolver.resolve(line)

    def resolve_label_style(self, label: str | None, product: Product | None = None) -> Style:
        return self._resolver.resolve_label(label, product)

    def products_from_bitmask(self, mask: int) -> frozenset[Product]:
        return self.config.products.products_from_bitmask(mask, self.network_id)

    def bitmask_for(self, products: Iterable[Product]) -> int:
        return self.config.products.bitmask_for(products)

    # ==================== Batches ====================

    def normalize_lines(
        self,
        batch: Iterable[RawLineHints],
        *,
        drop_filtered: bool | None = None,
    ) -> LineBatchResult:
        """
        Normalize a batch of lines, isolating failures per line.

        A line that fails to normalize is reported in `failures` and the rest
        of the batch is still processed. Unmapped product indices are logged
        at error level because they indicate a configuration defect.

        Args:
            batch: Raw line hints in feed order
            drop_filtered: Drop lines with product UNKNOWN. Defaults to the
                DROP_FILTERED_LINES setting.

        Returns:
            LineBatchResult with normalized lines (in input order), failures
            and the number of filtered lines dropped
        """
        if drop_filtered is None:
            drop_filtered = settings.DROP_FILTERED_LINES

        with service_span("adapter.normalize_lines", "transit-norm", network=self.network_id) as span:
            lines: list[Line] = []
            failures: list[LineFailure] = []
            filtered_count = 0

            for index, hints in enumerate(batch):
                try:
                    line = self._normalizer.normalize(hints)
                except UnmappedProductIndexError as exc:
                    failures.append(_failure(index, hints, exc))
                    logger.error(
                        "product_index_unmapped",
                        network=self.network_id,
                        index=exc.index,
                        table_size=exc.table_size,
                        position=index,
                    )
                    continue
                except NormalizationError as exc:
                    failures.append(_failure(index, hints, exc))
                    logger.warning(
                        "line_normalization_failed",
                        network=self.network_id,
                        position=index,
                        error=str(exc),
                    )
                    continue

                if line.is_filtered and drop_filtered:
                    filtered_count += 1
                    continue
                lines.append(line)

            span.set_attribute("lines.normalized", len(lines))
            span.set_attribute("lines.failed", len(failures))
            span.set_attribute("lines.filtered", filtered_count)

            logger.info(
                "normalize_lines_completed",
                network=self.network_id,
                normalized_count=len(lines),
                failed_count=len(failures),
                filtered_count=filtered_count,
            )

            return LineBatchResult(lines=lines, failures=failures, filtered_count=filtered_count)

    def split_names(
        self,
        batch: Iterable[str | None],
        kind: LocationKind = LocationKind.STATION,
    ) -> list[PlacePair]:
        """Split a batch of display strings, preserving order."""
        with service_span(
            "adapter.split_names", "transit-norm", network=self.network_id, location_kind=kind.value
        ) as span:
            pairs = [self._splitter.split(raw, kind) for raw in batch]
            unsplit = sum(1 for pair in pairs if not pair.has_place)
            span.set_attribute("names.count", len(pairs))
            span.set_attribute("names.unsplit", unsplit)
            logger.debug("split_names_completed", network=self.network_id, count=len(pairs), unsplit_count=unsplit)
            return pairs


def _failure(index: int, hints: RawLineHints, exc: NormalizationError) -> LineFailure:
    return LineFailure(index=index, hints=hints, error_type=type(exc).__name__, error=str(exc))
