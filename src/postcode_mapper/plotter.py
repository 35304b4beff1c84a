"""
Batch Plotter
=============
Resolves an ordered list of postcodes one at a time and draws each hit on
the bulk overlay.

The pause between codes is the rate limit the upstream geocoders expect:
exactly one request is in flight at a time and consecutive codes are at
least ``delay_seconds`` apart.  Do not parallelise this loop.
"""

from __future__ import annotations

import json
import logging
import time
from pathlib import Path
from typing import Any, Sequence

from postcode_mapper.exceptions import OutputWriteError, PlotInProgressError
from postcode_mapper.map_host import DEFAULT_PADDING, MapHost, OverlayGroup
from postcode_mapper.models import BatchSummary, Bounds, PostcodeFeature
from postcode_mapper.resolver import PostcodeResolver
from postcode_mapper.status import (
    LOADING_ALL,
    StatusBoard,
    loading_message,
    summary_message,
)
from postcode_mapper.styles import LayerStyle, postcode_popup

logger = logging.getLogger("postcode_mapper.plotter")

DEFAULT_DELAY_SECONDS = 0.5


class BatchPlotter:
    """Plot every postcode in a list onto the bulk overlay.

    Args:
        resolver: Strategy used to turn each postcode into a feature.
        map_host: Map the features are drawn on.
        style: Style applied to every bulk feature.
        status: Receives progress and summary messages.
        delay_seconds: Pause between consecutive postcodes.
    """

    def __init__(
        self,
        resolver: PostcodeResolver,
        map_host: MapHost,
        style: LayerStyle,
        status: StatusBoard | None = None,
        delay_seconds: float = DEFAULT_DELAY_SECONDS,
    ) -> None:
        self.resolver = resolver
        self.map_host = map_host
        self.style = style
        self.status = status or StatusBoard()
        self.delay_seconds = delay_seconds
        self._running = False

    @property
    def running(self) -> bool:
        return self._running

    @property
    def features(self) -> list[PostcodeFeature]:
        """Features currently on the bulk overlay."""
        return self.map_host.group_features(OverlayGroup.BULK)

    def plot_all(self, codes: Sequence[str]) -> BatchSummary:
        """Resolve and draw *codes* in order.

        The bulk overlay is not cleared first; call
        ``map_host.clear_group(OverlayGroup.BULK)`` beforehand for a fresh
        run.  Codes that cannot be resolved are counted and skipped.

        Raises:
            PlotInProgressError: If another ``plot_all`` is still running.
        """
        if self._running:
            raise PlotInProgressError()

        self._running = True
        try:
            return self._plot_sequentially(codes)
        finally:
            self._running = False

    def _plot_sequentially(self, codes: Sequence[str]) -> BatchSummary:
        summary = BatchSummary()
        self.status.set_status(LOADING_ALL)
        logger.info("Plotting %d postcodes via %s...", len(codes), self.resolver.__class__.__name__)

        for i, code in enumerate(codes):
            if i > 0:
                time.sleep(self.delay_seconds)

            self.status.set_status(loading_message(code))
            try:
                plotted = self._plot_one(code)
            except Exception:
                logger.exception("Error processing postcode %s", code)
                plotted = False

            if plotted:
                summary.success += 1
            else:
                summary.failed += 1
                summary.failed_codes.append(code)

        self.status.set_status(summary_message(summary.success, summary.failed))

        bounds = Bounds.from_features(self.features)
        if bounds is not None:
            self.map_host.fit_bounds(bounds, padding=DEFAULT_PADDING)
        return summary

    def _plot_one(self, code: str) -> bool:
        feature = self.resolver.resolve(code)
        if feature is None:
            logger.warning("  ✗ Could not find geometry for postcode: %s", code)
            return False

        self.map_host.add_feature(OverlayGroup.BULK, feature, self.style, postcode_popup(code))
        logger.debug("  ✓ %s via %s", code, feature.source)
        return True

    def write_geojson(self, output_path: Path) -> Path:
        """Write the bulk overlay as a GeoJSON FeatureCollection.

        Raises:
            OutputWriteError: If the file cannot be written.
        """
        geojson: dict[str, Any] = {
            "type": "FeatureCollection",
            "features": [f.to_geojson_feature() for f in self.features],
        }
        output_path = Path(output_path)
        try:
            with open(output_path, "w", encoding="utf-8") as fh:
                json.dump(geojson, fh, indent=2)
        except OSError as exc:
            raise OutputWriteError(str(output_path), str(exc)) from exc
        return output_path
