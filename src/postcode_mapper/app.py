"""
Postcode Mapper — Application
=============================
Wires configuration, resolver, map, plotter and search controller together.

Classes:
    PostcodeMapper      Session object behind the reload/search/clear actions.
    MapRenderTool       One-shot pipeline: config.json → map.html (GeoTool).

Usage::

    from pathlib import Path
    from postcode_mapper.app import MapRenderTool

    MapRenderTool(
        input_path=Path("config.json"),
        output_path=Path("output/map.html"),
        searches=["3572RB"],
    ).run()
"""

from __future__ import annotations

import logging
from pathlib import Path
from typing import Sequence

from postcode_mapper.base_tool import GeoTool
from postcode_mapper.config import MapperConfig
from postcode_mapper.exceptions import ConfigurationError
from postcode_mapper.map_host import FoliumMapHost, MapHost, OverlayGroup
from postcode_mapper.models import BatchSummary, SearchOutcome
from postcode_mapper.plotter import DEFAULT_DELAY_SECONDS, BatchPlotter
from postcode_mapper.resolver import (
    DEFAULT_TIMEOUT,
    DEFAULT_USER_AGENT,
    PostcodeResolver,
    default_resolver,
)
from postcode_mapper.search import SearchController
from postcode_mapper.status import LOAD_ERROR, StatusBoard, StatusListener
from postcode_mapper.styles import LayerStyle
from postcode_mapper.validators import Validators

logger = logging.getLogger("postcode_mapper.app")


class PostcodeMapper:
    """One mapping session over a loaded configuration.

    Args:
        config: The loaded configuration (read-only for the session).
        resolver: Resolution strategy; defaults to PDOK → Nominatim.
        map_host: Map to draw on; defaults to a :class:`FoliumMapHost`.
        status: Status surfaces; defaults to a silent :class:`StatusBoard`.
        delay_seconds: Pause between postcodes during a batch plot.
    """

    def __init__(
        self,
        config: MapperConfig,
        resolver: PostcodeResolver | None = None,
        map_host: MapHost | None = None,
        status: StatusBoard | None = None,
        delay_seconds: float = DEFAULT_DELAY_SECONDS,
    ) -> None:
        self.config = config
        self.resolver = resolver or default_resolver()
        self.map_host = map_host or FoliumMapHost(config.map_config)
        self.status = status or StatusBoard()

        self.plotter = BatchPlotter(
            self.resolver,
            self.map_host,
            LayerStyle.from_map_config(config.map_config),
            status=self.status,
            delay_seconds=delay_seconds,
        )
        self.searcher = SearchController(
            self.resolver,
            self.map_host,
            flagged_codes=config,
            status=self.status,
        )

    @classmethod
    def from_file(cls, config_path: Path, **kwargs) -> "PostcodeMapper":
        """Load *config_path* and build a session.

        A configuration error is reported on the status surface (if one is
        passed in ``status``) and re-raised; nothing is plotted.
        """
        status: StatusBoard | None = kwargs.get("status")
        try:
            config = MapperConfig.from_file(config_path)
        except ConfigurationError:
            if status is not None:
                status.set_status(LOAD_ERROR)
            raise
        return cls(config, **kwargs)

    # ------------------------------------------------------------------
    # Actions
    # ------------------------------------------------------------------

    def plot_all_zipcodes(self) -> BatchSummary:
        return self.plotter.plot_all(self.config.zipcodes)

    def clear_all(self) -> None:
        self.map_host.clear_group(OverlayGroup.BULK)

    def reload(self) -> BatchSummary:
        """Clear the bulk overlay and plot every configured postcode again."""
        self.clear_all()
        return self.plot_all_zipcodes()

    def search_zipcode(self, raw: str) -> SearchOutcome:
        return self.searcher.search(raw)

    def clear_search(self) -> None:
        self.searcher.clear_search()

    def save(self, output_path: Path) -> Path:
        """Write the current map as HTML (folium map host only)."""
        if not isinstance(self.map_host, FoliumMapHost):
            raise TypeError(f"{type(self.map_host).__name__} cannot be saved to HTML")
        return self.map_host.save(output_path)


class MapRenderTool(GeoTool):
    """Plot every configured postcode and write an interactive HTML map.

    Args:
        input_path: Path to the JSON configuration file.
        output_path: Path for the output HTML map.
        geojson_path: Optional path for a GeoJSON export of the bulk overlay.
        searches: Raw postcodes to search and highlight after the batch plot.
        user_agent: User-Agent sent to Nominatim.
        timeout: Per-request timeout in seconds.
        delay_seconds: Pause between postcodes during the batch plot.
        resolver: Override the default PDOK → Nominatim chain.
        listener: Receives every status message (e.g. ``click.echo``).
        verbose: Enable DEBUG-level logging.
    """

    def __init__(
        self,
        input_path: Path,
        output_path: Path,
        geojson_path: Path | None = None,
        searches: Sequence[str] = (),
        user_agent: str = DEFAULT_USER_AGENT,
        timeout: float = DEFAULT_TIMEOUT,
        delay_seconds: float = DEFAULT_DELAY_SECONDS,
        resolver: PostcodeResolver | None = None,
        listener: StatusListener | None = None,
        *,
        verbose: bool = False,
    ) -> None:
        super().__init__(input_path, output_path, verbose=verbose)
        self.geojson_path = Path(geojson_path) if geojson_path else None
        self.searches: list[str] = list(searches)
        self.resolver = resolver or default_resolver(user_agent=user_agent, timeout=timeout)
        self.delay_seconds = delay_seconds
        self.status = StatusBoard(listener)

        self.config: MapperConfig | None = None
        self.mapper: PostcodeMapper | None = None
        self.summary: BatchSummary | None = None
        self.outcomes: list[SearchOutcome] = []

    def validate_inputs(self) -> None:
        """Check the output paths and load the configuration.

        Raises:
            ConfigurationError: If the configuration cannot be loaded.
            InputValidationError: If an output path has the wrong extension.
            OutputWriteError: If an output directory cannot be created.
        """
        Validators.assert_supported_extension(self.output_path, [".html", ".htm"])
        Validators.assert_output_dir_writable(self.output_path)
        if self.geojson_path is not None:
            Validators.assert_supported_extension(self.geojson_path, [".geojson", ".json"])
            Validators.assert_output_dir_writable(self.geojson_path)

        self.mapper = PostcodeMapper.from_file(
            self.input_path,
            resolver=self.resolver,
            status=self.status,
            delay_seconds=self.delay_seconds,
        )
        self.config = self.mapper.config
        logger.debug("Inputs validated successfully.")

    def process(self) -> None:
        assert self.mapper is not None, "validate_inputs() must run first"

        self.summary = self.mapper.plot_all_zipcodes()
        self.outcomes = [self.mapper.search_zipcode(raw) for raw in self.searches]

        self.mapper.save(self.output_path)
        if self.geojson_path is not None:
            self.mapper.plotter.write_geojson(self.geojson_path)
            logger.info("GeoJSON written to %s", self.geojson_path)
