"""
map_host.py
===========
The map the postcode overlays are drawn on.

``MapHost`` is the narrow surface the plotter and search controller talk to:
add a styled feature to an overlay group, clear a group, fit the viewport.
``FoliumMapHost`` keeps the overlays in memory and renders them to an
interactive Leaflet map with folium.
"""

from __future__ import annotations

import enum
import logging
from abc import ABC, abstractmethod
from dataclasses import dataclass
from pathlib import Path

import folium

from postcode_mapper.config import MapConfig
from postcode_mapper.exceptions import OutputWriteError
from postcode_mapper.models import Bounds, PostcodeFeature
from postcode_mapper.styles import LayerStyle

logger = logging.getLogger("postcode_mapper.map_host")

OSM_TILES = "https://{s}.tile.openstreetmap.org/{z}/{x}/{y}.png"
OSM_ATTRIBUTION = "© OpenStreetMap contributors"
DEFAULT_PADDING = (50, 50)


class OverlayGroup(str, enum.Enum):
    """The two independently clearable overlay collections."""

    BULK = "Postcodes"
    SEARCH = "Search result"


@dataclass(frozen=True)
class RenderedFeature:
    feature: PostcodeFeature
    style: LayerStyle
    popup: str


class MapHost(ABC):
    """Operations the mapper needs from a map widget."""

    @abstractmethod
    def add_feature(
        self,
        group: OverlayGroup,
        feature: PostcodeFeature,
        style: LayerStyle,
        popup: str,
    ) -> None:
        """Render *feature* with *style* into *group*, binding *popup*."""

    @abstractmethod
    def clear_group(self, group: OverlayGroup) -> None:
        """Remove every feature from *group*, leaving the other untouched."""

    @abstractmethod
    def group_features(self, group: OverlayGroup) -> list[PostcodeFeature]:
        """Features currently in *group*, in insertion order."""

    @abstractmethod
    def fit_bounds(self, bounds: Bounds, padding: tuple[int, int] = DEFAULT_PADDING) -> None:
        """Move the viewport so *bounds* is visible with *padding* pixels."""


class FoliumMapHost(MapHost):
    """In-memory overlays rendered to a ``folium.Map`` on demand.

    Args:
        map_config: Initial centre and zoom of the view.
        tiles: Tile URL template for the base layer.
        attribution: Attribution shown for the base layer.
    """

    def __init__(
        self,
        map_config: MapConfig,
        tiles: str = OSM_TILES,
        attribution: str = OSM_ATTRIBUTION,
    ) -> None:
        self.map_config = map_config
        self.tiles = tiles
        self.attribution = attribution
        self._groups: dict[OverlayGroup, list[RenderedFeature]] = {g: [] for g in OverlayGroup}
        self.viewport: tuple[Bounds, tuple[int, int]] | None = None

    # ------------------------------------------------------------------
    # MapHost implementation
    # ------------------------------------------------------------------

    def add_feature(
        self,
        group: OverlayGroup,
        feature: PostcodeFeature,
        style: LayerStyle,
        popup: str,
    ) -> None:
        self._groups[group].append(RenderedFeature(feature, style, popup))

    def clear_group(self, group: OverlayGroup) -> None:
        self._groups[group].clear()

    def group_features(self, group: OverlayGroup) -> list[PostcodeFeature]:
        return [item.feature for item in self._groups[group]]

    def fit_bounds(self, bounds: Bounds, padding: tuple[int, int] = DEFAULT_PADDING) -> None:
        self.viewport = (bounds, padding)

    # ------------------------------------------------------------------
    # Rendering
    # ------------------------------------------------------------------

    def render(self) -> folium.Map:
        """Build a fresh folium map from the current overlays and viewport."""
        center = self.map_config.center
        m = folium.Map(
            location=[center.latitude, center.longitude],
            zoom_start=self.map_config.zoom,
            tiles=None,
        )
        folium.TileLayer(
            tiles=self.tiles,
            attr=self.attribution,
            name="OpenStreetMap",
            max_zoom=19,
        ).add_to(m)

        for group, items in self._groups.items():
            fg = folium.FeatureGroup(name=group.value, show=True)
            for item in items:
                layer = folium.GeoJson(
                    item.feature.to_geojson_feature(),
                    name=item.feature.postcode,
                    style_function=lambda _, style=item.style.to_leaflet(): style,
                )
                folium.Popup(item.popup, max_width=250).add_to(layer)
                layer.add_to(fg)
            fg.add_to(m)

        if self.viewport is not None:
            bounds, padding = self.viewport
            m.fit_bounds(bounds.to_folium(), padding=padding)

        folium.LayerControl(collapsed=False).add_to(m)
        return m

    def save(self, output_path: Path) -> Path:
        """Render and write the map as a standalone HTML file.

        Raises:
            OutputWriteError: If the file cannot be written.
        """
        output_path = Path(output_path)
        try:
            self.render().save(str(output_path))
        except OSError as exc:
            raise OutputWriteError(str(output_path), str(exc)) from exc
        logger.debug("Map written to %s", output_path)
        return output_path
