"""Colour and style constants for postcode overlays."""

from __future__ import annotations

from dataclasses import dataclass
from html import escape
from typing import TYPE_CHECKING

if TYPE_CHECKING:
    from postcode_mapper.config import MapConfig


@dataclass(frozen=True)
class LayerStyle:
    """Leaflet path style for a postcode polygon."""

    fill_color: str  # Hex with # (e.g., "#e74c3c")
    fill_opacity: float
    stroke_color: str
    stroke_weight: int

    def to_leaflet(self) -> dict:
        """Convert to Leaflet path options for ``folium.GeoJson``."""
        return {
            "fillColor": self.fill_color,
            "fillOpacity": self.fill_opacity,
            "color": self.stroke_color,
            "weight": self.stroke_weight,
        }

    @classmethod
    def from_map_config(cls, map_config: "MapConfig") -> "LayerStyle":
        return cls(
            fill_color=map_config.fill_color,
            fill_opacity=map_config.fill_opacity,
            stroke_color=map_config.stroke_color,
            stroke_weight=map_config.stroke_weight,
        )


# Search highlight styles
FLAGGED_STYLE = LayerStyle(
    fill_color="#e74c3c",  # Red
    fill_opacity=0.7,
    stroke_color="#e74c3c",
    stroke_weight=3,
)
CLEAR_STYLE = LayerStyle(
    fill_color="#27ae60",  # Green
    fill_opacity=0.7,
    stroke_color="#27ae60",
    stroke_weight=3,
)

FLAGGED_POPUP_LABEL = "POLLUTED WATER!"
CLEAR_POPUP_LABEL = "Safe to drink"


def postcode_popup(postcode: str, label: str | None = None) -> str:
    """Popup HTML: ``Postcode: 1951`` plus an optional bold label line."""
    text = f"Postcode: {escape(postcode)}"
    if label:
        text += f"<br/><strong>{escape(label)}</strong>"
    return text
