"""
Core data types shared by the resolver, plotter and search controller.

Classes:
    Coordinate          WGS84 latitude/longitude pair.
    PostcodeFeature     Immutable GeoJSON-style feature for one postcode.
    Bounds              Bounding box, computed with shapely.
    BatchSummary        Success/failure counts from a batch plot.
    SearchStatus        Outcome classes for a single search.
    SearchOutcome       Result of :meth:`SearchController.search`.
"""

from __future__ import annotations

import enum
from dataclasses import dataclass, field
from typing import Any, Iterable

from shapely.geometry import shape


@dataclass(frozen=True)
class Coordinate:
    """A WGS84 point in decimal degrees."""

    latitude: float
    longitude: float


@dataclass(frozen=True)
class PostcodeFeature:
    """Immutable geometry record for a single postcode.

    Attributes:
        postcode: The 4-digit code this feature was resolved for.
        geometry: A GeoJSON geometry mapping.  Approximated features hold a
                  ``Polygon`` with a single closed ``[lon, lat]`` ring;
                  Nominatim features hold whatever geometry Nominatim sent.
        source: Name of the resolver that produced the feature.
    """

    postcode: str
    geometry: dict[str, Any]
    source: str = "unknown"

    def to_geojson_feature(self) -> dict[str, Any]:
        """Return this feature as a GeoJSON Feature dict."""
        return {
            "type": "Feature",
            "properties": {"postcode": self.postcode},
            "geometry": self.geometry,
        }

    @property
    def bounds(self) -> "Bounds":
        return Bounds.from_geometry(self.geometry)


@dataclass(frozen=True)
class Bounds:
    """Axis-aligned bounding box in WGS84 degrees."""

    south: float
    west: float
    north: float
    east: float

    @classmethod
    def from_geometry(cls, geometry: dict[str, Any]) -> "Bounds":
        """Bounding box of a single GeoJSON geometry mapping."""
        west, south, east, north = shape(geometry).bounds
        return cls(south=south, west=west, north=north, east=east)

    @classmethod
    def from_features(cls, features: Iterable[PostcodeFeature]) -> "Bounds | None":
        """Union bounding box over *features*, or ``None`` if there are none."""
        result: Bounds | None = None
        for feature in features:
            box = feature.bounds
            result = box if result is None else result.union(box)
        return result

    def union(self, other: "Bounds") -> "Bounds":
        return Bounds(
            south=min(self.south, other.south),
            west=min(self.west, other.west),
            north=max(self.north, other.north),
            east=max(self.east, other.east),
        )

    def to_folium(self) -> list[list[float]]:
        """``[[south, west], [north, east]]`` as ``folium.Map.fit_bounds`` expects."""
        return [[self.south, self.west], [self.north, self.east]]


@dataclass
class BatchSummary:
    """Counts reported at the end of :meth:`BatchPlotter.plot_all`."""

    success: int = 0
    failed: int = 0
    failed_codes: list[str] = field(default_factory=list)


class SearchStatus(str, enum.Enum):
    MATCHED = "matched"
    CLEAR = "clear"
    INVALID = "invalid"
    NOT_FOUND = "not_found"


@dataclass(frozen=True)
class SearchOutcome:
    """Result of a single search interaction.

    Attributes:
        status: Which terminal state the search reached.
        postcode: The trimmed postcode that was searched (may be invalid).
        message: Human-readable text shown on the search status surface.
        feature: The rendered feature, for ``MATCHED`` and ``CLEAR`` only.
    """

    status: SearchStatus
    postcode: str
    message: str
    feature: PostcodeFeature | None = None

    @property
    def matched(self) -> bool:
        """``True`` when the postcode is in the configured list."""
        return self.status is SearchStatus.MATCHED

    @property
    def rendered(self) -> bool:
        return self.status in (SearchStatus.MATCHED, SearchStatus.CLEAR)
