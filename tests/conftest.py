"""Shared fixtures for the postcode-mapper test suite."""

from __future__ import annotations

import json
from pathlib import Path
from typing import Any

import pytest

from postcode_mapper.config import MapperConfig
from postcode_mapper.geometry import approximate_polygon
from postcode_mapper.models import Coordinate, PostcodeFeature

PDOK_URL = "https://api.pdok.nl/bzk/locatieserver/search/v3_1/free"
NOMINATIM_URL = "https://nominatim.openstreetmap.org/search"


def config_dict(zipcodes: list[str] | None = None) -> dict[str, Any]:
    """A valid configuration document."""
    return {
        "zipcodes": zipcodes if zipcodes is not None else ["1951", "2011"],
        "mapConfig": {
            "center": [52.1326, 5.2913],
            "zoom": 8,
            "fillColor": "#3388ff",
            "fillOpacity": 0.4,
            "strokeColor": "#1f5fbf",
            "strokeWeight": 2,
        },
    }


def pdok_hit(lon: float, lat: float) -> dict:
    """Build a mock PDOK Locatieserver response for one postcode."""
    return {
        "response": {
            "numFound": 1,
            "docs": [{"type": "postcode", "centroide_ll": f"POINT({lon} {lat})"}],
        }
    }


def pdok_miss() -> dict:
    return {"response": {"numFound": 0, "docs": []}}


def nominatim_polygon(lon: float, lat: float) -> list:
    """Build a mock Nominatim response carrying a small square boundary."""
    ring = [
        [lon - 0.01, lat - 0.01],
        [lon + 0.01, lat - 0.01],
        [lon + 0.01, lat + 0.01],
        [lon - 0.01, lat + 0.01],
        [lon - 0.01, lat - 0.01],
    ]
    return [
        {
            "lat": str(lat),
            "lon": str(lon),
            "display_name": "Nederland",
            "geojson": {"type": "Polygon", "coordinates": [ring]},
        }
    ]


def make_feature(postcode: str = "1951", lat: float = 52.51, lon: float = 4.63) -> PostcodeFeature:
    return approximate_polygon(Coordinate(latitude=lat, longitude=lon), postcode)


@pytest.fixture()
def mapper_config() -> MapperConfig:
    return MapperConfig.from_dict(config_dict())


@pytest.fixture()
def config_file(tmp_path: Path) -> Path:
    """Write a valid config.json and return its path."""
    path = tmp_path / "config.json"
    path.write_text(json.dumps(config_dict()), encoding="utf-8")
    return path
