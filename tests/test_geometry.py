"""
Tests — Geometry Approximator
=============================
The approximation is a deliberately crude circle; these tests pin its shape,
not its realism.
"""

from __future__ import annotations

import math

import pytest

from postcode_mapper.geometry import DEFAULT_RADIUS_DEG, approximate_polygon, circle_ring
from postcode_mapper.models import Coordinate


class TestCircleRing:
    def test_ring_has_21_positions(self) -> None:
        ring = circle_ring(Coordinate(52.0, 5.0))
        assert len(ring) == 21

    def test_ring_is_closed(self) -> None:
        ring = circle_ring(Coordinate(52.0, 5.0))
        assert ring[0] == ring[-1]

    def test_first_twenty_positions_are_distinct(self) -> None:
        ring = circle_ring(Coordinate(52.0, 5.0))
        assert len({tuple(p) for p in ring[:-1]}) == 20

    def test_positions_are_lon_lat_ordered(self) -> None:
        # Vertex 0 sits due north of the centre: same longitude, lat + r
        lon, lat = circle_ring(Coordinate(latitude=52.0, longitude=5.0))[0]
        assert lon == pytest.approx(5.0)
        assert lat == pytest.approx(52.0 + DEFAULT_RADIUS_DEG)

    def test_equator_offsets_are_equal(self) -> None:
        ring = circle_ring(Coordinate(latitude=0.0, longitude=10.0))
        lon, lat = ring[5]  # θ = π/2, due east
        assert lon - 10.0 == pytest.approx(DEFAULT_RADIUS_DEG)
        assert lat == pytest.approx(0.0, abs=1e-12)

    def test_sixty_degrees_doubles_longitude_offset(self) -> None:
        ring = circle_ring(Coordinate(latitude=60.0, longitude=10.0))
        lon, _ = ring[5]
        assert lon - 10.0 == pytest.approx(2 * DEFAULT_RADIUS_DEG)

    def test_latitude_offsets_not_scaled(self) -> None:
        ring = circle_ring(Coordinate(latitude=60.0, longitude=10.0))
        _, lat_north = ring[0]
        _, lat_south = ring[10]
        assert lat_north - 60.0 == pytest.approx(DEFAULT_RADIUS_DEG)
        assert 60.0 - lat_south == pytest.approx(DEFAULT_RADIUS_DEG)

    def test_custom_vertex_count(self) -> None:
        ring = circle_ring(Coordinate(52.0, 5.0), vertices=8)
        assert len(ring) == 9
        assert ring[0] == ring[-1]

    def test_all_vertices_on_scaled_circle(self) -> None:
        center = Coordinate(latitude=52.0, longitude=5.0)
        scale = math.cos(math.radians(center.latitude))
        for lon, lat in circle_ring(center):
            dlat = lat - center.latitude
            dlon = (lon - center.longitude) * scale
            assert math.hypot(dlat, dlon) == pytest.approx(DEFAULT_RADIUS_DEG)


class TestApproximatePolygon:
    def test_feature_shape(self) -> None:
        feature = approximate_polygon(Coordinate(52.0, 5.0), "3572")
        geojson = feature.to_geojson_feature()
        assert geojson["type"] == "Feature"
        assert geojson["properties"] == {"postcode": "3572"}
        assert geojson["geometry"]["type"] == "Polygon"
        assert len(geojson["geometry"]["coordinates"]) == 1
        assert len(geojson["geometry"]["coordinates"][0]) == 21

    def test_fresh_feature_per_call(self) -> None:
        a = approximate_polygon(Coordinate(52.0, 5.0), "3572")
        b = approximate_polygon(Coordinate(52.0, 5.0), "3572")
        assert a == b
        assert a is not b
        assert a.geometry is not b.geometry

    def test_bounds_match_radius(self) -> None:
        feature = approximate_polygon(Coordinate(latitude=52.0, longitude=5.0), "3572")
        bounds = feature.bounds
        assert bounds.north == pytest.approx(52.02)
        assert bounds.south == pytest.approx(51.98)
        half_width = DEFAULT_RADIUS_DEG / math.cos(math.radians(52.0))
        assert bounds.east == pytest.approx(5.0 + half_width)
        assert bounds.west == pytest.approx(5.0 - half_width)
