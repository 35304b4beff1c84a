"""
Approximate postcode areas from a single centroid.

PDOK only returns a centroid for PC4 areas, so the mapper draws a crude
circle of fixed angular radius around it.  This is not an administrative
boundary and is not meant to be one.
"""

from __future__ import annotations

import math

from postcode_mapper.models import Coordinate, PostcodeFeature

#: Angular radius in degrees (roughly 2 km).
DEFAULT_RADIUS_DEG = 0.02
#: Distinct vertices on the ring, before the closing duplicate.
DEFAULT_VERTEX_COUNT = 20


def circle_ring(
    center: Coordinate,
    radius: float = DEFAULT_RADIUS_DEG,
    vertices: int = DEFAULT_VERTEX_COUNT,
) -> list[list[float]]:
    """Return a closed ``[lon, lat]`` ring approximating a circle.

    Longitude offsets are divided by ``cos(latitude)`` so the shape does not
    get squashed away from the equator.  The ring has ``vertices + 1``
    positions; the last one repeats the first.
    """
    lat_scale = math.cos(math.radians(center.latitude))
    ring: list[list[float]] = []
    for i in range(vertices):
        angle = (i / vertices) * 2 * math.pi
        lat_offset = radius * math.cos(angle)
        lon_offset = radius * math.sin(angle) / lat_scale
        ring.append([center.longitude + lon_offset, center.latitude + lat_offset])

    ring.append(list(ring[0]))
    return ring


def approximate_polygon(
    center: Coordinate,
    postcode: str,
    *,
    radius: float = DEFAULT_RADIUS_DEG,
    vertices: int = DEFAULT_VERTEX_COUNT,
    source: str = "approximation",
) -> PostcodeFeature:
    """Build a :class:`PostcodeFeature` holding a circle polygon around *center*.

    Args:
        center: Centroid of the postcode area.
        postcode: The postcode label stored in the feature properties.
        radius: Circle radius in degrees of latitude.
        vertices: Number of distinct ring vertices.
        source: Resolver name recorded on the feature.
    """
    return PostcodeFeature(
        postcode=postcode,
        geometry={
            "type": "Polygon",
            "coordinates": [circle_ring(center, radius=radius, vertices=vertices)],
        },
        source=source,
    )
