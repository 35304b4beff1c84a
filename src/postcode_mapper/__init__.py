"""
Postcode Mapper
===============
Plot Dutch 4-digit postcodes (PC4) on an interactive folium map, geocoding
them via PDOK with Nominatim as fallback, and highlight searched postcodes
against a configured list.

Public API::

    from postcode_mapper import PostcodeMapper, MapperConfig, default_resolver
"""

from postcode_mapper.app import MapRenderTool, PostcodeMapper
from postcode_mapper.config import MapConfig, MapperConfig
from postcode_mapper.geometry import approximate_polygon
from postcode_mapper.models import (
    BatchSummary,
    Bounds,
    Coordinate,
    PostcodeFeature,
    SearchOutcome,
    SearchStatus,
)
from postcode_mapper.plotter import BatchPlotter
from postcode_mapper.resolver import (
    FallbackResolver,
    NominatimResolver,
    PdokResolver,
    PostcodeResolver,
    default_resolver,
)
from postcode_mapper.search import SearchController, trim_postcode

__all__ = [
    "BatchPlotter",
    "BatchSummary",
    "Bounds",
    "Coordinate",
    "FallbackResolver",
    "MapConfig",
    "MapRenderTool",
    "MapperConfig",
    "NominatimResolver",
    "PdokResolver",
    "PostcodeFeature",
    "PostcodeMapper",
    "PostcodeResolver",
    "SearchController",
    "SearchOutcome",
    "SearchStatus",
    "approximate_polygon",
    "default_resolver",
    "trim_postcode",
]
__version__ = "1.0.0"
