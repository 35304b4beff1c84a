"""
Geocode Resolver
================
Resolves a 4-digit Dutch postcode (PC4) to a :class:`PostcodeFeature` by
querying pluggable geocoding strategies in order.

Architecture:
    ``PostcodeResolver`` is an abstract strategy.  ``FallbackResolver``
    chains strategies and short-circuits on the first hit, so adding a
    third tier (e.g. a local boundary dataset) never touches the callers.

Classes:
    PostcodeResolver    Abstract base for resolution strategies.
    PdokResolver        PDOK Locatieserver centroid → approximate polygon.
    NominatimResolver   OSM Nominatim boundary geometry (fallback).
    FallbackResolver    Tries strategies in order, swallowing their errors.

Usage::

    from postcode_mapper.resolver import default_resolver

    resolver = default_resolver(user_agent="my-app/1.0")
    feature = resolver.resolve("3572")   # PostcodeFeature or None
"""

from __future__ import annotations

import logging
import math
import re
from abc import ABC, abstractmethod
from typing import Any, Sequence

import requests
from shapely.errors import ShapelyError
from shapely.geometry import shape

from postcode_mapper.exceptions import GeocodingError, GeocodingRateLimitError
from postcode_mapper.geometry import approximate_polygon
from postcode_mapper.models import Coordinate, PostcodeFeature

logger = logging.getLogger("postcode_mapper.resolver")

DEFAULT_USER_AGENT = "postcode-mapper/1.0"
DEFAULT_TIMEOUT = 10

_POINT_RE = re.compile(r"POINT\(([^)]+)\)")


def parse_point_wkt(text: str) -> Coordinate | None:
    """Parse a ``POINT(<lon> <lat>)`` string into a :class:`Coordinate`.

    Returns ``None`` when the text does not match or either number is not
    finite.
    """
    match = _POINT_RE.search(text or "")
    if not match:
        return None

    parts = match.group(1).split()
    if len(parts) != 2:
        return None
    try:
        lon, lat = float(parts[0]), float(parts[1])
    except ValueError:
        return None
    if not (math.isfinite(lon) and math.isfinite(lat)):
        return None
    return Coordinate(latitude=lat, longitude=lon)


# ---------------------------------------------------------------------------
# Strategies
# ---------------------------------------------------------------------------


class PostcodeResolver(ABC):
    """Abstract strategy for resolving a postcode to a feature.

    Subclass this and implement :meth:`resolve` to add a new source.
    """

    name: str = "resolver"

    @abstractmethod
    def resolve(self, postcode: str) -> PostcodeFeature | None:
        """Resolve *postcode* to a feature.

        Returns:
            A :class:`PostcodeFeature`, or ``None`` if the source has no
            usable record for the postcode.

        Raises:
            GeocodingRateLimitError: If the provider returns HTTP 429.
            GeocodingError: On any other HTTP, network or parse failure.
        """


class _HttpResolver(PostcodeResolver):
    """Shared ``requests.Session`` handling for HTTP-backed strategies.

    Subclasses provide the query parameters and parse the decoded JSON;
    a response with an unexpected shape becomes a :class:`GeocodingError`.
    """

    _BASE_URL: str = ""

    def __init__(self, timeout: float = DEFAULT_TIMEOUT, session: requests.Session | None = None) -> None:
        self.timeout = timeout
        self._session = session or requests.Session()

    def resolve(self, postcode: str) -> PostcodeFeature | None:
        data = self._get_json(self._BASE_URL, self._params(postcode))
        try:
            return self._parse(postcode, data)
        except (AttributeError, KeyError, TypeError) as exc:
            raise GeocodingError(f"Unexpected {self.name} response for {postcode}: {exc!r}") from exc

    @abstractmethod
    def _params(self, postcode: str) -> dict[str, Any]:
        """Query string for *postcode*."""

    @abstractmethod
    def _parse(self, postcode: str, data: Any) -> PostcodeFeature | None:
        """Turn a decoded response into a feature, or ``None`` on no match."""

    def _get_json(self, url: str, params: dict[str, Any]) -> Any:
        try:
            response = self._session.get(url, params=params, timeout=self.timeout)
        except requests.RequestException as exc:
            raise GeocodingError(f"{self.name} request failed: {exc}") from exc

        if response.status_code == 429:
            raise GeocodingRateLimitError(self.name, retry_after=60)
        if not response.ok:
            raise GeocodingError(f"{self.name} returned HTTP {response.status_code}")

        try:
            return response.json()
        except ValueError as exc:
            raise GeocodingError(f"{self.name} returned invalid JSON: {exc}") from exc


class PdokResolver(_HttpResolver):
    """Primary resolver backed by the PDOK Locatieserver.

    PDOK only exposes a centroid (``centroide_ll``) for PC4 postcodes, so
    the geometry is a circle approximation around it.

    Reference:
        https://api.pdok.nl/bzk/locatieserver/search/v3_1/ui/
    """

    name = "PDOK"
    _BASE_URL = "https://api.pdok.nl/bzk/locatieserver/search/v3_1/free"

    def _params(self, postcode: str) -> dict[str, Any]:
        return {"q": f"postcode:{postcode}", "fq": "type:postcode", "rows": 1}

    def _parse(self, postcode: str, data: Any) -> PostcodeFeature | None:
        docs = (data.get("response") or {}).get("docs") or []
        if not docs:
            logger.debug("PDOK has no record for %s", postcode)
            return None

        centroid = docs[0].get("centroide_ll")
        if not centroid:
            logger.debug("PDOK record for %s has no centroid", postcode)
            return None

        center = parse_point_wkt(centroid)
        if center is None:
            logger.debug("Unparseable PDOK centroid for %s: %r", postcode, centroid)
            return None

        return approximate_polygon(center, postcode, source=self.name)


class NominatimResolver(_HttpResolver):
    """Fallback resolver backed by OpenStreetMap's Nominatim API.

    Nominatim's usage policy requires a descriptive ``User-Agent``; it is
    set on the session and sent with every request.

    Args:
        user_agent: Identifies the application to Nominatim.
        country: Country filter for the postcode search.
        timeout: HTTP request timeout in seconds.

    Reference:
        https://nominatim.org/release-docs/develop/api/Search/
    """

    name = "Nominatim"
    _BASE_URL = "https://nominatim.openstreetmap.org/search"

    def __init__(
        self,
        user_agent: str = DEFAULT_USER_AGENT,
        country: str = "Netherlands",
        timeout: float = DEFAULT_TIMEOUT,
        session: requests.Session | None = None,
    ) -> None:
        super().__init__(timeout=timeout, session=session)
        self.user_agent = user_agent
        self.country = country
        self._session.headers["User-Agent"] = self.user_agent

    def _params(self, postcode: str) -> dict[str, Any]:
        return {
            "postalcode": postcode,
            "country": self.country,
            "polygon_geojson": 1,
            "format": "json",
        }

    def _parse(self, postcode: str, data: Any) -> PostcodeFeature | None:
        if not data:
            logger.debug("Nominatim has no result for %s", postcode)
            return None

        geometry = data[0].get("geojson")
        if not geometry:
            logger.debug("Nominatim result for %s has no geometry", postcode)
            return None

        try:
            geom = shape(geometry)
        except (ShapelyError, ValueError, IndexError) as exc:
            raise GeocodingError(f"Nominatim geometry for {postcode} is unreadable: {exc}") from exc
        if geom.is_empty or not all(math.isfinite(v) for v in geom.bounds):
            raise GeocodingError(f"Nominatim geometry for {postcode} is empty")

        return PostcodeFeature(postcode=postcode, geometry=geometry, source=self.name)


# ---------------------------------------------------------------------------
# Chain
# ---------------------------------------------------------------------------


class FallbackResolver(PostcodeResolver):
    """Try each strategy in order and return the first feature found.

    Errors from a strategy are logged and treated as "no result" for that
    tier; they never reach the caller.  Each strategy is tried at most once
    per call.
    """

    name = "fallback"

    def __init__(self, strategies: Sequence[PostcodeResolver]) -> None:
        self.strategies: list[PostcodeResolver] = list(strategies)

    def resolve(self, postcode: str) -> PostcodeFeature | None:
        for strategy in self.strategies:
            try:
                feature = strategy.resolve(postcode)
            except GeocodingError as exc:
                logger.warning("%s lookup failed for %s: %s", strategy.name, postcode, exc.message)
                continue

            if feature is not None:
                logger.debug("Resolved %s via %s", postcode, strategy.name)
                return feature

        logger.info("No geometry found for postcode %s", postcode)
        return None


def default_resolver(
    user_agent: str = DEFAULT_USER_AGENT,
    timeout: float = DEFAULT_TIMEOUT,
) -> FallbackResolver:
    """PDOK first, Nominatim as fallback."""
    return FallbackResolver(
        [
            PdokResolver(timeout=timeout),
            NominatimResolver(user_agent=user_agent, timeout=timeout),
        ]
    )
