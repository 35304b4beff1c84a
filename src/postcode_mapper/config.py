"""
Mapper configuration
====================
Loads the JSON configuration file once at startup::

    {
      "zipcodes": ["1951", "2011"],
      "mapConfig": {
        "center": [52.1326, 5.2913],
        "zoom": 8,
        "fillColor": "#3388ff",
        "fillOpacity": 0.4,
        "strokeColor": "#1f5fbf",
        "strokeWeight": 2
      }
    }

Every problem with the file is reported as a :class:`ConfigurationError`.
"""

from __future__ import annotations

import json
import logging
from dataclasses import dataclass, field
from pathlib import Path
from typing import Any

from postcode_mapper.exceptions import ConfigurationError, InputValidationError
from postcode_mapper.models import Coordinate
from postcode_mapper.validators import Validators

logger = logging.getLogger("postcode_mapper.config")


@dataclass(frozen=True)
class MapConfig:
    """Initial view and the bulk overlay style."""

    center: Coordinate
    zoom: int
    fill_color: str
    fill_opacity: float
    stroke_color: str
    stroke_weight: int

    @classmethod
    def from_dict(cls, data: dict[str, Any]) -> "MapConfig":
        lat, lon = data["center"]
        center = Coordinate(latitude=float(lat), longitude=float(lon))
        Validators.assert_lat_lon(center.latitude, center.longitude)

        fill_opacity = float(data["fillOpacity"])
        Validators.assert_unit_interval(fill_opacity, "fillOpacity")

        return cls(
            center=center,
            zoom=int(data["zoom"]),
            fill_color=str(data["fillColor"]),
            fill_opacity=fill_opacity,
            stroke_color=str(data["strokeColor"]),
            stroke_weight=int(data["strokeWeight"]),
        )


@dataclass(frozen=True)
class MapperConfig:
    """The configured postcode list plus map settings."""

    zipcodes: tuple[str, ...]
    map_config: MapConfig
    source: Path | None = field(default=None, compare=False)

    def __contains__(self, postcode: object) -> bool:
        return postcode in self.zipcodes

    @classmethod
    def from_dict(cls, data: dict[str, Any], source: Path | None = None) -> "MapperConfig":
        """Build a config from the decoded JSON document.

        Raises:
            ConfigurationError: If a key is missing or a value is invalid.
        """
        where = str(source) if source else None
        if not isinstance(data, dict):
            raise ConfigurationError("top-level value must be an object", where)

        zipcodes = data.get("zipcodes")
        if not isinstance(zipcodes, list):
            raise ConfigurationError("'zipcodes' must be a list", where)
        map_data = data.get("mapConfig")
        if not isinstance(map_data, dict):
            raise ConfigurationError("'mapConfig' must be an object", where)

        try:
            for code in zipcodes:
                Validators.assert_postcode(code)
            map_config = MapConfig.from_dict(map_data)
        except InputValidationError as exc:
            raise ConfigurationError(exc.message, where) from exc
        except KeyError as exc:
            raise ConfigurationError(f"'mapConfig' is missing {exc.args[0]!r}", where) from exc
        except (TypeError, ValueError) as exc:
            raise ConfigurationError(f"bad 'mapConfig' value: {exc}", where) from exc

        return cls(zipcodes=tuple(zipcodes), map_config=map_config, source=source)

    @classmethod
    def from_file(cls, path: Path) -> "MapperConfig":
        """Load and validate a JSON configuration file.

        Raises:
            ConfigurationError: If the file is missing, is not JSON, or
                does not describe a valid configuration.
        """
        path = Path(path)
        try:
            Validators.assert_file_exists(path)
            Validators.assert_supported_extension(path, [".json"])
        except InputValidationError as exc:
            raise ConfigurationError(exc.message, str(path)) from exc

        try:
            with open(path, encoding="utf-8") as fh:
                data = json.load(fh)
        except (OSError, json.JSONDecodeError) as exc:
            raise ConfigurationError(str(exc), str(path)) from exc

        config = cls.from_dict(data, source=path)
        logger.debug("Loaded %d postcodes from %s", len(config.zipcodes), path)
        return config
