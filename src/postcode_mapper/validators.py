"""
postcode-mapper — Input Validators
===================================
Static utility methods used to validate common preconditions before any
geocoding or rendering begins.

All methods raise an appropriate exception from
:mod:`postcode_mapper.exceptions` rather than returning booleans — this
keeps ``validate_inputs`` implementations and the config loader simple and
readable::

    class MapRenderTool(GeoTool):
        def validate_inputs(self) -> None:
            Validators.assert_file_exists(self.input_path)
            Validators.assert_supported_extension(self.input_path, [".json"])
"""

from __future__ import annotations

import re
from pathlib import Path
from typing import Sequence

from postcode_mapper.exceptions import (
    InputValidationError,
    InvalidPostcodeError,
    OutputWriteError,
)

_POSTCODE_RE = re.compile(r"[0-9]{4}")


class Validators:
    """Collection of static precondition checks.

    All methods are ``@staticmethod`` — this class is never instantiated.
    It exists purely as a logical namespace.
    """

    # ------------------------------------------------------------------
    # File-system checks
    # ------------------------------------------------------------------

    @staticmethod
    def assert_file_exists(path: Path) -> None:
        """Assert that *path* points to an existing regular file.

        Args:
            path: Path object to check.

        Raises:
            InputValidationError: If *path* does not exist or is a
                directory rather than a file.

        Example::

            Validators.assert_file_exists(Path("config.json"))
        """
        path = Path(path)
        if not path.exists():
            raise InputValidationError(
                f"Input file not found: '{path}'. "
                "Check that the path is correct and the file exists."
            )
        if path.is_dir():
            raise InputValidationError(
                f"Expected a file but got a directory: '{path}'."
            )

    @staticmethod
    def assert_output_dir_writable(output_path: Path) -> None:
        """Assert that the parent directory of *output_path* is writable.

        Creates the parent directory (and any missing parents) if it does
        not yet exist, so users never have to pre-create output dirs.

        Args:
            output_path: Intended output file path.

        Raises:
            OutputWriteError: If the parent directory cannot be created.
        """
        parent = Path(output_path).parent
        try:
            parent.mkdir(parents=True, exist_ok=True)
        except OSError as exc:
            raise OutputWriteError(str(output_path), str(exc)) from exc

    @staticmethod
    def assert_supported_extension(path: Path, extensions: Sequence[str]) -> None:
        """Assert that *path* has one of the allowed file extensions.

        Args:
            path: File path to check.
            extensions: Sequence of allowed extensions, each starting with
                        a dot (e.g. ``[".html", ".htm"]``).

        Raises:
            InputValidationError: If the file extension is not in
                *extensions*.
        """
        path = Path(path)
        suffix = path.suffix.lower()
        allowed = [ext.lower() for ext in extensions]
        if suffix not in allowed:
            raise InputValidationError(
                f"Unsupported file extension '{suffix}' for '{path.name}'. "
                f"Accepted extensions: {', '.join(allowed)}"
            )

    # ------------------------------------------------------------------
    # Value checks
    # ------------------------------------------------------------------

    @staticmethod
    def assert_postcode(value: str) -> None:
        """Assert that *value* is a 4-digit PC4 postal code.

        Letters are NOT stripped here; use
        :func:`~postcode_mapper.search.trim_postcode` on raw user input first.

        Raises:
            InvalidPostcodeError: If *value* is not exactly four digits.

        Example::

            Validators.assert_postcode("3572")
        """
        if not isinstance(value, str) or not _POSTCODE_RE.fullmatch(value):
            raise InvalidPostcodeError(str(value))

    @staticmethod
    def assert_unit_interval(value: float, label: str) -> None:
        """Assert that *value* lies within ``[0, 1]`` (e.g. an opacity).

        Raises:
            InputValidationError: If *value* is outside the interval.
        """
        if not 0.0 <= value <= 1.0:
            raise InputValidationError(
                f"{label} must be between 0 and 1, got {value}."
            )

    @staticmethod
    def assert_lat_lon(latitude: float, longitude: float) -> None:
        """Assert that a latitude/longitude pair is within WGS84 range.

        Raises:
            InputValidationError: If latitude is outside ``[-90, 90]`` or
                longitude outside ``[-180, 180]``.
        """
        if not -90.0 <= latitude <= 90.0:
            raise InputValidationError(f"Latitude {latitude} is outside [-90, 90].")
        if not -180.0 <= longitude <= 180.0:
            raise InputValidationError(f"Longitude {longitude} is outside [-180, 180].")
