"""
postcode-mapper — Custom Exception Hierarchy
=============================================
Every postcode-mapper module raises exceptions from this module so callers
can catch them at the right level of granularity.

Hierarchy::

    PostcodeMapperError                  ← catch-all base
    ├── InputValidationError             ← bad files, bad input values
    │   ├── ConfigurationError           ← config.json missing / malformed
    │   └── InvalidPostcodeError         ← not a 4-digit PC4 code
    ├── GeocodingError                   ← geocoder HTTP / parse failures
    │   └── GeocodingRateLimitError      ← API rate limit exceeded
    ├── PlotInProgressError              ← batch plot re-entered mid-run
    └── OutputWriteError                 ← cannot write to output path

Usage::

    from postcode_mapper.exceptions import ConfigurationError

    raise ConfigurationError("'zipcodes' must be a list")
"""

from __future__ import annotations


# ---------------------------------------------------------------------------
# Root
# ---------------------------------------------------------------------------


class PostcodeMapperError(Exception):
    """Base exception for all postcode-mapper errors.

    Args:
        message: Human-readable description of the error.
    """

    def __init__(self, message: str) -> None:
        super().__init__(message)
        self.message: str = message

    def __repr__(self) -> str:
        return f"{self.__class__.__name__}({self.message!r})"


# ---------------------------------------------------------------------------
# Input validation
# ---------------------------------------------------------------------------


class InputValidationError(PostcodeMapperError):
    """Raised when inputs fail pre-processing validation.

    This is the parent class for more specific input problems.
    """


class ConfigurationError(InputValidationError):
    """Raised when the mapper configuration cannot be loaded.

    Configuration errors are fatal to initialisation: nothing is plotted
    once one has been raised.

    Args:
        reason: Short explanation of what is wrong with the configuration.
        path: Optional path of the configuration file, included in the
              message when given.
    """

    def __init__(self, reason: str, path: str | None = None) -> None:
        where = f" ('{path}')" if path else ""
        super().__init__(f"Invalid configuration{where}: {reason}")
        self.reason: str = reason
        self.path: str | None = path


class InvalidPostcodeError(InputValidationError):
    """Raised when a value is not a 4-digit Dutch postal code.

    Args:
        value: The offending value, after letter trimming.

    Example::

        raise InvalidPostcodeError("12")
    """

    def __init__(self, value: str) -> None:
        super().__init__(
            f"Invalid postcode {value!r}: expected exactly 4 digits (e.g. '3572')."
        )
        self.value: str = value


# ---------------------------------------------------------------------------
# Geocoding
# ---------------------------------------------------------------------------


class GeocodingError(PostcodeMapperError):
    """Raised when a geocoding request fails for any reason.

    Resolver strategies raise this; :class:`~postcode_mapper.resolver.FallbackResolver`
    catches it and moves on to the next tier.
    """


class GeocodingRateLimitError(GeocodingError):
    """Raised when the geocoding provider returns a rate-limit response.

    Args:
        provider: Name of the geocoding service (e.g. ``"Nominatim"``).
        retry_after: Suggested seconds to wait before retrying, if
                     provided by the API.  ``None`` if unknown.

    Example::

        raise GeocodingRateLimitError("Nominatim", retry_after=60)
    """

    def __init__(self, provider: str, retry_after: int | None = None) -> None:
        hint = f" Retry after {retry_after}s." if retry_after else ""
        super().__init__(f"Rate limit exceeded for provider '{provider}'.{hint}")
        self.provider: str = provider
        self.retry_after: int | None = retry_after


# ---------------------------------------------------------------------------
# Batch plotting
# ---------------------------------------------------------------------------


class PlotInProgressError(PostcodeMapperError):
    """Raised when a batch plot is started while another is still running."""

    def __init__(self) -> None:
        super().__init__("A batch plot is already in progress; wait for it to finish.")


# ---------------------------------------------------------------------------
# Output
# ---------------------------------------------------------------------------


class OutputWriteError(PostcodeMapperError):
    """Raised when the map or GeoJSON output cannot be written to disk.

    Args:
        output_path: String representation of the path that failed.
        reason: Underlying OS or library error message.

    Example::

        raise OutputWriteError("/read-only/dir/map.html", "Permission denied")
    """

    def __init__(self, output_path: str, reason: str) -> None:
        super().__init__(
            f"Failed to write output to '{output_path}': {reason}"
        )
        self.output_path: str = output_path
        self.reason: str = reason
