"""
postcode-mapper — Pipeline Base
===============================
Shared skeleton for file-to-file runs such as config.json → map.html.

Design Pattern:
    Template Method: ``run()`` loads and checks the configuration, plots,
    then logs how long the whole batch took.  Subclasses supply the first
    two steps as ``validate_inputs`` and ``process``.

Usage::

    from postcode_mapper.base_tool import GeoTool

    class GeoJsonExportTool(GeoTool):
        def validate_inputs(self) -> None:
            ...
        def process(self) -> None:
            ...
"""

from __future__ import annotations

import logging
import time
from abc import ABC, abstractmethod
from pathlib import Path

# Child modules log to "postcode_mapper.<module>" and inherit this handler.
logger = logging.getLogger("postcode_mapper")


def configure_logging(verbose: bool = False) -> None:
    """Attach a console handler to the ``postcode_mapper`` logger once.

    Every CLI command calls this, so repeated calls only adjust the level.
    """
    if not logger.handlers:
        handler = logging.StreamHandler()
        handler.setFormatter(
            logging.Formatter(
                fmt="[%(asctime)s] %(levelname)-8s %(name)s — %(message)s",
                datefmt="%H:%M:%S",
            )
        )
        logger.addHandler(handler)

    logger.setLevel(logging.DEBUG if verbose else logging.INFO)


class GeoTool(ABC):
    """A run that reads a mapper configuration and writes a map file.

    Attributes:
        input_path: The JSON configuration (``zipcodes`` + ``mapConfig``).
        output_path: Where the rendered map goes.
        verbose: Log resolver and plotter DEBUG messages too.
    """

    def __init__(self, input_path: Path, output_path: Path, *, verbose: bool = False) -> None:
        self.input_path = Path(input_path)
        self.output_path = Path(output_path)
        self.verbose = verbose

        configure_logging(self.verbose)

    @abstractmethod
    def validate_inputs(self) -> None:
        """Check output paths and load the configuration.

        A bad configuration is fatal, so nothing is geocoded if this raises.

        Raises:
            ConfigurationError: If the configuration cannot be loaded.
            InputValidationError: If an output path is unusable.
        """

    @abstractmethod
    def process(self) -> None:
        """Plot the configured postcodes and write the output files."""

    def run(self) -> None:
        """Load the configuration, run the batch plot, write the map.

        Per-postcode lookup failures are counted by the plotter and do not
        stop the run; configuration and output errors propagate.
        """
        logger.info("Starting %s for %s", self.__class__.__name__, self.input_path)
        start = time.perf_counter()

        self.validate_inputs()
        self.process()

        logger.info(
            "%s finished in %.2fs, map at %s",
            self.__class__.__name__,
            time.perf_counter() - start,
            self.output_path,
        )

    def __repr__(self) -> str:
        return f"{self.__class__.__name__}(input_path={self.input_path!r}, output_path={self.output_path!r})"
