"""
User-visible status surfaces.

The page this tool grew out of had two text areas: a batch progress line and
a search result line.  :class:`StatusBoard` keeps both, logs every update and
forwards it to an optional listener (the CLI passes ``click.echo``).
"""

from __future__ import annotations

import logging
from typing import Callable

logger = logging.getLogger("postcode_mapper.status")

StatusListener = Callable[[str], None]

# Batch messages
LOADING_ALL = "Loading zip codes..."
LOAD_ERROR = "Error loading configuration"

# Search messages
INVALID_INPUT = "Please enter a valid 4-digit zipcode"
CHECKING = "Checking..."
FLAGGED_MESSAGE = "Your water supply might be polluted!"
CLEAR_MESSAGE = "Your water supply is safe to drink!"


def loading_message(postcode: str) -> str:
    return f"Loading: {postcode}..."


def summary_message(success: int, failed: int) -> str:
    text = f"Loaded {success} zip codes successfully"
    if failed > 0:
        text += f", {failed} failed"
    return text


def not_found_message(postcode: str) -> str:
    return f"Could not find zipcode {postcode}"


class StatusBoard:
    """Holds the current batch status and search result text.

    Args:
        listener: Called with every non-empty message written to either
                  surface.
    """

    def __init__(self, listener: StatusListener | None = None) -> None:
        self.listener = listener
        self.status: str = ""
        self.search_result: str = ""

    def set_status(self, text: str) -> None:
        self.status = text
        logger.info(text)
        self._notify(text)

    def set_search_result(self, text: str) -> None:
        self.search_result = text
        logger.info(text)
        self._notify(text)

    def clear_search_result(self) -> None:
        self.search_result = ""

    def _notify(self, text: str) -> None:
        if self.listener is not None and text:
            self.listener(text)
