"""
Search/Highlight Controller
===========================
Looks up one user-entered postcode, checks it against the configured list
and highlights it on its own overlay.

A search always starts by clearing the previous one.  It ends in one of four
states: ``MATCHED`` (listed, drawn red), ``CLEAR`` (not listed, drawn green),
``INVALID`` (not a 4-digit code, no request made) or ``NOT_FOUND`` (no
geocoder knew the code).
"""

from __future__ import annotations

import logging
import re
from typing import Container

from postcode_mapper import status as messages
from postcode_mapper.exceptions import InvalidPostcodeError
from postcode_mapper.map_host import DEFAULT_PADDING, MapHost, OverlayGroup
from postcode_mapper.models import SearchOutcome, SearchStatus
from postcode_mapper.resolver import PostcodeResolver
from postcode_mapper.status import StatusBoard
from postcode_mapper.styles import (
    CLEAR_POPUP_LABEL,
    CLEAR_STYLE,
    FLAGGED_POPUP_LABEL,
    FLAGGED_STYLE,
    postcode_popup,
)
from postcode_mapper.validators import Validators

logger = logging.getLogger("postcode_mapper.search")

_LETTERS_RE = re.compile(r"[A-Za-z]")


def trim_postcode(raw: str) -> str:
    """Strip letters and surrounding whitespace from *raw*.

    ``"3572RB"`` and ``"3572 RB"`` both become ``"3572"``; ``"AB12"``
    becomes ``"12"``, which callers then reject as too short.
    """
    return _LETTERS_RE.sub("", raw).strip()


class SearchController:
    """Resolve and highlight single postcodes.

    Args:
        resolver: Strategy used to resolve the searched postcode.
        map_host: Map the result is drawn on (``SEARCH`` overlay only).
        flagged_codes: Postcodes that get the flagged style.
        status: Receives the search result message.
    """

    def __init__(
        self,
        resolver: PostcodeResolver,
        map_host: MapHost,
        flagged_codes: Container[str],
        status: StatusBoard | None = None,
    ) -> None:
        self.resolver = resolver
        self.map_host = map_host
        self.flagged_codes = flagged_codes
        self.status = status or StatusBoard()

    def clear_search(self) -> None:
        """Empty the search overlay and the search result text."""
        self.map_host.clear_group(OverlayGroup.SEARCH)
        self.status.clear_search_result()

    def search(self, raw: str) -> SearchOutcome:
        self.clear_search()

        postcode = trim_postcode(raw)
        try:
            Validators.assert_postcode(postcode)
        except InvalidPostcodeError:
            logger.debug("Rejected search input %r", raw)
            return self._finish(SearchStatus.INVALID, postcode, messages.INVALID_INPUT)

        self.status.set_search_result(messages.CHECKING)
        feature = self.resolver.resolve(postcode)
        if feature is None:
            return self._finish(SearchStatus.NOT_FOUND, postcode, messages.not_found_message(postcode))

        if postcode in self.flagged_codes:
            outcome, style, label, message = (
                SearchStatus.MATCHED, FLAGGED_STYLE, FLAGGED_POPUP_LABEL, messages.FLAGGED_MESSAGE,
            )
        else:
            outcome, style, label, message = (
                SearchStatus.CLEAR, CLEAR_STYLE, CLEAR_POPUP_LABEL, messages.CLEAR_MESSAGE,
            )

        self.map_host.add_feature(OverlayGroup.SEARCH, feature, style, postcode_popup(postcode, label))
        self.map_host.fit_bounds(feature.bounds, padding=DEFAULT_PADDING)
        return self._finish(outcome, postcode, message, feature)

    def _finish(self, outcome: SearchStatus, postcode: str, message: str, feature=None) -> SearchOutcome:
        self.status.set_search_result(message)
        return SearchOutcome(status=outcome, postcode=postcode, message=message, feature=feature)
