"""Sightings proxy client constants.

Proxied eBird docs: https://documenter.getpostman.com/view/664302/S1ENwy59
"""

from __future__ import annotations

BIRDS_ENDPOINT = "api/birds"


class ObservationFetchError(RuntimeError):
    """The sightings query returned something other than a list of records."""
