"""Fetch gate: does a viewport or parameter change need a new query?

Policy: always fetch on first load or when the query parameters differ from
the last successful fetch; otherwise fetch only once the map center has moved
at least ``min_move_km`` away from the center of that fetch. Small pans reuse
the clusters already on screen.
"""

from __future__ import annotations

import logging
from typing import TYPE_CHECKING

from rare_birds.geo import distance_km

if TYPE_CHECKING:
    from rare_birds.schemas import FetchState, LatLng, QueryParams

logger = logging.getLogger(__name__)

MIN_MOVE_KM = 3.0


def should_fetch(
    center: LatLng,
    params: QueryParams,
    previous: FetchState | None,
    *,
    min_move_km: float = MIN_MOVE_KM,
) -> bool:
    """Decide whether ``center``/``params`` warrant a new sightings query."""
    if previous is None:
        return True

    if params != previous.params:
        return True

    moved = distance_km(previous.center.lat, previous.center.lng, center.lat, center.lng)
    if moved < min_move_km:
        logger.debug("Skipping fetch - only %.2f km from last fetch", moved)
        return False
    return True
