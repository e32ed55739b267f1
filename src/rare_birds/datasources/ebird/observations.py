"""Sightings query around a map center."""

from __future__ import annotations

import logging
from typing import TYPE_CHECKING, Any

from rare_birds.config import get_settings
from rare_birds.datasources.ebird.client import BIRDS_ENDPOINT, ObservationFetchError
from rare_birds.services.http import session

if TYPE_CHECKING:
    from rare_birds.schemas import LatLng, QueryParams

logger = logging.getLogger(__name__)


def build_query_params(center: LatLng, radius_km: float, params: QueryParams) -> dict[str, str]:
    """Query string for ``/api/birds``: 4-decimal center, 1-decimal radius."""
    return {
        "lat": f"{round(center.lat, 4)}",
        "lng": f"{round(center.lng, 4)}",
        "dist": f"{radius_km:.1f}",
        "type": params.type.value,
        "back": str(params.back.value),
    }


def fetch_observations(
    center: LatLng,
    radius_km: float,
    params: QueryParams,
    *,
    base_url: str | None = None,
) -> list[dict[str, Any]]:
    """
    Fetch raw sightings within ``radius_km`` of ``center``.

    Args:
        center: Query center.
        radius_km: Search radius; callers keep this at or below 25 km.
        params: Time window and classification.
        base_url: Proxy base URL. Defaults to ``Settings.api_url``.

    Returns:
        Raw eBird observation dicts, unvalidated.

    Raises:
        requests.RequestException: On network errors or non-success status.
        ObservationFetchError: If the body is not a JSON array.
    """
    base_url = base_url or get_settings().api_url
    url = f"{base_url.rstrip('/')}/{BIRDS_ENDPOINT}"
    query = build_query_params(center, radius_km, params)

    logger.debug("GET %s %s", url, query)
    resp = session.get(url, params=query)
    resp.raise_for_status()
    data = resp.json()
    if not isinstance(data, list):
        msg = f"Expected a list of sightings, got {type(data).__name__}"
        raise ObservationFetchError(msg)
    return data
