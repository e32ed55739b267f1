"""eBird sightings data source.

The browser never talks to eBird directly: the app's backend proxies
``/api/birds`` to the eBird recent/notable observation endpoints and holds
the API token.

Public API:
  - client: endpoint path, ObservationFetchError
  - observations: build_query_params, fetch_observations
"""

from rare_birds.datasources.ebird.client import BIRDS_ENDPOINT, ObservationFetchError
from rare_birds.datasources.ebird.observations import build_query_params, fetch_observations

__all__ = [
    "BIRDS_ENDPOINT",
    "ObservationFetchError",
    "build_query_params",
    "fetch_observations",
]
