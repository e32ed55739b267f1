"""Rare Birds - viewport-driven eBird sightings for an interactive map.

Architecture::

    datasources/   External APIs (eBird sightings proxy, BirdWeather photos)
    geo.py         Haversine distance and viewport query radius
    gate.py        Decides whether a viewport/parameter change needs a new query
    normalize.py   Raw observations → per-location, per-species clusters
    enrich.py      Best-effort photo lookup joined onto clusters
    pipeline.py    Orchestrator state machine (one fetch cycle in flight)
    services/      Shared utilities (HTTP client with retry)

Data flow: map viewport → gate → ebird query → normalize → enrich → clusters

The map itself (tiles, markers, popups, place search, geolocation) is owned
by the rendering layer; it feeds ``SightingsPipeline.on_viewport_settled`` and
``on_params_changed`` and receives ``LocationCluster`` lists back.
"""

__version__ = "0.1.0"
__author__ = "Michelle Tomasko"

from rare_birds.config import Settings
from rare_birds.pipeline import SightingsPipeline
from rare_birds.schemas import LocationCluster, QueryParams, SpeciesRecord

__all__ = [
    "LocationCluster",
    "QueryParams",
    "Settings",
    "SightingsPipeline",
    "SpeciesRecord",
    "__version__",
]
