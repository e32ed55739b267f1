"""
Sightings pipeline orchestrator.

Turns map events into fetch cycles::

    viewport/params event → gate → radius → query → normalize → enrich → publish

State machine per session: ``IDLE → FETCHING → IDLE``. Only one cycle runs
at a time. Events that arrive while a cycle is in flight (from another
thread, or re-entrantly from a callback) update the latest viewport/params
and mark the session dirty; when the cycle finishes the gate is evaluated
again against those latest inputs. A failed cycle is not retried until the
next event.

FetchState (center + params of the last successful fetch) and the published
cluster list are written only here.
"""

from __future__ import annotations

import logging
import threading
from dataclasses import dataclass
from enum import StrEnum
from typing import TYPE_CHECKING, Any

import requests

from rare_birds import enrich as enrichment
from rare_birds.config import get_settings
from rare_birds.datasources import ebird
from rare_birds.gate import should_fetch
from rare_birds.geo import viewport_radius_km
from rare_birds.normalize import normalize_records
from rare_birds.schemas import Bounds, FetchState, LatLng, QueryParams

if TYPE_CHECKING:
    from collections.abc import Callable

    from rare_birds.schemas import LocationCluster

    ObservationFetcher = Callable[[LatLng, float, QueryParams], list[dict[str, Any]]]
    Enricher = Callable[[list[LocationCluster]], list[LocationCluster]]

logger = logging.getLogger(__name__)

FETCH_ERROR_MESSAGE = "Error fetching bird sightings"


class PipelineState(StrEnum):
    """Fetch cycle state."""

    IDLE = "idle"
    FETCHING = "fetching"


@dataclass(frozen=True)
class _Request:
    """Inputs for one approved fetch cycle."""

    center: LatLng
    bounds: Bounds | None
    params: QueryParams


def _noop(*_args: object) -> None:
    return None


class SightingsPipeline:
    """Coordinates sightings fetches for one map session."""

    def __init__(
        self,
        *,
        center: LatLng | None = None,
        params: QueryParams | None = None,
        min_move_km: float | None = None,
        fetch_observations: ObservationFetcher = ebird.fetch_observations,
        enrich: Enricher = enrichment.enrich,
        on_clusters_updated: Callable[[list[LocationCluster]], None] = _noop,
        on_fetching_changed: Callable[[bool], None] = _noop,
        on_error: Callable[[str], None] = _noop,
    ) -> None:
        settings = get_settings()
        self._center = center or LatLng(settings.default_lat, settings.default_lng)
        self._bounds: Bounds | None = None
        self._params = params or QueryParams()
        self._min_move_km = settings.min_move_km if min_move_km is None else min_move_km

        self._fetch_observations = fetch_observations
        self._enrich = enrich
        self._on_clusters_updated = on_clusters_updated
        self._on_fetching_changed = on_fetching_changed
        self._on_error = on_error

        self._lock = threading.Lock()
        self._indicator_lock = threading.RLock()
        self._state = PipelineState.IDLE
        self._dirty = False
        self._fetch_state: FetchState | None = None
        self._clusters: list[LocationCluster] = []

    # -------------------------------------------------------------------------
    # Read-only views for the rendering layer
    # -------------------------------------------------------------------------

    @property
    def state(self) -> PipelineState:
        return self._state

    @property
    def clusters(self) -> list[LocationCluster]:
        """Last successfully published clusters."""
        return list(self._clusters)

    @property
    def fetch_state(self) -> FetchState | None:
        return self._fetch_state

    @property
    def params(self) -> QueryParams:
        return self._params

    # -------------------------------------------------------------------------
    # Inbound events
    # -------------------------------------------------------------------------

    def on_viewport_settled(self, center: LatLng, bounds: Bounds | None = None) -> None:
        """The map finished moving; ``bounds`` is None if not yet known."""
        with self._lock:
            self._center = center
            self._bounds = bounds
        self._evaluate()

    def on_params_changed(self, params: QueryParams) -> None:
        """The user picked a different time window or classification."""
        with self._lock:
            self._params = params
        self._evaluate()

    def refresh(self) -> None:
        """Evaluate the gate against the current inputs (e.g. on first load)."""
        self._evaluate()

    # -------------------------------------------------------------------------
    # State machine
    # -------------------------------------------------------------------------

    def _next_request(self) -> _Request | None:
        """Gate the latest inputs. Caller holds the lock."""
        if not should_fetch(
            self._center, self._params, self._fetch_state, min_move_km=self._min_move_km
        ):
            return None
        return _Request(center=self._center, bounds=self._bounds, params=self._params)

    def _evaluate(self) -> None:
        # The indicator lock spans each state change and its callback, so
        # True/False reach the listener in the same order as the transitions.
        with self._indicator_lock:
            with self._lock:
                if self._state is PipelineState.FETCHING:
                    self._dirty = True
                    return
                request = self._next_request()
                if request is None:
                    return
                self._state = PipelineState.FETCHING
                self._dirty = False
            self._on_fetching_changed(True)

        finished = False
        try:
            while not finished:
                self._run_cycle(request)
                with self._indicator_lock:
                    with self._lock:
                        next_request = self._next_request() if self._dirty else None
                        self._dirty = False
                        if next_request is None:
                            self._state = PipelineState.IDLE
                            finished = True
                        else:
                            request = next_request
                    if finished:
                        self._on_fetching_changed(False)
        finally:
            if not finished:
                with self._indicator_lock:
                    with self._lock:
                        self._state = PipelineState.IDLE
                    self._on_fetching_changed(False)

    def _run_cycle(self, request: _Request) -> None:
        """Run one fetch cycle. Only a failed sightings query is an error."""
        center = request.center.rounded(4)
        radius = viewport_radius_km(request.bounds)
        logger.info(
            "Fetching %s sightings (%d days) within %.1f km of (%s, %s)",
            request.params.type.value,
            request.params.back.value,
            radius,
            center.lat,
            center.lng,
        )

        try:
            raw = self._fetch_observations(center, radius, request.params)
        except (requests.RequestException, ebird.ObservationFetchError, ValueError):
            logger.exception("Error fetching bird data")
            self._on_error(FETCH_ERROR_MESSAGE)
            return

        clusters = self._enrich(normalize_records(raw))

        with self._lock:
            self._clusters = clusters
            self._fetch_state = FetchState(center=center, params=request.params)
        logger.info("Published %d location(s)", len(clusters))
        self._on_clusters_updated(list(clusters))
