"""Observation normalizer: raw eBird records → location clusters.

eBird returns one record per (species, checklist) at a location. For the map
we want one marker per coordinate and, inside it, one entry per species with
every checklist that reported it.
"""

from __future__ import annotations

import logging
from typing import TYPE_CHECKING, Any

from pydantic import ValidationError

from rare_birds.schemas import LocationCluster, Observation, SpeciesRecord

if TYPE_CHECKING:
    from collections.abc import Iterable

logger = logging.getLogger(__name__)


# =============================================================================
# Parsing
# =============================================================================


def parse_observations(raw: Iterable[dict[str, Any]]) -> list[Observation]:
    """Validate raw records, skipping any that are missing required fields."""
    observations: list[Observation] = []
    skipped = 0
    for record in raw:
        try:
            observations.append(Observation.model_validate(record))
        except ValidationError as e:
            skipped += 1
            logger.debug("Skipping malformed observation %r: %s", record, e)
    if skipped:
        logger.info("Skipped %d malformed observation(s)", skipped)
    return observations


# =============================================================================
# Grouping
# =============================================================================


def _merge_species(sightings: list[Observation]) -> SpeciesRecord:
    """Merge sightings of one species at one location into a SpeciesRecord.

    Identity fields come from the first sighting. ``obs_dt`` is the latest
    time across all sightings. ``sub_ids`` keeps source order and drops
    repeats of an id already seen.
    """
    first = sightings[0]
    return SpeciesRecord(
        sci_name=first.sci_name,
        com_name=first.com_name,
        species_code=first.species_code,
        obs_dt=max(s.obs_dt for s in sightings),
        sub_ids=list(dict.fromkeys(s.sub_id for s in sightings)),
        how_many=first.how_many,
    )


def normalize(observations: Iterable[Observation]) -> list[LocationCluster]:
    """
    Group valid observations by exact coordinate, then by common name.

    Invalid observations (``obs_valid`` false) are dropped. Clusters and the
    species inside them come out in the order they first appear in the input.

    Returns:
        One LocationCluster per distinct (lat, lng); empty for empty input.
    """
    by_location: dict[tuple[float, float], dict[str, list[Observation]]] = {}
    for obs in observations:
        if not obs.obs_valid:
            continue
        species = by_location.setdefault(obs.location, {})
        species.setdefault(obs.com_name, []).append(obs)

    clusters: list[LocationCluster] = []
    for (lat, lng), by_species in by_location.items():
        birds = [_merge_species(sightings) for sightings in by_species.values()]
        first = next(iter(by_species.values()))[0]
        clusters.append(LocationCluster(lat=lat, lng=lng, loc_name=first.loc_name, birds=birds))
    return clusters


def normalize_records(raw: Iterable[dict[str, Any]]) -> list[LocationCluster]:
    """Parse raw API records and normalize them in one step."""
    return normalize(parse_observations(raw))
