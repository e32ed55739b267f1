"""Photo enrichment: attach species photos to clusters, best effort.

One lookup per fetch cycle covers every species on screen. If it fails for
any reason the clusters are returned as they were; a missing photo is never
worth failing or retrying the sightings fetch.

Known data-quality risk: photos are joined on ``"<sciName>_<comName>"``.
eBird and BirdWeather name species independently, so a naming variant on
either side (taxonomy splits, punctuation, regional common names) silently
yields no photo.
"""

from __future__ import annotations

import logging
from typing import TYPE_CHECKING

import requests

from rare_birds.datasources.birdweather import PhotoLookupError, lookup_species_photos

if TYPE_CHECKING:
    from collections.abc import Callable, Iterable

    from rare_birds.datasources.birdweather import SpeciesPhoto
    from rare_birds.schemas import LocationCluster, SpeciesRecord

    PhotoLookup = Callable[[Iterable[str]], dict[str, SpeciesPhoto]]

logger = logging.getLogger(__name__)


def unique_species_keys(clusters: list[LocationCluster]) -> list[str]:
    """Distinct photo lookup keys across all clusters, first-seen order."""
    keys: dict[str, None] = {}
    for cluster in clusters:
        for bird in cluster.birds:
            keys.setdefault(bird.species_key, None)
    return list(keys)


def _with_photo(bird: SpeciesRecord, photos: dict[str, SpeciesPhoto]) -> SpeciesRecord:
    photo = photos.get(bird.species_key)
    if photo is None:
        return bird
    return bird.model_copy(
        update={"thumbnail_url": photo.thumbnail_url, "full_photo_url": photo.image_url}
    )


def enrich(
    clusters: list[LocationCluster],
    *,
    lookup: PhotoLookup = lookup_species_photos,
) -> list[LocationCluster]:
    """
    Return copies of ``clusters`` with photo URLs filled in where known.

    The input clusters are never modified. On lookup failure the original
    list is returned unchanged and the error is logged.
    """
    keys = unique_species_keys(clusters)
    if not keys:
        return clusters

    try:
        photos = lookup(keys)
    except (requests.RequestException, PhotoLookupError, ValueError) as e:
        logger.warning("Error fetching species photos: %s", e)
        return clusters

    logger.debug("Found photos for %d of %d species", len(photos), len(keys))
    return [
        cluster.model_copy(update={"birds": [_with_photo(b, photos) for b in cluster.birds]})
        for cluster in clusters
    ]
