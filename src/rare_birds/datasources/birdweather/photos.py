"""Batched species photo lookup."""

from __future__ import annotations

import logging
from typing import TYPE_CHECKING, Any

from pydantic import BaseModel, ConfigDict, Field, ValidationError

from rare_birds.config import get_settings
from rare_birds.datasources.birdweather.client import PHOTO_FIELDS, PhotoLookupError
from rare_birds.services.http import session

if TYPE_CHECKING:
    from collections.abc import Iterable

logger = logging.getLogger(__name__)


class SpeciesPhoto(BaseModel):
    """Photo URLs for one species."""

    model_config = ConfigDict(frozen=True, populate_by_name=True)

    image_url: str | None = Field(default=None, alias="imageUrl")
    thumbnail_url: str | None = Field(default=None, alias="thumbnailUrl")


def _parse_photo(key: str, entry: Any) -> SpeciesPhoto | None:
    """Parse one species entry. Returns None if it isn't a valid photo object."""
    try:
        return SpeciesPhoto.model_validate(entry)
    except ValidationError as e:
        logger.debug("Skipping malformed photo entry for %s: %s", key, e)
        return None


def lookup_species_photos(
    species_keys: Iterable[str],
    *,
    url: str | None = None,
) -> dict[str, SpeciesPhoto]:
    """
    Look up photos for a batch of species in a single POST.

    Args:
        species_keys: ``"<sciName>_<comName>"`` keys.
        url: Lookup endpoint. Defaults to ``Settings.photo_lookup_url``.

    Returns:
        Mapping of key → SpeciesPhoto for the species the service knows.
        Unknown species are simply absent.

    Raises:
        requests.RequestException: On network errors or non-success status.
        PhotoLookupError: If the body has no ``species`` object.
    """
    url = url or get_settings().photo_lookup_url
    body = {"species": list(species_keys), "fields": PHOTO_FIELDS}

    resp = session.post(url, json=body)
    resp.raise_for_status()
    data = resp.json()

    species = data.get("species") if isinstance(data, dict) else None
    if not isinstance(species, dict):
        msg = "Photo lookup response is missing the 'species' object"
        raise PhotoLookupError(msg)

    photos: dict[str, SpeciesPhoto] = {}
    for key, entry in species.items():
        photo = _parse_photo(key, entry)
        if photo is not None:
            photos[key] = photo
    return photos
