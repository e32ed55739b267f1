"""BirdWeather species photo data source.

Public API:
  - client: lookup URL, requested fields, PhotoLookupError
  - photos: SpeciesPhoto, lookup_species_photos
"""

from rare_birds.datasources.birdweather.client import PHOTO_FIELDS, PhotoLookupError
from rare_birds.datasources.birdweather.photos import SpeciesPhoto, lookup_species_photos

__all__ = [
    "PHOTO_FIELDS",
    "PhotoLookupError",
    "SpeciesPhoto",
    "lookup_species_photos",
]
