"""BirdWeather species lookup constants.

The lookup endpoint takes a batch of ``"<scientific>_<common>"`` keys and
returns whichever of them it recognises.
"""

from __future__ import annotations

# Fields requested per species
PHOTO_FIELDS = ["imageUrl", "thumbnailUrl"]


class PhotoLookupError(RuntimeError):
    """The lookup response did not have the expected ``species`` mapping."""
