"""
Domain models for rare birds.

Pydantic models for eBird observation records and the clusters built from
them, plus small frozen value types for map geometry. Field aliases match the
eBird JSON keys (``comName``, ``subId``...) so raw records validate directly.
"""

from __future__ import annotations

from dataclasses import dataclass
from datetime import datetime
from enum import IntEnum, StrEnum
from typing import Any

from pydantic import BaseModel, ConfigDict, Field, field_validator

EBIRD_CHECKLIST_URL = "https://ebird.org/checklist/{sub_id}"

# eBird sends "YYYY-MM-DD HH:MM", or just the date when no time was recorded
_OBS_DT_FORMATS = ("%Y-%m-%d %H:%M", "%Y-%m-%d")


# =============================================================================
# Query parameters
# =============================================================================


class SightingType(StrEnum):
    """Classification of sightings to query."""

    RECENT = "recent"
    RARE = "rare"


class DaysBack(IntEnum):
    """Supported time windows, in days."""

    ONE = 1
    THREE = 3
    WEEK = 7
    TWO_WEEKS = 14
    MONTH = 30


class QueryParams(BaseModel):
    """Time window and classification used for one fetch."""

    model_config = ConfigDict(frozen=True)

    back: DaysBack = DaysBack.WEEK
    type: SightingType = SightingType.RECENT


# =============================================================================
# Geometry
# =============================================================================


@dataclass(frozen=True)
class LatLng:
    """A point in decimal degrees."""

    lat: float
    lng: float

    def rounded(self, ndigits: int = 4) -> LatLng:
        return LatLng(round(self.lat, ndigits), round(self.lng, ndigits))


@dataclass(frozen=True)
class Bounds:
    """Visible map rectangle, by its north-east and south-west corners."""

    ne: LatLng
    sw: LatLng


@dataclass(frozen=True)
class FetchState:
    """Center and parameters of the last successful fetch."""

    center: LatLng
    params: QueryParams


# =============================================================================
# Observations
# =============================================================================


def parse_obs_dt(value: Any) -> datetime:
    """Parse an eBird ``obsDt`` string (seconds, if present, are dropped)."""
    if isinstance(value, datetime):
        return value
    if not isinstance(value, str):
        msg = f"obsDt must be a string, got {type(value).__name__}"
        raise ValueError(msg)
    text = value.strip()[:16]
    for fmt in _OBS_DT_FORMATS:
        try:
            return datetime.strptime(text, fmt)
        except ValueError:
            continue
    msg = f"Unrecognised obsDt: {value!r}"
    raise ValueError(msg)


class Observation(BaseModel):
    """One eBird sighting record, as returned by the sightings API."""

    model_config = ConfigDict(frozen=True, populate_by_name=True)

    sci_name: str = Field(..., alias="sciName", min_length=1)
    com_name: str = Field(..., alias="comName", min_length=1)
    species_code: str = Field(..., alias="speciesCode")
    lat: float = Field(..., ge=-90, le=90)
    lng: float = Field(..., ge=-180, le=180)
    obs_dt: datetime = Field(..., alias="obsDt")
    obs_valid: bool = Field(default=False, alias="obsValid")
    sub_id: str = Field(..., alias="subId", min_length=1)
    loc_id: str | None = Field(default=None, alias="locId")
    loc_name: str | None = Field(default=None, alias="locName")
    how_many: int | None = Field(default=None, alias="howMany")

    @field_validator("obs_dt", mode="before")
    @classmethod
    def _parse_obs_dt(cls, value: Any) -> datetime:
        return parse_obs_dt(value)

    @property
    def location(self) -> tuple[float, float]:
        return (self.lat, self.lng)

    @property
    def species_key(self) -> str:
        """Join key used by the photo lookup (``"<sciName>_<comName>"``)."""
        return f"{self.sci_name}_{self.com_name}"


# =============================================================================
# Clusters
# =============================================================================


class SpeciesRecord(BaseModel):
    """All sightings of one species at one location, merged."""

    model_config = ConfigDict(frozen=True)

    sci_name: str
    com_name: str
    species_code: str
    obs_dt: datetime = Field(..., description="Most recent observation time")
    sub_ids: list[str] = Field(..., min_length=1)
    how_many: int | None = None
    thumbnail_url: str | None = None
    full_photo_url: str | None = None

    @property
    def species_key(self) -> str:
        return f"{self.sci_name}_{self.com_name}"

    @property
    def checklist_urls(self) -> list[str]:
        return [EBIRD_CHECKLIST_URL.format(sub_id=s) for s in self.sub_ids]

    @property
    def has_photo(self) -> bool:
        return self.thumbnail_url is not None or self.full_photo_url is not None


class LocationCluster(BaseModel):
    """Everything seen at one exact coordinate."""

    model_config = ConfigDict(frozen=True)

    lat: float
    lng: float
    loc_name: str | None = None
    birds: list[SpeciesRecord] = Field(default_factory=list)

    @property
    def species_count(self) -> int:
        return len(self.birds)
