"""Tests for best-effort photo enrichment."""

from __future__ import annotations

from datetime import datetime
from functools import partial
from unittest.mock import Mock, patch

import requests

from rare_birds.datasources.birdweather import (
    PhotoLookupError,
    SpeciesPhoto,
    lookup_species_photos,
)
from rare_birds.enrich import enrich, unique_species_keys
from rare_birds.schemas import LocationCluster, SpeciesRecord


def _bird(sci: str, com: str, sub_id: str = "S1") -> SpeciesRecord:
    return SpeciesRecord(
        sci_name=sci,
        com_name=com,
        species_code=com.lower().replace(" ", "")[:6],
        obs_dt=datetime(2025, 3, 1, 8, 15),
        sub_ids=[sub_id],
    )


EGRET = _bird("Egretta thula", "Snowy Egret")
HERON = _bird("Ardea herodias", "Great Blue Heron")
OYSTERCATCHER = _bird("Haematopus bachmani", "Black Oystercatcher")

CLUSTERS = [
    LocationCluster(lat=36.9665, lng=-122.0311, birds=[EGRET, HERON]),
    LocationCluster(lat=36.9512, lng=-122.0578, birds=[OYSTERCATCHER, EGRET]),
]

PHOTOS = {
    "Egretta thula_Snowy Egret": SpeciesPhoto(
        image_url="https://media.birdweather.com/species/snoegr/full.jpg",
        thumbnail_url="https://media.birdweather.com/species/snoegr/thumb.jpg",
    ),
    "Ardea herodias_Great Blue Heron": SpeciesPhoto(
        image_url="https://media.birdweather.com/species/grbher3/full.jpg",
        thumbnail_url="https://media.birdweather.com/species/grbher3/thumb.jpg",
    ),
}


class TestUniqueSpeciesKeys:
    """Test unique_species_keys."""

    def test_deduplicates_in_first_seen_order(self) -> None:
        assert unique_species_keys(CLUSTERS) == [
            "Egretta thula_Snowy Egret",
            "Ardea herodias_Great Blue Heron",
            "Haematopus bachmani_Black Oystercatcher",
        ]

    def test_empty(self) -> None:
        assert unique_species_keys([]) == []


class TestEnrich:
    """Test enrich."""

    def test_single_batched_lookup(self) -> None:
        lookup = Mock(return_value=PHOTOS)
        enrich(CLUSTERS, lookup=lookup)
        lookup.assert_called_once_with(unique_species_keys(CLUSTERS))

    def test_attaches_photos_for_known_species(self) -> None:
        result = enrich(CLUSTERS, lookup=Mock(return_value=PHOTOS))

        egret = result[0].birds[0]
        assert egret.thumbnail_url == "https://media.birdweather.com/species/snoegr/thumb.jpg"
        assert egret.full_photo_url == "https://media.birdweather.com/species/snoegr/full.jpg"
        # same species in a second cluster gets the same photo
        assert result[1].birds[1].thumbnail_url == egret.thumbnail_url

    def test_unknown_species_left_without_photo(self) -> None:
        result = enrich(CLUSTERS, lookup=Mock(return_value=PHOTOS))
        oystercatcher = result[1].birds[0]
        assert oystercatcher.thumbnail_url is None
        assert oystercatcher.full_photo_url is None
        assert oystercatcher.has_photo is False

    def test_does_not_mutate_input(self) -> None:
        enrich(CLUSTERS, lookup=Mock(return_value=PHOTOS))
        assert CLUSTERS[0].birds[0].thumbnail_url is None

    def test_preserves_everything_else(self) -> None:
        result = enrich(CLUSTERS, lookup=Mock(return_value=PHOTOS))
        assert [(c.lat, c.lng) for c in result] == [(c.lat, c.lng) for c in CLUSTERS]
        assert result[0].birds[0].sub_ids == EGRET.sub_ids
        assert result[0].birds[0].obs_dt == EGRET.obs_dt

    def test_network_failure_returns_clusters_unchanged(self) -> None:
        lookup = Mock(side_effect=requests.ConnectionError("offline"))
        result = enrich(CLUSTERS, lookup=lookup)
        assert result == CLUSTERS
        for cluster in result:
            for bird in cluster.birds:
                assert bird.thumbnail_url is None
                assert bird.full_photo_url is None

    def test_http_error_returns_clusters_unchanged(self) -> None:
        lookup = Mock(side_effect=requests.HTTPError("500 Server Error"))
        assert enrich(CLUSTERS, lookup=lookup) == CLUSTERS

    def test_malformed_response_returns_clusters_unchanged(self) -> None:
        lookup = Mock(side_effect=PhotoLookupError("missing species"))
        assert enrich(CLUSTERS, lookup=lookup) == CLUSTERS

    def test_failure_is_logged(self, caplog) -> None:  # type: ignore[no-untyped-def]
        lookup = Mock(side_effect=requests.Timeout("slow"))
        with caplog.at_level("WARNING", logger="rare_birds.enrich"):
            enrich(CLUSTERS, lookup=lookup)
        assert "Error fetching species photos" in caplog.text

    def test_no_species_skips_lookup(self) -> None:
        lookup = Mock()
        assert enrich([], lookup=lookup) == []
        lookup.assert_not_called()

    @patch("rare_birds.datasources.birdweather.photos.session.post")
    def test_malformed_photo_entry_leaves_species_without_photo(self, mock_post: Mock) -> None:
        resp = Mock()
        resp.json.return_value = {
            "species": {
                "Egretta thula_Snowy Egret": {"imageUrl": 123, "thumbnailUrl": ["x"]},
                "Ardea herodias_Great Blue Heron": {
                    "imageUrl": "https://media.birdweather.com/species/grbher3/full.jpg",
                    "thumbnailUrl": "https://media.birdweather.com/species/grbher3/thumb.jpg",
                },
            }
        }
        mock_post.return_value = resp

        result = enrich(
            CLUSTERS, lookup=partial(lookup_species_photos, url="https://lookup.test")
        )

        egret, heron = result[0].birds
        assert egret.thumbnail_url is None
        assert egret.full_photo_url is None
        assert heron.thumbnail_url == "https://media.birdweather.com/species/grbher3/thumb.jpg"
