from __future__ import annotations

import pytest

from trip_estimator.services.matching import (
    find_best_match,
    levenshtein_distance,
    match_score,
    name_similarity,
    normalize_station_name,
)
from trip_estimator.services.types import FeedStationRecord, GasStationCandidate, GeoPoint


def _candidate(name: str, lat: float = 40.0, lng: float = -75.0) -> GasStationCandidate:
    return GasStationCandidate(name=name, address="1 Main St", location=GeoPoint(lat, lng))


def _record(
    name: str, lat: float = 40.0, lng: float = -75.0, station_id: str = "1", address: str = ""
) -> FeedStationRecord:
    return FeedStationRecord(
        station_id=station_id,
        name=name,
        address_line=address,
        latitude=lat,
        longitude=lng,
    )


@pytest.mark.parametrize(
    ("raw", "normalized"),
    [
        ("Shell Gas Station", "gasstation"),
        ("shellgasstation", "gasstation"),
        ("Chevron Downtown #1234", "downtown"),
        ("7-Eleven Store", "store"),
        ("Joe's Fuel & Go", "joesfuelgo"),
    ],
)
def test_normalize_station_name(raw: str, normalized: str) -> None:
    assert normalize_station_name(raw) == normalized


def test_levenshtein_distance() -> None:
    assert levenshtein_distance("kitten", "sitting") == 3
    assert levenshtein_distance("", "abc") == 3
    assert levenshtein_distance("same", "same") == 0


def test_name_similarity() -> None:
    assert name_similarity("quickfuel", "quickfuel") == 1.0
    assert name_similarity("quickfuel", "quickfuelexpress") == 0.9
    assert name_similarity("abcd", "abce") == pytest.approx(0.75)


def test_brand_variants_score_as_identical() -> None:
    score = match_score(_candidate("Shell Gas Station"), _record("shellgasstation"))

    assert score == pytest.approx(1.0)


def test_records_beyond_hundred_metres_are_rejected() -> None:
    # 0.002 degrees of latitude is roughly 222 m.
    assert match_score(_candidate("Quick Fuel"), _record("Quick Fuel", lat=40.002)) is None
    assert find_best_match(_candidate("Quick Fuel"), [_record("Quick Fuel", lat=40.002)]) is None


def test_address_line_used_when_record_has_no_name() -> None:
    score = match_score(_candidate("12 Oak Ave"), _record("", address="12 Oak Ave"))

    assert score == pytest.approx(1.0)


def test_dissimilar_names_do_not_match() -> None:
    assert find_best_match(_candidate("Alpha Fuel"), [_record("Zulu Petroleum")]) is None


def test_best_scoring_record_is_chosen() -> None:
    near = _record("Quick Fuel", station_id="near")
    farther = _record("Quick Fuel", lat=40.0005, station_id="farther")

    assert find_best_match(_candidate("Quick Fuel"), [farther, near]) is near


def test_ties_keep_the_first_record() -> None:
    first = _record("Quick Fuel", station_id="first")
    second = _record("Quick Fuel", station_id="second")

    assert find_best_match(_candidate("Quick Fuel"), [first, second]) is first
