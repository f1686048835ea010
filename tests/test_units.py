from __future__ import annotations

import pytest

from trip_estimator.exceptions import InvalidInputError
from trip_estimator.services.types import RouteLeg
from trip_estimator.services.units import (
    build_route_info,
    format_duration,
    meters_to_kilometers,
    meters_to_miles,
    parse_duration,
)


def test_meter_conversions() -> None:
    assert meters_to_miles(1609.344) == pytest.approx(1.0, rel=1e-5)
    assert meters_to_kilometers(2500) == 2.5
    assert meters_to_miles(0) == 0


@pytest.mark.parametrize(
    ("seconds", "expected"),
    [
        (3665, "1 hour 1 minute"),
        (125, "2 minutes"),
        (60, "1 minute"),
        (7200, "2 hours 0 minutes"),
        (3600 + 120, "1 hour 2 minutes"),
        (59, "0 minutes"),
    ],
)
def test_format_duration(seconds: int, expected: str) -> None:
    assert format_duration(seconds) == expected


def test_parse_duration_accepts_provider_strings() -> None:
    assert parse_duration("5400s") == 5400
    assert parse_duration("12.7s") == 12
    assert parse_duration(90) == 90

    with pytest.raises(InvalidInputError):
        parse_duration("soon")


def test_build_route_info_derives_units_and_keeps_legs() -> None:
    legs = [
        RouteLeg("Austin, TX", "Waco, TX", 160_934.4, 5400),
        RouteLeg("Waco, TX", "Dallas, TX", 152_887.7, 5000),
    ]

    route = build_route_info(313_822.1, 10_400, legs=legs, encoded_polyline="abc")

    assert route.distance_km == pytest.approx(313.8221)
    assert route.distance_miles == pytest.approx(195.0, rel=1e-3)
    assert route.duration_formatted == "2 hours 53 minutes"
    assert route.legs == tuple(legs)
    assert route.encoded_polyline == "abc"


def test_build_route_info_rejects_negative_values() -> None:
    with pytest.raises(InvalidInputError):
        build_route_info(-1, 10)

    with pytest.raises(InvalidInputError):
        build_route_info(100, 10, legs=[RouteLeg("a", "b", -5, 1)])
