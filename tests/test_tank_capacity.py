from __future__ import annotations

import pytest

from trip_estimator.services.tank_capacity import (
    estimate_by_vehicle_class,
    estimate_tank_size,
    lookup_exact,
    lookup_relaxed,
    resolve_tank_size,
)
from trip_estimator.services.types import VehicleSpec


def _spec(
    make: str = "Acme",
    model: str = "Sedan",
    year: int = 2024,
    combined_mpg: float = 28.0,
    fuel_type: str = "regular",
    tank_size_gallons: float | None = None,
) -> VehicleSpec:
    return VehicleSpec(
        year=year,
        make=make,
        model=model,
        fuel_type=fuel_type,  # type: ignore[arg-type]
        city_mpg=combined_mpg - 2,
        highway_mpg=combined_mpg + 4,
        combined_mpg=combined_mpg,
        tank_size_gallons=tank_size_gallons,
    )


def test_exact_table_entry_wins() -> None:
    spec = _spec("Honda", "Civic", 2024, combined_mpg=35.0)

    assert lookup_exact(spec) == 12.4
    assert estimate_tank_size(spec) == (12.4, "database")


def test_other_model_year_is_used_when_exact_year_missing() -> None:
    spec = _spec("Honda", "Civic", 2019, combined_mpg=35.0)

    assert lookup_exact(spec) is None
    assert lookup_relaxed(spec) == 12.4
    assert estimate_tank_size(spec) == (12.4, "database")


def test_electric_entries_fall_through_to_heuristics() -> None:
    spec = _spec("Tesla", "Model 3", 2024, combined_mpg=132.0)

    assert lookup_exact(spec) is None
    assert lookup_relaxed(spec) is None
    assert estimate_tank_size(spec) == (10.5, "estimated")


def test_diesel_rule_precedes_truck_rule() -> None:
    assert estimate_by_vehicle_class(_spec(model="Sierra 2500HD", fuel_type="diesel")) == 22.0


def test_truck_keyword_matches_case_insensitively() -> None:
    assert estimate_by_vehicle_class(_spec(make="GMC", model="SIERRA 1500")) == 24.0


def test_suv_keyword() -> None:
    assert estimate_by_vehicle_class(_spec(make="Toyota", model="4Runner TRD")) == 20.0


@pytest.mark.parametrize(
    ("combined_mpg", "gallons"),
    [
        (55.0, 10.5),
        (50.0, 10.5),
        (45.0, 11.5),
        (37.0, 13.0),
        (32.0, 14.5),
        (27.0, 16.0),
        (22.0, 18.0),
        (17.0, 21.0),
        (12.0, 23.0),
    ],
)
def test_mpg_bands(combined_mpg: float, gallons: float) -> None:
    assert estimate_tank_size(_spec(combined_mpg=combined_mpg)) == (gallons, "estimated")


def test_resolve_fills_missing_tank_without_mutating_input() -> None:
    spec = _spec(combined_mpg=32.0)

    resolved = resolve_tank_size(spec)

    assert resolved.tank_size_gallons == 14.5
    assert resolved.tank_size_source == "estimated"
    assert spec.tank_size_gallons is None
    assert spec.tank_size_source == "unknown"


def test_resolve_keeps_existing_tank_and_is_idempotent() -> None:
    spec = _spec("Honda", "Civic", 2024)
    once = resolve_tank_size(spec)

    assert resolve_tank_size(once) == once
    manual = _spec(tank_size_gallons=17.0)
    assert resolve_tank_size(manual) is manual


def test_zero_tank_is_treated_as_missing() -> None:
    resolved = resolve_tank_size(_spec(combined_mpg=22.0, tank_size_gallons=0.0))

    assert resolved.tank_size_gallons == 18.0
