from __future__ import annotations

import pytest

from trip_estimator.exceptions import VehicleNotFoundError
from trip_estimator.services.regional_prices import (
    DEFAULT_PRICES,
    average_price,
    city_price,
    extract_city_name,
)
from trip_estimator.services.vehicle_catalog import StaticVehicleCatalog


def test_catalog_navigation() -> None:
    catalog = StaticVehicleCatalog()

    assert catalog.years() == [2024]
    assert "Honda" in catalog.makes(2024)
    assert catalog.models(2024, "Honda") == ["Accord", "CR-V", "Civic"]
    assert catalog.makes(1999) == []


def test_catalog_lookup_spec() -> None:
    specs = StaticVehicleCatalog().lookup_spec(2024, "Honda", "Civic")

    assert len(specs) == 1
    assert specs[0].vehicle_id == 1
    assert specs[0].combined_mpg == 35
    assert specs[0].tank_size_gallons == 12.4
    assert StaticVehicleCatalog().lookup_spec(2024, "Honda", "Odyssey") == []


def test_catalog_get_unknown_vehicle() -> None:
    with pytest.raises(VehicleNotFoundError):
        StaticVehicleCatalog().get(999)


def test_catalog_ids_are_unique() -> None:
    ids = [vehicle.vehicle_id for vehicle in StaticVehicleCatalog().vehicles]

    assert len(ids) == len(set(ids))


@pytest.mark.parametrize(
    ("address", "city"),
    [
        ("123 Main St, Chicago, IL 60601", "Chicago"),
        ("Austin, TX", "Austin"),
        ("San Francisco", "San Francisco"),
        ("Smallville, KS", "Smallville"),
    ],
)
def test_extract_city_name(address: str, city: str) -> None:
    assert extract_city_name(address) == city


def test_city_price_by_grade() -> None:
    assert city_price("Toronto", "diesel") == 1.70
    assert city_price("Smallville", "premium") == DEFAULT_PRICES["premium"]


def test_average_price_across_route_cities() -> None:
    assert average_price(["Chicago, IL", "Detroit, MI"]) == pytest.approx(3.525)
    assert average_price([], "diesel") == DEFAULT_PRICES["diesel"]
