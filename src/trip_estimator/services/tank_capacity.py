from __future__ import annotations

import dataclasses
import logging
from collections.abc import Callable
from dataclasses import dataclass

from trip_estimator.services.types import TankSizeSource, VehicleSpec

logger = logging.getLogger(__name__)

# (year, make, model) -> gallons. Zero marks electric models with no tank.
TANK_CAPACITY_TABLE: dict[tuple[int, str, str], float] = {
    (2024, "Honda", "Civic"): 12.4,
    (2023, "Honda", "Civic"): 12.4,
    (2022, "Honda", "Civic"): 12.4,
    (2024, "Honda", "Accord"): 14.8,
    (2023, "Honda", "Accord"): 14.8,
    (2022, "Honda", "Accord"): 14.8,
    (2024, "Honda", "CR-V"): 14.0,
    (2023, "Honda", "CR-V"): 14.0,
    (2022, "Honda", "CR-V"): 14.0,
    (2024, "Honda", "Pilot"): 19.5,
    (2023, "Honda", "Pilot"): 19.5,
    (2024, "Toyota", "Camry"): 15.8,
    (2023, "Toyota", "Camry"): 15.8,
    (2022, "Toyota", "Camry"): 15.8,
    (2024, "Toyota", "Corolla"): 13.2,
    (2023, "Toyota", "Corolla"): 13.2,
    (2022, "Toyota", "Corolla"): 13.2,
    (2024, "Toyota", "RAV4"): 14.5,
    (2023, "Toyota", "RAV4"): 14.5,
    (2022, "Toyota", "RAV4"): 14.5,
    (2024, "Toyota", "Highlander"): 17.1,
    (2023, "Toyota", "Highlander"): 17.1,
    (2024, "Toyota", "Tacoma"): 21.1,
    (2023, "Toyota", "Tacoma"): 21.1,
    (2024, "Ford", "F-150"): 23.0,
    (2023, "Ford", "F-150"): 23.0,
    (2022, "Ford", "F-150"): 23.0,
    (2024, "Ford", "Mustang"): 15.5,
    (2023, "Ford", "Mustang"): 15.5,
    (2024, "Ford", "Explorer"): 18.0,
    (2023, "Ford", "Explorer"): 18.0,
    (2024, "Ford", "Escape"): 14.0,
    (2023, "Ford", "Escape"): 14.0,
    (2024, "Ford", "Edge"): 15.7,
    (2024, "Chevrolet", "Silverado 1500"): 24.0,
    (2023, "Chevrolet", "Silverado 1500"): 24.0,
    (2022, "Chevrolet", "Silverado 1500"): 24.0,
    (2024, "Chevrolet", "Equinox"): 14.0,
    (2023, "Chevrolet", "Equinox"): 14.0,
    (2024, "Chevrolet", "Malibu"): 15.8,
    (2023, "Chevrolet", "Malibu"): 15.8,
    (2024, "Chevrolet", "Tahoe"): 24.0,
    (2023, "Chevrolet", "Tahoe"): 24.0,
    (2024, "Nissan", "Altima"): 16.2,
    (2023, "Nissan", "Altima"): 16.2,
    (2024, "Nissan", "Rogue"): 14.5,
    (2023, "Nissan", "Rogue"): 14.5,
    (2024, "Nissan", "Sentra"): 12.3,
    (2023, "Nissan", "Sentra"): 12.3,
    (2024, "Nissan", "Pathfinder"): 19.5,
    (2024, "Hyundai", "Elantra"): 12.8,
    (2023, "Hyundai", "Elantra"): 12.8,
    (2024, "Hyundai", "Sonata"): 15.9,
    (2023, "Hyundai", "Sonata"): 15.9,
    (2024, "Hyundai", "Tucson"): 14.3,
    (2023, "Hyundai", "Tucson"): 14.3,
    (2024, "Hyundai", "Santa Fe"): 17.7,
    (2024, "Mazda", "Mazda3"): 13.2,
    (2023, "Mazda", "Mazda3"): 13.2,
    (2024, "Mazda", "CX-5"): 15.3,
    (2023, "Mazda", "CX-5"): 15.3,
    (2024, "Mazda", "CX-9"): 19.5,
    (2024, "Subaru", "Outback"): 18.5,
    (2023, "Subaru", "Outback"): 18.5,
    (2024, "Subaru", "Forester"): 16.6,
    (2023, "Subaru", "Forester"): 16.6,
    (2024, "Subaru", "Crosstrek"): 16.6,
    (2024, "Jeep", "Grand Cherokee"): 24.6,
    (2023, "Jeep", "Grand Cherokee"): 24.6,
    (2024, "Jeep", "Wrangler"): 21.5,
    (2023, "Jeep", "Wrangler"): 21.5,
    (2024, "Jeep", "Cherokee"): 15.8,
    (2024, "RAM", "1500"): 26.0,
    (2023, "RAM", "1500"): 26.0,
    (2022, "RAM", "1500"): 26.0,
    (2024, "GMC", "Sierra 1500"): 24.0,
    (2023, "GMC", "Sierra 1500"): 24.0,
    (2024, "GMC", "Acadia"): 19.4,
    (2024, "Volkswagen", "Jetta"): 13.2,
    (2023, "Volkswagen", "Jetta"): 13.2,
    (2024, "Volkswagen", "Tiguan"): 15.3,
    (2023, "Volkswagen", "Tiguan"): 15.3,
    (2024, "Kia", "Forte"): 13.2,
    (2023, "Kia", "Forte"): 13.2,
    (2024, "Kia", "Sportage"): 16.4,
    (2023, "Kia", "Sportage"): 16.4,
    (2024, "Kia", "Sorento"): 17.7,
    (2024, "Mercedes-Benz", "C-Class"): 17.4,
    (2023, "Mercedes-Benz", "C-Class"): 17.4,
    (2024, "Mercedes-Benz", "E-Class"): 21.1,
    (2024, "BMW", "3 Series"): 15.6,
    (2023, "BMW", "3 Series"): 15.6,
    (2024, "BMW", "5 Series"): 18.5,
    (2024, "BMW", "X3"): 17.2,
    (2024, "BMW", "X5"): 21.9,
    (2024, "Audi", "A4"): 16.9,
    (2023, "Audi", "A4"): 16.9,
    (2024, "Audi", "Q5"): 19.8,
    (2023, "Audi", "Q5"): 19.8,
    (2024, "Lexus", "ES"): 15.9,
    (2023, "Lexus", "ES"): 15.9,
    (2024, "Lexus", "RX"): 19.2,
    (2023, "Lexus", "RX"): 19.2,
    (2024, "Acura", "Integra"): 12.8,
    (2024, "Acura", "TLX"): 17.2,
    (2024, "Acura", "MDX"): 19.5,
    (2024, "Tesla", "Model 3"): 0.0,
    (2024, "Tesla", "Model Y"): 0.0,
    (2024, "Tesla", "Model S"): 0.0,
    (2024, "Tesla", "Model X"): 0.0,
    (2024, "Dodge", "Charger"): 18.5,
    (2023, "Dodge", "Charger"): 18.5,
    (2024, "Dodge", "Durango"): 24.6,
}

TRUCK_KEYWORDS = ("f-150", "silverado", "sierra", "ram", "tacoma", "tundra", "titan")
SUV_KEYWORDS = (
    "explorer",
    "tahoe",
    "suburban",
    "yukon",
    "durango",
    "pilot",
    "highlander",
    "pathfinder",
    "4runner",
)


@dataclass(slots=True, frozen=True)
class TankRule:
    name: str
    matches: Callable[[VehicleSpec], bool]
    gallons: float


def _model_contains(keywords: tuple[str, ...]) -> Callable[[VehicleSpec], bool]:
    return lambda spec: any(keyword in spec.model.lower() for keyword in keywords)


def _mpg_at_least(threshold: float) -> Callable[[VehicleSpec], bool]:
    return lambda spec: spec.combined_mpg >= threshold


# Evaluated top to bottom; the last rule always matches.
HEURISTIC_RULES: tuple[TankRule, ...] = (
    TankRule("diesel", lambda spec: spec.fuel_type == "diesel", 22.0),
    TankRule("truck", _model_contains(TRUCK_KEYWORDS), 24.0),
    TankRule("suv", _model_contains(SUV_KEYWORDS), 20.0),
    TankRule("mpg>=50", _mpg_at_least(50), 10.5),
    TankRule("mpg>=40", _mpg_at_least(40), 11.5),
    TankRule("mpg>=35", _mpg_at_least(35), 13.0),
    TankRule("mpg>=30", _mpg_at_least(30), 14.5),
    TankRule("mpg>=25", _mpg_at_least(25), 16.0),
    TankRule("mpg>=20", _mpg_at_least(20), 18.0),
    TankRule("mpg>=15", _mpg_at_least(15), 21.0),
    TankRule("mpg<15", lambda spec: True, 23.0),
)


def lookup_exact(spec: VehicleSpec) -> float | None:
    gallons = TANK_CAPACITY_TABLE.get((spec.year, spec.make, spec.model))
    return gallons if gallons else None


def lookup_relaxed(spec: VehicleSpec) -> float | None:
    for (_, make, model), gallons in TANK_CAPACITY_TABLE.items():
        if make == spec.make and model == spec.model and gallons:
            return gallons
    return None


def estimate_by_vehicle_class(spec: VehicleSpec) -> float:
    for rule in HEURISTIC_RULES:
        if rule.matches(spec):
            return rule.gallons
    raise AssertionError("heuristic rule table has no catch-all rule")


def estimate_tank_size(spec: VehicleSpec) -> tuple[float, TankSizeSource]:
    gallons = lookup_exact(spec)
    if gallons is not None:
        return gallons, "database"

    gallons = lookup_relaxed(spec)
    if gallons is not None:
        logger.info(
            "Tank size for %s %s %s taken from another model year",
            spec.year,
            spec.make,
            spec.model,
        )
        return gallons, "database"

    gallons = estimate_by_vehicle_class(spec)
    logger.info(
        "Tank size for %s %s %s estimated at %.1f gallons",
        spec.year,
        spec.make,
        spec.model,
        gallons,
    )
    return gallons, "estimated"


def resolve_tank_size(spec: VehicleSpec) -> VehicleSpec:
    """Return ``spec`` with a tank size filled in; never mutates the input.

    Specs that already carry a positive tank size are returned as-is.
    """
    if spec.tank_size_gallons and spec.tank_size_gallons > 0:
        return spec

    gallons, source = estimate_tank_size(spec)
    return dataclasses.replace(spec, tank_size_gallons=gallons, tank_size_source=source)
