from __future__ import annotations

from trip_estimator.exceptions import VehicleNotFoundError
from trip_estimator.services.types import VehicleSpec


def _spec(
    vehicle_id: int,
    make: str,
    model: str,
    fuel_type: str,
    mpg: tuple[float, float, float],
    tank_gallons: float,
    year: int = 2024,
) -> VehicleSpec:
    city, highway, combined = mpg
    return VehicleSpec(
        vehicle_id=vehicle_id,
        year=year,
        make=make,
        model=model,
        fuel_type=fuel_type,  # type: ignore[arg-type]
        city_mpg=city,
        highway_mpg=highway,
        combined_mpg=combined,
        tank_size_gallons=tank_gallons,
        tank_size_source="database",
    )


POPULAR_VEHICLES: tuple[VehicleSpec, ...] = (
    _spec(1, "Honda", "Civic", "regular", (31, 40, 35), 12.4),
    _spec(2, "Honda", "Accord", "regular", (29, 37, 32), 14.8),
    _spec(3, "Honda", "CR-V", "regular", (28, 34, 30), 14.0),
    _spec(4, "Toyota", "Camry", "regular", (28, 39, 32), 15.8),
    _spec(5, "Toyota", "Corolla", "regular", (32, 41, 35), 13.2),
    _spec(6, "Toyota", "RAV4", "regular", (27, 35, 30), 14.5),
    _spec(7, "Ford", "F-150", "regular", (20, 26, 22), 23.0),
    _spec(8, "Ford", "Mustang", "premium", (18, 25, 21), 15.5),
    _spec(9, "Ford", "Explorer", "regular", (21, 28, 24), 18.0),
    _spec(10, "Chevrolet", "Silverado 1500", "regular", (17, 24, 20), 24.0),
    _spec(11, "Chevrolet", "Equinox", "regular", (26, 31, 28), 14.0),
    _spec(12, "Chevrolet", "Malibu", "regular", (29, 36, 32), 15.8),
    _spec(13, "Nissan", "Altima", "regular", (28, 39, 32), 16.2),
    _spec(14, "Nissan", "Rogue", "regular", (30, 37, 33), 14.5),
    _spec(15, "Hyundai", "Elantra", "regular", (33, 43, 37), 12.8),
    _spec(16, "Hyundai", "Tucson", "regular", (26, 33, 29), 14.3),
    _spec(17, "Mazda", "Mazda3", "regular", (28, 36, 31), 13.2),
    _spec(18, "Mazda", "CX-5", "regular", (25, 31, 27), 15.3),
    _spec(19, "Subaru", "Outback", "regular", (26, 33, 29), 18.5),
    _spec(20, "Subaru", "Forester", "regular", (26, 33, 29), 16.6),
    _spec(21, "RAM", "1500", "regular", (17, 25, 20), 26.0),
    _spec(22, "Jeep", "Grand Cherokee", "regular", (19, 26, 22), 24.6),
    _spec(23, "Jeep", "Wrangler", "regular", (17, 24, 20), 21.5),
)


class StaticVehicleCatalog:
    """Vehicle specs backed by a bundled list of popular models."""

    def __init__(self, vehicles: tuple[VehicleSpec, ...] = POPULAR_VEHICLES) -> None:
        self.vehicles = vehicles

    def years(self) -> list[int]:
        return sorted({vehicle.year for vehicle in self.vehicles}, reverse=True)

    def makes(self, year: int) -> list[str]:
        return sorted({vehicle.make for vehicle in self.vehicles if vehicle.year == year})

    def models(self, year: int, make: str) -> list[str]:
        return sorted(
            {
                vehicle.model
                for vehicle in self.vehicles
                if vehicle.year == year and vehicle.make == make
            }
        )

    def lookup_spec(self, year: int, make: str, model: str) -> list[VehicleSpec]:
        return [
            vehicle
            for vehicle in self.vehicles
            if vehicle.year == year and vehicle.make == make and vehicle.model == model
        ]

    def get(self, vehicle_id: int) -> VehicleSpec:
        for vehicle in self.vehicles:
            if vehicle.vehicle_id == vehicle_id:
                return vehicle
        raise VehicleNotFoundError(f"Vehicle {vehicle_id} not found")
