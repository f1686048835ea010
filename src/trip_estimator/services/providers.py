from __future__ import annotations

from typing import Protocol

from trip_estimator.services.types import (
    FeedStationRecord,
    GasStationCandidate,
    GeoPoint,
    RouteInfo,
    VehicleSpec,
)


class RouteProvider(Protocol):
    def compute_route(
        self, origin: str, destination: str, waypoints: list[str] | None = None
    ) -> RouteInfo: ...


class PlacesProvider(Protocol):
    def find_nearby_fuel_stations(
        self, location: GeoPoint, radius_meters: float
    ) -> list[GasStationCandidate]: ...


class PricingFeedProvider(Protocol):
    def lookup_station_prices(
        self, latitude: float, longitude: float
    ) -> list[FeedStationRecord]: ...


class VehicleCatalog(Protocol):
    def years(self) -> list[int]: ...

    def makes(self, year: int) -> list[str]: ...

    def models(self, year: int, make: str) -> list[str]: ...

    def lookup_spec(self, year: int, make: str, model: str) -> list[VehicleSpec]: ...

    def get(self, vehicle_id: int) -> VehicleSpec: ...
