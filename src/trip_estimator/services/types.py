from __future__ import annotations

from dataclasses import dataclass, field
from typing import Literal

FuelType = Literal["regular", "premium", "diesel"]
TankSizeSource = Literal["database", "estimated", "manual", "unknown"]
EfficiencyUnit = Literal["mpg", "l_per_100km"]
RefuelReason = Literal["initial", "range_limit", "final"]
PriceSource = Literal["external_pricing_feed", "regional_average"]

UNKNOWN_SEGMENT = -1


@dataclass(slots=True, frozen=True)
class GeoPoint:
    latitude: float
    longitude: float


@dataclass(slots=True, frozen=True)
class RouteLeg:
    start_address: str
    end_address: str
    distance_meters: float
    duration_seconds: float
    encoded_polyline: str | None = None


@dataclass(slots=True, frozen=True)
class RouteInfo:
    distance_meters: float
    duration_seconds: float
    distance_miles: float
    distance_km: float
    duration_formatted: str
    legs: tuple[RouteLeg, ...] = ()
    encoded_polyline: str | None = None


@dataclass(slots=True, frozen=True)
class VehicleSpec:
    year: int
    make: str
    model: str
    fuel_type: FuelType
    city_mpg: float
    highway_mpg: float
    combined_mpg: float
    trim: str | None = None
    vehicle_id: int | None = None
    tank_size_gallons: float | None = None
    tank_size_source: TankSizeSource = "unknown"


@dataclass(slots=True, frozen=True)
class VehicleInfo:
    fuel_efficiency: float
    unit: EfficiencyUnit = "mpg"
    tank_size_gallons: float | None = None
    spec: VehicleSpec | None = None

    @property
    def estimated_range_miles(self) -> float | None:
        if self.unit != "mpg" or not self.tank_size_gallons:
            return None
        return self.fuel_efficiency * self.tank_size_gallons


@dataclass(slots=True, frozen=True)
class FuelPrice:
    price: float
    currency: str = "usd"
    grade: FuelType | None = None


@dataclass(slots=True, frozen=True)
class RefuelPoint:
    cumulative_distance_miles: float
    segment_index: int
    percent_of_trip: float
    reason: RefuelReason


@dataclass(slots=True, frozen=True)
class TripCost:
    route_info: RouteInfo
    fuel_needed: float
    total_cost: float
    cost_per_distance_unit: float | None
    fuel_price: FuelPrice
    vehicle_info: VehicleInfo | None = None
    refuel_plan: tuple[RefuelPoint, ...] = ()


@dataclass(slots=True, frozen=True)
class GasStationCandidate:
    name: str
    address: str
    location: GeoPoint
    price_level: int | None = None


@dataclass(slots=True, frozen=True)
class FeedPricePoint:
    price: float
    posted_time: str | None = None


@dataclass(slots=True, frozen=True)
class FeedFuelPrice:
    fuel_product: str
    long_name: str
    cash: FeedPricePoint | None = None
    credit: FeedPricePoint | None = None


@dataclass(slots=True, frozen=True)
class FeedStationRecord:
    station_id: str
    name: str | None
    address_line: str
    latitude: float
    longitude: float
    prices: tuple[FeedFuelPrice, ...] = field(default_factory=tuple)
    currency: str | None = None
    price_unit: str | None = None


@dataclass(slots=True, frozen=True)
class PricedStation:
    station_name: str
    address: str
    source: PriceSource
    regular_price: float | None = None
    last_updated: str | None = None
    candidate_address: str | None = None
