from __future__ import annotations

from typing import Literal

from pydantic import BaseModel, ConfigDict, Field, model_validator

FuelGrade = Literal["regular", "premium", "diesel"]
EfficiencyUnitName = Literal["mpg", "l_per_100km"]
PriceSourceName = Literal["external_pricing_feed", "regional_average"]


class VehicleSpecPayload(BaseModel):
    model_config = ConfigDict(extra="forbid")

    year: int = Field(ge=1980, le=2100)
    make: str = Field(min_length=1, max_length=100)
    model: str = Field(min_length=1, max_length=100)
    trim: str | None = Field(default=None, max_length=100)
    fuel_type: FuelGrade = "regular"
    city_mpg: float = Field(gt=0.0, le=200.0)
    highway_mpg: float = Field(gt=0.0, le=200.0)
    combined_mpg: float = Field(gt=0.0, le=200.0)
    tank_size_gallons: float | None = Field(default=None, gt=0.0, le=300.0)


class RouteLegPayload(BaseModel):
    model_config = ConfigDict(extra="forbid")

    start_address: str = ""
    end_address: str = ""
    distance_meters: float = Field(ge=0.0)
    duration_seconds: float = Field(default=0.0, ge=0.0)


class TripCostRequest(BaseModel):
    model_config = ConfigDict(extra="forbid")

    origin: str = Field(min_length=2, max_length=300)
    destination: str = Field(min_length=2, max_length=300)
    waypoints: list[str] = Field(default_factory=list, max_length=25)
    vehicle_id: int | None = Field(default=None, ge=1)
    vehicle: VehicleSpecPayload | None = None
    fuel_efficiency: float | None = Field(default=None, gt=0.0, le=200.0)
    unit: EfficiencyUnitName = "mpg"
    tank_size_gallons: float | None = Field(default=None, gt=0.0, le=300.0)
    fuel_price: float | None = Field(default=None, gt=0.0, le=50.0)
    currency: Literal["usd", "cad"] | None = None
    fuel_grade: FuelGrade | None = None
    safety_buffer: float | None = Field(default=None, gt=0.0, le=1.0)
    include_refuel_plan: bool = True

    @model_validator(mode="after")
    def _require_efficiency_source(self) -> TripCostRequest:
        if self.vehicle_id is None and self.vehicle is None and self.fuel_efficiency is None:
            raise ValueError("One of vehicle_id, vehicle or fuel_efficiency is required")
        if self.vehicle_id is not None and self.vehicle is not None:
            raise ValueError("vehicle_id and vehicle are mutually exclusive")
        return self


class RefuelPlanRequest(BaseModel):
    model_config = ConfigDict(extra="forbid")

    distance_meters: float = Field(ge=0.0)
    duration_seconds: float = Field(default=0.0, ge=0.0)
    legs: list[RouteLegPayload] = Field(default_factory=list)
    fuel_efficiency: float = Field(gt=0.0, le=200.0)
    tank_size_gallons: float | None = Field(default=None, gt=0.0, le=300.0)
    safety_buffer: float | None = Field(default=None, gt=0.0, le=1.0)


class LocationPayload(BaseModel):
    lat: float = Field(ge=-90.0, le=90.0)
    lng: float = Field(ge=-180.0, le=180.0)


class StationCandidatePayload(BaseModel):
    name: str = Field(max_length=300)
    address: str = Field(default="", max_length=500)
    location: LocationPayload
    price_level: int | None = Field(default=None, ge=1, le=4)


class StationPricesRequest(BaseModel):
    model_config = ConfigDict(extra="forbid")

    stations: list[StationCandidatePayload] = Field(min_length=1, max_length=200)


class NearbyStationsRequest(BaseModel):
    model_config = ConfigDict(extra="forbid")

    locations: list[LocationPayload] = Field(min_length=1, max_length=20)
    radius_meters: float | None = Field(default=None, gt=0.0, le=50000.0)


class RouteLegResponse(BaseModel):
    start_address: str
    end_address: str
    distance_meters: float
    duration_seconds: float


class RouteResponse(BaseModel):
    distance_meters: float
    duration_seconds: float
    distance_miles: float
    distance_km: float
    duration_formatted: str
    polyline: str | None
    legs: list[RouteLegResponse]


class VehicleSpecResponse(BaseModel):
    vehicle_id: int | None
    year: int
    make: str
    model: str
    trim: str | None
    fuel_type: FuelGrade
    city_mpg: float
    highway_mpg: float
    combined_mpg: float
    tank_size_gallons: float | None
    tank_size_source: Literal["database", "estimated", "manual", "unknown"]


class VehicleSummaryResponse(BaseModel):
    fuel_efficiency: float
    unit: EfficiencyUnitName
    tank_size_gallons: float | None
    estimated_range_miles: float | None
    spec: VehicleSpecResponse | None


class FuelPriceResponse(BaseModel):
    price: float
    currency: str
    grade: FuelGrade | None
    source: Literal["manual", "regional_table"]


class RefuelPointResponse(BaseModel):
    cumulative_distance_miles: float
    segment_index: int
    percent_of_trip: float
    reason: Literal["initial", "range_limit", "final"]


class TripCostResponse(BaseModel):
    route: RouteResponse
    vehicle: VehicleSummaryResponse
    fuel_price: FuelPriceResponse
    fuel_needed: float
    total_cost: float
    cost_per_mile: float | None
    refuel_plan: list[RefuelPointResponse]
    refuel_stops: list[RefuelPointResponse]


class RefuelPlanResponse(BaseModel):
    distance_miles: float
    safe_range_miles: float
    points: list[RefuelPointResponse]
    stops: list[RefuelPointResponse]
    fuel_per_segment_gallons: list[float]


class GasStationResponse(BaseModel):
    name: str
    address: str
    location: LocationPayload
    price_level: int | None
    price: float | None = None
    last_updated: str | None = None
    price_source: PriceSourceName | None = None


class NearbyStationsResponse(BaseModel):
    stations: list[GasStationResponse]


class PricedStationResponse(BaseModel):
    station_name: str
    address: str
    regular_price: float | None
    last_updated: str | None
    source: PriceSourceName
    candidate_address: str | None


class StationPricesResponse(BaseModel):
    prices: list[PricedStationResponse]
