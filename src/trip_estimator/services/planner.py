from __future__ import annotations

import dataclasses
import logging

from django.conf import settings

from trip_estimator.schemas import (
    FuelPriceResponse,
    GasStationResponse,
    LocationPayload,
    NearbyStationsRequest,
    NearbyStationsResponse,
    PricedStationResponse,
    RefuelPlanRequest,
    RefuelPlanResponse,
    RefuelPointResponse,
    RouteLegResponse,
    RouteResponse,
    StationPricesRequest,
    StationPricesResponse,
    TripCostRequest,
    TripCostResponse,
    VehicleSpecPayload,
    VehicleSpecResponse,
    VehicleSummaryResponse,
)
from trip_estimator.services.cost import calculate_trip_cost
from trip_estimator.services.places import GooglePlacesClient
from trip_estimator.services.pricing_feed import GasBuddyClient
from trip_estimator.services.price_cache import PriceCache
from trip_estimator.services.providers import (
    PlacesProvider,
    PricingFeedProvider,
    RouteProvider,
    VehicleCatalog,
)
from trip_estimator.services.reconciler import StationPriceReconciler
from trip_estimator.services.refuel import fuel_per_segment, plan_refuel_stops, refuel_stops_only
from trip_estimator.services.regional_prices import average_price
from trip_estimator.services.routes import GoogleRoutesClient
from trip_estimator.services.tank_capacity import resolve_tank_size
from trip_estimator.services.types import (
    FuelPrice,
    GasStationCandidate,
    GeoPoint,
    PricedStation,
    RefuelPoint,
    RouteInfo,
    RouteLeg,
    VehicleInfo,
    VehicleSpec,
)
from trip_estimator.services.units import build_route_info
from trip_estimator.services.vehicle_catalog import StaticVehicleCatalog

logger = logging.getLogger(__name__)


class TripPlannerService:
    def __init__(
        self,
        route_provider: RouteProvider | None = None,
        places_provider: PlacesProvider | None = None,
        pricing_feed: PricingFeedProvider | None = None,
        vehicle_catalog: VehicleCatalog | None = None,
        price_cache: PriceCache | None = None,
    ) -> None:
        self.route_provider = route_provider or GoogleRoutesClient()
        self.places_provider = places_provider or GooglePlacesClient()
        self.vehicle_catalog: VehicleCatalog = vehicle_catalog or StaticVehicleCatalog()
        self.reconciler = StationPriceReconciler(
            pricing_feed or GasBuddyClient(),
            price_cache
            if price_cache is not None
            else PriceCache(ttl_seconds=settings.PRICE_CACHE_TTL_SECONDS),
        )

    def estimate(self, request: TripCostRequest) -> TripCostResponse:
        spec = self._resolve_vehicle(request)

        route = self.route_provider.compute_route(
            request.origin, request.destination, request.waypoints
        )

        if request.fuel_efficiency is not None:
            efficiency, unit = request.fuel_efficiency, request.unit
        else:
            efficiency, unit = spec.combined_mpg, "mpg"

        tank_gallons = request.tank_size_gallons or (spec.tank_size_gallons if spec else None)
        vehicle_info = VehicleInfo(
            fuel_efficiency=efficiency,
            unit=unit,
            tank_size_gallons=tank_gallons,
            spec=spec,
        )

        grade = request.fuel_grade or (spec.fuel_type if spec else "regular")
        if request.fuel_price is not None:
            price_source = "manual"
            fuel_price = FuelPrice(
                price=request.fuel_price,
                currency=request.currency or settings.DEFAULT_CURRENCY,
                grade=grade,
            )
        else:
            price_source = "regional_table"
            fuel_price = FuelPrice(
                price=average_price(
                    [request.origin, *request.waypoints, request.destination], grade
                ),
                currency=request.currency or settings.DEFAULT_CURRENCY,
                grade=grade,
            )
            logger.info("No fuel price supplied; using regional table price %.2f", fuel_price.price)

        trip_cost = calculate_trip_cost(route, vehicle_info, fuel_price)

        if request.include_refuel_plan:
            refuel_mpg = self._refuel_mpg(spec, vehicle_info)
            if refuel_mpg is None:
                logger.info("Skipping refuel plan: no MPG figure for %s efficiency", unit)
            else:
                plan = plan_refuel_stops(
                    route,
                    VehicleInfo(
                        fuel_efficiency=refuel_mpg,
                        tank_size_gallons=tank_gallons or settings.DEFAULT_TANK_GALLONS,
                    ),
                    safety_buffer=_safety_buffer(request.safety_buffer),
                )
                trip_cost = dataclasses.replace(trip_cost, refuel_plan=tuple(plan))

        return TripCostResponse(
            route=_route_response(route),
            vehicle=VehicleSummaryResponse(
                fuel_efficiency=vehicle_info.fuel_efficiency,
                unit=vehicle_info.unit,
                tank_size_gallons=vehicle_info.tank_size_gallons,
                estimated_range_miles=vehicle_info.estimated_range_miles,
                spec=vehicle_spec_response(spec) if spec else None,
            ),
            fuel_price=FuelPriceResponse(
                price=round(fuel_price.price, 3),
                currency=fuel_price.currency,
                grade=fuel_price.grade,
                source=price_source,
            ),
            fuel_needed=trip_cost.fuel_needed,
            total_cost=trip_cost.total_cost,
            cost_per_mile=trip_cost.cost_per_distance_unit,
            refuel_plan=_point_responses(list(trip_cost.refuel_plan)),
            refuel_stops=_point_responses(refuel_stops_only(list(trip_cost.refuel_plan))),
        )

    def refuel_plan(self, request: RefuelPlanRequest) -> RefuelPlanResponse:
        route = build_route_info(
            request.distance_meters,
            request.duration_seconds,
            legs=[
                RouteLeg(
                    start_address=leg.start_address,
                    end_address=leg.end_address,
                    distance_meters=leg.distance_meters,
                    duration_seconds=leg.duration_seconds,
                )
                for leg in request.legs
            ],
        )
        tank_gallons = request.tank_size_gallons or settings.DEFAULT_TANK_GALLONS
        vehicle_info = VehicleInfo(
            fuel_efficiency=request.fuel_efficiency,
            tank_size_gallons=tank_gallons,
        )
        safety_buffer = _safety_buffer(request.safety_buffer)
        points = plan_refuel_stops(route, vehicle_info, safety_buffer=safety_buffer)

        return RefuelPlanResponse(
            distance_miles=round(route.distance_miles, 3),
            safe_range_miles=round(
                request.fuel_efficiency * tank_gallons * safety_buffer, 3
            ),
            points=_point_responses(points),
            stops=_point_responses(refuel_stops_only(points)),
            fuel_per_segment_gallons=[
                round(gallons, 3) for gallons in fuel_per_segment(points, vehicle_info)
            ],
        )

    def resolve_tank(self, payload: VehicleSpecPayload) -> VehicleSpecResponse:
        return vehicle_spec_response(resolve_tank_size(vehicle_spec_from_payload(payload)))

    def nearby_stations(self, request: NearbyStationsRequest) -> NearbyStationsResponse:
        radius = request.radius_meters or settings.PLACES_SEARCH_RADIUS_METERS
        stations: list[GasStationCandidate] = []
        for location in request.locations:
            stations.extend(
                self.places_provider.find_nearby_fuel_stations(
                    GeoPoint(latitude=location.lat, longitude=location.lng), radius
                )
            )

        prices_by_address: dict[str, PricedStation] = {}
        for station_price in self.reconciler.reconcile(stations):
            if station_price.candidate_address is not None:
                prices_by_address.setdefault(station_price.candidate_address, station_price)

        responses = []
        for station in stations:
            priced = prices_by_address.get(station.address)
            responses.append(
                GasStationResponse(
                    name=station.name,
                    address=station.address,
                    location=LocationPayload(
                        lat=station.location.latitude, lng=station.location.longitude
                    ),
                    price_level=station.price_level,
                    price=_rounded_price(priced.regular_price) if priced else None,
                    last_updated=priced.last_updated if priced else None,
                    price_source=priced.source if priced else None,
                )
            )

        logger.info("Priced %d of %d nearby station(s)", len(prices_by_address), len(stations))
        return NearbyStationsResponse(stations=responses)

    def station_prices(self, request: StationPricesRequest) -> StationPricesResponse:
        candidates = [
            GasStationCandidate(
                name=station.name,
                address=station.address,
                location=GeoPoint(latitude=station.location.lat, longitude=station.location.lng),
                price_level=station.price_level,
            )
            for station in request.stations
        ]
        priced = self.reconciler.reconcile(candidates)

        return StationPricesResponse(
            prices=[
                PricedStationResponse(
                    station_name=station.station_name,
                    address=station.address,
                    regular_price=_rounded_price(station.regular_price),
                    last_updated=station.last_updated,
                    source=station.source,
                    candidate_address=station.candidate_address,
                )
                for station in priced
            ]
        )

    def _resolve_vehicle(self, request: TripCostRequest) -> VehicleSpec | None:
        if request.vehicle_id is not None:
            spec = self.vehicle_catalog.get(request.vehicle_id)
        elif request.vehicle is not None:
            spec = vehicle_spec_from_payload(request.vehicle)
        else:
            return None
        return resolve_tank_size(spec)

    @staticmethod
    def _refuel_mpg(spec: VehicleSpec | None, vehicle_info: VehicleInfo) -> float | None:
        if spec is not None:
            return spec.highway_mpg
        if vehicle_info.unit == "mpg":
            return vehicle_info.fuel_efficiency
        return None


def vehicle_spec_from_payload(payload: VehicleSpecPayload) -> VehicleSpec:
    return VehicleSpec(
        year=payload.year,
        make=payload.make,
        model=payload.model,
        trim=payload.trim,
        fuel_type=payload.fuel_type,
        city_mpg=payload.city_mpg,
        highway_mpg=payload.highway_mpg,
        combined_mpg=payload.combined_mpg,
        tank_size_gallons=payload.tank_size_gallons,
        tank_size_source="manual" if payload.tank_size_gallons else "unknown",
    )


def vehicle_spec_response(spec: VehicleSpec) -> VehicleSpecResponse:
    return VehicleSpecResponse(
        vehicle_id=spec.vehicle_id,
        year=spec.year,
        make=spec.make,
        model=spec.model,
        trim=spec.trim,
        fuel_type=spec.fuel_type,
        city_mpg=spec.city_mpg,
        highway_mpg=spec.highway_mpg,
        combined_mpg=spec.combined_mpg,
        tank_size_gallons=spec.tank_size_gallons,
        tank_size_source=spec.tank_size_source,
    )


def _route_response(route: RouteInfo) -> RouteResponse:
    return RouteResponse(
        distance_meters=route.distance_meters,
        duration_seconds=route.duration_seconds,
        distance_miles=round(route.distance_miles, 3),
        distance_km=round(route.distance_km, 3),
        duration_formatted=route.duration_formatted,
        polyline=route.encoded_polyline,
        legs=[
            RouteLegResponse(
                start_address=leg.start_address,
                end_address=leg.end_address,
                distance_meters=leg.distance_meters,
                duration_seconds=leg.duration_seconds,
            )
            for leg in route.legs
        ],
    )


def _point_responses(points: list[RefuelPoint]) -> list[RefuelPointResponse]:
    return [
        RefuelPointResponse(
            cumulative_distance_miles=round(point.cumulative_distance_miles, 3),
            segment_index=point.segment_index,
            percent_of_trip=round(point.percent_of_trip, 2),
            reason=point.reason,
        )
        for point in points
    ]


def _safety_buffer(requested: float | None) -> float:
    return requested if requested is not None else settings.REFUEL_SAFETY_BUFFER


def _rounded_price(price: float | None) -> float | None:
    return round(price, 3) if price is not None else None
