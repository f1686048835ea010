from __future__ import annotations

from decimal import ROUND_HALF_UP, Decimal

from trip_estimator.exceptions import InvalidInputError
from trip_estimator.services.types import FuelPrice, RouteInfo, TripCost, VehicleInfo

CENTS = Decimal("0.01")


def round_half_up(value: float, places: Decimal = CENTS) -> float:
    # repr() keeps 0.145 as "0.145" instead of its binary expansion.
    return float(Decimal(repr(value)).quantize(places, rounding=ROUND_HALF_UP))


def calculate_trip_cost(
    route_info: RouteInfo,
    vehicle_info: VehicleInfo,
    fuel_price: FuelPrice,
) -> TripCost:
    """Derive fuel needed, total cost and cost per mile for a route.

    ``mpg`` efficiency divides the distance in miles; ``l_per_100km`` scales the
    distance in kilometres. Cost per mile is ``None`` for a zero-length route.
    """
    if vehicle_info.fuel_efficiency <= 0:
        raise InvalidInputError("Fuel efficiency must be greater than zero")
    if fuel_price.price <= 0:
        raise InvalidInputError("Fuel price must be greater than zero")
    if route_info.distance_miles < 0 or route_info.distance_km < 0:
        raise InvalidInputError("Route distance must be non-negative")

    if vehicle_info.unit == "mpg":
        fuel_needed = route_info.distance_miles / vehicle_info.fuel_efficiency
    elif vehicle_info.unit == "l_per_100km":
        fuel_needed = (route_info.distance_km / 100.0) * vehicle_info.fuel_efficiency
    else:
        raise InvalidInputError(f"Unsupported efficiency unit: {vehicle_info.unit}")

    total_cost = fuel_needed * fuel_price.price

    cost_per_mile: float | None = None
    if route_info.distance_miles > 0:
        cost_per_mile = round_half_up(total_cost / route_info.distance_miles)

    return TripCost(
        route_info=route_info,
        vehicle_info=vehicle_info,
        fuel_price=fuel_price,
        fuel_needed=round_half_up(fuel_needed),
        total_cost=round_half_up(total_cost),
        cost_per_distance_unit=cost_per_mile,
    )
