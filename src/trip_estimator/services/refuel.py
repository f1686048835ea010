from __future__ import annotations

import logging

from trip_estimator.exceptions import InvalidInputError
from trip_estimator.services.types import (
    UNKNOWN_SEGMENT,
    RefuelPoint,
    RouteInfo,
    VehicleInfo,
)
from trip_estimator.services.units import meters_to_miles

logger = logging.getLogger(__name__)

DEFAULT_TANK_GALLONS = 15.0
DEFAULT_SAFETY_BUFFER = 0.75
EPSILON = 1e-6


def plan_refuel_stops(
    route_info: RouteInfo,
    vehicle_info: VehicleInfo,
    safety_buffer: float = DEFAULT_SAFETY_BUFFER,
) -> list[RefuelPoint]:
    """Split a route into refuel points based on the vehicle's safe range.

    ``vehicle_info.fuel_efficiency`` is read as highway MPG. The safe range is
    ``mpg * tank * safety_buffer``; the plan always starts with an ``initial``
    point at mile 0 and ends with a ``final`` point at the route's total
    distance, with ``range_limit`` points in between. Leg boundaries are used
    as refuel points when the route has legs, otherwise points are spaced
    evenly and carry ``UNKNOWN_SEGMENT``.
    """
    mpg = vehicle_info.fuel_efficiency
    tank_gallons = vehicle_info.tank_size_gallons or DEFAULT_TANK_GALLONS
    if mpg <= 0:
        raise InvalidInputError("Fuel efficiency must be greater than zero")
    if tank_gallons <= 0:
        raise InvalidInputError("Tank size must be greater than zero")
    if not 0 < safety_buffer <= 1:
        raise InvalidInputError("Safety buffer must be within (0, 1]")

    total_miles = route_info.distance_miles
    if total_miles < 0:
        raise InvalidInputError("Route distance must be non-negative")

    max_range = mpg * tank_gallons
    safe_range = max_range * safety_buffer
    legs = route_info.legs
    final_segment = len(legs) if legs else UNKNOWN_SEGMENT

    logger.debug(
        "Refuel plan inputs: mpg=%s tank=%s max_range=%.1f safe_range=%.1f distance=%.1f",
        mpg,
        tank_gallons,
        max_range,
        safe_range,
        total_miles,
    )

    points = [RefuelPoint(0.0, 0, 0.0, "initial")]

    if total_miles <= safe_range:
        points.append(RefuelPoint(total_miles, final_segment, 100.0, "final"))
        return points

    if legs:
        leg_miles = [meters_to_miles(leg.distance_meters) for leg in legs]
        cumulative = 0.0
        last_refuel = 0.0

        # Legs are approximate; the route total bounds every point.
        for index, miles in enumerate(leg_miles):
            cumulative = min(cumulative + miles, total_miles)
            if cumulative - last_refuel >= safe_range - EPSILON:
                points.append(_range_limit(cumulative, index, total_miles))
                last_refuel = cumulative
            if cumulative >= total_miles:
                break

        current = last_refuel
        while total_miles - current > safe_range + EPSILON:
            current += safe_range
            points.append(_range_limit(current, _segment_for(current, leg_miles), total_miles))
    else:
        current = safe_range
        while current < total_miles - EPSILON:
            points.append(_range_limit(current, UNKNOWN_SEGMENT, total_miles))
            current += safe_range

    points.append(RefuelPoint(total_miles, final_segment, 100.0, "final"))
    logger.info(
        "Planned %d refuel stop(s) over %.1f miles",
        len(points) - 2,
        total_miles,
    )
    return points


def refuel_stops_only(points: list[RefuelPoint]) -> list[RefuelPoint]:
    return [point for point in points if point.reason == "range_limit"]


def fuel_per_segment(points: list[RefuelPoint], vehicle_info: VehicleInfo) -> list[float]:
    """Fuel consumed between consecutive refuel points, in gallons."""
    if vehicle_info.fuel_efficiency <= 0:
        raise InvalidInputError("Fuel efficiency must be greater than zero")

    fuel_per_mile = 1.0 / vehicle_info.fuel_efficiency
    return [
        (current.cumulative_distance_miles - previous.cumulative_distance_miles) * fuel_per_mile
        for previous, current in zip(points, points[1:])
    ]


def _range_limit(distance_miles: float, segment_index: int, total_miles: float) -> RefuelPoint:
    return RefuelPoint(
        cumulative_distance_miles=distance_miles,
        segment_index=segment_index,
        percent_of_trip=(distance_miles / total_miles) * 100.0,
        reason="range_limit",
    )


def _segment_for(distance_miles: float, leg_miles: list[float]) -> int:
    accumulated = 0.0
    for index, miles in enumerate(leg_miles):
        accumulated += miles
        if accumulated >= distance_miles:
            return index
    return 0
