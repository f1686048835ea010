from __future__ import annotations

from collections.abc import Iterable

from trip_estimator.exceptions import InvalidInputError
from trip_estimator.services.types import RouteInfo, RouteLeg

METERS_TO_MILES = 0.000621371


def meters_to_miles(meters: float) -> float:
    return meters * METERS_TO_MILES


def meters_to_kilometers(meters: float) -> float:
    return meters / 1000


def format_duration(seconds: float) -> str:
    """Render a duration as e.g. ``"1 hour 1 minute"`` or ``"25 minutes"``."""
    hours = int(seconds // 3600)
    minutes = int((seconds % 3600) // 60)

    minute_text = f"{minutes} minute{'' if minutes == 1 else 's'}"
    if hours > 0:
        return f"{hours} hour{'' if hours == 1 else 's'} {minute_text}"
    return minute_text


def parse_duration(value: str | int | float) -> int:
    """Parse a provider duration such as ``"3665s"`` into whole seconds."""
    if isinstance(value, (int, float)):
        return int(value)
    try:
        return int(float(str(value).strip().removesuffix("s")))
    except ValueError as exc:
        raise InvalidInputError(f"Unrecognised duration: {value!r}") from exc


def build_route_info(
    distance_meters: float,
    duration_seconds: float,
    legs: Iterable[RouteLeg] = (),
    encoded_polyline: str | None = None,
) -> RouteInfo:
    if distance_meters < 0 or duration_seconds < 0:
        raise InvalidInputError("Route distance and duration must be non-negative")

    legs = tuple(legs)
    for leg in legs:
        if leg.distance_meters < 0 or leg.duration_seconds < 0:
            raise InvalidInputError("Route leg distance and duration must be non-negative")

    return RouteInfo(
        distance_meters=distance_meters,
        duration_seconds=duration_seconds,
        distance_miles=meters_to_miles(distance_meters),
        distance_km=meters_to_kilometers(distance_meters),
        duration_formatted=format_duration(duration_seconds),
        legs=legs,
        encoded_polyline=encoded_polyline,
    )
