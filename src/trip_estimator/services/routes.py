from __future__ import annotations

import hashlib
import logging
import time
from typing import Any

import httpx
from django.conf import settings
from django.core.cache import cache

from trip_estimator.exceptions import ExternalServiceError, InvalidInputError, NoRouteFoundError
from trip_estimator.services.types import RouteInfo, RouteLeg
from trip_estimator.services.units import build_route_info, parse_duration

logger = logging.getLogger(__name__)

FIELD_MASK = ",".join(
    [
        "routes.duration",
        "routes.distanceMeters",
        "routes.polyline.encodedPolyline",
        "routes.legs.distanceMeters",
        "routes.legs.duration",
        "routes.legs.polyline.encodedPolyline",
    ]
)


class GoogleRoutesClient:
    def __init__(self) -> None:
        self.base_url = settings.ROUTES_BASE_URL.rstrip("/")
        self.timeout = settings.ROUTES_TIMEOUT_SECONDS
        self.retry_count = settings.ROUTES_RETRY_COUNT
        self.api_key = settings.GOOGLE_MAPS_API_KEY

    def compute_route(
        self, origin: str, destination: str, waypoints: list[str] | None = None
    ) -> RouteInfo:
        waypoints = [waypoint for waypoint in (waypoints or []) if waypoint.strip()]
        if not origin.strip() or not destination.strip():
            raise InvalidInputError("Origin and destination are required")

        addresses = [origin, *waypoints, destination]
        cache_key = self._cache_key(addresses)
        cached = cache.get(cache_key)
        if cached:
            return self._build_route(cached, addresses)

        body: dict[str, Any] = {
            "origin": {"address": origin},
            "destination": {"address": destination},
            "travelMode": "DRIVE",
            "routingPreference": "TRAFFIC_AWARE",
            "computeAlternativeRoutes": False,
            "languageCode": "en-US",
            "units": "IMPERIAL",
        }
        if waypoints:
            body["intermediates"] = [{"address": waypoint} for waypoint in waypoints]

        for attempt in range(self.retry_count + 1):
            try:
                response = httpx.post(
                    f"{self.base_url}/directions/v2:computeRoutes",
                    json=body,
                    timeout=self.timeout,
                    headers={
                        "Content-Type": "application/json",
                        "X-Goog-Api-Key": self.api_key,
                        "X-Goog-FieldMask": FIELD_MASK,
                    },
                )
                response.raise_for_status()
                route = self._first_route(response.json())
                route_info = self._build_route(route, addresses)
                cache.set(cache_key, route, timeout=settings.ROUTE_CACHE_TTL_SECONDS)
                return route_info
            except NoRouteFoundError:
                raise
            except httpx.HTTPError as exc:
                if attempt >= self.retry_count:
                    logger.error("Routes request failed after %d attempt(s): %s", attempt + 1, exc)
                    raise ExternalServiceError("Routes request failed") from exc
                time.sleep(0.3 * (attempt + 1))

        raise ExternalServiceError("Routes request failed")

    @staticmethod
    def _cache_key(addresses: list[str]) -> str:
        encoded = "|".join(address.strip().lower() for address in addresses).encode()
        return f"route:{hashlib.sha256(encoded).hexdigest()}"

    @staticmethod
    def _first_route(payload: Any) -> dict[str, Any]:
        routes = payload.get("routes") if isinstance(payload, dict) else None
        if not routes:
            raise NoRouteFoundError("No route found between these locations")
        return routes[0]

    @staticmethod
    def _build_route(route: dict[str, Any], addresses: list[str]) -> RouteInfo:
        try:
            distance_meters = float(route.get("distanceMeters", 0))
            duration_seconds = parse_duration(route.get("duration", "0s"))
            legs = [
                RouteLeg(
                    start_address=addresses[index],
                    end_address=addresses[index + 1],
                    distance_meters=float(leg.get("distanceMeters", 0)),
                    duration_seconds=parse_duration(leg.get("duration", "0s")),
                    encoded_polyline=(leg.get("polyline") or {}).get("encodedPolyline"),
                )
                for index, leg in enumerate(route.get("legs") or [])
                if index + 1 < len(addresses)
            ]
            return build_route_info(
                distance_meters,
                duration_seconds,
                legs=legs,
                encoded_polyline=(route.get("polyline") or {}).get("encodedPolyline"),
            )
        except (TypeError, ValueError, AttributeError, InvalidInputError) as exc:
            raise ExternalServiceError("Routes response was malformed") from exc
