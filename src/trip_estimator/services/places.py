from __future__ import annotations

import logging
from typing import Any

import httpx
from django.conf import settings

from trip_estimator.exceptions import ExternalServiceError
from trip_estimator.services.types import GasStationCandidate, GeoPoint

logger = logging.getLogger(__name__)

FIELD_MASK = "places.displayName,places.formattedAddress,places.location,places.priceLevel"

PRICE_LEVELS = {
    "PRICE_LEVEL_INEXPENSIVE": 1,
    "PRICE_LEVEL_MODERATE": 2,
    "PRICE_LEVEL_EXPENSIVE": 3,
    "PRICE_LEVEL_VERY_EXPENSIVE": 4,
}
DEFAULT_PRICE_LEVEL = 2


class GooglePlacesClient:
    def __init__(self) -> None:
        self.base_url = settings.PLACES_BASE_URL.rstrip("/")
        self.timeout = settings.PLACES_TIMEOUT_SECONDS
        self.max_results = settings.PLACES_MAX_RESULTS
        self.api_key = settings.GOOGLE_MAPS_API_KEY

    def find_nearby_fuel_stations(
        self, location: GeoPoint, radius_meters: float
    ) -> list[GasStationCandidate]:
        body = {
            "includedTypes": ["gas_station"],
            "maxResultCount": self.max_results,
            "locationRestriction": {
                "circle": {
                    "center": {
                        "latitude": location.latitude,
                        "longitude": location.longitude,
                    },
                    "radius": float(radius_meters),
                }
            },
        }

        try:
            response = httpx.post(
                f"{self.base_url}/v1/places:searchNearby",
                json=body,
                timeout=self.timeout,
                headers={
                    "Content-Type": "application/json",
                    "X-Goog-Api-Key": self.api_key,
                    "X-Goog-FieldMask": FIELD_MASK,
                },
            )
            response.raise_for_status()
            payload = response.json()
        except (httpx.HTTPError, ValueError) as exc:
            logger.error("Places search near %s failed: %s", location, exc)
            raise ExternalServiceError("Places request failed") from exc

        if not isinstance(payload, dict):
            raise ExternalServiceError("Places response was malformed")
        return [self._parse_place(place) for place in payload.get("places") or []]

    @staticmethod
    def _parse_place(place: dict[str, Any]) -> GasStationCandidate:
        location = place.get("location") or {}
        return GasStationCandidate(
            name=(place.get("displayName") or {}).get("text") or "Unknown Station",
            address=place.get("formattedAddress") or "",
            location=GeoPoint(
                latitude=float(location.get("latitude") or 0.0),
                longitude=float(location.get("longitude") or 0.0),
            ),
            price_level=PRICE_LEVELS.get(place.get("priceLevel"), DEFAULT_PRICE_LEVEL),
        )
