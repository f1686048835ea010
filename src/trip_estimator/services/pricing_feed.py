from __future__ import annotations

import logging
from typing import Any

import httpx
from django.conf import settings

from trip_estimator.exceptions import PricingFeedError
from trip_estimator.services.types import (
    FeedFuelPrice,
    FeedPricePoint,
    FeedStationRecord,
)

logger = logging.getLogger(__name__)

LOCATION_QUERY = """query LocationBySearchTerm($brandId: Int, $cursor: String, $fuel: Int, $lat: Float, $lng: Float, $maxAge: Int, $search: String) {
  locationBySearchTerm(lat: $lat, lng: $lng, search: $search) {
    stations(brandId: $brandId cursor: $cursor fuel: $fuel lat: $lat lng: $lng maxAge: $maxAge) {
      results {
        address { line1 }
        prices {
          cash { nickname postedTime price }
          credit { nickname postedTime price }
          fuelProduct
          longName
        }
        priceUnit
        currency
        id
        latitude
        longitude
        name
      }
    }
  }
}"""

HEADERS = {
    "Content-Type": "application/json",
    "apollo-require-preflight": "true",
    "Origin": "https://www.gasbuddy.com",
    "Referer": "https://www.gasbuddy.com/home",
    "User-Agent": (
        "Mozilla/5.0 (Windows NT 10.0; Win64; x64) AppleWebKit/537.36 "
        "(KHTML, like Gecko) Chrome/137.0.0.0 Safari/537.36"
    ),
}


class GasBuddyClient:
    """Crowd-sourced station prices from the GasBuddy GraphQL endpoint.

    A single attempt is made per lookup; callers decide how to degrade.
    """

    def __init__(self) -> None:
        self.url = settings.PRICING_FEED_URL
        self.timeout = settings.PRICING_FEED_TIMEOUT_SECONDS

    def lookup_station_prices(self, latitude: float, longitude: float) -> list[FeedStationRecord]:
        body = {
            "operationName": "LocationBySearchTerm",
            "variables": {"maxAge": 0, "lat": latitude, "lng": longitude},
            "query": LOCATION_QUERY,
        }

        try:
            response = httpx.post(self.url, json=body, headers=HEADERS, timeout=self.timeout)
            response.raise_for_status()
            payload = response.json()
        except httpx.TimeoutException as exc:
            raise PricingFeedError("Pricing feed timed out") from exc
        except (httpx.HTTPError, ValueError) as exc:
            raise PricingFeedError("Pricing feed request failed") from exc

        if not isinstance(payload, dict):
            raise PricingFeedError("Pricing feed response was malformed")
        if payload.get("errors"):
            raise PricingFeedError(f"Pricing feed GraphQL errors: {payload['errors']}")

        try:
            results = (
                ((payload.get("data") or {}).get("locationBySearchTerm") or {}).get("stations")
                or {}
            ).get("results") or []
            records = [self._parse_station(station) for station in results]
        except (AttributeError, KeyError, TypeError, ValueError) as exc:
            raise PricingFeedError("Pricing feed station record was malformed") from exc

        logger.debug(
            "Pricing feed returned %d station(s) near %.3f,%.3f", len(records), latitude, longitude
        )
        return records

    @staticmethod
    def _parse_station(station: dict[str, Any]) -> FeedStationRecord:
        return FeedStationRecord(
            station_id=str(station["id"]),
            name=station.get("name") or None,
            address_line=(station.get("address") or {}).get("line1") or "",
            latitude=float(station["latitude"]),
            longitude=float(station["longitude"]),
            prices=tuple(
                FeedFuelPrice(
                    fuel_product=price.get("fuelProduct") or "",
                    long_name=price.get("longName") or "",
                    cash=_price_point(price.get("cash")),
                    credit=_price_point(price.get("credit")),
                )
                for price in station.get("prices") or []
            ),
            currency=station.get("currency"),
            price_unit=station.get("priceUnit"),
        )


def _price_point(raw: dict[str, Any] | None) -> FeedPricePoint | None:
    if not raw or raw.get("price") is None:
        return None
    return FeedPricePoint(price=float(raw["price"]), posted_time=raw.get("postedTime"))
