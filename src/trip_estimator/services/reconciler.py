from __future__ import annotations

import logging
from statistics import fmean

from trip_estimator.exceptions import ExternalServiceError
from trip_estimator.services.geo import centroid, degree_distance
from trip_estimator.services.matching import find_best_match
from trip_estimator.services.price_cache import PriceCache
from trip_estimator.services.providers import PricingFeedProvider
from trip_estimator.services.types import (
    FeedFuelPrice,
    FeedStationRecord,
    GasStationCandidate,
    PricedStation,
)

logger = logging.getLogger(__name__)

PROXIMITY_THRESHOLD_DEGREES = 0.05
MIN_PRICES_FOR_REGIONAL_AVERAGE = 3
REGULAR_FUEL_PRODUCT = "regular_gas"


def group_by_proximity(
    candidates: list[GasStationCandidate],
    threshold: float = PROXIMITY_THRESHOLD_DEGREES,
) -> list[list[GasStationCandidate]]:
    """Greedy single-pass grouping of nearby stations.

    Each ungrouped station seeds a group and pulls in every later ungrouped
    station closer than ``threshold`` degrees to the seed. Members are never
    compared with each other, so this is not a transitive clustering.
    """
    groups: list[list[GasStationCandidate]] = []
    grouped: set[int] = set()

    for i, seed in enumerate(candidates):
        if i in grouped:
            continue

        group = [seed]
        grouped.add(i)
        for j in range(i + 1, len(candidates)):
            if j in grouped:
                continue
            if degree_distance(seed.location, candidates[j].location) < threshold:
                group.append(candidates[j])
                grouped.add(j)

        groups.append(group)

    return groups


def regular_price(record: FeedStationRecord) -> tuple[float | None, str | None]:
    """Regular-grade price and posted time, preferring credit over cash."""
    fuel = next((price for price in record.prices if _is_regular(price)), None)
    if fuel is None:
        return None, None

    points = [point for point in (fuel.credit, fuel.cash) if point is not None]
    # Price and posted time are each taken from the first point that has one.
    price = next((point.price for point in points if point.price), None)
    posted_time = next((point.posted_time for point in points if point.posted_time), None)
    return price, posted_time


def _is_regular(price: FeedFuelPrice) -> bool:
    return price.fuel_product == REGULAR_FUEL_PRODUCT or "regular" in price.long_name.lower()


class StationPriceReconciler:
    def __init__(self, pricing_feed: PricingFeedProvider, cache: PriceCache | None = None) -> None:
        self.pricing_feed = pricing_feed
        self.cache = cache if cache is not None else PriceCache()

    def reconcile(self, candidates: list[GasStationCandidate]) -> list[PricedStation]:
        priced: list[PricedStation] = []
        matched_prices: list[float] = []
        unmatched: list[GasStationCandidate] = []

        for group in group_by_proximity(candidates):
            records = self._records_for_group(group)

            for candidate in group:
                record = find_best_match(candidate, records) if records else None
                if record is None:
                    unmatched.append(candidate)
                    continue

                price, posted_time = regular_price(record)
                priced.append(
                    PricedStation(
                        station_name=record.name or record.address_line,
                        address=record.address_line,
                        regular_price=price,
                        last_updated=posted_time,
                        source="external_pricing_feed",
                        candidate_address=candidate.address,
                    )
                )
                if price:
                    matched_prices.append(price)

        if not unmatched:
            return priced

        if len(matched_prices) < MIN_PRICES_FOR_REGIONAL_AVERAGE:
            logger.info(
                "Dropping %d unmatched station(s); only %d matched price(s) available",
                len(unmatched),
                len(matched_prices),
            )
            return priced

        regional_average = fmean(matched_prices)
        logger.info(
            "Filling %d unmatched station(s) with regional average %.3f",
            len(unmatched),
            regional_average,
        )
        priced.extend(
            PricedStation(
                station_name=candidate.name,
                address=candidate.address,
                regular_price=regional_average,
                source="regional_average",
                candidate_address=candidate.address,
            )
            for candidate in unmatched
        )
        return priced

    def _records_for_group(self, group: list[GasStationCandidate]) -> list[FeedStationRecord]:
        center = centroid([candidate.location for candidate in group])
        cache_key = PriceCache.key_for(center.latitude, center.longitude)

        cached = self.cache.get(cache_key)
        if cached is not None:
            logger.debug("Pricing feed cache hit for %s", cache_key)
            return cached

        try:
            records = self.pricing_feed.lookup_station_prices(center.latitude, center.longitude)
        except ExternalServiceError as exc:
            logger.warning("Pricing feed lookup failed near %s: %s", cache_key, exc)
            return []

        self.cache.set(cache_key, records)
        return records


def reconcile_station_prices(
    candidates: list[GasStationCandidate],
    pricing_feed: PricingFeedProvider,
    cache: PriceCache | None = None,
) -> list[PricedStation]:
    return StationPriceReconciler(pricing_feed, cache).reconcile(candidates)
