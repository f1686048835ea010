from __future__ import annotations

import pytest

from trip_estimator.exceptions import PricingFeedError
from trip_estimator.services.price_cache import PriceCache
from trip_estimator.services.reconciler import (
    StationPriceReconciler,
    group_by_proximity,
    reconcile_station_prices,
    regular_price,
)
from trip_estimator.services.types import (
    FeedFuelPrice,
    FeedPricePoint,
    FeedStationRecord,
    GasStationCandidate,
    GeoPoint,
)

NAMES = ["Alpha Fuel", "Bravo Gas", "Charlie Stop", "Delta Petrol", "Echo Mart"]


class FakePricingFeed:
    def __init__(self, records: list[FeedStationRecord] | None = None, error: bool = False):
        self.records = records or []
        self.error = error
        self.calls: list[tuple[float, float]] = []

    def lookup_station_prices(self, latitude: float, longitude: float) -> list[FeedStationRecord]:
        self.calls.append((latitude, longitude))
        if self.error:
            raise PricingFeedError("Pricing feed timed out")
        return self.records


def _candidates() -> list[GasStationCandidate]:
    # 0.002 degrees apart: one proximity group, but too far apart to cross-match.
    return [
        GasStationCandidate(
            name=name, address=f"{i} Main St", location=GeoPoint(40.0 + i * 0.002, -75.0)
        )
        for i, name in enumerate(NAMES)
    ]


def _regular(credit: float | None = None, cash: float | None = None) -> FeedFuelPrice:
    return FeedFuelPrice(
        fuel_product="regular_gas",
        long_name="Regular",
        credit=FeedPricePoint(credit, "2024-05-01T12:00:00Z") if credit is not None else None,
        cash=FeedPricePoint(cash, "2024-05-01T09:00:00Z") if cash is not None else None,
    )


def _record_for(candidate: GasStationCandidate, price: float) -> FeedStationRecord:
    return FeedStationRecord(
        station_id=candidate.name,
        name=candidate.name,
        address_line=f"{candidate.name} address",
        latitude=candidate.location.latitude,
        longitude=candidate.location.longitude,
        prices=(_regular(credit=price),),
    )


def test_grouping_compares_only_against_the_seed() -> None:
    stations = [
        GasStationCandidate(name=str(lat), address="", location=GeoPoint(lat, 0.0))
        for lat in (0.0, 0.04, 0.08)
    ]

    groups = group_by_proximity(stations)

    assert [[station.name for station in group] for group in groups] == [["0.0", "0.04"], ["0.08"]]


def test_grouping_preserves_every_candidate_once() -> None:
    stations = _candidates() + [
        GasStationCandidate(name="Far", address="", location=GeoPoint(41.0, -75.0))
    ]

    groups = group_by_proximity(stations)

    assert len(groups) == 2
    assert sorted(station.name for group in groups for station in group) == sorted(
        station.name for station in stations
    )


def test_unmatched_stations_get_regional_average_with_three_matches() -> None:
    candidates = _candidates()
    feed = FakePricingFeed(
        [_record_for(candidate, price) for candidate, price in zip(candidates, [3.0, 3.2, 3.4])]
    )

    priced = StationPriceReconciler(feed).reconcile(candidates)

    assert len(feed.calls) == 1
    assert [station.source for station in priced] == ["external_pricing_feed"] * 3 + [
        "regional_average"
    ] * 2
    assert [station.regular_price for station in priced[:3]] == [3.0, 3.2, 3.4]
    assert priced[3].regular_price == pytest.approx(3.2)
    assert priced[3].station_name == "Delta Petrol"
    assert priced[0].candidate_address == "0 Main St"
    assert priced[0].last_updated == "2024-05-01T12:00:00Z"


def test_unmatched_stations_are_dropped_with_fewer_than_three_matches() -> None:
    candidates = _candidates()
    feed = FakePricingFeed(
        [_record_for(candidate, price) for candidate, price in zip(candidates, [3.0, 3.2])]
    )

    priced = reconcile_station_prices(candidates, feed)

    assert [station.station_name for station in priced] == ["Alpha Fuel", "Bravo Gas"]
    assert all(station.source == "external_pricing_feed" for station in priced)


def test_feed_failure_yields_no_prices() -> None:
    feed = FakePricingFeed(error=True)

    assert StationPriceReconciler(feed).reconcile(_candidates()) == []
    assert len(feed.calls) == 1


def test_failed_group_is_filled_from_other_groups_prices() -> None:
    priced_group = _candidates()
    failed_group = [
        GasStationCandidate(
            name=f"Far Station {i}",
            address=f"{i} Far Rd",
            location=GeoPoint(45.0 + i * 0.002, -75.0),
        )
        for i in range(5)
    ]

    class PartlyFailingFeed(FakePricingFeed):
        def lookup_station_prices(self, latitude, longitude):
            if latitude > 44.0:
                self.calls.append((latitude, longitude))
                raise PricingFeedError("Pricing feed timed out")
            return super().lookup_station_prices(latitude, longitude)

    feed = PartlyFailingFeed(
        [_record_for(candidate, price) for candidate, price in zip(priced_group, [3.0, 3.1, 3.2])]
    )

    priced = StationPriceReconciler(feed).reconcile(priced_group + failed_group)

    assert len(feed.calls) == 2
    filled = [station for station in priced if station.source == "regional_average"]
    assert {station.station_name for station in filled} == {
        "Delta Petrol",
        "Echo Mart",
        *(station.name for station in failed_group),
    }
    assert all(station.regular_price == pytest.approx(3.1) for station in filled)


def test_failed_lookups_are_not_cached() -> None:
    feed = FakePricingFeed(error=True)
    reconciler = StationPriceReconciler(feed, PriceCache())

    reconciler.reconcile(_candidates())
    reconciler.reconcile(_candidates())

    assert len(feed.calls) == 2


def test_results_are_reused_until_cache_expires() -> None:
    now = [0.0]
    cache = PriceCache(ttl_seconds=900, clock=lambda: now[0])
    candidates = _candidates()
    feed = FakePricingFeed([_record_for(candidates[0], 3.1)])
    reconciler = StationPriceReconciler(feed, cache)

    reconciler.reconcile(candidates)
    now[0] = 600.0
    reconciler.reconcile(candidates)
    assert len(feed.calls) == 1

    now[0] = 1000.0
    reconciler.reconcile(candidates)
    assert len(feed.calls) == 2


def test_empty_candidate_list() -> None:
    feed = FakePricingFeed()

    assert StationPriceReconciler(feed).reconcile([]) == []
    assert feed.calls == []


def test_regular_price_prefers_credit() -> None:
    record = FeedStationRecord("1", "A", "", 0.0, 0.0, prices=(_regular(credit=3.49, cash=3.39),))

    assert regular_price(record) == (3.49, "2024-05-01T12:00:00Z")


def test_regular_price_falls_back_to_cash() -> None:
    record = FeedStationRecord("1", "A", "", 0.0, 0.0, prices=(_regular(cash=3.39),))

    assert regular_price(record) == (3.39, "2024-05-01T09:00:00Z")


def test_zero_credit_price_keeps_credit_posted_time() -> None:
    record = FeedStationRecord("1", "A", "", 0.0, 0.0, prices=(_regular(credit=0.0, cash=3.39),))

    assert regular_price(record) == (3.39, "2024-05-01T12:00:00Z")


def test_credit_price_without_posted_time_uses_cash_posted_time() -> None:
    fuel = FeedFuelPrice(
        fuel_product="regular_gas",
        long_name="Regular",
        credit=FeedPricePoint(3.49),
        cash=FeedPricePoint(3.39, "2024-05-01T09:00:00Z"),
    )
    record = FeedStationRecord("1", "A", "", 0.0, 0.0, prices=(fuel,))

    assert regular_price(record) == (3.49, "2024-05-01T09:00:00Z")


def test_regular_price_matches_on_long_name() -> None:
    fuel = FeedFuelPrice(
        fuel_product="unleaded", long_name="Regular Unleaded", cash=FeedPricePoint(3.1)
    )
    record = FeedStationRecord("1", "A", "", 0.0, 0.0, prices=(fuel,))

    assert regular_price(record) == (3.1, None)


def test_regular_price_missing() -> None:
    premium = FeedFuelPrice(fuel_product="premium_gas", long_name="Premium", cash=FeedPricePoint(4.1))

    assert regular_price(FeedStationRecord("1", "A", "", 0.0, 0.0, prices=(premium,))) == (
        None,
        None,
    )
