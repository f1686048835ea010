from __future__ import annotations

import re

from trip_estimator.services.geo import haversine_km
from trip_estimator.services.types import FeedStationRecord, GasStationCandidate

MAX_MATCH_DISTANCE_KM = 0.1
MATCH_THRESHOLD = 0.7
NAME_WEIGHT = 0.7
PROXIMITY_WEIGHT = 0.3

BRAND_PREFIX = re.compile(
    r"^(shell|chevron|bp|exxon|mobil|arco|valero|speedway|marathon|sunoco|wawa|7-eleven|circlek)",
    re.IGNORECASE,
)
STORE_NUMBER_SUFFIX = re.compile(r"#\d+$")
NON_ALPHANUMERIC = re.compile(r"[^a-z0-9]")
WHITESPACE = re.compile(r"\s+")


def normalize_station_name(name: str) -> str:
    normalized = WHITESPACE.sub("", name.lower())
    normalized = BRAND_PREFIX.sub("", normalized)
    normalized = STORE_NUMBER_SUFFIX.sub("", normalized)
    return NON_ALPHANUMERIC.sub("", normalized)


def levenshtein_distance(first: str, second: str) -> int:
    previous = list(range(len(second) + 1))
    for i, first_char in enumerate(first, start=1):
        current = [i]
        for j, second_char in enumerate(second, start=1):
            cost = 0 if first_char == second_char else 1
            current.append(min(previous[j] + 1, current[j - 1] + 1, previous[j - 1] + cost))
        previous = current
    return previous[-1]


def name_similarity(first: str, second: str) -> float:
    """Similarity of two already-normalised names in [0, 1]."""
    if first == second:
        return 1.0
    if first in second or second in first:
        return 0.9

    return 1.0 - levenshtein_distance(first, second) / max(len(first), len(second))


def match_score(candidate: GasStationCandidate, record: FeedStationRecord) -> float | None:
    """Combined name/proximity score, or ``None`` when the pair is too far apart."""
    distance_km = haversine_km(
        candidate.location.latitude,
        candidate.location.longitude,
        record.latitude,
        record.longitude,
    )
    if distance_km > MAX_MATCH_DISTANCE_KM:
        return None

    name_score = name_similarity(
        normalize_station_name(candidate.name),
        normalize_station_name(record.name or record.address_line),
    )
    proximity_score = max(0.0, 1.0 - distance_km / MAX_MATCH_DISTANCE_KM)
    return NAME_WEIGHT * name_score + PROXIMITY_WEIGHT * proximity_score


def find_best_match(
    candidate: GasStationCandidate, records: list[FeedStationRecord]
) -> FeedStationRecord | None:
    # Strict comparison keeps the first of several equally scored records.
    best_record: FeedStationRecord | None = None
    best_score = 0.0

    for record in records:
        score = match_score(candidate, record)
        if score is None:
            continue
        if score > best_score and score > MATCH_THRESHOLD:
            best_score = score
            best_record = record

    return best_record
