from __future__ import annotations

import pytest
from django.core.cache import cache
from django.test import Client

from trip_estimator import views


@pytest.fixture
def api_client() -> Client:
    return Client()


@pytest.fixture(autouse=True)
def _reset_state() -> None:
    cache.clear()
    views._planner_service = None
