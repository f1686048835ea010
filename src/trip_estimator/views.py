from __future__ import annotations

import json
import logging
from collections.abc import Callable
from typing import Any

from django.http import HttpRequest, HttpResponse, JsonResponse
from django.views.decorators.csrf import csrf_exempt
from django.views.decorators.http import require_GET, require_POST
from pydantic import BaseModel, ValidationError

from trip_estimator.exceptions import (
    ExternalServiceError,
    InvalidInputError,
    NoRouteFoundError,
    VehicleNotFoundError,
)
from trip_estimator.schemas import (
    NearbyStationsRequest,
    RefuelPlanRequest,
    StationPricesRequest,
    TripCostRequest,
    VehicleSpecPayload,
)
from trip_estimator.services.planner import TripPlannerService, vehicle_spec_response

logger = logging.getLogger(__name__)

_planner_service: TripPlannerService | None = None


def get_trip_planner() -> TripPlannerService:
    global _planner_service
    if _planner_service is None:
        _planner_service = TripPlannerService()
    return _planner_service


@require_GET
def health_view(_: HttpRequest) -> HttpResponse:
    return JsonResponse({"status": "ok"})


@csrf_exempt
@require_POST
def trip_cost_view(request: HttpRequest) -> HttpResponse:
    return _handle(request, TripCostRequest, lambda payload: get_trip_planner().estimate(payload))


@csrf_exempt
@require_POST
def refuel_plan_view(request: HttpRequest) -> HttpResponse:
    return _handle(
        request, RefuelPlanRequest, lambda payload: get_trip_planner().refuel_plan(payload)
    )


@csrf_exempt
@require_POST
def tank_size_view(request: HttpRequest) -> HttpResponse:
    return _handle(
        request, VehicleSpecPayload, lambda payload: get_trip_planner().resolve_tank(payload)
    )


@csrf_exempt
@require_POST
def gas_stations_view(request: HttpRequest) -> HttpResponse:
    return _handle(
        request,
        NearbyStationsRequest,
        lambda payload: get_trip_planner().nearby_stations(payload),
    )


@csrf_exempt
@require_POST
def station_prices_view(request: HttpRequest) -> HttpResponse:
    return _handle(
        request,
        StationPricesRequest,
        lambda payload: get_trip_planner().station_prices(payload),
    )


@require_GET
def vehicles_view(request: HttpRequest) -> HttpResponse:
    catalog = get_trip_planner().vehicle_catalog
    action = request.GET.get("action", "years")

    try:
        if action == "years":
            return JsonResponse({"years": catalog.years()})
        if action == "makes":
            return JsonResponse({"makes": catalog.makes(int(request.GET["year"]))})
        if action == "models":
            year = int(request.GET["year"])
            return JsonResponse({"models": catalog.models(year, request.GET["make"])})
        if action == "options":
            specs = catalog.lookup_spec(
                int(request.GET["year"]), request.GET["make"], request.GET["model"]
            )
            return JsonResponse(
                {
                    "options": [
                        {
                            "id": spec.vehicle_id,
                            "description": (
                                f"{spec.model} - {spec.fuel_type} ({spec.combined_mpg:g} MPG)"
                            ),
                        }
                        for spec in specs
                    ]
                }
            )
        if action == "details":
            spec = catalog.get(int(request.GET["vehicle_id"]))
            return JsonResponse(vehicle_spec_response(spec).model_dump(mode="json"))
    except KeyError as exc:
        return _error_response("validation_error", f"Missing query parameter: {exc.args[0]}", 400)
    except ValueError:
        return _error_response("validation_error", "Query parameters must be integers", 400)
    except VehicleNotFoundError as exc:
        return _error_response("vehicle_not_found", str(exc), status=404)

    return _error_response(
        "validation_error",
        "action must be one of: years, makes, models, options, details",
        status=400,
    )


def _handle(
    request: HttpRequest,
    schema: type[BaseModel],
    operation: Callable[[Any], BaseModel],
) -> HttpResponse:
    payload = _parse_json_payload(request)
    if isinstance(payload, JsonResponse):
        return payload

    try:
        validated = schema.model_validate(payload)
    except ValidationError as exc:
        return JsonResponse(
            {
                "error": {
                    "code": "validation_error",
                    "message": "Invalid request payload",
                    "details": exc.errors(include_url=False, include_context=False),
                }
            },
            status=400,
        )

    try:
        response = operation(validated)
    except InvalidInputError as exc:
        return _error_response("invalid_input", str(exc), status=400)
    except VehicleNotFoundError as exc:
        return _error_response("vehicle_not_found", str(exc), status=404)
    except NoRouteFoundError as exc:
        return _error_response("no_route", str(exc), status=502)
    except ExternalServiceError as exc:
        logger.warning("Upstream failure while handling %s: %s", request.path, exc)
        return _error_response("upstream_error", str(exc), status=502)

    return JsonResponse(response.model_dump(mode="json"), status=200)


def _parse_json_payload(request: HttpRequest) -> dict[str, Any] | JsonResponse:
    if not request.body:
        return {}

    try:
        payload = json.loads(request.body)
    except json.JSONDecodeError:
        return _error_response("invalid_json", "Request body must be valid JSON", status=400)

    if not isinstance(payload, dict):
        return _error_response("invalid_json", "JSON body must be an object", status=400)

    return payload


def _error_response(code: str, message: str, status: int) -> JsonResponse:
    return JsonResponse({"error": {"code": code, "message": message}}, status=status)
