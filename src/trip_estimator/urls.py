from django.urls import path

from trip_estimator import views

urlpatterns = [
    path("api/v1/health", views.health_view, name="health"),
    path("api/v1/trip-cost", views.trip_cost_view, name="trip-cost"),
    path("api/v1/refuel-plan", views.refuel_plan_view, name="refuel-plan"),
    path("api/v1/tank-size", views.tank_size_view, name="tank-size"),
    path("api/v1/gas-stations", views.gas_stations_view, name="gas-stations"),
    path("api/v1/station-prices", views.station_prices_view, name="station-prices"),
    path("api/v1/vehicles", views.vehicles_view, name="vehicles"),
]
