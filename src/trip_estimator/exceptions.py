class TripEstimatorError(Exception):
    """Base exception for trip estimation errors."""


class InvalidInputError(TripEstimatorError):
    """Raised when route, vehicle or price input cannot be used for a calculation."""


class ExternalServiceError(TripEstimatorError):
    """Raised when an upstream API call fails."""


class PricingFeedError(ExternalServiceError):
    """Raised when the crowd-sourced pricing feed fails or returns garbage."""


class NoRouteFoundError(TripEstimatorError):
    """Raised when a drivable route cannot be generated."""


class VehicleNotFoundError(TripEstimatorError):
    """Raised when a vehicle is not present in the catalog."""
