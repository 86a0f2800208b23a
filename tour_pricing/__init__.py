"""Tour pricing resolution and aggregation engine."""

from tour_pricing.errors import (
    AmbiguousPeriodError,
    EmptySelectionError,
    ErrorKind,
    InvalidMarkupError,
    NoMatchingPeriodError,
    PricingError,
    RateNotFoundError,
    UnknownComponentError,
)
from tour_pricing.services import (
    TourPricingEngine,
    compute_itinerary_pricing,
    compute_itinerary_pricing_async,
    resolve_template_pricing,
    resolve_template_pricing_async,
)

__all__ = [
    "AmbiguousPeriodError",
    "EmptySelectionError",
    "ErrorKind",
    "InvalidMarkupError",
    "NoMatchingPeriodError",
    "PricingError",
    "RateNotFoundError",
    "UnknownComponentError",
    "TourPricingEngine",
    "compute_itinerary_pricing",
    "compute_itinerary_pricing_async",
    "resolve_template_pricing",
    "resolve_template_pricing_async",
]
