"""Pricing services package."""

from tour_pricing.services.pricing_service import (
    TourPricingEngine,
    compute_itinerary_pricing,
    compute_itinerary_pricing_async,
    resolve_template_pricing,
    resolve_template_pricing_async,
)

__all__ = [
    "TourPricingEngine",
    "compute_itinerary_pricing",
    "compute_itinerary_pricing_async",
    "resolve_template_pricing",
    "resolve_template_pricing_async",
]
