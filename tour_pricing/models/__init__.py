"""Pricing value types: catalog records, requests and results."""

from tour_pricing.models.catalog import (
    PriceCatalogEntry,
    PriceComponent,
    RateLookupRow,
    TransportPricingType,
)
from tour_pricing.models.meal_plan import Meal, covered_meals
from tour_pricing.models.occupancy import (
    OccupancyMultiplier,
    OccupancyMultiplierResolver,
    resolve_multiplier,
)
from tour_pricing.models.request import (
    ComponentSelection,
    ItineraryDay,
    RoomRequirement,
    SelectedComponent,
    TemplateCriteria,
    TransportRequirement,
)
from tour_pricing.models.result import (
    AppliedMarkup,
    DaySummary,
    LineItemKind,
    NightRate,
    PeriodSummary,
    PricedLineItem,
    PricingResult,
    RateFailure,
)

__all__ = [
    "PriceCatalogEntry",
    "PriceComponent",
    "RateLookupRow",
    "TransportPricingType",
    "Meal",
    "covered_meals",
    "OccupancyMultiplier",
    "OccupancyMultiplierResolver",
    "resolve_multiplier",
    "ComponentSelection",
    "ItineraryDay",
    "RoomRequirement",
    "SelectedComponent",
    "TemplateCriteria",
    "TransportRequirement",
    "AppliedMarkup",
    "DaySummary",
    "LineItemKind",
    "NightRate",
    "PeriodSummary",
    "PricedLineItem",
    "PricingResult",
    "RateFailure",
]
