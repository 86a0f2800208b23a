"""Pricing calculators package."""

from tour_pricing.calculators.day_aggregator import DayAggregator
from tour_pricing.calculators.itinerary_calculator import ItineraryCalculator
from tour_pricing.calculators.period_matcher import PeriodMatcher
from tour_pricing.calculators.template_calculator import TemplateCalculator
from tour_pricing.calculators.total_aggregator import (
    MarkupTier,
    TotalAggregator,
    resolve_markup,
)

__all__ = [
    "DayAggregator",
    "ItineraryCalculator",
    "PeriodMatcher",
    "TemplateCalculator",
    "TotalAggregator",
    "MarkupTier",
    "resolve_markup",
]
