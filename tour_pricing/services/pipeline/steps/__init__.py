"""Pricing pipeline step implementations."""

from .aggregate_days_step import AggregateDaysStep
from .aggregate_totals_step import AggregateTotalsStep
from .match_period_step import MatchPeriodStep
from .price_itinerary_step import PriceItineraryStep
from .price_template_step import PriceTemplateStep

__all__ = [
    "AggregateDaysStep",
    "AggregateTotalsStep",
    "MatchPeriodStep",
    "PriceItineraryStep",
    "PriceTemplateStep",
]
