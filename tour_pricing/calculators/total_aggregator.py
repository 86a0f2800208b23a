"""Grand totals and markup for a priced quotation."""

from decimal import Decimal, InvalidOperation
from enum import Enum
from typing import Optional, Union

from structlog import get_logger

from tour_pricing.config import settings
from tour_pricing.errors import InvalidMarkupError
from tour_pricing.models.money import money_sum, reject_float
from tour_pricing.models.result import (
    AppliedMarkup,
    DaySummary,
    PeriodSummary,
    PricedLineItem,
    PricingResult,
    RateFailure,
)

logger = get_logger(__name__)

HUNDRED = Decimal("100")

MarkupInput = Union[Decimal, int, str, None]


class MarkupTier(str, Enum):
    """Pricing tiers offered next to the markup field of the quotation."""

    STANDARD = "standard"
    PREMIUM = "premium"
    LUXURY = "luxury"
    CUSTOM = "custom"


def resolve_markup(tier: MarkupTier | str, custom: MarkupInput = None) -> Optional[Decimal]:
    """Resolve the markup percentage for a pricing tier.

    Tier percentages come from settings (10/20/30 by default). The custom
    tier uses the value typed by the user, which may be omitted.
    """
    tier = MarkupTier(tier)
    if tier == MarkupTier.CUSTOM:
        return TotalAggregator.parse_markup(custom)

    percentages = {
        MarkupTier.STANDARD: settings.pricing.standard_markup,
        MarkupTier.PREMIUM: settings.pricing.premium_markup,
        MarkupTier.LUXURY: settings.pricing.luxury_markup,
    }
    return Decimal(percentages[tier])


class TotalAggregator:
    """Sums day summaries into a PricingResult and applies markup."""

    @staticmethod
    def parse_markup(markup_percent: MarkupInput) -> Optional[Decimal]:
        """Convert a markup input to Decimal.

        Raises:
            InvalidMarkupError: If the value is negative or not a decimal number
        """
        if markup_percent is None:
            return None
        try:
            value = Decimal(reject_float(markup_percent))
        except (InvalidOperation, TypeError, ValueError) as e:
            raise InvalidMarkupError(markup_percent) from e
        if not value.is_finite() or value < 0:
            raise InvalidMarkupError(markup_percent)
        return value

    @staticmethod
    def aggregate(
        day_summaries: list[DaySummary],
        template_items: list[PricedLineItem],
        markup_percent: MarkupInput = None,
        failures: list[RateFailure] = (),
        period_breakdown: list[PeriodSummary] = (),
    ) -> PricingResult:
        """Build the final PricingResult.

        Template items and meal supplements count towards the accommodation
        subtotal so both pricing modes produce the same result shape. No rounding happens
        here; amounts are rounded once when the result is rendered.

        Args:
            day_summaries: Ordered day summaries
            template_items: Items without a day number
            markup_percent: Optional non-negative markup percentage
            failures: Requirements that could not be priced
            period_breakdown: Seasonal breakdown of accommodation

        Returns:
            Immutable PricingResult

        Raises:
            InvalidMarkupError: If markup_percent is negative
        """
        markup = TotalAggregator.parse_markup(markup_percent)

        accommodation_subtotal = money_sum(
            day.accommodation_total for day in day_summaries
        ) + money_sum(item.total_price for item in template_items)
        meal_subtotal = money_sum(day.meal_total for day in day_summaries)
        transport_subtotal = money_sum(day.transport_total for day in day_summaries)
        base_total = accommodation_subtotal + transport_subtotal

        applied_markup = None
        total_cost = base_total
        if markup is not None:
            markup_amount = base_total * markup / HUNDRED
            total_cost = base_total + markup_amount
            applied_markup = AppliedMarkup(percentage=markup, amount=markup_amount)

        logger.info(
            "Aggregated pricing totals",
            accommodation_subtotal=str(accommodation_subtotal),
            meal_subtotal=str(meal_subtotal),
            transport_subtotal=str(transport_subtotal),
            base_total=str(base_total),
            markup_percent=str(markup) if markup is not None else None,
            total_cost=str(total_cost),
            failures=len(failures),
        )

        return PricingResult(
            accommodation_subtotal=accommodation_subtotal,
            meal_subtotal=meal_subtotal,
            transport_subtotal=transport_subtotal,
            base_total=base_total,
            total_cost=total_cost,
            day_breakdown=tuple(day_summaries),
            template_items=tuple(template_items),
            applied_markup=applied_markup,
            failures=tuple(failures),
            period_breakdown=tuple(period_breakdown),
        )
