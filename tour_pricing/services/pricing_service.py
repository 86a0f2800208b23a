"""Tour pricing engine: entry points for template and itinerary pricing."""

import asyncio
from typing import Any, Optional

from structlog import get_logger

from tour_pricing.calculators import TotalAggregator
from tour_pricing.calculators.total_aggregator import MarkupInput
from tour_pricing.clients.rate_lookup import RateLookup
from tour_pricing.models.catalog import PriceCatalogEntry
from tour_pricing.models.request import ComponentSelection, ItineraryDay, TemplateCriteria
from tour_pricing.models.result import PricingResult
from tour_pricing.services.pipeline import Pipeline, PricingContext
from tour_pricing.services.pipeline.steps import (
    AggregateDaysStep,
    AggregateTotalsStep,
    MatchPeriodStep,
    PriceItineraryStep,
    PriceTemplateStep,
)

logger = get_logger(__name__)


def _parse(model: type, value: Any) -> Any:
    """Accept either a model instance or the collaborator's dict."""
    return value if isinstance(value, model) else model(**value)


class TourPricingEngine:
    """Runs pricing computations through step pipelines.

    The engine holds no state between calls: each computation gets a new
    PricingContext, so one engine can serve concurrent requests.
    """

    def __init__(self):
        """Initialize the engine with its two pipelines."""
        self.template_pipeline = Pipeline(
            "template-pricing",
            [
                MatchPeriodStep(),
                PriceTemplateStep(),
                AggregateDaysStep(),
                AggregateTotalsStep(),
            ],
        )
        self.itinerary_pipeline = Pipeline(
            "itinerary-pricing",
            [
                PriceItineraryStep(),
                AggregateDaysStep(),
                AggregateTotalsStep(),
            ],
        )

    def price_template(
        self,
        entries: list[PriceCatalogEntry] | list[dict[str, Any]],
        criteria: TemplateCriteria | dict[str, Any],
        selection: ComponentSelection | dict[str, Any],
        markup_percent: MarkupInput = None,
        computation_id: Optional[str] = None,
    ) -> PricingResult:
        """Price a template price list for the requested criteria.

        Template pricing does no I/O, so it runs without an event loop and
        may be called from synchronous or asynchronous code alike.

        Args:
            entries: Template price lists of the catalog
            criteria: Template id, date range, meal plan and room count
            selection: Components chosen by the user with room quantities
            markup_percent: Optional markup percentage
            computation_id: Optional id bound to log events

        Returns:
            PricingResult whose items are in ``template_items``

        Raises:
            NoMatchingPeriodError, AmbiguousPeriodError, EmptySelectionError,
            UnknownComponentError, InvalidMarkupError
        """
        context = PricingContext(
            markup_percent=TotalAggregator.parse_markup(markup_percent),
            computation_id=computation_id,
        )
        context.entries = [_parse(PriceCatalogEntry, entry) for entry in entries]
        context.criteria = _parse(TemplateCriteria, criteria)
        context.selection = _parse(ComponentSelection, selection)

        logger.info(
            "Starting template pricing",
            computation_id=context.computation_id,
            template_id=context.criteria.template_id,
            entries=len(context.entries),
        )

        self.template_pipeline.execute_sync(context)
        context.raise_for_errors()
        return context.result

    async def price_itinerary(
        self,
        days: list[ItineraryDay] | list[dict[str, Any]],
        rate_lookup: RateLookup,
        markup_percent: MarkupInput = None,
        computation_id: Optional[str] = None,
    ) -> PricingResult:
        """Price an itinerary from nightly room and vehicle rates.

        Requirements whose rate is missing are left out of the totals and
        listed in ``PricingResult.failures``.

        Args:
            days: Itinerary days with room and transport requirements
            rate_lookup: Rate collaborator (sync or async)
            markup_percent: Optional markup percentage
            computation_id: Optional id bound to log events

        Returns:
            PricingResult with a day breakdown

        Raises:
            InvalidMarkupError: If the markup percentage is negative
        """
        context = PricingContext(
            markup_percent=TotalAggregator.parse_markup(markup_percent),
            computation_id=computation_id,
        )
        context.days = [_parse(ItineraryDay, day) for day in days]
        context.rate_lookup = rate_lookup

        logger.info(
            "Starting itinerary pricing",
            computation_id=context.computation_id,
            days=len(context.days),
        )

        await self.itinerary_pipeline.execute(context)
        context.raise_for_errors()
        return context.result


def resolve_template_pricing(
    entries: list[PriceCatalogEntry] | list[dict[str, Any]],
    criteria: TemplateCriteria | dict[str, Any],
    selection: ComponentSelection | dict[str, Any],
    markup_percent: MarkupInput = None,
) -> PricingResult:
    """Price a template price list; safe to call inside a running event loop."""
    return TourPricingEngine().price_template(entries, criteria, selection, markup_percent)


async def resolve_template_pricing_async(
    entries: list[PriceCatalogEntry] | list[dict[str, Any]],
    criteria: TemplateCriteria | dict[str, Any],
    selection: ComponentSelection | dict[str, Any],
    markup_percent: MarkupInput = None,
) -> PricingResult:
    """Awaitable counterpart of resolve_template_pricing for async callers."""
    return resolve_template_pricing(entries, criteria, selection, markup_percent)


async def compute_itinerary_pricing_async(
    days: list[ItineraryDay] | list[dict[str, Any]],
    rate_lookup: RateLookup,
    markup_percent: MarkupInput = None,
) -> PricingResult:
    """Price an itinerary, awaiting an asynchronous rate lookup if needed."""
    return await TourPricingEngine().price_itinerary(days, rate_lookup, markup_percent)


def _in_event_loop() -> bool:
    try:
        asyncio.get_running_loop()
    except RuntimeError:
        return False
    return True


def compute_itinerary_pricing(
    days: list[ItineraryDay] | list[dict[str, Any]],
    rate_lookup: RateLookup,
    markup_percent: MarkupInput = None,
) -> PricingResult:
    """Price an itinerary synchronously.

    Raises:
        RuntimeError: If called from a running event loop; await
            compute_itinerary_pricing_async there instead
    """
    if _in_event_loop():
        raise RuntimeError(
            "compute_itinerary_pricing cannot run inside an event loop, "
            "await compute_itinerary_pricing_async instead"
        )
    return asyncio.run(compute_itinerary_pricing_async(days, rate_lookup, markup_percent))
