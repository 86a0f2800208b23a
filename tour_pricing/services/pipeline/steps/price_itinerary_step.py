"""Step to price itinerary days from nightly room and vehicle rates."""

from tour_pricing.calculators import ItineraryCalculator
from tour_pricing.services.pipeline import PipelineStep, PricingContext


class PriceItineraryStep(PipelineStep):
    """Price every room and transport requirement of the itinerary.

    Missing rates are collected on the context as failures; the step
    still succeeds with whatever could be priced.
    """

    def __init__(self):
        super().__init__("PriceItinerary")

    async def execute(self, context: PricingContext) -> bool:
        calculator = ItineraryCalculator(context.rate_lookup)
        context.line_items, context.failures = await calculator.price_itinerary(context.days)

        if context.failures:
            self.logger.warning(
                "Itinerary priced with missing rates",
                computation_id=context.computation_id,
                failures=[failure.lookup_key() for failure in context.failures],
            )
        return True
