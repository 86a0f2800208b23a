"""Step to group line items by itinerary day."""

from tour_pricing.calculators import DayAggregator
from tour_pricing.services.pipeline import PipelineStep, PricingContext


class AggregateDaysStep(PipelineStep):
    """Build day summaries, template items and the period breakdown."""

    def __init__(self):
        super().__init__("AggregateDays")

    def execute(self, context: PricingContext) -> bool:
        context.day_summaries, context.template_items = DayAggregator.aggregate_by_day(
            context.line_items
        )
        context.period_breakdown = DayAggregator.aggregate_by_period(context.line_items)
        return True
