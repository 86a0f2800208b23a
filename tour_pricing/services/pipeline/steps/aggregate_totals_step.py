"""Step to build the final pricing result."""

from tour_pricing.calculators import TotalAggregator
from tour_pricing.services.pipeline import PipelineStep, PricingContext


class AggregateTotalsStep(PipelineStep):
    """Sum subtotals, apply markup and store the PricingResult."""

    def __init__(self):
        super().__init__("AggregateTotals")

    def execute(self, context: PricingContext) -> bool:
        """Build the result.

        Raises:
            InvalidMarkupError: If the markup percentage is negative
        """
        context.result = TotalAggregator.aggregate(
            context.day_summaries,
            context.template_items,
            markup_percent=context.markup_percent,
            failures=context.failures,
            period_breakdown=context.period_breakdown,
        )
        return True
