"""Step to select the template price list for the request."""

from tour_pricing.calculators import PeriodMatcher
from tour_pricing.services.pipeline import PipelineStep, PricingContext


class MatchPeriodStep(PipelineStep):
    """Match the template criteria against the catalog entries."""

    def __init__(self):
        super().__init__("MatchPeriod")

    def execute(self, context: PricingContext) -> bool:
        """Select the unique applicable entry.

        Raises:
            NoMatchingPeriodError: If no entry matches
            AmbiguousPeriodError: If several entries match
        """
        context.matched_entry = PeriodMatcher.match(context.entries, context.criteria)
        return True
