"""Step to price the selected components of the matched template."""

from tour_pricing.calculators import TemplateCalculator
from tour_pricing.services.pipeline import PipelineStep, PricingContext


class PriceTemplateStep(PipelineStep):
    """Expand the selected template components into line items."""

    def __init__(self):
        super().__init__("PriceTemplate")

    def execute(self, context: PricingContext) -> bool:
        if context.matched_entry is None:
            self.logger.error(
                "No matched entry to price",
                computation_id=context.computation_id,
            )
            return False

        context.line_items = TemplateCalculator.price(context.matched_entry, context.selection)

        self.logger.info(
            "Priced template components",
            computation_id=context.computation_id,
            entry_id=context.matched_entry.id,
            components=len(context.line_items),
        )
        return True
