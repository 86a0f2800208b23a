"""Line items for a matched template price list."""

from structlog import get_logger

from tour_pricing.errors import EmptySelectionError, UnknownComponentError
from tour_pricing.models.catalog import PriceCatalogEntry
from tour_pricing.models.occupancy import resolve_multiplier
from tour_pricing.models.request import ComponentSelection
from tour_pricing.models.result import LineItemKind, PricedLineItem

logger = get_logger(__name__)


class TemplateCalculator:
    """Expands selected template components into priced line items."""

    @staticmethod
    def price(
        entry: PriceCatalogEntry,
        selection: ComponentSelection,
    ) -> list[PricedLineItem]:
        """Price the selected components of an entry.

        Each line is base_price × occupancy multiplier × room quantity,
        e.g. 1000 for "Double Occupancy" in 3 rooms gives 6000.

        Args:
            entry: The matched template price list
            selection: Chosen component ids with their room quantities

        Returns:
            One line item per selected component, in selection order

        Raises:
            EmptySelectionError: If no component is selected
            UnknownComponentError: If a selected id is not part of the entry
        """
        if selection.is_empty():
            raise EmptySelectionError(entry.id)

        unknown = [
            selected.component_id
            for selected in selection.components
            if entry.get_component(selected.component_id) is None
        ]
        if unknown:
            raise UnknownComponentError(entry.id, unknown)

        items = []
        for selected in selection.components:
            component = entry.get_component(selected.component_id)
            multiplier = resolve_multiplier(component.attribute_name)

            item = PricedLineItem(
                day_number=None,
                kind=LineItemKind.TEMPLATE,
                label=component.attribute_name,
                quantity=selected.quantity,
                unit_price=component.base_price,
                multiplier=multiplier,
                period_from=entry.valid_from,
                period_to=entry.valid_to,
            )
            logger.debug(
                "Priced template component",
                entry_id=entry.id,
                component=component.attribute_name,
                base_price=str(component.base_price),
                multiplier=multiplier,
                rooms=selected.quantity,
                total_price=str(item.total_price),
            )
            items.append(item)

        return items
