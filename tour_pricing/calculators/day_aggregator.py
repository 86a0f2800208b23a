"""Grouping of priced line items by itinerary day and by rate period."""

from datetime import date, timedelta
from decimal import Decimal
from typing import Optional

from structlog import get_logger

from tour_pricing.models.money import ZERO, money_sum
from tour_pricing.models.result import DaySummary, LineItemKind, PeriodSummary, PricedLineItem

logger = get_logger(__name__)

Window = tuple[Optional[date], Optional[date]]


class DayAggregator:
    """Aggregates line items into day and period summaries."""

    @staticmethod
    def aggregate_by_day(
        line_items: list[PricedLineItem],
    ) -> tuple[list[DaySummary], list[PricedLineItem]]:
        """Group line items by day number.

        Days are returned in ascending numeric order with their items kept
        in input order. Items without a day number (template pricing) are
        not grouped and are returned separately.

        Args:
            line_items: Priced line items from either calculator

        Returns:
            Tuple of (day_summaries, template_items)
        """
        groups: dict[int, list[PricedLineItem]] = {}
        template_items: list[PricedLineItem] = []

        for item in line_items:
            if item.day_number is None:
                template_items.append(item)
                continue
            groups.setdefault(item.day_number, []).append(item)

        summaries = [
            DaySummary(day_number=day_number, line_items=tuple(groups[day_number]))
            for day_number in sorted(groups)
        ]

        logger.debug(
            "Aggregated line items by day",
            days=len(summaries),
            template_items=len(template_items),
        )

        return summaries, template_items

    @staticmethod
    def aggregate_by_period(line_items: list[PricedLineItem]) -> list[PeriodSummary]:
        """Group accommodation items by the rate window that priced them.

        Reproduces the seasonal (period-wise) breakdown of a quotation. Each
        night of a room line counts towards the window of the rate that
        priced it, so a stay crossing seasons is split between them.
        Windows are ordered by start date; rows without a window sort last.
        """
        totals: dict[Window, list[Decimal]] = {}
        nights: dict[Window, set[date]] = {}

        for item in line_items:
            if item.kind != LineItemKind.ACCOMMODATION:
                continue
            for window, night, amount in DayAggregator._night_shares(item):
                totals.setdefault(window, []).append(amount)
                night_dates = nights.setdefault(window, set())
                if night is not None:
                    night_dates.add(night)

        def _order(key: Window) -> tuple:
            start, end = key
            return (start is None, start or date.max, end or date.max)

        return [
            PeriodSummary(
                valid_from=key[0],
                valid_to=key[1],
                nights=len(nights[key]),
                total=money_sum(totals[key]),
            )
            for key in sorted(totals, key=_order)
        ]

    @staticmethod
    def _night_shares(item: PricedLineItem) -> list[tuple[Window, Optional[date], Decimal]]:
        """Split a room line into (window, night, amount) per night."""
        scale = item.multiplier * item.quantity
        if item.night_rates:
            return [
                (night.window, night.stay_date, night.price * scale)
                for night in item.night_rates
            ]

        window = (item.period_from, item.period_to)
        if item.stay_date is None:
            return [(window, None, item.total_price)]
        shares = [
            (window, item.stay_date + timedelta(days=offset), ZERO)
            for offset in range(item.nights)
        ]
        shares[0] = (window, item.stay_date, item.total_price)
        return shares
