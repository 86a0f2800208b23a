"""Selection of the template price list that applies to a request."""

from typing import Any

from structlog import get_logger

from tour_pricing.errors import AmbiguousPeriodError, NoMatchingPeriodError
from tour_pricing.models.catalog import PriceCatalogEntry
from tour_pricing.models.request import TemplateCriteria

logger = get_logger(__name__)


class PeriodMatcher:
    """Matches template price lists against template criteria."""

    @staticmethod
    def _parse_entries(
        entries: list[PriceCatalogEntry] | list[dict[str, Any]],
    ) -> list[PriceCatalogEntry]:
        return [
            entry if isinstance(entry, PriceCatalogEntry) else PriceCatalogEntry(**entry)
            for entry in entries
        ]

    @staticmethod
    def is_match(entry: PriceCatalogEntry, criteria: TemplateCriteria) -> bool:
        """Check one entry against the criteria.

        An entry matches when it belongs to the template, its window fully
        contains the requested dates (overlap is not enough) and both the
        meal plan and the room-count bucket are equal.
        """
        return (
            entry.template_id == criteria.template_id
            and entry.covers(criteria.date_from, criteria.date_to)
            and entry.meal_plan_id == criteria.meal_plan_id
            and entry.room_count == criteria.room_count
        )

    @staticmethod
    def find_candidates(
        entries: list[PriceCatalogEntry] | list[dict[str, Any]],
        criteria: TemplateCriteria,
    ) -> list[PriceCatalogEntry]:
        """Return every entry satisfying the criteria, in catalog order."""
        return [
            entry
            for entry in PeriodMatcher._parse_entries(entries)
            if PeriodMatcher.is_match(entry, criteria)
        ]

    @staticmethod
    def match(
        entries: list[PriceCatalogEntry] | list[dict[str, Any]],
        criteria: TemplateCriteria,
    ) -> PriceCatalogEntry:
        """Select the single entry that applies to the criteria.

        Args:
            entries: Template price lists from the catalog store
            criteria: Template, date range, meal plan and room count requested

        Returns:
            The uniquely matching entry

        Raises:
            NoMatchingPeriodError: If no entry matches
            AmbiguousPeriodError: If more than one entry matches
        """
        candidates = PeriodMatcher.find_candidates(entries, criteria)

        if not candidates:
            logger.warning(
                "No pricing period matches criteria",
                template_id=criteria.template_id,
                date_from=criteria.date_from.isoformat(),
                date_to=criteria.date_to.isoformat(),
                meal_plan_id=criteria.meal_plan_id,
                room_count=criteria.room_count,
                entries_checked=len(entries),
            )
            raise NoMatchingPeriodError(
                criteria.template_id, criteria.date_from, criteria.date_to
            )

        if len(candidates) > 1:
            conflicting_ids = [entry.id for entry in candidates]
            logger.warning(
                "Multiple pricing periods match criteria",
                template_id=criteria.template_id,
                conflicting_ids=conflicting_ids,
            )
            raise AmbiguousPeriodError(criteria.template_id, conflicting_ids)

        entry = candidates[0]
        logger.info(
            "Matched pricing period",
            template_id=criteria.template_id,
            entry_id=entry.id,
            valid_from=entry.valid_from.isoformat(),
            valid_to=entry.valid_to.isoformat(),
        )
        return entry
