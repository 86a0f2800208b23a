"""Rate lookup collaborators used by itinerary pricing."""

from datetime import date
from typing import Awaitable, Iterable, Optional, Protocol, Union

from structlog import get_logger

from tour_pricing.config import settings
from tour_pricing.models.catalog import RateLookupRow

logger = get_logger(__name__)

RateResult = Union[Optional[RateLookupRow], Awaitable[Optional[RateLookupRow]]]


class RateLookup(Protocol):
    """Source of nightly room rates and unit vehicle rates.

    Implementations backed by a database or a remote API may return
    awaitables; the itinerary calculator awaits them.
    """

    def room_rate(
        self,
        room_type_id: str,
        occupancy_type_id: str,
        meal_plan_id: Optional[str],
        stay_date: date,
    ) -> RateResult:
        ...

    def vehicle_rate(self, vehicle_type_id: str, stay_date: date) -> RateResult:
        ...


def _same(left: Optional[str], right: Optional[str]) -> bool:
    return (left or "").strip().lower() == (right or "").strip().lower()


def _latest(rows: list[RateLookupRow]) -> Optional[RateLookupRow]:
    """Pick the row whose window starts last; rows without a start rank last."""
    if not rows:
        return None
    return max(rows, key=lambda row: row.valid_from or date.min)


class InMemoryRateLookup:
    """Read-only snapshot of rate rows fetched by the caller.

    Identifiers are compared case-insensitively. When several rows cover a
    date the one with the most recent ``valid_from`` wins.
    """

    def __init__(
        self,
        rows: Iterable[RateLookupRow | dict],
        meal_plan_fallback: Optional[bool] = None,
    ):
        """Initialize the lookup.

        Args:
            rows: Rate rows (models or catalog-store dicts)
            meal_plan_fallback: Use a row with another meal plan when no exact
                meal-plan row exists. Defaults to PRICING_MEAL_PLAN_FALLBACK.
        """
        parsed = tuple(
            row if isinstance(row, RateLookupRow) else RateLookupRow(**row)
            for row in rows
        )
        self._room_rows = tuple(row for row in parsed if not row.is_vehicle_rate)
        self._vehicle_rows = tuple(row for row in parsed if row.is_vehicle_rate)
        if meal_plan_fallback is None:
            meal_plan_fallback = settings.pricing.meal_plan_fallback
        self.meal_plan_fallback = meal_plan_fallback

    def room_rate(
        self,
        room_type_id: str,
        occupancy_type_id: str,
        meal_plan_id: Optional[str],
        stay_date: date,
    ) -> Optional[RateLookupRow]:
        """Find the nightly rate for a room configuration on a date."""
        candidates = [
            row
            for row in self._room_rows
            if _same(row.room_type_id, room_type_id)
            and _same(row.occupancy_type_id, occupancy_type_id)
            and row.applies_on(stay_date)
        ]

        exact = [row for row in candidates if _same(row.meal_plan_id, meal_plan_id)]
        if exact:
            return _latest(exact)

        if self.meal_plan_fallback and candidates:
            logger.debug(
                "Using fallback room rate without exact meal plan match",
                room_type_id=room_type_id,
                occupancy_type_id=occupancy_type_id,
                meal_plan_id=meal_plan_id,
                stay_date=stay_date.isoformat(),
            )
            return _latest(candidates)

        return None

    def vehicle_rate(self, vehicle_type_id: str, stay_date: date) -> Optional[RateLookupRow]:
        """Find the unit rate for a vehicle type on a date."""
        return _latest(
            [
                row
                for row in self._vehicle_rows
                if _same(row.vehicle_type_id, vehicle_type_id) and row.applies_on(stay_date)
            ]
        )
