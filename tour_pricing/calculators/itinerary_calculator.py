"""Line items for an itinerary priced from nightly room and vehicle rates."""

import inspect
from decimal import Decimal
from typing import Any, Optional

from structlog import get_logger

from tour_pricing.clients.rate_lookup import RateLookup
from tour_pricing.config import settings
from tour_pricing.errors import RateNotFoundError
from tour_pricing.models.catalog import TransportPricingType
from tour_pricing.models.meal_plan import Meal, covered_meals
from tour_pricing.models.money import money_sum
from tour_pricing.models.request import ItineraryDay, RoomRequirement, TransportRequirement
from tour_pricing.models.result import LineItemKind, NightRate, PricedLineItem, RateFailure

logger = get_logger(__name__)


async def _resolve(value: Any) -> Any:
    """Await the lookup result when the collaborator is asynchronous."""
    if inspect.isawaitable(value):
        return await value
    return value


class ItineraryCalculator:
    """Prices room and transport requirements day by day.

    One calculator is created per computation: it remembers which per-trip
    vehicles were already charged so they are billed only once.
    """

    def __init__(
        self,
        rate_lookup: RateLookup,
        meal_prices: Optional[dict[Meal, Decimal]] = None,
    ):
        """Initialize the calculator.

        Args:
            rate_lookup: Collaborator returning RateLookupRow objects (or awaitables)
            meal_prices: Per-room meal supplements, defaults to PRICING_*_PRICE
        """
        self.rate_lookup = rate_lookup
        self.meal_prices = meal_prices or {
            Meal.BREAKFAST: settings.pricing.breakfast_price,
            Meal.LUNCH: settings.pricing.lunch_price,
            Meal.DINNER: settings.pricing.dinner_price,
        }
        self._charged_trips: set[str] = set()

    async def price_room(self, day: ItineraryDay, room: RoomRequirement) -> PricedLineItem:
        """Price a room requirement for every night the day covers.

        Raises:
            RateNotFoundError: If any night has no rate
        """
        nights: list[NightRate] = []
        for stay_date in day.stay_dates():
            row = await _resolve(
                self.rate_lookup.room_rate(
                    room.room_type_id,
                    room.occupancy_type_id,
                    room.meal_plan_id,
                    stay_date,
                )
            )
            if row is None:
                raise RateNotFoundError(
                    stay_date,
                    room_type_id=room.room_type_id,
                    occupancy_type_id=room.occupancy_type_id,
                    meal_plan_id=room.meal_plan_id,
                )
            nights.append(
                NightRate(
                    stay_date=stay_date,
                    price=row.price,
                    valid_from=row.valid_from,
                    valid_to=row.valid_to,
                    meal_plan_id=row.meal_plan_id,
                )
            )

        label = f"{room.room_type_id} / {room.occupancy_type_id} / {room.meal_plan_id or 'N/A'}"
        rate_meal_plan_id = self._substituted_meal_plan(room, nights)
        if rate_meal_plan_id is not None:
            label = f"{label} (rate: {rate_meal_plan_id})"

        windows = {night.window for night in nights}
        period_from, period_to = windows.pop() if len(windows) == 1 else (None, None)

        return PricedLineItem(
            day_number=day.day_number,
            kind=LineItemKind.ACCOMMODATION,
            label=label,
            quantity=room.quantity,
            unit_price=money_sum(night.price for night in nights),
            nights=day.nights,
            stay_date=day.stay_date,
            period_from=period_from,
            period_to=period_to,
            night_rates=tuple(nights),
            rate_meal_plan_id=rate_meal_plan_id,
        )

    @staticmethod
    def _substituted_meal_plan(room: RoomRequirement, nights: list[NightRate]) -> Optional[str]:
        """Meal plan(s) of fallback rows that differ from the requested one."""
        requested = (room.meal_plan_id or "").strip().lower()
        used = sorted(
            {
                night.meal_plan_id or "N/A"
                for night in nights
                if (night.meal_plan_id or "").strip().lower() != requested
            }
        )
        return ", ".join(used) if used else None

    def price_meals(self, day: ItineraryDay, room: RoomRequirement) -> Optional[PricedLineItem]:
        """Price the day's meals that the room's meal plan does not cover.

        Each uncovered meal is charged per room and per night, e.g. lunch and
        dinner for 2 CP rooms over one night gives (500 + 550) × 2.

        Returns:
            A meal line, or None when every requested meal is covered
        """
        covered = covered_meals(room.meal_plan_id)
        meals = [meal for meal in Meal if meal in day.meals_included and meal not in covered]
        if not meals:
            return None

        per_night = money_sum(self.meal_prices[meal] for meal in meals)
        return PricedLineItem(
            day_number=day.day_number,
            kind=LineItemKind.MEAL,
            label=f"{room.room_type_id} - Meals ({', '.join(meal.value for meal in meals)})",
            quantity=room.quantity,
            unit_price=per_night * day.nights,
            nights=day.nights,
            stay_date=day.stay_date,
        )

    async def price_transport(
        self,
        day: ItineraryDay,
        transport: TransportRequirement,
    ) -> PricedLineItem:
        """Price a vehicle requirement.

        Per-day rates are charged on every day; per-trip rates only on the
        first day the vehicle type is priced.

        Raises:
            RateNotFoundError: If the vehicle has no rate on the day's date
        """
        row = await _resolve(
            self.rate_lookup.vehicle_rate(transport.vehicle_type_id, day.stay_date)
        )
        if row is None:
            raise RateNotFoundError(day.stay_date, vehicle_type_id=transport.vehicle_type_id)

        unit_price = row.price
        label = f"{transport.vehicle_type_id} - Per day"
        if row.pricing_type == TransportPricingType.PER_TRIP:
            trip_key = transport.vehicle_type_id.strip().lower()
            if trip_key in self._charged_trips:
                unit_price = Decimal("0")
                label = f"{transport.vehicle_type_id} - Included in trip"
            else:
                self._charged_trips.add(trip_key)
                label = f"{transport.vehicle_type_id} - One time"

        return PricedLineItem(
            day_number=day.day_number,
            kind=LineItemKind.TRANSPORT,
            label=label,
            quantity=transport.quantity,
            unit_price=unit_price,
            stay_date=day.stay_date,
            period_from=row.valid_from,
            period_to=row.valid_to,
        )

    async def price_day(
        self,
        day: ItineraryDay,
    ) -> tuple[list[PricedLineItem], list[RateFailure]]:
        """Price every requirement of a day.

        A missing rate only drops the affected requirement; it is reported
        as a RateFailure and the remaining requirements are still priced.

        Returns:
            Tuple of (line_items, failures)
        """
        items: list[PricedLineItem] = []
        failures: list[RateFailure] = []

        for room in day.rooms:
            try:
                items.append(await self.price_room(day, room))
            except RateNotFoundError as e:
                failures.append(self._to_failure(day, LineItemKind.ACCOMMODATION, e))

            meal_item = self.price_meals(day, room)
            if meal_item is not None:
                items.append(meal_item)

        for transport in day.transports:
            try:
                items.append(await self.price_transport(day, transport))
            except RateNotFoundError as e:
                failures.append(self._to_failure(day, LineItemKind.TRANSPORT, e))

        return items, failures

    async def price_itinerary(
        self,
        days: list[ItineraryDay],
    ) -> tuple[list[PricedLineItem], list[RateFailure]]:
        """Price all days in ascending day order.

        Returns:
            Tuple of (line_items, failures)
        """
        items: list[PricedLineItem] = []
        failures: list[RateFailure] = []

        for day in sorted(days, key=lambda d: d.day_number):
            day_items, day_failures = await self.price_day(day)
            items.extend(day_items)
            failures.extend(day_failures)

        logger.info(
            "Priced itinerary requirements",
            days=len(days),
            line_items=len(items),
            failures=len(failures),
        )

        return items, failures

    @staticmethod
    def _to_failure(
        day: ItineraryDay,
        kind: LineItemKind,
        error: RateNotFoundError,
    ) -> RateFailure:
        logger.warning(
            "Rate not found, requirement skipped",
            day_number=day.day_number,
            kind=kind.value,
            error=str(error),
        )
        return RateFailure(
            kind=kind,
            day_number=day.day_number,
            stay_date=error.date,
            room_type_id=error.room_type_id,
            occupancy_type_id=error.occupancy_type_id,
            meal_plan_id=error.meal_plan_id,
            vehicle_type_id=error.vehicle_type_id,
            message=str(error),
        )
