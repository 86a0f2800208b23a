"""Pydantic models for computed pricing output."""

from datetime import date
from decimal import Decimal
from enum import Enum
from typing import Any, Optional

from pydantic import BaseModel, ConfigDict, Field, computed_field

from tour_pricing.models.money import Money, money_sum, to_str


class LineItemKind(str, Enum):
    """What a priced line item pays for."""

    ACCOMMODATION = "accommodation"
    MEAL = "meal"
    TRANSPORT = "transport"
    TEMPLATE = "template"


# Kinds counted in the accommodation subtotal
ACCOMMODATION_KINDS = (LineItemKind.ACCOMMODATION, LineItemKind.MEAL)


def _iso(value: Optional[date]) -> Optional[str]:
    return value.isoformat() if value else None


class NightRate(BaseModel):
    """Nightly rate used for one night of a room line, with its window."""

    stay_date: date
    price: Money = Field(ge=0)
    valid_from: Optional[date] = None
    valid_to: Optional[date] = None
    meal_plan_id: Optional[str] = None

    model_config = ConfigDict(frozen=True)

    @property
    def window(self) -> tuple[Optional[date], Optional[date]]:
        return (self.valid_from, self.valid_to)


class PricedLineItem(BaseModel):
    """One priced line of a quotation.

    ``total_price`` is always derived as unit_price × multiplier × quantity;
    for room lines ``unit_price`` is the sum of the nightly rates, each of
    which is kept in ``night_rates``.
    """

    day_number: Optional[int] = Field(None, description="None for template-level items")
    kind: LineItemKind
    label: str
    quantity: int = Field(ge=1)
    unit_price: Money = Field(ge=0)
    multiplier: int = Field(default=1, ge=1)
    nights: int = Field(default=1, ge=1)
    stay_date: Optional[date] = None
    # Rate window the price came from, unset when the nights span several windows
    period_from: Optional[date] = None
    period_to: Optional[date] = None
    night_rates: tuple[NightRate, ...] = ()
    # Meal plan of the rate rows actually used, when it differs from the request
    rate_meal_plan_id: Optional[str] = None

    model_config = ConfigDict(frozen=True)

    @computed_field
    @property
    def total_price(self) -> Decimal:
        return self.unit_price * self.multiplier * self.quantity

    def to_dict(self, places: Optional[int] = None) -> dict[str, Any]:
        """Serialize the line item with rounded decimal strings."""
        data = {
            "day_number": self.day_number,
            "kind": self.kind.value,
            "label": self.label,
            "quantity": self.quantity,
            "unit_price": to_str(self.unit_price, places),
            "multiplier": self.multiplier,
            "nights": self.nights,
            "date": _iso(self.stay_date),
            "period_from": _iso(self.period_from),
            "period_to": _iso(self.period_to),
            "total_price": to_str(self.total_price, places),
        }
        if self.night_rates:
            data["night_rates"] = [
                {
                    "date": night.stay_date.isoformat(),
                    "price": to_str(night.price, places),
                    "period_from": _iso(night.valid_from),
                    "period_to": _iso(night.valid_to),
                }
                for night in self.night_rates
            ]
        if self.rate_meal_plan_id is not None:
            data["rate_meal_plan_id"] = self.rate_meal_plan_id
        return data


class DaySummary(BaseModel):
    """Line items and totals of one itinerary day."""

    day_number: int
    line_items: tuple[PricedLineItem, ...] = ()

    model_config = ConfigDict(frozen=True)

    @computed_field
    @property
    def day_total(self) -> Decimal:
        return money_sum(item.total_price for item in self.line_items)

    @computed_field
    @property
    def accommodation_total(self) -> Decimal:
        """Room and meal lines of the day."""
        return money_sum(
            item.total_price
            for item in self.line_items
            if item.kind in ACCOMMODATION_KINDS
        )

    @computed_field
    @property
    def meal_total(self) -> Decimal:
        return money_sum(
            item.total_price
            for item in self.line_items
            if item.kind == LineItemKind.MEAL
        )

    @computed_field
    @property
    def transport_total(self) -> Decimal:
        return money_sum(
            item.total_price
            for item in self.line_items
            if item.kind == LineItemKind.TRANSPORT
        )

    def to_dict(self, places: Optional[int] = None) -> dict[str, Any]:
        return {
            "day_number": self.day_number,
            "line_items": [item.to_dict(places) for item in self.line_items],
            "accommodation_total": to_str(self.accommodation_total, places),
            "meal_total": to_str(self.meal_total, places),
            "transport_total": to_str(self.transport_total, places),
            "day_total": to_str(self.day_total, places),
        }


class PeriodSummary(BaseModel):
    """Accommodation cost grouped by the seasonal rate window that priced it."""

    valid_from: Optional[date] = None
    valid_to: Optional[date] = None
    nights: int = 0
    total: Money = Decimal("0")

    model_config = ConfigDict(frozen=True)

    @property
    def label(self) -> str:
        start = _iso(self.valid_from) or "open"
        end = _iso(self.valid_to) or "open"
        suffix = "s" if self.nights != 1 else ""
        return f"{start} to {end} ({self.nights} night{suffix})"

    def to_dict(self, places: Optional[int] = None) -> dict[str, Any]:
        return {
            "label": self.label,
            "valid_from": _iso(self.valid_from),
            "valid_to": _iso(self.valid_to),
            "nights": self.nights,
            "total": to_str(self.total, places),
        }


class AppliedMarkup(BaseModel):
    """Markup percentage and the amount it added."""

    percentage: Money
    amount: Money

    model_config = ConfigDict(frozen=True)


class RateFailure(BaseModel):
    """A requirement that could not be priced because its rate is missing."""

    kind: LineItemKind
    day_number: int
    stay_date: date
    room_type_id: Optional[str] = None
    occupancy_type_id: Optional[str] = None
    meal_plan_id: Optional[str] = None
    vehicle_type_id: Optional[str] = None
    message: str = ""

    model_config = ConfigDict(frozen=True)

    def lookup_key(self) -> tuple:
        """The tuple that was looked up."""
        if self.kind == LineItemKind.TRANSPORT:
            return (self.vehicle_type_id, self.stay_date)
        return (self.room_type_id, self.occupancy_type_id, self.meal_plan_id, self.stay_date)


class PricingResult(BaseModel):
    """Final pricing breakdown handed back to the caller.

    Template computations leave ``day_breakdown`` empty and report their
    items in ``template_items``; those count towards the accommodation
    subtotal. Meal supplements are part of the accommodation subtotal and
    are also reported on their own in ``meal_subtotal``.
    """

    accommodation_subtotal: Money
    meal_subtotal: Money = Decimal("0")
    transport_subtotal: Money
    base_total: Money
    total_cost: Money
    day_breakdown: tuple[DaySummary, ...] = ()
    template_items: tuple[PricedLineItem, ...] = ()
    applied_markup: Optional[AppliedMarkup] = None
    failures: tuple[RateFailure, ...] = ()
    period_breakdown: tuple[PeriodSummary, ...] = ()

    model_config = ConfigDict(frozen=True)

    @property
    def is_complete(self) -> bool:
        """True when every requirement was priced."""
        return len(self.failures) == 0

    def to_dict(self, places: Optional[int] = None) -> dict[str, Any]:
        """Serialize the result to plain types, rounding amounts once."""
        markup = None
        if self.applied_markup is not None:
            markup = {
                "percentage": str(self.applied_markup.percentage),
                "amount": to_str(self.applied_markup.amount, places),
            }

        return {
            "total_cost": to_str(self.total_cost, places),
            "base_total": to_str(self.base_total, places),
            "accommodation_subtotal": to_str(self.accommodation_subtotal, places),
            "meal_subtotal": to_str(self.meal_subtotal, places),
            "transport_subtotal": to_str(self.transport_subtotal, places),
            "day_breakdown": [day.to_dict(places) for day in self.day_breakdown],
            "template_items": [item.to_dict(places) for item in self.template_items],
            "applied_markup": markup,
            "period_breakdown": [period.to_dict(places) for period in self.period_breakdown],
            "failures": [failure.model_dump(mode="json") for failure in self.failures],
            "is_complete": self.is_complete,
        }
