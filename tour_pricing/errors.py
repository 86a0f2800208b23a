"""Typed errors raised by the pricing engine.

Every error carries an ``ErrorKind`` so callers can branch on the kind
instead of on the exception class.
"""

from datetime import date
from enum import Enum
from typing import Optional


class ErrorKind(str, Enum):
    """Failure kinds surfaced by the pricing engine."""

    NO_MATCHING_PERIOD = "NoMatchingPeriod"
    AMBIGUOUS_PERIOD = "AmbiguousPeriod"
    EMPTY_SELECTION = "EmptySelection"
    UNKNOWN_COMPONENT = "UnknownComponent"
    RATE_NOT_FOUND = "RateNotFound"
    INVALID_MARKUP = "InvalidMarkup"


class PricingError(Exception):
    """Base exception for pricing engine errors."""

    kind: ErrorKind

    def to_dict(self) -> dict:
        """Serialize the error for a response payload."""
        return {"kind": self.kind.value, "message": str(self)}


class NoMatchingPeriodError(PricingError):
    """Raised when no catalog entry satisfies the template criteria."""

    kind = ErrorKind.NO_MATCHING_PERIOD

    def __init__(self, template_id: str, date_from: date, date_to: date):
        self.template_id = template_id
        self.date_from = date_from
        self.date_to = date_to
        super().__init__(
            f"No pricing period of template {template_id} covers "
            f"{date_from.isoformat()} to {date_to.isoformat()}"
        )


class AmbiguousPeriodError(PricingError):
    """Raised when more than one catalog entry satisfies the template criteria."""

    kind = ErrorKind.AMBIGUOUS_PERIOD

    def __init__(self, template_id: str, conflicting_ids: list[str]):
        self.template_id = template_id
        self.conflicting_ids = list(conflicting_ids)
        super().__init__(
            f"Multiple pricing periods of template {template_id} match the criteria: "
            f"{', '.join(self.conflicting_ids)}"
        )

    def to_dict(self) -> dict:
        data = super().to_dict()
        data["conflicting_ids"] = self.conflicting_ids
        return data


class EmptySelectionError(PricingError):
    """Raised when template pricing is requested with no selected components."""

    kind = ErrorKind.EMPTY_SELECTION

    def __init__(self, entry_id: str):
        self.entry_id = entry_id
        super().__init__(f"No pricing components selected for entry {entry_id}")


class UnknownComponentError(PricingError):
    """Raised when a selection references components the entry does not own."""

    kind = ErrorKind.UNKNOWN_COMPONENT

    def __init__(self, entry_id: str, component_ids: list[str]):
        self.entry_id = entry_id
        self.component_ids = list(component_ids)
        super().__init__(
            f"Entry {entry_id} has no components {', '.join(self.component_ids)}"
        )


class RateNotFoundError(PricingError):
    """Raised when the rate lookup has no rate for a room or vehicle tuple.

    Room misses set the room fields; vehicle misses set ``vehicle_type_id``.
    """

    kind = ErrorKind.RATE_NOT_FOUND

    def __init__(
        self,
        stay_date: date,
        room_type_id: Optional[str] = None,
        occupancy_type_id: Optional[str] = None,
        meal_plan_id: Optional[str] = None,
        vehicle_type_id: Optional[str] = None,
    ):
        self.date = stay_date
        self.room_type_id = room_type_id
        self.occupancy_type_id = occupancy_type_id
        self.meal_plan_id = meal_plan_id
        self.vehicle_type_id = vehicle_type_id
        if vehicle_type_id is not None:
            target = f"vehicle {vehicle_type_id}"
        else:
            target = f"room {room_type_id}/{occupancy_type_id}/{meal_plan_id or '-'}"
        super().__init__(f"No rate for {target} on {stay_date.isoformat()}")


class InvalidMarkupError(PricingError):
    """Raised when a markup percentage is negative or not a decimal number."""

    kind = ErrorKind.INVALID_MARKUP

    def __init__(self, percentage):
        self.percentage = percentage
        super().__init__(f"Markup percentage must be a non-negative decimal, got {percentage!r}")
