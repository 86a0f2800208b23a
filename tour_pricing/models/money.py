"""Decimal money helpers shared by the pricing models."""

from decimal import Decimal
from typing import Annotated, Any, Optional

from pydantic import BeforeValidator, PlainSerializer

from tour_pricing.config import settings

ZERO = Decimal("0")


def reject_float(value: Any) -> Any:
    """Refuse binary floats so amounts keep full fidelity with the catalog store."""
    if isinstance(value, float):
        raise ValueError("money values must be decimal strings or integers, not floats")
    return value


def quantize(value: Decimal, places: Optional[int] = None) -> Decimal:
    """Round an amount for presentation."""
    places = settings.pricing.money_places if places is None else places
    exponent = Decimal(1).scaleb(-places)
    return value.quantize(exponent, rounding=settings.pricing.rounding_mode)


def to_str(value: Decimal, places: Optional[int] = None) -> str:
    """Render an amount as a rounded decimal string."""
    return str(quantize(value, places))


def money_sum(values) -> Decimal:
    """Sum amounts exactly, starting from a Decimal zero."""
    return sum(values, ZERO)


Money = Annotated[
    Decimal,
    BeforeValidator(reject_float),
    PlainSerializer(lambda value: str(value), return_type=str, when_used="json"),
]
