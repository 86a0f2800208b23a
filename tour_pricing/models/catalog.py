"""Pydantic models for price catalog records supplied by the catalog store."""

from datetime import date
from enum import Enum
from typing import Optional

from pydantic import BaseModel, ConfigDict, Field, model_validator

from tour_pricing.models.money import Money


class PriceComponent(BaseModel):
    """One priced line within a template price list.

    The base price is per person; the occupancy multiplier derived from
    the attribute name scales it to a per-room price.
    """

    id: Optional[str] = Field(None, description="Component id, defaults to the attribute name")
    attribute_name: str = Field(alias="attributeName", description="e.g. 'Double Occupancy'")
    base_price: Money = Field(alias="basePrice", ge=0, description="Per-person price")
    description: Optional[str] = None

    model_config = ConfigDict(frozen=True, populate_by_name=True)

    @property
    def component_id(self) -> str:
        """Identifier used by selections."""
        return self.id or self.attribute_name


class PriceCatalogEntry(BaseModel):
    """Template price list valid for an inclusive date window."""

    id: str
    template_id: str = Field(alias="templateId")
    valid_from: date = Field(alias="validFrom")
    valid_to: date = Field(alias="validTo")
    meal_plan_id: str = Field(alias="mealPlanId")
    room_count: int = Field(alias="roomCount", ge=1, description="Room-count bucket priced")
    components: list[PriceComponent] = Field(default_factory=list)

    model_config = ConfigDict(frozen=True, populate_by_name=True)

    @model_validator(mode="after")
    def _check_window(self) -> "PriceCatalogEntry":
        if self.valid_from > self.valid_to:
            raise ValueError(
                f"validFrom {self.valid_from} is after validTo {self.valid_to}"
            )
        return self

    def covers(self, date_from: date, date_to: date) -> bool:
        """Check whether the window fully contains the requested range."""
        return self.valid_from <= date_from and date_to <= self.valid_to

    def get_component(self, component_id: str) -> Optional[PriceComponent]:
        """Find a component by id."""
        for component in self.components:
            if component.component_id == component_id:
                return component
        return None


class TransportPricingType(str, Enum):
    """How a vehicle rate is charged."""

    PER_DAY = "PerDay"
    PER_TRIP = "PerTrip"


class RateLookupRow(BaseModel):
    """Nightly room rate or unit vehicle rate returned by the rate lookup.

    Room rows carry room_type_id/occupancy_type_id/meal_plan_id; vehicle rows
    carry vehicle_type_id and a pricing type.
    """

    price: Money = Field(ge=0)
    room_type_id: Optional[str] = Field(None, alias="roomTypeId")
    occupancy_type_id: Optional[str] = Field(None, alias="occupancyTypeId")
    meal_plan_id: Optional[str] = Field(None, alias="mealPlanId")
    vehicle_type_id: Optional[str] = Field(None, alias="vehicleTypeId")
    pricing_type: TransportPricingType = Field(
        default=TransportPricingType.PER_DAY, alias="pricingType"
    )
    valid_from: Optional[date] = Field(None, alias="validFrom")
    valid_to: Optional[date] = Field(None, alias="validTo")

    model_config = ConfigDict(frozen=True, populate_by_name=True)

    @model_validator(mode="after")
    def _check_window(self) -> "RateLookupRow":
        if self.valid_from and self.valid_to and self.valid_from > self.valid_to:
            raise ValueError(
                f"validFrom {self.valid_from} is after validTo {self.valid_to}"
            )
        return self

    @property
    def is_vehicle_rate(self) -> bool:
        return self.vehicle_type_id is not None

    def applies_on(self, stay_date: date) -> bool:
        """Check whether the row's validity window includes a date."""
        if self.valid_from and stay_date < self.valid_from:
            return False
        if self.valid_to and stay_date > self.valid_to:
            return False
        return True
