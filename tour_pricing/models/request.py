"""Pydantic models for pricing requests collected by the quotation form."""

from datetime import date, timedelta
from typing import Any, Optional

from pydantic import BaseModel, ConfigDict, Field, field_validator, model_validator

from tour_pricing.models.catalog import PriceCatalogEntry
from tour_pricing.models.meal_plan import Meal


class RoomRequirement(BaseModel):
    """Rooms needed on one itinerary day."""

    room_type_id: str = Field(alias="roomTypeId")
    occupancy_type_id: str = Field(alias="occupancyTypeId")
    meal_plan_id: Optional[str] = Field(None, alias="mealPlanId")
    quantity: int = Field(default=1, ge=1)
    day_number: int = Field(alias="dayNumber", ge=1)

    model_config = ConfigDict(frozen=True, populate_by_name=True)


class TransportRequirement(BaseModel):
    """Vehicles needed on one itinerary day."""

    vehicle_type_id: str = Field(alias="vehicleTypeId")
    quantity: int = Field(default=1, ge=1)
    day_number: int = Field(alias="dayNumber", ge=1)

    model_config = ConfigDict(frozen=True, populate_by_name=True)


class ItineraryDay(BaseModel):
    """One day of an itinerary with its room and vehicle needs.

    ``stay_date`` is the calendar date of the first night; a day may cover
    several consecutive nights.
    """

    day_number: int = Field(alias="dayNumber", ge=1)
    stay_date: date = Field(alias="date")
    nights: int = Field(default=1, ge=1)
    rooms: list[RoomRequirement] = Field(default_factory=list, alias="roomAllocations")
    transports: list[TransportRequirement] = Field(
        default_factory=list, alias="transportDetails"
    )
    meals_included: list[Meal] = Field(default_factory=list, alias="mealsIncluded")

    model_config = ConfigDict(frozen=True, populate_by_name=True)

    @field_validator("meals_included", mode="before")
    @classmethod
    def _normalize_meals(cls, value: Any) -> Any:
        if isinstance(value, list):
            return [item.strip().title() if isinstance(item, str) else item for item in value]
        return value

    @model_validator(mode="after")
    def _check_day_numbers(self) -> "ItineraryDay":
        for requirement in [*self.rooms, *self.transports]:
            if requirement.day_number != self.day_number:
                raise ValueError(
                    f"Requirement for day {requirement.day_number} "
                    f"listed under day {self.day_number}"
                )
        return self

    def stay_dates(self) -> list[date]:
        """Calendar dates of every night covered by this day."""
        return [self.stay_date + timedelta(days=offset) for offset in range(self.nights)]


class TemplateCriteria(BaseModel):
    """Criteria used to pick a template price list."""

    template_id: str = Field(alias="templateId")
    date_from: date = Field(alias="dateFrom")
    date_to: date = Field(alias="dateTo")
    meal_plan_id: str = Field(alias="mealPlanId")
    room_count: int = Field(alias="roomCount", ge=1)

    model_config = ConfigDict(frozen=True, populate_by_name=True)

    @model_validator(mode="after")
    def _check_range(self) -> "TemplateCriteria":
        if self.date_from > self.date_to:
            raise ValueError(f"dateFrom {self.date_from} is after dateTo {self.date_to}")
        return self


class SelectedComponent(BaseModel):
    """A component chosen by the user with its room quantity."""

    component_id: str = Field(alias="componentId")
    quantity: int = Field(default=1, ge=1)

    model_config = ConfigDict(frozen=True, populate_by_name=True)


class ComponentSelection(BaseModel):
    """User-selected components of a matched template price list."""

    components: list[SelectedComponent] = Field(default_factory=list)

    model_config = ConfigDict(frozen=True, populate_by_name=True)

    @classmethod
    def all_of(cls, entry: PriceCatalogEntry, quantity: int = 1) -> "ComponentSelection":
        """Select every component of an entry with the same room quantity."""
        return cls(
            components=[
                SelectedComponent(component_id=component.component_id, quantity=quantity)
                for component in entry.components
            ]
        )

    def is_empty(self) -> bool:
        return len(self.components) == 0
