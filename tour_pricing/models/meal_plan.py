"""Meals covered by a room's meal plan."""

from enum import Enum
from typing import Optional


class Meal(str, Enum):
    """Meals an itinerary day can include."""

    BREAKFAST = "Breakfast"
    LUNCH = "Lunch"
    DINNER = "Dinner"


ALL_MEALS = frozenset(Meal)

# Ordered keyword rules, first match wins; MAP is checked before AP
MEAL_PLAN_RULES: tuple[tuple[tuple[str, ...], frozenset[Meal]], ...] = (
    (("MAP",), frozenset({Meal.BREAKFAST, Meal.DINNER})),
    (("AP",), ALL_MEALS),
    (("CP", "BREAKFAST"), frozenset({Meal.BREAKFAST})),
    (("EP", "NO MEAL"), frozenset()),
)


def covered_meals(meal_plan_id: Optional[str]) -> frozenset[Meal]:
    """Meals already paid for by a meal plan.

    - None or "" → nothing (rooms without a plan are EP)
    - "MAP" → breakfast and dinner
    - "AP" → every meal
    - "CP" → breakfast
    - "EP" → nothing
    - any other plan → every meal, so no supplement is charged for it
    """
    name = (meal_plan_id or "EP").strip().upper()
    for keywords, meals in MEAL_PLAN_RULES:
        if any(keyword in name for keyword in keywords):
            return meals
    return ALL_MEALS
