"""Models for food image analysis results."""

from dataclasses import dataclass

from pydantic import BaseModel, Field

MACRO_FIELDS = ("calories", "protein", "carbs", "fats")


class FoodItem(BaseModel):
    """Single detected food with estimated macros."""

    name: str
    quantity: str
    calories: float = Field(ge=0.0)
    protein: float = Field(ge=0.0)
    carbs: float = Field(ge=0.0)
    fats: float = Field(ge=0.0)


class MacroTotals(BaseModel):
    """Summed macros across a list of foods."""

    calories: float = 0.0
    protein: float = 0.0
    carbs: float = 0.0
    fats: float = 0.0


class AnalysisResult(BaseModel):
    """Foods detected in one image, in response order."""

    foods: list[FoodItem] = Field(default_factory=list)

    def totals(self) -> MacroTotals:
        """Return the macro sums across all foods."""
        return sum_macros(self.foods)


@dataclass(frozen=True)
class EnrichmentMatch:
    """Nutrition database values for a food name; ``None`` keeps the estimate."""

    name: str | None = None
    calories: float | None = None
    protein: float | None = None
    carbs: float | None = None
    fats: float | None = None

    def is_empty(self) -> bool:
        """Return true when no macro value was found."""
        return all(getattr(self, field) is None for field in MACRO_FIELDS)

    def apply(self, item: FoodItem) -> FoodItem:
        """Return a validated copy with the matched macros, clamped at zero."""
        updates = {
            field: max(0.0, getattr(self, field))
            for field in MACRO_FIELDS
            if getattr(self, field) is not None
        }
        if not updates:
            return item
        return FoodItem.model_validate({**item.model_dump(), **updates})


def sum_macros(foods: list[FoodItem]) -> MacroTotals:
    """Sum each macro across the given foods."""
    totals = MacroTotals()
    for food in foods:
        totals = MacroTotals(
            calories=totals.calories + food.calories,
            protein=totals.protein + food.protein,
            carbs=totals.carbs + food.carbs,
            fats=totals.fats + food.fats,
        )
    return totals
