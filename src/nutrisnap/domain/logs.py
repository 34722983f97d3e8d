"""Domain models for nutrition logs."""

from dataclasses import dataclass, field
from datetime import datetime
from enum import Enum

from nutrisnap.domain.analysis import FoodItem


class MealType(str, Enum):
    """Meal slot a log belongs to."""

    BREAKFAST = "breakfast"
    LUNCH = "lunch"
    DINNER = "dinner"
    SNACK = "snack"


class NutritionSource(str, Enum):
    """Where a log entry came from."""

    MANUAL = "manual"
    CAMERA = "camera"
    TELEGRAM = "telegram"


@dataclass(frozen=True)
class NutritionLogRecord:
    """Stored nutrition log with pre-aggregated totals."""

    id: str
    user_id: str
    meal_type: MealType
    source: NutritionSource
    logged_at: datetime
    foods: list[FoodItem]
    total_calories: float
    total_protein: float
    total_carbs: float
    total_fats: float


@dataclass(frozen=True)
class TodaySummary:
    """Totals across today's logs."""

    total_calories: float = 0.0
    total_protein: float = 0.0
    total_carbs: float = 0.0
    total_fats: float = 0.0
    meal_count: int = 0
    logs: list[NutritionLogRecord] = field(default_factory=list)
