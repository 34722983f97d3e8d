"""Nutrition log persistence and daily summaries."""

from dataclasses import dataclass
from datetime import UTC, datetime, timedelta
from typing import Protocol
from zoneinfo import ZoneInfo

from nutrisnap.domain.analysis import FoodItem, sum_macros
from nutrisnap.domain.logs import (
    MealType,
    NutritionLogRecord,
    NutritionSource,
    TodaySummary,
)


class NutritionLogRepository(Protocol):
    """Persistence interface for nutrition logs."""

    def create_log(  # noqa: PLR0913
        self,
        user_id: str,
        meal_type: MealType,
        source: NutritionSource,
        logged_at: datetime,
        foods: list[FoodItem],
        totals: dict[str, float],
    ) -> str:
        """Create a log row and return its id."""

    def list_logs(
        self, user_id: str, start: datetime, end: datetime
    ) -> list[NutritionLogRecord]:
        """Return logs in ``[start, end)``, newest first."""

    def list_recent_logs(self, user_id: str, limit: int) -> list[NutritionLogRecord]:
        """Return the most recent logs."""


@dataclass
class NutritionLogService:
    """Service that aggregates and stores nutrition logs."""

    repository: NutritionLogRepository

    def save_log(  # noqa: PLR0913
        self,
        user_id: str,
        meal_type: MealType,
        foods: list[FoodItem],
        source: NutritionSource,
        logged_at: datetime | None = None,
    ) -> str:
        """Persist foods with pre-aggregated totals and return the log id."""
        macros = sum_macros(foods)
        totals = {
            "total_calories": macros.calories,
            "total_protein": macros.protein,
            "total_carbs": macros.carbs,
            "total_fats": macros.fats,
        }
        return self.repository.create_log(
            user_id=user_id,
            meal_type=meal_type,
            source=source,
            logged_at=logged_at or datetime.now(tz=UTC),
            foods=foods,
            totals=totals,
        )

    def get_today_summary(self, user_id: str, timezone_name: str) -> TodaySummary:
        """Return today's totals in the given timezone."""
        tz = ZoneInfo(timezone_name)
        now = datetime.now(tz=tz)
        start = now.replace(hour=0, minute=0, second=0, microsecond=0)
        end = start + timedelta(days=1)
        logs = self.repository.list_logs(
            user_id, start.astimezone(UTC), end.astimezone(UTC)
        )
        return TodaySummary(
            total_calories=sum(log.total_calories for log in logs),
            total_protein=sum(log.total_protein for log in logs),
            total_carbs=sum(log.total_carbs for log in logs),
            total_fats=sum(log.total_fats for log in logs),
            meal_count=len(logs),
            logs=logs,
        )

    def list_recent(self, user_id: str, limit: int = 10) -> list[NutritionLogRecord]:
        """Return recent logs, newest first."""
        return self.repository.list_recent_logs(user_id, limit)
