"""Supabase repository for nutrition logs."""

from dataclasses import dataclass
from datetime import UTC, datetime

from supabase import Client

from nutrisnap.domain.analysis import FoodItem
from nutrisnap.domain.logs import MealType, NutritionLogRecord, NutritionSource
from nutrisnap.services.logs import NutritionLogRepository

_COLUMNS = (
    "id, user_id, meal_type, source, logged_at, foods, "
    "total_calories, total_protein, total_carbs, total_fats"
)


@dataclass
class SupabaseNutritionLogRepository(NutritionLogRepository):
    """Supabase implementation for nutrition logs."""

    client: Client

    def create_log(  # noqa: PLR0913
        self,
        user_id: str,
        meal_type: MealType,
        source: NutritionSource,
        logged_at: datetime,
        foods: list[FoodItem],
        totals: dict[str, float],
    ) -> str:
        """Insert a log row and return its id."""
        response = (
            self.client.table("nutrition_logs")
            .insert(
                {
                    "user_id": user_id,
                    "meal_type": meal_type.value,
                    "source": source.value,
                    "logged_at": logged_at.isoformat(),
                    "foods": [food.model_dump() for food in foods],
                    **totals,
                }
            )
            .execute()
        )
        if not response.data:
            raise RuntimeError("Failed to create nutrition log")
        return str(response.data[0]["id"])

    def list_logs(
        self, user_id: str, start: datetime, end: datetime
    ) -> list[NutritionLogRecord]:
        """Return logs in the time range, newest first."""
        response = (
            self.client.table("nutrition_logs")
            .select(_COLUMNS)
            .eq("user_id", user_id)
            .gte("logged_at", start.isoformat())
            .lt("logged_at", end.isoformat())
            .order("logged_at", desc=True)
            .execute()
        )
        return [_parse_row(row) for row in response.data or []]

    def list_recent_logs(self, user_id: str, limit: int) -> list[NutritionLogRecord]:
        """Return recent logs for a user."""
        response = (
            self.client.table("nutrition_logs")
            .select(_COLUMNS)
            .eq("user_id", user_id)
            .order("logged_at", desc=True)
            .limit(limit)
            .execute()
        )
        return [_parse_row(row) for row in response.data or []]


def _parse_row(row: dict[str, object]) -> NutritionLogRecord:
    logged_at_raw = row.get("logged_at")
    logged_at = (
        datetime.fromisoformat(logged_at_raw)
        if isinstance(logged_at_raw, str) and logged_at_raw
        else datetime.min.replace(tzinfo=UTC)
    )
    foods_raw = row.get("foods") or []
    return NutritionLogRecord(
        id=str(row.get("id", "")),
        user_id=str(row.get("user_id", "")),
        meal_type=MealType(row.get("meal_type", MealType.SNACK.value)),
        source=NutritionSource(row.get("source", NutritionSource.MANUAL.value)),
        logged_at=logged_at,
        foods=[FoodItem.model_validate(food) for food in foods_raw],
        total_calories=float(row.get("total_calories") or 0.0),
        total_protein=float(row.get("total_protein") or 0.0),
        total_carbs=float(row.get("total_carbs") or 0.0),
        total_fats=float(row.get("total_fats") or 0.0),
    )
