"""Tests for Supabase adapter implementations."""

from dataclasses import dataclass, field
from datetime import UTC, datetime

import pytest

from nutrisnap.adapters.supabase_nutrition_log_repository import (
    SupabaseNutritionLogRepository,
)
from nutrisnap.domain.analysis import FoodItem
from nutrisnap.domain.logs import MealType, NutritionSource


@dataclass
class FakeResponse:
    data: list[dict[str, object]] | None


@dataclass
class FakeTable:
    name: str
    response_queue: dict[str, list[list[dict[str, object]]]] = field(
        default_factory=lambda: {"select": [], "insert": []}
    )
    last_payload: object | None = None
    last_filters: list[tuple[str, object]] = field(default_factory=list)
    last_limit: int | None = None

    def queue(self, action: str, data: list[dict[str, object]]) -> None:
        self.response_queue[action].append(data)

    def select(self, *_args) -> "FakeTable":
        self._action = "select"
        return self

    def insert(self, payload) -> "FakeTable":  # type: ignore[no-untyped-def]
        self._action = "insert"
        self.last_payload = payload
        return self

    def eq(self, column: str, value) -> "FakeTable":  # type: ignore[no-untyped-def]
        self.last_filters.append((column, value))
        return self

    def gte(self, column: str, value) -> "FakeTable":  # type: ignore[no-untyped-def]
        self.last_filters.append((f"{column}>=", value))
        return self

    def lt(self, column: str, value) -> "FakeTable":  # type: ignore[no-untyped-def]
        self.last_filters.append((f"{column}<", value))
        return self

    def order(self, _column: str, desc: bool = False) -> "FakeTable":
        return self

    def limit(self, count: int) -> "FakeTable":
        self.last_limit = count
        return self

    def execute(self) -> FakeResponse:
        action = getattr(self, "_action", "select")
        queue = self.response_queue.get(action, [])
        data = queue.pop(0) if queue else []
        return FakeResponse(data=data)


@dataclass
class FakeSupabaseClient:
    tables: dict[str, FakeTable] = field(default_factory=dict)

    def table(self, name: str) -> FakeTable:
        if name not in self.tables:
            self.tables[name] = FakeTable(name=name)
        return self.tables[name]


APPLE = FoodItem(
    name="Apple", quantity="1 medium", calories=95.3, protein=0.5, carbs=25.1, fats=0.3
)


def _row(**overrides: object) -> dict[str, object]:
    row: dict[str, object] = {
        "id": "log-1",
        "user_id": "42",
        "meal_type": "snack",
        "source": "telegram",
        "logged_at": "2026-10-19T12:30:00+00:00",
        "foods": [APPLE.model_dump()],
        "total_calories": 95.3,
        "total_protein": 0.5,
        "total_carbs": 25.1,
        "total_fats": 0.3,
    }
    row.update(overrides)
    return row


def test_create_log_inserts_foods_and_totals() -> None:
    client = FakeSupabaseClient()
    table = client.table("nutrition_logs")
    table.queue("insert", [{"id": "log-1"}])
    repository = SupabaseNutritionLogRepository(client)

    log_id = repository.create_log(
        user_id="42",
        meal_type=MealType.SNACK,
        source=NutritionSource.TELEGRAM,
        logged_at=datetime(2026, 10, 19, 12, 30, tzinfo=UTC),
        foods=[APPLE],
        totals={
            "total_calories": 95.3,
            "total_protein": 0.5,
            "total_carbs": 25.1,
            "total_fats": 0.3,
        },
    )

    assert log_id == "log-1"
    expected = _row()
    expected.pop("id")
    assert table.last_payload == expected


def test_create_log_raises_when_nothing_returned() -> None:
    client = FakeSupabaseClient()
    repository = SupabaseNutritionLogRepository(client)

    with pytest.raises(RuntimeError):
        repository.create_log(
            user_id="42",
            meal_type=MealType.SNACK,
            source=NutritionSource.TELEGRAM,
            logged_at=datetime.now(tz=UTC),
            foods=[],
            totals={},
        )


def test_list_logs_filters_by_user_and_range() -> None:
    client = FakeSupabaseClient()
    table = client.table("nutrition_logs")
    table.queue("select", [_row()])
    repository = SupabaseNutritionLogRepository(client)
    start = datetime(2026, 10, 19, tzinfo=UTC)
    end = datetime(2026, 10, 20, tzinfo=UTC)

    [log] = repository.list_logs("42", start, end)

    assert ("user_id", "42") in table.last_filters
    assert ("logged_at>=", start.isoformat()) in table.last_filters
    assert ("logged_at<", end.isoformat()) in table.last_filters
    assert log.meal_type is MealType.SNACK
    assert log.source is NutritionSource.TELEGRAM
    assert log.foods == [APPLE]
    assert log.logged_at == datetime(2026, 10, 19, 12, 30, tzinfo=UTC)


def test_list_recent_logs_applies_limit_and_defaults() -> None:
    client = FakeSupabaseClient()
    table = client.table("nutrition_logs")
    table.queue("select", [_row(foods=None, total_fats=None)])
    repository = SupabaseNutritionLogRepository(client)

    [log] = repository.list_recent_logs("42", limit=5)

    assert table.last_limit == 5
    assert log.foods == []
    assert log.total_fats == 0.0
