"""Shared test fixtures."""

import json
from dataclasses import dataclass, field
from datetime import datetime
from uuid import uuid4

import pytest

from nutrisnap.adapters.fdc_client import FdcClient
from nutrisnap.adapters.telegram_client import TelegramClient
from nutrisnap.adapters.telegram_file_client import TelegramFile, TelegramFileClient
from nutrisnap.config import Settings
from nutrisnap.containers import AppContainer
from nutrisnap.domain.analysis import FoodItem
from nutrisnap.domain.logs import MealType, NutritionLogRecord, NutritionSource
from nutrisnap.services.analysis import FoodAnalysisService
from nutrisnap.services.bot import TelegramBot
from nutrisnap.services.logs import NutritionLogRepository, NutritionLogService
from nutrisnap.services.nutrition import NutritionService
from nutrisnap.services.vision import (
    GenerationParams,
    InlineImage,
    VisionClient,
    VisionService,
)

PNG_BYTES = b"\x89PNG\r\n\x1a\n" + b"fake-png-body"


def foods_payload(*foods: dict[str, object]) -> str:
    """Serialize foods the way the vision model answers."""
    return json.dumps({"foods": list(foods)})


APPLE = {
    "name": "Apple",
    "quantity": "1 medium",
    "calories": 95.27,
    "protein": 0.49,
    "carbs": 25.13,
    "fats": 0.31,
}
RICE = {
    "name": "White rice",
    "quantity": "1 cup",
    "calories": 205,
    "protein": 4.3,
    "carbs": 44.5,
    "fats": 0.4,
}


@dataclass
class FakeVisionClient(VisionClient):
    """Fake vision client returning fixed text or raising an error."""

    text: str | None = field(default_factory=lambda: foods_payload(APPLE))
    error: Exception | None = None
    calls: list[dict[str, object]] = field(default_factory=list)

    async def generate(
        self, *, prompt: str, image: InlineImage, params: GenerationParams
    ) -> str | None:
        self.calls.append({"prompt": prompt, "image": image, "params": params})
        if self.error is not None:
            raise self.error
        return self.text


@dataclass
class FakeFdcClient(FdcClient):
    """Fake FDC client keyed by query text."""

    foods: dict[str, dict[str, object]] = field(default_factory=dict)
    failing_queries: set[str] = field(default_factory=set)
    search_calls: list[dict[str, object]] = field(default_factory=list)

    async def search_foods(
        self,
        query: str,
        page_size: int = 10,
        data_types: list[str] | None = None,
    ) -> dict[str, object]:
        self.search_calls.append(
            {"query": query, "page_size": page_size, "data_types": data_types}
        )
        if query in self.failing_queries:
            raise RuntimeError(f"FDC search failed for {query}")
        food = self.foods.get(query)
        if food is None:
            return {"foods": []}
        return {"foods": [{"fdcId": food["fdcId"], "description": food["description"]}]}

    async def get_food(self, fdc_id: int) -> dict[str, object]:
        for food in self.foods.values():
            if food["fdcId"] == fdc_id:
                return food
        raise RuntimeError(f"Unknown fdc id {fdc_id}")


def fdc_food(
    fdc_id: int, description: str, nutrients: dict[str, float]
) -> dict[str, object]:
    """Build an FDC detail payload from nutrient names to values."""
    return {
        "fdcId": fdc_id,
        "description": description,
        "foodNutrients": [
            {"nutrientName": name, "unitName": "G", "value": value}
            for name, value in nutrients.items()
        ],
    }


@dataclass
class FakeTelegramClient(TelegramClient):
    """Fake Telegram client that records messages."""

    messages: list[tuple[int, str]] = field(default_factory=list)
    edits: list[tuple[int, int, str]] = field(default_factory=list)
    reply_markups: list[dict | None] = field(default_factory=list)
    commands: list[dict[str, str]] | None = None
    menu_button: dict[str, object] | None = None
    next_message_id: int = 1000

    async def send_message(
        self,
        chat_id: int,
        text: str,
        reply_markup: dict | None = None,
        parse_mode: str | None = None,
    ) -> int | None:
        self.messages.append((chat_id, text))
        self.reply_markups.append(reply_markup)
        self.next_message_id += 1
        return self.next_message_id

    async def edit_message_text(
        self,
        chat_id: int,
        message_id: int,
        text: str,
        parse_mode: str | None = None,
    ) -> None:
        self.edits.append((chat_id, message_id, text))

    async def set_my_commands(self, commands: list[dict[str, str]]) -> None:
        self.commands = commands

    async def set_chat_menu_button(
        self, menu_button: dict[str, object] | None = None
    ) -> None:
        self.menu_button = menu_button


@dataclass
class FakeTelegramFileClient(TelegramFileClient):
    """Fake Telegram file client that returns static bytes."""

    content: bytes = PNG_BYTES
    file_path: str = "photos/file_1.png"
    downloaded: list[str] = field(default_factory=list)

    async def download_file(self, file_id: str) -> TelegramFile:
        self.downloaded.append(file_id)
        return TelegramFile(file_path=self.file_path, content=self.content)


@dataclass
class InMemoryNutritionLogRepository(NutritionLogRepository):
    """In-memory nutrition log repository for tests."""

    logs: list[NutritionLogRecord] = field(default_factory=list)

    def create_log(  # noqa: PLR0913
        self,
        user_id: str,
        meal_type: MealType,
        source: NutritionSource,
        logged_at: datetime,
        foods: list[FoodItem],
        totals: dict[str, float],
    ) -> str:
        log_id = str(uuid4())
        self.logs.append(
            NutritionLogRecord(
                id=log_id,
                user_id=user_id,
                meal_type=meal_type,
                source=source,
                logged_at=logged_at,
                foods=foods,
                **totals,
            )
        )
        return log_id

    def list_logs(
        self, user_id: str, start: datetime, end: datetime
    ) -> list[NutritionLogRecord]:
        return sorted(
            (
                log
                for log in self.logs
                if log.user_id == user_id and start <= log.logged_at < end
            ),
            key=lambda log: log.logged_at,
            reverse=True,
        )

    def list_recent_logs(self, user_id: str, limit: int) -> list[NutritionLogRecord]:
        logs = [log for log in self.logs if log.user_id == user_id]
        return sorted(logs, key=lambda log: log.logged_at, reverse=True)[:limit]


@pytest.fixture
def settings() -> Settings:
    return Settings(
        supabase_url="https://example.supabase.co",
        supabase_service_key="header.payload.signature",
        telegram_bot_token="test-token",
        gemini_api_key="gemini-key",
        fdc_api_key="fdc-key",
    )


@pytest.fixture
def vision_client() -> FakeVisionClient:
    return FakeVisionClient()


@pytest.fixture
def fdc_client() -> FakeFdcClient:
    return FakeFdcClient()


@pytest.fixture
def telegram_client() -> FakeTelegramClient:
    return FakeTelegramClient()


@pytest.fixture
def log_repository() -> InMemoryNutritionLogRepository:
    return InMemoryNutritionLogRepository()


@pytest.fixture
def container(
    settings: Settings,
    vision_client: FakeVisionClient,
    fdc_client: FakeFdcClient,
    telegram_client: FakeTelegramClient,
    log_repository: InMemoryNutritionLogRepository,
) -> AppContainer:
    analysis_service = FoodAnalysisService(
        vision_service=VisionService(client=vision_client),
        nutrition_service=NutritionService(fdc_client=fdc_client),
    )
    log_service = NutritionLogService(log_repository)
    telegram_bot = TelegramBot(
        telegram_client=telegram_client,
        file_client=FakeTelegramFileClient(),
        analysis_service=analysis_service,
        log_service=log_service,
        timezone=settings.default_timezone,
        app_url="https://nutrisnap.example",
    )

    async def close_resources() -> None:
        return None

    return AppContainer(
        settings=settings,
        analysis_service=analysis_service,
        log_service=log_service,
        telegram_client=telegram_client,
        telegram_bot=telegram_bot,
        close_resources=close_resources,
    )
