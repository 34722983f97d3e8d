"""Dependency container wiring for the application."""

import threading
from collections.abc import Awaitable, Callable
from dataclasses import dataclass

from supabase import create_client

from nutrisnap.adapters.fdc_client import HttpxFdcClient
from nutrisnap.adapters.gemini_vision_client import GeminiVisionClient
from nutrisnap.adapters.openai_vision_client import OpenAIVisionClient
from nutrisnap.adapters.supabase_nutrition_log_repository import (
    SupabaseNutritionLogRepository,
)
from nutrisnap.adapters.telegram_client import HttpxTelegramClient, TelegramClient
from nutrisnap.adapters.telegram_file_client import HttpxTelegramFileClient
from nutrisnap.config import Settings
from nutrisnap.services.analysis import FoodAnalysisService
from nutrisnap.services.bot import TelegramBot
from nutrisnap.services.logs import NutritionLogService
from nutrisnap.services.nutrition import NutritionService
from nutrisnap.services.vision import VisionClient, VisionService


@dataclass
class AppContainer:
    """Holds application-wide dependencies."""

    settings: Settings
    analysis_service: FoodAnalysisService
    log_service: NutritionLogService
    telegram_client: TelegramClient | None
    telegram_bot: TelegramBot | None
    close_resources: Callable[[], Awaitable[None]]


_container: AppContainer | None = None
_container_lock = threading.Lock()


def get_container() -> AppContainer:
    """Return the process-wide container, building it on first use."""
    global _container  # noqa: PLW0603
    if _container is None:
        with _container_lock:
            if _container is None:
                _container = build_container()
    return _container


def build_container(settings: Settings | None = None) -> AppContainer:
    """Create the default dependency container."""
    resolved_settings = settings or Settings()
    supabase_client = create_client(
        resolved_settings.supabase_url, resolved_settings.supabase_service_key
    )
    log_service = NutritionLogService(SupabaseNutritionLogRepository(supabase_client))

    fdc_client = (
        HttpxFdcClient.create(
            api_key=resolved_settings.fdc_api_key,
            base_url=resolved_settings.fdc_base_url,
        )
        if resolved_settings.fdc_api_key
        else None
    )
    analysis_service = FoodAnalysisService(
        vision_service=VisionService(client=build_vision_client(resolved_settings)),
        nutrition_service=NutritionService(fdc_client=fdc_client),
    )

    telegram_client: HttpxTelegramClient | None = None
    telegram_file_client: HttpxTelegramFileClient | None = None
    telegram_bot: TelegramBot | None = None
    if resolved_settings.telegram_bot_token:
        telegram_client = HttpxTelegramClient.create(
            resolved_settings.telegram_bot_token
        )
        telegram_file_client = HttpxTelegramFileClient.create(
            resolved_settings.telegram_bot_token
        )
        telegram_bot = TelegramBot(
            telegram_client=telegram_client,
            file_client=telegram_file_client,
            analysis_service=analysis_service,
            log_service=log_service,
            timezone=resolved_settings.default_timezone,
            app_url=resolved_settings.app_url,
        )

    async def close_resources() -> None:
        if telegram_client is not None:
            await telegram_client.close()
        if telegram_file_client is not None:
            await telegram_file_client.close()
        if fdc_client is not None:
            await fdc_client.close()

    return AppContainer(
        settings=resolved_settings,
        analysis_service=analysis_service,
        log_service=log_service,
        telegram_client=telegram_client,
        telegram_bot=telegram_bot,
        close_resources=close_resources,
    )


def build_vision_client(settings: Settings) -> VisionClient | None:
    """Create the configured vision provider client, if it has a key."""
    api_key = settings.vision_api_key()
    if api_key is None:
        return None
    if settings.vision_provider == "openai":
        return OpenAIVisionClient.create(
            api_key=api_key,
            model=settings.openai_model,
            timeout_seconds=settings.vision_timeout_seconds,
        )
    return GeminiVisionClient.create(
        api_key=api_key,
        model=settings.gemini_model,
        timeout_seconds=settings.vision_timeout_seconds,
    )
