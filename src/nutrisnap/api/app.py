"""FastAPI application factory."""

import logging
from collections.abc import AsyncIterator
from contextlib import asynccontextmanager
from datetime import UTC, datetime

from fastapi import FastAPI, File, Request, UploadFile
from fastapi.responses import JSONResponse

from nutrisnap.api.telegram_models import TelegramUpdate
from nutrisnap.app_logging import configure_logging
from nutrisnap.containers import AppContainer
from nutrisnap.domain.errors import (
    AnalysisError,
    InvalidImageDataError,
    MissingCredentialError,
    PayloadTooLargeError,
    UnsupportedMediaTypeError,
    UpstreamRateLimitedError,
    UpstreamSafetyBlockedError,
)
from nutrisnap.telegram_commands import CHAT_MENU_BUTTON, telegram_commands

# Checked in order; anything unmatched maps to 500.
_ERROR_STATUS_CODES: tuple[tuple[type[AnalysisError], int], ...] = (
    (UnsupportedMediaTypeError, 400),
    (PayloadTooLargeError, 400),
    (InvalidImageDataError, 400),
    (MissingCredentialError, 500),
    (UpstreamRateLimitedError, 429),
    (UpstreamSafetyBlockedError, 400),
)


def create_app(container: AppContainer) -> FastAPI:
    """Create a FastAPI app configured with dependencies."""
    configure_logging(container.settings.log_level)
    logger = logging.getLogger(__name__)

    @asynccontextmanager
    async def lifespan(app: FastAPI) -> AsyncIterator[None]:
        telegram_client = app.state.container.telegram_client
        if telegram_client is not None:
            try:
                await telegram_client.set_my_commands(telegram_commands())
                await telegram_client.set_chat_menu_button(CHAT_MENU_BUTTON)
            except Exception:
                logger.exception("Failed to sync Telegram bot commands")
        yield
        await app.state.container.close_resources()

    app = FastAPI(lifespan=lifespan)
    app.state.container = container

    @app.get("/health")
    async def health() -> dict[str, str]:
        """Simple health check endpoint."""
        return {"status": "ok"}

    @app.post("/api/nutrition/analyze")
    async def analyze_nutrition(
        request: Request, image: UploadFile | None = File(default=None)
    ) -> JSONResponse:
        """Analyze an uploaded food photo and return detected foods."""
        state_container: AppContainer = request.app.state.container
        if image is None:
            return _error_response("No image file provided", 400)
        try:
            data = await image.read()
            result = await state_container.analysis_service.analyze_image(
                data, image.content_type
            )
        except AnalysisError as exc:
            logger.warning("Food analysis failed: %s: %s", type(exc).__name__, exc)
            return _error_response(str(exc), _status_code_for(exc))
        except Exception as exc:
            logger.exception("Unexpected error analyzing nutrition")
            return _error_response(str(exc) or "Failed to analyze image", 500)
        return JSONResponse(
            {"success": True, "data": result.model_dump(mode="json")}
        )

    @app.post("/telegram/webhook")
    async def telegram_webhook(
        update: TelegramUpdate, request: Request
    ) -> JSONResponse:
        """Handle Telegram webhook updates."""
        state_container: AppContainer = request.app.state.container
        if state_container.telegram_bot is None:
            return _error_response("Telegram bot token is not configured", 500)
        try:
            await state_container.telegram_bot.handle_update(update)
        except Exception:
            logger.exception(
                "Telegram webhook failed", extra={"update_id": update.update_id}
            )
            return _error_response("Internal server error", 500)
        return JSONResponse({"ok": True})

    @app.get("/telegram/webhook")
    async def telegram_webhook_status() -> dict[str, str]:
        """Report that the webhook endpoint is reachable."""
        return {
            "message": "Telegram webhook endpoint is active",
            "timestamp": datetime.now(tz=UTC).isoformat(),
        }

    return app


def _status_code_for(exc: AnalysisError) -> int:
    """Map an analysis failure to an HTTP status code."""
    for error_type, status_code in _ERROR_STATUS_CODES:
        if isinstance(exc, error_type):
            return status_code
    return 500


def _error_response(message: str, status_code: int) -> JSONResponse:
    return JSONResponse({"error": message}, status_code=status_code)
