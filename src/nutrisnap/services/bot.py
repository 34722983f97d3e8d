"""Telegram bot update handling."""

import html
import logging
from dataclasses import dataclass

from nutrisnap.adapters.telegram_client import TelegramClient
from nutrisnap.adapters.telegram_file_client import TelegramFileClient
from nutrisnap.api.telegram_models import (
    TelegramMessage,
    TelegramPhotoSize,
    TelegramUpdate,
)
from nutrisnap.domain.analysis import AnalysisResult
from nutrisnap.domain.logs import MealType, NutritionLogRecord, NutritionSource
from nutrisnap.services.analysis import FoodAnalysisService
from nutrisnap.services.image_input import guess_mime_type
from nutrisnap.services.logs import NutritionLogService
from nutrisnap.telegram_commands import BotCommand, parse_command

ANALYZING_TEXT = "🔍 Analyzing your food photo..."
NO_FOOD_TEXT = (
    "❌ No food items detected in the photo. "
    "Please make sure the food is clearly visible and try again."
)
SAVED_TEXT = "✅ Nutrition data saved successfully to your log!"
PHOTO_ERROR_TEXT = (
    "❌ An error occurred while analyzing your photo. Please try again later."
)
SEND_PHOTO_TEXT = (
    "📸 Please send me a photo of your food to analyze its nutrition information.\n\n"
    "Use /help for more information."
)
HELP_TEXT = (
    "📖 <b>How to use:</b>\n\n"
    "1. Take a photo of your food\n"
    "2. Send it to me\n"
    "3. I'll analyze it and show you the nutrition info\n"
    "4. The data will be saved automatically\n\n"
    "<b>Commands:</b>\n"
    "/start - Start the bot\n"
    "/help - Show this help message\n"
    "/today - Today's totals\n"
    "/history - Your recent meals\n\n"
    "<i>Note: Make sure your food is clearly visible in the photo "
    "for best results.</i>"
)

_logger = logging.getLogger(__name__)


@dataclass
class TelegramBot:
    """Routes Telegram updates to analysis and logging."""

    telegram_client: TelegramClient
    file_client: TelegramFileClient
    analysis_service: FoodAnalysisService
    log_service: NutritionLogService
    timezone: str = "UTC"
    app_url: str | None = None

    async def handle_update(self, update: TelegramUpdate) -> None:
        """Handle a single webhook update."""
        message = update.message
        if message is None or message.from_user is None:
            return
        photo = message.largest_photo()
        if photo is not None:
            await self._handle_photo(message, photo)
            return
        if not message.text:
            return

        if not message.text.startswith("/"):
            await self.telegram_client.send_message(
                chat_id=message.chat.id, text=SEND_PHOTO_TEXT
            )
            return

        command = parse_command(message.text)
        if command == BotCommand.START.value.command:
            await self._handle_start(message)
        elif command == BotCommand.HELP.value.command:
            await self.telegram_client.send_message(
                chat_id=message.chat.id, text=HELP_TEXT, parse_mode="HTML"
            )
        elif command == BotCommand.TODAY.value.command:
            await self._handle_today(message)
        elif command == BotCommand.HISTORY.value.command:
            await self._handle_history(message)

    async def _handle_start(self, message: TelegramMessage) -> None:
        await self.telegram_client.send_message(
            chat_id=message.chat.id,
            text=(
                "👋 Welcome!\n\n"
                "📸 Send a food photo for instant analysis\n"
                "📊 Or open the dashboard for detailed stats"
            ),
            reply_markup=self._start_keyboard(),
        )

    async def _handle_today(self, message: TelegramMessage) -> None:
        summary = self.log_service.get_today_summary(
            str(message.from_user.id), self.timezone
        )
        await self.telegram_client.send_message(
            chat_id=message.chat.id,
            text=(
                "📊 Today's totals:\n"
                f"Calories: {summary.total_calories:.1f} kcal\n"
                f"Protein: {summary.total_protein:.1f}g\n"
                f"Carbs: {summary.total_carbs:.1f}g\n"
                f"Fats: {summary.total_fats:.1f}g\n"
                f"Meals logged: {summary.meal_count}"
            ),
        )

    async def _handle_history(self, message: TelegramMessage) -> None:
        logs = self.log_service.list_recent(str(message.from_user.id), limit=10)
        await self.telegram_client.send_message(
            chat_id=message.chat.id, text=_format_history(logs)
        )

    async def _handle_photo(
        self, message: TelegramMessage, photo: TelegramPhotoSize
    ) -> None:
        chat_id = message.chat.id
        status_id = await self.telegram_client.send_message(
            chat_id=chat_id, text=ANALYZING_TEXT
        )
        try:
            telegram_file = await self.file_client.download_file(photo.file_id)
            mime_type = guess_mime_type(telegram_file.file_path, telegram_file.content)
            result = await self.analysis_service.analyze_image(
                telegram_file.content, mime_type
            )
            if not result.foods:
                await self._update_status(chat_id, status_id, NO_FOOD_TEXT)
                return
            await self._update_status(
                chat_id, status_id, format_analysis(result), parse_mode="HTML"
            )
            self.log_service.save_log(
                user_id=str(message.from_user.id),
                meal_type=MealType.SNACK,
                foods=result.foods,
                source=NutritionSource.TELEGRAM,
            )
        except Exception:
            _logger.exception(
                "Failed to process Telegram photo", extra={"file_id": photo.file_id}
            )
            await self.telegram_client.send_message(
                chat_id=chat_id, text=PHOTO_ERROR_TEXT
            )
            return
        await self.telegram_client.send_message(chat_id=chat_id, text=SAVED_TEXT)

    async def _update_status(
        self,
        chat_id: int,
        status_id: int | None,
        text: str,
        parse_mode: str | None = None,
    ) -> None:
        if status_id is None:
            await self.telegram_client.send_message(
                chat_id=chat_id, text=text, parse_mode=parse_mode
            )
            return
        await self.telegram_client.edit_message_text(
            chat_id=chat_id, message_id=status_id, text=text, parse_mode=parse_mode
        )

    def _start_keyboard(self) -> dict | None:
        if not self.app_url:
            return None
        base_url = self.app_url.rstrip("/")
        return {
            "inline_keyboard": [
                [
                    {
                        "text": "📊 Open Dashboard",
                        "web_app": {"url": f"{base_url}/dashboard"},
                    }
                ],
                [
                    {
                        "text": "🧮 Calorie Calculator",
                        "web_app": {"url": f"{base_url}/calculator"},
                    }
                ],
            ]
        }


def format_analysis(result: AnalysisResult) -> str:
    """Format detected foods and totals as Telegram HTML."""
    lines = ["✅ <b>Nutrition Analysis Results:</b>", ""]
    for index, food in enumerate(result.foods, start=1):
        lines.extend(
            [
                f"<b>{index}. {html.escape(food.name)}</b>",
                f"   Quantity: {html.escape(food.quantity)}",
                f"   Calories: {_format_number(food.calories)} kcal",
                f"   Protein: {_format_number(food.protein)}g | "
                f"Carbs: {_format_number(food.carbs)}g | "
                f"Fats: {_format_number(food.fats)}g",
                "",
            ]
        )
    totals = result.totals()
    lines.extend(
        [
            "<b>📊 Total:</b>",
            f"   Calories: {totals.calories:.1f} kcal",
            f"   Protein: {totals.protein:.1f}g",
            f"   Carbs: {totals.carbs:.1f}g",
            f"   Fats: {totals.fats:.1f}g",
            "",
            "💾 Saving to your nutrition log...",
        ]
    )
    return "\n".join(lines)


def _format_history(logs: list[NutritionLogRecord]) -> str:
    if not logs:
        return "No recent meals logged."
    lines = ["Recent meals:"]
    for log in logs:
        lines.append(
            f"- {log.logged_at:%Y-%m-%d %H:%M} ({log.meal_type.value}): "
            f"{log.total_calories:.0f} kcal"
        )
    return "\n".join(lines)


def _format_number(value: float) -> str:
    return f"{value:.1f}".rstrip("0").rstrip(".")
