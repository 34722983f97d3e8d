"""Download photos users send to the bot."""

from dataclasses import dataclass
from typing import Protocol

import httpx

from nutrisnap.adapters.telegram_client import TELEGRAM_API_URL

DOWNLOAD_TIMEOUT_SECONDS = 20


@dataclass(frozen=True)
class TelegramFile:
    """File bytes plus the server path, which carries the extension."""

    file_path: str
    content: bytes


class TelegramFileClient(Protocol):
    async def download_file(self, file_id: str) -> TelegramFile:
        """Fetch a file by its Telegram ``file_id``."""


@dataclass
class HttpxTelegramFileClient(TelegramFileClient):
    """Resolves files with ``getFile`` and downloads them from the file host."""

    bot_token: str
    http_client: httpx.AsyncClient

    @classmethod
    def create(cls, bot_token: str) -> "HttpxTelegramFileClient":
        return cls(bot_token=bot_token, http_client=httpx.AsyncClient())

    async def download_file(self, file_id: str) -> TelegramFile:
        file_path = await self._resolve_file_path(file_id)
        response = await self.http_client.get(
            f"{TELEGRAM_API_URL}/file/bot{self.bot_token}/{file_path}",
            timeout=DOWNLOAD_TIMEOUT_SECONDS,
        )
        response.raise_for_status()
        return TelegramFile(file_path=file_path, content=response.content)

    async def close(self) -> None:
        await self.http_client.aclose()

    async def _resolve_file_path(self, file_id: str) -> str:
        response = await self.http_client.get(
            f"{TELEGRAM_API_URL}/bot{self.bot_token}/getFile",
            params={"file_id": file_id},
            timeout=10,
        )
        response.raise_for_status()
        payload = response.json()
        file_path = (payload.get("result") or {}).get("file_path")
        if not payload.get("ok") or not file_path:
            raise RuntimeError(f"Telegram getFile returned no path for {file_id}")
        return file_path
