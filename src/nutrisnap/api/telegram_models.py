"""Pydantic models for the subset of Telegram webhook payloads the bot reads."""

from pydantic import BaseModel, ConfigDict, Field


class TelegramUser(BaseModel):
    id: int
    first_name: str | None = None
    username: str | None = None


class TelegramChat(BaseModel):
    id: int
    type: str


class TelegramPhotoSize(BaseModel):
    """One resolution of an uploaded photo."""

    file_id: str
    width: int
    height: int

    @property
    def area(self) -> int:
        return self.width * self.height


class TelegramMessage(BaseModel):
    """Incoming chat message; channel posts have no sender."""

    model_config = ConfigDict(populate_by_name=True)

    message_id: int
    chat: TelegramChat
    from_user: TelegramUser | None = Field(default=None, alias="from")
    text: str | None = None
    caption: str | None = None
    photo: list[TelegramPhotoSize] = Field(default_factory=list)

    def largest_photo(self) -> TelegramPhotoSize | None:
        """Return the highest-resolution photo size, if any."""
        return max(self.photo, key=lambda size: size.area, default=None)


class TelegramUpdate(BaseModel):
    """Webhook update; kinds other than ``message`` are ignored."""

    update_id: int
    message: TelegramMessage | None = None
