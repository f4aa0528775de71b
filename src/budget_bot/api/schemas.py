from datetime import datetime, timezone

from pydantic import BaseModel, ConfigDict, Field

from budget_bot.models import IncomingMessage


class TelegramUser(BaseModel):
    id: int
    is_bot: bool = False
    first_name: str = ""
    username: str | None = None


class TelegramChat(BaseModel):
    id: int
    type: str | None = None


class TelegramMessage(BaseModel):
    model_config = ConfigDict(populate_by_name=True)

    message_id: int
    date: int
    chat: TelegramChat
    from_: TelegramUser | None = Field(default=None, alias="from")
    text: str | None = None

    def to_incoming(self) -> IncomingMessage | None:
        """Return the message to dispatch, or None for messages without a sender or text."""
        if self.from_ is None or not self.text:
            return None
        return IncomingMessage(
            sender_id=self.from_.id,
            chat_id=self.chat.id,
            text=self.text,
            timestamp=datetime.fromtimestamp(self.date, tz=timezone.utc),
        )


class TelegramUpdate(BaseModel):
    update_id: int
    message: TelegramMessage | None = None
