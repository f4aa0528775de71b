from budget_bot.domain.auth import AuthorizationGate
from budget_bot.domain.categories import CategorySet
from budget_bot.domain.commands import (
    CATEGORIES_COMMAND,
    HELP_COMMAND,
    START_COMMAND,
    command_keyword,
    is_expense_command,
    parse_expense,
)
from budget_bot.integration.sheets import SheetsClient
from budget_bot.integration.telegram import TelegramClient
from budget_bot.logger import get_logger
from budget_bot.models import ExpenseRecord, IncomingMessage, SubmissionSuccess
from budget_bot.services import replies

logger = get_logger(__name__)


class CommandDispatcher:
    def __init__(
        self,
        gate: AuthorizationGate,
        telegram: TelegramClient,
        sheets: SheetsClient,
        categories: CategorySet,
        currency_symbol: str = "$",
    ) -> None:
        self.gate = gate
        self.telegram = telegram
        self.sheets = sheets
        self.categories = categories
        self.currency_symbol = currency_symbol

    async def handle(self, message: IncomingMessage) -> None:
        if not self.gate.is_authorized(message.sender_id):
            # No reply: strangers must not learn that the bot exists.
            logger.info("[AUTH] Unauthorized access attempt from user ID: %s", message.sender_id)
            return

        text = message.text
        if is_expense_command(text):
            await self._handle_expense(message)
            return

        keyword = command_keyword(text)
        if keyword == START_COMMAND:
            reply = replies.welcome_text(self.categories)
        elif keyword == CATEGORIES_COMMAND:
            reply = replies.categories_text(self.categories)
        elif keyword == HELP_COMMAND:
            reply = replies.help_text(self.categories)
        else:
            logger.debug("[DISPATCH] Unknown command '%s' from user %s.", keyword, message.sender_id)
            reply = replies.unknown_command_text()
        await self.telegram.send_message(message.chat_id, reply)

    async def _handle_expense(self, message: IncomingMessage) -> None:
        parsed = parse_expense(message.text, self.categories)
        if not isinstance(parsed, ExpenseRecord):
            logger.info(
                "[DISPATCH] Rejected expense from user %s: %s",
                message.sender_id,
                type(parsed).__name__,
            )
            await self.telegram.send_message(
                message.chat_id,
                replies.parse_error_text(parsed, self.categories),
            )
            return

        await self.telegram.send_message(message.chat_id, replies.processing_text())

        result = await self.sheets.submit(message.sender_id, parsed)
        if isinstance(result, SubmissionSuccess):
            reply = replies.success_text(result, self.currency_symbol)
        else:
            reply = replies.failure_text(result)
        await self.telegram.send_message(message.chat_id, reply)
