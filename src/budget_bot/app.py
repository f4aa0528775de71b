from collections.abc import AsyncGenerator
from contextlib import asynccontextmanager

from fastapi import FastAPI

from budget_bot.api.routes import webhook
from budget_bot.core import settings as settings_module
from budget_bot.core.settings import BotSettings
from budget_bot.domain.auth import AuthorizationGate
from budget_bot.integration.sheets import SheetsClient
from budget_bot.integration.telegram import TelegramClient
from budget_bot.logger import get_logger, setup_logging
from budget_bot.services.dispatcher import CommandDispatcher

logger = get_logger(__name__)


def create_app(
    settings: BotSettings | None = None,
    *,
    telegram: TelegramClient | None = None,
    sheets: SheetsClient | None = None,
) -> FastAPI:
    bot_settings = settings or BotSettings.from_env()
    setup_logging(bot_settings.secrets)

    @asynccontextmanager
    async def lifespan(app: FastAPI) -> AsyncGenerator[None, None]:
        logger.info("Initializing services...")
        settings_module.log_environment()
        bot_settings.warn_missing()
        logger.info("Expense categories: %s", ", ".join(bot_settings.categories))

        telegram_client = telegram or TelegramClient(
            token=bot_settings.bot_token,
            api_url=bot_settings.telegram_api_url,
        )
        sheets_client = sheets or SheetsClient(
            url=bot_settings.apps_script_url,
            app_key=bot_settings.shared_secret,
            timeout=bot_settings.sheets_timeout,
        )
        gate = AuthorizationGate(
            webhook_secret=bot_settings.webhook_secret,
            authorized_users=bot_settings.authorized_users,
        )

        app.state.settings = bot_settings
        app.state.gate = gate
        app.state.telegram = telegram_client
        app.state.sheets = sheets_client
        app.state.dispatcher = CommandDispatcher(
            gate=gate,
            telegram=telegram_client,
            sheets=sheets_client,
            categories=bot_settings.categories,
            currency_symbol=bot_settings.currency_symbol,
        )

        logger.info("Services initialized.")
        yield
        logger.info("Service shutting down.")
        await telegram_client.aclose()
        await sheets_client.aclose()

    app = FastAPI(title="Telegram Budget Bot", lifespan=lifespan)
    app.include_router(webhook.router)
    return app


app = create_app()
