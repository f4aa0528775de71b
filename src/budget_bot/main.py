import uvicorn

from budget_bot.app import app
from budget_bot.core import settings
from budget_bot.logger import get_logging_config


def run() -> None:
    secrets = settings.BotSettings.from_env().secrets
    uvicorn.run(app, host=settings.HOST, port=settings.PORT, log_config=get_logging_config(secrets))


if __name__ == "__main__":
    run()
