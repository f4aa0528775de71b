import logging

import pytest

from budget_bot.core import settings
from budget_bot.core.settings import BotSettings, read_config_file
from budget_bot.domain.categories import DEFAULT_CATEGORIES, CategorySet
from budget_bot.logger import SecretRedactingFilter


def test_from_env(monkeypatch: pytest.MonkeyPatch) -> None:
    monkeypatch.setenv("BOT_TOKEN", "123:abc")
    monkeypatch.setenv("WEBHOOK_SECRET", "hook")
    monkeypatch.setenv("AUTHORIZED_USERS", "1, 2,3")
    monkeypatch.setenv("APPS_SCRIPT_URL", "https://script.test/exec")
    monkeypatch.setenv("SHARED_SECRET", "app-key")
    monkeypatch.setenv("EXPENSE_CATEGORIES", "Rent, utilities,rent")
    monkeypatch.setenv("SHEETS_TIMEOUT", "12.5")
    monkeypatch.setenv("TELEGRAM_API_URL", "http://localhost:8081/")

    bot_settings = BotSettings.from_env()

    assert bot_settings.bot_token == "123:abc"
    assert bot_settings.authorized_users == frozenset({1, 2, 3})
    assert bot_settings.categories.names == ("rent", "utilities")
    assert bot_settings.sheets_timeout == 12.5
    assert bot_settings.telegram_api_url == "http://localhost:8081"
    assert bot_settings.secrets == ("123:abc", "hook", "app-key")


def test_from_env_defaults(monkeypatch: pytest.MonkeyPatch) -> None:
    for key in ("BOT_TOKEN", "WEBHOOK_SECRET", "AUTHORIZED_USERS", "EXPENSE_CATEGORIES", "SHEETS_TIMEOUT"):
        monkeypatch.delenv(key, raising=False)

    bot_settings = BotSettings.from_env()

    assert bot_settings.webhook_secret is None
    assert bot_settings.authorized_users == frozenset()
    assert bot_settings.categories.names == DEFAULT_CATEGORIES
    assert bot_settings.sheets_timeout == settings.DEFAULT_SHEETS_TIMEOUT_SECONDS


def test_invalid_timeout_falls_back(monkeypatch: pytest.MonkeyPatch) -> None:
    monkeypatch.setenv("SHEETS_TIMEOUT", "soon")
    assert BotSettings.from_env().sheets_timeout == settings.DEFAULT_SHEETS_TIMEOUT_SECONDS


def test_blank_categories_fall_back_to_defaults() -> None:
    assert CategorySet.from_string(" , ").names == DEFAULT_CATEGORIES
    with pytest.raises(ValueError):
        CategorySet([])


def test_read_config_file(tmp_path) -> None:
    config = tmp_path / "config.yaml"
    config.write_text(
        "# Budget bot\n"
        "APPS_SCRIPT_URL: https://script.google.com/macros/s/abc/exec\n"
        'EXPENSE_CATEGORIES: "food,rent"\n'
        "SHARED_SECRET:\n",
        encoding="utf-8",
    )

    values = read_config_file(str(config))

    assert values == {
        "APPS_SCRIPT_URL": "https://script.google.com/macros/s/abc/exec",
        "EXPENSE_CATEGORIES": "food,rent",
    }
    assert read_config_file(str(tmp_path / "missing.yaml")) == {}


def test_mask_env_value() -> None:
    assert settings._mask_env_value("BOT_TOKEN", "123456:secret") == "12...et"
    assert settings._mask_env_value("SHARED_SECRET", "abc") == "****"
    assert settings._mask_env_value("AUTHORIZED_USERS", "1,2") == "1,2"


def test_redacting_filter_masks_secrets() -> None:
    record = logging.LogRecord(
        "httpx", logging.INFO, __file__, 1,
        "HTTP Request: POST %s", ("https://api.telegram.org/bot123:abc/sendMessage",), None,
    )
    SecretRedactingFilter(["123:abc"]).filter(record)
    assert record.getMessage() == "HTTP Request: POST https://api.telegram.org/bot[REDACTED]/sendMessage"
