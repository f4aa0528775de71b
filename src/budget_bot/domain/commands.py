from __future__ import annotations

import math
from dataclasses import dataclass
from typing import Union

from budget_bot.domain.categories import CategorySet
from budget_bot.models import ExpenseRecord

START_COMMAND = "/start"
HELP_COMMAND = "/help"
CATEGORIES_COMMAND = "/categories"
EXPENSE_COMMAND = "/expense"

FIELD_DELIMITER = "|"
EXPECTED_FIELDS = 4


@dataclass(frozen=True)
class WrongFieldCount:
    count: int


@dataclass(frozen=True)
class InvalidAmount:
    raw: str


@dataclass(frozen=True)
class InvalidCategory:
    attempted: str


@dataclass(frozen=True)
class MissingDescription:
    pass


ParseError = Union[WrongFieldCount, InvalidAmount, InvalidCategory, MissingDescription]


def _strip_bot_suffix(token: str) -> str:
    # Telegram appends "@botname" to commands sent in group chats.
    keyword, _, _ = token.partition("@")
    return keyword


def command_keyword(text: str) -> str:
    parts = text.strip().split(maxsplit=1)
    if not parts:
        return ""
    return _strip_bot_suffix(parts[0]).lower()


def is_expense_command(text: str) -> bool:
    return text.strip().startswith(EXPENSE_COMMAND)


def strip_expense_command(text: str) -> str:
    remainder = text.strip()
    if remainder.startswith(EXPENSE_COMMAND):
        remainder = remainder[len(EXPENSE_COMMAND):]
        if remainder.startswith("@"):
            parts = remainder.split(maxsplit=1)
            remainder = parts[1] if len(parts) > 1 else ""
    return remainder.strip()


def parse_amount(raw: str) -> float | None:
    try:
        amount = float(raw)
    except ValueError:
        return None
    if not math.isfinite(amount) or amount <= 0:
        return None
    return amount


def parse_expense(text: str, categories: CategorySet) -> ExpenseRecord | ParseError:
    """
    Parse ``/expense Category | Description | Payment Mode | Amount``.

    Checks run in order: field count, amount, category, description. The
    first failing check decides the returned error.
    """
    remainder = strip_expense_command(text)
    segments = [segment.strip() for segment in remainder.split(FIELD_DELIMITER)]
    if len(segments) != EXPECTED_FIELDS:
        return WrongFieldCount(count=len(segments))

    category_text, description, payment_mode, amount_text = segments

    amount = parse_amount(amount_text)
    if amount is None:
        return InvalidAmount(raw=amount_text)

    category = categories.match(category_text)
    if category is None:
        return InvalidCategory(attempted=category_text)

    if not description:
        return MissingDescription()

    return ExpenseRecord(
        category=category,
        description=description,
        payment_mode=payment_mode,
        amount=amount,
    )
