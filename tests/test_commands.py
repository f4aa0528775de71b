import pytest

from budget_bot.domain.categories import DEFAULT_CATEGORIES, CategorySet
from budget_bot.domain.commands import (
    InvalidAmount,
    InvalidCategory,
    MissingDescription,
    WrongFieldCount,
    command_keyword,
    is_expense_command,
    parse_expense,
    strip_expense_command,
)
from budget_bot.models import ExpenseRecord


@pytest.fixture
def categories() -> CategorySet:
    return CategorySet()


@pytest.mark.parametrize("category", DEFAULT_CATEGORIES)
def test_every_category_parses(categories: CategorySet, category: str) -> None:
    result = parse_expense(f"/expense {category} | d | p | 1", categories)
    assert isinstance(result, ExpenseRecord)
    assert result.category == category


@pytest.mark.parametrize("category", ["FOOD", "Transport", "sHoPpInG"])
def test_category_match_is_case_insensitive(categories: CategorySet, category: str) -> None:
    result = parse_expense(f"/expense {category} | d | p | 1", categories)
    assert isinstance(result, ExpenseRecord)
    assert result.category == category.lower()


@pytest.mark.parametrize("category", ["Drinks", "foods", "", "food transport"])
def test_unknown_category_is_rejected(categories: CategorySet, category: str) -> None:
    result = parse_expense(f"/expense {category} | d | p | 1", categories)
    assert result == InvalidCategory(attempted=category)


@pytest.mark.parametrize("amount", ["0", "-5", "-0.01", "abc", "", "nan", "inf", "-inf", "5 dollars"])
def test_invalid_amount_wins_over_category(categories: CategorySet, amount: str) -> None:
    valid = parse_expense(f"/expense Food | Lunch | Cash | {amount}", categories)
    invalid = parse_expense(f"/expense Drinks | Lunch | Cash | {amount}", categories)
    assert valid == InvalidAmount(raw=amount)
    assert invalid == InvalidAmount(raw=amount)


@pytest.mark.parametrize(
    "text, count",
    [
        ("/expense", 1),
        ("/expense Food", 1),
        ("/expense Food | Lunch | 5", 3),
        ("/expense Food | Lunch | Cash | 5 | extra", 5),
        ("/expense Food Lunch Cash 5", 1),
    ],
)
def test_wrong_field_count(categories: CategorySet, text: str, count: int) -> None:
    assert parse_expense(text, categories) == WrongFieldCount(count=count)


def test_success_preserves_text_fields(categories: CategorySet) -> None:
    result = parse_expense("/expense  Food |  Lunch Chicken Rice | Credit Card |  5 ", categories)
    assert result == ExpenseRecord(
        category="food",
        description="Lunch Chicken Rice",
        payment_mode="Credit Card",
        amount=5.0,
    )


def test_decimal_amount(categories: CategorySet) -> None:
    result = parse_expense("/expense Food | Coffee and pastry | Cash | 8.50", categories)
    assert isinstance(result, ExpenseRecord)
    assert result.amount == 8.5


def test_empty_description_is_rejected(categories: CategorySet) -> None:
    assert parse_expense("/expense Food |  | Cash | 5", categories) == MissingDescription()


def test_empty_payment_mode_is_allowed(categories: CategorySet) -> None:
    result = parse_expense("/expense Food | Lunch |  | 5", categories)
    assert isinstance(result, ExpenseRecord)
    assert result.payment_mode == ""


def test_parse_is_deterministic(categories: CategorySet) -> None:
    text = "/expense Shopping | Groceries | Card | 67.89"
    assert parse_expense(text, categories) == parse_expense(text, categories)


def test_configured_categories(categories: CategorySet) -> None:
    custom = CategorySet(["Rent", "Utilities"])
    assert isinstance(parse_expense("/expense rent | May | Transfer | 900", custom), ExpenseRecord)
    assert parse_expense("/expense Food | Lunch | Cash | 5", custom) == InvalidCategory(attempted="Food")


def test_bot_suffix_is_stripped() -> None:
    assert strip_expense_command("/expense@BudgetBot Food | a | b | 1") == "Food | a | b | 1"
    assert command_keyword("/help@BudgetBot") == "/help"
    assert command_keyword("  /START  ") == "/start"
    assert command_keyword("") == ""


def test_expense_prefix_detection() -> None:
    assert is_expense_command("/expense Food | a | b | 1")
    assert is_expense_command("  /expenseFood|a|b|1")
    assert not is_expense_command("expense Food | a | b | 1")
