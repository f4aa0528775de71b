"""
Reply texts sent back to Telegram.

All texts use Telegram's HTML parse mode, so every value that comes from the
user or from the spreadsheet service is escaped before it is embedded.
"""
from html import escape

from budget_bot.domain.categories import CategorySet
from budget_bot.domain.commands import InvalidCategory, ParseError
from budget_bot.models import SubmissionFailure, SubmissionSuccess

FORMAT_EXAMPLE = "/expense Food | Lunch at cafe | Credit Card | 15.50"
DEFAULT_FAILURE_REASON = "Unknown error occurred"

_HELP_EXAMPLES = (
    ("Coffee and pastry", "Cash", "8.50"),
    ("Uber to airport", "Card", "25.00"),
    ("Groceries", "Card", "67.89"),
)


def _display_name(category: str) -> str:
    return category[:1].upper() + category[1:]


def categories_list(categories: CategorySet) -> str:
    return "\n".join(
        f"{index}. {escape(name)}" for index, name in enumerate(categories, start=1)
    )


def welcome_text(categories: CategorySet) -> str:
    example = f"/expense {_display_name(categories.names[0])} | Lunch Chicken Rice | Cash | 5"
    return (
        "🏦 <b>Personal Budget Bot</b>\n\n"
        "Welcome! I'll help you track your expenses.\n\n"
        "<b>Available Commands:</b>\n"
        "• /expense - Add new expense\n"
        "• /categories - View valid categories\n"
        "• /help - Show detailed help\n\n"
        "<b>Quick Example:</b>\n"
        f"{escape(example)}\n\n"
        "📊 Your data is automatically organized by month in Google Sheets!"
    )


def help_text(categories: CategorySet) -> str:
    names = categories.names
    examples = "\n".join(
        f"• /expense {escape(_display_name(names[index % len(names)]))} | {description} | {mode} | {amount}"
        for index, (description, mode, amount) in enumerate(_HELP_EXAMPLES)
    )
    return (
        "<b>Commands:</b>\n"
        "/start - Show welcome message\n"
        "/categories - Show valid categories\n"
        "/help - Show this help\n"
        "/expense - Add new expense\n\n"
        "<b>Expense Format:</b>\n"
        "Category | Description | Payment Mode | Amount\n\n"
        "<b>Examples:</b>\n"
        f"{examples}\n\n"
        "💡 <b>Tips:</b>\n"
        "• Use /categories to see valid categories\n"
        "• Date is added automatically\n"
        "• All expenses are marked as non-recurring by default\n"
        '• Data is organized by month (e.g., "07/25" for July 2025)'
    )


def categories_text(categories: CategorySet) -> str:
    return f"📋 <b>Valid Categories</b>\n\n{categories_list(categories)}"


def format_error_text() -> str:
    return (
        "❌ <b>Invalid format!</b>\n\n"
        "Please use: /expense Category | Description | Payment Mode | Amount\n\n"
        "<b>Example:</b>\n"
        f"{FORMAT_EXAMPLE}\n\n"
        "Make sure to:\n"
        "• Use pipe symbols (|) to separate fields\n"
        "• Include all 4 fields\n"
        "• Use a valid category (see /categories)\n"
        "• Use a positive number for amount"
    )


def invalid_category_text(attempted: str, categories: CategorySet) -> str:
    return (
        "❌ <b>Invalid Category!</b>\n\n"
        f'"{escape(attempted)}" is not a valid category.\n\n'
        "Use /categories to see all valid options.\n\n"
        "<b>Valid categories:</b>\n"
        f"{escape(', '.join(categories))}"
    )


def parse_error_text(error: ParseError, categories: CategorySet) -> str:
    if isinstance(error, InvalidCategory):
        return invalid_category_text(error.attempted, categories)
    return format_error_text()


def processing_text() -> str:
    return "⏳ Processing your expense..."


def success_text(result: SubmissionSuccess, currency_symbol: str = "$") -> str:
    return (
        "✅ <b>Expense Added Successfully!</b>\n\n"
        f"📅 Date: {escape(result.date)}\n"
        f"🏷️ Category: {escape(result.formatted_category)}\n"
        f"📝 Description: {escape(result.description)}\n"
        f"💳 Payment: {escape(result.formatted_payment_mode)}\n"
        f"💰 Amount: {escape(currency_symbol)}{result.amount:.2f}\n"
        "🔄 Recurring: No\n"
        f"📊 Sheet: {escape(result.sheet_label)}\n\n"
        "Your expense has been logged! 🎉"
    )


def failure_text(result: SubmissionFailure) -> str:
    reason = result.reason or DEFAULT_FAILURE_REASON
    return f"❌ <b>Error Adding Expense</b>\n\n{escape(reason)}"


def unknown_command_text() -> str:
    return (
        "❓ <b>Unknown command</b>\n\n"
        "I didn't recognize that command. Here's what I can do:\n\n"
        "• /start - Get started\n"
        "• /categories - View valid categories\n"
        "• /help - Show detailed help\n"
        "• /expense - Add a new expense\n\n"
        "Type /help for detailed usage instructions."
    )
