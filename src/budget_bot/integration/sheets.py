import asyncio
from typing import Any

import httpx
from pydantic import BaseModel, Field, ValidationError

from budget_bot.logger import get_logger
from budget_bot.models import ExpenseRecord, SubmissionFailure, SubmissionResult, SubmissionSuccess

logger = get_logger(__name__)

CONNECTION_FAILURE_REASON = "Failed to connect to spreadsheet service"


class SheetRow(BaseModel):
    date: str
    formatted_category: str = Field(alias="formattedCategory")
    description: str
    formatted_payment_mode: str = Field(alias="formattedPaymentMode")
    amount: float
    sheet_name: str = Field(alias="sheetName")


class SheetsResponse(BaseModel):
    success: bool
    error: str | None = None
    data: SheetRow | None = None


def build_submission_payload(
    sender_id: int,
    record: ExpenseRecord,
    app_key: str | None,
) -> dict[str, Any]:
    return {
        "userId": sender_id,
        "category": record.category,
        "description": record.description,
        "paymentMode": record.payment_mode,
        "amount": record.amount,
        "appKey": app_key,
    }


def to_submission_result(response: SheetsResponse) -> SubmissionResult:
    if response.success and response.data is not None:
        row = response.data
        return SubmissionSuccess(
            date=row.date,
            formatted_category=row.formatted_category,
            description=row.description,
            formatted_payment_mode=row.formatted_payment_mode,
            amount=row.amount,
            sheet_label=row.sheet_name,
        )
    return SubmissionFailure(reason=response.error or None)


class SheetsClient:
    """Client for the spreadsheet web app that appends expense rows."""

    def __init__(
        self,
        url: str | None,
        app_key: str | None,
        client: httpx.AsyncClient | None = None,
        timeout: float = 30.0,
    ):
        self.url = url
        self.app_key = app_key
        self.timeout = timeout
        self._client = client
        self._client_lock = asyncio.Lock()

    async def aclose(self) -> None:
        if self._client and not self._client.is_closed:
            await self._client.aclose()

    async def _get_client(self) -> httpx.AsyncClient:
        client = self._client
        if client is not None and not client.is_closed:
            return client

        async with self._client_lock:
            client = self._client
            if client is None or client.is_closed:
                # Apps Script web apps answer POSTs with a redirect to the result.
                client = httpx.AsyncClient(follow_redirects=True)
                self._client = client
            return client

    async def submit(self, sender_id: int, record: ExpenseRecord) -> SubmissionResult:
        if not self.url:
            logger.error("[SHEETS] APPS_SCRIPT_URL is not configured; cannot submit expense.")
            return SubmissionFailure(reason=CONNECTION_FAILURE_REASON)

        payload = build_submission_payload(sender_id, record, self.app_key)
        logger.debug(
            "[SHEETS] Submitting %s expense of %.2f for user %s.",
            record.category,
            record.amount,
            sender_id,
        )

        client = await self._get_client()
        try:
            response = await client.post(
                self.url,
                json=payload,
                headers={"Content-Type": "application/json"},
                timeout=self.timeout,
            )
            response.raise_for_status()
            parsed = SheetsResponse.model_validate(response.json())
        except (ValidationError, ValueError) as exc:
            logger.error("[SHEETS] Malformed response from spreadsheet service: %s", exc)
            return SubmissionFailure(reason=CONNECTION_FAILURE_REASON)
        except Exception as exc:
            logger.error("[SHEETS] Error calling spreadsheet service: %s", exc)
            return SubmissionFailure(reason=CONNECTION_FAILURE_REASON)

        result = to_submission_result(parsed)
        if isinstance(result, SubmissionFailure):
            logger.warning(
                "[SHEETS] Spreadsheet service rejected expense for user %s: %s",
                sender_id,
                result.reason or "<no reason>",
            )
        else:
            logger.info(
                "[SHEETS] Expense recorded for user %s in sheet '%s'.",
                sender_id,
                result.sheet_label,
            )
        return result
