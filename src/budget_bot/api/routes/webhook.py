import json
from typing import Annotated

from fastapi import APIRouter, Depends, Request
from fastapi.responses import PlainTextResponse
from pydantic import ValidationError

from budget_bot.api.dependencies import get_dispatcher, get_gate
from budget_bot.api.schemas import TelegramUpdate
from budget_bot.domain.auth import AuthorizationGate
from budget_bot.logger import get_logger
from budget_bot.services.dispatcher import CommandDispatcher

logger = get_logger(__name__)

router = APIRouter()

SECRET_TOKEN_HEADER = "X-Telegram-Bot-Api-Secret-Token"


def _internal_error() -> PlainTextResponse:
    return PlainTextResponse("Internal Server Error", status_code=500)


@router.post("/webhook", response_class=PlainTextResponse)
async def telegram_webhook(
    request: Request,
    gate: Annotated[AuthorizationGate, Depends(get_gate)],
    dispatcher: Annotated[CommandDispatcher, Depends(get_dispatcher)],
) -> PlainTextResponse:
    if not gate.verify_webhook(request.headers.get(SECRET_TOKEN_HEADER)):
        logger.warning("[WEBHOOK] Webhook verification failed.")
        return PlainTextResponse("Unauthorized", status_code=401)

    try:
        payload = json.loads(await request.body())
    except ValueError:
        logger.error("[WEBHOOK] Received invalid JSON payload.")
        return _internal_error()

    try:
        update = TelegramUpdate.model_validate(payload)
    except ValidationError as exc:
        logger.error("[WEBHOOK] Update does not match the expected schema: %s", exc)
        return _internal_error()

    message = update.message.to_incoming() if update.message else None
    if message is None:
        logger.debug("[WEBHOOK] Update %s has no text message; ignoring.", update.update_id)
        return PlainTextResponse("OK")

    try:
        await dispatcher.handle(message)
    except Exception:
        logger.exception("[WEBHOOK] Error processing update %s.", update.update_id)
        return _internal_error()

    return PlainTextResponse("OK")


@router.get("/health")
async def health() -> dict[str, str]:
    return {"status": "ok"}
