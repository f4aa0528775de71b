from fastapi import HTTPException, Request

from budget_bot.domain.auth import AuthorizationGate
from budget_bot.services.dispatcher import CommandDispatcher


def get_gate(request: Request) -> AuthorizationGate:
    gate = getattr(request.app.state, "gate", None)
    if not gate:
        raise HTTPException(status_code=500, detail="Service not initialized")
    return gate


def get_dispatcher(request: Request) -> CommandDispatcher:
    dispatcher = getattr(request.app.state, "dispatcher", None)
    if not dispatcher:
        raise HTTPException(status_code=500, detail="Service not initialized")
    return dispatcher
