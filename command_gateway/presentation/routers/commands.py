"""Command router: the single HTTP entry point of the gateway.

Endpoints:
    GET  /commands/token     anti-forgery token for the current identity
    POST /commands/{action}  dispatch one command (JSON object or form body)

The anti-forgery token travels in the ``X-Command-Token`` header or in a
``nonce`` / ``_token`` payload field. The route never builds responses
itself: whatever the envelope emitted is rendered as JSON.
"""

from typing import Any

from fastapi import APIRouter, Depends, Request
from fastapi.encoders import jsonable_encoder
from fastapi.responses import JSONResponse
from starlette.concurrency import run_in_threadpool
from starlette.datastructures import UploadFile

from command_gateway.application.gateway import CommandGateway
from command_gateway.application.services import SecurityGate
from command_gateway.core.constants import GENERIC_ERROR_MESSAGE
from command_gateway.core.container import (
    build_envelope,
    get_command_gateway,
    get_security_gate,
)
from command_gateway.domain.value_objects import Identity, InboundCommand
from command_gateway.infrastructure.response import BufferedResponseChannel
from command_gateway.presentation.dependencies import request_info, resolve_identity

TOKEN_HEADER = "X-Command-Token"

commands_router = APIRouter(prefix="/commands", tags=["Commands"])


async def read_payload(request: Request) -> dict[str, Any] | None:
    """Decode the request body into a payload mapping.

    Returns:
        dict: JSON object or form fields (repeated and ``name[]`` fields
        become lists); an empty body is ``{}``.
        None: The body is not a JSON object and not form data.
    """
    body = await request.body()
    if not body.strip():
        return {}

    content_type = request.headers.get("content-type", "")
    if "application/json" in content_type:
        try:
            data = await request.json()
        except ValueError:
            return None
        return data if isinstance(data, dict) else None

    form = await request.form()
    payload: dict[str, Any] = {}
    for key in dict.fromkeys(form.keys()):
        values = [value for value in form.getlist(key) if not isinstance(value, UploadFile)]
        if key.endswith("[]"):
            payload[key[:-2]] = values
        elif values:
            payload[key] = values if len(values) > 1 else values[0]
    return payload


def render(channel: BufferedResponseChannel) -> JSONResponse:
    """Turn the envelope's single transmission into an HTTP response."""
    if channel.status is None:
        return JSONResponse(
            status_code=500,
            content={"success": False, "message": GENERIC_ERROR_MESSAGE, "code": "error"},
        )
    return JSONResponse(content=jsonable_encoder(channel.body), status_code=channel.status)


@commands_router.get("/token")
async def issue_token(
    identity: Identity = Depends(resolve_identity),
    security_gate: SecurityGate = Depends(get_security_gate),
) -> dict[str, str]:
    """Mint the anti-forgery token for the calling identity.

    Returns:
        dict[str, str]: ``token`` and the ``token_action`` it is bound to.
    """
    return {
        "token": security_gate.issue_token(identity),
        "token_action": security_gate.token_action_name(),
    }


@commands_router.post("/{action}")
async def dispatch_command(
    action: str,
    request: Request,
    identity: Identity = Depends(resolve_identity),
    gateway: CommandGateway = Depends(get_command_gateway),
) -> JSONResponse:
    """Run one command through the gateway.

    Args:
        action: Endpoint name (or deprecated alias).
        request: Incoming request.
        identity: Caller, from the identity resolver.
        gateway: Command gateway.

    Returns:
        JSONResponse: The envelope, with the status derived from its code.
    """
    channel = BufferedResponseChannel()
    info = request_info(request)
    envelope = build_envelope(
        channel,
        identity=identity,
        request=info,
        started_at=getattr(request.state, "started_at", None),
    )

    payload = await read_payload(request)
    if payload is None:
        envelope.validation_error(
            {"body": "Request body must be a JSON object or form data"},
            "Malformed request body",
        )
        return render(channel)

    command = InboundCommand(
        action=action,
        payload=payload,
        identity=identity,
        request=info,
        token=request.headers.get(TOKEN_HEADER),
    )
    await run_in_threadpool(gateway.dispatch, command, envelope)
    return render(channel)
