"""Mailbox endpoints: Gmail linking, its completion callback and new-message triggers."""

import asyncio

from fastapi import APIRouter, Depends, Query, Request, status

from models.errors import MailboxError, UnknownConnectionError
from server.dependencies import get_api_key, get_connector
from server.schemas.requests import MailboxConnectRequest, MailboxTriggerRequest
from server.schemas.responses import (
    ConnectedAccountDTO,
    ConnectionStateResponseDTO,
    MailboxAccountsResponseDTO,
    MailboxConnectResponseDTO,
    TriggerResponseDTO,
)
from server.utils import error_response
from utils.logger import get_logger

logger = get_logger(__name__)

MAX_WAIT_SECONDS = 300

router = APIRouter(prefix="/v1/mailbox", tags=["Mailbox"])


def _state_response(flow) -> ConnectionStateResponseDTO:
    return ConnectionStateResponseDTO(
        state=flow.state,
        status=flow.status.value,
        connected_account_id=flow.connected_account_id,
        error=flow.error,
    )


def _unknown_state(e: UnknownConnectionError):
    return error_response("Unknown connection state", str(e), status.HTTP_404_NOT_FOUND)


@router.post(
    "/connect",
    response_model=MailboxConnectResponseDTO,
    response_model_exclude_none=True,
    dependencies=[Depends(get_api_key)],
)
async def connect_mailbox(
    request: Request,
    body: MailboxConnectRequest,
    connector=Depends(get_connector),
):
    """Start Gmail linking, or report that the account is already linked."""
    request_id = getattr(request.state, "request_id", "unknown")
    try:
        result = await asyncio.to_thread(connector.connect, body.user_email)
    except MailboxError as e:
        logger.error(
            "Gmail connection failed to start",
            extra={"extra_fields": {"request_id": request_id, "error": str(e)}},
        )
        return error_response("Failed to initialize Gmail connection", str(e))

    return MailboxConnectResponseDTO.from_status(result)


@router.get(
    "/connect",
    response_model=MailboxAccountsResponseDTO,
    dependencies=[Depends(get_api_key)],
)
async def list_mailbox_connections(
    request: Request,
    user_email: str = Query(..., alias="userEmail", min_length=1),
    connector=Depends(get_connector),
):
    request_id = getattr(request.state, "request_id", "unknown")
    try:
        overview = await asyncio.to_thread(connector.overview, user_email)
    except MailboxError as e:
        logger.error(
            "Gmail connection check failed",
            extra={"extra_fields": {"request_id": request_id, "error": str(e)}},
        )
        return error_response("Failed to check Gmail connections", str(e))

    return MailboxAccountsResponseDTO(
        connected_accounts=[
            ConnectedAccountDTO.model_validate(account.to_dict()) for account in overview.accounts
        ],
        has_gmail_connection=overview.has_gmail_connection,
    )


# Called by the provider's redirect, so it carries no API key.
@router.get("/callback", response_model=ConnectionStateResponseDTO, response_model_exclude_none=True)
async def mailbox_callback(
    state: str = Query(..., min_length=1),
    status_: str | None = Query(None, alias="status"),
    connected_account_id: str | None = Query(None),
    connector=Depends(get_connector),
):
    try:
        flow = connector.complete(state, status_, connected_account_id)
    except UnknownConnectionError as e:
        logger.warning(f"Callback for unknown connection state: {e}")
        return _unknown_state(e)

    return _state_response(flow)


@router.get(
    "/connect/{state}",
    response_model=ConnectionStateResponseDTO,
    response_model_exclude_none=True,
    dependencies=[Depends(get_api_key)],
)
async def mailbox_connection_state(
    state: str,
    wait: float = Query(0, ge=0, le=MAX_WAIT_SECONDS),
    connector=Depends(get_connector),
):
    """Report a linking flow's state, optionally blocking up to `wait` seconds for completion."""
    try:
        flow = await asyncio.to_thread(connector.wait, state, wait)
    except UnknownConnectionError as e:
        return _unknown_state(e)

    return _state_response(flow)


@router.post(
    "/trigger",
    response_model=TriggerResponseDTO,
    dependencies=[Depends(get_api_key)],
)
async def create_mailbox_trigger(
    request: Request,
    body: MailboxTriggerRequest,
    connector=Depends(get_connector),
):
    request_id = getattr(request.state, "request_id", "unknown")
    try:
        trigger_id = await asyncio.to_thread(
            connector.create_trigger, body.user_email, body.connected_account_id
        )
    except MailboxError as e:
        logger.error(
            "Gmail trigger setup failed",
            extra={"extra_fields": {"request_id": request_id, "error": str(e)}},
        )
        return error_response("Failed to setup Gmail trigger", str(e))

    return TriggerResponseDTO(
        success=True, trigger_id=trigger_id, message="Gmail trigger created successfully"
    )
