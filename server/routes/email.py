"""Email endpoints: draft composition and dispatch."""

import asyncio

from fastapi import APIRouter, Depends, Request

from models.errors import CompositionError, MailSendError
from server.dependencies import get_api_key, get_composer, get_sender
from server.schemas.requests import ComposeEmailRequest, SendEmailRequest
from server.schemas.responses import EmailDraftDTO, SendEmailResponseDTO
from server.utils import error_response
from utils.logger import get_logger

logger = get_logger(__name__)

router = APIRouter(prefix="/v1", tags=["Email"], dependencies=[Depends(get_api_key)])


@router.post("/compose-email", response_model=EmailDraftDTO)
async def compose_email(
    request: Request,
    body: ComposeEmailRequest,
    composer=Depends(get_composer),
):
    request_id = getattr(request.state, "request_id", "unknown")
    try:
        draft = await asyncio.to_thread(
            composer.compose,
            body.chat_context,
            body.email_type,
            body.recipient_email,
            body.recipient_name,
            body.user_context,
        )
    except CompositionError as e:
        logger.error(
            "Email composition failed",
            extra={"extra_fields": {"request_id": request_id, "error": str(e)}},
        )
        return error_response("Failed to compose email", str(e))

    return EmailDraftDTO.from_draft(draft)


@router.post("/send-email", response_model=SendEmailResponseDTO, response_model_exclude_none=True)
async def send_email(
    request: Request,
    body: SendEmailRequest,
    sender=Depends(get_sender),
):
    """
    Send through the user's linked Gmail account.

    An unlinked mailbox is not an error: the response carries
    success=false and needsConnection=true so the client can start linking.
    """
    request_id = getattr(request.state, "request_id", "unknown")
    try:
        result = await asyncio.to_thread(
            sender.send,
            body.recipient_email,
            body.subject,
            body.body,
            body.is_html,
            body.cc,
            body.bcc,
            body.user_email,
        )
    except MailSendError as e:
        logger.error(
            "Email send failed",
            extra={"extra_fields": {"request_id": request_id, "error": str(e)}},
        )
        return error_response("Failed to send email", str(e))

    return SendEmailResponseDTO(
        success=result.success,
        message=result.message,
        needs_connection=result.needs_connection,
        details=result.details,
        recipient_email=result.recipient_email,
        subject=result.subject,
        user_email=result.user_email,
    )
