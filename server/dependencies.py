"""FastAPI dependencies for authentication and service access."""

import os

from fastapi import Header, HTTPException, Request, status

from server.utils import redact_sensitive_headers
from utils.logger import get_logger

logger = get_logger(__name__)


async def get_api_key(request: Request, x_api_key: str | None = Header(None)):
    """
    Validate API key from X-API-Key header.

    The guard is only enforced when API_KEYS is set; without it the API is open
    (local single-user deployments).
    """
    valid_keys_str = os.getenv("API_KEYS", "")
    if not valid_keys_str:
        return None

    valid_keys = [k.strip() for k in valid_keys_str.split(",") if k.strip()]

    if not x_api_key or x_api_key not in valid_keys:
        request_id = getattr(request.state, "request_id", "unknown")
        logger.warning(
            "API authentication failed",
            extra={
                "extra_fields": {
                    "request_id": request_id,
                    "headers": redact_sensitive_headers(dict(request.headers)),
                }
            },
        )
        raise HTTPException(
            status_code=status.HTTP_401_UNAUTHORIZED, detail="Invalid or missing API key"
        )

    return x_api_key


def get_search_service():
    """Dependency to get the search service (singleton pattern)."""
    from tools.search import create_search_service_from_env

    if not hasattr(get_search_service, "_instance"):
        get_search_service._instance = create_search_service_from_env()
    return get_search_service._instance


def get_composer():
    """Dependency to get the email composer (singleton pattern)."""
    from tools.mail import create_composer_from_env

    if not hasattr(get_composer, "_instance"):
        get_composer._instance = create_composer_from_env()
    return get_composer._instance


def get_sender():
    """Dependency to get the email sender (singleton pattern)."""
    from tools.mail import create_sender_from_env

    if not hasattr(get_sender, "_instance"):
        get_sender._instance = create_sender_from_env()
    return get_sender._instance


def get_connector():
    """Dependency to get the mailbox connector (singleton pattern)."""
    from tools.mail import create_connector_from_env

    if not hasattr(get_connector, "_instance"):
        get_connector._instance = create_connector_from_env()
    return get_connector._instance


def get_conversation_store():
    """Dependency to get the conversation store (singleton pattern)."""
    from context.conversation_store import ConversationStore

    if not hasattr(get_conversation_store, "_instance"):
        get_conversation_store._instance = ConversationStore()
    return get_conversation_store._instance
