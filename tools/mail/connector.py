"""Gmail account linking and new-message subscriptions through the toolkit."""

import json
from typing import Any, Callable
from urllib.parse import urlencode

from api.base_client import BaseToolkitClient
from models.errors import MailboxError, MultipleConnectedAccountsError, ProviderError
from models.mailbox import ConnectionStatus, MailboxOverview
from utils.logger import get_logger

from .pending import PendingConnection, PendingConnectionRegistry

logger = get_logger(__name__)

NEW_MESSAGE_TRIGGER = "GMAIL_NEW_GMAIL_MESSAGE"
CALLBACK_PATH = "/v1/mailbox/callback"

EventCallback = Callable[[dict[str, Any]], None]


def log_trigger_event(event: dict[str, Any]) -> None:
    """Default per-event handler: one structured log line per incoming message event."""
    logger.info(
        "⚡️ Trigger event received",
        extra={"extra_fields": {"event": json.dumps(event, default=str)[:2000]}},
    )


class MailboxConnector:
    """
    Links a user's Gmail account and subscribes to its events.

    Completion of the out-of-band authorization is signalled by the provider
    calling back with the state token issued by connect(); callers await it
    through wait().
    """

    def __init__(
        self,
        toolkit: BaseToolkitClient,
        auth_config_id: str,
        callback_base_url: str,
        registry: PendingConnectionRegistry,
        trigger_interval: int = 60,
    ):
        self.toolkit = toolkit
        self.auth_config_id = auth_config_id
        self.callback_base_url = callback_base_url.rstrip("/")
        self.registry = registry
        self.trigger_interval = trigger_interval

    def overview(self, user_email: str) -> MailboxOverview:
        """
        Raises:
            MailboxError: when the account listing fails
        """
        try:
            accounts = self.toolkit.list_connected_accounts(user_email)
        except ProviderError as e:
            raise MailboxError(str(e)) from e
        return MailboxOverview(user_email=user_email, accounts=accounts)

    def callback_url(self, state: str) -> str:
        return f"{self.callback_base_url}{CALLBACK_PATH}?{urlencode({'state': state})}"

    def connect(self, user_email: str) -> ConnectionStatus:
        """
        Start linking unless a Gmail account is already connected.

        Raises:
            MailboxError: when the provider refuses to start the flow
        """
        try:
            existing = next(
                (a for a in self.toolkit.list_connected_accounts(user_email) if a.is_gmail), None
            )
        except ProviderError as e:
            logger.warning(f"Error checking existing connections: {e}")
            existing = None

        if existing is not None:
            return ConnectionStatus(
                user_email=user_email,
                connected=True,
                already_connected=True,
                connected_account=existing,
                message="Gmail account is already connected",
            )

        if not self.auth_config_id:
            raise MailboxError("GMAIL_AUTH_CONFIG_ID is not configured")

        flow = self.registry.register(user_email)
        try:
            request = self.toolkit.initiate_connection(
                user_email, self.auth_config_id, callback_url=self.callback_url(flow.state)
            )
        except MultipleConnectedAccountsError:
            self.registry.discard(flow.state)
            logger.info("Provider reports multiple connected accounts; treating as connected")
            return ConnectionStatus(
                user_email=user_email,
                connected=True,
                already_connected=True,
                message="Gmail account is already connected",
            )
        except ProviderError as e:
            self.registry.discard(flow.state)
            raise MailboxError(str(e)) from e

        self.registry.attach(flow.state, request.connection_id, request.redirect_url)
        logger.info(
            "Gmail linking initiated",
            extra={"extra_fields": {"connection_id": request.connection_id}},
        )
        return ConnectionStatus(
            user_email=user_email,
            connected=False,
            redirect_url=request.redirect_url,
            state=flow.state,
        )

    def complete(
        self, state: str, status: str | None, connected_account_id: str | None = None
    ) -> PendingConnection:
        """Record the provider's callback for a linking flow."""
        succeeded = (status or "").lower() in {"success", "active", "connected"}
        flow = self.registry.resolve(
            state,
            succeeded=succeeded,
            connected_account_id=connected_account_id,
            error=None if succeeded else f"Provider reported status: {status or 'unknown'}",
        )
        logger.info(
            "Gmail linking completed",
            extra={"extra_fields": {"status": flow.status.value}},
        )
        return flow

    def wait(self, state: str, timeout: float) -> PendingConnection:
        return self.registry.wait(state, timeout)

    def create_trigger(
        self,
        user_email: str,
        connected_account_id: str,
        on_event: EventCallback | None = None,
    ) -> str:
        """
        Create a new-message trigger and subscribe on_event to it.

        Raises:
            MailboxError: when creation or subscription fails
        """
        config = {"labelIds": "INBOX", "userId": "me", "interval": self.trigger_interval}
        try:
            trigger_id = self.toolkit.create_trigger(
                user_email, NEW_MESSAGE_TRIGGER, connected_account_id, config
            )
            self.toolkit.subscribe(trigger_id, on_event or log_trigger_event)
        except ProviderError as e:
            raise MailboxError(str(e)) from e

        logger.info(f"✅ Trigger created successfully. Trigger Id: {trigger_id}")
        return trigger_id
