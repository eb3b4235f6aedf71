"""Composio toolkit client.

Composio exposes the search and Gmail capabilities as OpenAI tool definitions,
executes the tool calls a completion requested, and owns the OAuth linking
and trigger plumbing for connected mail accounts.
"""

import threading
from typing import Any, Callable, Optional, Sequence

from models.errors import MultipleConnectedAccountsError, ProviderError
from models.mailbox import ConnectedAccount, ConnectionRequest
from utils.logger import get_logger

from .base_client import BaseToolkitClient

logger = get_logger(__name__)


def _is_multiple_accounts_error(exc: Exception) -> bool:
    name = type(exc).__name__.lower()
    return "multipleconnectedaccounts" in name or "multiple connected accounts" in str(exc).lower()


def _toolkit_slug(item: Any) -> str:
    toolkit = getattr(item, "toolkit", None)
    slug = getattr(toolkit, "slug", None) if toolkit is not None else None
    return slug or getattr(item, "app_name", None) or ""


class ComposioToolkitClient(BaseToolkitClient):
    """Toolkit client backed by the Composio SDK with its OpenAI provider."""

    def __init__(self, api_key: str | None):
        """
        Initialize the Composio client.

        Args:
            api_key: Composio API key
        """
        if not api_key:
            raise ValueError("COMPOSIO_API_KEY not found in environment")

        # Lazy import: the SDK is only loaded when a live client is built
        try:
            from composio import Composio
            from composio_openai import OpenAIProvider
        except ModuleNotFoundError as e:
            raise ModuleNotFoundError(
                "Dependency 'composio' is not installed. "
                "Install it with: pip install composio composio-openai"
            ) from e

        self.client = Composio(api_key=api_key, provider=OpenAIProvider())
        self._subscription = None
        self._subscription_lock = threading.Lock()
        logger.info("Composio client initialized")

    def _call(self, operation: str, fn: Callable[[], Any]) -> Any:
        try:
            return fn()
        except Exception as e:
            logger.error(
                f"Composio {operation} failed: {e}",
                extra={"extra_fields": {"operation": operation}},
            )
            raise ProviderError("composio", str(e)) from e

    def get_tools(self, user_id: str, tool_slugs: Sequence[str]) -> list[dict[str, Any]]:
        tools = self._call(
            "tools.get", lambda: self.client.tools.get(user_id=user_id, tools=list(tool_slugs))
        )
        return list(tools or [])

    def handle_tool_calls(self, user_id: str, completion: Any) -> list[Any]:
        results = self._call(
            "handle_tool_calls",
            lambda: self.client.provider.handle_tool_calls(user_id=user_id, response=completion),
        )
        return list(results or [])

    def list_connected_accounts(self, user_id: str) -> list[ConnectedAccount]:
        response = self._call(
            "connected_accounts.list",
            lambda: self.client.connected_accounts.list(user_ids=[user_id]),
        )
        return [
            ConnectedAccount(
                id=item.id,
                toolkit=_toolkit_slug(item),
                status=str(getattr(item, "status", "") or ""),
            )
            for item in getattr(response, "items", None) or []
        ]

    def initiate_connection(
        self, user_id: str, auth_config_id: str, callback_url: Optional[str] = None
    ) -> ConnectionRequest:
        kwargs: dict[str, Any] = {"user_id": user_id, "auth_config_id": auth_config_id}
        if callback_url:
            kwargs["callback_url"] = callback_url
        try:
            request = self.client.connected_accounts.initiate(**kwargs)
        except Exception as e:
            if _is_multiple_accounts_error(e):
                raise MultipleConnectedAccountsError(str(e)) from e
            logger.error(f"Composio connected_accounts.initiate failed: {e}")
            raise ProviderError("composio", str(e)) from e

        return ConnectionRequest(
            redirect_url=getattr(request, "redirect_url", None),
            connection_id=getattr(request, "id", None),
        )

    def create_trigger(
        self, user_id: str, slug: str, connected_account_id: str, config: dict[str, Any]
    ) -> str:
        trigger = self._call(
            "triggers.create",
            lambda: self.client.triggers.create(
                slug=slug,
                user_id=user_id,
                connected_account_id=connected_account_id,
                trigger_config=config,
            ),
        )
        return trigger.trigger_id

    def subscribe(self, trigger_id: str, callback: Callable[[dict[str, Any]], None]) -> None:
        with self._subscription_lock:
            if self._subscription is None:
                self._subscription = self._call("triggers.subscribe", self.client.triggers.subscribe)
            subscription = self._subscription

        subscription.handle(trigger_id=trigger_id)(callback)
        logger.info(f"Subscribed to trigger events: {trigger_id}")
