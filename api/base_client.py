from abc import ABC, abstractmethod
from typing import Any, Callable, Optional, Sequence

from models.mailbox import ConnectedAccount, ConnectionRequest


class BaseLLMClient(ABC):
    """
    Abstract base class for chat-completion clients.
    Concrete clients wrap one provider SDK and raise ProviderError on failure.
    """

    @abstractmethod
    def __init__(self, api_key: str, **kwargs):
        self.api_key = api_key
        self.model_name = kwargs.get('model_name')

    @abstractmethod
    def get_completion(self, messages: Sequence[dict[str, str]], **kwargs) -> str:
        """
        Get the text of a single chat completion.

        Args:
            messages: Chat messages in {"role", "content"} form
            **kwargs: model, temperature, max_tokens, response_format

        Returns:
            The generated text (may be empty)
        """

    @abstractmethod
    def get_tool_completion(
        self, messages: Sequence[dict[str, str]], tools: list[dict[str, Any]], **kwargs
    ) -> Any:
        """
        Request a completion that may invoke tools.

        Returns:
            The raw provider completion object, as the toolkit needs it to
            resolve the requested tool calls.
        """

    @staticmethod
    def tool_call_names(completion: Any) -> list[str]:
        """Names of the tools the model asked for, in call order."""
        try:
            calls = completion.choices[0].message.tool_calls or []
        except (AttributeError, IndexError):
            return []
        return [call.function.name for call in calls]


class BaseToolkitClient(ABC):
    """
    Abstract base class for tool-aggregation providers.

    A toolkit exposes named capabilities (search, send mail) as LLM tool
    definitions, executes the tool calls a model requested, and manages the
    linked accounts those capabilities act on.
    """

    @abstractmethod
    def get_tools(self, user_id: str, tool_slugs: Sequence[str]) -> list[dict[str, Any]]:
        """Tool definitions for the given capabilities."""

    @abstractmethod
    def handle_tool_calls(self, user_id: str, completion: Any) -> list[Any]:
        """Execute the tool calls in a completion and return one result per call."""

    @abstractmethod
    def list_connected_accounts(self, user_id: str) -> list[ConnectedAccount]:
        """Accounts already linked for this user identity."""

    @abstractmethod
    def initiate_connection(
        self, user_id: str, auth_config_id: str, callback_url: Optional[str] = None
    ) -> ConnectionRequest:
        """Start a linking flow; raises MultipleConnectedAccountsError when one exists."""

    @abstractmethod
    def create_trigger(
        self, user_id: str, slug: str, connected_account_id: str, config: dict[str, Any]
    ) -> str:
        """Create an event trigger and return its id."""

    @abstractmethod
    def subscribe(self, trigger_id: str, callback: Callable[[dict[str, Any]], None]) -> None:
        """Invoke callback for every event delivered for trigger_id."""
