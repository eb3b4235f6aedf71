import openai
from typing import Any, Sequence

from models.errors import ProviderError
from utils.logger import get_logger

from .base_client import BaseLLMClient

logger = get_logger(__name__)


class OpenAIClient(BaseLLMClient):
    """
    A client for interacting with the OpenAI chat completions API.
    Handles API calls and surfaces failures as ProviderError.
    """

    def __init__(self, api_key: str, model_name: str = "gpt-4o", **kwargs):
        """
        Initialize the OpenAI client.

        Args:
            api_key: The OpenAI API key
            model_name: Default model for calls that do not override it
        """
        super().__init__(api_key, **kwargs)
        if not api_key:
            raise ValueError("OPENAI_API_KEY not found in environment")
        self.client = kwargs.get("client") or openai.OpenAI(api_key=api_key)
        self.model_name = model_name

    def _create(self, **params) -> Any:
        try:
            return self.client.chat.completions.create(**params)
        except openai.OpenAIError as e:
            logger.error(
                "OpenAI completion failed",
                extra={"extra_fields": {"model": params.get("model"), "error": str(e)}},
            )
            raise ProviderError("openai", str(e)) from e

    def get_completion(self, messages: Sequence[dict[str, str]], **kwargs) -> str:
        """
        Get a completion from the OpenAI API.

        Args:
            messages: Chat messages
            **kwargs:
                - model: Override the default model for this call
                - temperature: Controls randomness (0.0 to 2.0)
                - max_tokens: Maximum number of tokens to generate
                - response_format: e.g. {"type": "json_object"}

        Returns:
            The message content, or an empty string when the model returned none
        """
        params: dict[str, Any] = {
            "model": kwargs.get("model", self.model_name),
            "messages": list(messages),
            "temperature": kwargs.get("temperature", 0.7),
            "max_tokens": kwargs.get("max_tokens", 1500),
        }
        if kwargs.get("response_format"):
            params["response_format"] = kwargs["response_format"]

        response = self._create(**params)
        if not response.choices:
            return ""
        return response.choices[0].message.content or ""

    def get_tool_completion(
        self, messages: Sequence[dict[str, str]], tools: list[dict[str, Any]], **kwargs
    ) -> Any:
        params: dict[str, Any] = {
            "model": kwargs.get("model", self.model_name),
            "messages": list(messages),
            "tools": tools,
        }
        if kwargs.get("max_tokens"):
            params["max_tokens"] = kwargs["max_tokens"]
        if kwargs.get("tool_choice"):
            params["tool_choice"] = kwargs["tool_choice"]

        response = self._create(**params)
        logger.debug(
            "Tool completion received",
            extra={
                "extra_fields": {
                    "model": params["model"],
                    "tools_offered": len(tools),
                    "tool_calls": len(self.tool_call_names(response)),
                }
            },
        )
        return response
