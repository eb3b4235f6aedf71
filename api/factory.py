"""Factories for provider clients built from environment configuration."""

import threading

from config.config import Config, get_config
from utils.logger import get_logger

from .base_client import BaseLLMClient, BaseToolkitClient

logger = get_logger(__name__)

_lock = threading.Lock()
_llm_client: BaseLLMClient | None = None
_toolkit_client: BaseToolkitClient | None = None


def create_llm_client(config: Config | None = None) -> BaseLLMClient:
    """
    Return the process-wide OpenAI client.

    Raises:
        ValueError: If OPENAI_API_KEY is not set
    """
    global _llm_client
    with _lock:
        if _llm_client is None:
            from .openai_client import OpenAIClient

            config = config or get_config()
            _llm_client = OpenAIClient(api_key=config.OPENAI_API_KEY, model_name=config.SEARCH_MODEL)
            logger.info(f"Initialized OpenAI client ({config.describe()})")
        return _llm_client


def create_toolkit_client(config: Config | None = None) -> BaseToolkitClient:
    """
    Return the process-wide Composio toolkit client.

    Raises:
        ValueError: If COMPOSIO_API_KEY is not set
    """
    global _toolkit_client
    with _lock:
        if _toolkit_client is None:
            from .composio_client import ComposioToolkitClient

            config = config or get_config()
            _toolkit_client = ComposioToolkitClient(api_key=config.COMPOSIO_API_KEY)
        return _toolkit_client

