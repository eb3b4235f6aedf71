"""Factories for the mail services from environment configuration."""

from api.base_client import BaseLLMClient, BaseToolkitClient
from api.factory import create_llm_client, create_toolkit_client
from config.config import Config, get_config

from .composer import EmailComposer
from .connector import MailboxConnector
from .pending import PendingConnectionRegistry
from .sender import EmailSender

# Singleton registry instance (process-shared)
_registry_instance: PendingConnectionRegistry | None = None


def get_pending_registry(config: Config | None = None) -> PendingConnectionRegistry:
    global _registry_instance
    if _registry_instance is None:
        config = config or get_config()
        _registry_instance = PendingConnectionRegistry(
            timeout_seconds=config.MAILBOX_CONNECT_TIMEOUT_SECONDS
        )
    return _registry_instance


def create_composer_from_env(
    llm: BaseLLMClient | None = None, config: Config | None = None
) -> EmailComposer:
    """
    Raises:
        ValueError: If OPENAI_API_KEY is not set
    """
    config = config or get_config()
    return EmailComposer(llm=llm or create_llm_client(config), model=config.COMPOSE_MODEL)


def create_sender_from_env(
    llm: BaseLLMClient | None = None,
    toolkit: BaseToolkitClient | None = None,
    config: Config | None = None,
) -> EmailSender:
    """
    Raises:
        ValueError: If a provider key is not set
    """
    config = config or get_config()
    return EmailSender(
        llm=llm or create_llm_client(config),
        toolkit=toolkit or create_toolkit_client(config),
        model=config.SEND_MODEL,
        default_user_email=config.DEFAULT_USER_EMAIL or None,
    )


def create_connector_from_env(
    toolkit: BaseToolkitClient | None = None, config: Config | None = None
) -> MailboxConnector:
    """
    Raises:
        ValueError: If COMPOSIO_API_KEY is not set
    """
    config = config or get_config()
    return MailboxConnector(
        toolkit=toolkit or create_toolkit_client(config),
        auth_config_id=config.GMAIL_AUTH_CONFIG_ID,
        callback_base_url=config.MAILBOX_CALLBACK_BASE_URL,
        registry=get_pending_registry(config),
        trigger_interval=config.MAILBOX_TRIGGER_INTERVAL,
    )
