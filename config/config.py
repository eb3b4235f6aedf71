import os
from dotenv import load_dotenv
from pathlib import Path

DEFAULT_SEARCH_TOOLS = "COMPOSIO_SEARCH_DUCK_DUCK_GO_SEARCH,COMPOSIO_SEARCH_EXA_ANSWER"


def _int_env(name: str, default: int) -> int:
    raw = os.getenv(name)
    if raw is None or not raw.strip():
        return default
    return int(raw)


class Config:
    """Configuration management for the application."""

    def __init__(self):
        """Initialize configuration with environment variables."""
        # Load environment variables from .env file if it exists
        env_path = Path(__file__).parent.parent / '.env'
        if env_path.exists():
            load_dotenv(dotenv_path=env_path)

        # Provider credentials
        self.OPENAI_API_KEY = os.getenv('OPENAI_API_KEY')
        self.COMPOSIO_API_KEY = os.getenv('COMPOSIO_API_KEY')

        # Models per operation
        self.SEARCH_MODEL = os.getenv('SEARCH_MODEL', 'gpt-4o')
        self.COMPOSE_MODEL = os.getenv('COMPOSE_MODEL', 'gpt-4o')
        self.SEND_MODEL = os.getenv('SEND_MODEL', 'gpt-4o-mini')

        # Search pipeline
        self.SEARCH_TOOLS = [
            t.strip() for t in os.getenv('SEARCH_TOOLS', DEFAULT_SEARCH_TOOLS).split(',') if t.strip()
        ]
        self.SEARCH_USER_ID = os.getenv('SEARCH_USER_ID', 'user-123')
        self.SEARCH_CACHE_TTL_SECONDS = _int_env('SEARCH_CACHE_TTL_SECONDS', 300)
        self.SEARCH_CACHE_MAX_ENTRIES = _int_env('SEARCH_CACHE_MAX_ENTRIES', 256)

        # Mailbox
        self.DEFAULT_USER_EMAIL = os.getenv('DEFAULT_USER_EMAIL', '')
        self.GMAIL_AUTH_CONFIG_ID = os.getenv('GMAIL_AUTH_CONFIG_ID', '')
        self.MAILBOX_CALLBACK_BASE_URL = os.getenv('MAILBOX_CALLBACK_BASE_URL', 'http://127.0.0.1:8000')
        self.MAILBOX_CONNECT_TIMEOUT_SECONDS = _int_env('MAILBOX_CONNECT_TIMEOUT_SECONDS', 300)
        self.MAILBOX_TRIGGER_INTERVAL = _int_env('MAILBOX_TRIGGER_INTERVAL', 60)

        # Conversation history
        self.CONVERSATION_DB_URL = os.getenv(
            'CONVERSATION_DB_URL', 'sqlite:///scoutmail_conversations.db'
        )

    def missing_keys(self) -> list[str]:
        """Names of required provider credentials that are not set."""
        missing = []
        if not self.OPENAI_API_KEY:
            missing.append('OPENAI_API_KEY')
        if not self.COMPOSIO_API_KEY:
            missing.append('COMPOSIO_API_KEY')
        return missing

    def validate(self) -> bool:
        """
        Validate that all required configuration is present.

        Returns:
            bool: True if configuration is valid, False otherwise
        """
        missing = self.missing_keys()
        if missing:
            print(f"Error: {', '.join(missing)} not set. Please set them in the .env file.")
            return False
        if self.SEARCH_CACHE_TTL_SECONDS <= 0:
            print("Error: SEARCH_CACHE_TTL_SECONDS must be positive.")
            return False
        if self.SEARCH_CACHE_MAX_ENTRIES <= 0:
            print("Error: SEARCH_CACHE_MAX_ENTRIES must be positive.")
            return False
        return True

    def describe(self) -> str:
        """
        Get a one-line description of the active configuration.

        Returns:
            str: Formatted string with model and cache information
        """
        return (
            f"search={self.SEARCH_MODEL} compose={self.COMPOSE_MODEL} send={self.SEND_MODEL} "
            f"cache_ttl={self.SEARCH_CACHE_TTL_SECONDS}s cache_max={self.SEARCH_CACHE_MAX_ENTRIES}"
        )


_config: Config | None = None


def get_config() -> Config:
    """Return the process-wide configuration, building it on first use."""
    global _config
    if _config is None:
        _config = Config()
    return _config


def reset_config() -> None:
    """Drop the cached configuration so the next call re-reads the environment."""
    global _config
    _config = None
