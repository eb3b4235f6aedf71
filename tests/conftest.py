import os
import tempfile
from types import SimpleNamespace
from typing import Any

# Keep test logs out of the working tree; must happen before utils.logger is imported
os.environ.setdefault("LOG_DIR", tempfile.mkdtemp(prefix="scoutmail-logs-"))

import pytest
from dotenv import load_dotenv
from sqlalchemy import create_engine
from sqlalchemy.orm import sessionmaker

from api.base_client import BaseLLMClient, BaseToolkitClient
from models.errors import ProviderError
from models.mailbox import ConnectedAccount, ConnectionRequest

# Load environment variables from .env file for integration tests
load_dotenv()


def make_completion(tool_names: list[str]) -> SimpleNamespace:
    """Minimal stand-in for an OpenAI chat completion carrying tool calls."""
    calls = [
        SimpleNamespace(id=f"call_{i}", function=SimpleNamespace(name=name, arguments="{}"))
        for i, name in enumerate(tool_names)
    ]
    return SimpleNamespace(
        choices=[SimpleNamespace(message=SimpleNamespace(content=None, tool_calls=calls))]
    )


class FakeLLM(BaseLLMClient):
    """Deterministic in-memory LLM; records every call."""

    def __init__(self, content: str = "", tool_calls: list[str] | None = None, error=None):
        self.api_key = "fake"
        self.model_name = "fake-model"
        self.content = content
        self.tool_calls = tool_calls or []
        self.error = error
        self.calls: list[dict[str, Any]] = []

    def get_completion(self, messages, **kwargs) -> str:
        self.calls.append({"kind": "completion", "messages": messages, "kwargs": kwargs})
        if self.error:
            raise self.error
        return self.content

    def get_tool_completion(self, messages, tools, **kwargs):
        self.calls.append(
            {"kind": "tool_completion", "messages": messages, "tools": tools, "kwargs": kwargs}
        )
        if self.error:
            raise self.error
        return make_completion(self.tool_calls)


class FakeToolkit(BaseToolkitClient):
    """
    In-memory toolkit.

    `errors` maps a method name to the exception it should raise.
    """

    def __init__(
        self,
        results: list[Any] | None = None,
        tools: list[dict[str, Any]] | None = None,
        accounts: list[ConnectedAccount] | None = None,
        connection: ConnectionRequest | None = None,
        trigger_id: str = "trigger_1",
        errors: dict[str, Exception] | None = None,
    ):
        self.results = results or []
        self.tools = tools
        self.accounts = accounts or []
        self.connection = connection or ConnectionRequest(
            redirect_url="https://auth.example.com/start", connection_id="conn_1"
        )
        self.trigger_id = trigger_id
        self.errors = errors or {}
        self.calls: list[tuple[str, tuple]] = []
        self.subscriptions: dict[str, Any] = {}

    def _record(self, name: str, *args):
        self.calls.append((name, args))
        if name in self.errors:
            raise self.errors[name]

    def count(self, name: str) -> int:
        return sum(1 for call, _ in self.calls if call == name)

    def get_tools(self, user_id, tool_slugs):
        self._record("get_tools", user_id, tuple(tool_slugs))
        if self.tools is not None:
            return self.tools
        return [{"type": "function", "function": {"name": slug}} for slug in tool_slugs]

    def handle_tool_calls(self, user_id, completion):
        self._record("handle_tool_calls", user_id)
        return self.results

    def list_connected_accounts(self, user_id):
        self._record("list_connected_accounts", user_id)
        return self.accounts

    def initiate_connection(self, user_id, auth_config_id, callback_url=None):
        self._record("initiate_connection", user_id, auth_config_id, callback_url)
        return self.connection

    def create_trigger(self, user_id, slug, connected_account_id, config):
        self._record("create_trigger", user_id, slug, connected_account_id, config)
        return self.trigger_id

    def subscribe(self, trigger_id, callback):
        self._record("subscribe", trigger_id)
        self.subscriptions[trigger_id] = callback


class FakeClock:
    """Manually advanced monotonic clock."""

    def __init__(self, start: float = 1000.0):
        self.now = start

    def __call__(self) -> float:
        return self.now

    def advance(self, seconds: float) -> None:
        self.now += seconds


@pytest.fixture
def fake_llm():
    """Factory: fake_llm(content=..., tool_calls=[...], error=...)."""
    return FakeLLM


@pytest.fixture
def fake_toolkit():
    """Factory: fake_toolkit(results=[...], accounts=[...], errors={...})."""
    return FakeToolkit


@pytest.fixture
def clock():
    return FakeClock()


@pytest.fixture
def provider_error():
    return ProviderError("composio", "upstream unavailable")


@pytest.fixture
def session_factory(tmp_path):
    """Session factory bound to a fresh SQLite file with all tables created."""
    from db.tables import init_db

    engine = create_engine(
        f"sqlite:///{tmp_path / 'conversations.db'}",
        connect_args={"check_same_thread": False},
    )
    init_db(engine)
    yield sessionmaker(bind=engine, autocommit=False, autoflush=False)
    engine.dispose()


@pytest.fixture
def mock_env(monkeypatch):
    """Fixture to mock environment variables for testing."""
    env_vars = {
        "OPENAI_API_KEY": "test-openai-key",
        "COMPOSIO_API_KEY": "test-composio-key",
        "DEFAULT_USER_EMAIL": "owner@example.com",
        "GMAIL_AUTH_CONFIG_ID": "ac_test",
    }
    for key, value in env_vars.items():
        monkeypatch.setenv(key, value)

    from config.config import reset_config

    reset_config()
    yield env_vars
    reset_config()
