"""
Test Suite: FastAPI Contract & Guardrail Validation

Validates the public HTTP contract of the ScoutMail API without calling real
LLM or toolkit providers. Services are built on in-memory fakes and injected
through FastAPI dependency overrides, so responses are deterministic and no
tokens are spent.

Covered:
- Health endpoint and request-id propagation
- Optional API-key guard
- Input validation (400 with {error, details})
- Error normalization (500 with operation-specific {error, details})
- camelCase DTO shapes for search, compose, send, mailbox and conversations
"""

import json

import pytest
from fastapi.testclient import TestClient

from context.conversation_store import ConversationStore
from models.errors import ProviderError
from models.mailbox import ConnectedAccount
from server import dependencies as deps
from server.app import create_app
from tools.mail.composer import EmailComposer
from tools.mail.connector import MailboxConnector
from tools.mail.pending import PendingConnectionRegistry
from tools.mail.sender import SEND_TOOL, EmailSender
from tools.search.aggregator import SearchAggregator
from tools.search.cache import SearchCache
from tools.search.service import SearchService

DDG = "COMPOSIO_SEARCH_DUCK_DUCK_GO_SEARCH"

SEARCH_PAYLOAD = {
    "role": "tool",
    "content": json.dumps(
        {
            "data": {
                "response_data": {
                    "organic_results": [
                        {
                            "title": "Jane Doe - Staff Engineer - Acme | LinkedIn",
                            "link": "https://www.linkedin.com/in/janedoe",
                            "snippet": "Staff Engineer at Acme • Berlin",
                        }
                    ]
                }
            }
        }
    ),
}

DRAFT_JSON = json.dumps(
    {"subject": "Quick idea", "body": "Hi Jane, ...", "isHtml": False, "preview": "A short note."}
)


# -------------------------------------------------------------------
# Pytest fixtures
# -------------------------------------------------------------------


@pytest.fixture()
def services(fake_llm, fake_toolkit, session_factory):
    search_toolkit = fake_toolkit(results=[SEARCH_PAYLOAD])
    mail_toolkit = fake_toolkit(
        results=[{"role": "tool", "content": json.dumps({"data": {"id": "m1"}, "successful": True})}],
        accounts=[ConnectedAccount(id="ca_1", toolkit="gmail")],
    )
    return {
        "search": SearchService(
            SearchAggregator(fake_llm(tool_calls=[DDG]), search_toolkit, [DDG], "user-123"),
            SearchCache(),
        ),
        "search_toolkit": search_toolkit,
        "composer": EmailComposer(fake_llm(content=DRAFT_JSON)),
        "sender": EmailSender(
            fake_llm(tool_calls=[SEND_TOOL]), mail_toolkit, default_user_email="me@acme.com"
        ),
        "mail_toolkit": mail_toolkit,
        "connector": MailboxConnector(
            fake_toolkit(), "ac_gmail", "http://testserver", PendingConnectionRegistry()
        ),
        "store": ConversationStore(session_factory=session_factory),
    }


@pytest.fixture()
def app(services, monkeypatch):
    """
    Build FastAPI app and override every service dependency.
    """
    monkeypatch.delenv("API_KEYS", raising=False)
    app = create_app()
    app.dependency_overrides[deps.get_search_service] = lambda: services["search"]
    app.dependency_overrides[deps.get_composer] = lambda: services["composer"]
    app.dependency_overrides[deps.get_sender] = lambda: services["sender"]
    app.dependency_overrides[deps.get_connector] = lambda: services["connector"]
    app.dependency_overrides[deps.get_conversation_store] = lambda: services["store"]
    return app


@pytest.fixture()
def client(app):
    return TestClient(app)


# -------------------------------------------------------------------
# Health & guardrails
# -------------------------------------------------------------------


def test_health_ok(client):
    r = client.get("/health")
    assert r.status_code == 200
    assert r.headers["content-type"].startswith("application/json")
    assert r.json()["status"] == "healthy"


def test_request_id_is_echoed(client):
    r = client.get("/health", headers={"X-Request-ID": "req-123"})
    assert r.headers["X-Request-ID"] == "req-123"
    assert client.get("/health").headers["X-Request-ID"]


def test_api_key_enforced_when_configured(client, monkeypatch):
    monkeypatch.setenv("API_KEYS", "dev-key-1,dev-key-2")

    assert client.post("/v1/search", json={"query": "pizza"}).status_code == 401
    r = client.post("/v1/search", json={"query": "pizza"}, headers={"X-API-Key": "dev-key-2"})
    assert r.status_code == 200


def test_callback_does_not_require_api_key(client, services, monkeypatch):
    monkeypatch.setenv("API_KEYS", "dev-key-1")
    state = services["connector"].connect("me@acme.com").state

    r = client.get("/v1/mailbox/callback", params={"state": state, "status": "success"})

    assert r.status_code == 200


# -------------------------------------------------------------------
# Search
# -------------------------------------------------------------------


def test_search_contract(client):
    r = client.post("/v1/search", json={"query": "Who is Jane Doe"})

    assert r.status_code == 200
    body = r.json()
    assert body["query"] == "Who is Jane Doe"
    assert body["summary"] == "Found comprehensive information about Jane Doe, Staff Engineer at Acme."
    assert body["results"][0] == {
        "title": "Jane Doe - Staff Engineer - Acme | LinkedIn",
        "url": "https://www.linkedin.com/in/janedoe",
        "snippet": "Staff Engineer at Acme • Berlin",
        "source": "duckduckgo",
    }
    assert body["profile"]["links"] == {"linkedin": "https://www.linkedin.com/in/janedoe"}
    assert body["debug"] == {"toolsCount": 1, "toolCallsCount": 1, "toolResultsCount": 1}


def test_repeated_search_is_served_from_cache(client, services):
    first = client.post("/v1/search", json={"query": "Who is Jane Doe"})
    second = client.post("/v1/search", json={"query": "who is jane doe"})

    assert first.content == second.content
    assert services["search_toolkit"].count("handle_tool_calls") == 1


@pytest.mark.parametrize("payload", [{}, {"query": ""}, {"query": "   "}, {"query": 42}])
def test_search_rejects_invalid_query(client, payload):
    r = client.post("/v1/search", json=payload)

    assert r.status_code == 400
    assert r.json()["error"] == "Invalid request"
    assert "details" in r.json()


def test_search_upstream_failure_is_500(client, services):
    services["search_toolkit"].errors["get_tools"] = ProviderError("composio", "boom")

    r = client.post("/v1/search", json={"query": "pizza"})

    assert r.status_code == 500
    assert r.json() == {"error": "Internal server error", "details": "boom"}


def test_missing_provider_key_is_500(app, client):
    def unconfigured():
        raise ValueError("OPENAI_API_KEY not found in environment variables")

    app.dependency_overrides[deps.get_search_service] = unconfigured

    r = client.post("/v1/search", json={"query": "pizza"})

    assert r.status_code == 500
    assert r.json()["details"] == "OPENAI_API_KEY not found in environment variables"


# -------------------------------------------------------------------
# Compose & send
# -------------------------------------------------------------------


def test_compose_contract(client):
    r = client.post(
        "/v1/compose-email",
        json={
            "chatContext": "Jane is a staff engineer at Acme.",
            "emailType": "cold_dm",
            "recipientEmail": "jane@acme.com",
            "recipientName": "Jane Doe",
        },
    )

    assert r.status_code == 200
    body = r.json()
    assert body["subject"] == "Quick idea"
    assert body["isHtml"] is False
    assert body["emailType"] == "cold_dm"
    assert body["recipientEmail"] == "jane@acme.com"
    assert body["recipientName"] == "Jane Doe"


def test_compose_rejects_unknown_email_type(client):
    r = client.post(
        "/v1/compose-email",
        json={"chatContext": "ctx", "emailType": "newsletter", "recipientEmail": "jane@acme.com"},
    )
    assert r.status_code == 400


def test_compose_failure_is_500(client, services):
    services["composer"].llm.content = "not json"

    r = client.post(
        "/v1/compose-email",
        json={"chatContext": "ctx", "emailType": "general", "recipientEmail": "jane@acme.com"},
    )

    assert r.status_code == 500
    assert r.json() == {
        "error": "Failed to compose email",
        "details": "Failed to parse generated email content",
    }


def test_send_contract(client):
    r = client.post(
        "/v1/send-email",
        json={"recipientEmail": "jane@acme.com", "subject": "Hi", "body": "Hello"},
    )

    assert r.status_code == 200
    body = r.json()
    assert body["success"] is True
    assert body["needsConnection"] is False
    assert body["userEmail"] == "me@acme.com"
    assert body["details"] == {"data": {"id": "m1"}, "successful": True}


def test_send_needs_connection_is_200(client, services):
    services["mail_toolkit"].accounts = []
    services["mail_toolkit"].tools = []

    r = client.post(
        "/v1/send-email",
        json={"recipientEmail": "jane@acme.com", "subject": "Hi", "body": "Hello"},
    )

    assert r.status_code == 200
    assert r.json()["success"] is False
    assert r.json()["needsConnection"] is True


def test_send_without_sender_identity_needs_connection(client, services):
    services["sender"].default_user_email = None

    r = client.post(
        "/v1/send-email",
        json={"recipientEmail": "jane@acme.com", "subject": "Hi", "body": "Hello"},
    )

    assert r.status_code == 200
    assert r.json()["success"] is False
    assert r.json()["needsConnection"] is True
    assert services["mail_toolkit"].calls == []


def test_send_rejects_bad_recipient(client):
    r = client.post(
        "/v1/send-email", json={"recipientEmail": "not-an-email", "subject": "Hi", "body": "x"}
    )
    assert r.status_code == 400


def test_send_failure_is_500(client, services):
    services["mail_toolkit"].errors["handle_tool_calls"] = ProviderError("composio", "quota")

    r = client.post(
        "/v1/send-email",
        json={"recipientEmail": "jane@acme.com", "subject": "Hi", "body": "Hello"},
    )

    assert r.status_code == 500
    assert r.json() == {"error": "Failed to send email", "details": "quota"}


# -------------------------------------------------------------------
# Mailbox
# -------------------------------------------------------------------


def test_mailbox_connect_and_callback_flow(client):
    r = client.post("/v1/mailbox/connect", json={"userEmail": "me@acme.com"})
    assert r.status_code == 200
    body = r.json()
    assert body["connected"] is False
    assert body["redirectUrl"] == "https://auth.example.com/start"
    state = body["state"]

    pending = client.get(f"/v1/mailbox/connect/{state}")
    assert pending.json()["status"] == "pending"

    callback = client.get(
        "/v1/mailbox/callback",
        params={"state": state, "status": "success", "connected_account_id": "ca_new"},
    )
    assert callback.json() == {"state": state, "status": "connected", "connectedAccountId": "ca_new"}

    done = client.get(f"/v1/mailbox/connect/{state}", params={"wait": 1})
    assert done.json()["status"] == "connected"


def test_mailbox_unknown_state_is_404(client):
    assert client.get("/v1/mailbox/connect/unknown").status_code == 404
    assert client.get("/v1/mailbox/callback", params={"state": "unknown"}).status_code == 404


def test_mailbox_accounts(client, services):
    services["connector"].toolkit.accounts = [ConnectedAccount(id="ca_1", toolkit="gmail")]

    r = client.get("/v1/mailbox/connect", params={"userEmail": "me@acme.com"})

    assert r.status_code == 200
    assert r.json() == {
        "success": True,
        "connectedAccounts": [{"id": "ca_1", "appName": "gmail", "status": "ACTIVE"}],
        "hasGmailConnection": True,
    }


def test_mailbox_accounts_requires_user(client):
    assert client.get("/v1/mailbox/connect").status_code == 400


def test_mailbox_already_connected_returns_account(client, services):
    services["connector"].toolkit.accounts = [ConnectedAccount(id="ca_1", toolkit="gmail")]

    r = client.post("/v1/mailbox/connect", json={"userEmail": "me@acme.com"})

    assert r.status_code == 200
    body = r.json()
    assert body["connected"] is True
    assert body["alreadyConnected"] is True
    assert body["connectedAccount"] == {"id": "ca_1", "appName": "gmail", "status": "ACTIVE"}
    assert "redirectUrl" not in body


def test_mailbox_connect_failure_is_500(client, services):
    services["connector"].toolkit.errors["initiate_connection"] = ProviderError("composio", "nope")

    r = client.post("/v1/mailbox/connect", json={"userEmail": "me@acme.com"})

    assert r.status_code == 500
    assert r.json()["error"] == "Failed to initialize Gmail connection"


def test_mailbox_trigger(client):
    r = client.post(
        "/v1/mailbox/trigger", json={"userEmail": "me@acme.com", "connectedAccountId": "ca_1"}
    )

    assert r.status_code == 200
    assert r.json()["success"] is True
    assert r.json()["triggerId"] == "trigger_1"


def test_mailbox_trigger_failure_is_500(client, services):
    services["connector"].toolkit.errors["create_trigger"] = ProviderError("composio", "no scope")

    r = client.post(
        "/v1/mailbox/trigger", json={"userEmail": "me@acme.com", "connectedAccountId": "ca_1"}
    )

    assert r.status_code == 500
    assert r.json() == {"error": "Failed to setup Gmail trigger", "details": "no scope"}


# -------------------------------------------------------------------
# Conversations
# -------------------------------------------------------------------


def test_conversation_lifecycle(client):
    created = client.post("/v1/conversations", json={})
    assert created.status_code == 201
    conversation_id = created.json()["id"]
    assert created.json()["title"] == "New Conversation"

    message = client.post(
        f"/v1/conversations/{conversation_id}/messages",
        json={"type": "user", "content": "Who is Jane Doe"},
    )
    assert message.status_code == 201

    saved = client.post(
        f"/v1/conversations/{conversation_id}/emails",
        json={
            "email": {
                "subject": "Quick idea",
                "body": "Hi",
                "recipientEmail": "jane@acme.com",
                "emailType": "cold_dm",
            }
        },
    )
    assert saved.status_code == 201
    assert saved.json()["preview"] == "📧 Email: Quick idea"
    assert saved.json()["messages"][-1]["emailData"]["subject"] == "Quick idea"

    current = client.get("/v1/conversations/current").json()
    assert current["id"] == conversation_id
    assert current["title"] == "Who is Jane Doe"
    assert [c["id"] for c in client.get("/v1/conversations").json()] == [conversation_id]

    assert client.delete(f"/v1/conversations/{conversation_id}").json() == {"success": True}
    assert client.get(f"/v1/conversations/{conversation_id}").status_code == 404
    assert client.get("/v1/conversations/current").status_code == 404


def test_conversation_message_validation(client):
    conversation_id = client.post("/v1/conversations", json={}).json()["id"]

    r = client.post(
        f"/v1/conversations/{conversation_id}/messages", json={"type": "system", "content": "x"}
    )

    assert r.status_code == 400


def test_update_email_out_of_range_index_replaces_latest(client):
    conversation_id = client.post("/v1/conversations", json={}).json()["id"]
    for subject in ("First", "Second"):
        client.post(
            f"/v1/conversations/{conversation_id}/emails",
            json={
                "email": {
                    "subject": subject,
                    "body": "Hi",
                    "recipientEmail": "jane@acme.com",
                    "emailType": "cold_dm",
                }
            },
        )

    r = client.put(
        f"/v1/conversations/{conversation_id}/emails",
        json={
            "email": {
                "subject": "Edited",
                "body": "Hi",
                "recipientEmail": "jane@acme.com",
                "emailType": "cold_dm",
            },
            "index": 7,
        },
    )

    assert r.status_code == 200
    assert [e["subject"] for e in r.json()["emails"]] == ["First", "Edited"]
