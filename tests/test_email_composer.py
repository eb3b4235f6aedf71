import json

import pytest

from models.email import EmailType
from models.errors import CompositionError, ProviderError
from tools.mail.composer import EmailComposer, parse_email_payload, strip_code_fences
from tools.mail.prompts import build_composition_prompt

DRAFT_JSON = json.dumps(
    {
        "subject": "Guest spot on Build Notes?",
        "body": "Hi Jane,\n\nI loved your talk on testing...",
        "isHtml": False,
        "preview": "Invitation to join the podcast.",
    }
)


def test_strip_code_fences():
    assert strip_code_fences('```json\n{"a": 1}\n```') == '{"a": 1}'
    assert strip_code_fences('```\n{"a": 1}```') == '{"a": 1}'
    assert strip_code_fences('  {"a": 1}  ') == '{"a": 1}'


@pytest.mark.parametrize(
    "text, message",
    [
        ("", "No email content generated"),
        ("   ", "No email content generated"),
        ("not json", "Failed to parse generated email content"),
        ("[1, 2]", "Invalid email content structure"),
        ('{"subject": "Hi"}', "Invalid email content structure"),
        ('{"subject": "", "body": "text"}', "Invalid email content structure"),
    ],
)
def test_parse_failures(text, message):
    with pytest.raises(CompositionError, match=message):
        parse_email_payload(text)


def test_email_type_labels():
    assert EmailType.PODCAST_REQUEST.label == "PODCAST REQUEST"
    assert EmailType.COLD_DM.label == "COLD DM"
    assert EmailType.GENERAL.label == "GENERAL"


def test_prompt_includes_context_and_recipient():
    prompt = build_composition_prompt(
        "Jane is a staff engineer at Acme.",
        EmailType.SALES_PITCH,
        "jane@acme.com",
        recipient_name="Jane Doe",
        user_context="I run a testing startup.",
    )
    assert "Jane is a staff engineer at Acme." in prompt
    assert "EMAIL TYPE: SALES PITCH" in prompt
    assert "RECIPIENT: jane@acme.com (Jane Doe)" in prompt
    assert "ADDITIONAL USER CONTEXT:\nI run a testing startup." in prompt
    assert "social proof" in prompt


def test_prompt_omits_optional_sections():
    prompt = build_composition_prompt("ctx", EmailType.GENERAL, "jane@acme.com")
    assert "ADDITIONAL USER CONTEXT" not in prompt
    assert "RECIPIENT: jane@acme.com\n" in prompt


def test_compose_builds_draft(fake_llm):
    llm = fake_llm(content=f"```json\n{DRAFT_JSON}\n```")
    composer = EmailComposer(llm, model="gpt-4o")

    draft = composer.compose(
        "Jane hosts talks on testing.", EmailType.PODCAST_REQUEST, "jane@acme.com", "Jane Doe"
    )

    assert draft.subject == "Guest spot on Build Notes?"
    assert draft.is_html is False
    assert draft.preview == "Invitation to join the podcast."
    assert draft.recipient_name == "Jane Doe"
    assert draft.email_type is EmailType.PODCAST_REQUEST
    kwargs = llm.calls[0]["kwargs"]
    assert kwargs["response_format"] == {"type": "json_object"}
    assert kwargs["temperature"] == 0.7
    assert kwargs["max_tokens"] == 1500
    assert kwargs["model"] == "gpt-4o"


def test_cold_dm_wire_shape(fake_llm):
    composer = EmailComposer(fake_llm(content=DRAFT_JSON))

    data = composer.compose("ctx", EmailType.COLD_DM, "jane@acme.com").to_dict()

    assert data["isHtml"] is False
    assert data["emailType"] == "cold_dm"
    assert data["recipientEmail"] == "jane@acme.com"
    assert data["recipientName"] is None
    assert "wasSent" not in data


def test_preview_falls_back_to_body(fake_llm):
    body = "B" * 400
    composer = EmailComposer(fake_llm(content=json.dumps({"subject": "S", "body": body})))

    draft = composer.compose("ctx", EmailType.GENERAL, "jane@acme.com")

    assert draft.preview == "B" * 150


def test_provider_failure_becomes_composition_error(fake_llm):
    composer = EmailComposer(fake_llm(error=ProviderError("openai", "rate limited")))

    with pytest.raises(CompositionError, match="rate limited"):
        composer.compose("ctx", EmailType.GENERAL, "jane@acme.com")
