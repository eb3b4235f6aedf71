"""LLM-backed email drafting."""

import json
import re

from api.base_client import BaseLLMClient
from models.email import EmailDraft, EmailType
from models.errors import CompositionError, ProviderError
from utils.logger import get_logger

from .prompts import COMPOSER_SYSTEM_PROMPT, build_composition_prompt

logger = get_logger(__name__)

PREVIEW_FALLBACK_CHARS = 150
_FENCE_OPEN = re.compile(r"^```(?:json)?\s*", re.IGNORECASE)
_FENCE_CLOSE = re.compile(r"\s*```$")


def strip_code_fences(text: str) -> str:
    """Remove a surrounding ```json / ``` markdown fence if the model added one."""
    cleaned = text.strip()
    if cleaned.startswith("```"):
        cleaned = _FENCE_CLOSE.sub("", _FENCE_OPEN.sub("", cleaned))
    return cleaned


def parse_email_payload(text: str) -> dict:
    """
    Decode the model's JSON answer.

    Raises:
        CompositionError: on empty output, invalid JSON, a non-object,
            or a missing subject/body
    """
    if not text or not text.strip():
        raise CompositionError("No email content generated")

    try:
        payload = json.loads(strip_code_fences(text))
    except ValueError as e:
        logger.error(
            "Failed to parse email JSON",
            extra={"extra_fields": {"content": text[:500], "error": str(e)}},
        )
        raise CompositionError("Failed to parse generated email content") from e

    if not isinstance(payload, dict) or not payload.get("subject") or not payload.get("body"):
        raise CompositionError("Invalid email content structure")
    return payload


class EmailComposer:
    """Drafts outreach emails from conversation context."""

    def __init__(
        self,
        llm: BaseLLMClient,
        model: str | None = None,
        temperature: float = 0.7,
        max_tokens: int = 1500,
    ):
        self.llm = llm
        self.model = model
        self.temperature = temperature
        self.max_tokens = max_tokens

    def compose(
        self,
        chat_context: str,
        email_type: EmailType,
        recipient_email: str,
        recipient_name: str | None = None,
        user_context: str | None = None,
    ) -> EmailDraft:
        """
        Compose a draft for one recipient.

        Raises:
            CompositionError: when the model call fails or its output is unusable
        """
        prompt = build_composition_prompt(
            chat_context, email_type, recipient_email, recipient_name, user_context
        )
        kwargs = {
            "temperature": self.temperature,
            "max_tokens": self.max_tokens,
            "response_format": {"type": "json_object"},
        }
        if self.model:
            kwargs["model"] = self.model

        try:
            content = self.llm.get_completion(
                [
                    {"role": "system", "content": COMPOSER_SYSTEM_PROMPT},
                    {"role": "user", "content": prompt},
                ],
                **kwargs,
            )
        except ProviderError as e:
            raise CompositionError(str(e)) from e

        payload = parse_email_payload(content)
        body = str(payload["body"])
        draft = EmailDraft(
            subject=str(payload["subject"]),
            body=body,
            is_html=bool(payload.get("isHtml", False)),
            preview=str(payload.get("preview") or body[:PREVIEW_FALLBACK_CHARS]),
            recipient_email=recipient_email,
            recipient_name=recipient_name,
            email_type=email_type,
        )
        logger.info(
            "Email composed",
            extra={"extra_fields": {"email_type": email_type.value, "is_html": draft.is_html}},
        )
        return draft
