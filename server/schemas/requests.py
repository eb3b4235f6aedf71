"""Pydantic request models for FastAPI endpoints."""

from pydantic import BaseModel, ConfigDict, Field, field_validator
from pydantic.alias_generators import to_camel

from models.conversation import MessageType
from models.email import EmailType
from server.schemas.responses import EmailDraftDTO, ProfileDTO, SearchResultDTO

EMAIL_PATTERN = r"^[^@\s]+@[^@\s]+\.[^@\s]+$"


class CamelRequest(BaseModel):
    """Accepts camelCase keys on the wire and snake_case in Python."""

    model_config = ConfigDict(alias_generator=to_camel, populate_by_name=True)


class SearchRequest(CamelRequest):
    query: str = Field(..., min_length=1)

    @field_validator("query")
    @classmethod
    def query_not_blank(cls, value: str) -> str:
        if not value.strip():
            raise ValueError("Query is required")
        return value


class ComposeEmailRequest(CamelRequest):
    chat_context: str = Field(..., min_length=1)
    email_type: EmailType
    recipient_email: str = Field(..., pattern=EMAIL_PATTERN)
    recipient_name: str | None = None
    user_context: str | None = None


class SendEmailRequest(CamelRequest):
    recipient_email: str = Field(..., pattern=EMAIL_PATTERN)
    subject: str = Field(..., min_length=1)
    body: str = Field(..., min_length=1)
    is_html: bool = False
    cc: list[str] = Field(default_factory=list)
    bcc: list[str] = Field(default_factory=list)
    user_email: str | None = Field(None, pattern=EMAIL_PATTERN)


class MailboxConnectRequest(CamelRequest):
    user_email: str = Field(..., pattern=EMAIL_PATTERN)


class MailboxTriggerRequest(CamelRequest):
    user_email: str = Field(..., pattern=EMAIL_PATTERN)
    connected_account_id: str = Field(..., min_length=1)


class CreateConversationRequest(CamelRequest):
    title: str | None = None


class AddMessageRequest(CamelRequest):
    type: MessageType
    content: str
    search_results: list[SearchResultDTO] | None = None
    profile: ProfileDTO | None = None
    email_data: EmailDraftDTO | None = None


class UpdateProfileRequest(CamelRequest):
    profile: ProfileDTO


class SaveEmailRequest(CamelRequest):
    email: EmailDraftDTO


class UpdateEmailRequest(CamelRequest):
    email: EmailDraftDTO
    index: int | None = Field(None, ge=0)
