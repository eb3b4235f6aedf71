"""Pydantic response models (DTOs) for FastAPI endpoints."""

from datetime import datetime
from typing import Any

from pydantic import BaseModel, ConfigDict, Field
from pydantic.alias_generators import to_camel

from models.conversation import MessageType
from models.email import EmailDraft, EmailType
from models.mailbox import ConnectionStatus
from models.search import PersonProfile, SearchResult, SearchSource


class CamelModel(BaseModel):
    """Serialized with camelCase keys, the contract the web client expects."""

    model_config = ConfigDict(alias_generator=to_camel, populate_by_name=True)


class HealthResponseDTO(BaseModel):
    status: str
    timestamp: str
    version: str


# ============================================================================
# SEARCH
# ============================================================================


class SearchResultDTO(CamelModel):
    title: str
    url: str
    snippet: str = ""
    source: SearchSource = SearchSource.DUCKDUCKGO

    def to_domain(self) -> SearchResult:
        return SearchResult.from_dict(self.model_dump(mode="json", by_alias=True))


class ProfileLinksDTO(CamelModel):
    linkedin: str | None = None
    twitter: str | None = None
    website: str | None = None
    email: str | None = None


class ProfileDTO(CamelModel):
    name: str | None = None
    title: str | None = None
    company: str | None = None
    bio: str | None = None
    skills: list[str] | None = None
    links: ProfileLinksDTO | None = None

    def to_domain(self) -> PersonProfile:
        return PersonProfile.from_dict(self.model_dump(by_alias=True, exclude_none=True))


class SearchDebugDTO(CamelModel):
    tools_count: int
    tool_calls_count: int
    tool_results_count: int


class SearchResponseDTO(CamelModel):
    summary: str
    results: list[SearchResultDTO]
    query: str
    profile: ProfileDTO | None = None
    debug: SearchDebugDTO


# ============================================================================
# EMAIL
# ============================================================================


class EmailDraftDTO(CamelModel):
    subject: str
    body: str
    is_html: bool = False
    preview: str = ""
    recipient_email: str
    recipient_name: str | None = None
    email_type: EmailType = EmailType.GENERAL
    cc: list[str] = Field(default_factory=list)
    bcc: list[str] = Field(default_factory=list)
    was_sent: bool = False
    sent_at: datetime | None = None

    @classmethod
    def from_draft(cls, draft: EmailDraft) -> "EmailDraftDTO":
        return cls.model_validate(draft.to_dict())

    def to_domain(self) -> EmailDraft:
        return EmailDraft.from_dict(self.model_dump(mode="json", by_alias=True))


class SendEmailResponseDTO(CamelModel):
    success: bool
    message: str
    needs_connection: bool = False
    details: Any = None
    recipient_email: str | None = None
    subject: str | None = None
    user_email: str | None = None


# ============================================================================
# MAILBOX
# ============================================================================


class ConnectedAccountDTO(CamelModel):
    id: str
    app_name: str | None = None
    status: str | None = None


class MailboxConnectResponseDTO(CamelModel):
    success: bool = True
    connected: bool
    already_connected: bool = False
    redirect_url: str | None = None
    state: str | None = None
    user_email: str
    connected_account: ConnectedAccountDTO | None = None
    message: str | None = None

    @classmethod
    def from_status(cls, status: ConnectionStatus) -> "MailboxConnectResponseDTO":
        return cls(
            connected=status.connected,
            already_connected=status.already_connected,
            redirect_url=status.redirect_url,
            state=status.state,
            user_email=status.user_email,
            connected_account=(
                ConnectedAccountDTO.model_validate(status.connected_account.to_dict())
                if status.connected_account
                else None
            ),
            message=status.message,
        )


class MailboxAccountsResponseDTO(CamelModel):
    success: bool = True
    connected_accounts: list[ConnectedAccountDTO]
    has_gmail_connection: bool


class ConnectionStateResponseDTO(CamelModel):
    state: str
    status: str
    connected_account_id: str | None = None
    error: str | None = None


class TriggerResponseDTO(CamelModel):
    success: bool
    trigger_id: str
    message: str


# ============================================================================
# CONVERSATIONS
# ============================================================================


class MessageDTO(CamelModel):
    id: str
    type: MessageType
    content: str
    timestamp: str
    search_results: list[SearchResultDTO] | None = None
    profile: ProfileDTO | None = None
    email_data: EmailDraftDTO | None = None


class ConversationDTO(CamelModel):
    id: str
    title: str
    preview: str
    created_at: str
    updated_at: str
    messages: list[MessageDTO] = Field(default_factory=list)
    profile: ProfileDTO | None = None
    emails: list[EmailDraftDTO] = Field(default_factory=list)


class DeleteResponseDTO(CamelModel):
    success: bool
