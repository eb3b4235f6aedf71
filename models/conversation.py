from dataclasses import dataclass, field
from datetime import datetime
from enum import Enum
from typing import Any

from models.email import EmailDraft
from models.search import PersonProfile, SearchResult


class MessageType(str, Enum):
    USER = "user"
    ASSISTANT = "assistant"


@dataclass(frozen=True)
class ConversationMessage:
    id: str
    type: MessageType
    content: str
    timestamp: datetime
    search_results: list[SearchResult] | None = None
    profile: PersonProfile | None = None
    email: EmailDraft | None = None

    def to_dict(self) -> dict[str, Any]:
        data: dict[str, Any] = {
            "id": self.id,
            "type": self.type.value,
            "content": self.content,
            "timestamp": self.timestamp.isoformat(),
        }
        if self.search_results is not None:
            data["searchResults"] = [r.to_dict() for r in self.search_results]
        if self.profile is not None:
            data["profile"] = self.profile.to_dict()
        if self.email is not None:
            data["emailData"] = self.email.to_dict()
        return data


@dataclass(frozen=True)
class Conversation:
    id: str
    title: str
    preview: str
    created_at: datetime
    updated_at: datetime
    messages: list[ConversationMessage] = field(default_factory=list)
    profile: PersonProfile | None = None
    emails: list[EmailDraft] = field(default_factory=list)

    def to_dict(self) -> dict[str, Any]:
        return {
            "id": self.id,
            "title": self.title,
            "preview": self.preview,
            "createdAt": self.created_at.isoformat(),
            "updatedAt": self.updated_at.isoformat(),
            "messages": [m.to_dict() for m in self.messages],
            "profile": self.profile.to_dict() if self.profile else None,
            "emails": [e.to_dict() for e in self.emails],
        }
