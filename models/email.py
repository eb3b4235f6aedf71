from dataclasses import dataclass, field, replace
from datetime import datetime
from enum import Enum
from typing import Any


class EmailType(str, Enum):
    """Outreach categories the composer knows how to write."""

    PODCAST_REQUEST = "podcast_request"
    COLD_DM = "cold_dm"
    SALES_PITCH = "sales_pitch"
    GENERAL = "general"

    @property
    def label(self) -> str:
        # Only the first underscore is replaced
        return self.value.replace("_", " ", 1).upper()


@dataclass(frozen=True)
class EmailDraft:
    subject: str
    body: str
    recipient_email: str
    email_type: EmailType
    is_html: bool = False
    preview: str = ""
    recipient_name: str | None = None
    cc: list[str] = field(default_factory=list)
    bcc: list[str] = field(default_factory=list)
    was_sent: bool = False
    sent_at: datetime | None = None

    def mark_sent(self, sent_at: datetime) -> "EmailDraft":
        return replace(self, was_sent=True, sent_at=sent_at)

    def to_dict(self) -> dict[str, Any]:
        data: dict[str, Any] = {
            "subject": self.subject,
            "body": self.body,
            "isHtml": self.is_html,
            "preview": self.preview,
            "recipientEmail": self.recipient_email,
            "recipientName": self.recipient_name,
            "emailType": self.email_type.value,
        }
        if self.cc:
            data["cc"] = list(self.cc)
        if self.bcc:
            data["bcc"] = list(self.bcc)
        if self.was_sent:
            data["wasSent"] = True
            data["sentAt"] = self.sent_at.isoformat() if self.sent_at else None
        return data

    @classmethod
    def from_dict(cls, data: dict[str, Any]) -> "EmailDraft":
        sent_at = data.get("sentAt")
        return cls(
            subject=data["subject"],
            body=data["body"],
            recipient_email=data["recipientEmail"],
            email_type=EmailType(data.get("emailType", EmailType.GENERAL.value)),
            is_html=bool(data.get("isHtml", False)),
            preview=data.get("preview", ""),
            recipient_name=data.get("recipientName"),
            cc=list(data.get("cc") or []),
            bcc=list(data.get("bcc") or []),
            was_sent=bool(data.get("wasSent", False)),
            sent_at=datetime.fromisoformat(sent_at) if sent_at else None,
        )


@dataclass(frozen=True)
class SendResult:
    success: bool
    message: str
    needs_connection: bool = False
    details: Any = None
    recipient_email: str | None = None
    subject: str | None = None
    user_email: str | None = None
