"""
Conversation history for ScoutMail.

Keeps the research chats, the profiles found in them and the email drafts
composed from them, persisted through the repository functions in db.
"""

import secrets
import string
import threading
import time
from collections.abc import Callable
from datetime import datetime, timezone
from typing import Any

from sqlalchemy.orm import Session

from db import repository
from db.session import SessionLocal
from models.conversation import Conversation, ConversationMessage, MessageType
from models.email import EmailDraft
from models.search import PersonProfile, SearchResult
from utils.logger import get_logger

logger = get_logger(__name__)

DEFAULT_TITLE = "New Conversation"
DEFAULT_PREVIEW = "Start a new conversation..."
TITLE_LENGTH = 50
PREVIEW_LENGTH = 100
CURRENT_KEY = "current_conversation_id"

_ID_ALPHABET = string.ascii_lowercase + string.digits


def generate_id(prefix: str) -> str:
    """Ids look like ``conv_1718000000000_k3j9x0a2b``."""
    suffix = "".join(secrets.choice(_ID_ALPHABET) for _ in range(9))
    return f"{prefix}_{int(time.time() * 1000)}_{suffix}"


def truncate(text: str, limit: int) -> str:
    return text[:limit] + "..." if len(text) > limit else text


def _utcnow() -> datetime:
    return datetime.now(timezone.utc)


class ConversationStore:
    """
    Conversation CRUD on top of SQLAlchemy.

    One conversation is "current" at a time; operations that take an optional
    conversation_id fall back to it. Operations that need a conversation and
    find none return None without writing anything.
    """

    def __init__(
        self,
        session_factory: Callable[[], Session] = SessionLocal,
        clock: Callable[[], datetime] = _utcnow,
    ):
        self._sessions = session_factory
        self._clock = clock
        self._lock = threading.Lock()

    # ------------------------------------------------------------------
    # Conversations
    # ------------------------------------------------------------------

    def create_conversation(self, title: str | None = None) -> Conversation:
        conversation_id = generate_id("conv")
        now = self._now()
        with self._lock, self._sessions() as db:
            repository.insert_conversation(
                db, conversation_id, title or DEFAULT_TITLE, DEFAULT_PREVIEW, now
            )
            repository.set_state(db, CURRENT_KEY, conversation_id)
            db.commit()
            conversation = self._load(db, conversation_id)

        logger.info(
            "Conversation created",
            extra={"extra_fields": {"conversation_id": conversation_id}},
        )
        return conversation

    def switch_conversation(self, conversation_id: str) -> Conversation | None:
        with self._lock, self._sessions() as db:
            if repository.get_conversation_row(db, conversation_id) is None:
                return None
            repository.set_state(db, CURRENT_KEY, conversation_id)
            db.commit()
            return self._load(db, conversation_id)

    def current_conversation(self) -> Conversation | None:
        with self._sessions() as db:
            current_id = repository.get_state(db, CURRENT_KEY)
            return self._load(db, current_id) if current_id else None

    def list_conversations(self) -> list[Conversation]:
        """All conversations, newest first."""
        with self._sessions() as db:
            return [
                self._build(db, row) for row in repository.list_conversation_rows(db)
            ]

    def get_conversation(self, conversation_id: str) -> Conversation | None:
        with self._sessions() as db:
            return self._load(db, conversation_id)

    def delete_conversation(self, conversation_id: str) -> bool:
        with self._lock, self._sessions() as db:
            deleted = repository.delete_conversation_rows(db, conversation_id)
            if deleted and repository.get_state(db, CURRENT_KEY) == conversation_id:
                remaining = repository.list_conversation_rows(db)
                repository.set_state(db, CURRENT_KEY, remaining[0]["id"] if remaining else None)
            db.commit()
        return deleted

    def clear_all(self) -> None:
        with self._lock, self._sessions() as db:
            repository.delete_all_rows(db)
            db.commit()
        logger.info("All conversations cleared")

    # ------------------------------------------------------------------
    # Messages
    # ------------------------------------------------------------------

    def add_message(
        self,
        type: MessageType,
        content: str,
        search_results: list[SearchResult] | None = None,
        profile: PersonProfile | None = None,
        email: EmailDraft | None = None,
        conversation_id: str | None = None,
    ) -> ConversationMessage | None:
        """
        Append a message to the given (or current) conversation.

        Without a target a new conversation is started. Returns None when an
        explicit conversation_id does not exist.
        """
        if conversation_id is None and self.current_conversation() is None:
            conversation_id = self.create_conversation().id

        message = ConversationMessage(
            id=generate_id("msg"),
            type=MessageType(type),
            content=content,
            timestamp=self._clock(),
            search_results=list(search_results) if search_results is not None else None,
            profile=profile,
            email=email,
        )

        with self._lock, self._sessions() as db:
            target = self._resolve(db, conversation_id)
            if target is None:
                return None

            values: dict[str, Any] = {
                "preview": truncate(content, PREVIEW_LENGTH),
                "updated_at": self._now(),
            }
            if (
                message.type is MessageType.USER
                and repository.count_messages(db, target["id"]) == 0
            ):
                values["title"] = truncate(content, TITLE_LENGTH)

            repository.insert_message(db, target["id"], self._message_row(message))
            repository.update_conversation(db, target["id"], **values)
            db.commit()

        return message

    def update_profile(
        self, profile: PersonProfile, conversation_id: str | None = None
    ) -> Conversation | None:
        with self._lock, self._sessions() as db:
            target = self._resolve(db, conversation_id)
            if target is None:
                return None
            repository.update_conversation(
                db, target["id"], profile=profile.to_dict(), updated_at=self._now()
            )
            db.commit()
            return self._load(db, target["id"])

    # ------------------------------------------------------------------
    # Emails
    # ------------------------------------------------------------------

    def save_email(
        self, draft: EmailDraft, conversation_id: str | None = None
    ) -> Conversation | None:
        """Store a draft and note it in the chat as an assistant message."""
        message = ConversationMessage(
            id=generate_id("msg"),
            type=MessageType.ASSISTANT,
            content=f"📧 Email composed: {draft.subject}",
            timestamp=self._clock(),
            email=draft,
        )
        with self._lock, self._sessions() as db:
            target = self._resolve(db, conversation_id)
            if target is None:
                return None
            repository.insert_email(db, target["id"], draft.to_dict())
            repository.insert_message(db, target["id"], self._message_row(message))
            repository.update_conversation(
                db,
                target["id"],
                preview=f"📧 Email: {draft.subject}",
                updated_at=self._now(),
            )
            db.commit()
            return self._load(db, target["id"])

    def update_email(
        self,
        draft: EmailDraft,
        index: int | None = None,
        conversation_id: str | None = None,
    ) -> Conversation | None:
        """
        Replace the email at `index`, or the latest one when it is out of range.

        Messages that carried the replaced draft are refreshed to the new one.
        """
        with self._lock, self._sessions() as db:
            target = self._resolve(db, conversation_id)
            if target is None:
                return None
            stored = repository.list_email_rows(db, target["id"])
            if not stored:
                return None
            position = len(stored) - 1
            if index is not None and 0 <= index < len(stored):
                position = index

            previous_subject = stored[position]["draft"].get("subject")
            repository.replace_email(db, target["id"], position, draft.to_dict())
            for row in repository.list_message_rows(db, target["id"]):
                email = row.get("email")
                if email and email.get("subject") in (previous_subject, draft.subject):
                    repository.update_message_email(
                        db, row["id"], f"📧 Email composed: {draft.subject}", draft.to_dict()
                    )
            repository.update_conversation(db, target["id"], updated_at=self._now())
            db.commit()
            return self._load(db, target["id"])

    # ------------------------------------------------------------------
    # Helpers
    # ------------------------------------------------------------------

    def _now(self) -> str:
        return self._clock().isoformat()

    def _resolve(self, db: Session, conversation_id: str | None) -> dict[str, Any] | None:
        if conversation_id is None:
            conversation_id = repository.get_state(db, CURRENT_KEY)
            if conversation_id is None:
                return None
        return repository.get_conversation_row(db, conversation_id)

    def _load(self, db: Session, conversation_id: str) -> Conversation | None:
        row = repository.get_conversation_row(db, conversation_id)
        return self._build(db, row) if row else None

    def _build(self, db: Session, row: dict[str, Any]) -> Conversation:
        return Conversation(
            id=row["id"],
            title=row["title"],
            preview=row["preview"],
            created_at=datetime.fromisoformat(row["created_at"]),
            updated_at=datetime.fromisoformat(row["updated_at"]),
            messages=[
                self._message_from_row(m) for m in repository.list_message_rows(db, row["id"])
            ],
            profile=PersonProfile.from_dict(row["profile"]) if row["profile"] else None,
            emails=[
                EmailDraft.from_dict(e["draft"]) for e in repository.list_email_rows(db, row["id"])
            ],
        )

    @staticmethod
    def _message_row(message: ConversationMessage) -> dict[str, Any]:
        return {
            "id": message.id,
            "type": message.type.value,
            "content": message.content,
            "timestamp": message.timestamp.isoformat(),
            "search_results": (
                [r.to_dict() for r in message.search_results]
                if message.search_results is not None
                else None
            ),
            "profile": message.profile.to_dict() if message.profile else None,
            "email": message.email.to_dict() if message.email else None,
        }

    @staticmethod
    def _message_from_row(row: dict[str, Any]) -> ConversationMessage:
        return ConversationMessage(
            id=row["id"],
            type=MessageType(row["type"]),
            content=row["content"],
            timestamp=datetime.fromisoformat(row["timestamp"]),
            search_results=(
                [SearchResult.from_dict(r) for r in row["search_results"]]
                if row["search_results"] is not None
                else None
            ),
            profile=PersonProfile.from_dict(row["profile"]) if row["profile"] else None,
            email=EmailDraft.from_dict(row["email"]) if row["email"] else None,
        )
