"""
Repository layer for conversation history.
CRUD functions using SQLAlchemy Core over the tables in db.tables.

Design principles:
- Functions do NOT commit - caller commits for transaction control
- Returns None (or False) when a row is missing
- Rows are returned as plain dicts
"""

from typing import Any

from sqlalchemy import delete, desc, func, insert, select, update
from sqlalchemy.orm import Session

from db.tables import conversations, emails, messages, store_state
from utils.logger import get_logger

logger = get_logger(__name__)


# ============================================================================
# CONVERSATIONS
# ============================================================================


def insert_conversation(
    db: Session, conversation_id: str, title: str, preview: str, timestamp: str
) -> None:
    db.execute(
        insert(conversations).values(
            id=conversation_id,
            title=title,
            preview=preview,
            profile=None,
            created_at=timestamp,
            updated_at=timestamp,
        )
    )


def get_conversation_row(db: Session, conversation_id: str) -> dict[str, Any] | None:
    row = db.execute(
        select(conversations).where(conversations.c.id == conversation_id)
    ).first()
    return dict(row._mapping) if row else None


def list_conversation_rows(db: Session) -> list[dict[str, Any]]:
    """All conversations, most recently created first."""
    rows = db.execute(select(conversations).order_by(desc(conversations.c.seq))).all()
    return [dict(row._mapping) for row in rows]


def update_conversation(db: Session, conversation_id: str, **values: Any) -> bool:
    result = db.execute(
        update(conversations).where(conversations.c.id == conversation_id).values(**values)
    )
    return result.rowcount > 0


def delete_conversation_rows(db: Session, conversation_id: str) -> bool:
    """Delete a conversation and its messages and emails."""
    db.execute(delete(messages).where(messages.c.conversation_id == conversation_id))
    db.execute(delete(emails).where(emails.c.conversation_id == conversation_id))
    result = db.execute(delete(conversations).where(conversations.c.id == conversation_id))
    return result.rowcount > 0


def delete_all_rows(db: Session) -> None:
    db.execute(delete(messages))
    db.execute(delete(emails))
    db.execute(delete(conversations))
    db.execute(delete(store_state))


# ============================================================================
# MESSAGES
# ============================================================================


def insert_message(db: Session, conversation_id: str, message: dict[str, Any]) -> None:
    db.execute(
        insert(messages).values(
            id=message["id"],
            conversation_id=conversation_id,
            type=message["type"],
            content=message["content"],
            timestamp=message["timestamp"],
            search_results=message.get("search_results"),
            profile=message.get("profile"),
            email=message.get("email"),
        )
    )


def list_message_rows(db: Session, conversation_id: str) -> list[dict[str, Any]]:
    """Messages of a conversation in insertion order."""
    rows = db.execute(
        select(messages)
        .where(messages.c.conversation_id == conversation_id)
        .order_by(messages.c.seq)
    ).all()
    return [dict(row._mapping) for row in rows]


def count_messages(db: Session, conversation_id: str) -> int:
    return db.execute(
        select(func.count())
        .select_from(messages)
        .where(messages.c.conversation_id == conversation_id)
    ).scalar_one()


def update_message_email(
    db: Session, message_id: str, content: str, email: dict[str, Any]
) -> None:
    db.execute(
        update(messages).where(messages.c.id == message_id).values(content=content, email=email)
    )


# ============================================================================
# EMAILS
# ============================================================================


def insert_email(db: Session, conversation_id: str, draft: dict[str, Any]) -> int:
    """Append a draft to the conversation's email list and return its position."""
    position = db.execute(
        select(func.count()).select_from(emails).where(emails.c.conversation_id == conversation_id)
    ).scalar_one()
    db.execute(
        insert(emails).values(conversation_id=conversation_id, position=position, draft=draft)
    )
    return position


def list_email_rows(db: Session, conversation_id: str) -> list[dict[str, Any]]:
    rows = db.execute(
        select(emails)
        .where(emails.c.conversation_id == conversation_id)
        .order_by(emails.c.position)
    ).all()
    return [dict(row._mapping) for row in rows]


def replace_email(db: Session, conversation_id: str, position: int, draft: dict[str, Any]) -> bool:
    result = db.execute(
        update(emails)
        .where(emails.c.conversation_id == conversation_id)
        .where(emails.c.position == position)
        .values(draft=draft)
    )
    return result.rowcount > 0


# ============================================================================
# STORE STATE
# ============================================================================


def get_state(db: Session, key: str) -> str | None:
    return db.execute(select(store_state.c.value).where(store_state.c.key == key)).scalar()


def set_state(db: Session, key: str, value: str | None) -> None:
    updated = db.execute(update(store_state).where(store_state.c.key == key).values(value=value))
    if updated.rowcount == 0:
        db.execute(insert(store_state).values(key=key, value=value))
