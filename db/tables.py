"""
SQLAlchemy table definitions for conversation history.

Tables are created on startup with init_db(); JSON columns hold the
serialized search results, profiles and email drafts.
"""

from sqlalchemy import (
    JSON,
    Column,
    Engine,
    ForeignKey,
    Integer,
    MetaData,
    String,
    Table,
    Text,
    UniqueConstraint,
)

from utils.logger import get_logger

logger = get_logger(__name__)

metadata = MetaData()

conversations = Table(
    "conversations",
    metadata,
    Column("seq", Integer, primary_key=True, autoincrement=True),
    Column("id", String(64), nullable=False, unique=True),
    Column("title", Text, nullable=False),
    Column("preview", Text, nullable=False),
    Column("profile", JSON, nullable=True),
    Column("created_at", String(40), nullable=False),
    Column("updated_at", String(40), nullable=False),
)

messages = Table(
    "messages",
    metadata,
    Column("seq", Integer, primary_key=True, autoincrement=True),
    Column("id", String(64), nullable=False, unique=True),
    Column(
        "conversation_id",
        String(64),
        ForeignKey("conversations.id", ondelete="CASCADE"),
        nullable=False,
        index=True,
    ),
    Column("type", String(16), nullable=False),
    Column("content", Text, nullable=False),
    Column("timestamp", String(40), nullable=False),
    Column("search_results", JSON, nullable=True),
    Column("profile", JSON, nullable=True),
    Column("email", JSON, nullable=True),
)

emails = Table(
    "emails",
    metadata,
    Column("seq", Integer, primary_key=True, autoincrement=True),
    Column(
        "conversation_id",
        String(64),
        ForeignKey("conversations.id", ondelete="CASCADE"),
        nullable=False,
        index=True,
    ),
    Column("position", Integer, nullable=False),
    Column("draft", JSON, nullable=False),
    UniqueConstraint("conversation_id", "position", name="uq_email_position"),
)

store_state = Table(
    "store_state",
    metadata,
    Column("key", String(64), primary_key=True),
    Column("value", Text, nullable=True),
)


def init_db(engine: Engine) -> None:
    """Create any missing tables."""
    metadata.create_all(engine)
    logger.info("Conversation tables ready", extra={"extra_fields": {"url": str(engine.url)}})
