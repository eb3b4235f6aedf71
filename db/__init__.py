"""
Database package for ScoutMail.
Provides the SQLAlchemy engine, session factory, table definitions and repository functions.
"""

from db.engine import create_db_engine, get_engine
from db.repository import (
    count_messages,
    delete_all_rows,
    delete_conversation_rows,
    get_conversation_row,
    get_state,
    insert_conversation,
    insert_email,
    insert_message,
    list_conversation_rows,
    list_email_rows,
    list_message_rows,
    replace_email,
    set_state,
    update_conversation,
    update_message_email,
)
from db.session import SessionLocal
from db.tables import init_db, metadata

__all__ = [
    "SessionLocal",
    "count_messages",
    "create_db_engine",
    "delete_all_rows",
    "delete_conversation_rows",
    "get_conversation_row",
    "get_engine",
    "get_state",
    "init_db",
    "insert_conversation",
    "insert_email",
    "insert_message",
    "list_conversation_rows",
    "list_email_rows",
    "list_message_rows",
    "metadata",
    "replace_email",
    "set_state",
    "update_conversation",
    "update_message_email",
]
