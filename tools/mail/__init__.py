"""Email composition, dispatch and mailbox linking for ScoutMail."""

from .composer import EmailComposer
from .connector import MailboxConnector
from .factory import (
    create_composer_from_env,
    create_connector_from_env,
    create_sender_from_env,
    get_pending_registry,
)
from .pending import PendingConnection, PendingConnectionRegistry
from .sender import EmailSender

__all__ = [
    "EmailComposer",
    "EmailSender",
    "MailboxConnector",
    "PendingConnection",
    "PendingConnectionRegistry",
    "create_composer_from_env",
    "create_connector_from_env",
    "create_sender_from_env",
    "get_pending_registry",
]
