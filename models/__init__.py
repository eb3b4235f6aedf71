"""
Domain models shared by the search pipeline, the mail tools and the HTTP layer.
"""

from .conversation import Conversation, ConversationMessage, MessageType
from .email import EmailDraft, EmailType, SendResult
from .mailbox import (
    ConnectedAccount,
    ConnectionRequest,
    ConnectionState,
    ConnectionStatus,
    MailboxOverview,
)
from .search import (
    AggregatedResults,
    PersonProfile,
    ProfileLinks,
    SearchDebug,
    SearchOutcome,
    SearchResult,
    SearchSource,
)

__all__ = [
    "AggregatedResults",
    "ConnectedAccount",
    "ConnectionRequest",
    "ConnectionState",
    "ConnectionStatus",
    "Conversation",
    "ConversationMessage",
    "EmailDraft",
    "EmailType",
    "MailboxOverview",
    "MessageType",
    "PersonProfile",
    "ProfileLinks",
    "SearchDebug",
    "SearchOutcome",
    "SearchResult",
    "SearchSource",
    "SendResult",
]
