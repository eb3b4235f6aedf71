from dataclasses import dataclass, field
from enum import Enum
from typing import Any


class ConnectionState(str, Enum):
    PENDING = "pending"
    CONNECTED = "connected"
    FAILED = "failed"
    EXPIRED = "expired"


@dataclass(frozen=True)
class ConnectedAccount:
    id: str
    toolkit: str
    status: str = "ACTIVE"

    @property
    def is_gmail(self) -> bool:
        return "gmail" in (self.toolkit or "").lower()

    def to_dict(self) -> dict[str, Any]:
        return {"id": self.id, "appName": self.toolkit, "status": self.status}


@dataclass(frozen=True)
class ConnectionRequest:
    """Provider response to a linking request."""

    redirect_url: str | None
    connection_id: str | None = None


@dataclass(frozen=True)
class ConnectionStatus:
    user_email: str
    connected: bool
    already_connected: bool = False
    redirect_url: str | None = None
    state: str | None = None
    connected_account: ConnectedAccount | None = None
    message: str | None = None


@dataclass(frozen=True)
class MailboxOverview:
    user_email: str
    accounts: list[ConnectedAccount] = field(default_factory=list)

    @property
    def has_gmail_connection(self) -> bool:
        return any(account.is_gmail for account in self.accounts)
