"""Thread-safe registry of mailbox linking flows awaiting provider completion."""

import secrets
import threading
import time
from dataclasses import dataclass, field
from typing import Callable

from models.errors import UnknownConnectionError
from models.mailbox import ConnectionState


@dataclass
class PendingConnection:
    state: str
    user_email: str
    created_at: float
    connection_id: str | None = None
    redirect_url: str | None = None
    status: ConnectionState = ConnectionState.PENDING
    connected_account_id: str | None = None
    error: str | None = None
    done: threading.Event = field(default_factory=threading.Event, repr=False)


class PendingConnectionRegistry:
    """
    Correlates provider callbacks with the linking flow that started them.

    Every flow gets an unguessable state token. The provider callback resolves
    the flow and sets its event, which is what waiters block on. Flows left
    pending longer than timeout_seconds report EXPIRED.
    """

    def __init__(self, timeout_seconds: float = 300, clock: Callable[[], float] = time.monotonic):
        self._lock = threading.Lock()
        self._flows: dict[str, PendingConnection] = {}
        self._timeout = timeout_seconds
        self._clock = clock

    @property
    def timeout_seconds(self) -> float:
        return self._timeout

    def register(self, user_email: str) -> PendingConnection:
        flow = PendingConnection(
            state=secrets.token_urlsafe(16), user_email=user_email, created_at=self._clock()
        )
        with self._lock:
            self._purge_expired()
            self._flows[flow.state] = flow
        return flow

    def attach(self, state: str, connection_id: str | None, redirect_url: str | None) -> None:
        with self._lock:
            flow = self._require(state)
            flow.connection_id = connection_id
            flow.redirect_url = redirect_url

    def get(self, state: str) -> PendingConnection:
        """
        Raises:
            UnknownConnectionError: for unknown or purged state tokens
        """
        with self._lock:
            flow = self._require(state)
            self._expire_if_stale(flow)
            return flow

    def resolve(
        self,
        state: str,
        succeeded: bool,
        connected_account_id: str | None = None,
        error: str | None = None,
    ) -> PendingConnection:
        with self._lock:
            flow = self._require(state)
            self._expire_if_stale(flow)
            if flow.status is ConnectionState.PENDING:
                flow.status = ConnectionState.CONNECTED if succeeded else ConnectionState.FAILED
                flow.connected_account_id = connected_account_id
                flow.error = error
            flow.done.set()
            return flow

    def wait(self, state: str, timeout: float) -> PendingConnection:
        """Block until the flow resolves, expires, or `timeout` seconds pass."""
        flow = self.get(state)
        if flow.status is ConnectionState.PENDING:
            remaining = self._timeout - (self._clock() - flow.created_at)
            flow.done.wait(max(0.0, min(timeout, remaining)))
        return self.get(state)

    def discard(self, state: str) -> None:
        with self._lock:
            self._flows.pop(state, None)

    def __len__(self) -> int:
        with self._lock:
            return len(self._flows)

    def _require(self, state: str) -> PendingConnection:
        flow = self._flows.get(state)
        if flow is None:
            raise UnknownConnectionError(f"Unknown connection state: {state}")
        return flow

    def _expire_if_stale(self, flow: PendingConnection) -> None:
        if (
            flow.status is ConnectionState.PENDING
            and self._clock() - flow.created_at >= self._timeout
        ):
            flow.status = ConnectionState.EXPIRED
            flow.error = "Connection timeout. Please try again."
            flow.done.set()

    def _purge_expired(self) -> None:
        # Resolved flows are kept one extra timeout window so late waiters can read them
        horizon = self._clock() - 2 * self._timeout
        stale = [s for s, f in self._flows.items() if f.created_at < horizon]
        for state in stale:
            del self._flows[state]
