"""
Process-wide auth session.

Holds the current identity, emits SIGNED_IN / SIGNED_OUT to subscribers, and
exposes the session read-only. Lifecycle:

    auth = init_auth_session(client)   # on startup
    unsubscribe = auth.subscribe(cb)
    ...
    shutdown_auth_session()            # on shutdown (drops all subscribers)
"""

import enum
import logging
from dataclasses import dataclass
from typing import Callable, List, Optional

from questify.workflow.errors import ServiceError

log = logging.getLogger(__name__)


class AuthEvent(str, enum.Enum):
    SIGNED_IN = "SIGNED_IN"
    SIGNED_OUT = "SIGNED_OUT"


@dataclass(frozen=True)
class Session:
    user_id: int
    email: str
    access_token: str
    refresh_token: Optional[str] = None

    @classmethod
    def from_response(cls, data: dict) -> "Session":
        return cls(
            user_id=data["user"]["id"],
            email=data["user"]["email"],
            access_token=data["access_token"],
            refresh_token=data.get("refresh_token"),
        )


AuthListener = Callable[[AuthEvent, Optional[Session]], None]


class AuthSession:
    def __init__(self, client):
        self._client = client
        self._session: Optional[Session] = None
        self._listeners: List[AuthListener] = []

    @property
    def current(self) -> Optional[Session]:
        return self._session

    def subscribe(self, listener: AuthListener) -> Callable[[], None]:
        """Register a listener; returns a function that removes it."""
        self._listeners.append(listener)

        def unsubscribe() -> None:
            if listener in self._listeners:
                self._listeners.remove(listener)

        return unsubscribe

    def _emit(self, event: AuthEvent) -> None:
        for listener in list(self._listeners):
            listener(event, self._session)

    def _open(self, data: dict) -> Session:
        self._session = Session.from_response(data)
        log.info("[AUTH] Signed in as %s", self._session.email)
        self._emit(AuthEvent.SIGNED_IN)
        return self._session

    async def sign_in(self, email: str, password: str) -> Session:
        return self._open(await self._client.sign_in(email, password))

    async def sign_up(self, email: str, password: str) -> Session:
        """Create the account; the server returns a live session straight away."""
        return self._open(await self._client.sign_up(email, password))

    async def sign_out(self) -> None:
        """Revoke server-side when possible; the local session is always cleared."""
        session = self._session
        if session is None:
            return
        try:
            await self._client.sign_out(session.access_token)
        except ServiceError as e:
            log.warning("[AUTH] Server-side sign-out failed: %s", e.message)
        self._session = None
        log.info("[AUTH] Signed out %s", session.email)
        self._emit(AuthEvent.SIGNED_OUT)

    def close(self) -> None:
        self._listeners.clear()


# Lazy singleton
_auth: Optional[AuthSession] = None


def init_auth_session(client) -> AuthSession:
    global _auth
    if _auth is None:
        _auth = AuthSession(client)
    return _auth


def get_auth_session() -> AuthSession:
    if _auth is None:
        raise RuntimeError("Auth session not initialised. Call init_auth_session() first.")
    return _auth


def shutdown_auth_session() -> None:
    global _auth
    if _auth is not None:
        _auth.close()
        _auth = None
