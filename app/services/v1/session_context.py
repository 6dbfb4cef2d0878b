# app/services/v1/session_context.py
"""
Process-wide session state.

One ``SessionContext`` is created in the application lifespan and handed to
the identity service through a dependency. It owns the single subscription
channel for session changes and keeps track of session lookups that are in
flight. Signing a session out marks that session's pending lookups stale, so
a lookup that straddles its own sign-out drops its result. Other sessions of
the same user are unaffected.
"""

from contextlib import contextmanager
from dataclasses import dataclass
from enum import Enum
from typing import Callable, Iterator, Optional

from common.logger import get_app_logger
from app.db.schemas import UserIdentity

logger = get_app_logger(__name__)


class SessionEvent(str, Enum):
    SIGNED_IN = "signed_in"
    SIGNED_OUT = "signed_out"
    USER_REGISTERED = "user_registered"


@dataclass(frozen=True)
class SessionChange:
    event: SessionEvent
    user_id: str
    user: Optional[UserIdentity] = None
    session_id: Optional[str] = None


@dataclass(eq=False)
class SessionLookup:
    session_id: str
    stale: bool = False


SessionObserver = Callable[[SessionChange], None]


class SessionContext:
    def __init__(self) -> None:
        self._observers: list[SessionObserver] = []
        self._lookups: dict[str, set[SessionLookup]] = {}
        self._closed = False

    @property
    def closed(self) -> bool:
        return self._closed

    def subscribe(self, observer: SessionObserver) -> Callable[[], None]:
        """
        Register an observer for every later session change.

        Returns:
            A callable that removes the observer again
        """
        self._observers.append(observer)

        def unsubscribe() -> None:
            if observer in self._observers:
                self._observers.remove(observer)

        return unsubscribe

    @contextmanager
    def track(self, session_id: str) -> Iterator[SessionLookup]:
        """
        Watch one session for the duration of a lookup.

        The yielded ``SessionLookup`` turns stale if that session signs out
        before the block exits. Only sessions with a lookup in flight are held.
        """
        lookup = SessionLookup(session_id)
        self._lookups.setdefault(session_id, set()).add(lookup)
        try:
            yield lookup
        finally:
            pending = self._lookups.get(session_id)
            if pending is not None:
                pending.discard(lookup)
                if not pending:
                    del self._lookups[session_id]

    def publish(self, change: SessionChange) -> None:
        if self._closed:
            logger.warning(
                "Session change after shutdown ignored", session_event=change.event.value
            )
            return

        if change.event is SessionEvent.SIGNED_OUT and change.session_id is not None:
            for lookup in self._lookups.pop(change.session_id, ()):
                lookup.stale = True

        for observer in list(self._observers):
            try:
                observer(change)
            except Exception:
                logger.exception(
                    "Session observer failed",
                    session_event=change.event.value,
                    user_id=change.user_id,
                )

    def close(self) -> None:
        self._observers.clear()
        self._lookups.clear()
        self._closed = True


def log_session_change(change: SessionChange) -> None:
    """Default observer wired at startup."""
    logger.info(
        "Session changed", session_event=change.event.value, user_id=change.user_id
    )


__all__ = [
    "SessionEvent",
    "SessionChange",
    "SessionLookup",
    "SessionObserver",
    "SessionContext",
    "log_session_change",
]
