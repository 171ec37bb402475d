"""Process-wide observable session value."""

from contextlib import contextmanager
from dataclasses import dataclass, field
from typing import Callable, Iterator, Optional


@dataclass
class Session:
    access_token: str
    user: dict = field(default_factory=dict)

    @property
    def user_id(self) -> Optional[str]:
        return self.user.get("id")

    @property
    def role(self) -> Optional[str]:
        return self.user.get("role")


Listener = Callable[[Optional[Session]], None]


class SessionStore:
    """Holds the current session and notifies subscribers when it changes.

    Screens read it; only sign-in and sign-out write it.
    """

    def __init__(self, session: Optional[Session] = None):
        self._session = session
        self._listeners: list[Listener] = []

    def get_session(self) -> Optional[Session]:
        return self._session

    def set_session(self, session: Optional[Session]) -> None:
        self._session = session
        for listener in list(self._listeners):
            listener(session)

    def sign_out(self) -> None:
        self.set_session(None)

    def subscribe(self, listener: Listener) -> Callable[[], None]:
        """Register ``listener``; the returned callable unsubscribes it."""
        self._listeners.append(listener)

        def unsubscribe() -> None:
            if listener in self._listeners:
                self._listeners.remove(listener)

        return unsubscribe

    @contextmanager
    def subscription(self, listener: Listener) -> Iterator[Optional[Session]]:
        """Subscribe for the duration of the block, yielding the current session."""
        unsubscribe = self.subscribe(listener)
        try:
            yield self._session
        finally:
            unsubscribe()

    @property
    def listener_count(self) -> int:
        return len(self._listeners)
