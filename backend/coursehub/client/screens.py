"""Shared screen plumbing: toasts and the navigation shell."""

from dataclasses import dataclass
from typing import Optional

from coursehub.client.api import CourseHubClient
from coursehub.client.session import Session


@dataclass
class Toast:
    level: str  # "success" | "error"
    message: str
    title: Optional[str] = None


class Screen:
    """Base for screen controllers: holds the API client, toasts and redirects."""

    def __init__(self, client: CourseHubClient):
        self.client = client
        self.toasts: list[Toast] = []
        self.redirect: Optional[str] = None

    def notify(self, level: str, message: str, title: Optional[str] = None) -> None:
        self.toasts.append(Toast(level=level, message=message, title=title))

    @property
    def last_toast(self) -> Optional[Toast]:
        return self.toasts[-1] if self.toasts else None


class Navbar(Screen):
    """Session-aware navigation shell.

    Use as a context manager: the session subscription lives exactly as long
    as the ``with`` block.
    """

    def __init__(self, client: CourseHubClient):
        super().__init__(client)
        self.user: Optional[dict] = None
        self._unsubscribe = None

    def _on_session_change(self, session: Optional[Session]) -> None:
        self.user = session.user if session else None

    def __enter__(self) -> "Navbar":
        session = self.client.get_session()
        self.user = session.user if session else None
        self._unsubscribe = self.client.sessions.subscribe(self._on_session_change)
        return self

    def __exit__(self, *exc) -> None:
        if self._unsubscribe is not None:
            self._unsubscribe()
            self._unsubscribe = None

    @property
    def signed_in(self) -> bool:
        return self.user is not None

    @property
    def links(self) -> list[str]:
        links = ["/", "/courses"]
        if self.signed_in:
            links.append("/dashboard")
        return links

    @property
    def actions(self) -> list[str]:
        return ["dashboard", "sign_out"] if self.signed_in else ["sign_in", "get_started"]

    def sign_out(self) -> None:
        self.client.sign_out()
        self.notify("success", "Signed out successfully")
        self.redirect = "/"
