"""Dashboard screen: the session and role gate."""

from enum import Enum
from typing import Optional

from coursehub.client.api import ApiError, AuthRequiredError
from coursehub.client.screens import Screen


class RoleState(str, Enum):
    LOADING = "loading"
    UNAUTHENTICATED = "unauthenticated"
    STUDENT = "student"
    TEACHER = "teacher"
    NO_ROLE = "no_role"
    ERROR = "error"


class DashboardScreen(Screen):
    def __init__(self, client):
        super().__init__(client)
        self.state = RoleState.LOADING
        self.data: Optional[dict] = None

    async def load(self) -> RoleState:
        if self.client.get_session() is None:
            self.state = RoleState.UNAUTHENTICATED
            self.redirect = "/auth"
            return self.state

        try:
            result = await self.client.dashboard()
        except AuthRequiredError:
            self.state = RoleState.UNAUTHENTICATED
            self.redirect = "/auth"
            return self.state
        except ApiError as e:
            self.state = RoleState.ERROR
            self.notify("error", e.detail)
            return self.state

        self.state = RoleState(result["view"])
        self.data = result.get(result["view"])
        return self.state
