"""Course catalog screen."""

from typing import Optional

from coursehub.client.api import ApiError, ConflictError
from coursehub.client.screens import Screen


class CatalogScreen(Screen):
    def __init__(self, client):
        super().__init__(client)
        self.loading = True
        self.courses: list[dict] = []
        self.enrolling: Optional[str] = None

    async def load(self) -> list[dict]:
        try:
            self.courses = await self.client.list_courses()
        except ApiError as e:
            self.courses = []
            self.notify("error", e.detail)
        self.loading = False
        return self.courses

    async def enroll(self, course_id: str) -> bool:
        if self.client.get_session() is None:
            self.notify("error", "Please sign in to enroll")
            return False
        if self.enrolling is not None:
            return False

        self.enrolling = course_id
        try:
            await self.client.enroll(course_id)
        except ConflictError:
            self.notify("error", "You're already enrolled in this course")
            return False
        except ApiError:
            self.notify("error", "Failed to enroll in course")
            return False
        finally:
            self.enrolling = None

        self.notify("success", "Successfully enrolled in course!")
        await self.load()
        return True
