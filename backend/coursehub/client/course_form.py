"""Course creation screen with search-assisted prefill."""

import logging
from dataclasses import dataclass, asdict
from typing import Optional

from coursehub.client.api import ApiError
from coursehub.client.debounce import DebouncedTrigger
from coursehub.client.screens import Screen
from coursehub.services.youtube import is_valid_youtube_url

logger = logging.getLogger(__name__)

SEARCH_DELAY_SECONDS = 0.5


@dataclass
class CourseForm:
    title: str = ""
    description: str = ""
    category: str = ""
    difficulty: str = "medium"
    video_url: str = ""
    content: str = ""


class CourseFormScreen(Screen):
    def __init__(self, client, search_delay: float = SEARCH_DELAY_SECONDS):
        super().__init__(client)
        self.form = CourseForm()
        self.loading = False
        self.search_query = ""
        self.suggestions: list[dict] = []
        self.searching = False
        self.search_error: Optional[str] = None
        self._search = DebouncedTrigger(search_delay, self._run_search)

    # ── Submit ───────────────────────────────────────────────────────────────

    async def submit(self) -> bool:
        if self.loading:
            return False
        if self.client.get_session() is None:
            self.notify("error", "You must be logged in to create a course", title="Error")
            return False
        if self.form.video_url.strip() and not is_valid_youtube_url(self.form.video_url):
            self.notify("error", "Please enter a valid YouTube URL", title="Invalid URL")
            return False

        self.loading = True
        try:
            await self.client.create_course(**asdict(self.form))
        except ApiError as e:
            self.notify("error", e.detail, title="Error")
            return False
        finally:
            self.loading = False

        self.notify("success", "Course created successfully", title="Success")
        self.redirect = "/dashboard"
        return True

    # ── Search-assisted prefill ──────────────────────────────────────────────

    def on_search_input(self, text: str) -> None:
        self.search_query = text
        if not text.strip():
            self._search.cancel()
            self.suggestions = []
            return
        self._search.trigger(text)

    async def _run_search(self, query: str) -> None:
        self.searching = True
        self.search_error = None
        try:
            self.suggestions = await self.client.search_videos(query)
        except ApiError as e:
            logger.warning("Video search for %r failed: %s", query, e.detail)
            self.suggestions = []
            self.search_error = "Unable to search YouTube videos. Please try again."
            self.notify("error", self.search_error, title="Search Failed")
        finally:
            self.searching = False

    async def wait_for_search(self) -> None:
        await self._search.wait()

    def select_suggestion(self, video: dict) -> None:
        self.form.title = video.get("title", "")
        self.form.description = video.get("description", "")
        self.form.video_url = video["url"]
        self._search.cancel()
        self.suggestions = []
        self.search_query = ""

    def close(self) -> None:
        self._search.cancel()
