"""Async HTTP client for the CourseHub API, used by the screen controllers."""

import logging
from typing import Any, Optional

import httpx

from coursehub.client.session import Session, SessionStore

logger = logging.getLogger(__name__)


class ApiError(Exception):
    status_code: Optional[int] = None

    def __init__(self, detail: str, status_code: Optional[int] = None):
        super().__init__(detail)
        self.detail = detail
        if status_code is not None:
            self.status_code = status_code


class AuthRequiredError(ApiError):
    status_code = 401


class ForbiddenError(ApiError):
    status_code = 403


class NotFoundError(ApiError):
    status_code = 404


class ConflictError(ApiError):
    status_code = 409


class ExternalServiceError(ApiError):
    """Network failure or a 5xx from the server or one of its upstreams."""


_STATUS_ERRORS = {
    401: AuthRequiredError,
    403: ForbiddenError,
    404: NotFoundError,
    409: ConflictError,
}


def _error_for(response: httpx.Response) -> ApiError:
    try:
        detail = response.json().get("detail", response.text)
    except ValueError:
        detail = response.text
    if not isinstance(detail, str):
        detail = str(detail)
    if response.status_code >= 500:
        return ExternalServiceError(detail, response.status_code)
    return _STATUS_ERRORS.get(response.status_code, ApiError)(detail, response.status_code)


class CourseHubClient:
    """Thin wrapper over the REST API.

    ``http`` must already point at the server (``base_url``); tests pass an
    ``httpx.AsyncClient`` over ``httpx.ASGITransport``.
    """

    def __init__(self, http: httpx.AsyncClient, sessions: Optional[SessionStore] = None):
        self.http = http
        self.sessions = sessions or SessionStore()

    async def _request(self, method: str, path: str, **kwargs) -> Any:
        headers = dict(kwargs.pop("headers", None) or {})
        session = self.sessions.get_session()
        if session is not None and "Authorization" not in headers:
            headers["Authorization"] = f"Bearer {session.access_token}"
        try:
            response = await self.http.request(method, path, headers=headers, **kwargs)
        except httpx.HTTPError as e:
            logger.warning("%s %s failed: %s", method, path, e)
            raise ExternalServiceError(f"Network error: {e}") from e
        if response.is_error:
            raise _error_for(response)
        if not response.content:
            return None
        try:
            return response.json()
        except ValueError as e:
            logger.warning("%s %s returned a non-JSON body", method, path)
            raise ExternalServiceError("Malformed response", response.status_code) from e

    # ── Session ──────────────────────────────────────────────────────────────

    def get_session(self) -> Optional[Session]:
        return self.sessions.get_session()

    async def sign_up(self, email: str, password: str, full_name: str = None, role: str = None) -> dict:
        return await self._request(
            "POST",
            "/api/auth/register",
            json={"email": email, "password": password, "full_name": full_name, "role": role},
        )

    async def sign_in(self, email: str, password: str) -> Session:
        token = await self._request("POST", "/api/auth/login", json={"email": email, "password": password})
        access_token = token["access_token"]
        user = await self._request(
            "GET", "/api/auth/me", headers={"Authorization": f"Bearer {access_token}"}
        )
        session = Session(access_token=access_token, user=user)
        self.sessions.set_session(session)
        return session

    def sign_out(self) -> None:
        self.sessions.sign_out()

    # ── Courses ──────────────────────────────────────────────────────────────

    async def list_courses(self) -> list[dict]:
        data = await self._request("GET", "/api/courses")
        return data["courses"]

    async def get_course(self, course_id: str) -> dict:
        return await self._request("GET", f"/api/courses/{course_id}")

    async def create_course(self, **fields) -> dict:
        return await self._request("POST", "/api/courses", json=fields)

    async def enroll(self, course_id: str) -> dict:
        return await self._request("POST", f"/api/courses/{course_id}/enroll")

    async def search_videos(self, query: str) -> list[dict]:
        data = await self._request("GET", "/api/videos/search", params={"q": query})
        return data["results"]

    async def dashboard(self) -> dict:
        return await self._request("GET", "/api/dashboard")

    # ── Quizzes ──────────────────────────────────────────────────────────────

    async def list_quizzes(self, course_id: str) -> dict:
        return await self._request("GET", f"/api/courses/{course_id}/quizzes")

    async def get_quiz(self, quiz_id: str) -> dict:
        return await self._request("GET", f"/api/quizzes/{quiz_id}")

    async def generate_quiz(
        self,
        course_title: str,
        course_description: str = "",
        number_of_questions: int = 5,
        difficulty: str = "medium",
    ) -> dict:
        return await self._request(
            "POST",
            "/api/quizzes/generate",
            json={
                "course_title": course_title,
                "course_description": course_description,
                "number_of_questions": number_of_questions,
                "difficulty": difficulty,
            },
        )

    async def create_quiz(
        self,
        course_id: str,
        title: str,
        description: str,
        passing_score: int,
        questions: list[dict],
    ) -> dict:
        return await self._request(
            "POST",
            f"/api/courses/{course_id}/quizzes",
            json={
                "title": title,
                "description": description,
                "passing_score": passing_score,
                "questions": questions,
            },
        )

    # ── Chat ─────────────────────────────────────────────────────────────────

    async def chat(
        self,
        message: str,
        course_id: str,
        video_title: str,
        conversation_history: list[dict],
    ) -> dict:
        return await self._request(
            "POST",
            "/api/chat",
            json={
                "message": message,
                "course_id": course_id,
                "video_title": video_title,
                "conversation_history": conversation_history,
            },
        )
