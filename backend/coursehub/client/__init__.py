"""Screen controllers and API client for CourseHub front ends."""

from coursehub.client.api import (
    ApiError,
    AuthRequiredError,
    ForbiddenError,
    NotFoundError,
    ConflictError,
    ExternalServiceError,
    CourseHubClient,
)
from coursehub.client.session import Session, SessionStore
from coursehub.client.screens import Navbar, Toast
from coursehub.client.dashboard import DashboardScreen, RoleState
from coursehub.client.catalog import CatalogScreen
from coursehub.client.course_form import CourseForm, CourseFormScreen
from coursehub.client.quizzes import DraftQuestion, QuizDraft, QuizAuthoringScreen
from coursehub.client.player import ChatMessage, ChatWidget, VideoPlayerScreen

__all__ = [
    "ApiError",
    "AuthRequiredError",
    "ForbiddenError",
    "NotFoundError",
    "ConflictError",
    "ExternalServiceError",
    "CourseHubClient",
    "Session",
    "SessionStore",
    "Navbar",
    "Toast",
    "DashboardScreen",
    "RoleState",
    "CatalogScreen",
    "CourseForm",
    "CourseFormScreen",
    "DraftQuestion",
    "QuizDraft",
    "QuizAuthoringScreen",
    "ChatMessage",
    "ChatWidget",
    "VideoPlayerScreen",
]
