"""SQLAlchemy ORM models."""

from coursehub.models.profile import Profile
from coursehub.models.course import Course
from coursehub.models.enrollment import Enrollment
from coursehub.models.badge import Badge
from coursehub.models.quiz import Quiz, QuizQuestion

__all__ = [
    "Profile",
    "Course",
    "Enrollment",
    "Badge",
    "Quiz",
    "QuizQuestion",
]
