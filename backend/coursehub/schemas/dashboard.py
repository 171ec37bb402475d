"""Dashboard (role gate) response schemas."""

from typing import Literal, Optional
from pydantic import BaseModel


class EnrolledCourse(BaseModel):
    enrollment_id: str
    course_id: str
    title: str
    description: Optional[str] = None
    progress: int


class BadgeResponse(BaseModel):
    id: str
    badge_type: str
    label: str
    earned_at: str


class StudentStats(BaseModel):
    enrolled_courses: int
    badges_earned: int
    streak_days: int
    average_progress: int


class StudentDashboard(BaseModel):
    full_name: Optional[str] = None
    stats: StudentStats
    enrollments: list[EnrolledCourse]
    badges: list[BadgeResponse]


class TeacherCourse(BaseModel):
    id: str
    title: str
    description: Optional[str] = None
    difficulty: str
    enrollment_count: int
    quiz_count: int


class TeacherStats(BaseModel):
    total_courses: int
    total_students: int
    total_quizzes: int


class TeacherDashboard(BaseModel):
    full_name: Optional[str] = None
    stats: TeacherStats
    courses: list[TeacherCourse]


class DashboardResponse(BaseModel):
    view: Literal["student", "teacher", "no_role"]
    student: Optional[StudentDashboard] = None
    teacher: Optional[TeacherDashboard] = None
