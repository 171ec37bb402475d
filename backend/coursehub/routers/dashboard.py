"""Dashboard router — branches on the signed-in profile's role."""

import math

from fastapi import APIRouter, Depends
from sqlalchemy import func
from sqlalchemy.orm import Session, joinedload

from coursehub.database import get_db
from coursehub.models.profile import Profile
from coursehub.models.course import Course
from coursehub.models.enrollment import Enrollment
from coursehub.models.badge import Badge
from coursehub.models.quiz import Quiz
from coursehub.schemas.dashboard import (
    DashboardResponse,
    StudentDashboard,
    StudentStats,
    EnrolledCourse,
    BadgeResponse,
    TeacherDashboard,
    TeacherStats,
    TeacherCourse,
)
from coursehub.middleware.auth import get_current_user
from coursehub.routers.courses import enrollment_counts

router = APIRouter(prefix="/api/dashboard", tags=["dashboard"])


def average_progress(progress_values: list[int]) -> int:
    """Mean progress rounded half up, 0 with no enrollments."""
    if not progress_values:
        return 0
    return math.floor(sum(progress_values) / len(progress_values) + 0.5)


def badge_label(badge_type: str) -> str:
    return badge_type.replace("_", " ")


def build_student_dashboard(db: Session, profile: Profile) -> StudentDashboard:
    enrollments = (
        db.query(Enrollment)
        .options(joinedload(Enrollment.course))
        .filter(Enrollment.student_id == profile.id)
        .order_by(Enrollment.enrolled_at.desc())
        .all()
    )
    badges = (
        db.query(Badge)
        .filter(Badge.student_id == profile.id)
        .order_by(Badge.earned_at)
        .all()
    )
    return StudentDashboard(
        full_name=profile.full_name,
        stats=StudentStats(
            enrolled_courses=len(enrollments),
            badges_earned=len(badges),
            streak_days=profile.streak_count or 0,
            average_progress=average_progress([e.progress or 0 for e in enrollments]),
        ),
        enrollments=[
            EnrolledCourse(
                enrollment_id=e.id,
                course_id=e.course_id,
                title=e.course.title if e.course else "Untitled course",
                description=e.course.description if e.course else None,
                progress=e.progress or 0,
            )
            for e in enrollments
        ],
        badges=[
            BadgeResponse(
                id=b.id,
                badge_type=b.badge_type,
                label=badge_label(b.badge_type),
                earned_at=b.earned_at.isoformat(),
            )
            for b in badges
        ],
    )


def build_teacher_dashboard(db: Session, profile: Profile) -> TeacherDashboard:
    students = enrollment_counts(db)
    quizzes = (
        db.query(Quiz.course_id.label("course_id"), func.count(Quiz.id).label("n"))
        .group_by(Quiz.course_id)
        .subquery()
    )
    rows = (
        db.query(Course, students.c.n, quizzes.c.n)
        .outerjoin(students, students.c.course_id == Course.id)
        .outerjoin(quizzes, quizzes.c.course_id == Course.id)
        .filter(Course.teacher_id == profile.id)
        .order_by(Course.created_at.desc())
        .all()
    )
    courses = [
        TeacherCourse(
            id=course.id,
            title=course.title,
            description=course.description,
            difficulty=course.difficulty,
            enrollment_count=n_students or 0,
            quiz_count=n_quizzes or 0,
        )
        for course, n_students, n_quizzes in rows
    ]
    return TeacherDashboard(
        full_name=profile.full_name,
        stats=TeacherStats(
            total_courses=len(courses),
            total_students=sum(c.enrollment_count for c in courses),
            total_quizzes=sum(c.quiz_count for c in courses),
        ),
        courses=courses,
    )


@router.get("", response_model=DashboardResponse)
def get_dashboard(
    db: Session = Depends(get_db),
    current_user: Profile = Depends(get_current_user),
):
    """Student view, teacher view, or an explicit no-role state."""
    if current_user.role == "student":
        return DashboardResponse(view="student", student=build_student_dashboard(db, current_user))
    if current_user.role == "teacher":
        return DashboardResponse(view="teacher", teacher=build_teacher_dashboard(db, current_user))
    return DashboardResponse(view="no_role")
