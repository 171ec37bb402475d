"""Courses router — catalog, course detail, course creation and enrollment."""

import logging
from typing import Optional

from fastapi import APIRouter, Depends, HTTPException
from sqlalchemy import func
from sqlalchemy.exc import IntegrityError, SQLAlchemyError
from sqlalchemy.orm import Session, joinedload

from coursehub.database import get_db
from coursehub.models.profile import Profile
from coursehub.models.course import Course
from coursehub.models.enrollment import Enrollment
from coursehub.schemas.course import (
    CourseCreate,
    CourseResponse,
    CourseListResponse,
    CourseDetailResponse,
    EnrollmentResponse,
)
from coursehub.middleware.auth import get_optional_user
from coursehub.services.youtube import is_valid_youtube_url, extract_video_id, embed_url

logger = logging.getLogger(__name__)

router = APIRouter(prefix="/api/courses", tags=["courses"])

INSTRUCTOR_FALLBACK = "Instructor"


def instructor_name(course: Course) -> str:
    if course.teacher and course.teacher.full_name:
        return course.teacher.full_name
    return INSTRUCTOR_FALLBACK


def _course_to_response(course: Course, enrollment_count: int = 0) -> CourseResponse:
    return CourseResponse(
        id=course.id,
        teacher_id=course.teacher_id,
        title=course.title,
        description=course.description,
        category=course.category,
        difficulty=course.difficulty,
        video_url=course.video_url,
        content=course.content,
        instructor_name=instructor_name(course),
        enrollment_count=enrollment_count or 0,
        created_at=course.created_at.isoformat(),
    )


def enrollment_counts(db: Session):
    """Subquery of (course_id, n) over the enrollments table."""
    return (
        db.query(Enrollment.course_id.label("course_id"), func.count(Enrollment.id).label("n"))
        .group_by(Enrollment.course_id)
        .subquery()
    )


@router.get("", response_model=CourseListResponse)
def list_courses(db: Session = Depends(get_db)):
    """List every course, newest first, with instructor name and enrollment count."""
    counts = enrollment_counts(db)
    rows = (
        db.query(Course, counts.c.n)
        .outerjoin(counts, counts.c.course_id == Course.id)
        .options(joinedload(Course.teacher))
        .order_by(Course.created_at.desc())
        .all()
    )
    return CourseListResponse(
        courses=[_course_to_response(course, n) for course, n in rows],
        total=len(rows),
    )


@router.get("/{course_id}", response_model=CourseDetailResponse)
def get_course(course_id: str, db: Session = Depends(get_db)):
    """One course for the video player. Unknown ids are 404."""
    course = (
        db.query(Course)
        .options(joinedload(Course.teacher))
        .filter(Course.id == course_id)
        .first()
    )
    if not course:
        raise HTTPException(status_code=404, detail="Course not found")

    count = db.query(func.count(Enrollment.id)).filter(Enrollment.course_id == course_id).scalar()
    video_id = extract_video_id(course.video_url)
    return CourseDetailResponse(
        **_course_to_response(course, count).model_dump(),
        video_id=video_id,
        embed_url=embed_url(video_id),
    )


@router.post("", response_model=CourseResponse, status_code=201)
def create_course(
    req: CourseCreate,
    db: Session = Depends(get_db),
    current_user: Optional[Profile] = Depends(get_optional_user),
):
    """Create a course owned by the signed-in teacher."""
    if current_user is None:
        raise HTTPException(status_code=401, detail="You must be logged in to create a course")
    if current_user.role != "teacher":
        raise HTTPException(status_code=403, detail="Only teachers can create courses")

    # Blank means no video; anything else is validated as typed
    video_url = req.video_url if req.video_url and req.video_url.strip() else None
    if video_url and not is_valid_youtube_url(video_url):
        raise HTTPException(status_code=400, detail="Please enter a valid YouTube URL")

    course = Course(
        teacher_id=current_user.id,
        title=req.title,
        description=req.description,
        category=req.category,
        difficulty=req.difficulty,
        video_url=video_url,
        content=req.content,
    )
    db.add(course)
    db.commit()
    db.refresh(course)
    logger.info("Teacher %s created course %s", current_user.id, course.id)
    return _course_to_response(course)


@router.post("/{course_id}/enroll", response_model=EnrollmentResponse, status_code=201)
def enroll(
    course_id: str,
    db: Session = Depends(get_db),
    current_user: Optional[Profile] = Depends(get_optional_user),
):
    """Enroll the signed-in user. The unique constraint is the duplicate guard."""
    if current_user is None:
        raise HTTPException(status_code=401, detail="Please sign in to enroll")
    if not db.query(Course.id).filter(Course.id == course_id).first():
        raise HTTPException(status_code=404, detail="Course not found")

    enrollment = Enrollment(student_id=current_user.id, course_id=course_id)
    db.add(enrollment)
    try:
        db.commit()
    except IntegrityError:
        db.rollback()
        raise HTTPException(status_code=409, detail="You're already enrolled in this course")
    except SQLAlchemyError:
        db.rollback()
        logger.exception("Enrollment of %s in %s failed", current_user.id, course_id)
        raise HTTPException(status_code=500, detail="Failed to enroll in course")

    db.refresh(enrollment)
    logger.info("Profile %s enrolled in course %s", current_user.id, course_id)
    return EnrollmentResponse(
        id=enrollment.id,
        student_id=enrollment.student_id,
        course_id=enrollment.course_id,
        progress=enrollment.progress,
        enrolled_at=enrollment.enrolled_at.isoformat(),
    )
