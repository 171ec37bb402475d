"""Quizzes router — per-course quiz listing, authoring and AI generation."""

import logging
from typing import Optional

from fastapi import APIRouter, Depends, HTTPException, Request
from sqlalchemy import func
from sqlalchemy.exc import SQLAlchemyError
from sqlalchemy.orm import Session

from coursehub.config import settings
from coursehub.database import get_db
from coursehub.models.profile import Profile
from coursehub.models.course import Course
from coursehub.models.quiz import Quiz, QuizQuestion
from coursehub.schemas.quiz import (
    QuestionIn,
    QuizCreate,
    QuizResponse,
    QuizDetailResponse,
    QuestionResponse,
    CourseQuizzesResponse,
    QuizGenerateRequest,
    QuizGenerateResponse,
)
from coursehub.middleware.auth import get_optional_user, require_teacher
from coursehub.middleware.rate_limit import limiter
from coursehub.services.ai_client import AIServiceError
from coursehub.services.quiz_generator import generate_questions, QuizGenerationError

logger = logging.getLogger(__name__)

router = APIRouter(prefix="/api", tags=["quizzes"])


def _quiz_to_response(quiz: Quiz, question_count: int = 0) -> QuizResponse:
    return QuizResponse(
        id=quiz.id,
        course_id=quiz.course_id,
        title=quiz.title,
        description=quiz.description,
        passing_score=quiz.passing_score,
        question_count=question_count or 0,
        created_at=quiz.created_at.isoformat(),
    )


def non_blank_questions(questions: list[QuestionIn]) -> list[QuestionIn]:
    """Drop questions whose text is blank, keeping the others in order."""
    return [q for q in questions if q.question.strip()]


def _question_rows(quiz_id: str, questions: list[QuestionIn]) -> list[QuizQuestion]:
    return [
        QuizQuestion(
            quiz_id=quiz_id,
            position=i,
            question=q.question,
            options=q.options,
            correct_answer=q.correct_answer,
            points=q.points,
        )
        for i, q in enumerate(non_blank_questions(questions))
    ]


def _get_course_or_404(db: Session, course_id: str) -> Course:
    course = db.query(Course).filter(Course.id == course_id).first()
    if not course:
        raise HTTPException(status_code=404, detail="Course not found")
    return course


@router.get("/courses/{course_id}/quizzes", response_model=CourseQuizzesResponse)
def list_course_quizzes(course_id: str, db: Session = Depends(get_db)):
    course = _get_course_or_404(db, course_id)
    rows = (
        db.query(Quiz, func.count(QuizQuestion.id))
        .outerjoin(QuizQuestion, QuizQuestion.quiz_id == Quiz.id)
        .filter(Quiz.course_id == course_id)
        .group_by(Quiz.id)
        .order_by(Quiz.created_at)
        .all()
    )
    return CourseQuizzesResponse(
        course_id=course.id,
        course_title=course.title,
        course_description=course.description or "",
        quizzes=[_quiz_to_response(quiz, n) for quiz, n in rows],
    )


@router.post("/courses/{course_id}/quizzes", response_model=QuizDetailResponse, status_code=201)
def create_quiz(
    course_id: str,
    req: QuizCreate,
    db: Session = Depends(get_db),
    current_user: Profile = Depends(require_teacher),
):
    """Create a quiz and its non-blank questions in a single transaction.

    If the question insert fails the quiz row is rolled back with it, so a
    failed request never leaves a quiz without its questions.
    """
    course = _get_course_or_404(db, course_id)
    if course.teacher_id != current_user.id:
        raise HTTPException(status_code=403, detail="Not your course")

    quiz = Quiz(
        course_id=course_id,
        title=req.title,
        description=req.description,
        passing_score=req.passing_score,
    )
    db.add(quiz)
    try:
        db.flush()
        db.add_all(_question_rows(quiz.id, req.questions))
        db.commit()
    except SQLAlchemyError:
        db.rollback()
        logger.exception("Creating quiz for course %s failed", course_id)
        raise HTTPException(status_code=500, detail="Failed to create quiz")

    db.refresh(quiz)
    logger.info("Created quiz %s with %d questions", quiz.id, len(quiz.questions))
    return _quiz_detail(quiz, include_answers=True)


def _quiz_detail(quiz: Quiz, include_answers: bool) -> QuizDetailResponse:
    return QuizDetailResponse(
        **_quiz_to_response(quiz, len(quiz.questions)).model_dump(),
        questions=[
            QuestionResponse(
                id=q.id,
                position=q.position,
                question=q.question,
                options=q.options,
                correct_answer=q.correct_answer if include_answers else None,
                points=q.points,
            )
            for q in quiz.questions
        ],
    )


@router.get("/quizzes/{quiz_id}", response_model=QuizDetailResponse)
def get_quiz(
    quiz_id: str,
    db: Session = Depends(get_db),
    current_user: Optional[Profile] = Depends(get_optional_user),
):
    """A quiz with its questions. Answers are only shown to the course owner."""
    quiz = db.query(Quiz).filter(Quiz.id == quiz_id).first()
    if not quiz:
        raise HTTPException(status_code=404, detail="Quiz not found")
    is_owner = current_user is not None and quiz.course.teacher_id == current_user.id
    return _quiz_detail(quiz, include_answers=is_owner)


@router.post("/quizzes/generate", response_model=QuizGenerateResponse)
@limiter.limit(settings.QUIZ_GENERATION_RATE_LIMIT)
async def generate_quiz(
    request: Request,
    req: QuizGenerateRequest,
    current_user: Profile = Depends(require_teacher),
):
    """Draft questions with the AI provider. Nothing is stored."""
    try:
        questions = await generate_questions(
            course_title=req.course_title,
            course_description=req.course_description,
            number_of_questions=req.number_of_questions,
            difficulty=req.difficulty,
        )
    except (AIServiceError, QuizGenerationError) as e:
        raise HTTPException(status_code=502, detail=f"Quiz generation failed: {e}")
    return QuizGenerateResponse(questions=questions)
