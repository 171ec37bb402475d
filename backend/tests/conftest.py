"""Shared fixtures: in-memory database, seeded rows and API clients."""

import os
import sys
from datetime import datetime, timedelta, timezone

# Configure before anything imports coursehub.config
os.environ["DATABASE_URL"] = "sqlite://"
os.environ["RATE_LIMIT_ENABLED"] = "false"
os.environ["ANTHROPIC_API_KEY"] = ""
os.environ["ORACLE_GENAI_COMPARTMENT_ID"] = ""
os.environ["YOUTUBE_API_KEY"] = "test-youtube-key"

sys.path.insert(0, os.path.join(os.path.dirname(__file__), ".."))

import httpx
import pytest
from fastapi.testclient import TestClient

from coursehub.database import Base, engine, SessionLocal
from coursehub.main import app
from coursehub.middleware.auth import create_access_token, hash_password
from coursehub.models import Profile, Course, Enrollment, Badge, Quiz


@pytest.fixture(autouse=True)
def reset_db():
    Base.metadata.drop_all(bind=engine)
    Base.metadata.create_all(bind=engine)
    yield


@pytest.fixture
def anyio_backend():
    return "asyncio"


@pytest.fixture
def client():
    with TestClient(app) as c:
        yield c


@pytest.fixture
def http_factory():
    """Build an httpx.AsyncClient wired straight into the ASGI app."""
    def _make(**kwargs) -> httpx.AsyncClient:
        return httpx.AsyncClient(
            transport=httpx.ASGITransport(app=app),
            base_url="http://testserver",
            **kwargs,
        )
    return _make


@pytest.fixture
def db():
    session = SessionLocal()
    try:
        yield session
    finally:
        session.close()


@pytest.fixture
def count_rows():
    """Count rows with a fresh session so nothing stale is read."""
    def _count(model, **filters) -> int:
        session = SessionLocal()
        try:
            return session.query(model).filter_by(**filters).count()
        finally:
            session.close()
    return _count


@pytest.fixture
def make_profile(db):
    """Insert a profile and return (profile_id, bearer_headers, token)."""
    def _make(email, role="student", full_name="Test User", password="secret-pass", streak_count=0):
        profile = Profile(
            email=email,
            password_hash=hash_password(password),
            full_name=full_name,
            role=role,
            streak_count=streak_count,
        )
        db.add(profile)
        db.commit()
        token = create_access_token({"sub": profile.id, "role": role})
        return profile.id, {"Authorization": f"Bearer {token}"}, token
    return _make


@pytest.fixture
def make_course(db):
    def _make(teacher_id, title="Intro to Python", minutes_ago=0, **fields):
        fields.setdefault("description", f"About {title}")
        fields.setdefault("video_url", "https://www.youtube.com/watch?v=rfscVS0vtbw")
        course = Course(
            teacher_id=teacher_id,
            title=title,
            created_at=datetime.now(timezone.utc) - timedelta(minutes=minutes_ago),
            **fields,
        )
        db.add(course)
        db.commit()
        return course.id
    return _make


@pytest.fixture
def make_enrollment(db):
    def _make(student_id, course_id, progress=0):
        enrollment = Enrollment(student_id=student_id, course_id=course_id, progress=progress)
        db.add(enrollment)
        db.commit()
        return enrollment.id
    return _make


@pytest.fixture
def make_badge(db):
    def _make(student_id, badge_type):
        badge = Badge(student_id=student_id, badge_type=badge_type)
        db.add(badge)
        db.commit()
        return badge.id
    return _make


@pytest.fixture
def make_quiz(db):
    def _make(course_id, title="Checkpoint"):
        quiz = Quiz(course_id=course_id, title=title)
        db.add(quiz)
        db.commit()
        return quiz.id
    return _make
