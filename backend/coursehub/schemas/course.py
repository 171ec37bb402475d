"""Course and enrollment request/response schemas."""

from typing import Literal, Optional
from pydantic import BaseModel, Field


class CourseCreate(BaseModel):
    title: str = Field(min_length=1, max_length=255)
    description: Optional[str] = None
    category: Optional[str] = None
    difficulty: Literal["easy", "medium", "hard"] = "medium"
    video_url: Optional[str] = None
    content: Optional[str] = None


class CourseResponse(BaseModel):
    id: str
    teacher_id: str
    title: str
    description: Optional[str]
    category: Optional[str]
    difficulty: str
    video_url: Optional[str]
    content: Optional[str]
    instructor_name: str
    enrollment_count: int = 0
    created_at: str

    class Config:
        from_attributes = True


class CourseListResponse(BaseModel):
    courses: list[CourseResponse]
    total: int


class CourseDetailResponse(CourseResponse):
    video_id: Optional[str] = None
    embed_url: Optional[str] = None


class EnrollmentResponse(BaseModel):
    id: str
    student_id: str
    course_id: str
    progress: int
    enrolled_at: str
