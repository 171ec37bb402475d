"""Quiz authoring and generation schemas."""

from typing import Literal, Optional
from pydantic import BaseModel, Field, model_validator


class QuestionIn(BaseModel):
    question: str = ""
    options: list[str] = Field(default_factory=lambda: ["", "", "", ""])
    correct_answer: int = 0
    points: int = Field(default=10, ge=0)

    @model_validator(mode="after")
    def _correct_answer_in_range(self):
        # Blank questions are dropped on save, so they are not checked
        if not self.question.strip():
            return self
        if not 0 <= self.correct_answer < max(len(self.options), 1):
            raise ValueError("correct_answer must index one of the options")
        return self


class QuizCreate(BaseModel):
    title: str = Field(min_length=1, max_length=255)
    description: Optional[str] = None
    passing_score: int = Field(default=70, ge=0, le=100)
    questions: list[QuestionIn] = []


class QuestionResponse(BaseModel):
    id: str
    position: int
    question: str
    options: list[str]
    correct_answer: Optional[int] = None  # hidden from non-owners
    points: int


class QuizResponse(BaseModel):
    id: str
    course_id: str
    title: str
    description: Optional[str]
    passing_score: int
    question_count: int = 0
    created_at: str


class QuizDetailResponse(QuizResponse):
    questions: list[QuestionResponse]


class CourseQuizzesResponse(BaseModel):
    course_id: str
    course_title: str
    course_description: str
    quizzes: list[QuizResponse]


class QuizGenerateRequest(BaseModel):
    course_title: str
    course_description: str = ""
    number_of_questions: int = Field(default=5, ge=1, le=20)
    difficulty: Literal["easy", "medium", "hard"] = "medium"


class GeneratedQuestion(BaseModel):
    question: str
    options: list[str]
    correct_answer: int
    points: int = 10


class QuizGenerateResponse(BaseModel):
    questions: list[GeneratedQuestion]
