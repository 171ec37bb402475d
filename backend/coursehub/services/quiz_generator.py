"""Drafts multiple-choice questions for a course."""

import json
import logging

from pydantic import ValidationError

from coursehub.config import settings
from coursehub.schemas.quiz import GeneratedQuestion
from coursehub.services.ai_client import chat

logger = logging.getLogger(__name__)

QUIZ_SYSTEM = (
    "You are an expert teacher writing multiple-choice quiz questions. "
    "Each question has exactly 4 answer options and exactly one correct option. "
    "Return ONLY valid JSON, no markdown fences: "
    '{"questions": [{"question": "...", "options": ["a", "b", "c", "d"], '
    '"correct_answer": 0, "points": 10}]} '
    "where correct_answer is the zero-based index of the correct option."
)


class QuizGenerationError(RuntimeError):
    """The AI reply could not be turned into a list of questions."""


def _strip_fences(raw: str) -> str:
    text = raw.strip()
    if text.startswith("```"):
        lines = text.split("\n")
        text = "\n".join(lines[1:-1] if lines[-1].strip() == "```" else lines[1:])
    return text


def parse_questions(raw: str) -> list[GeneratedQuestion]:
    """Parse the model reply into validated questions.

    Tolerates markdown fences and chatter around the JSON object; rejects
    anything that does not yield at least one well-formed question.
    """
    text = _strip_fences(raw)
    start, end = text.find("{"), text.rfind("}") + 1
    if start == -1 or end == 0:
        raise QuizGenerationError("AI did not return valid JSON")
    try:
        data = json.loads(text[start:end])
    except json.JSONDecodeError as e:
        raise QuizGenerationError("AI did not return valid JSON") from e

    questions = []
    for item in data.get("questions") or []:
        try:
            q = GeneratedQuestion(**item)
        except (TypeError, ValidationError):
            logger.warning("Skipping malformed generated question: %r", item)
            continue
        if q.question.strip() and len(q.options) >= 2 and 0 <= q.correct_answer < len(q.options):
            questions.append(q)

    if not questions:
        raise QuizGenerationError("AI returned no usable questions")
    return questions


async def generate_questions(
    course_title: str,
    course_description: str,
    number_of_questions: int = None,
    difficulty: str = None,
) -> list[GeneratedQuestion]:
    number_of_questions = number_of_questions or settings.QUIZ_DEFAULT_QUESTIONS
    difficulty = difficulty or settings.QUIZ_DEFAULT_DIFFICULTY

    raw = await chat(
        system=QUIZ_SYSTEM,
        messages=[{
            "role": "user",
            "content": (
                f"Course: {course_title}\n"
                f"Description: {course_description or 'No description'}\n\n"
                f"Write {number_of_questions} {difficulty}-difficulty questions."
            ),
        }],
        max_tokens=settings.QUIZ_MAX_TOKENS,
        temperature=0.4,
    )
    questions = parse_questions(raw)[:number_of_questions]
    logger.info("Generated %d quiz questions for %r", len(questions), course_title)
    return questions
