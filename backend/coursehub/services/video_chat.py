"""Answers student questions about a course video."""

import logging
from typing import Optional

from coursehub.config import settings
from coursehub.models.course import Course
from coursehub.services.ai_client import chat

logger = logging.getLogger(__name__)

VIDEO_CHAT_SYSTEM = (
    "You are a friendly AI learning assistant embedded next to a course video. "
    "Help the student understand the concepts covered by the video and the course "
    "materials. Answer in plain language, keep replies under 200 words, and use short "
    "examples where they help. If a question is unrelated to the course, gently steer "
    "the student back to the topic."
)


def build_system_prompt(video_title: str, course: Optional[Course]) -> str:
    parts = [VIDEO_CHAT_SYSTEM, f"\nVideo: {video_title or (course.title if course else 'Untitled')}"]
    if course is not None:
        if course.description:
            parts.append(f"Course description: {course.description}")
        if course.category:
            parts.append(f"Category: {course.category} ({course.difficulty})")
        if course.content:
            parts.append(f"Course materials:\n{course.content[:4000]}")
    return "\n".join(parts)


def build_messages(history: list[dict], message: str, limit: Optional[int] = None) -> list[dict]:
    """Keep the last ``limit`` history turns and append the new user message.

    Leading assistant turns (the widget greeting) are dropped so the provider
    always sees a user turn first.
    """
    limit = settings.CHAT_HISTORY_LIMIT if limit is None else limit
    recent = history[-limit:] if limit > 0 else []
    while recent and recent[0]["role"] != "user":
        recent = recent[1:]
    return [{"role": m["role"], "content": m["content"]} for m in recent] + [
        {"role": "user", "content": message}
    ]


async def answer_question(
    message: str,
    video_title: str,
    history: list[dict],
    course: Optional[Course] = None,
) -> str:
    """Return the assistant reply; AIServiceError propagates to the caller."""
    reply = await chat(
        system=build_system_prompt(video_title, course),
        messages=build_messages(history, message),
        max_tokens=settings.CHAT_MAX_TOKENS,
        temperature=0.5,
    )
    logger.info("Chat reply for course %s (%d chars)", course.id if course else "-", len(reply))
    return reply.strip()
