"""Video chat request/response schemas."""

from typing import Literal
from pydantic import BaseModel, Field


class ChatHistoryItem(BaseModel):
    role: Literal["user", "assistant"]
    content: str


class ChatRequest(BaseModel):
    message: str = Field(min_length=1)
    course_id: str
    video_title: str = ""
    conversation_history: list[ChatHistoryItem] = []


class ChatResponse(BaseModel):
    response: str
