"""External video search schemas."""

from typing import Optional
from pydantic import BaseModel


class VideoSuggestion(BaseModel):
    video_id: str
    title: str
    description: str = ""
    channel_title: str = ""
    thumbnail_url: Optional[str] = None
    url: str


class VideoSearchResponse(BaseModel):
    query: str
    results: list[VideoSuggestion]
