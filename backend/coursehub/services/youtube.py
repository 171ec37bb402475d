"""YouTube helpers: URL validation, video id extraction and the search proxy."""

import logging
import re
from typing import Optional

import httpx

from coursehub.config import settings

logger = logging.getLogger(__name__)

# Full-string check used before a course is stored
_VALID_URL_RE = re.compile(r"^(https?://)?(www\.)?(youtube\.com/watch\?v=|youtu\.be/)[\w-]+", re.ASCII)
# Looser search used when rendering a stored URL
_VIDEO_ID_RE = re.compile(r"(?:youtube\.com/watch\?v=|youtu\.be/)([\w-]+)", re.ASCII)


class VideoSearchError(RuntimeError):
    """Search could not be performed. ``unconfigured`` marks a missing API key."""

    def __init__(self, message: str, unconfigured: bool = False):
        super().__init__(message)
        self.unconfigured = unconfigured


def is_valid_youtube_url(url: str) -> bool:
    return bool(_VALID_URL_RE.match(url or ""))


def extract_video_id(url: Optional[str]) -> Optional[str]:
    if not url:
        return None
    match = _VIDEO_ID_RE.search(url)
    return match.group(1) if match else None


def embed_url(video_id: Optional[str]) -> Optional[str]:
    return f"https://www.youtube.com/embed/{video_id}" if video_id else None


def watch_url(video_id: str) -> str:
    return f"https://www.youtube.com/watch?v={video_id}"


def _to_suggestion(item: dict) -> Optional[dict]:
    video_id = (item.get("id") or {}).get("videoId")
    if not video_id:
        return None
    snippet = item.get("snippet") or {}
    thumbnail = ((snippet.get("thumbnails") or {}).get("default") or {}).get("url")
    return {
        "video_id": video_id,
        "title": snippet.get("title", ""),
        "description": snippet.get("description", ""),
        "channel_title": snippet.get("channelTitle", ""),
        "thumbnail_url": thumbnail,
        "url": watch_url(video_id),
    }


async def search_videos(query: str, client: Optional[httpx.AsyncClient] = None) -> list[dict]:
    """Return up to YOUTUBE_MAX_RESULTS candidate videos for ``query``.

    A blank query returns [] without touching the network. ``client`` lets
    callers (and tests) supply their own transport.
    """
    if not query.strip():
        return []
    if not settings.YOUTUBE_API_KEY:
        raise VideoSearchError("YouTube API key not configured", unconfigured=True)

    params = {
        "part": "snippet",
        "q": query,
        "type": "video",
        "maxResults": settings.YOUTUBE_MAX_RESULTS,
        "key": settings.YOUTUBE_API_KEY,
        "order": "relevance",
        "safeSearch": "strict",
    }

    owns_client = client is None
    if owns_client:
        client = httpx.AsyncClient(timeout=settings.YOUTUBE_TIMEOUT_SECONDS)
    try:
        response = await client.get(settings.YOUTUBE_SEARCH_URL, params=params)
        response.raise_for_status()
        payload = response.json()
    except (httpx.HTTPError, ValueError) as e:
        logger.warning("YouTube search failed for %r: %s", query, e)
        raise VideoSearchError("Failed to fetch YouTube videos") from e
    finally:
        if owns_client:
            await client.aclose()

    results = [s for s in (_to_suggestion(item) for item in payload.get("items") or []) if s]
    return results[: settings.YOUTUBE_MAX_RESULTS]
