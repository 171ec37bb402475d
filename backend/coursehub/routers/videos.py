"""Videos router — YouTube search used to prefill the course form."""

from fastapi import APIRouter, Depends, HTTPException, Query, Request

from coursehub.config import settings
from coursehub.models.profile import Profile
from coursehub.schemas.video import VideoSearchResponse, VideoSuggestion
from coursehub.middleware.auth import get_current_user
from coursehub.middleware.rate_limit import limiter
from coursehub.services.youtube import search_videos, VideoSearchError

router = APIRouter(prefix="/api/videos", tags=["videos"])


@router.get("/search", response_model=VideoSearchResponse)
@limiter.limit(settings.VIDEO_SEARCH_RATE_LIMIT)
async def search(
    request: Request,
    q: str = Query("", max_length=200),
    current_user: Profile = Depends(get_current_user),
):
    try:
        results = await search_videos(q)
    except VideoSearchError as e:
        raise HTTPException(status_code=503 if e.unconfigured else 502, detail=str(e))
    return VideoSearchResponse(query=q, results=[VideoSuggestion(**r) for r in results])
