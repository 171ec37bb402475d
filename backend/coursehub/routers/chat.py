"""Chat router — AI assistant next to the course video."""

from fastapi import APIRouter, Depends, HTTPException, Request
from sqlalchemy.orm import Session

from coursehub.config import settings
from coursehub.database import get_db
from coursehub.models.profile import Profile
from coursehub.models.course import Course
from coursehub.schemas.chat import ChatRequest, ChatResponse
from coursehub.middleware.auth import get_current_user
from coursehub.middleware.rate_limit import limiter
from coursehub.services.ai_client import AIServiceError
from coursehub.services.video_chat import answer_question

router = APIRouter(prefix="/api/chat", tags=["chat"])


@router.post("", response_model=ChatResponse)
@limiter.limit(settings.CHAT_RATE_LIMIT)
async def chat_with_video(
    request: Request,
    req: ChatRequest,
    db: Session = Depends(get_db),
    current_user: Profile = Depends(get_current_user),
):
    """Answer one chat turn. Nothing about the conversation is stored."""
    course = db.query(Course).filter(Course.id == req.course_id).first()
    try:
        reply = await answer_question(
            message=req.message,
            video_title=req.video_title,
            history=[m.model_dump() for m in req.conversation_history],
            course=course,
        )
    except AIServiceError as e:
        raise HTTPException(status_code=502, detail=f"AI assistant unavailable: {e}")
    return ChatResponse(response=reply)
