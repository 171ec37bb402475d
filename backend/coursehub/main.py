"""CourseHub — FastAPI application entry point."""

import logging

from fastapi import FastAPI
from fastapi.middleware.cors import CORSMiddleware
from slowapi import _rate_limit_exceeded_handler
from slowapi.errors import RateLimitExceeded

from coursehub.config import settings
from coursehub.database import engine, Base
from coursehub.middleware.rate_limit import limiter
from coursehub.routers import auth, courses, quizzes, dashboard, chat, videos
from coursehub.services.ai_client import ai_provider_name, ai_health_check
import coursehub.models  # noqa: F401  (registers tables on Base.metadata)

logging.basicConfig(
    level=settings.LOG_LEVEL.upper(),
    format="%(asctime)s %(levelname)s [%(name)s] %(message)s",
)
logger = logging.getLogger("coursehub")

# Create all tables on startup
Base.metadata.create_all(bind=engine)

_cors_origins = [o.strip() for o in settings.ALLOWED_ORIGINS.split(",") if o.strip()]

app = FastAPI(
    title="CourseHub",
    description="Video courses, AI study chat and quizzes for students and teachers.",
    version="1.0.0",
    docs_url="/docs",
    redoc_url="/redoc",
)

# Rate limiting
app.state.limiter = limiter
app.add_exception_handler(RateLimitExceeded, _rate_limit_exceeded_handler)

# CORS
app.add_middleware(
    CORSMiddleware,
    allow_origins=_cors_origins,
    allow_credentials=True,
    allow_methods=["*"],
    allow_headers=["*"],
)

# Routers
app.include_router(auth.router)
app.include_router(courses.router)
app.include_router(quizzes.router)
app.include_router(dashboard.router)
app.include_router(chat.router)
app.include_router(videos.router)


@app.on_event("startup")
async def on_startup():
    provider = ai_provider_name()
    if provider == "none":
        logger.warning(
            "AI NOT CONFIGURED: set ANTHROPIC_API_KEY or the ORACLE_GENAI_* settings "
            "in .env; chat and quiz generation will return stub replies."
        )
    else:
        logger.info("AI provider: %s", provider)
    if not settings.YOUTUBE_API_KEY:
        logger.warning("YOUTUBE_API_KEY not set; video search is disabled")


@app.get("/")
def root():
    return {
        "name": "CourseHub API",
        "version": "1.0.0",
        "docs": "/docs",
        "ai_provider": ai_provider_name(),
    }


@app.get("/health")
def health():
    return {"status": "ok", "ai_provider": ai_provider_name()}


@app.get("/api/health/ai")
async def health_ai():
    """Live connectivity test for the configured AI provider."""
    return await ai_health_check()
