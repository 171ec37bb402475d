"""Auth router — registration, login, and the current profile."""

import logging

from fastapi import APIRouter, Depends, HTTPException
from sqlalchemy.orm import Session

from coursehub.database import get_db
from coursehub.models.profile import Profile
from coursehub.schemas.auth import RegisterRequest, LoginRequest, TokenResponse, ProfileResponse
from coursehub.middleware.auth import (
    hash_password,
    verify_password,
    create_access_token,
    get_current_user,
)

logger = logging.getLogger(__name__)

router = APIRouter(prefix="/api/auth", tags=["auth"])


def _profile_to_response(profile: Profile) -> ProfileResponse:
    return ProfileResponse(
        id=profile.id,
        email=profile.email,
        full_name=profile.full_name,
        role=profile.role,
        streak_count=profile.streak_count or 0,
        created_at=profile.created_at.isoformat(),
    )


@router.post("/register", response_model=ProfileResponse, status_code=201)
def register(req: RegisterRequest, db: Session = Depends(get_db)):
    """Create a profile. The role may be left unset and assigned later."""
    email = req.email.strip().lower()
    if db.query(Profile).filter(Profile.email == email).first():
        raise HTTPException(status_code=409, detail="Email already registered")

    profile = Profile(
        email=email,
        password_hash=hash_password(req.password),
        full_name=req.full_name,
        role=req.role,
    )
    db.add(profile)
    db.commit()
    db.refresh(profile)
    logger.info("Registered profile %s (role=%s)", profile.id, profile.role)
    return _profile_to_response(profile)


@router.post("/login", response_model=TokenResponse)
def login(req: LoginRequest, db: Session = Depends(get_db)):
    profile = db.query(Profile).filter(Profile.email == req.email.strip().lower()).first()
    if not profile or not verify_password(req.password, profile.password_hash):
        raise HTTPException(status_code=401, detail="Invalid email or password")

    token = create_access_token({"sub": profile.id, "role": profile.role})
    return TokenResponse(access_token=token)


@router.get("/me", response_model=ProfileResponse)
def get_me(current_user: Profile = Depends(get_current_user)):
    return _profile_to_response(current_user)
