"""JWT authentication middleware and dependencies."""

from datetime import datetime, timedelta, timezone
from typing import Optional

import bcrypt
from fastapi import Depends, HTTPException, status
from fastapi.security import HTTPBearer, HTTPAuthorizationCredentials
from jose import JWTError, jwt
from sqlalchemy.orm import Session

from coursehub.config import settings
from coursehub.database import get_db
from coursehub.models.profile import Profile

# auto_error=False so each operation can word its own "sign in first" message
security = HTTPBearer(auto_error=False)


def hash_password(password: str) -> str:
    return bcrypt.hashpw(password.encode("utf-8"), bcrypt.gensalt()).decode("utf-8")


def verify_password(plain_password: str, hashed_password: str) -> bool:
    return bcrypt.checkpw(
        plain_password.encode("utf-8"),
        hashed_password.encode("utf-8"),
    )


def create_access_token(data: dict) -> str:
    to_encode = data.copy()
    expire = datetime.now(timezone.utc) + timedelta(minutes=settings.ACCESS_TOKEN_EXPIRE_MINUTES)
    to_encode.update({"exp": expire})
    return jwt.encode(to_encode, settings.SECRET_KEY, algorithm=settings.ALGORITHM)


def decode_token(token: str) -> dict:
    try:
        return jwt.decode(token, settings.SECRET_KEY, algorithms=[settings.ALGORITHM])
    except JWTError:
        raise HTTPException(
            status_code=status.HTTP_401_UNAUTHORIZED,
            detail="Invalid or expired session",
        )


def get_optional_user(
    credentials: Optional[HTTPAuthorizationCredentials] = Depends(security),
    db: Session = Depends(get_db),
) -> Optional[Profile]:
    """Resolve the session's profile, or None when no bearer token was sent.

    A token that is present but invalid is still rejected with 401.
    """
    if credentials is None:
        return None
    payload = decode_token(credentials.credentials)
    profile_id = payload.get("sub")
    if not profile_id:
        raise HTTPException(status_code=401, detail="Invalid session payload")
    profile = db.query(Profile).filter(Profile.id == profile_id).first()
    if not profile:
        raise HTTPException(status_code=401, detail="Profile not found")
    return profile


def get_current_user(current_user: Optional[Profile] = Depends(get_optional_user)) -> Profile:
    if current_user is None:
        raise HTTPException(status_code=401, detail="Authentication required")
    return current_user


def require_teacher(current_user: Profile = Depends(get_current_user)) -> Profile:
    if current_user.role != "teacher":
        raise HTTPException(status_code=403, detail="Teacher role required")
    return current_user
