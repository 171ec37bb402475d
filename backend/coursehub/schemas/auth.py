"""Auth request/response schemas."""

from typing import Literal, Optional
from pydantic import BaseModel


class RegisterRequest(BaseModel):
    email: str
    password: str
    full_name: Optional[str] = None
    role: Optional[Literal["student", "teacher"]] = None


class LoginRequest(BaseModel):
    email: str
    password: str


class TokenResponse(BaseModel):
    access_token: str
    token_type: str = "bearer"


class ProfileResponse(BaseModel):
    id: str
    email: str
    full_name: Optional[str] = None
    role: Optional[str] = None
    streak_count: int
    created_at: str

    class Config:
        from_attributes = True
