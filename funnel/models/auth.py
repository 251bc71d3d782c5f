"""Pydantic models for authentication."""
from datetime import datetime

from pydantic import BaseModel, Field


class UserLogin(BaseModel):
    """Admin login request."""

    email: str = Field(..., min_length=1)
    password: str = Field(..., min_length=1)


class TokenResponse(BaseModel):
    """JWT token response."""

    access_token: str
    token_type: str = "bearer"
    expires_in: int


class UserResponse(BaseModel):
    """User response (public info)."""

    id: int
    email: str
    is_active: bool
    created_at: datetime

    class Config:
        from_attributes = True
