"""
Pydantic schemas for User authentication, registration and profiles.
"""

from pydantic import EmailStr, Field, field_validator
from typing import List, Optional
from app.schemas.base import CamelModel, reject_null


class UserRegisterRequest(CamelModel):
    """Request schema for self-registration (never creates an admin)."""
    username: str = Field(..., min_length=1, max_length=25)
    password: str = Field(..., min_length=5, max_length=20)
    first_name: str = Field(..., min_length=1, max_length=25)
    last_name: str = Field(..., min_length=1, max_length=25)
    email: EmailStr

    class Config:
        extra = "forbid"


class UserCreateRequest(UserRegisterRequest):
    """Request schema for admins creating users; may grant admin rights."""
    is_admin: bool = False


class UserUpdateRequest(CamelModel):
    """Partial profile update; username and isAdmin cannot be changed here."""
    password: Optional[str] = Field(None, min_length=5, max_length=20)
    first_name: Optional[str] = Field(None, min_length=1, max_length=25)
    last_name: Optional[str] = Field(None, min_length=1, max_length=25)
    email: Optional[EmailStr] = None

    @field_validator("password", "first_name", "last_name", "email")
    @classmethod
    def not_null(cls, v):
        return reject_null(v)

    class Config:
        extra = "forbid"


class UserLoginRequest(CamelModel):
    """Request schema for obtaining a token."""
    username: str = Field(..., min_length=1, max_length=25)
    password: str = Field(..., min_length=1)


class TokenResponse(CamelModel):
    """JWT token response."""
    token: str


class UserResponse(CamelModel):
    """User profile response (no password)."""
    username: str
    first_name: str
    last_name: str
    email: str
    is_admin: bool


class UserDetailResponse(UserResponse):
    """User profile with the ids of jobs applied to."""
    jobs: List[int] = []


class UserCreateResponse(CamelModel):
    user: UserResponse
    token: str


class ApplicationResponse(CamelModel):
    applied: int
