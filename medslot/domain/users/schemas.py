"""User domain schemas - Pydantic models for validation"""

from datetime import datetime
from typing import Optional

from pydantic import BaseModel, Field, field_validator

from ...enums import UserRole
from ...shared.validators import validate_email


class UserCreate(BaseModel):
    """Schema for creating a user account (no credentials, login lives elsewhere)"""

    name: str = Field(..., min_length=1, max_length=255)
    email: str
    role: UserRole
    avatar: Optional[str] = None

    @field_validator("email")
    @classmethod
    def validate_email(cls, v):
        return validate_email(v)


class UserUpdate(BaseModel):
    """Schema for updating a user account"""

    name: Optional[str] = Field(None, min_length=1, max_length=255)
    email: Optional[str] = None
    role: Optional[UserRole] = None
    avatar: Optional[str] = None

    @field_validator("email")
    @classmethod
    def validate_email(cls, v):
        return validate_email(v)


class UserResponse(BaseModel):
    """Schema for user response"""

    id: int
    name: str
    email: str
    role: UserRole
    avatar: Optional[str] = None
    doctorId: Optional[int] = None
    created_at: Optional[datetime] = None
