from datetime import datetime
from typing import Optional
from pydantic import BaseModel, ConfigDict, Field


class RegisterRequest(BaseModel):
    """Registration payload. Fields are optional here so that missing
    values are reported as 400 by the credential store, not 422."""
    name: Optional[str] = Field(None, description="Display name", examples=["Jane"])
    email: Optional[str] = Field(None, description="Email address", examples=["jane@example.com"])
    password: Optional[str] = Field(None, description="Password, at least 6 characters")


class LoginRequest(BaseModel):
    email: Optional[str] = Field(None, examples=["jane@example.com"])
    password: Optional[str] = None


class UserSummary(BaseModel):
    """Owner information embedded in reels and comments."""
    id: str
    name: str
    email: str

    model_config = ConfigDict(from_attributes=True)


class UserResponse(UserSummary):
    """Public user record; never carries the password hash."""
    created_at: datetime

    model_config = ConfigDict(
        from_attributes=True,
        json_schema_extra={
            "example": {
                "id": "5f0c7f5e-3c1b-4e7e-9a51-0f3b8a3f2d11",
                "name": "Jane",
                "email": "jane@example.com",
                "created_at": "2024-01-01T12:00:00"
            }
        }
    )


class AuthResponse(BaseModel):
    message: str
    user: UserResponse


class MessageResponse(BaseModel):
    message: str
