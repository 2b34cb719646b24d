"""
Pydantic models for authentication requests and responses.
"""
from pydantic import BaseModel, ConfigDict, Field
from typing import Optional


class UserLogin(BaseModel):
    """Login request body."""
    email: str = Field(..., min_length=3, max_length=255, description="Staff email address")
    password: str = Field(..., min_length=1, description="Password")


class UserInfo(BaseModel):
    """Logged-in user as mirrored into the ``user`` and ``name`` cookies."""
    id: str
    email: str
    name: str


class LoginResponse(BaseModel):
    """Login response; the same token is also set as the ``token`` cookie."""
    message: str = "Login successful"
    token: str
    token_type: str = "bearer"
    expires_in: int = Field(..., description="Token expiry in seconds")
    user: UserInfo


class UpdatePasswordRequest(BaseModel):
    """Password change body, camelCase as sent by the dashboard."""
    model_config = ConfigDict(populate_by_name=True)

    current_password: str = Field(..., alias="currentPassword", min_length=1)
    new_password: str = Field(..., alias="newPassword")


class UserProfile(BaseModel):
    """User profile response."""
    id: str
    email: str
    full_name: str
    created_at: str


class MessageResponse(BaseModel):
    """Generic message response."""
    message: str
    detail: Optional[str] = None


class ErrorResponse(BaseModel):
    """Error response."""
    message: str
    detail: Optional[str] = None
