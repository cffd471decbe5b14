"""
Temple Billing - Auth schemas
Login, token and current-user payloads
"""

from datetime import datetime
from typing import Optional

from pydantic import BaseModel, Field

from temple_billing.models.enums import UserRole


class LoginRequest(BaseModel):
    """Login request"""
    username: str = Field(..., min_length=1, max_length=50, description="login id")
    password: str = Field(..., min_length=1, description="password")


class TokenResponse(BaseModel):
    """Issued token"""
    access_token: str = Field(..., description="JWT access token")
    token_type: str = Field(default="bearer", description="token type")
    expires_in: int = Field(..., description="idle timeout (seconds)")


class UserInfo(BaseModel):
    """Logged-in user"""
    id: int
    username: str
    name: str
    role: UserRole
    is_active: bool
    created_at: datetime
    last_login_at: Optional[datetime] = None

    class Config:
        from_attributes = True


class LoginResponse(BaseModel):
    token: TokenResponse
    user: UserInfo


class ChangePasswordRequest(BaseModel):
    """Password change"""
    current_password: str = Field(..., min_length=1, description="current password")
    new_password: str = Field(..., min_length=6, description="new password")
