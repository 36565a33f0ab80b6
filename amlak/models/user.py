"""User and auth token models."""

from enum import Enum
from typing import Optional
from pydantic import BaseModel, Field


class UserRole(str, Enum):
    """Staff roles issued by the auth backend."""
    ADMIN = "admin"
    AGENT = "agent"
    VIEWER = "viewer"


class User(BaseModel):
    """Authenticated staff member, as returned by sign-in."""
    id: str = Field(..., description="User ID")
    email: str = Field(..., description="Email address")
    role: UserRole = Field(..., description="Role: admin, agent, viewer")
    is_active: bool = Field(..., description="Whether the account is enabled")


class TokenResponse(BaseModel):
    """Response body of the password grant token endpoint."""
    access_token: str
    refresh_token: str
    token_type: Optional[str] = "bearer"
    expires_in: Optional[int] = None
    expires_at: Optional[int] = None
    user: User


class Session(BaseModel):
    """Locally persisted sign-in state."""
    access_token: str
    refresh_token: str
    user: User
