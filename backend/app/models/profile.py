"""Pydantic models for employee profiles and their administration."""

from typing import List, Literal, Optional

from pydantic import BaseModel, Field

Role = Literal["employee", "manager", "hr", "admin"]

EMAIL_PATTERN = r"^[^@\s]+@[^@\s]+\.[^@\s]+$"


class Profile(BaseModel):
    """Employee profile as resolved from the authenticated user."""

    id: str = Field(..., description="User ID shared with the auth provider")
    full_name: str = Field(..., description="Display name")
    email: str = Field(..., description="Work email address")
    role: str = Field(
        default="employee",
        description="One of: employee, manager, hr, admin",
    )
    department: Optional[str] = Field(None, description="Department name")
    is_active: bool = Field(default=True, description="Inactive users keep history but get no new balances")


class ProfileCreateRequest(BaseModel):
    """
    Request body for POST /api/admin/users endpoint.

    Attributes:
        id: User ID issued by the identity provider (generated when omitted)
        full_name: Display name
        email: Work email address, unique across profiles
        role: Initial role
        department: Optional department name
        is_active: Whether the user starts active
    """

    id: Optional[str] = Field(None, min_length=1, max_length=128, description="Identity provider user ID")
    full_name: str = Field(..., min_length=2, max_length=200)
    email: str = Field(..., pattern=EMAIL_PATTERN, max_length=320)
    role: Role = "employee"
    department: Optional[str] = Field(None, max_length=100)
    is_active: bool = True


class RoleUpdateRequest(BaseModel):
    """Request body for PATCH /api/admin/users/{user_id}/role endpoint."""

    new_role: Role


class ProfileListResponse(BaseModel):
    """Response body for GET /api/admin/users endpoint."""

    users: List[Profile]
    total: int = Field(..., description="Matching profiles before pagination")
    has_more: bool
