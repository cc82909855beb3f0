"""Pydantic model for leave types."""

from typing import Any, Optional

from pydantic import BaseModel, Field


class LeaveType(BaseModel):
    """A category of leave with its yearly default allocation."""

    id: str = Field(..., description="Leave type identifier")
    name: str = Field(..., description="Display name (e.g., 'Annual Leave')")
    description: Optional[str] = Field(None, description="What the leave type covers")
    default_allocation_days: int = Field(
        ...,
        ge=0,
        description="Days allocated per employee per year",
    )
    accrual_rules: dict[str, Any] = Field(
        default_factory=dict,
        description="Accrual settings such as accrual_rate or max_carryover",
    )
    is_active: bool = Field(default=True, description="Inactive types cannot be requested")


class LeaveTypeUpsertRequest(BaseModel):
    """Request body for creating (POST) or replacing (PUT) a leave type."""

    name: str = Field(..., min_length=2, max_length=100)
    description: Optional[str] = Field(None, max_length=500)
    default_allocation_days: int = Field(..., ge=0, le=365)
    accrual_rules: dict[str, Any] = Field(default_factory=dict)
    is_active: bool = True
