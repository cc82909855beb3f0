"""Pydantic models for leave requests and reviews."""

from datetime import date, datetime
from typing import Any, Optional

from pydantic import BaseModel, Field, model_validator

from leave_engine import LeaveStatus, ReviewAction


class LeaveCreateRequest(BaseModel):
    """
    Request body for POST /api/leaves endpoint.

    Attributes:
        leave_type_id: Leave type to draw from
        start_date: First day of leave
        end_date: Last day of leave (inclusive)
        reason: Optional free-text reason
        metadata: Optional client-supplied metadata
    """

    leave_type_id: str = Field(..., min_length=1, description="Leave type ID")
    start_date: date = Field(..., description="First day of leave (YYYY-MM-DD)")
    end_date: date = Field(..., description="Last day of leave, inclusive (YYYY-MM-DD)")
    reason: Optional[str] = Field(None, max_length=1000, description="Reason for the request")
    metadata: Optional[dict[str, Any]] = Field(None, description="Additional request metadata")

    @model_validator(mode="after")
    def _check_range(self) -> "LeaveCreateRequest":
        if self.end_date < self.start_date:
            raise ValueError("end_date must not be before start_date")
        return self

    model_config = {
        "json_schema_extra": {
            "example": {
                "leave_type_id": "annual-leave",
                "start_date": "2025-03-03",
                "end_date": "2025-03-07",
                "reason": "Family trip",
            }
        }
    }


class Leave(BaseModel):
    """A stored leave request."""

    id: str
    requester_id: str
    leave_type_id: str
    start_date: date
    end_date: date
    days_count: int = Field(..., ge=0, description="Business days covered by the request")
    reason: Optional[str] = None
    metadata: Optional[dict[str, Any]] = None
    status: LeaveStatus = LeaveStatus.PENDING
    approver_id: Optional[str] = None
    comments: Optional[str] = None
    approved_at: Optional[datetime] = None
    created_at: datetime
    updated_at: datetime


class ReviewRequest(BaseModel):
    """Request body for POST /api/leaves/{leave_id}/review endpoint."""

    action: ReviewAction = Field(..., description="'approved' or 'rejected'")
    comments: Optional[str] = Field(None, max_length=1000, description="Reviewer comments")


class ReviewResponse(BaseModel):
    """Response body for review and cancel endpoints."""

    success: bool = True
    data: Leave
