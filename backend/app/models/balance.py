"""Pydantic models for leave balances."""

from typing import Optional

from pydantic import BaseModel, Field, computed_field

from leave_engine import available_days


class LeaveBalance(BaseModel):
    """Yearly balance of one employee for one leave type."""

    employee_id: str
    leave_type_id: str
    year: int
    allocated_days: int = Field(default=0, ge=0)
    used_days: int = Field(default=0, ge=0)
    carried_forward_days: int = Field(default=0, ge=0)

    @computed_field
    @property
    def available_days(self) -> int:
        return available_days(self.allocated_days, self.carried_forward_days, self.used_days)


class InitializeBalancesRequest(BaseModel):
    """Request body for POST /api/admin/leave-balances/initialize endpoint."""

    year: Optional[int] = Field(None, ge=2000, le=2100, description="Target year (defaults to current year)")


class InitializeBalancesResponse(BaseModel):
    message: str
    year: int
    balances_created: int
