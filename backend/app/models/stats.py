"""Pydantic model for organization statistics."""

from typing import List, Optional

from pydantic import BaseModel, Field


class EmployeeStats(BaseModel):
    total_employees: int
    total_managers: int
    total_hr: int
    total_admins: int
    total_active_users: int
    total_inactive_users: int


class DepartmentStats(BaseModel):
    department: str
    employee_count: int
    manager_count: int


class LeaveStats(BaseModel):
    pending_leaves: int
    approved_leaves: int
    rejected_leaves: int
    cancelled_leaves: int
    total_leaves: int
    total_approved_days: int
    avg_leave_duration: float
    approval_rate: float = Field(..., description="Approved share of processed requests, in percent")


class LeaveTypeStats(BaseModel):
    leave_type_id: str
    leave_type_name: str
    total_requests: int
    approved_requests: int
    pending_requests: int
    rejected_requests: int
    total_days_taken: int
    avg_days_per_request: float


class MonthlyTrend(BaseModel):
    month_num: int = Field(..., ge=1, le=12)
    month_name: str
    total_requests: int
    approved_requests: int
    total_days: int


class ApprovalMetrics(BaseModel):
    total_processed: int
    total_approved: int
    total_rejected: int
    avg_approval_time_hours: float = Field(..., description="Mean hours from submission to approval")
    approval_rate: float
    overdue_pending_requests: int = Field(..., description="Pending requests submitted more than 48 hours ago")


class TopRequester(BaseModel):
    employee_id: str
    full_name: str
    department: Optional[str] = None
    role: str
    total_requests: int
    total_days_taken: int = Field(..., description="Approved days in the year")


class OrgStatsResponse(BaseModel):
    """Response body for GET /api/admin/stats endpoint."""

    year: int
    employee_stats: EmployeeStats
    department_stats: List[DepartmentStats]
    leave_stats: LeaveStats
    leave_type_stats: List[LeaveTypeStats]
    monthly_trends: List[MonthlyTrend]
    approval_metrics: ApprovalMetrics
    top_requesters: List[TopRequester] = Field(..., description="Up to ten employees by approved days")
