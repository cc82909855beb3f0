"""Pydantic models for API request/response schemas."""

from .balance import InitializeBalancesRequest, InitializeBalancesResponse, LeaveBalance
from .document import DocumentUploadResponse
from .leave import Leave, LeaveCreateRequest, ReviewRequest, ReviewResponse
from .leave_type import LeaveType, LeaveTypeUpsertRequest
from .profile import Profile, ProfileCreateRequest, ProfileListResponse, RoleUpdateRequest
from .stats import (
    ApprovalMetrics,
    DepartmentStats,
    EmployeeStats,
    LeaveStats,
    LeaveTypeStats,
    MonthlyTrend,
    OrgStatsResponse,
    TopRequester,
)

__all__ = [
    "ApprovalMetrics",
    "DepartmentStats",
    "DocumentUploadResponse",
    "EmployeeStats",
    "InitializeBalancesRequest",
    "InitializeBalancesResponse",
    "Leave",
    "LeaveBalance",
    "LeaveCreateRequest",
    "LeaveStats",
    "LeaveType",
    "LeaveTypeStats",
    "LeaveTypeUpsertRequest",
    "MonthlyTrend",
    "OrgStatsResponse",
    "Profile",
    "ProfileCreateRequest",
    "ProfileListResponse",
    "ReviewRequest",
    "ReviewResponse",
    "RoleUpdateRequest",
    "TopRequester",
]
