"""Leave management business rules."""

from .approval import (
    ADMIN_ROLES,
    APPROVER_ROLES,
    LeaveStatus,
    ReviewAction,
    cancel_transition,
    review_transition,
)
from .balances import available_days
from .business_days import count_business_days
from .catalog import load_leave_types
from .exceptions import (
    InvalidDateRangeError,
    InvalidTransitionError,
    LeaveRuleError,
    LeaveTypeCatalogError,
)
from .statistics import (
    compute_approval_metrics,
    compute_leave_statistics,
    compute_leave_type_statistics,
    compute_monthly_trends,
    compute_top_requesters,
)

__all__ = [
    "ADMIN_ROLES",
    "APPROVER_ROLES",
    "LeaveStatus",
    "ReviewAction",
    "available_days",
    "cancel_transition",
    "compute_approval_metrics",
    "compute_leave_statistics",
    "compute_leave_type_statistics",
    "compute_monthly_trends",
    "compute_top_requesters",
    "count_business_days",
    "load_leave_types",
    "review_transition",
    "InvalidDateRangeError",
    "InvalidTransitionError",
    "LeaveRuleError",
    "LeaveTypeCatalogError",
]
