"""
Leave request status transitions.

A request starts as pending. Reviewers move it to approved or rejected,
the requester may cancel it while it is still pending. Every other
transition is refused.
"""

from enum import Enum

from .exceptions import InvalidTransitionError

APPROVER_ROLES = frozenset({"manager", "admin", "hr"})
ADMIN_ROLES = frozenset({"admin", "hr"})


class LeaveStatus(str, Enum):
    PENDING = "pending"
    APPROVED = "approved"
    REJECTED = "rejected"
    CANCELLED = "cancelled"


class ReviewAction(str, Enum):
    APPROVED = "approved"
    REJECTED = "rejected"


def review_transition(current: LeaveStatus, action: ReviewAction) -> LeaveStatus:
    """
    Resolve the status a review action leads to.

    Args:
        current: Status the leave currently has
        action: Reviewer decision

    Returns:
        LeaveStatus: The new status

    Raises:
        InvalidTransitionError: If the leave is no longer pending
    """
    if LeaveStatus(current) is not LeaveStatus.PENDING:
        raise InvalidTransitionError(
            f"Leave request is already {LeaveStatus(current).value}"
        )
    return LeaveStatus(ReviewAction(action).value)


def cancel_transition(current: LeaveStatus) -> LeaveStatus:
    if LeaveStatus(current) is not LeaveStatus.PENDING:
        raise InvalidTransitionError(
            f"Only pending requests can be cancelled, this one is {LeaveStatus(current).value}"
        )
    return LeaveStatus.CANCELLED
