"""Custom exceptions for leave business rules."""


class LeaveRuleError(Exception):
    """Base exception for leave rule violations."""

    pass


class InvalidDateRangeError(LeaveRuleError):
    """End date falls before start date."""

    pass


class InvalidTransitionError(LeaveRuleError):
    """Requested status change is not allowed from the current status."""

    pass


class LeaveTypeCatalogError(LeaveRuleError):
    """leave_types.yaml is missing or malformed."""

    pass
