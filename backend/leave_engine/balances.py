"""Leave balance arithmetic."""

from typing import Optional


def available_days(
    allocated: Optional[int],
    carried_forward: Optional[int],
    used: Optional[int],
) -> int:
    """Days left in a balance: allocated + carried forward - used, missing values count as 0."""
    return (allocated or 0) + (carried_forward or 0) - (used or 0)
