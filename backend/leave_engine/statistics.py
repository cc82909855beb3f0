"""Aggregated leave statistics for the admin dashboard."""

import calendar
from collections import Counter
from datetime import datetime, timedelta
from typing import Any, Iterable, Mapping

from .approval import LeaveStatus

# Pending requests older than this count as overdue
OVERDUE_AFTER = timedelta(hours=48)


def compute_leave_statistics(leaves: Iterable[Mapping[str, Any]]) -> dict[str, Any]:
    """
    Summarize a collection of leave requests.

    Each item needs a ``status`` and a ``days_count`` entry.

    Returns:
        dict: Counts per status, total approved days, average request
        duration in days and approval rate (percent of processed requests)
    """
    counts: Counter = Counter()
    total_days = 0
    approved_days = 0
    total = 0

    for leave in leaves:
        status = LeaveStatus(leave["status"])
        days = int(leave.get("days_count") or 0)
        counts[status] += 1
        total += 1
        total_days += days
        if status is LeaveStatus.APPROVED:
            approved_days += days

    processed = counts[LeaveStatus.APPROVED] + counts[LeaveStatus.REJECTED]
    approval_rate = (
        round(counts[LeaveStatus.APPROVED] * 100 / processed, 1) if processed else 0.0
    )

    return {
        "pending_leaves": counts[LeaveStatus.PENDING],
        "approved_leaves": counts[LeaveStatus.APPROVED],
        "rejected_leaves": counts[LeaveStatus.REJECTED],
        "cancelled_leaves": counts[LeaveStatus.CANCELLED],
        "total_leaves": total,
        "total_approved_days": approved_days,
        "avg_leave_duration": round(total_days / total, 1) if total else 0.0,
        "approval_rate": approval_rate,
    }


def _approved_days(leaves: list) -> int:
    return sum(
        int(leave.get("days_count") or 0)
        for leave in leaves
        if LeaveStatus(leave["status"]) is LeaveStatus.APPROVED
    )


def compute_leave_type_statistics(
    leaves: Iterable[Mapping[str, Any]],
    leave_types: Iterable[Mapping[str, Any]],
) -> list[dict[str, Any]]:
    """
    Break request counts and approved days down per leave type.

    Every given leave type gets an entry, including types nobody requested.
    """
    by_type: dict[str, list] = {}
    for leave in leaves:
        by_type.setdefault(leave["leave_type_id"], []).append(leave)

    stats = []
    for leave_type in leave_types:
        requests = by_type.get(leave_type["id"], [])
        statuses = Counter(LeaveStatus(leave["status"]) for leave in requests)
        approved = statuses[LeaveStatus.APPROVED]
        total_days = _approved_days(requests)
        stats.append(
            {
                "leave_type_id": leave_type["id"],
                "leave_type_name": leave_type["name"],
                "total_requests": len(requests),
                "approved_requests": approved,
                "pending_requests": statuses[LeaveStatus.PENDING],
                "rejected_requests": statuses[LeaveStatus.REJECTED],
                "total_days_taken": total_days,
                "avg_days_per_request": round(total_days / approved, 1) if approved else 0.0,
            }
        )
    return stats


def compute_monthly_trends(leaves: Iterable[Mapping[str, Any]]) -> list[dict[str, Any]]:
    """Requests grouped by the month they start in, in calendar order."""
    by_month: dict[int, list] = {}
    for leave in leaves:
        by_month.setdefault(leave["start_date"].month, []).append(leave)

    return [
        {
            "month_num": month,
            "month_name": calendar.month_name[month],
            "total_requests": len(requests),
            "approved_requests": sum(
                1 for leave in requests if LeaveStatus(leave["status"]) is LeaveStatus.APPROVED
            ),
            "total_days": _approved_days(requests),
        }
        for month, requests in sorted(by_month.items())
    ]


def compute_approval_metrics(
    leaves: Iterable[Mapping[str, Any]],
    now: datetime,
    overdue_after: timedelta = OVERDUE_AFTER,
) -> dict[str, Any]:
    """
    Review throughput: processed counts, average hours from submission to
    approval, and pending requests older than ``overdue_after``.
    """
    approved = rejected = overdue = 0
    approval_hours = []

    for leave in leaves:
        status = LeaveStatus(leave["status"])
        if status is LeaveStatus.APPROVED:
            approved += 1
            if leave.get("approved_at") is not None:
                elapsed = leave["approved_at"] - leave["created_at"]
                approval_hours.append(elapsed.total_seconds() / 3600)
        elif status is LeaveStatus.REJECTED:
            rejected += 1
        elif status is LeaveStatus.PENDING and now - leave["created_at"] > overdue_after:
            overdue += 1

    processed = approved + rejected
    return {
        "total_processed": processed,
        "total_approved": approved,
        "total_rejected": rejected,
        "avg_approval_time_hours": (
            round(sum(approval_hours) / len(approval_hours), 2) if approval_hours else 0.0
        ),
        "approval_rate": round(approved * 100 / processed, 1) if processed else 0.0,
        "overdue_pending_requests": overdue,
    }


def compute_top_requesters(
    leaves: Iterable[Mapping[str, Any]],
    profiles: Iterable[Mapping[str, Any]],
    limit: int = 10,
) -> list[dict[str, Any]]:
    """
    Active employees with at least one request, most approved days first.

    Ties keep the order of ``profiles``.
    """
    by_requester: dict[str, list] = {}
    for leave in leaves:
        by_requester.setdefault(leave["requester_id"], []).append(leave)

    rows = [
        {
            "employee_id": profile["id"],
            "full_name": profile["full_name"],
            "department": profile.get("department"),
            "role": profile["role"],
            "total_requests": len(by_requester[profile["id"]]),
            "total_days_taken": _approved_days(by_requester[profile["id"]]),
        }
        for profile in profiles
        if profile.get("is_active", True) and profile["id"] in by_requester
    ]
    rows.sort(key=lambda row: row["total_days_taken"], reverse=True)
    return rows[:limit]
