"""
Unit tests for leave business rules.

Covers business day counting, balance arithmetic, status transitions and
statistics without the API layer.
"""

from datetime import date, datetime, timedelta, timezone

import pytest

from leave_engine import (
    InvalidDateRangeError,
    InvalidTransitionError,
    LeaveStatus,
    ReviewAction,
    available_days,
    cancel_transition,
    compute_approval_metrics,
    compute_leave_statistics,
    compute_leave_type_statistics,
    compute_monthly_trends,
    compute_top_requesters,
    count_business_days,
    review_transition,
)


class TestBusinessDays:
    """Tests for count_business_days."""

    def test_full_work_week(self):
        # 2025-03-03 is a Monday
        assert count_business_days(date(2025, 3, 3), date(2025, 3, 7)) == 5

    def test_weekend_is_excluded(self):
        assert count_business_days(date(2025, 3, 3), date(2025, 3, 9)) == 5

    def test_weekend_only(self):
        assert count_business_days(date(2025, 3, 1), date(2025, 3, 2)) == 0

    def test_single_day(self):
        assert count_business_days(date(2025, 3, 5), date(2025, 3, 5)) == 1

    def test_spans_month_boundary(self):
        # Friday 2025-02-28 to Tuesday 2025-03-04
        assert count_business_days(date(2025, 2, 28), date(2025, 3, 4)) == 3

    def test_end_before_start(self):
        with pytest.raises(InvalidDateRangeError):
            count_business_days(date(2025, 3, 7), date(2025, 3, 3))


class TestAvailableDays:
    def test_includes_carry_forward(self):
        assert available_days(25, 5, 12) == 18

    def test_missing_values_count_as_zero(self):
        assert available_days(None, None, None) == 0
        assert available_days(10, None, None) == 10


class TestTransitions:
    """Tests for review and cancel transitions."""

    @pytest.mark.parametrize(
        "action,expected",
        [
            (ReviewAction.APPROVED, LeaveStatus.APPROVED),
            (ReviewAction.REJECTED, LeaveStatus.REJECTED),
            ("approved", LeaveStatus.APPROVED),
        ],
    )
    def test_pending_can_be_reviewed(self, action, expected):
        assert review_transition(LeaveStatus.PENDING, action) is expected

    @pytest.mark.parametrize(
        "current", [LeaveStatus.APPROVED, LeaveStatus.REJECTED, LeaveStatus.CANCELLED]
    )
    def test_processed_leave_cannot_be_reviewed(self, current):
        with pytest.raises(InvalidTransitionError, match=current.value):
            review_transition(current, ReviewAction.APPROVED)

    def test_unknown_action_rejected(self):
        with pytest.raises(ValueError):
            review_transition(LeaveStatus.PENDING, "cancelled")

    def test_pending_can_be_cancelled(self):
        assert cancel_transition(LeaveStatus.PENDING) is LeaveStatus.CANCELLED

    def test_approved_cannot_be_cancelled(self):
        with pytest.raises(InvalidTransitionError):
            cancel_transition(LeaveStatus.APPROVED)


class TestStatistics:
    def test_counts_and_rates(self):
        leaves = [
            {"status": "approved", "days_count": 5},
            {"status": "approved", "days_count": 3},
            {"status": "rejected", "days_count": 2},
            {"status": "pending", "days_count": 1},
            {"status": "cancelled", "days_count": 4},
        ]

        stats = compute_leave_statistics(leaves)

        assert stats["total_leaves"] == 5
        assert stats["approved_leaves"] == 2
        assert stats["rejected_leaves"] == 1
        assert stats["pending_leaves"] == 1
        assert stats["cancelled_leaves"] == 1
        assert stats["total_approved_days"] == 8
        assert stats["avg_leave_duration"] == 3.0
        assert stats["approval_rate"] == 66.7

    def test_empty(self):
        stats = compute_leave_statistics([])

        assert stats["total_leaves"] == 0
        assert stats["approval_rate"] == 0.0
        assert stats["avg_leave_duration"] == 0.0


NOW = datetime(2025, 6, 1, 12, 0, tzinfo=timezone.utc)


def leave_row(
    status,
    days,
    leave_type_id="annual-leave",
    start=date(2025, 3, 3),
    created_hours_ago=100,
    approved_after_hours=None,
):
    created_at = NOW - timedelta(hours=created_hours_ago)
    approved_at = None
    if approved_after_hours is not None:
        approved_at = created_at + timedelta(hours=approved_after_hours)
    return {
        "status": status,
        "days_count": days,
        "leave_type_id": leave_type_id,
        "start_date": start,
        "created_at": created_at,
        "approved_at": approved_at,
    }


class TestStatisticsBreakdowns:
    """Tests for per-type, monthly and approval breakdowns."""

    def test_leave_type_breakdown_includes_unused_types(self):
        leaves = [
            leave_row("approved", 5, approved_after_hours=2),
            leave_row("approved", 2, approved_after_hours=2),
            leave_row("pending", 1),
            leave_row("rejected", 3, leave_type_id="sick-leave"),
        ]
        types = [
            {"id": "annual-leave", "name": "Annual Leave"},
            {"id": "sick-leave", "name": "Sick Leave"},
            {"id": "personal-leave", "name": "Personal Leave"},
        ]

        stats = {s["leave_type_id"]: s for s in compute_leave_type_statistics(leaves, types)}

        assert stats["annual-leave"]["total_requests"] == 3
        assert stats["annual-leave"]["approved_requests"] == 2
        assert stats["annual-leave"]["pending_requests"] == 1
        assert stats["annual-leave"]["total_days_taken"] == 7
        assert stats["annual-leave"]["avg_days_per_request"] == 3.5
        assert stats["sick-leave"]["rejected_requests"] == 1
        assert stats["sick-leave"]["total_days_taken"] == 0
        assert stats["personal-leave"]["total_requests"] == 0
        assert stats["personal-leave"]["avg_days_per_request"] == 0.0

    def test_monthly_trends_in_calendar_order(self):
        leaves = [
            leave_row("approved", 4, start=date(2025, 7, 1), approved_after_hours=1),
            leave_row("pending", 2, start=date(2025, 3, 10)),
            leave_row("approved", 1, start=date(2025, 3, 3), approved_after_hours=1),
        ]

        trends = compute_monthly_trends(leaves)

        assert [t["month_num"] for t in trends] == [3, 7]
        assert trends[0]["month_name"] == "March"
        assert trends[0]["total_requests"] == 2
        assert trends[0]["approved_requests"] == 1
        assert trends[0]["total_days"] == 1
        assert trends[1]["total_days"] == 4

    def test_approval_metrics(self):
        leaves = [
            leave_row("approved", 5, approved_after_hours=2),
            leave_row("approved", 1, approved_after_hours=5),
            leave_row("rejected", 2),
            leave_row("pending", 1, created_hours_ago=49),
            leave_row("pending", 1, created_hours_ago=47),
        ]

        metrics = compute_approval_metrics(leaves, NOW)

        assert metrics["total_processed"] == 3
        assert metrics["total_approved"] == 2
        assert metrics["total_rejected"] == 1
        assert metrics["avg_approval_time_hours"] == 3.5
        assert metrics["approval_rate"] == 66.7
        assert metrics["overdue_pending_requests"] == 1

    def test_approval_metrics_empty(self):
        metrics = compute_approval_metrics([], NOW)

        assert metrics["avg_approval_time_hours"] == 0.0
        assert metrics["approval_rate"] == 0.0
        assert metrics["overdue_pending_requests"] == 0

    def test_top_requesters_by_approved_days(self):
        profiles = [
            {"id": "ada", "full_name": "Ada", "department": "Engineering", "role": "employee"},
            {"id": "max", "full_name": "Max", "department": None, "role": "manager"},
            {"id": "gone", "full_name": "Gone", "department": None, "role": "employee", "is_active": False},
            {"id": "idle", "full_name": "Idle", "department": None, "role": "employee"},
        ]
        leaves = [
            {**leave_row("approved", 2, approved_after_hours=1), "requester_id": "ada"},
            {**leave_row("pending", 3), "requester_id": "ada"},
            {**leave_row("approved", 5, approved_after_hours=1), "requester_id": "max"},
            {**leave_row("approved", 9, approved_after_hours=1), "requester_id": "gone"},
        ]

        top = compute_top_requesters(leaves, profiles)

        assert [row["employee_id"] for row in top] == ["max", "ada"]
        assert top[1]["total_requests"] == 2
        assert top[1]["total_days_taken"] == 2

    def test_top_requesters_limit(self):
        profiles = [{"id": str(i), "full_name": f"P{i}", "role": "employee"} for i in range(12)]
        leaves = [{**leave_row("approved", i, approved_after_hours=1), "requester_id": str(i)} for i in range(12)]

        top = compute_top_requesters(leaves, profiles)

        assert len(top) == 10
        assert top[0]["employee_id"] == "11"
