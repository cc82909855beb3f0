"""
Leave Service

Business operations behind the leave endpoints: submitting requests,
reviewing them, cancelling them, and administering users, leave types
and balances.
"""

import logging
import uuid
from datetime import datetime, timezone
from typing import Callable, List, Mapping, Optional, Tuple

from app.middleware.error_handler import (
    InsufficientBalanceError,
    InvalidLeaveTypeError,
    LeaveConflictError,
    LeaveNotFoundError,
    LeaveTypeNotFoundError,
    PermissionDeniedError,
    ProfileNotFoundError,
    SelfModificationError,
)
from app.models import (
    ApprovalMetrics,
    DepartmentStats,
    EmployeeStats,
    Leave,
    LeaveBalance,
    LeaveCreateRequest,
    LeaveStats,
    LeaveType,
    LeaveTypeStats,
    LeaveTypeUpsertRequest,
    MonthlyTrend,
    OrgStatsResponse,
    Profile,
    ProfileCreateRequest,
    ReviewRequest,
    TopRequester,
)
from leave_engine import (
    ADMIN_ROLES,
    APPROVER_ROLES,
    InvalidTransitionError,
    LeaveStatus,
    ReviewAction,
    cancel_transition,
    compute_approval_metrics,
    compute_leave_statistics,
    compute_leave_type_statistics,
    compute_monthly_trends,
    compute_top_requesters,
    count_business_days,
    review_transition,
)

from .leave_repository import LeaveRepository, leave_type_slug

logger = logging.getLogger(__name__)


def _utcnow() -> datetime:
    return datetime.now(timezone.utc)


class LeaveService:
    """Coordinates leave rules with the repository."""

    def __init__(self, repository: LeaveRepository, now: Callable[[], datetime] = _utcnow):
        """
        Args:
            repository: Storage backend for leave data
            now: Callable returning the current UTC datetime
        """
        self.repository = repository
        self.now = now

    def _require_role(self, profile: Optional[Profile], roles: frozenset) -> Profile:
        if profile is None or profile.role not in roles:
            raise PermissionDeniedError(
                current_role=profile.role if profile else None,
                required_roles=list(roles),
            )
        return profile

    def _get_leave(self, leave_id: str) -> Leave:
        leave = self.repository.get_leave(leave_id)
        if leave is None:
            raise LeaveNotFoundError(leave_id)
        return leave

    def create_leave_request(self, user_id: str, payload: LeaveCreateRequest) -> Leave:
        """
        Submit a new pending leave request.

        Args:
            user_id: Requesting employee
            payload: Validated request body

        Returns:
            Leave: The stored request

        Raises:
            InvalidLeaveTypeError: If the leave type is unknown or inactive
            InsufficientBalanceError: If the current-year balance is too small
        """
        business_days = count_business_days(payload.start_date, payload.end_date)

        leave_type = self.repository.get_leave_type(payload.leave_type_id)
        if leave_type is None or not leave_type.is_active:
            raise InvalidLeaveTypeError(payload.leave_type_id)

        now = self.now()
        balance = self.repository.get_balance(user_id, leave_type.id, now.year)
        available = balance.available_days if balance else 0
        if available < business_days:
            raise InsufficientBalanceError(available=available, requested=business_days)

        leave = self.repository.create_leave(
            Leave(
                id=str(uuid.uuid4()),
                requester_id=user_id,
                leave_type_id=leave_type.id,
                start_date=payload.start_date,
                end_date=payload.end_date,
                days_count=business_days,
                reason=payload.reason,
                metadata=payload.metadata,
                status=LeaveStatus.PENDING,
                created_at=now,
                updated_at=now,
            )
        )
        logger.info(
            f"Leave {leave.id} requested by {user_id}: "
            f"{business_days} days of {leave_type.name}"
        )
        return leave

    def review_leave(self, reviewer_id: str, leave_id: str, review: ReviewRequest) -> Leave:
        """
        Approve or reject a pending leave request.

        Approval deducts the leave's days from the requester's balance for
        the current year. A failing balance update is logged and does not
        undo the status change.

        Raises:
            PermissionDeniedError: If the reviewer is not a manager, hr or admin
            LeaveNotFoundError: If the leave does not exist
            LeaveConflictError: If the leave is no longer pending
        """
        self._require_role(self.repository.get_profile(reviewer_id), APPROVER_ROLES)
        leave = self._get_leave(leave_id)

        try:
            new_status = review_transition(leave.status, review.action)
        except InvalidTransitionError as e:
            raise LeaveConflictError(str(e), leave_id=leave_id) from e

        now = self.now()
        update = {
            "status": new_status,
            "approver_id": reviewer_id,
            "comments": review.comments,
            "updated_at": now,
        }

        if review.action is ReviewAction.APPROVED:
            update["approved_at"] = now
            try:
                self.repository.add_used_days(
                    leave.requester_id, leave.leave_type_id, leave.days_count, now.year
                )
            except Exception:
                logger.exception(f"Failed to update balance for approved leave {leave_id}")

        updated = self.repository.update_leave(leave.model_copy(update=update))
        logger.info(f"Leave {leave_id} {new_status.value} by {reviewer_id}")
        return updated

    def cancel_leave(self, user_id: str, leave_id: str) -> Leave:
        """Cancel a pending request on behalf of its requester."""
        leave = self._get_leave(leave_id)
        if leave.requester_id != user_id:
            raise PermissionDeniedError(current_role=None, required_roles=["requester"])

        try:
            new_status = cancel_transition(leave.status)
        except InvalidTransitionError as e:
            raise LeaveConflictError(str(e), leave_id=leave_id) from e

        updated = self.repository.update_leave(
            leave.model_copy(update={"status": new_status, "updated_at": self.now()})
        )
        logger.info(f"Leave {leave_id} cancelled by requester")
        return updated

    def list_leaves(
        self,
        user_id: str,
        status: Optional[LeaveStatus] = None,
        all_employees: bool = False,
    ) -> List[Leave]:
        """
        List leave requests visible to the caller.

        Employees see their own requests. Approvers asking for all_employees
        see every request.
        """
        if all_employees:
            self._require_role(self.repository.get_profile(user_id), APPROVER_ROLES)
            return self.repository.list_leaves(status=status)
        return self.repository.list_leaves(requester_id=user_id, status=status)

    def list_balances(self, user_id: str, year: Optional[int] = None) -> List[LeaveBalance]:
        return self.repository.list_balances(user_id, year or self.now().year)

    def initialize_balances(self, actor_id: str, year: Optional[int] = None) -> tuple[int, int]:
        """
        Create missing balances for every active employee and leave type.

        Existing balances are left untouched.

        Returns:
            tuple: (target year, number of balances created)

        Raises:
            PermissionDeniedError: If the actor is not hr or admin
        """
        self._require_role(self.repository.get_profile(actor_id), ADMIN_ROLES)
        target_year = year or self.now().year

        created = 0
        leave_types = self.repository.list_leave_types(active_only=True)
        for profile in self.repository.list_profiles():
            if not profile.is_active:
                continue
            for leave_type in leave_types:
                if self.repository.get_balance(profile.id, leave_type.id, target_year):
                    continue
                self.repository.save_balance(
                    LeaveBalance(
                        employee_id=profile.id,
                        leave_type_id=leave_type.id,
                        year=target_year,
                        allocated_days=leave_type.default_allocation_days,
                    )
                )
                created += 1

        logger.info(f"Initialized {created} leave balances for {target_year}")
        return target_year, created

    def organization_statistics(self, actor_id: str, year: Optional[int] = None) -> OrgStatsResponse:
        """
        Aggregate employee and leave figures for the admin dashboard.

        Leave figures cover requests starting in the target year. Leave type
        breakdowns list every active type, requested or not.
        """
        self._require_role(self.repository.get_profile(actor_id), ADMIN_ROLES)
        target_year = year or self.now().year

        profiles = self.repository.list_profiles()
        active = [p for p in profiles if p.is_active]
        employee_stats = EmployeeStats(
            total_employees=sum(1 for p in active if p.role == "employee"),
            total_managers=sum(1 for p in active if p.role == "manager"),
            total_hr=sum(1 for p in active if p.role == "hr"),
            total_admins=sum(1 for p in active if p.role == "admin"),
            total_active_users=len(active),
            total_inactive_users=len(profiles) - len(active),
        )

        departments: dict[str, list] = {}
        for profile in active:
            if profile.department:
                departments.setdefault(profile.department, []).append(profile)
        department_stats = [
            DepartmentStats(
                department=name,
                employee_count=len(members),
                manager_count=sum(1 for p in members if p.role == "manager"),
            )
            for name, members in sorted(departments.items())
        ]

        leaves = [leave.model_dump() for leave in self.repository.list_leaves(year=target_year)]
        leave_types = [
            {"id": lt.id, "name": lt.name} for lt in self.repository.list_leave_types(active_only=True)
        ]

        return OrgStatsResponse(
            year=target_year,
            employee_stats=employee_stats,
            department_stats=department_stats,
            leave_stats=LeaveStats(**compute_leave_statistics(leaves)),
            leave_type_stats=[
                LeaveTypeStats(**s) for s in compute_leave_type_statistics(leaves, leave_types)
            ],
            monthly_trends=[MonthlyTrend(**t) for t in compute_monthly_trends(leaves)],
            approval_metrics=ApprovalMetrics(**compute_approval_metrics(leaves, self.now())),
            top_requesters=[
                TopRequester(**r)
                for r in compute_top_requesters(leaves, [p.model_dump() for p in profiles])
            ],
        )

    # Administration

    def bootstrap_admins(self, admins: Mapping[str, str]) -> int:
        """
        Ensure an admin profile exists for each configured user.

        Args:
            admins: User ID -> email of the initial administrators

        Returns:
            int: Number of profiles created
        """
        created = 0
        for user_id, email in admins.items():
            if self.repository.get_profile(user_id):
                continue
            self.repository.add_profile(
                Profile(id=user_id, full_name=email.split("@")[0], email=email, role="admin")
            )
            created += 1
        if created:
            logger.info(f"Created {created} bootstrap administrator profiles")
        return created

    def list_profiles(
        self,
        actor_id: str,
        role: Optional[str] = None,
        search: Optional[str] = None,
        limit: int = 50,
        offset: int = 0,
    ) -> Tuple[List[Profile], int]:
        """
        List profiles for user administration, filtered by role and by a
        case-insensitive name search.

        Returns:
            tuple: (page of profiles, total number of matches)
        """
        self._require_role(self.repository.get_profile(actor_id), ADMIN_ROLES)

        profiles = [
            p
            for p in self.repository.list_profiles()
            if (role is None or p.role == role)
            and (not search or search.lower() in p.full_name.lower())
        ]
        profiles.sort(key=lambda p: p.full_name.lower())
        return profiles[offset:offset + limit], len(profiles)

    def create_profile(self, actor_id: str, payload: ProfileCreateRequest) -> Profile:
        """
        Register a user.

        Raises:
            PermissionDeniedError: If the actor is not hr or admin
            LeaveConflictError: If the user ID or email is already taken
        """
        self._require_role(self.repository.get_profile(actor_id), ADMIN_ROLES)

        user_id = payload.id or str(uuid.uuid4())
        if self.repository.get_profile(user_id):
            raise LeaveConflictError(f"User {user_id} already exists")
        email = payload.email.lower()
        if any(p.email.lower() == email for p in self.repository.list_profiles()):
            raise LeaveConflictError(f"Email {payload.email} is already registered")

        profile = self.repository.add_profile(
            Profile(**payload.model_dump(exclude={"id", "email"}), id=user_id, email=email)
        )
        logger.info(f"User {user_id} created by {actor_id} with role {profile.role}")
        return profile

    def _get_profile(self, user_id: str) -> Profile:
        profile = self.repository.get_profile(user_id)
        if profile is None:
            raise ProfileNotFoundError(user_id)
        return profile

    def update_role(self, actor_id: str, user_id: str, new_role: str) -> Profile:
        """
        Change another user's role.

        Raises:
            SelfModificationError: If actors try to change their own role
            ProfileNotFoundError: If the user does not exist
        """
        self._require_role(self.repository.get_profile(actor_id), ADMIN_ROLES)
        if user_id == actor_id:
            raise SelfModificationError("You cannot change your own role")

        profile = self._get_profile(user_id)
        updated = self.repository.update_profile(profile.model_copy(update={"role": new_role}))
        logger.info(f"User {user_id} role changed from {profile.role} to {new_role} by {actor_id}")
        return updated

    def deactivate_profile(self, actor_id: str, user_id: str) -> Profile:
        """Mark a user inactive. Their leave history is kept."""
        self._require_role(self.repository.get_profile(actor_id), ADMIN_ROLES)
        if user_id == actor_id:
            raise SelfModificationError("You cannot deactivate yourself")

        profile = self._get_profile(user_id)
        updated = self.repository.update_profile(profile.model_copy(update={"is_active": False}))
        logger.info(f"User {user_id} deactivated by {actor_id}")
        return updated

    def list_leave_types(
        self,
        actor_id: str,
        include_inactive: bool = False,
        search: Optional[str] = None,
    ) -> List[LeaveType]:
        self._require_role(self.repository.get_profile(actor_id), ADMIN_ROLES)
        leave_types = [
            lt
            for lt in self.repository.list_leave_types(active_only=not include_inactive)
            if not search or search.lower() in lt.name.lower()
        ]
        return sorted(leave_types, key=lambda lt: lt.name)

    def create_leave_type(self, actor_id: str, payload: LeaveTypeUpsertRequest) -> LeaveType:
        """
        Add a leave type. Its ID is derived from the name.

        Raises:
            LeaveConflictError: If a leave type with the same ID exists
        """
        self._require_role(self.repository.get_profile(actor_id), ADMIN_ROLES)

        leave_type_id = leave_type_slug(payload.name)
        if self.repository.get_leave_type(leave_type_id):
            raise LeaveConflictError(f"Leave type {leave_type_id} already exists")

        leave_type = self.repository.add_leave_type(LeaveType(id=leave_type_id, **payload.model_dump()))
        logger.info(f"Leave type {leave_type_id} created by {actor_id}")
        return leave_type

    def _get_leave_type(self, leave_type_id: str) -> LeaveType:
        leave_type = self.repository.get_leave_type(leave_type_id)
        if leave_type is None:
            raise LeaveTypeNotFoundError(leave_type_id)
        return leave_type

    def update_leave_type(
        self, actor_id: str, leave_type_id: str, payload: LeaveTypeUpsertRequest
    ) -> LeaveType:
        """Replace a leave type's settings. The ID stays the same."""
        self._require_role(self.repository.get_profile(actor_id), ADMIN_ROLES)
        self._get_leave_type(leave_type_id)

        updated = self.repository.update_leave_type(LeaveType(id=leave_type_id, **payload.model_dump()))
        logger.info(f"Leave type {leave_type_id} updated by {actor_id}")
        return updated

    def deactivate_leave_type(self, actor_id: str, leave_type_id: str) -> LeaveType:
        """
        Stop a leave type from accepting new requests.

        Existing leaves and balances keep referring to it.
        """
        self._require_role(self.repository.get_profile(actor_id), ADMIN_ROLES)
        leave_type = self._get_leave_type(leave_type_id)

        updated = self.repository.update_leave_type(leave_type.model_copy(update={"is_active": False}))
        logger.info(f"Leave type {leave_type_id} deactivated by {actor_id}")
        return updated
