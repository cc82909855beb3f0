"""
LeaveRepository abstraction layer for leave data.

Defines the interface the leave service uses to read and write profiles,
leave types, balances and leave requests, allowing the API to swap
between storage backends.
"""

import logging
import re
from abc import ABC, abstractmethod
from typing import Dict, List, Optional, Tuple

from app.models import Leave, LeaveBalance, LeaveType, Profile
from leave_engine import LeaveStatus, load_leave_types

logger = logging.getLogger(__name__)


class LeaveRepository(ABC):
    """
    Abstract base class for leave data storage.

    Implementations:
    - InMemoryLeaveRepository: process-local dictionaries (development and tests)
    """

    @abstractmethod
    def get_profile(self, user_id: str) -> Optional[Profile]:
        """Return the profile for user_id, or None if unknown."""
        pass

    @abstractmethod
    def list_profiles(self) -> List[Profile]:
        pass

    @abstractmethod
    def add_profile(self, profile: Profile) -> Profile:
        pass

    @abstractmethod
    def update_profile(self, profile: Profile) -> Profile:
        """Replace an existing profile. Raises KeyError if it does not exist."""
        pass

    @abstractmethod
    def get_leave_type(self, leave_type_id: str) -> Optional[LeaveType]:
        pass

    @abstractmethod
    def list_leave_types(self, active_only: bool = True) -> List[LeaveType]:
        pass

    @abstractmethod
    def add_leave_type(self, leave_type: LeaveType) -> LeaveType:
        pass

    @abstractmethod
    def update_leave_type(self, leave_type: LeaveType) -> LeaveType:
        pass

    @abstractmethod
    def get_balance(self, employee_id: str, leave_type_id: str, year: int) -> Optional[LeaveBalance]:
        pass

    @abstractmethod
    def list_balances(self, employee_id: str, year: int) -> List[LeaveBalance]:
        pass

    @abstractmethod
    def save_balance(self, balance: LeaveBalance) -> LeaveBalance:
        """Insert or replace the balance for (employee, leave type, year)."""
        pass

    @abstractmethod
    def add_used_days(self, employee_id: str, leave_type_id: str, days: int, year: int) -> LeaveBalance:
        """
        Add days to the used count of a balance.

        Creates the balance row with zero allocation when none exists.

        Returns:
            LeaveBalance: The updated balance
        """
        pass

    @abstractmethod
    def create_leave(self, leave: Leave) -> Leave:
        pass

    @abstractmethod
    def get_leave(self, leave_id: str) -> Optional[Leave]:
        pass

    @abstractmethod
    def update_leave(self, leave: Leave) -> Leave:
        pass

    @abstractmethod
    def list_leaves(
        self,
        requester_id: Optional[str] = None,
        status: Optional[LeaveStatus] = None,
        year: Optional[int] = None,
    ) -> List[Leave]:
        """List leaves, optionally filtered by requester, status and start year."""
        pass


def leave_type_slug(name: str) -> str:
    return re.sub(r"[^a-z0-9]+", "-", name.lower()).strip("-")


class InMemoryLeaveRepository(LeaveRepository):
    """Repository backed by dictionaries that live as long as the process."""

    def __init__(self, seed_leave_types: bool = False):
        """
        Args:
            seed_leave_types: Load the default leave type catalog
        """
        self._profiles: Dict[str, Profile] = {}
        self._leave_types: Dict[str, LeaveType] = {}
        self._balances: Dict[Tuple[str, str, int], LeaveBalance] = {}
        self._leaves: Dict[str, Leave] = {}

        if seed_leave_types:
            for entry in load_leave_types():
                self.add_leave_type(LeaveType(id=leave_type_slug(entry["name"]), **entry))
            logger.info(f"Seeded {len(self._leave_types)} default leave types")

    def get_profile(self, user_id: str) -> Optional[Profile]:
        return self._profiles.get(user_id)

    def list_profiles(self) -> List[Profile]:
        return list(self._profiles.values())

    def add_profile(self, profile: Profile) -> Profile:
        self._profiles[profile.id] = profile
        return profile

    def update_profile(self, profile: Profile) -> Profile:
        if profile.id not in self._profiles:
            raise KeyError(profile.id)
        self._profiles[profile.id] = profile
        return profile

    def get_leave_type(self, leave_type_id: str) -> Optional[LeaveType]:
        return self._leave_types.get(leave_type_id)

    def list_leave_types(self, active_only: bool = True) -> List[LeaveType]:
        return [lt for lt in self._leave_types.values() if lt.is_active or not active_only]

    def add_leave_type(self, leave_type: LeaveType) -> LeaveType:
        self._leave_types[leave_type.id] = leave_type
        return leave_type

    def update_leave_type(self, leave_type: LeaveType) -> LeaveType:
        if leave_type.id not in self._leave_types:
            raise KeyError(leave_type.id)
        self._leave_types[leave_type.id] = leave_type
        return leave_type

    def get_balance(self, employee_id: str, leave_type_id: str, year: int) -> Optional[LeaveBalance]:
        return self._balances.get((employee_id, leave_type_id, year))

    def list_balances(self, employee_id: str, year: int) -> List[LeaveBalance]:
        return [
            balance
            for (emp, _, balance_year), balance in self._balances.items()
            if emp == employee_id and balance_year == year
        ]

    def save_balance(self, balance: LeaveBalance) -> LeaveBalance:
        self._balances[(balance.employee_id, balance.leave_type_id, balance.year)] = balance
        return balance

    def add_used_days(self, employee_id: str, leave_type_id: str, days: int, year: int) -> LeaveBalance:
        balance = self.get_balance(employee_id, leave_type_id, year)
        if balance is None:
            balance = LeaveBalance(
                employee_id=employee_id,
                leave_type_id=leave_type_id,
                year=year,
                used_days=days,
            )
        else:
            balance = balance.model_copy(update={"used_days": balance.used_days + days})
        return self.save_balance(balance)

    def create_leave(self, leave: Leave) -> Leave:
        self._leaves[leave.id] = leave
        return leave

    def get_leave(self, leave_id: str) -> Optional[Leave]:
        return self._leaves.get(leave_id)

    def update_leave(self, leave: Leave) -> Leave:
        if leave.id not in self._leaves:
            raise KeyError(leave.id)
        self._leaves[leave.id] = leave
        return leave

    def list_leaves(
        self,
        requester_id: Optional[str] = None,
        status: Optional[LeaveStatus] = None,
        year: Optional[int] = None,
    ) -> List[Leave]:
        leaves = [
            leave
            for leave in self._leaves.values()
            if (requester_id is None or leave.requester_id == requester_id)
            and (status is None or leave.status == status)
            and (year is None or leave.start_date.year == year)
        ]
        return sorted(leaves, key=lambda leave: leave.created_at, reverse=True)
