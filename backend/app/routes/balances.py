"""
Leave type and balance API routes.
"""

from typing import List, Optional

from fastapi import APIRouter, Depends, Query

from app.dependencies import get_current_user_id, get_leave_service
from app.middleware.rate_limit import rate_limit
from app.models import LeaveBalance, LeaveType
from app.services.leave_service import LeaveService

router = APIRouter()


@router.get(
    "/leave-types",
    response_model=List[LeaveType],
    summary="List Leave Types",
    dependencies=[Depends(rate_limit("read_operations"))],
)
async def list_leave_types(
    service: LeaveService = Depends(get_leave_service),
) -> List[LeaveType]:
    """Return every active leave type. Does not require authentication."""
    return service.repository.list_leave_types(active_only=True)


@router.get(
    "/balances",
    response_model=List[LeaveBalance],
    summary="List Leave Balances",
    dependencies=[Depends(rate_limit("read_operations"))],
)
async def list_balances(
    year: Optional[int] = Query(default=None, ge=2000, le=2100, description="Defaults to the current year"),
    user_id: str = Depends(get_current_user_id),
    service: LeaveService = Depends(get_leave_service),
) -> List[LeaveBalance]:
    return service.list_balances(user_id, year)
