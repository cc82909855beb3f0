"""
Administration API routes.

User and leave type management, balance initialization and organization
statistics, restricted to hr and admin.
"""

from typing import List, Optional

from fastapi import APIRouter, Body, Depends, Query

from app.dependencies import get_current_user_id, get_leave_service
from app.middleware.rate_limit import rate_limit
from app.models import (
    InitializeBalancesRequest,
    InitializeBalancesResponse,
    LeaveType,
    LeaveTypeUpsertRequest,
    OrgStatsResponse,
    Profile,
    ProfileCreateRequest,
    ProfileListResponse,
    RoleUpdateRequest,
)
from app.models.profile import Role
from app.services.leave_service import LeaveService


router = APIRouter()


@router.post(
    "/admin/leave-balances/initialize",
    response_model=InitializeBalancesResponse,
    summary="Initialize Leave Balances",
    description="""
Create the yearly balance of every active employee for every active leave
type, using each type's default allocation. Existing balances are kept.

**Rate Limit:** 200 requests per minute per user
""",
    responses={403: {"description": "Insufficient permissions"}},
    dependencies=[Depends(rate_limit("admin_operations"))],
)
async def initialize_balances(
    payload: Optional[InitializeBalancesRequest] = Body(default=None),
    user_id: str = Depends(get_current_user_id),
    service: LeaveService = Depends(get_leave_service),
) -> InitializeBalancesResponse:
    year, created = service.initialize_balances(user_id, payload.year if payload else None)
    return InitializeBalancesResponse(
        message="Leave balances initialized",
        year=year,
        balances_created=created,
    )


@router.get(
    "/admin/stats",
    response_model=OrgStatsResponse,
    summary="Organization Statistics",
    responses={403: {"description": "Insufficient permissions"}},
    dependencies=[Depends(rate_limit("admin_operations"))],
)
async def organization_stats(
    year: Optional[int] = Query(default=None, ge=2000, le=2100),
    user_id: str = Depends(get_current_user_id),
    service: LeaveService = Depends(get_leave_service),
) -> OrgStatsResponse:
    return service.organization_statistics(user_id, year)


@router.get(
    "/admin/users",
    response_model=ProfileListResponse,
    summary="List Users",
    responses={403: {"description": "Insufficient permissions"}},
    dependencies=[Depends(rate_limit("admin_operations"))],
)
async def list_users(
    role: Optional[Role] = Query(default=None, description="Filter by role"),
    search: Optional[str] = Query(default=None, max_length=100, description="Case-insensitive name search"),
    limit: int = Query(default=50, ge=1, le=200),
    offset: int = Query(default=0, ge=0),
    user_id: str = Depends(get_current_user_id),
    service: LeaveService = Depends(get_leave_service),
) -> ProfileListResponse:
    users, total = service.list_profiles(user_id, role=role, search=search, limit=limit, offset=offset)
    return ProfileListResponse(users=users, total=total, has_more=total > offset + limit)


@router.post(
    "/admin/users",
    response_model=Profile,
    summary="Create User",
    description="""
Register a user profile. Pass `id` to link the profile to an existing
identity provider account; otherwise a new ID is generated.

**Rate Limit:** 200 requests per minute per user
""",
    responses={
        403: {"description": "Insufficient permissions"},
        409: {"description": "User ID or email already registered"},
    },
    dependencies=[Depends(rate_limit("admin_operations"))],
)
async def create_user(
    payload: ProfileCreateRequest,
    user_id: str = Depends(get_current_user_id),
    service: LeaveService = Depends(get_leave_service),
) -> Profile:
    return service.create_profile(user_id, payload)


@router.patch(
    "/admin/users/{target_id}/role",
    response_model=Profile,
    summary="Change User Role",
    responses={
        400: {"description": "Administrators cannot change their own role"},
        403: {"description": "Insufficient permissions"},
        404: {"description": "User not found"},
    },
    dependencies=[Depends(rate_limit("admin_operations"))],
)
async def change_user_role(
    target_id: str,
    payload: RoleUpdateRequest,
    user_id: str = Depends(get_current_user_id),
    service: LeaveService = Depends(get_leave_service),
) -> Profile:
    return service.update_role(user_id, target_id, payload.new_role)


@router.delete(
    "/admin/users/{target_id}",
    response_model=Profile,
    summary="Deactivate User",
    responses={
        400: {"description": "Administrators cannot deactivate themselves"},
        404: {"description": "User not found"},
    },
    dependencies=[Depends(rate_limit("admin_operations"))],
)
async def deactivate_user(
    target_id: str,
    user_id: str = Depends(get_current_user_id),
    service: LeaveService = Depends(get_leave_service),
) -> Profile:
    """Mark a user inactive. The profile and its leave history are kept."""
    return service.deactivate_profile(user_id, target_id)


@router.get(
    "/admin/leave-types",
    response_model=List[LeaveType],
    summary="List Leave Types (Admin)",
    dependencies=[Depends(rate_limit("admin_operations"))],
)
async def list_all_leave_types(
    include_inactive: bool = Query(default=False),
    search: Optional[str] = Query(default=None, max_length=100),
    user_id: str = Depends(get_current_user_id),
    service: LeaveService = Depends(get_leave_service),
) -> List[LeaveType]:
    return service.list_leave_types(user_id, include_inactive=include_inactive, search=search)


@router.post(
    "/admin/leave-types",
    response_model=LeaveType,
    summary="Create Leave Type",
    responses={409: {"description": "A leave type with this name exists"}},
    dependencies=[Depends(rate_limit("admin_operations"))],
)
async def create_leave_type(
    payload: LeaveTypeUpsertRequest,
    user_id: str = Depends(get_current_user_id),
    service: LeaveService = Depends(get_leave_service),
) -> LeaveType:
    return service.create_leave_type(user_id, payload)


@router.put(
    "/admin/leave-types/{leave_type_id}",
    response_model=LeaveType,
    summary="Update Leave Type",
    responses={404: {"description": "Leave type not found"}},
    dependencies=[Depends(rate_limit("admin_operations"))],
)
async def update_leave_type(
    leave_type_id: str,
    payload: LeaveTypeUpsertRequest,
    user_id: str = Depends(get_current_user_id),
    service: LeaveService = Depends(get_leave_service),
) -> LeaveType:
    return service.update_leave_type(user_id, leave_type_id, payload)


@router.delete(
    "/admin/leave-types/{leave_type_id}",
    response_model=LeaveType,
    summary="Deactivate Leave Type",
    description="""
Stop a leave type from accepting new requests. Existing leaves and
balances keep referring to it, so the type is deactivated, not deleted.
""",
    responses={404: {"description": "Leave type not found"}},
    dependencies=[Depends(rate_limit("admin_operations"))],
)
async def deactivate_leave_type(
    leave_type_id: str,
    user_id: str = Depends(get_current_user_id),
    service: LeaveService = Depends(get_leave_service),
) -> LeaveType:
    return service.deactivate_leave_type(user_id, leave_type_id)
