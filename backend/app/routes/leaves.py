"""
Leave request API routes.

Submit, list, review and cancel leave requests, and attach documents.
"""

import logging
from typing import List, Optional

from fastapi import APIRouter, Depends, File, Query, Request, UploadFile

from app.dependencies import get_current_user_id, get_document_storage, get_leave_service
from app.middleware.error_handler import LeaveAppError, LeaveNotFoundError, PermissionDeniedError
from app.middleware.document_validator import validate_document_size
from app.middleware.rate_limit import rate_limit
from app.models import DocumentUploadResponse, Leave, LeaveCreateRequest, ReviewRequest, ReviewResponse
from app.services.document_storage import DocumentStorage
from app.services.leave_service import LeaveService
from leave_engine import APPROVER_ROLES, LeaveStatus

logger = logging.getLogger(__name__)

router = APIRouter()


@router.post(
    "/leaves",
    response_model=Leave,
    summary="Submit Leave Request",
    description="""
Submit a leave request for the authenticated employee.

The request covers every weekday between `start_date` and `end_date`
inclusive and must fit in the current-year balance for the leave type.

**Rate Limit:** 10 requests per 10 seconds per user
""",
    responses={
        400: {"description": "Invalid leave type or insufficient balance"},
        401: {"description": "Missing or invalid bearer token"},
        429: {"description": "Rate limit exceeded"},
    },
    dependencies=[Depends(rate_limit("leave_creation"))],
)
async def create_leave(
    payload: LeaveCreateRequest,
    user_id: str = Depends(get_current_user_id),
    service: LeaveService = Depends(get_leave_service),
) -> Leave:
    return service.create_leave_request(user_id, payload)


@router.get(
    "/leaves",
    response_model=List[Leave],
    summary="List Leave Requests",
    dependencies=[Depends(rate_limit("read_operations"))],
)
async def list_leaves(
    status: Optional[LeaveStatus] = Query(default=None, description="Filter by status"),
    scope: str = Query(
        default="mine",
        pattern="^(mine|all)$",
        description="'all' lists every employee's requests (managers, hr, admins)",
    ),
    user_id: str = Depends(get_current_user_id),
    service: LeaveService = Depends(get_leave_service),
) -> List[Leave]:
    return service.list_leaves(user_id, status=status, all_employees=scope == "all")


@router.post(
    "/leaves/{leave_id}/review",
    response_model=ReviewResponse,
    summary="Approve or Reject Leave Request",
    description="""
Approve or reject a pending leave request. Requires the manager, hr or admin role.

Approving deducts the request's business days from the requester's balance.

**Rate Limit:** 30 requests per minute per user
""",
    responses={
        403: {"description": "Insufficient permissions"},
        404: {"description": "Leave request not found"},
        409: {"description": "Leave request is no longer pending"},
        429: {"description": "Rate limit exceeded"},
    },
    dependencies=[Depends(rate_limit("leave_approval"))],
)
async def review_leave(
    leave_id: str,
    review: ReviewRequest,
    user_id: str = Depends(get_current_user_id),
    service: LeaveService = Depends(get_leave_service),
) -> ReviewResponse:
    return ReviewResponse(success=True, data=service.review_leave(user_id, leave_id, review))


@router.post(
    "/leaves/{leave_id}/cancel",
    response_model=ReviewResponse,
    summary="Cancel Leave Request",
    dependencies=[Depends(rate_limit("leave_approval"))],
)
async def cancel_leave(
    leave_id: str,
    user_id: str = Depends(get_current_user_id),
    service: LeaveService = Depends(get_leave_service),
) -> ReviewResponse:
    """Cancel one of the caller's own pending requests."""
    return ReviewResponse(success=True, data=service.cancel_leave(user_id, leave_id))


@router.post(
    "/leaves/{leave_id}/documents",
    response_model=DocumentUploadResponse,
    summary="Attach Supporting Document",
    description="""
Attach a supporting document (e.g. a medical certificate) to a leave request.

Only the requester and approvers may attach documents.

**Rate Limit:** 50 uploads per hour per user
""",
    responses={
        403: {"description": "Not the requester or an approver"},
        404: {"description": "Leave request not found"},
        413: {"description": "File too large"},
        429: {"description": "Rate limit exceeded"},
    },
    dependencies=[Depends(rate_limit("document_upload"))],
)
async def upload_document(
    request: Request,
    leave_id: str,
    file: UploadFile = File(...),
    user_id: str = Depends(get_current_user_id),
    service: LeaveService = Depends(get_leave_service),
    storage: DocumentStorage = Depends(get_document_storage),
) -> DocumentUploadResponse:
    leave = service.repository.get_leave(leave_id)
    if leave is None:
        raise LeaveNotFoundError(leave_id)

    if leave.requester_id != user_id:
        profile = service.repository.get_profile(user_id)
        if profile is None or profile.role not in APPROVER_ROLES:
            raise PermissionDeniedError(
                current_role=profile.role if profile else None,
                required_roles=["requester", *APPROVER_ROLES],
            )

    size = await validate_document_size(file, request.app.state.settings.MAX_UPLOAD_SIZE)

    try:
        metadata = await storage.save_document(leave_id, file, size)
    except OSError:
        raise LeaveAppError(
            "Failed to save uploaded document. Please try again.",
            status_code=500,
            details={"leave_id": leave_id},
        )

    return DocumentUploadResponse(**metadata)
