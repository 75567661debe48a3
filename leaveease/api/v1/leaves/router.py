from typing import List

from fastapi import APIRouter, Depends, HTTPException, status
from sqlalchemy.ext.asyncio import AsyncSession

from leaveease.auth.dependencies import get_current_user
from leaveease.auth.rbac import require_action
from leaveease.auth.schemas import CurrentUser
from leaveease.core.enums import Action
from leaveease.core.exceptions import ServiceError
from leaveease.db.session import get_db

from .schemas import LeaveCreate, LeaveRequestResponse
from . import service

router = APIRouter(prefix="/api/v1/leaves", tags=["leaves"])


@router.post(
    "",
    response_model=LeaveRequestResponse,
    status_code=status.HTTP_201_CREATED,
    dependencies=[Depends(require_action(Action.CREATE_LEAVE))],
    responses={
        400: {"description": "Invalid date range or overlapping leave exists"},
        401: {"description": "Not authenticated"},
        403: {"description": "Not authorized, requires EMPLOYEE role"},
    },
)
async def create_leave(
    payload: LeaveCreate,
    db: AsyncSession = Depends(get_db),
    current_user: CurrentUser = Depends(get_current_user),
) -> LeaveRequestResponse:
    """Submit a leave request. Validates the date range and checks for overlapping leaves."""
    try:
        return await service.create_leave(db, current_user.username, payload)
    except ServiceError as e:
        raise HTTPException(status_code=e.status_code, detail=e.message)


@router.get(
    "/my",
    response_model=List[LeaveRequestResponse],
    dependencies=[Depends(require_action(Action.LIST_OWN_LEAVES))],
)
async def list_my_leaves(
    db: AsyncSession = Depends(get_db),
    current_user: CurrentUser = Depends(get_current_user),
) -> List[LeaveRequestResponse]:
    """Leave requests submitted by the current employee, newest first."""
    try:
        return await service.list_own_leaves(db, current_user.username)
    except ServiceError as e:
        raise HTTPException(status_code=e.status_code, detail=e.message)


@router.get(
    "",
    response_model=List[LeaveRequestResponse],
    dependencies=[Depends(require_action(Action.LIST_ALL_LEAVES))],
)
async def list_all_leaves(
    db: AsyncSession = Depends(get_db),
) -> List[LeaveRequestResponse]:
    """All leave requests across all employees. Admin only."""
    return await service.list_all_leaves(db)


@router.put(
    "/{leave_id}/approve",
    response_model=LeaveRequestResponse,
    dependencies=[Depends(require_action(Action.DECIDE_LEAVE))],
    responses={
        400: {"description": "Leave request is not in PENDING status"},
        404: {"description": "Leave request not found"},
    },
)
async def approve_leave(
    leave_id: int,
    db: AsyncSession = Depends(get_db),
    current_user: CurrentUser = Depends(get_current_user),
) -> LeaveRequestResponse:
    """Approve a PENDING leave request."""
    try:
        return await service.approve_leave(db, leave_id, current_user.username)
    except ServiceError as e:
        raise HTTPException(status_code=e.status_code, detail=e.message)


@router.put(
    "/{leave_id}/reject",
    response_model=LeaveRequestResponse,
    dependencies=[Depends(require_action(Action.DECIDE_LEAVE))],
    responses={
        400: {"description": "Leave request is not in PENDING status"},
        404: {"description": "Leave request not found"},
    },
)
async def reject_leave(
    leave_id: int,
    db: AsyncSession = Depends(get_db),
    current_user: CurrentUser = Depends(get_current_user),
) -> LeaveRequestResponse:
    """Reject a PENDING leave request."""
    try:
        return await service.reject_leave(db, leave_id, current_user.username)
    except ServiceError as e:
        raise HTTPException(status_code=e.status_code, detail=e.message)
