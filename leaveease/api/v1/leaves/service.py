"""Leave create, my, all, approve, reject with overlap check and single-decision guard."""

import logging
from datetime import date
from typing import List, Optional

from sqlalchemy.ext.asyncio import AsyncSession

from leaveease.auth import repository as users
from leaveease.core.enums import LeaveStatus, LeaveType
from leaveease.core.exceptions import (
    InvalidRange,
    InvalidTransition,
    NotFound,
    OverlapConflict,
    UserNotFound,
)
from leaveease.core.models import LeaveRequest

from . import repository
from .overlap import has_overlap
from .repository import LeaveView
from .schemas import LeaveCreate, LeaveRequestResponse

logger = logging.getLogger(__name__)

DECISIONS = (LeaveStatus.APPROVED, LeaveStatus.REJECTED)


def _view_to_response(view: LeaveView) -> LeaveRequestResponse:
    r = view.request
    return LeaveRequestResponse(
        id=r.id,
        username=view.username,
        leave_type=r.leave_type,
        start_date=r.start_date,
        end_date=r.end_date,
        reason=r.reason,
        status=r.status,
        approved_by_username=view.approved_by_username,
        created_at=r.created_at,
    )


def new_leave_request(
    user_id: int,
    leave_type: LeaveType,
    start_date: date,
    end_date: date,
    reason: Optional[str] = None,
) -> LeaveRequest:
    """Build a PENDING request with no approver. Rejects empty or inverted ranges."""
    if not start_date < end_date:
        raise InvalidRange()
    return LeaveRequest(
        user_id=user_id,
        leave_type=LeaveType(leave_type).value,
        start_date=start_date,
        end_date=end_date,
        reason=reason,
        status=LeaveStatus.PENDING.value,
        approved_by_id=None,
    )


async def _load_response(db: AsyncSession, leave_id: int) -> LeaveRequestResponse:
    view = await repository.find_view(db, leave_id)
    if view is None:
        raise NotFound(f"Leave request not found with id: {leave_id}")
    return _view_to_response(view)


async def create_leave(
    db: AsyncSession,
    username: str,
    payload: LeaveCreate,
) -> LeaveRequestResponse:
    """Create a PENDING leave for the requester after range and overlap validation.

    The owner row is locked for the duration of the check-then-insert so two
    concurrent submissions for the same user cannot both pass the overlap check.
    On SQLite the transaction already holds the database write lock from BEGIN
    IMMEDIATE, which gives the same serialization.
    """
    try:
        user = await users.find_by_username(db, username)
        if not user:
            raise UserNotFound(username)

        leave = new_leave_request(
            user.id,
            payload.leave_type,
            payload.start_date,
            payload.end_date,
            payload.reason,
        )

        await repository.lock_owner(db, user.id)
        if await has_overlap(db, user.id, payload.start_date, payload.end_date):
            raise OverlapConflict()

        await repository.save(db, leave)
        await db.commit()
    except Exception:
        await db.rollback()
        raise

    logger.info(
        "Leave created for %s",
        username,
        extra={"username": username, "leave_id": leave.id, "leave_type": leave.leave_type, "status": leave.status},
    )
    return await _load_response(db, leave.id)


async def list_own_leaves(db: AsyncSession, username: str) -> List[LeaveRequestResponse]:
    """Leaves owned by the requester, newest first."""
    user = await users.find_by_username(db, username)
    if not user:
        raise UserNotFound(username)
    views = await repository.find_by_owner(db, user.id)
    return [_view_to_response(v) for v in views]


async def list_all_leaves(db: AsyncSession) -> List[LeaveRequestResponse]:
    """Every leave request, in insertion order."""
    views = await repository.find_all(db)
    return [_view_to_response(v) for v in views]


async def decide(
    db: AsyncSession,
    leave_id: int,
    decision: LeaveStatus,
    admin_username: str,
) -> LeaveRequestResponse:
    """Move a PENDING request to APPROVED or REJECTED and record the deciding admin.

    This is the only place status changes. The write is a conditional UPDATE that
    only matches a PENDING row, so of two racing decisions exactly one lands and
    the other fails with InvalidTransition carrying the winner's status.
    """
    decision = LeaveStatus(decision)
    if decision not in DECISIONS:
        raise ValueError(f"decision must be APPROVED or REJECTED, got {decision.value}")

    try:
        leave = await repository.find_by_id(db, leave_id)
        if not leave:
            raise NotFound(f"Leave request not found with id: {leave_id}")

        if leave.status != LeaveStatus.PENDING.value:
            raise InvalidTransition(leave.status)

        admin = await users.find_by_username(db, admin_username)
        if not admin:
            raise UserNotFound(admin_username)

        if not await repository.mark_decided(db, leave_id, decision, admin.id):
            current = await repository.find_by_id(db, leave_id)
            raise InvalidTransition(current.status if current else leave.status)
        await db.commit()
    except Exception:
        await db.rollback()
        raise

    logger.info(
        "Leave %s by %s",
        decision.value.lower(),
        admin_username,
        extra={"username": admin_username, "leave_id": leave_id, "status": decision.value},
    )
    return await _load_response(db, leave_id)


async def approve_leave(db: AsyncSession, leave_id: int, admin_username: str) -> LeaveRequestResponse:
    return await decide(db, leave_id, LeaveStatus.APPROVED, admin_username)


async def reject_leave(db: AsyncSession, leave_id: int, admin_username: str) -> LeaveRequestResponse:
    return await decide(db, leave_id, LeaveStatus.REJECTED, admin_username)
