"""Persistence for leave requests.

Reads that feed the API return ``LeaveView`` rows, which carry the owner and
approver usernames loaded through explicit joins. Nothing here relies on lazy
relationship loading.
"""

from datetime import date, datetime
from typing import Iterable, List, NamedTuple, Optional

from sqlalchemy import select, update
from sqlalchemy.ext.asyncio import AsyncSession
from sqlalchemy.orm import aliased

from leaveease.auth.models import User
from leaveease.core.enums import LeaveStatus
from leaveease.core.models import LeaveRequest


class LeaveView(NamedTuple):
    request: LeaveRequest
    username: str
    approved_by_username: Optional[str]


def _view_query():
    owner = aliased(User)
    approver = aliased(User)
    return (
        select(LeaveRequest, owner.username, approver.username)
        .join(owner, owner.id == LeaveRequest.user_id)
        .outerjoin(approver, approver.id == LeaveRequest.approved_by_id)
    )


def _to_views(rows) -> List[LeaveView]:
    return [LeaveView(req, username, approved_by) for req, username, approved_by in rows]


async def save(db: AsyncSession, leave: LeaveRequest) -> LeaveRequest:
    """Stage the row and flush so the id and timestamps are assigned. Commit is the caller's."""
    db.add(leave)
    await db.flush()
    return leave


async def find_by_id(db: AsyncSession, leave_id: int) -> Optional[LeaveRequest]:
    result = await db.execute(
        select(LeaveRequest)
        .where(LeaveRequest.id == leave_id)
        .execution_options(populate_existing=True)
    )
    return result.scalar_one_or_none()


async def mark_decided(
    db: AsyncSession,
    leave_id: int,
    decision: LeaveStatus,
    approved_by_id: int,
) -> bool:
    """Set a terminal status only if the row is still PENDING.

    Returns False when no row matched, i.e. the request was decided by someone else
    between the caller's read and this write.
    """
    result = await db.execute(
        update(LeaveRequest)
        .where(
            LeaveRequest.id == leave_id,
            LeaveRequest.status == LeaveStatus.PENDING.value,
        )
        .values(
            status=LeaveStatus(decision).value,
            approved_by_id=approved_by_id,
            updated_at=datetime.utcnow(),
        )
        .execution_options(synchronize_session=False)
    )
    return result.rowcount == 1


async def find_view(db: AsyncSession, leave_id: int) -> Optional[LeaveView]:
    result = await db.execute(
        _view_query()
        .where(LeaveRequest.id == leave_id)
        .execution_options(populate_existing=True)
    )
    row = result.one_or_none()
    if row is None:
        return None
    return LeaveView(*row)


async def find_by_owner(db: AsyncSession, user_id: int) -> List[LeaveView]:
    result = await db.execute(
        _view_query()
        .where(LeaveRequest.user_id == user_id)
        .order_by(LeaveRequest.created_at.desc(), LeaveRequest.id.desc())
    )
    return _to_views(result.all())


async def find_all(db: AsyncSession) -> List[LeaveView]:
    result = await db.execute(_view_query().order_by(LeaveRequest.id))
    return _to_views(result.all())


async def exists_overlap(
    db: AsyncSession,
    user_id: int,
    start_date: date,
    end_date: date,
    statuses: Iterable[LeaveStatus],
) -> bool:
    result = await db.execute(
        select(LeaveRequest.id).where(
            LeaveRequest.user_id == user_id,
            LeaveRequest.status.in_([LeaveStatus(s).value for s in statuses]),
            LeaveRequest.start_date <= end_date,
            LeaveRequest.end_date >= start_date,
        ).limit(1)
    )
    return result.scalar_one_or_none() is not None


async def lock_owner(db: AsyncSession, user_id: int) -> None:
    """Take a row lock on the owner so overlap-check-then-insert is serialized per user."""
    await db.execute(select(User.id).where(User.id == user_id).with_for_update())
