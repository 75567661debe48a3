"""Date-range conflict detection for leave requests.

Ranges are closed intervals: two requests that only share a boundary day
still overlap. Leave type is not considered.
"""

from datetime import date

from sqlalchemy.ext.asyncio import AsyncSession

from leaveease.core.enums import LeaveStatus

from . import repository

# REJECTED ranges may be resubmitted
BLOCKING_STATUSES = (LeaveStatus.PENDING, LeaveStatus.APPROVED)


async def has_overlap(db: AsyncSession, user_id: int, start_date: date, end_date: date) -> bool:
    """Check the current persisted state; never cached between calls."""
    return await repository.exists_overlap(db, user_id, start_date, end_date, BLOCKING_STATUSES)
