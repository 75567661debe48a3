"""Competing units of work against a shared SQLite file, one session each."""

import asyncio
from datetime import date, timedelta
from typing import AsyncGenerator

import pytest
from sqlalchemy import func, select
from sqlalchemy.ext.asyncio import AsyncEngine, AsyncSession, async_sessionmaker, create_async_engine

from leaveease.auth.models import User
from leaveease.auth.security import hash_password
from leaveease.core.enums import LeaveStatus, LeaveType, Role
from leaveease.core.exceptions import InvalidTransition, OverlapConflict
from leaveease.core.models import LeaveRequest
from leaveease.db.init_db import create_tables
from leaveease.db.session import use_immediate_transactions
from leaveease.api.v1.leaves import repository, service
from leaveease.api.v1.leaves.schemas import LeaveCreate, LeaveRequestResponse


START = date.today() + timedelta(days=30)


@pytest.fixture()
async def file_engine(tmp_path) -> AsyncGenerator[AsyncEngine, None]:
    engine = create_async_engine(f"sqlite+aiosqlite:///{tmp_path / 'leaves.db'}", future=True)
    use_immediate_transactions(engine)
    await create_tables(engine)
    yield engine
    await engine.dispose()


@pytest.fixture()
def sessions(file_engine: AsyncEngine) -> async_sessionmaker:
    return async_sessionmaker(bind=file_engine, class_=AsyncSession, expire_on_commit=False)


@pytest.fixture()
async def seeded(sessions: async_sessionmaker) -> None:
    async with sessions() as db:
        for username, role in (("alice", Role.EMPLOYEE), ("admin", Role.ADMIN)):
            db.add(
                User(
                    username=username,
                    email=f"{username}@test.com",
                    password_hash=hash_password("Test@12345"),
                    role=role.value,
                )
            )
        await db.commit()


def leave(start_offset: int, end_offset: int) -> LeaveCreate:
    return LeaveCreate(
        leave_type=LeaveType.ANNUAL,
        start_date=START + timedelta(days=start_offset),
        end_date=START + timedelta(days=end_offset),
    )


def split(results):
    succeeded = [r for r in results if isinstance(r, LeaveRequestResponse)]
    failed = [r for r in results if isinstance(r, Exception)]
    return succeeded, failed


@pytest.mark.asyncio
async def test_racing_approve_and_reject_admit_one_decision(sessions: async_sessionmaker, seeded) -> None:
    async with sessions() as db:
        leave_id = (await service.create_leave(db, "alice", leave(0, 3))).id

    async def decide(decision: LeaveStatus):
        async with sessions() as db:
            return await service.decide(db, leave_id, decision, "admin")

    results = await asyncio.gather(
        decide(LeaveStatus.APPROVED),
        decide(LeaveStatus.REJECTED),
        return_exceptions=True,
    )

    succeeded, failed = split(results)
    assert len(succeeded) == 1
    assert len(failed) == 1
    assert isinstance(failed[0], InvalidTransition)
    winner = succeeded[0]
    assert failed[0].current_status == winner.status.value

    async with sessions() as db:
        stored = await repository.find_by_id(db, leave_id)
        assert stored.status == winner.status.value
        approver = await db.get(User, stored.approved_by_id)
        assert approver.username == "admin"


@pytest.mark.asyncio
async def test_racing_overlapping_creates_admit_one_request(sessions: async_sessionmaker, seeded) -> None:
    async def create(payload: LeaveCreate):
        async with sessions() as db:
            return await service.create_leave(db, "alice", payload)

    results = await asyncio.gather(
        create(leave(0, 4)),
        create(leave(2, 6)),
        return_exceptions=True,
    )

    succeeded, failed = split(results)
    assert len(succeeded) == 1
    assert len(failed) == 1
    assert isinstance(failed[0], OverlapConflict)

    async with sessions() as db:
        rows = (await db.execute(select(LeaveRequest))).scalars().all()
        assert [r.id for r in rows] == [succeeded[0].id]
        assert (await db.execute(select(func.count(LeaveRequest.id)))).scalar_one() == 1
