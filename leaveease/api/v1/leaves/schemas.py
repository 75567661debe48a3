from datetime import date, datetime
from typing import Optional

from pydantic import BaseModel, Field, model_validator

from leaveease.core.enums import LeaveStatus, LeaveType


# ----- Create Leave -----
class LeaveCreate(BaseModel):
    """Submit a leave request. The owner is always the authenticated employee."""

    leave_type: LeaveType
    start_date: date = Field(...)
    end_date: date = Field(..., description="Must be strictly after start_date")
    reason: Optional[str] = Field(None, max_length=2000)

    @model_validator(mode="after")
    def validate_date_range(self) -> "LeaveCreate":
        if self.start_date >= self.end_date:
            raise ValueError("Start date must be before end date")
        return self


# ----- Leave Request Response -----
class LeaveRequestResponse(BaseModel):
    """Flattened view of a leave request; users are exposed by username only."""

    id: int
    username: str
    leave_type: LeaveType
    start_date: date
    end_date: date
    reason: Optional[str] = None
    status: LeaveStatus
    approved_by_username: Optional[str] = None
    created_at: datetime

    class Config:
        from_attributes = True
