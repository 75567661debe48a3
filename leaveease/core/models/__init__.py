from leaveease.auth.models import User
from leaveease.core.models.leave_request import LeaveRequest

__all__ = ["LeaveRequest", "User"]
