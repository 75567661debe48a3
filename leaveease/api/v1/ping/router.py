"""Authenticated liveness checks, one per role gate."""

from fastapi import APIRouter, Depends

from leaveease.auth.rbac import require_action
from leaveease.auth.schemas import CurrentUser
from leaveease.core.enums import Action

from .schemas import PingResponse, WhoAmIResponse

router = APIRouter(prefix="/api/v1/test", tags=["test"])


@router.get(
    "",
    response_model=WhoAmIResponse,
    responses={401: {"description": "Not authenticated"}},
)
async def whoami(
    current_user: CurrentUser = Depends(require_action(Action.WHOAMI)),
) -> WhoAmIResponse:
    """Any signed-in user. Confirms the token and reports who it belongs to."""
    return WhoAmIResponse(
        message=f"API is alive! Hello, {current_user.username}",
        username=current_user.username,
        role=current_user.role,
    )


@router.get(
    "/admin",
    response_model=PingResponse,
    dependencies=[Depends(require_action(Action.ADMIN_PING))],
    responses={
        401: {"description": "Not authenticated"},
        403: {"description": "Not authorized, requires ADMIN role"},
    },
)
async def admin_ping() -> PingResponse:
    return PingResponse(message="Admin access granted!")
