"""Role/action policy for API operations.

The table below is the single source of truth for who may do what. It is
evaluated before any domain logic and never looks at resource state beyond
role and ownership.
"""

from typing import Dict, FrozenSet, Set

from fastapi import Depends, HTTPException

from leaveease.auth.dependencies import get_current_user
from leaveease.auth.schemas import CurrentUser
from leaveease.core.enums import Action, Role
from leaveease.core.exceptions import Forbidden


POLICY: Dict[Action, FrozenSet[Role]] = {
    Action.CREATE_LEAVE: frozenset({Role.EMPLOYEE}),
    Action.LIST_OWN_LEAVES: frozenset({Role.EMPLOYEE}),
    Action.LIST_ALL_LEAVES: frozenset({Role.ADMIN}),
    Action.DECIDE_LEAVE: frozenset({Role.ADMIN}),
    Action.WHOAMI: frozenset({Role.EMPLOYEE, Role.ADMIN}),
    Action.ADMIN_PING: frozenset({Role.ADMIN}),
}

# Actions that only ever touch the caller's own requests
OWNER_SCOPED: Set[Action] = {Action.LIST_OWN_LEAVES}


def authorize(role: Role, action: Action, is_owner: bool = True) -> bool:
    allowed_roles = POLICY.get(action)
    if not allowed_roles or role not in allowed_roles:
        return False
    if action in OWNER_SCOPED and not is_owner:
        return False
    return True


def enforce(principal: CurrentUser, action: Action, is_owner: bool = True) -> None:
    if not authorize(principal.role, action, is_owner):
        required = " or ".join(sorted(r.value for r in POLICY.get(action, ())))
        if not required:
            raise Forbidden("Not authorized for this action")
        raise Forbidden(f"Not authorized: requires {required} role")


def require_action(action: Action):
    """
    Dependency factory to enforce the policy for one action.

    Example:
        Depends(require_action(Action.DECIDE_LEAVE))
    """

    async def _checker(current_user: CurrentUser = Depends(get_current_user)) -> CurrentUser:
        try:
            enforce(current_user, action)
        except Forbidden as e:
            raise HTTPException(status_code=e.status_code, detail=e.message)
        return current_user

    return _checker
