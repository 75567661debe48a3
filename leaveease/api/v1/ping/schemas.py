from pydantic import BaseModel

from leaveease.core.enums import Role


class PingResponse(BaseModel):
    message: str


class WhoAmIResponse(PingResponse):
    """Liveness reply that also echoes the resolved principal."""

    username: str
    role: Role
