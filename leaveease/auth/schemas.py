from pydantic import BaseModel, EmailStr, Field

from leaveease.core.enums import Role


class RegisterRequest(BaseModel):
    username: str = Field(..., min_length=3, max_length=50)
    email: EmailStr
    password: str = Field(..., min_length=6)


class LoginRequest(BaseModel):
    username: str
    password: str


class AuthResponse(BaseModel):
    access_token: str
    token_type: str = "bearer"
    username: str
    role: Role


class CurrentUser(BaseModel):
    """The authenticated principal used for RBAC checks."""

    id: int
    username: str
    role: Role
