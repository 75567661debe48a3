import pytest
from httpx import AsyncClient

from leaveease.auth.models import User


@pytest.mark.asyncio
async def test_whoami_for_employee(client: AsyncClient, alice: User, auth_headers) -> None:
    response = await client.get("/api/v1/test", headers=auth_headers(alice))
    assert response.status_code == 200
    assert response.json() == {
        "message": "API is alive! Hello, alice",
        "username": "alice",
        "role": "EMPLOYEE",
    }


@pytest.mark.asyncio
async def test_whoami_for_admin(client: AsyncClient, admin: User, auth_headers) -> None:
    response = await client.get("/api/v1/test", headers=auth_headers(admin))
    assert response.status_code == 200
    assert response.json()["role"] == "ADMIN"


@pytest.mark.asyncio
async def test_whoami_requires_token(client: AsyncClient) -> None:
    response = await client.get("/api/v1/test")
    assert response.status_code == 401
    assert response.headers["www-authenticate"] == "Bearer"


@pytest.mark.asyncio
async def test_admin_ping_for_admin(client: AsyncClient, admin: User, auth_headers) -> None:
    response = await client.get("/api/v1/test/admin", headers=auth_headers(admin))
    assert response.status_code == 200
    assert response.json() == {"message": "Admin access granted!"}


@pytest.mark.asyncio
async def test_admin_ping_forbidden_for_employee(client: AsyncClient, alice: User, auth_headers) -> None:
    response = await client.get("/api/v1/test/admin", headers=auth_headers(alice))
    assert response.status_code == 403
    assert "ADMIN" in response.json()["detail"]


@pytest.mark.asyncio
async def test_admin_ping_requires_token(client: AsyncClient) -> None:
    response = await client.get("/api/v1/test/admin")
    assert response.status_code == 401
