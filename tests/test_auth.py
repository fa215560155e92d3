import pytest
from httpx import AsyncClient

from app.auth.security import create_access_token


@pytest.mark.asyncio
async def test_missing_token_is_rejected(client: AsyncClient) -> None:
    response = await client.get("/api/v1/fees/structures")
    assert response.status_code == 401


@pytest.mark.asyncio
async def test_invalid_token_is_rejected(client: AsyncClient) -> None:
    response = await client.get(
        "/api/v1/fees/structures",
        headers={"Authorization": "Bearer not-a-jwt"},
    )
    assert response.status_code == 401


@pytest.mark.asyncio
async def test_expired_token_is_rejected(client: AsyncClient) -> None:
    token = create_access_token(subject={"sub": "USER#1", "role": "ADMIN"}, expires_minutes=-1)
    response = await client.get(
        "/api/v1/fees/structures",
        headers={"Authorization": f"Bearer {token}"},
    )
    assert response.status_code == 401


@pytest.mark.asyncio
async def test_unknown_role_is_rejected(client: AsyncClient, auth_headers) -> None:
    response = await client.get("/api/v1/fees/structures", headers=auth_headers("JANITOR"))
    assert response.status_code == 401


@pytest.mark.asyncio
async def test_student_cannot_use_admin_routes(client: AsyncClient, auth_headers) -> None:
    headers = auth_headers("STUDENT", student_id="STU#1")
    response = await client.get("/api/v1/fees/structures", headers=headers)
    assert response.status_code == 403
    response = await client.get("/api/v1/students", headers=headers)
    assert response.status_code == 403


@pytest.mark.asyncio
async def test_teacher_cannot_use_admin_routes(client: AsyncClient, auth_headers) -> None:
    response = await client.get("/api/v1/fees/structures", headers=auth_headers("TEACHER"))
    assert response.status_code == 403


@pytest.mark.asyncio
async def test_super_admin_passes_admin_routes(client: AsyncClient, auth_headers) -> None:
    response = await client.get("/api/v1/fees/structures", headers=auth_headers("SUPER_ADMIN"))
    assert response.status_code == 200


@pytest.mark.asyncio
async def test_admin_cannot_use_student_portal(client: AsyncClient, admin_headers) -> None:
    response = await client.get("/api/v1/student/fees", headers=admin_headers)
    assert response.status_code == 403


@pytest.mark.asyncio
async def test_student_token_needs_student_profile(client: AsyncClient, auth_headers) -> None:
    response = await client.get("/api/v1/student/fees", headers=auth_headers("STUDENT"))
    assert response.status_code == 403
    assert response.json()["detail"] == "Token is not linked to a student profile"


@pytest.mark.asyncio
async def test_health(client: AsyncClient) -> None:
    response = await client.get("/health")
    assert response.status_code == 200
    assert response.json() == {"status": "ok"}
