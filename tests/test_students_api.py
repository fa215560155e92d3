from urllib.parse import quote

import pytest
from httpx import AsyncClient


STUDENT_PAYLOAD = {
    "fullName": "Rohan Mehta",
    "className": "3",
    "parentName": "Vikram Mehta",
    "parentPhone": "+919800000002",
    "parentEmail": "vikram@mehta-family.in",
    "admissionDate": "2024-06-03",
    "transportEnabled": True,
    "transportStartMonth": "2024-07",
}


@pytest.mark.asyncio
async def test_create_student(client: AsyncClient, admin_headers) -> None:
    response = await client.post("/api/v1/students", json=STUDENT_PAYLOAD, headers=admin_headers)
    assert response.status_code == 201
    body = response.json()
    data = body["data"]
    assert body["success"] is True
    assert data["id"].startswith("STU#")
    assert data["rollNumber"].startswith("STU2024")
    assert len(data["rollNumber"]) == len("STU2024") + 6
    assert body["message"] == f"Student created successfully with roll number: {data['rollNumber']}"
    assert data["status"] == "ACTIVE"
    assert data["transportEnabled"] is True
    assert data["transportStartMonth"] == "2024-07"
    assert data["excludeAdmissionFee"] is False


@pytest.mark.asyncio
async def test_create_student_defaults_admission_date(client: AsyncClient, admin_headers) -> None:
    payload = {k: v for k, v in STUDENT_PAYLOAD.items() if k != "admissionDate"}
    response = await client.post("/api/v1/students", json=payload, headers=admin_headers)
    assert response.status_code == 201
    assert response.json()["data"]["admissionDate"] is not None


@pytest.mark.asyncio
async def test_create_student_rejects_bad_transport_month(client: AsyncClient, admin_headers) -> None:
    payload = dict(STUDENT_PAYLOAD, transportStartMonth="July 2024")
    response = await client.post("/api/v1/students", json=payload, headers=admin_headers)
    assert response.status_code == 422


@pytest.mark.asyncio
async def test_list_and_get_students(client: AsyncClient, admin_headers) -> None:
    first = (await client.post("/api/v1/students", json=STUDENT_PAYLOAD, headers=admin_headers)).json()["data"]
    await client.post(
        "/api/v1/students",
        json=dict(STUDENT_PAYLOAD, fullName="Meera Iyer", className="4"),
        headers=admin_headers,
    )

    response = await client.get("/api/v1/students", headers=admin_headers)
    assert response.status_code == 200
    assert len(response.json()["data"]) == 2

    filtered = await client.get("/api/v1/students", params={"class": "3"}, headers=admin_headers)
    assert [s["fullName"] for s in filtered.json()["data"]] == ["Rohan Mehta"]

    single = await client.get(f"/api/v1/students/{quote(first['id'], safe='')}", headers=admin_headers)
    assert single.status_code == 200
    assert single.json()["data"]["rollNumber"] == first["rollNumber"]

    missing = await client.get("/api/v1/students/STU%23missing", headers=admin_headers)
    assert missing.status_code == 404


@pytest.mark.asyncio
async def test_update_student_fee_flags(client: AsyncClient, admin_headers) -> None:
    created = (await client.post("/api/v1/students", json=STUDENT_PAYLOAD, headers=admin_headers)).json()["data"]
    url = f"/api/v1/students/{quote(created['id'], safe='')}"

    response = await client.put(
        url,
        json={"excludeAdmissionFee": True, "transportEnabled": False, "status": "inactive"},
        headers=admin_headers,
    )
    assert response.status_code == 200
    data = response.json()["data"]
    assert data["excludeAdmissionFee"] is True
    assert data["transportEnabled"] is False
    assert data["status"] == "INACTIVE"
    assert data["fullName"] == "Rohan Mehta"

    bad_status = await client.put(url, json={"status": "GRADUATED"}, headers=admin_headers)
    assert bad_status.status_code == 422


@pytest.mark.asyncio
async def test_update_student_rejects_null_for_required_fields(client: AsyncClient, admin_headers) -> None:
    created = (await client.post("/api/v1/students", json=STUDENT_PAYLOAD, headers=admin_headers)).json()["data"]
    url = f"/api/v1/students/{quote(created['id'], safe='')}"

    for field in ("excludeAdmissionFee", "transportEnabled", "fullName", "className", "status"):
        response = await client.put(url, json={field: None}, headers=admin_headers)
        assert response.status_code == 422, field

    # Nullable profile fields can still be cleared
    cleared = await client.put(url, json={"transportStartMonth": None}, headers=admin_headers)
    assert cleared.status_code == 200
    assert cleared.json()["data"]["transportStartMonth"] is None
    assert cleared.json()["data"]["excludeAdmissionFee"] is False


@pytest.mark.asyncio
async def test_delete_student_removes_fee_records(client: AsyncClient, admin_headers) -> None:
    created = (await client.post("/api/v1/students", json=STUDENT_PAYLOAD, headers=admin_headers)).json()["data"]
    student_id = quote(created["id"], safe="")
    fee = await client.post(
        "/api/v1/fees",
        json={"studentId": created["id"], "feeType": "EXAM_FEE", "amount": 500, "dueDate": "2024-07-10"},
        headers=admin_headers,
    )
    assert fee.status_code == 201

    response = await client.delete(f"/api/v1/students/{student_id}", headers=admin_headers)
    assert response.status_code == 200
    assert response.json()["message"] == "Student deleted successfully"

    assert (await client.get(f"/api/v1/students/{student_id}", headers=admin_headers)).status_code == 404
    fees = await client.get(f"/api/v1/fees/students/{student_id}", headers=admin_headers)
    assert fees.json()["data"] == []

    again = await client.delete(f"/api/v1/students/{student_id}", headers=admin_headers)
    assert again.status_code == 404
