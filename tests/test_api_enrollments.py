"""API tests for enrollment endpoints, the dashboard and the error envelope."""

import pytest
from fastapi.testclient import TestClient

from health_system_api.app.core.store import HealthSystemStore
from health_system_api.app.main import create_app


BASE = "/api/v1/enrollments/"


@pytest.fixture
def john(client, auth_headers, john_data):
    return client.post("/api/v1/clients/", json=john_data, headers=auth_headers).json()["data"]


@pytest.fixture
def program(client, auth_headers, hiv_program_data):
    return client.post("/api/v1/programs/", json=hiv_program_data, headers=auth_headers).json()["data"]


def enroll(client, auth_headers, client_id, program_id, notes=None):
    payload = {"client_id": client_id, "program_id": program_id}
    if notes is not None:
        payload["notes"] = notes
    return client.post(BASE, json=payload, headers=auth_headers)


def test_enroll_client(client, auth_headers, john, program):
    response = enroll(client, auth_headers, john["id"], program["id"], "Initial screening")

    assert response.status_code == 201
    body = response.json()
    assert body["message"] == "Client enrolled in program successfully"
    assert body["data"]["client_id"] == john["id"]
    assert body["data"]["program_id"] == program["id"]
    assert body["data"]["status"] == "active"
    assert body["data"]["notes"] == "Initial screening"


def test_enroll_twice_returns_same_enrollment(client, auth_headers, john, program):
    first = enroll(client, auth_headers, john["id"], program["id"]).json()["data"]
    second = enroll(client, auth_headers, john["id"], program["id"]).json()["data"]

    assert second["id"] == first["id"]
    assert len(client.get(BASE, headers=auth_headers).json()["data"]) == 1


def test_enroll_unknown_client(client, auth_headers, program):
    response = enroll(client, auth_headers, "missing", program["id"])

    assert response.status_code == 400
    assert response.json()["error"] == "Bad request"
    assert response.json()["message"] == "Failed to enroll client. Client or program not found."
    assert client.get(BASE, headers=auth_headers).json()["data"] == []


def test_enroll_requires_ids(client, auth_headers):
    response = client.post(BASE, json={"client_id": "", "program_id": "p"}, headers=auth_headers)

    assert response.status_code == 400
    assert response.json()["message"] == "Client ID is required"


def test_update_enrollment_status(client, auth_headers, john, program):
    enrollment = enroll(client, auth_headers, john["id"], program["id"]).json()["data"]

    response = client.put(BASE + enrollment["id"], json={"status": "completed", "notes": "done"}, headers=auth_headers)

    data = response.json()["data"]
    assert response.status_code == 200
    assert data["status"] == "completed"
    assert data["notes"] == "done"


def test_update_enrollment_rejects_unknown_status(client, auth_headers, john, program):
    enrollment = enroll(client, auth_headers, john["id"], program["id"]).json()["data"]

    response = client.put(BASE + enrollment["id"], json={"status": "paused"}, headers=auth_headers)

    assert response.status_code == 400


def test_withdraw_enrollment(client, auth_headers, john, program):
    enrollment = enroll(client, auth_headers, john["id"], program["id"]).json()["data"]

    response = client.delete(BASE + enrollment["id"], headers=auth_headers)

    assert response.status_code == 200
    assert response.json()["message"] == "Enrollment withdrawn successfully"
    fetched = client.get(BASE + enrollment["id"], headers=auth_headers).json()["data"]
    assert fetched["status"] == "withdrawn"


def test_reenroll_after_withdrawal_keeps_history(client, auth_headers, john, program):
    first = enroll(client, auth_headers, john["id"], program["id"]).json()["data"]
    client.delete(BASE + first["id"], headers=auth_headers)

    second = enroll(client, auth_headers, john["id"], program["id"]).json()["data"]

    assert second["id"] != first["id"]
    detail = client.get("/api/v1/clients/" + john["id"], headers=auth_headers).json()["data"]
    assert sorted(e["status"] for e in detail["enrollments"]) == ["active", "withdrawn"]


def test_list_enrollments_filters(client, auth_headers, john, program):
    first = enroll(client, auth_headers, john["id"], program["id"]).json()["data"]
    client.delete(BASE + first["id"], headers=auth_headers)
    second = enroll(client, auth_headers, john["id"], program["id"]).json()["data"]

    active = client.get(BASE, params={"status": "active"}, headers=auth_headers).json()["data"]
    for_client = client.get(BASE, params={"client_id": john["id"]}, headers=auth_headers).json()["data"]
    other = client.get(BASE, params={"program_id": "other"}, headers=auth_headers).json()["data"]

    assert [e["id"] for e in active] == [second["id"]]
    assert len(for_client) == 2
    assert other == []


def test_missing_enrollment_returns_404(client, auth_headers):
    assert client.get(BASE + "missing", headers=auth_headers).status_code == 404
    assert client.put(BASE + "missing", json={"notes": "x"}, headers=auth_headers).status_code == 404
    assert client.delete(BASE + "missing", headers=auth_headers).status_code == 404


def test_scenario_enroll_cancel_delete_program(client, auth_headers, john, program):
    enrollment = enroll(client, auth_headers, john["id"], program["id"], "Initial screening").json()["data"]
    client.delete(BASE + enrollment["id"], headers=auth_headers)
    assert client.get(BASE + enrollment["id"], headers=auth_headers).json()["data"]["status"] == "withdrawn"

    client.delete("/api/v1/programs/" + program["id"], headers=auth_headers)

    ids = [e["id"] for e in client.get(BASE, headers=auth_headers).json()["data"]]
    assert enrollment["id"] not in ids


def test_dashboard(client, auth_headers, john, program, jane_data):
    client.post("/api/v1/clients/", json=jane_data, headers=auth_headers)
    enroll(client, auth_headers, john["id"], program["id"])

    response = client.get("/api/v1/statistics/dashboard", headers=auth_headers)

    data = response.json()["data"]
    assert response.status_code == 200
    assert data["total_clients"] == 2
    assert data["total_programs"] == 1
    assert data["active_enrollments"] == 1
    assert [c["first_name"] for c in data["recent_clients"]] == ["Jane", "John"]


class ExplodingStore(HealthSystemStore):
    def search_clients(self, term):
        raise RuntimeError("boom")


def test_unexpected_error_returns_500(auth_headers):
    app = create_app(store=ExplodingStore())
    with TestClient(app, raise_server_exceptions=False) as test_client:
        response = test_client.get("/api/v1/clients/", headers=auth_headers)

    assert response.status_code == 500
    assert response.json() == {
        "success": False,
        "data": None,
        "error": "Server error",
        "message": "An unexpected error occurred",
    }
