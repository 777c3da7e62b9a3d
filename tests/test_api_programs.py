"""API tests for program endpoints, the public listing and the health check."""

import pytest


BASE = "/api/v1/programs/"


@pytest.fixture
def program(client, auth_headers, hiv_program_data):
    response = client.post(BASE, json=hiv_program_data, headers=auth_headers)
    assert response.status_code == 201
    return response.json()["data"]


def test_create_program(client, auth_headers, hiv_program_data):
    response = client.post(BASE, json=hiv_program_data, headers=auth_headers)

    body = response.json()
    assert response.status_code == 201
    assert body["message"] == "Health program created successfully"
    assert body["data"]["name"] == "HIV Prevention"


def test_create_program_requires_description(client, auth_headers):
    response = client.post(BASE, json={"name": "X", "description": ""}, headers=auth_headers)

    assert response.status_code == 400
    assert response.json()["message"] == "Program description is required"


def test_list_programs(client, auth_headers, program):
    data = client.get(BASE, headers=auth_headers).json()["data"]

    assert [p["id"] for p in data] == [program["id"]]


def test_get_program_embeds_clients(client, auth_headers, program, john_data):
    john = client.post("/api/v1/clients/", json=john_data, headers=auth_headers).json()["data"]
    client.post(
        "/api/v1/enrollments/",
        json={"client_id": john["id"], "program_id": program["id"], "notes": "n"},
        headers=auth_headers,
    )

    data = client.get(BASE + program["id"], headers=auth_headers).json()["data"]

    assert data["name"] == "HIV Prevention"
    assert [e["client"]["first_name"] for e in data["enrollments"]] == ["John"]
    assert data["enrollments"][0]["notes"] == "n"


def test_update_program(client, auth_headers, program):
    response = client.put(BASE + program["id"], json={"name": "HIV Care"}, headers=auth_headers)

    data = response.json()["data"]
    assert response.status_code == 200
    assert data["name"] == "HIV Care"
    assert data["description"] == program["description"]


def test_update_program_rejects_blank_name(client, auth_headers, program):
    response = client.put(BASE + program["id"], json={"name": ""}, headers=auth_headers)

    assert response.status_code == 400


def test_delete_program_cascades(client, auth_headers, program, john_data):
    john = client.post("/api/v1/clients/", json=john_data, headers=auth_headers).json()["data"]
    enrollment = client.post(
        "/api/v1/enrollments/",
        json={"client_id": john["id"], "program_id": program["id"]},
        headers=auth_headers,
    ).json()["data"]

    response = client.delete(BASE + program["id"], headers=auth_headers)

    assert response.status_code == 200
    assert client.get(BASE + program["id"], headers=auth_headers).status_code == 404
    assert client.get("/api/v1/enrollments/" + enrollment["id"], headers=auth_headers).status_code == 404


def test_missing_program_returns_404(client, auth_headers):
    assert client.get(BASE + "missing", headers=auth_headers).status_code == 404
    assert client.put(BASE + "missing", json={"name": "X"}, headers=auth_headers).status_code == 404
    response = client.delete(BASE + "missing", headers=auth_headers)
    assert response.status_code == 404
    assert response.json()["message"] == "Health program not found"


def test_public_programs_without_auth(client, program):
    response = client.get("/api/v1/public/programs")

    assert response.status_code == 200
    assert response.json()["data"] == [
        {"id": program["id"], "name": program["name"], "description": program["description"]}
    ]


def test_health_check_without_auth(client):
    response = client.get("/api/health")

    assert response.status_code == 200
    assert response.json()["status"] == "ok"
    assert "timestamp" in response.json()
