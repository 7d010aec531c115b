import pytest

from app.config import settings
from app.seed import SEED_AUDITOR_ID, SEED_NODES, SEED_POINTS, SEED_PROJECT_ID

KITCHEN_NODE = SEED_NODES[4]["id"]
WATER_POINT = SEED_POINTS[2]["id"]
CLEAN_POINT = SEED_POINTS[0]["id"]


async def _create_session(client, **extra):
    response = await client.post("/api/v1/audit-sessions", json={"project_id": SEED_PROJECT_ID, **extra})
    return response.json()["data"]["id"]


async def _record(client, session_id, status="PASS", point_id=CLEAN_POINT, node_id=KITCHEN_NODE):
    return await client.post(
        "/api/v1/audit-items",
        json={
            "audit_session_id": session_id,
            "structure_node_id": node_id,
            "template_audit_point_id": point_id,
            "status": status,
        },
    )


@pytest.mark.asyncio
async def test_create_session_success(client):
    response = await client.post(
        "/api/v1/audit-sessions",
        json={"project_id": SEED_PROJECT_ID, "auditor_id": SEED_AUDITOR_ID},
    )

    assert response.status_code == 201
    body = response.json()
    assert body["status"] == "success"
    data = body["data"]
    assert data["project_id"] == SEED_PROJECT_ID
    assert data["auditor_id"] == SEED_AUDITOR_ID
    assert data["status"] == "IN_PROGRESS"
    assert data["submitted_at"] is None


@pytest.mark.asyncio
async def test_create_session_invalid_project(client):
    response = await client.post("/api/v1/audit-sessions", json={"project_id": "nonexistent"})
    assert response.status_code == 404


@pytest.mark.asyncio
async def test_create_session_missing_project_id(client):
    response = await client.post("/api/v1/audit-sessions", json={})
    assert response.status_code == 400
    assert response.json()["status"] == "error"


@pytest.mark.asyncio
async def test_create_session_provisions_unknown_auditor(client):
    response = await client.post(
        "/api/v1/audit-sessions",
        json={"project_id": SEED_PROJECT_ID, "auditor_id": "field-auditor-7"},
    )
    assert response.status_code == 201

    user = await client.get("/api/v1/users/field-auditor-7")
    assert user.status_code == 200
    assert user.json()["data"]["role"] == "AUDITOR"
    assert user.json()["data"]["name"] == settings.default_auditor_name

    again = await client.post(
        "/api/v1/audit-sessions",
        json={"project_id": SEED_PROJECT_ID, "auditor_id": "field-auditor-7"},
    )
    assert again.status_code == 201


@pytest.mark.asyncio
async def test_create_session_defaults_auditor(client):
    session_id = await _create_session(client)
    response = await client.get(f"/api/v1/audit-sessions/{session_id}")
    assert response.json()["data"]["auditor_id"] == settings.default_auditor_id


@pytest.mark.asyncio
async def test_get_nonexistent_session(client):
    response = await client.get("/api/v1/audit-sessions/nonexistent")
    assert response.status_code == 404


@pytest.mark.asyncio
async def test_record_item_appends(client):
    session_id = await _create_session(client)
    first = await _record(client, session_id, "FAIL")
    second = await _record(client, session_id, "PASS")

    assert first.status_code == 201
    assert second.status_code == 201
    assert first.json()["data"]["id"] != second.json()["data"]["id"]

    summary = await client.get(f"/api/v1/audit-sessions/{session_id}/summary")
    assert summary.json()["data"] == {"total": 2, "pass": 1, "fail": 1}


@pytest.mark.asyncio
@pytest.mark.parametrize("field, value", [
    ("audit_session_id", "nonexistent"),
    ("structure_node_id", "nonexistent"),
    ("template_audit_point_id", "nonexistent"),
])
async def test_record_item_missing_references(client, field, value):
    session_id = await _create_session(client)
    payload = {
        "audit_session_id": session_id,
        "structure_node_id": KITCHEN_NODE,
        "template_audit_point_id": CLEAN_POINT,
        "status": "PASS",
        field: value,
    }
    response = await client.post("/api/v1/audit-items", json=payload)
    assert response.status_code == 404


@pytest.mark.asyncio
async def test_record_item_invalid_status(client):
    session_id = await _create_session(client)
    response = await _record(client, session_id, "MAYBE")
    assert response.status_code == 400


@pytest.mark.asyncio
async def test_record_item_after_submit_conflicts(client):
    session_id = await _create_session(client)
    await client.post(f"/api/v1/audit-sessions/{session_id}/submit")

    response = await _record(client, session_id)
    assert response.status_code == 409


@pytest.mark.asyncio
async def test_attach_media_unknown_item(client):
    response = await client.post("/api/v1/audit-items/nonexistent/media", json={"storage_key": "r2://x.jpg"})
    assert response.status_code == 404


@pytest.mark.asyncio
async def test_attach_media_requires_storage_key(client):
    session_id = await _create_session(client)
    item = await _record(client, session_id, "FAIL")
    response = await client.post(f"/api/v1/audit-items/{item.json()['data']['id']}/media", json={})
    assert response.status_code == 400


@pytest.mark.asyncio
async def test_submit_empty_session(client):
    session_id = await _create_session(client)
    response = await client.post(f"/api/v1/audit-sessions/{session_id}/submit")

    assert response.status_code == 200
    data = response.json()["data"]
    assert data["ok"] is True
    assert data["session_id"] == session_id
    assert data["submitted_at"]


@pytest.mark.asyncio
async def test_submit_nonexistent_session(client):
    response = await client.post("/api/v1/audit-sessions/nonexistent/submit")
    assert response.status_code == 404


@pytest.mark.asyncio
async def test_submit_twice_always_conflicts(client):
    session_id = await _create_session(client)
    first = await client.post(f"/api/v1/audit-sessions/{session_id}/submit")
    assert first.status_code == 200
    submitted_at = first.json()["data"]["submitted_at"]

    for _ in range(3):
        response = await client.post(f"/api/v1/audit-sessions/{session_id}/submit")
        assert response.status_code == 409

    session = await client.get(f"/api/v1/audit-sessions/{session_id}")
    assert session.json()["data"]["submitted_at"] == submitted_at


@pytest.mark.asyncio
async def test_submit_names_first_fail_item_without_media(client):
    session_id = await _create_session(client)
    await _record(client, session_id, "PASS")
    first_fail = (await _record(client, session_id, "FAIL")).json()["data"]["id"]
    await _record(client, session_id, "FAIL", point_id=WATER_POINT)

    response = await client.post(f"/api/v1/audit-sessions/{session_id}/submit")

    assert response.status_code == 422
    body = response.json()
    assert body["status"] == "error"
    assert body["data"] == {"ok": False, "missing_media_item_id": first_fail}

    session = await client.get(f"/api/v1/audit-sessions/{session_id}")
    assert session.json()["data"]["status"] == "IN_PROGRESS"


@pytest.mark.asyncio
async def test_summary_nonexistent_session(client):
    response = await client.get("/api/v1/audit-sessions/nonexistent/summary")
    assert response.status_code == 404


@pytest.mark.asyncio
async def test_leak_check_scenario(client):
    project = await client.post("/api/v1/projects", json={"name": "P", "location": "Sector 9"})
    project_id = project.json()["data"]["id"]

    template = await client.post(f"/api/v1/projects/{project_id}/template", json={"name": "T"})
    assert template.status_code == 201
    point = await client.post(
        f"/api/v1/projects/{project_id}/template/points",
        json={"applicable_level_type": "ROOM", "name": "Leak Check", "is_mandatory": True, "severity": "HIGH"},
    )
    point_id = point.json()["data"]["id"]

    parent_id = None
    for level_type, name in [("PROJECT", "P"), ("BLOCK", "B1"), ("FLOOR", "F1"), ("UNIT", "U1"), ("ROOM", "Bath")]:
        node = await client.post(
            f"/api/v1/projects/{project_id}/nodes",
            json={"parent_id": parent_id, "level_type": level_type, "name": name},
        )
        assert node.status_code == 201
        parent_id = node.json()["data"]["id"]
    bath_id = parent_id

    session_id = (await client.post("/api/v1/audit-sessions", json={"project_id": project_id})).json()["data"]["id"]

    item = await client.post(
        "/api/v1/audit-items",
        json={
            "audit_session_id": session_id,
            "structure_node_id": bath_id,
            "template_audit_point_id": point_id,
            "status": "FAIL",
            "notes": "damp wall",
        },
    )
    item_id = item.json()["data"]["id"]
    assert item.json()["data"]["notes"] == "damp wall"

    rejected = await client.post(f"/api/v1/audit-sessions/{session_id}/submit")
    assert rejected.status_code == 422
    assert rejected.json()["data"]["missing_media_item_id"] == item_id

    media = await client.post(f"/api/v1/audit-items/{item_id}/media", json={"storage_key": "r2://bath-leak.jpg"})
    assert media.status_code == 201
    assert media.json()["data"]["audit_item_id"] == item_id

    accepted = await client.post(f"/api/v1/audit-sessions/{session_id}/submit")
    assert accepted.status_code == 200
    assert accepted.json()["data"]["ok"] is True

    session = (await client.get(f"/api/v1/audit-sessions/{session_id}")).json()["data"]
    assert session["status"] == "SUBMITTED"
    assert session["submitted_at"] == accepted.json()["data"]["submitted_at"]

    summary = await client.get(f"/api/v1/audit-sessions/{session_id}/summary")
    assert summary.json()["data"] == {"total": 1, "pass": 0, "fail": 1}
