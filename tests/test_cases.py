"""
Tests for the case endpoints.
"""
import asyncio
from datetime import date, timedelta
from uuid import uuid4

import pytest
from httpx import AsyncClient

from casedesk.models.client import Client
from conftest import create_case


@pytest.mark.asyncio
async def test_create_case_defaults(client: AsyncClient, admin, admin_headers, client_record):
    data = await create_case(client, admin_headers, client_record.id)

    assert data["status"] == "Active"
    assert data["priority"] == "medium"
    assert data["date_opened"] == date.today().isoformat()
    assert data["added_by_user_id"] == str(admin.id)
    assert data["progress"] == 40
    assert data["days_left"] is None


@pytest.mark.asyncio
async def test_deadline_figures(client: AsyncClient, admin_headers, client_record):
    deadline = date.today() + timedelta(days=10)
    data = await create_case(client, admin_headers, client_record.id, deadline=deadline.isoformat())

    assert data["days_left"] == 10
    assert data["deadline_urgency"] == 70


@pytest.mark.asyncio
async def test_case_and_file_numbers_are_unique(client: AsyncClient, admin_headers, client_record, case):
    response = await client.post(
        "/api/cases",
        json={
            "case_number": case["case_number"],
            "file_number": "F-other",
            "title": "Duplicate",
            "case_type": "Civil",
            "client_id": str(client_record.id),
        },
        headers=admin_headers,
    )
    assert response.status_code == 409

    response = await client.post(
        "/api/cases",
        json={
            "case_number": "CV-other",
            "file_number": case["file_number"],
            "title": "Duplicate",
            "case_type": "Civil",
            "client_id": str(client_record.id),
        },
        headers=admin_headers,
    )
    assert response.status_code == 409


@pytest.mark.asyncio
async def test_same_case_number_in_another_firm(client: AsyncClient, other_admin_headers, db_session, other_firm, case):
    rival_client = Client(law_firm_id=other_firm.id, name="Rival Client")
    db_session.add(rival_client)
    await db_session.commit()

    data = await create_case(client, other_admin_headers, rival_client.id, number=case["case_number"])
    assert data["case_number"] == case["case_number"]


@pytest.mark.asyncio
async def test_unknown_client_rejected(client: AsyncClient, admin_headers):
    response = await client.post(
        "/api/cases",
        json={
            "case_number": "CV-9",
            "file_number": "F-9",
            "title": "Orphan",
            "case_type": "Civil",
            "client_id": str(uuid4()),
        },
        headers=admin_headers,
    )
    assert response.status_code == 404


@pytest.mark.asyncio
async def test_list_filters_and_pagination(client: AsyncClient, admin_headers, client_record):
    await create_case(client, admin_headers, client_record.id, number="CV-1", title="Alpha dispute")
    await create_case(client, admin_headers, client_record.id, number="CV-2", title="Beta merger", status="On Hold")
    await create_case(client, admin_headers, client_record.id, number="CV-3", title="Gamma appeal", priority="high")

    response = await client.get("/api/cases", params={"limit": 2}, headers=admin_headers)
    body = response.json()
    assert body["total"] == 3
    assert len(body["data"]) == 2
    assert body["page"] == 1
    assert body["page_size"] == 2

    on_hold = await client.get("/api/cases", params={"status": "On Hold"}, headers=admin_headers)
    assert [c["case_number"] for c in on_hold.json()["data"]] == ["CV-2"]

    high = await client.get("/api/cases", params={"priority": "high"}, headers=admin_headers)
    assert [c["case_number"] for c in high.json()["data"]] == ["CV-3"]

    search = await client.get("/api/cases", params={"search": "merger"}, headers=admin_headers)
    assert [c["case_number"] for c in search.json()["data"]] == ["CV-2"]

    by_client_name = await client.get("/api/cases", params={"search": "blake ind"}, headers=admin_headers)
    assert by_client_name.json()["total"] == 3


@pytest.mark.asyncio
async def test_concurrent_duplicate_creates_conflict(client: AsyncClient, admin_headers, client_record):
    payload = {
        "case_number": "CV-RACE",
        "file_number": "F-RACE",
        "title": "Raced matter",
        "case_type": "Civil",
        "client_id": str(client_record.id),
    }

    responses = await asyncio.gather(
        *(client.post("/api/cases", json=payload, headers=admin_headers) for _ in range(3))
    )

    assert sorted(r.status_code for r in responses) == [200, 409, 409]
    for response in responses:
        if response.status_code == 409:
            assert response.json()["error"]["code"] == "ALREADY_EXISTS"

    listing = await client.get("/api/cases", headers=admin_headers)
    assert listing.json()["total"] == 1


@pytest.mark.asyncio
async def test_invalid_status_filter(client: AsyncClient, admin_headers):
    response = await client.get("/api/cases", params={"status": "Pending"}, headers=admin_headers)
    assert response.status_code == 422


@pytest.mark.asyncio
async def test_update_is_partial_and_logged(client: AsyncClient, admin_headers, case):
    response = await client.put(
        f"/api/cases/{case['id']}",
        json={"status": "On Hold"},
        headers=admin_headers,
    )
    assert response.status_code == 200
    data = response.json()["data"]
    assert data["status"] == "On Hold"
    assert data["title"] == case["title"]
    assert data["progress"] == 30

    await client.put(f"/api/cases/{case['id']}", json={"title": "Renamed matter"}, headers=admin_headers)

    activities = await client.get(f"/api/cases/{case['id']}/activities", headers=admin_headers)
    descriptions = [a["description"] for a in activities.json()["data"]]
    assert "Status changed from Active to On Hold" in descriptions
    assert "Updated title" in descriptions
    assert f"Case {case['case_number']} opened" in descriptions


@pytest.mark.asyncio
async def test_back_to_back_partial_updates_both_apply(client: AsyncClient, admin_headers, case):
    deadline = (date.today() + timedelta(days=20)).isoformat()

    first = await client.put(f"/api/cases/{case['id']}", json={"status": "On Hold"}, headers=admin_headers)
    second = await client.put(f"/api/cases/{case['id']}", json={"deadline": deadline}, headers=admin_headers)
    assert first.status_code == second.status_code == 200

    data = (await client.get(f"/api/cases/{case['id']}", headers=admin_headers)).json()["data"]
    assert data["status"] == "On Hold"
    assert data["deadline"] == deadline
    assert data["title"] == case["title"]


@pytest.mark.asyncio
async def test_no_change_update_writes_no_activity(client: AsyncClient, admin_headers, case):
    await client.put(f"/api/cases/{case['id']}", json={"title": case["title"]}, headers=admin_headers)

    activities = await client.get(f"/api/cases/{case['id']}/activities", headers=admin_headers)
    assert len(activities.json()["data"]) == 1


@pytest.mark.asyncio
async def test_closed_case_is_complete(client: AsyncClient, admin_headers, case):
    response = await client.put(f"/api/cases/{case['id']}", json={"status": "Closed"}, headers=admin_headers)
    assert response.json()["data"]["progress"] == 100


@pytest.mark.asyncio
async def test_case_detail_bundles_documents_notes_and_activity(client: AsyncClient, admin_headers, case):
    await client.post(
        "/api/documents",
        files={"file": ("brief.pdf", b"%PDF-1.4", "application/pdf")},
        data={"case_id": case["id"]},
        headers=admin_headers,
    )
    await client.post(
        "/api/notes",
        json={"title": "Strategy", "content": "Settle early", "case_id": case["id"]},
        headers=admin_headers,
    )

    response = await client.get(f"/api/cases/{case['id']}", headers=admin_headers)
    assert response.status_code == 200
    data = response.json()["data"]
    assert [d["name"] for d in data["documents"]] == ["brief.pdf"]
    assert [n["title"] for n in data["notes"]] == ["Strategy"]
    assert len(data["activities"]) == 1


@pytest.mark.asyncio
async def test_upcoming_deadlines(client: AsyncClient, admin_headers, client_record):
    today = date.today()
    await create_case(client, admin_headers, client_record.id, number="CV-soon", deadline=(today + timedelta(days=3)).isoformat())
    await create_case(client, admin_headers, client_record.id, number="CV-later", deadline=(today + timedelta(days=20)).isoformat())
    await create_case(client, admin_headers, client_record.id, number="CV-far", deadline=(today + timedelta(days=90)).isoformat())
    await create_case(
        client,
        admin_headers,
        client_record.id,
        number="CV-closed",
        status="Closed",
        deadline=(today + timedelta(days=1)).isoformat(),
    )

    response = await client.get("/api/cases/upcoming-deadlines", headers=admin_headers)
    assert response.status_code == 200
    deadlines = response.json()["data"]
    assert [d["case_number"] for d in deadlines] == ["CV-soon", "CV-later"]
    assert deadlines[0]["days_left"] == 3
    assert deadlines[0]["urgency"] == 91


@pytest.mark.asyncio
async def test_delete_case_keeps_documents(client: AsyncClient, admin_headers, case):
    upload = await client.post(
        "/api/documents",
        files={"file": ("brief.pdf", b"%PDF-1.4", "application/pdf")},
        data={"case_id": case["id"]},
        headers=admin_headers,
    )
    document_id = upload.json()["data"]["id"]

    response = await client.delete(f"/api/cases/{case['id']}", headers=admin_headers)
    assert response.status_code == 200

    assert (await client.get(f"/api/cases/{case['id']}", headers=admin_headers)).status_code == 404
    document = await client.get(f"/api/documents/{document_id}", headers=admin_headers)
    assert document.status_code == 200
    assert document.json()["data"]["case_id"] is None


@pytest.mark.asyncio
async def test_no_access_staff_reads_but_cannot_write(client: AsyncClient, readonly_headers, case):
    assert (await client.get(f"/api/cases/{case['id']}", headers=readonly_headers)).status_code == 200

    response = await client.put(f"/api/cases/{case['id']}", json={"title": "Nope"}, headers=readonly_headers)
    assert response.status_code == 403


@pytest.mark.asyncio
async def test_other_firm_cannot_see_case(client: AsyncClient, other_admin_headers, case):
    response = await client.get(f"/api/cases/{case['id']}", headers=other_admin_headers)
    assert response.status_code == 404

    listing = await client.get("/api/cases", headers=other_admin_headers)
    assert listing.json()["total"] == 0


@pytest.mark.asyncio
async def test_client_account_sees_only_own_cases(client: AsyncClient, portal_headers, case, portal_case):
    listing = await client.get("/api/cases", headers=portal_headers)
    assert [c["id"] for c in listing.json()["data"]] == [portal_case["id"]]

    assert (await client.get(f"/api/cases/{case['id']}", headers=portal_headers)).status_code == 404
    assert (await client.get(f"/api/cases/{portal_case['id']}", headers=portal_headers)).status_code == 200

    response = await client.put(f"/api/cases/{portal_case['id']}", json={"title": "Mine"}, headers=portal_headers)
    assert response.status_code == 403
