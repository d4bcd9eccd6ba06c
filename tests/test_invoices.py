"""
Tests for invoices, line items and the payment proof review flow.
"""
from datetime import date, timedelta
from decimal import Decimal
from uuid import uuid4

import pytest
from httpx import AsyncClient

from casedesk.core.storage import MB
from conftest import create_case

PROOF = b"\x89PNG\r\n\x1a\n transfer receipt"


async def create_invoice(client: AsyncClient, headers: dict, client_id, number: str = "INV-001", **fields) -> dict:
    payload = {"invoice_number": number, "client_id": str(client_id), **fields}
    response = await client.post("/api/invoices", json=payload, headers=headers)
    assert response.status_code == 200, response.text
    return response.json()["data"]


async def upload_proof(client: AsyncClient, headers: dict, invoice_id: str, content: bytes = PROOF):
    return await client.post(
        f"/api/invoices/{invoice_id}/payment-proof",
        files={"file": ("receipt.png", content, "image/png")},
        headers=headers,
    )


@pytest.mark.asyncio
async def test_amount_is_sum_of_line_items(client: AsyncClient, admin, admin_headers, client_record):
    invoice = await create_invoice(
        client,
        admin_headers,
        client_record.id,
        amount="1.00",
        line_items=[
            {"description": "Research", "hours": "1.5", "rate": "100.005"},
            {"description": "Court appearance", "hours": "2", "rate": "250"},
        ],
    )

    assert Decimal(invoice["amount"]) == Decimal("650.01")
    assert [Decimal(item["amount"]) for item in invoice["line_items"]] == [Decimal("150.01"), Decimal("500.00")]
    assert invoice["status"] == "pending"
    assert invoice["issue_date"] == date.today().isoformat()
    assert invoice["created_by_user_id"] == str(admin.id)


@pytest.mark.asyncio
async def test_explicit_amount_without_line_items(client: AsyncClient, admin_headers, client_record):
    invoice = await create_invoice(client, admin_headers, client_record.id, amount="1200.50")
    assert Decimal(invoice["amount"]) == Decimal("1200.50")
    assert invoice["line_items"] == []


@pytest.mark.asyncio
async def test_invoice_number_unique(client: AsyncClient, admin_headers, client_record):
    await create_invoice(client, admin_headers, client_record.id)
    response = await client.post(
        "/api/invoices",
        json={"invoice_number": "INV-001", "client_id": str(client_record.id)},
        headers=admin_headers,
    )
    assert response.status_code == 409


@pytest.mark.asyncio
async def test_case_must_belong_to_invoice_client(client: AsyncClient, admin_headers, client_record, portal_case):
    response = await client.post(
        "/api/invoices",
        json={"invoice_number": "INV-X", "client_id": str(client_record.id), "case_id": portal_case["id"]},
        headers=admin_headers,
    )
    assert response.status_code == 400
    assert response.json()["error"]["code"] == "BUSINESS_RULE_VIOLATION"


@pytest.mark.asyncio
async def test_unknown_client(client: AsyncClient, admin_headers):
    response = await client.post(
        "/api/invoices",
        json={"invoice_number": "INV-Y", "client_id": str(uuid4())},
        headers=admin_headers,
    )
    assert response.status_code == 404


@pytest.mark.asyncio
async def test_overdue_flag(client: AsyncClient, admin_headers, client_record):
    late = await create_invoice(
        client,
        admin_headers,
        client_record.id,
        number="INV-LATE",
        due_date=(date.today() - timedelta(days=1)).isoformat(),
    )
    assert late["is_overdue"] is True

    on_time = await create_invoice(
        client,
        admin_headers,
        client_record.id,
        number="INV-OK",
        due_date=(date.today() + timedelta(days=14)).isoformat(),
    )
    assert on_time["is_overdue"] is False


@pytest.mark.asyncio
async def test_update_replaces_line_items(client: AsyncClient, admin_headers, client_record):
    invoice = await create_invoice(
        client,
        admin_headers,
        client_record.id,
        line_items=[{"description": "Drafting", "hours": "3", "rate": "100"}],
    )

    response = await client.put(
        f"/api/invoices/{invoice['id']}",
        json={"line_items": [{"description": "Review", "hours": "1", "rate": "80"}], "description": "Revised"},
        headers=admin_headers,
    )
    assert response.status_code == 200
    data = response.json()["data"]
    assert [item["description"] for item in data["line_items"]] == ["Review"]
    assert Decimal(data["amount"]) == Decimal("80.00")
    assert data["description"] == "Revised"


@pytest.mark.asyncio
async def test_marking_paid_sets_paid_date(client: AsyncClient, admin_headers, client_record):
    invoice = await create_invoice(client, admin_headers, client_record.id)

    response = await client.put(f"/api/invoices/{invoice['id']}", json={"status": "paid"}, headers=admin_headers)
    assert response.json()["data"]["paid_date"] == date.today().isoformat()


@pytest.mark.asyncio
async def test_list_and_filters(client: AsyncClient, admin_headers, client_record, portal_client):
    await create_invoice(client, admin_headers, client_record.id, number="INV-A", description="Retainer")
    await create_invoice(client, admin_headers, portal_client.id, number="INV-B", status="draft")

    everything = await client.get("/api/invoices", headers=admin_headers)
    assert everything.json()["total"] == 2

    drafts = await client.get("/api/invoices", params={"status": "draft"}, headers=admin_headers)
    assert [i["invoice_number"] for i in drafts.json()["data"]] == ["INV-B"]

    by_client = await client.get("/api/invoices", params={"client_id": str(client_record.id)}, headers=admin_headers)
    assert [i["invoice_number"] for i in by_client.json()["data"]] == ["INV-A"]

    search = await client.get("/api/invoices", params={"search": "retainer"}, headers=admin_headers)
    assert search.json()["total"] == 1


@pytest.mark.asyncio
async def test_client_sees_only_own_invoices(client: AsyncClient, admin_headers, portal_headers, client_record, portal_client):
    other = await create_invoice(client, admin_headers, client_record.id, number="INV-A")
    own = await create_invoice(client, admin_headers, portal_client.id, number="INV-B")

    listing = await client.get("/api/invoices", headers=portal_headers)
    assert [i["id"] for i in listing.json()["data"]] == [own["id"]]

    assert (await client.get(f"/api/invoices/{other['id']}", headers=portal_headers)).status_code == 404

    response = await client.put(f"/api/invoices/{own['id']}", json={"status": "paid"}, headers=portal_headers)
    assert response.status_code == 403


@pytest.mark.asyncio
async def test_payment_proof_approved(client: AsyncClient, admin_headers, portal_headers, portal_client, portal_case):
    invoice = await create_invoice(client, admin_headers, portal_client.id, case_id=portal_case["id"])

    response = await upload_proof(client, portal_headers, invoice["id"])
    assert response.status_code == 200
    proof_id = response.json()["data"]["payment_proof_document_id"]
    assert proof_id is not None
    assert response.json()["data"]["status"] == "pending"

    proof = await client.get(f"/api/documents/{proof_id}", headers=admin_headers)
    assert proof.json()["data"]["document_type"] == "Payment Proof"
    assert proof.json()["data"]["status"] == "Under Review"
    assert proof.json()["data"]["case_id"] == portal_case["id"]

    review = await client.post(
        f"/api/invoices/{invoice['id']}/review-payment",
        json={"approved": True, "paid_date": "2024-05-02"},
        headers=admin_headers,
    )
    assert review.status_code == 200
    assert review.json()["data"]["status"] == "paid"
    assert review.json()["data"]["paid_date"] == "2024-05-02"

    proof = await client.get(f"/api/documents/{proof_id}", headers=admin_headers)
    assert proof.json()["data"]["status"] == "Approved"

    again = await upload_proof(client, portal_headers, invoice["id"])
    assert again.status_code == 400


@pytest.mark.asyncio
async def test_payment_proof_rejected(client: AsyncClient, admin_headers, portal_headers, portal_client):
    invoice = await create_invoice(client, admin_headers, portal_client.id)
    await upload_proof(client, portal_headers, invoice["id"])

    review = await client.post(
        f"/api/invoices/{invoice['id']}/review-payment",
        json={"approved": False},
        headers=admin_headers,
    )
    data = review.json()["data"]
    assert data["status"] == "pending"
    assert data["paid_date"] is None


@pytest.mark.asyncio
async def test_review_without_proof(client: AsyncClient, admin_headers, client_record):
    invoice = await create_invoice(client, admin_headers, client_record.id)

    response = await client.post(
        f"/api/invoices/{invoice['id']}/review-payment",
        json={"approved": True},
        headers=admin_headers,
    )
    assert response.status_code == 400


@pytest.mark.asyncio
async def test_staff_cannot_upload_proof(client: AsyncClient, admin_headers, client_record):
    invoice = await create_invoice(client, admin_headers, client_record.id)

    response = await upload_proof(client, admin_headers, invoice["id"])
    assert response.status_code == 403


@pytest.mark.asyncio
async def test_payment_proof_size_limit(client: AsyncClient, admin_headers, portal_headers, portal_client):
    invoice = await create_invoice(client, admin_headers, portal_client.id)

    response = await upload_proof(client, portal_headers, invoice["id"], content=b"0" * (10 * MB + 1))
    assert response.status_code == 413
    assert response.json()["error"]["message"] == "File size must be under 10MB"


@pytest.mark.asyncio
async def test_deleting_proof_unlinks_invoice(client: AsyncClient, admin_headers, portal_headers, portal_client):
    invoice = await create_invoice(client, admin_headers, portal_client.id)
    proof_id = (await upload_proof(client, portal_headers, invoice["id"])).json()["data"]["payment_proof_document_id"]

    await client.delete(f"/api/documents/{proof_id}", headers=admin_headers)

    response = await client.get(f"/api/invoices/{invoice['id']}", headers=admin_headers)
    assert response.json()["data"]["payment_proof_document_id"] is None


@pytest.mark.asyncio
async def test_delete_invoice(client: AsyncClient, admin_headers, readonly_headers, client_record):
    invoice = await create_invoice(
        client,
        admin_headers,
        client_record.id,
        line_items=[{"description": "Drafting", "hours": "1", "rate": "100"}],
    )

    assert (await client.delete(f"/api/invoices/{invoice['id']}", headers=readonly_headers)).status_code == 403
    assert (await client.delete(f"/api/invoices/{invoice['id']}", headers=admin_headers)).status_code == 200
    assert (await client.get(f"/api/invoices/{invoice['id']}", headers=admin_headers)).status_code == 404


@pytest.mark.asyncio
async def test_invoice_for_case_of_same_client(client: AsyncClient, admin_headers, client_record):
    case = await create_case(client, admin_headers, client_record.id, number="CV-BILL")

    invoice = await create_invoice(client, admin_headers, client_record.id, case_id=case["id"])
    assert invoice["case_id"] == case["id"]

    by_case = await client.get("/api/invoices", params={"case_id": case["id"]}, headers=admin_headers)
    assert by_case.json()["total"] == 1
