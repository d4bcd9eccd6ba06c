"""
Tests for helpers: security, derived case figures, envelopes and storage.
"""
from datetime import date, datetime, timedelta, timezone
from uuid import uuid4

import pytest

from casedesk.core.case_metrics import (
    case_progress,
    character_count,
    days_left,
    deadline_urgency,
    format_file_size,
    is_invoice_overdue,
    word_count,
)
from casedesk.core.exceptions import FileTooLargeError, InvalidFileTypeError, StorageError
from casedesk.core.security import create_access_token, get_password_hash, verify_password, verify_token
from casedesk.core.storage import MB, LocalStorageBackend, StorageService
from casedesk.schemas.base import APIResponse, as_utc, changes, paginate
from casedesk.schemas.case import CaseUpdate
from casedesk.schemas.note import normalize_tags
from casedesk.schemas.invoice import LineItemIn
from casedesk.services.invoice_service import build_line_items


def test_password_hashing():
    hashed = get_password_hash("my_secure_password")

    assert hashed != "my_secure_password"
    assert verify_password("my_secure_password", hashed) is True
    assert verify_password("wrong_password", hashed) is False


def test_access_token_round_trip():
    token = create_access_token("user-1", additional_claims={"role": "admin"})

    payload = verify_token(token)
    assert payload["sub"] == "user-1"
    assert payload["role"] == "admin"


def test_expired_or_tampered_token_is_rejected():
    expired = create_access_token("user-1", expires_delta=timedelta(seconds=-5))
    assert verify_token(expired) is None
    assert verify_token(create_access_token("user-1") + "x") is None


def test_api_response_model():
    response = APIResponse(success=True, data={"key": "value"}, message="OK")

    assert response.success is True
    assert response.data == {"key": "value"}
    assert response.message == "OK"


def test_paginate_page_number():
    assert paginate([], 42, skip=0, limit=20)["page"] == 1
    assert paginate([], 42, skip=40, limit=20)["page"] == 3


def test_changes_keeps_explicit_nulls_only_for_clearable_fields():
    update = CaseUpdate.model_validate({"title": None, "deadline": None, "priority": "high"})

    assert changes(update) == {"priority": "high"}
    assert changes(update, clearable=("deadline",)) == {"deadline": None, "priority": "high"}


def test_as_utc_treats_naive_values_as_utc():
    value = as_utc(datetime(2024, 5, 1, 9, 30))
    assert value == datetime(2024, 5, 1, 9, 30, tzinfo=timezone.utc)
    assert as_utc(None) is None


# === Derived case figures ===

def test_days_left_and_urgency():
    today = date(2024, 3, 1)

    assert days_left(None) is None
    assert days_left(date(2024, 3, 11), today) == 10
    assert days_left(date(2024, 2, 28), today) == -2

    assert deadline_urgency(None) is None
    assert deadline_urgency(-1) == 100
    assert deadline_urgency(0) == 100
    assert deadline_urgency(10) == 70
    assert deadline_urgency(60) == 30


@pytest.mark.parametrize(
    ("status", "age_days", "expected"),
    [
        ("Active", 5, 40),
        ("Active", 45, 55),
        ("On Hold", 100, 55),
        ("Active", 400, 75),
        ("Closed", 5, 100),
        ("Archived", 400, 100),
    ],
)
def test_case_progress(status, age_days, expected):
    today = date(2024, 6, 1)
    assert case_progress(status, today - timedelta(days=age_days), today) == expected


def test_case_progress_never_reaches_100_while_open():
    today = date(2024, 6, 1)
    assert case_progress("Active", today - timedelta(days=3650), today) <= 95


def test_word_and_character_counts():
    assert word_count("") == 0
    assert word_count("   ") == 0
    assert word_count("Call  the\nwitness again") == 4
    assert character_count(None) == 0
    assert character_count("abc ") == 4


def test_format_file_size():
    assert format_file_size(0) == "0 B"
    assert format_file_size(512) == "512 B"
    assert format_file_size(1536) == "1.5 KB"
    assert format_file_size(25 * MB) == "25.0 MB"


def test_invoice_overdue():
    today = date(2024, 6, 1)

    assert is_invoice_overdue("pending", date(2024, 5, 31), today) is True
    assert is_invoice_overdue("pending", date(2024, 6, 1), today) is False
    assert is_invoice_overdue("paid", date(2024, 1, 1), today) is False
    assert is_invoice_overdue("overdue", None, today) is True


def test_normalize_tags():
    assert normalize_tags([" urgent", "urgent", "", "court "]) == ["urgent", "court"]
    assert normalize_tags(None) is None


def test_line_items_round_half_up():
    rows, total = build_line_items(
        [
            LineItemIn(description="Research", hours="1.5", rate="100.005"),
            LineItemIn(description="Hearing", hours="2", rate="250"),
        ]
    )

    assert [str(row.amount) for row in rows] == ["150.01", "500.00"]
    assert str(total) == "650.01"
    assert [row.position for row in rows] == [0, 1]


# === Storage ===

@pytest.mark.asyncio
async def test_storage_round_trip(tmp_path):
    service = StorageService(LocalStorageBackend(tmp_path))
    firm_id = uuid4()

    stored = await service.upload_file(b"%PDF-1.4 brief", "brief.pdf", "application/pdf", firm_id)

    assert stored["storage_path"].startswith(f"{firm_id}/documents/")
    assert stored["storage_path"].endswith("_brief.pdf")
    assert stored["size_bytes"] == 14
    assert await service.download_file(stored["storage_path"]) == b"%PDF-1.4 brief"


def test_storage_rejects_oversized_and_unknown_types(tmp_path):
    service = StorageService(LocalStorageBackend(tmp_path))

    with pytest.raises(FileTooLargeError) as exc:
        service.validate_file(26 * MB, "application/pdf", max_size_mb=25)
    assert exc.value.message == "File size must be under 25MB"

    with pytest.raises(InvalidFileTypeError):
        service.validate_file(10, "application/x-msdownload", max_size_mb=25)


def test_generated_path_strips_client_directories():
    path = StorageService.generate_path("firm", "documents", "C:\\Users\\me\\..\\secret.pdf")
    assert path.startswith("firm/documents/")
    assert path.endswith("_secret.pdf")
    assert ".." not in path


def test_local_backend_refuses_paths_outside_root(tmp_path):
    backend = LocalStorageBackend(tmp_path / "root")
    with pytest.raises(StorageError):
        backend.put("../escape.txt", b"x", "text/plain")
