"""
Tests for the generic repositories and their conflict handling.
"""
import pytest
from sqlalchemy.exc import IntegrityError
from sqlalchemy.ext.asyncio import AsyncSession

from casedesk.core.exceptions import ResourceAlreadyExistsError
from casedesk.core.security import get_password_hash
from casedesk.models.case import Case
from casedesk.models.client import Client
from casedesk.models.user import DEFAULT_PERMISSIONS, User, UserRole
from casedesk.repositories.case_repository import CaseRepository
from casedesk.repositories.law_firm_repository import LawFirmRepository
from casedesk.repositories.user_repository import UserRepository


@pytest.mark.asyncio
async def test_resource_name_splits_model_name(db_session: AsyncSession):
    assert LawFirmRepository(db_session).resource_name == "Law firm"
    assert UserRepository(db_session).resource_name == "User"


@pytest.mark.asyncio
async def test_unique_violation_becomes_conflict(db_session: AsyncSession, admin: User):
    # a rollback expires loaded rows, so read what we need up front
    email, firm_id = admin.email, admin.law_firm_id
    users = UserRepository(db_session)

    with pytest.raises(ResourceAlreadyExistsError) as exc_info:
        await users.create(
            email=email,
            full_name="Second Admin",
            hashed_password=get_password_hash("password123"),
            role=UserRole.ASSOCIATE,
            permissions=DEFAULT_PERMISSIONS[UserRole.ASSOCIATE],
            law_firm_id=firm_id,
        )
    assert exc_info.value.message == "User already exists"
    assert exc_info.value.field is None

    # the session was rolled back and stays usable
    assert await users.count(User.email == email) == 1


@pytest.mark.asyncio
async def test_other_integrity_errors_propagate(db_session: AsyncSession):
    with pytest.raises(IntegrityError):
        await LawFirmRepository(db_session).create(name=None)


@pytest.mark.asyncio
async def test_case_numbers_unique_per_firm(db_session: AsyncSession, client_record: Client, other_admin: User):
    firm_id, other_firm_id, client_id = client_record.law_firm_id, other_admin.law_firm_id, client_record.id
    fields = {"title": "Lease dispute", "case_type": "Civil", "client_id": client_id}
    cases = CaseRepository(db_session, firm_id)

    await cases.create(case_number="CV-1", file_number="F-1", **fields)
    assert await cases.exists(Case.case_number == "CV-1")
    assert not await cases.exists(Case.case_number == "CV-2")

    with pytest.raises(ResourceAlreadyExistsError, match="Case already exists"):
        await cases.create(case_number="CV-1", file_number="F-2", **fields)

    # same number in another firm is fine, and invisible from the first
    other = CaseRepository(db_session, other_firm_id)
    assert not await other.exists(Case.case_number == "CV-1")
    await other.create(case_number="CV-1", file_number="F-1", **fields)
    assert await other.count() == 1
    assert await cases.count() == 1
