"""
Pytest fixtures for the CaseDesk API tests.

Each test gets its own SQLite database and storage directory; requests
go through the real application with real bearer tokens.
"""
import os

os.environ.setdefault("DATABASE_URL", "sqlite+aiosqlite:///./casedesk-test.db")
os.environ.setdefault("SECRET_KEY", "test-secret-key")
os.environ.setdefault("BCRYPT_ROUNDS", "4")
os.environ.setdefault("STORAGE_BACKEND", "local")

from typing import AsyncGenerator

import pytest
import pytest_asyncio
from httpx import ASGITransport, AsyncClient
from sqlalchemy import select
from sqlalchemy.ext.asyncio import AsyncSession, async_sessionmaker, create_async_engine
from sqlalchemy.pool import NullPool

from casedesk.core.dependencies import get_db, get_storage
from casedesk.core.security import get_password_hash
from casedesk.core.storage import LocalStorageBackend, StorageService
from casedesk.db.base import Base
from casedesk.main import app
from casedesk.models.client import Client
from casedesk.models.law_firm import LawFirm
from casedesk.models.user import DEFAULT_PERMISSIONS, User, UserPermission, UserRole
from casedesk.services.auth_service import issue_token

PASSWORD = "password123"


def auth(user: User) -> dict[str, str]:
    """Authorization header carrying a freshly issued token for ``user``."""
    return {"Authorization": f"Bearer {issue_token(user)}"}


async def make_user(
    db: AsyncSession,
    email: str,
    role: UserRole,
    law_firm: LawFirm | None,
    permissions: UserPermission | None = None,
    full_name: str | None = None,
) -> User:
    user = User(
        email=email,
        full_name=full_name or email.split("@")[0].title(),
        hashed_password=get_password_hash(PASSWORD),
        role=role,
        permissions=permissions or DEFAULT_PERMISSIONS[role],
        law_firm_id=law_firm.id if law_firm else None,
        is_active=True,
    )
    db.add(user)
    await db.commit()
    await db.refresh(user)
    return user


@pytest_asyncio.fixture
async def session_maker(tmp_path) -> AsyncGenerator[async_sessionmaker, None]:
    """Fresh schema in a throwaway SQLite file."""
    engine = create_async_engine(
        f"sqlite+aiosqlite:///{tmp_path / 'casedesk.db'}",
        poolclass=NullPool,
    )
    async with engine.begin() as conn:
        await conn.run_sync(Base.metadata.create_all)

    yield async_sessionmaker(
        engine,
        class_=AsyncSession,
        expire_on_commit=False,
        autoflush=False,
    )

    await engine.dispose()


@pytest_asyncio.fixture
async def db_session(session_maker) -> AsyncGenerator[AsyncSession, None]:
    """Session used by fixtures to seed rows."""
    async with session_maker() as session:
        yield session


@pytest.fixture
def storage(tmp_path) -> StorageService:
    return StorageService(LocalStorageBackend(tmp_path / "storage"))


@pytest_asyncio.fixture
async def client(session_maker, storage) -> AsyncGenerator[AsyncClient, None]:
    """HTTP client bound to the application; one database session per request."""

    async def override_get_db():
        async with session_maker() as session:
            yield session

    app.dependency_overrides[get_db] = override_get_db
    app.dependency_overrides[get_storage] = lambda: storage

    async with AsyncClient(
        transport=ASGITransport(app=app),
        base_url="http://test",
    ) as ac:
        yield ac

    app.dependency_overrides.clear()


# === Tenants and users ===

@pytest_asyncio.fixture
async def law_firm(db_session: AsyncSession) -> LawFirm:
    firm = LawFirm(name="Hale & Partners", email="office@hale.example.com")
    db_session.add(firm)
    await db_session.commit()
    await db_session.refresh(firm)
    return firm


@pytest_asyncio.fixture
async def other_firm(db_session: AsyncSession) -> LawFirm:
    firm = LawFirm(name="Rival Legal", email="office@rival.example.com")
    db_session.add(firm)
    await db_session.commit()
    await db_session.refresh(firm)
    return firm


@pytest_asyncio.fixture
async def admin(db_session: AsyncSession, law_firm: LawFirm) -> User:
    return await make_user(db_session, "admin@example.com", UserRole.ADMIN, law_firm, full_name="Ada Admin")


@pytest_asyncio.fixture
async def associate(db_session: AsyncSession, law_firm: LawFirm) -> User:
    """Associate with the default limited access."""
    return await make_user(db_session, "associate@example.com", UserRole.ASSOCIATE, law_firm, full_name="Sam Associate")


@pytest_asyncio.fixture
async def manager(db_session: AsyncSession, law_firm: LawFirm) -> User:
    """Associate granted full access: manages the team without being admin."""
    return await make_user(
        db_session,
        "manager@example.com",
        UserRole.ASSOCIATE,
        law_firm,
        permissions=UserPermission.FULL_ACCESS,
        full_name="Morgan Manager",
    )


@pytest_asyncio.fixture
async def readonly(db_session: AsyncSession, law_firm: LawFirm) -> User:
    return await make_user(
        db_session,
        "readonly@example.com",
        UserRole.ASSOCIATE,
        law_firm,
        permissions=UserPermission.NO_ACCESS,
    )


@pytest_asyncio.fixture
async def platform_admin(db_session: AsyncSession) -> User:
    return await make_user(db_session, "platform@example.com", UserRole.ADMIN, None)


@pytest_asyncio.fixture
async def other_admin(db_session: AsyncSession, other_firm: LawFirm) -> User:
    return await make_user(db_session, "rival-admin@example.com", UserRole.ADMIN, other_firm)


@pytest_asyncio.fixture
async def client_record(db_session: AsyncSession, law_firm: LawFirm) -> Client:
    """A client of the firm without a portal account."""
    record = Client(law_firm_id=law_firm.id, name="Blake Industries", email="legal@blake.example.com")
    db_session.add(record)
    await db_session.commit()
    await db_session.refresh(record)
    return record


@pytest_asyncio.fixture
async def portal_user(db_session: AsyncSession, law_firm: LawFirm) -> User:
    """Client-role user linked to its own client record."""
    user = await make_user(db_session, "jordan@example.com", UserRole.CLIENT, law_firm, full_name="Jordan Client")
    record = Client(
        law_firm_id=law_firm.id,
        name="Jordan Client",
        email="jordan@example.com",
        user_account_id=user.id,
    )
    db_session.add(record)
    await db_session.commit()
    return user


@pytest_asyncio.fixture
async def portal_client(db_session: AsyncSession, portal_user: User) -> Client:
    result = await db_session.execute(select(Client).where(Client.user_account_id == portal_user.id))
    return result.scalar_one()


@pytest.fixture
def admin_headers(admin: User) -> dict[str, str]:
    return auth(admin)


@pytest.fixture
def associate_headers(associate: User) -> dict[str, str]:
    return auth(associate)


@pytest.fixture
def manager_headers(manager: User) -> dict[str, str]:
    return auth(manager)


@pytest.fixture
def readonly_headers(readonly: User) -> dict[str, str]:
    return auth(readonly)


@pytest.fixture
def platform_headers(platform_admin: User) -> dict[str, str]:
    return auth(platform_admin)


@pytest.fixture
def other_admin_headers(other_admin: User) -> dict[str, str]:
    return auth(other_admin)


@pytest.fixture
def portal_headers(portal_user: User) -> dict[str, str]:
    return auth(portal_user)


# === Records created through the API ===

async def create_case(
    client: AsyncClient,
    headers: dict[str, str],
    client_id,
    number: str = "CV-2024-001",
    **fields,
) -> dict:
    payload = {
        "case_number": number,
        "file_number": f"F-{number}",
        "title": fields.pop("title", "Blake v. Harbor Freight"),
        "case_type": fields.pop("case_type", "Civil"),
        "client_id": str(client_id),
        **fields,
    }
    response = await client.post("/api/cases", json=payload, headers=headers)
    assert response.status_code == 200, response.text
    return response.json()["data"]


@pytest_asyncio.fixture
async def case(client: AsyncClient, admin_headers, client_record: Client) -> dict:
    return await create_case(client, admin_headers, client_record.id)


@pytest_asyncio.fixture
async def portal_case(client: AsyncClient, admin_headers, portal_client: Client) -> dict:
    """A case whose client is the portal user's client record."""
    return await create_case(client, admin_headers, portal_client.id, number="CV-2024-777", title="Client v. Landlord")
