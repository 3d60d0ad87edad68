"""
Pytest Configuration and Fixtures

Shared test fixtures for unit, API and integration tests. Every test gets a
fresh on-disk SQLite database; API requests run in their own sessions, exactly
as they do in production.
"""

import os

# Must be set before schoolcounsel.config is imported
os.environ.setdefault("BCRYPT_ROUNDS", "4")
os.environ.setdefault("DATABASE_URL", "sqlite+aiosqlite://")

from collections.abc import AsyncGenerator, Callable  # noqa: E402
from typing import Any  # noqa: E402

import pytest  # noqa: E402
from httpx import ASGITransport, AsyncClient  # noqa: E402
from sqlalchemy.ext.asyncio import (  # noqa: E402
    AsyncEngine,
    AsyncSession,
    async_sessionmaker,
    create_async_engine,
)
from sqlalchemy.orm import configure_mappers  # noqa: E402

from schoolcounsel.access import Principal, Role  # noqa: E402
from schoolcounsel.core.database import get_db  # noqa: E402
from schoolcounsel.core.models import Base, Counselor, School, Student  # noqa: E402
from schoolcounsel.core.security import create_access_token, hash_password  # noqa: E402
from schoolcounsel.main import app  # noqa: E402

# Ensure all mappers are configured
configure_mappers()

TEST_PASSWORD = "secret123"  # nosec B105


@pytest.fixture
def account_password() -> str:
    """Password every fixture account was registered with."""
    return TEST_PASSWORD


@pytest.fixture
async def async_engine(tmp_path) -> AsyncGenerator[AsyncEngine, None]:
    """Create a throwaway SQLite database with every table."""
    engine = create_async_engine(f"sqlite+aiosqlite:///{tmp_path / 'test.db'}", echo=False)

    async with engine.begin() as conn:
        await conn.run_sync(Base.metadata.create_all)

    yield engine

    await engine.dispose()


@pytest.fixture
def session_factory(async_engine: AsyncEngine) -> async_sessionmaker[AsyncSession]:
    return async_sessionmaker(
        async_engine, class_=AsyncSession, expire_on_commit=False, autoflush=False
    )


@pytest.fixture
async def db_session(
    session_factory: async_sessionmaker[AsyncSession],
) -> AsyncGenerator[AsyncSession, None]:
    """Session for arranging and inspecting test data."""
    async with session_factory() as session:
        yield session


@pytest.fixture
async def client(
    session_factory: async_sessionmaker[AsyncSession],
) -> AsyncGenerator[AsyncClient, None]:
    """Create test client with database dependency override."""

    async def override_get_db() -> AsyncGenerator[AsyncSession, None]:
        async with session_factory() as session:
            try:
                yield session
                await session.commit()
            except Exception:
                await session.rollback()
                raise

    app.dependency_overrides[get_db] = override_get_db
    if app.state.rate_limiter is not None:
        app.state.rate_limiter.reset()

    transport = ASGITransport(app=app)
    async with AsyncClient(transport=transport, base_url="http://test") as ac:
        yield ac

    app.dependency_overrides.clear()


# ============================================================================
# Principals
# ============================================================================


async def _save(db_session: AsyncSession, record: Any) -> Any:
    db_session.add(record)
    await db_session.commit()
    return record


@pytest.fixture
async def school(db_session: AsyncSession) -> School:
    return await _save(
        db_session,
        School(
            school_name="Hillcrest Secondary School",
            email="admin@hillcrest.edu",
            address="12 Ridge Road",
            phone="+2348012345678",
            school_type="secondary",
            password_hash=hash_password(TEST_PASSWORD),
        ),
    )


@pytest.fixture
async def other_school(db_session: AsyncSession) -> School:
    return await _save(
        db_session,
        School(
            school_name="Lakeside College",
            email="admin@lakeside.edu",
            address="4 Marina Street",
            phone="+2348087654321",
            school_type="secondary",
            password_hash=hash_password(TEST_PASSWORD),
        ),
    )


@pytest.fixture
async def counselor(db_session: AsyncSession, school: School) -> Counselor:
    return await _save(
        db_session,
        Counselor(
            school_id=school.id,
            first_name="Ada",
            last_name="Okafor",
            email="ada.okafor@hillcrest.edu",
            password_hash=hash_password(TEST_PASSWORD),
            specialization="Career guidance",
        ),
    )


@pytest.fixture
async def other_counselor(db_session: AsyncSession, school: School) -> Counselor:
    """Second counselor in the same school."""
    return await _save(
        db_session,
        Counselor(
            school_id=school.id,
            first_name="Tunde",
            last_name="Bello",
            email="tunde.bello@hillcrest.edu",
            password_hash=hash_password(TEST_PASSWORD),
            specialization="Mental health",
        ),
    )


@pytest.fixture
async def outside_counselor(db_session: AsyncSession, other_school: School) -> Counselor:
    return await _save(
        db_session,
        Counselor(
            school_id=other_school.id,
            first_name="Grace",
            last_name="Eze",
            email="grace.eze@lakeside.edu",
            password_hash=hash_password(TEST_PASSWORD),
            specialization="Academic support",
        ),
    )


@pytest.fixture
async def student(db_session: AsyncSession, school: School) -> Student:
    return await _save(
        db_session,
        Student(
            school_id=school.id,
            first_name="Chidi",
            last_name="Nwosu",
            admission_number="HC/2024/001",
            password_hash=hash_password(TEST_PASSWORD),
        ),
    )


@pytest.fixture
async def other_student(db_session: AsyncSession, school: School) -> Student:
    return await _save(
        db_session,
        Student(
            school_id=school.id,
            first_name="Amaka",
            last_name="Obi",
            admission_number="HC/2024/002",
            password_hash=hash_password(TEST_PASSWORD),
        ),
    )


@pytest.fixture
async def outside_student(db_session: AsyncSession, other_school: School) -> Student:
    return await _save(
        db_session,
        Student(
            school_id=other_school.id,
            first_name="Kemi",
            last_name="Adeyemi",
            admission_number="LC/2024/001",
            password_hash=hash_password(TEST_PASSWORD),
        ),
    )


# ============================================================================
# Bearer tokens
# ============================================================================


def principal_for(record: School | Counselor | Student) -> Principal:
    if isinstance(record, School):
        return Principal(id=record.id, role=Role.ADMIN, school_id=record.id, email=record.email)
    if isinstance(record, Counselor):
        return Principal(
            id=record.id, role=Role.STAFF, school_id=record.school_id, email=record.email
        )
    return Principal(id=record.id, role=Role.STUDENT, school_id=record.school_id)


@pytest.fixture
def auth_headers() -> Callable[[School | Counselor | Student], dict[str, str]]:
    """Build an ``Authorization`` header for any principal record."""

    def build(record: School | Counselor | Student) -> dict[str, str]:
        token = create_access_token(principal_for(record))
        return {"Authorization": f"Bearer {token}"}

    return build


# ============================================================================
# Profile section payloads
# ============================================================================


@pytest.fixture
def personal_data_payload() -> dict[str, Any]:
    return {
        "lastName": "Nwosu",
        "firstName": "Chidi",
        "gender": "Male",
        "admissionNumber": "HC/2024/001",
        "yearOfAdmission": 2022,
        "dateOfBirth": "2009-04-12",
        "placeOfBirth": "Enugu",
        "address": "7 Palm Avenue",
        "contactAddress": "PO Box 44",
        "stateOfOrigin": "Enugu",
        "religion": "Christianity",
        "nationality": "Nigerian",
    }


def _parent(name: str) -> dict[str, Any]:
    return {
        "name": name,
        "contactAddress": "PO Box 44",
        "residentialAddress": "7 Palm Avenue",
        "phone": "+2348011111111",
        "state": "Enugu",
        "nationality": "Nigerian",
        "religion": "Christianity",
        "educationLevel": "Tertiary",
        "occupation": "Engineer",
        "deceased": False,
    }


@pytest.fixture
def family_background_payload() -> dict[str, Any]:
    return {"father": _parent("Emeka Nwosu"), "mother": _parent("Ngozi Nwosu")}


@pytest.fixture
def family_structure_payload() -> dict[str, Any]:
    return {
        "fatherWives": 1,
        "motherPosition": "First Wife",
        "totalSiblings": 3,
        "maleSiblings": 1,
        "femaleSiblings": 2,
        "positionAmongSiblings": 2,
        "parentsStatus": "Living Together",
    }


@pytest.fixture
def educational_background_payload() -> dict[str, Any]:
    return {
        "schools": {
            "primary": {
                "schoolName": "Sunrise Primary",
                "admissionYear": 2014,
                "graduationYear": 2020,
            },
            "juniorSecondary": {
                "schoolName": "Hillcrest Junior",
                "admissionYear": 2020,
                "graduationYear": 2023,
            },
        }
    }


@pytest.fixture
def standardized_test_entry() -> dict[str, Any]:
    return {
        "testName": "Differential Aptitude Test",
        "testDescription": "Verbal and numerical reasoning",
        "score": "78",
        "interpretation": "Above average",
        "date": "2026-03-02",
    }
