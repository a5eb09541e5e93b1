"""
Test configuration and fixtures for pytest.

This module provides:
- In-memory SQLite database for fast, isolated tests
- Record store and validator bound to the test session
- Test data factories for creating companies and fiscal years
"""

import os

os.environ.setdefault("CORPREG_DATABASE_URL", "sqlite:///:memory:")

import pytest
from fastapi.testclient import TestClient
from sqlalchemy import create_engine, event
from sqlalchemy.orm import sessionmaker
from sqlalchemy.pool import StaticPool

from corpreg.database import Base, get_db
from corpreg.main import app
from corpreg.models import Company, FiscalYear
from corpreg.services.record_store import RecordStore, generate_id
from corpreg.services.validator import Validator

# Use in-memory SQLite for tests (faster, no external dependencies)
SQLALCHEMY_DATABASE_URL = "sqlite:///:memory:"

engine = create_engine(
    SQLALCHEMY_DATABASE_URL,
    connect_args={"check_same_thread": False},
    poolclass=StaticPool,
)
TestingSessionLocal = sessionmaker(autocommit=False, autoflush=False, bind=engine)


@event.listens_for(engine, "connect")
def _enable_foreign_keys(dbapi_connection, connection_record):
    cursor = dbapi_connection.cursor()
    cursor.execute("PRAGMA foreign_keys=ON")
    cursor.close()


# =============================================================================
# Database Fixtures
# =============================================================================

@pytest.fixture(scope="function")
def db_session():
    """Create a fresh database for each test."""
    Base.metadata.create_all(bind=engine)
    session = TestingSessionLocal()
    try:
        yield session
    finally:
        session.close()
        Base.metadata.drop_all(bind=engine)


@pytest.fixture(scope="function")
def client(db_session):
    """Create a test client with database session override."""

    def override_get_db():
        try:
            yield db_session
        finally:
            pass

    app.dependency_overrides[get_db] = override_get_db
    with TestClient(app) as test_client:
        yield test_client
    app.dependency_overrides.clear()


@pytest.fixture
def store(db_session) -> RecordStore:
    """Record store bound to the test session."""
    return RecordStore(db_session)


@pytest.fixture
def validator(store) -> Validator:
    """Validator reading from the test record store."""
    return Validator(store)


# =============================================================================
# Company Fixtures
# =============================================================================

@pytest.fixture
def test_company(db_session) -> Company:
    """Create a test company."""
    company = Company(
        id=generate_id(),
        name="테스트 주식회사",
        registration_number="110-81-12345",
    )
    db_session.add(company)
    db_session.commit()
    db_session.refresh(company)
    return company


@pytest.fixture
def test_company_with_fiscal_year(db_session, test_company) -> tuple[Company, FiscalYear]:
    """Create a test company with fiscal year 2022 (20220101~20221231)."""
    fiscal_year = FiscalYear(
        id=generate_id(),
        company_id=test_company.id,
        fiscal_year="2022",
        start_date="20220101",
        end_date="20221231",
        is_main_fiscal_year=True,
        remarks="",
    )
    db_session.add(fiscal_year)
    db_session.commit()
    db_session.refresh(fiscal_year)
    return test_company, fiscal_year


# =============================================================================
# Test Data Factories
# =============================================================================

class TestDataFactory:
    """Factory for creating test data entities."""

    def __init__(self, db_session):
        self.db = db_session

    def create_company(
        self,
        name: str = "팩토리 주식회사",
        registration_number: str = "220-81-56789",
    ) -> Company:
        """Create a company with specified attributes."""
        company = Company(id=generate_id(), name=name, registration_number=registration_number)
        self.db.add(company)
        self.db.commit()
        self.db.refresh(company)
        return company

    def create_fiscal_year(
        self,
        company: Company,
        year: str = "2025",
        start_date: str | None = None,
        end_date: str | None = None,
        **kwargs,
    ) -> FiscalYear:
        """Create a fiscal year for a company, calendar year by default."""
        fiscal_year = FiscalYear(
            id=generate_id(),
            company_id=company.id,
            fiscal_year=year,
            start_date=start_date or f"{year}0101",
            end_date=end_date or f"{year}1231",
            **kwargs,
        )
        self.db.add(fiscal_year)
        self.db.commit()
        self.db.refresh(fiscal_year)
        return fiscal_year


@pytest.fixture
def factory(db_session) -> TestDataFactory:
    """Provide a test data factory."""
    return TestDataFactory(db_session)
