# SPDX-FileCopyrightText: 2025 Roland Knall <rknall@gmail.com>
# SPDX-License-Identifier: GPL-2.0-only
import os

import pytest
from fastapi.testclient import TestClient
from sqlalchemy import create_engine
from sqlalchemy.orm import sessionmaker

# Set test environment before importing app
os.environ["DATABASE_URL"] = "sqlite:///./test.db"

from src.database import get_db
from src.main import app
from src.models import Company, Role, User
from src.models.base import Base
from src.rbac.cache import PermissionCache, permission_cache

# Test database setup
TEST_DATABASE_URL = "sqlite:///./test.db"
engine = create_engine(TEST_DATABASE_URL, connect_args={"check_same_thread": False})
TestingSessionLocal = sessionmaker(autocommit=False, autoflush=False, bind=engine)


@pytest.fixture(autouse=True)
def clear_permission_cache():
    """Keep the process-wide permission cache from leaking between tests."""
    permission_cache.clear()
    yield
    permission_cache.clear()


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
    """Create a test client with database override."""

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
def cache() -> PermissionCache:
    """A private cache with expiry disabled."""
    return PermissionCache(ttl_seconds=0)


@pytest.fixture
def company(db_session) -> Company:
    company = Company(name="Acme Roofing")
    db_session.add(company)
    db_session.commit()
    db_session.refresh(company)
    return company


@pytest.fixture
def other_company(db_session) -> Company:
    company = Company(name="Other Siding Co")
    db_session.add(company)
    db_session.commit()
    db_session.refresh(company)
    return company


@pytest.fixture
def make_user(db_session):
    """Factory creating persisted users."""

    def _make_user(email: str = "rep@example.com", **kwargs) -> User:
        user = User(email=email, full_name=kwargs.pop("full_name", "Sales Rep"), **kwargs)
        db_session.add(user)
        db_session.commit()
        db_session.refresh(user)
        return user

    return _make_user


@pytest.fixture
def test_user(make_user) -> User:
    return make_user()


@pytest.fixture
def make_role(db_session):
    """Factory creating persisted roles; global unless a company is given."""

    def _make_role(
        name: str,
        permissions: list[str],
        company: Company | None = None,
        is_default: bool = False,
    ) -> Role:
        role = Role(
            name=name,
            display_name=name.title(),
            permissions=permissions,
            is_default=is_default,
            is_system_role=company is None,
            company_id=company.id if company else None,
        )
        db_session.add(role)
        db_session.commit()
        db_session.refresh(role)
        return role

    return _make_role
