"""
Pytest configuration and fixtures for testing.

This file provides reusable test fixtures for:
- Database setup/teardown
- FastAPI test client
- Seed companies, jobs and users
- Auth tokens for a regular user and an admin
"""

import os

# Must be set before the app (and its settings) are imported
os.environ["BCRYPT_WORK_FACTOR"] = "4"
os.environ.setdefault("JSON_LOGS", "false")

import pytest
from fastapi.testclient import TestClient
from sqlalchemy import create_engine, event
from sqlalchemy.orm import sessionmaker
from sqlalchemy.pool import StaticPool

from app.core.database import Base, get_db, run_query
from app.core.security import create_token, get_password_hash
from app.models import Application, Company, Job, User  # noqa: F401
from main import app


# Use in-memory SQLite for testing (fast, isolated)
SQLALCHEMY_TEST_DATABASE_URL = "sqlite:///:memory:"

engine = create_engine(
    SQLALCHEMY_TEST_DATABASE_URL,
    connect_args={"check_same_thread": False},
    poolclass=StaticPool,
)


@event.listens_for(engine, "connect")
def _enable_sqlite_foreign_keys(dbapi_connection, connection_record):
    # SQLite ignores ON DELETE CASCADE unless foreign keys are switched on
    cursor = dbapi_connection.cursor()
    cursor.execute("PRAGMA foreign_keys=ON")
    cursor.close()


TestingSessionLocal = sessionmaker(autocommit=False, autoflush=False, bind=engine)


@pytest.fixture
def db_session():
    """
    Create a fresh database for each test.
    Tables are dropped after the test completes.
    """
    Base.metadata.create_all(bind=engine)
    db = TestingSessionLocal()
    try:
        yield db
    finally:
        db.close()
        Base.metadata.drop_all(bind=engine)


@pytest.fixture
def client(db_session):
    """
    FastAPI test client with overridden database dependency.
    """
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
def seed_data(db_session):
    """
    Insert three companies, four jobs (all at c1) and three users.

    Returns:
        {"job_ids": {"J1": id, ...}}
    """
    for n in (1, 2, 3):
        run_query(
            db_session,
            """INSERT INTO companies (handle, name, num_employees, description, logo_url)
               VALUES ($1, $2, $3, $4, $5)""",
            [f"c{n}", f"C{n}", n, f"Desc{n}", f"http://c{n}.img"]
        )

    job_ids = {}
    for title, salary, equity in (("J1", 100, 0.1), ("J2", 200, 0.2), ("J3", 300, 0), ("J4", None, None)):
        row = run_query(
            db_session,
            """INSERT INTO jobs (title, salary, equity, company_handle)
               VALUES ($1, $2, $3, $4)
               RETURNING id""",
            [title, salary, equity, "c1"]
        ).first()
        job_ids[title] = row[0]

    for username, password, is_admin in (("u1", "password1", False),
                                          ("u2", "password2", False),
                                          ("admin", "adminpass", True)):
        run_query(
            db_session,
            """INSERT INTO users (username, password, first_name, last_name, email, is_admin)
               VALUES ($1, $2, $3, $4, $5, $6)""",
            [
                username,
                get_password_hash(password),
                f"{username.upper()}F",
                f"{username.upper()}L",
                f"{username}@email.com",
                is_admin,
            ]
        )

    db_session.commit()
    return {"job_ids": job_ids}


@pytest.fixture
def u1_headers():
    """Authorization header for the regular user u1"""
    token = create_token({"username": "u1", "is_admin": False})
    return {"Authorization": f"Bearer {token}"}


@pytest.fixture
def u2_headers():
    """Authorization header for the regular user u2"""
    token = create_token({"username": "u2", "is_admin": False})
    return {"Authorization": f"Bearer {token}"}


@pytest.fixture
def admin_headers():
    """Authorization header for the admin user"""
    token = create_token({"username": "admin", "is_admin": True})
    return {"Authorization": f"Bearer {token}"}


@pytest.fixture
def sample_company_data():
    """Sample company data for testing"""
    return {
        "handle": "new",
        "name": "New Company",
        "description": "A brand new company",
        "numEmployees": 10,
        "logoUrl": "http://new.img",
    }
