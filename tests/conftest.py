# tests/conftest.py
import os

os.environ.setdefault("DATABASE_URL", "sqlite://")

import pytest
from fastapi.testclient import TestClient
from sqlalchemy import create_engine
from sqlalchemy.orm import sessionmaker
from sqlalchemy.pool import StaticPool

from adminconsole import models
from adminconsole.core.config import settings
from adminconsole.core.security import create_access_token, hash_password
from adminconsole.db.base import Base
from adminconsole.db.seeds.seed_projects import seed_projects
from adminconsole.db.session import get_db
from adminconsole.main import app

ADMIN_PASSWORD = "admin-pass"
USER_PASSWORD = "dev-pass-123"


# ===================================================================
#  Database fixtures
# ===================================================================

@pytest.fixture(autouse=True)
def fast_bcrypt(monkeypatch):
    """bcrypt's minimum cost keeps hashing out of the test runtime."""
    monkeypatch.setattr(settings, "BCRYPT_ROUNDS", 4)


@pytest.fixture
def engine():
    """In-memory SQLite shared by every session of one test."""
    engine = create_engine(
        "sqlite://",
        connect_args={"check_same_thread": False},
        poolclass=StaticPool,
    )
    Base.metadata.create_all(bind=engine)
    yield engine
    Base.metadata.drop_all(bind=engine)
    engine.dispose()


@pytest.fixture
def session_factory(engine):
    return sessionmaker(autocommit=False, autoflush=False, bind=engine)


@pytest.fixture
def db(session_factory):
    """A session for service-level tests."""
    session = session_factory()
    try:
        yield session
    finally:
        session.close()


@pytest.fixture
def count_rows(session_factory):
    """Count rows of a model using a fresh session."""
    def _count(model, **filters):
        session = session_factory()
        try:
            return session.query(model).filter_by(**filters).count()
        finally:
            session.close()
    return _count


@pytest.fixture
def projects(session_factory):
    """Seeded projects as {name: project_id}."""
    session = session_factory()
    try:
        seed_projects(session, ["Apollo", "Hermes", "Zeus"])
        return {p.project_name: p.project_id for p in session.query(models.Project).all()}
    finally:
        session.close()


@pytest.fixture
def make_user(session_factory):
    """Insert a user directly and return its id."""
    def _make(username, email, role=models.UserRole.developer, password=USER_PASSWORD,
              full_name=None, mobile="9876543210", assignments=()):
        session = session_factory()
        try:
            user = models.User(
                username=username,
                full_name=full_name or username.title() + " Example",
                email=email,
                mobile=mobile,
                role=role,
                password_hash=hash_password(password),
            )
            session.add(user)
            session.flush()
            for project_id, support_type in assignments:
                session.add(models.UserProject(
                    user_id=user.user_id, project_id=project_id, support_type=support_type,
                ))
            session.commit()
            return user.user_id
        finally:
            session.close()
    return _make


# ===================================================================
#  HTTP fixtures
# ===================================================================

@pytest.fixture
def client(session_factory):
    """TestClient whose requests each get their own session on the test DB."""
    def override_get_db():
        session = session_factory()
        try:
            yield session
        finally:
            session.close()

    app.dependency_overrides[get_db] = override_get_db
    try:
        yield TestClient(app)
    finally:
        app.dependency_overrides.clear()


def token_for(user_id, username, role):
    return create_access_token({
        "sub": str(user_id), "user_id": user_id, "username": username, "role": role,
    })


@pytest.fixture
def admin_id(make_user):
    return make_user("admin", "admin@console.local", role=models.UserRole.admin, password=ADMIN_PASSWORD)


@pytest.fixture
def admin_headers(admin_id):
    return {"Authorization": f"Bearer {token_for(admin_id, 'admin', 'Admin')}"}


@pytest.fixture
def developer_id(make_user, projects):
    return make_user(
        "devon", "devon@x.com",
        assignments=[(projects["Hermes"], "Technical Support")],
    )


@pytest.fixture
def developer_headers(developer_id):
    return {"Authorization": f"Bearer {token_for(developer_id, 'devon', 'Developer')}"}


@pytest.fixture
def new_user_payload(projects):
    return {
        "username": "alice",
        "full_name": "Alice Liddell",
        "email": "alice@x.com",
        "mobile": "0123456789",
        "role": "Tester",
        "password": "wonderland",
        "projects": [{"project_id": projects["Apollo"], "support_type": "Technical Support"}],
    }
