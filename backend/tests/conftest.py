import pytest
from fastapi.testclient import TestClient
from sqlalchemy import StaticPool, create_engine
from sqlalchemy.dialects.sqlite import base as sqlite_base
from sqlalchemy.orm import sessionmaker

import forms_api.models  # noqa: F401 - register models with Base.metadata
from forms_api.core.config import Settings
from forms_api.core.database import Base, get_db
from forms_api.main import create_app
from forms_api.schemas.auth import Author
from forms_api.services.audit import AuditPublisher
from forms_api.services.auth import create_service_token

# ---------------------------------------------------------------------------
# SQLite compatibility for PostgreSQL-specific types (JSONB)
# ---------------------------------------------------------------------------
sqlite_base.SQLiteTypeCompiler.visit_JSONB = lambda self, type_, **kw: self.visit_JSON(type_, **kw)

# In-memory SQLite for tests, no PostgreSQL needed
TEST_DATABASE_URL = "sqlite://"
TEST_SECRET = "test-secret"

engine = create_engine(
    TEST_DATABASE_URL,
    connect_args={"check_same_thread": False},
    poolclass=StaticPool,
)
TestSessionLocal = sessionmaker(autocommit=False, autoflush=False, bind=engine)


class FakeAuditPublisher(AuditPublisher):
    """Collects messages instead of sending them."""

    def __init__(self) -> None:
        self.messages: list[dict] = []

    def publish(self, message: dict) -> None:
        self.messages.append(message)

    @property
    def types(self) -> list[str]:
        return [message["type"] for message in self.messages]


def make_settings(**overrides) -> Settings:
    values = {
        "JWT_SECRET": TEST_SECRET,
        "DATABASE_URL": TEST_DATABASE_URL,
        "LOG_ENABLED": True,
        "LOG_LEVEL": "DEBUG",
    }
    values.update(overrides)
    return Settings(**values)


@pytest.fixture(autouse=True)
def setup_db():
    """Create all tables before each test, drop after."""
    Base.metadata.create_all(bind=engine)
    yield
    Base.metadata.drop_all(bind=engine)


@pytest.fixture
def db():
    """Provide a test database session."""
    session = TestSessionLocal()
    try:
        yield session
    finally:
        session.close()


@pytest.fixture
def settings() -> Settings:
    return make_settings()


@pytest.fixture
def audit_publisher() -> FakeAuditPublisher:
    return FakeAuditPublisher()


@pytest.fixture
def app(settings, audit_publisher):
    return create_app(settings, audit_publisher=audit_publisher)


@pytest.fixture
def client(app, db):
    """TestClient with overridden DB dependency."""

    def _override_get_db():
        try:
            yield db
        finally:
            pass

    app.dependency_overrides[get_db] = _override_get_db
    yield TestClient(app)
    app.dependency_overrides.clear()


@pytest.fixture
def make_client(db):
    """Build a TestClient for an app with non-default settings or collaborators."""
    apps = []

    def _override_get_db():
        try:
            yield db
        finally:
            pass

    def _make(settings: Settings, **collaborators) -> TestClient:
        app = create_app(settings, **collaborators)
        app.dependency_overrides[get_db] = _override_get_db
        apps.append(app)
        return TestClient(app)

    yield _make
    for app in apps:
        app.dependency_overrides.clear()


@pytest.fixture
def author() -> Author:
    return Author(id="forms-designer", display_name="Forms Designer")


@pytest.fixture
def auth_headers(author) -> dict:
    token = create_service_token(author.id, author.display_name, TEST_SECRET)
    return {"Authorization": f"Bearer {token}"}


@pytest.fixture
def form(client, auth_headers) -> dict:
    """Create a form through the API and return the status response."""
    resp = client.post(
        "/forms",
        json={
            "title": "Apply for a fishing licence",
            "organisation": "Defra",
            "teamName": "Forms team",
            "teamEmail": "forms@example.gov.uk",
        },
        headers=auth_headers,
    )
    assert resp.status_code == 200, resp.text
    return resp.json()


@pytest.fixture
def form_id(form) -> str:
    return form["id"]
