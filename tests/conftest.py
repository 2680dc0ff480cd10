"""
Shared test fixtures.

Sets up an isolated test database so tests never touch
the real database. Tables are created before each test
and dropped after it, so no test data persists.
"""

import pytest
from fastapi.testclient import TestClient

from growth_ledger.api.dependencies import get_action_catalog
from growth_ledger.config import Settings, get_settings
from growth_ledger.main import app
from growth_ledger.models.base import (
    Base,
    create_db_engine,
    create_session_factory,
    get_db,
)
from growth_ledger.services.action_catalog import StaticActionCatalog


# A file database rather than :memory: so that sessions opened
# from several threads see the same data.
TEST_DATABASE_URL = "sqlite:///./test.db"

WEBHOOK_TOKEN = "test-webhook-token"

TEST_ACTION_POINTS = {
    "subscribe_newsletter": 50,
    "follow_twitter": 10,
    "visit_pricing_page": 5,
    "watch_video": 0,
}

engine = create_db_engine(TEST_DATABASE_URL)

TestSessionLocal = create_session_factory(engine)


@pytest.fixture(autouse=True)
def setup_database():
    """
    Create all tables before each test, drop them after.

    autouse=True means every test gets this automatically.
    """
    Base.metadata.create_all(bind=engine)
    yield
    Base.metadata.drop_all(bind=engine)


@pytest.fixture
def db_session():
    """Provide a database session for direct service testing."""
    session = TestSessionLocal()
    try:
        yield session
    finally:
        session.rollback()
        session.close()


@pytest.fixture
def session_factory():
    """Hand out the factory for tests that need several sessions."""
    return TestSessionLocal


@pytest.fixture
def catalog():
    return StaticActionCatalog(TEST_ACTION_POINTS)


@pytest.fixture
def settings():
    test_settings = Settings()
    test_settings.GLEAM_WEBHOOK_TOKEN = WEBHOOK_TOKEN
    test_settings.STRICT_USER_MATCH = False
    test_settings.LEDGER_SOURCE = "gleam"
    return test_settings


@pytest.fixture
def client(db_session, settings, catalog):
    """
    Provide a test client with the test database.

    We override the dependencies so the FastAPI app uses our
    test session, settings and action catalog. The lifespan
    handler does not run because the client is not used as a
    context manager.
    """
    def override_get_db():
        try:
            yield db_session
        finally:
            pass

    app.dependency_overrides[get_db] = override_get_db
    app.dependency_overrides[get_settings] = lambda: settings
    app.dependency_overrides[get_action_catalog] = lambda: catalog
    yield TestClient(app)
    app.dependency_overrides.clear()
