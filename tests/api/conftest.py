"""
API test fixtures: the FastAPI app wired to the per-test database
"""
import pytest
from fastapi.testclient import TestClient

from hostel_lifecycle.api import deps
from hostel_lifecycle.config.database import get_db_session
from hostel_lifecycle.main import create_app


@pytest.fixture
def app(session_factory, notifier, cache):
    application = create_app()

    def override_db_session():
        session = session_factory()
        try:
            yield session
        finally:
            session.close()

    application.dependency_overrides[deps.get_session_factory] = lambda: session_factory
    application.dependency_overrides[deps.get_notifier] = lambda: notifier
    application.dependency_overrides[deps.get_summary_cache] = lambda: cache
    application.dependency_overrides[get_db_session] = override_db_session
    yield application
    application.dependency_overrides.clear()


@pytest.fixture
def client(app):
    return TestClient(app, raise_server_exceptions=False)


def caller_headers(role="hostel_admin", hostel=None, user=None):
    headers = {"X-User-Role": role}
    if hostel is not None:
        headers["X-Hostel-Id"] = str(hostel.id)
    if user is not None:
        headers["X-User-Id"] = str(user.id)
    return headers
