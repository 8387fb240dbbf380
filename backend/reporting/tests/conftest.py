"""Pytest configuration for the reporting package

WHAT: Shared fixtures for semantic-layer unit tests and HTTP endpoint tests
WHY: Consistent datasets, identities and a Cube.js stand-in (no network)
REFERENCES:
    - reporting/main.py: FastAPI application
    - reporting/deps.py: Dependency injection
    - reporting/semantic/registry.py: Dataset registry
"""

import os
import sys
from pathlib import Path
from typing import Any, Dict, List

import pytest
from fastapi.testclient import TestClient

# Ensure backend is in path
BACKEND_ROOT = Path(__file__).resolve().parents[2]
if str(BACKEND_ROOT) not in sys.path:
    sys.path.insert(0, str(BACKEND_ROOT))

# Set test environment
os.environ.setdefault("JWT_SECRET", "test-jwt-secret")
os.environ.setdefault("CUBE_API_URL", "http://cube.test")

from reporting.semantic.identity import CallerIdentity  # noqa: E402
from reporting.semantic.model import (  # noqa: E402
    DatasetDefinition,
    DimensionDefinition,
    FilterDefinition,
    FilterType,
    MeasureDefinition,
    SecurityPolicy,
)
from reporting.semantic.registry import build_default_registry  # noqa: E402

TEST_JWT_SECRET = os.environ["JWT_SECRET"]


# ============================================================================
# Dataset Fixtures
# ============================================================================

@pytest.fixture(scope="session")
def registry():
    """Default registry (events, supplier_reports, item_reports)."""
    return build_default_registry()


@pytest.fixture
def events_dataset(registry):
    return registry.get("events")


@pytest.fixture
def supplier_dataset(registry):
    return registry.get("supplier_reports")


@pytest.fixture
def item_dataset(registry):
    return registry.get("item_reports")


def make_dataset(
    dataset_id: str = "events_test",
    security: Any = "default",
) -> DatasetDefinition:
    """Small hand-built dataset with predictable members."""
    if security == "default":
        security = SecurityPolicy(
            tenant_filter_member="EventsView.tenant",
            max_limit=1000,
            max_date_range_days=30,
        )
    return DatasetDefinition(
        id=dataset_id,
        label="Test Events",
        measures={
            "event_count": MeasureDefinition("EventsView.count", label="Event Count"),
            "secret_total": MeasureDefinition("EventsView.secretTotal", label="Secret", hidden=True),
        },
        dimensions={
            "event_type": DimensionDefinition("EventsView.eventType", label="Event Type"),
            "created_at": DimensionDefinition("EventsView.createdAt", label="Created At", type="time"),
        },
        filters={
            "status": FilterDefinition(
                "EventsView.status",
                label="Status",
                type=FilterType.STRING,
                allowed_operators=("equals", "notEquals", "in"),
            ),
            "company": FilterDefinition(
                "EventsView.companyCode",
                label="Company",
                type=FilterType.STRING,
                allowed_operators=(),
            ),
            "rounds": FilterDefinition(
                "EventsView.numberOfRounds",
                label="Rounds",
                type=FilterType.NUMBER,
                allowed_operators=("gt", "lt", "equals"),
            ),
            "created_at": FilterDefinition(
                "EventsView.createdAt",
                label="Created At",
                type=FilterType.TIME,
                allowed_operators=("inDateRange", "afterDate", "beforeDate"),
            ),
        },
        security=security,
    )


@pytest.fixture
def test_dataset():
    """Hand-built dataset: tenant member EventsView.tenant, max 30 days."""
    return make_dataset()


@pytest.fixture
def dataset_factory():
    """make_dataset(dataset_id=..., security=...) for tests needing variants."""
    return make_dataset


# ============================================================================
# Identity Fixtures
# ============================================================================

@pytest.fixture
def identity():
    return CallerIdentity({"tenant_id": "T1", "sub": "user-1"})


@pytest.fixture
def auth_headers():
    """Bearer token for tenant T1."""
    from reporting.security import create_access_token

    token = create_access_token({"tenant_id": "T1", "sub": "user-1"}, TEST_JWT_SECRET)
    return {"Authorization": f"Bearer {token}"}


# ============================================================================
# Cube.js Stand-in
# ============================================================================

class FakeCubeClient:
    """Records queries instead of calling Cube.js."""

    def __init__(self, rows: Any = None, meta: Any = None, error: Exception = None):
        self.rows = rows if rows is not None else []
        self.meta_body = meta if meta is not None else {"cubes": []}
        self.error = error
        self.queries: List[Dict[str, Any]] = []

    async def load(self, query):
        self.queries.append(query.to_cube_query())
        if self.error:
            raise self.error
        return self.rows

    async def meta(self):
        if self.error:
            raise self.error
        return self.meta_body


@pytest.fixture
def fake_cube():
    return FakeCubeClient(rows=[
        {"EventsView.eventType": "RFQ", "EventsView.count": "12"},
        {"EventsView.eventType": "RFI", "EventsView.count": "3"},
    ])


# ============================================================================
# Application & Client Fixtures
# ============================================================================

@pytest.fixture
def app(fake_cube):
    """FastAPI test application with Cube.js replaced by FakeCubeClient."""
    from reporting.deps import get_cube_client, get_settings
    from reporting.main import create_app

    get_settings.cache_clear()
    test_app = create_app()
    test_app.dependency_overrides[get_cube_client] = lambda: fake_cube

    yield test_app

    test_app.dependency_overrides.clear()
    get_settings.cache_clear()


@pytest.fixture
def client(app) -> TestClient:
    """Create TestClient for HTTP testing."""
    return TestClient(app)
