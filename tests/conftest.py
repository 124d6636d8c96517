"""Pytest configuration and shared fixtures."""

import pytest
from fastapi.testclient import TestClient

from app.main import app
from app.core.dependencies import get_current_user_id, get_admin_client
from app.database.supabase_client import get_supabase
from app.modules.auth.service import clear_auth_cache
from tests.fakes import FakeSupabase

OWNER_ID = "11111111-1111-1111-1111-111111111111"
CONTRACTOR_A_ID = "22222222-2222-2222-2222-222222222222"
CONTRACTOR_B_ID = "33333333-3333-3333-3333-333333333333"
CONTRACTOR_C_ID = "44444444-4444-4444-4444-444444444444"
ADMIN_ID = "99999999-9999-9999-9999-999999999999"


def make_user(user_id: str, admin: bool = False) -> dict:
    return {
        "id": user_id,
        "email": f"{user_id[:4]}@example.com",
        "user_metadata": {},
        "app_metadata": {"type": "admin"} if admin else {},
    }


@pytest.fixture(autouse=True)
def clear_dependency_overrides():
    """Ensure FastAPI dependency overrides and the auth cache are reset between tests."""
    app.dependency_overrides = {}
    clear_auth_cache()
    yield
    app.dependency_overrides = {}
    clear_auth_cache()


@pytest.fixture
def fake_db() -> FakeSupabase:
    """Fake Supabase with one homeowner, three contractors and an admin profile."""
    db = FakeSupabase()
    db.seed("profiles", id=OWNER_ID, user_type="homeowner", full_name="Hannah Owner")
    db.seed("profiles", id=CONTRACTOR_A_ID, user_type="contractor", full_name="Acme Builders",
            avatar_url="https://img.test/acme.png")
    db.seed("profiles", id=CONTRACTOR_B_ID, user_type="contractor", full_name="Best Plumbing")
    db.seed("profiles", id=CONTRACTOR_C_ID, user_type="labor-contractor", full_name=None)
    db.seed("profiles", id=ADMIN_ID, user_type="homeowner", full_name="Site Admin")
    return db


@pytest.fixture
def client(fake_db) -> TestClient:
    app.dependency_overrides[get_supabase] = lambda: fake_db
    app.dependency_overrides[get_admin_client] = lambda: None
    return TestClient(app)


@pytest.fixture
def login_as():
    """Authenticate subsequent requests as the given user id."""
    def _login(user_id: str, admin: bool = False) -> dict:
        user = make_user(user_id, admin=admin)
        app.dependency_overrides[get_current_user_id] = lambda: user
        return user
    return _login


@pytest.fixture
def project(fake_db) -> dict:
    """Published project owned by OWNER_ID that accepts bids."""
    return fake_db.seed(
        "projects",
        owner_id=OWNER_ID,
        title="Kitchen remodel",
        description="Full kitchen remodel",
        status="published",
        bid_status="accepting_bids",
        budget_min=10000,
        budget_max=25000,
        bid_count=0,
    )
