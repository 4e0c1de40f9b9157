import os

# Settings are read when the app module is imported.
os.environ.setdefault("SUPABASE_URL", "http://localhost:54321")
os.environ.setdefault("SUPABASE_ANON_KEY", "test-anon-key")
os.environ.setdefault("ENVIRONMENT", "test")

import pytest
from fastapi.testclient import TestClient

from app.core.supabase import get_auth_client, get_supabase_client
from app.main import app
from tests.fakes import FakeSupabase


@pytest.fixture
def fake_db() -> FakeSupabase:
    return FakeSupabase()


@pytest.fixture
def client(fake_db: FakeSupabase):
    app.dependency_overrides[get_supabase_client] = lambda: fake_db
    app.dependency_overrides[get_auth_client] = lambda: fake_db
    with TestClient(app) as test_client:
        yield test_client
    app.dependency_overrides.clear()


@pytest.fixture
def products(fake_db: FakeSupabase) -> list[dict]:
    return fake_db.store.seed(
        "products",
        [
            {"name": "Margherita Pizza", "description": "Tomato and basil", "price": 11.5, "category": "pizza", "stock": 20},
            {"name": "Pepperoni Pizza", "description": "Spicy salami", "price": 13.0, "category": "pizza", "stock": 5},
            {"name": "Caesar Salad", "description": "Romaine, parmesan", "price": 8.25, "category": "salad", "stock": 12},
            {"name": "Garlic Bread", "description": None, "price": 4.0, "category": "sides", "stock": 0},
        ],
    )
