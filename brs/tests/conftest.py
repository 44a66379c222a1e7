from __future__ import annotations

import pytest
from fastapi.testclient import TestClient

from app.config import Settings
from app.main import create_app
from app.models.schemas import Book, Review
from app.storage.stable_map import StableMap


@pytest.fixture
def db_path(tmp_path):
    return tmp_path / "data" / "brs.sqlite"


@pytest.fixture
def settings(db_path) -> Settings:
    return Settings(storage_path=str(db_path))


@pytest.fixture
def client(settings):
    app = create_app(settings)
    with TestClient(app) as test_client:
        yield test_client


@pytest.fixture
def book_store(db_path):
    store = StableMap(db_path, "books", Book)
    yield store
    store.close()


@pytest.fixture
def review_store(db_path):
    store = StableMap(db_path, "reviews", Review)
    yield store
    store.close()
