"""Shared test fixtures."""

import pytest
from fastapi.testclient import TestClient
from sqlalchemy import create_engine
from sqlalchemy.orm import Session, sessionmaker
from sqlalchemy.pool import StaticPool

from src.core.brewing.recipes import RecipeRegistry
from src.core.brewing.tuning import BrewTuning
from src.core.event_bus import EventBus
from src.core.store import EntityStore
from src.db.database import get_db
from src.db.models import Base
from src.main import app
from src.services.brewing_service import BrewingService

TEST_ENGINE = create_engine(
    "sqlite:///:memory:",
    connect_args={"check_same_thread": False},
    poolclass=StaticPool,
)
Base.metadata.create_all(TEST_ENGINE)
TestSession = sessionmaker(bind=TEST_ENGINE, autocommit=False, autoflush=False)


def _override_get_db():
    db = TestSession()
    try:
        yield db
    finally:
        db.close()


app.dependency_overrides[get_db] = _override_get_db


@pytest.fixture()
def client() -> TestClient:
    """FastAPI TestClient wired to an in-memory SQLite database."""
    return TestClient(app)


@pytest.fixture()
def db_session() -> Session:
    """Raw database session for direct DB assertions."""
    session = TestSession()
    try:
        yield session
    finally:
        session.close()


@pytest.fixture()
def recipes() -> RecipeRegistry:
    """src/data/recipes.json 기본 레시피북"""
    registry = RecipeRegistry()
    registry.load_from_json()
    return registry


@pytest.fixture()
def tuning() -> BrewTuning:
    return BrewTuning()


@pytest.fixture()
def brewing(recipes, tuning):
    """EntityStore + EventBus + BrewingService"""
    store = EntityStore()
    bus = EventBus()
    service = BrewingService(store, recipes, bus, tuning)
    return service, store, bus
