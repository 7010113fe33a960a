import os

# Must be set before sticktoss.config.settings is first imported
os.environ.setdefault("DATABASE_URL", "sqlite://")
os.environ.setdefault("REDIS_URL", "redis://localhost:6379/15")

import pytest
from fastapi.testclient import TestClient

from sticktoss.engine.randomness import RandomSource
from sticktoss.main import app
from sticktoss.models.entities import Participant
from sticktoss.storage.cache import GameCache, get_cache
from sticktoss.storage.database import Base, SessionLocal, engine, get_db


class FakeRedis:
    """Dict-backed stand-in for the few redis calls GameCache makes."""

    def __init__(self):
        self.store = {}
        self.ttls = {}

    def get(self, key):
        return self.store.get(key)

    def setex(self, key, ttl, value):
        self.store[key] = value
        self.ttls[key] = ttl

    def delete(self, key):
        self.store.pop(key, None)

    def ping(self):
        return True


@pytest.fixture
def rng():
    """Seeded randomness so runs are reproducible."""
    return RandomSource(seed=1234)


@pytest.fixture
def five_players():
    """Roster A..E with weights 5..1."""
    return [
        Participant(id="A", skill_weight=5),
        Participant(id="B", skill_weight=4),
        Participant(id="C", skill_weight=3),
        Participant(id="D", skill_weight=2),
        Participant(id="E", skill_weight=1),
    ]


@pytest.fixture
def hockey_roster():
    """Twelve players with a realistic mix of weights."""
    weights = [5, 5, 4, 4, 4, 3, 3, 3, 2, 2, 1, 1]
    return [Participant(id=i + 1, skill_weight=w, name=f"player-{i + 1}") for i, w in enumerate(weights)]


@pytest.fixture
def fake_redis():
    return FakeRedis()


@pytest.fixture
def client(fake_redis):
    """TestClient over a fresh in-memory database and fake cache."""
    Base.metadata.create_all(bind=engine)

    def override_db():
        db = SessionLocal()
        try:
            yield db
        finally:
            db.close()

    cache = GameCache(client=fake_redis)
    app.dependency_overrides[get_db] = override_db
    app.dependency_overrides[get_cache] = lambda: cache
    try:
        yield TestClient(app)
    finally:
        app.dependency_overrides.clear()
        Base.metadata.drop_all(bind=engine)
