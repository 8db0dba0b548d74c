"""
Shared fixtures.

API tests run against an in-memory SQLite database swapped in through the
`get_db` dependency; core tests use the in-memory relationship store.
"""

import pytest
from fastapi.testclient import TestClient
from sqlalchemy import create_engine
from sqlalchemy.orm import sessionmaker
from sqlalchemy.pool import StaticPool

from app.core.security import create_access_token
from app.db.base_class import Base
from app.db.session import get_db
from app.main import app
from app.models.place import Place
from app.models.user import User
from app.services.friendship_service import FriendshipService
from app.services.privacy import VisibilityResolver
from app.services.relationship_store import InMemoryRelationshipStore


# ============ Core fixtures ============

@pytest.fixture
def store():
    return InMemoryRelationshipStore()


@pytest.fixture
def service(store):
    return FriendshipService(store)


@pytest.fixture
def resolver(store):
    return VisibilityResolver(store)


# ============ Database fixtures ============

@pytest.fixture
def engine():
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
def db_session(engine):
    TestingSession = sessionmaker(autocommit=False, autoflush=False, bind=engine)
    session = TestingSession()
    try:
        yield session
    finally:
        session.close()


@pytest.fixture
def client(engine):
    TestingSession = sessionmaker(autocommit=False, autoflush=False, bind=engine)

    def override_get_db():
        db = TestingSession()
        try:
            yield db
        finally:
            db.close()

    app.dependency_overrides[get_db] = override_get_db
    yield TestClient(app)
    app.dependency_overrides.clear()


@pytest.fixture
def make_user(db_session):
    """Creates a user row and returns (user_id, auth headers)."""

    def _make_user(username):
        user = User(username=username, hashed_password="not-used")
        db_session.add(user)
        db_session.commit()
        db_session.refresh(user)
        token = create_access_token(user.id)
        return user.id, {"Authorization": f"Bearer {token}"}

    return _make_user


@pytest.fixture
def place(db_session):
    place = Place(name="Main Gate", x_coord=400, y_coord=950, description="Campus main gate")
    db_session.add(place)
    db_session.commit()
    db_session.refresh(place)
    return place
