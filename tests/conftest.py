import os

# Settings are read at import time, keep tests off the on-disk database
os.environ.setdefault("DATABASE_URL", "sqlite://")
os.environ.setdefault("JWT_SECRET", "test-secret")

import pytest
from fastapi.testclient import TestClient
from sqlalchemy import create_engine
from sqlalchemy.orm import sessionmaker
from sqlalchemy.pool import StaticPool

from habitpulse.auth import get_current_user
from habitpulse.database import Base, get_db, enable_sqlite_foreign_keys
from habitpulse.models import User
from habitpulse.services.goal_service import GoalService


@pytest.fixture
def engine():
    eng = create_engine(
        "sqlite://",
        connect_args={"check_same_thread": False},
        poolclass=StaticPool,
    )
    enable_sqlite_foreign_keys(eng)
    Base.metadata.create_all(bind=eng)
    yield eng
    Base.metadata.drop_all(bind=eng)
    eng.dispose()


@pytest.fixture
def session_factory(engine):
    return sessionmaker(autocommit=False, autoflush=False, bind=engine)


@pytest.fixture
def db(session_factory):
    session = session_factory()
    try:
        yield session
    finally:
        session.close()


@pytest.fixture
def user(db):
    u = User(username="alice")
    db.add(u)
    db.commit()
    db.refresh(u)
    return u


@pytest.fixture
def other_user(db):
    u = User(username="bob")
    db.add(u)
    db.commit()
    db.refresh(u)
    return u


@pytest.fixture
def make_goal(db, user):
    """Create a goal through the service, defaulting to the main user."""
    def _mk(name="Read", owner=None, **fields):
        data = {"name": name}
        data.update(fields)
        return GoalService.create(db, (owner or user).id, data)
    return _mk


@pytest.fixture
def client(session_factory, user):
    from habitpulse.main import app

    def _get_db():
        session = session_factory()
        try:
            yield session
        finally:
            session.close()

    user_id = user.id

    async def _current_user():
        return user_id

    app.dependency_overrides[get_db] = _get_db
    app.dependency_overrides[get_current_user] = _current_user
    # Not used as a context manager: skips lifespan and the on-disk init_db()
    yield TestClient(app)
    app.dependency_overrides.clear()
