import os
from types import SimpleNamespace

os.environ.setdefault("DATABASE_URL", "sqlite://")
os.environ.setdefault("JWT_SECRET_KEY", "test-secret")

import pytest  # noqa: E402
from fastapi.testclient import TestClient  # noqa: E402
from sqlalchemy import create_engine  # noqa: E402
from sqlalchemy.orm import sessionmaker  # noqa: E402
from sqlalchemy.pool import StaticPool  # noqa: E402

from app.db.base import Base  # noqa: E402
from app.db.session import get_db  # noqa: E402
from app.main import app  # noqa: E402
from app.models import Team  # noqa: E402

from factories import make_user  # noqa: E402


@pytest.fixture
def engine():
    engine = create_engine(
        "sqlite://",
        connect_args={"check_same_thread": False},
        poolclass=StaticPool,
    )
    Base.metadata.create_all(bind=engine)
    try:
        yield engine
    finally:
        engine.dispose()


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
def client(session_factory):
    def override_get_db():
        session = session_factory()
        try:
            yield session
        finally:
            session.close()

    app.dependency_overrides[get_db] = override_get_db
    try:
        yield TestClient(app)
    finally:
        app.dependency_overrides.clear()


@pytest.fixture
def org(db):
    """
    Two teams:
      team 7 "Alpha": leader lead7, users alice and bob
      team 8 "Beta":  leader lead8, user carol
    plus one admin without a team.
    """
    alpha = Team(id=7, name="Alpha")
    beta = Team(id=8, name="Beta")
    db.add_all([alpha, beta])
    db.flush()

    admin = make_user(db, 1, "admin", "admin")
    lead7 = make_user(db, 2, "lead7", "team_leader", team_id=7)
    lead8 = make_user(db, 3, "lead8", "team_leader", team_id=8)
    alice = make_user(db, 4, "alice", "user", team_id=7)
    bob = make_user(db, 5, "bob", "user", team_id=7)
    carol = make_user(db, 6, "carol", "user", team_id=8)
    db.flush()

    alpha.leader_id = lead7.id
    beta.leader_id = lead8.id
    db.commit()

    return SimpleNamespace(
        alpha=alpha,
        beta=beta,
        admin=admin,
        lead7=lead7,
        lead8=lead8,
        alice=alice,
        bob=bob,
        carol=carol,
    )
