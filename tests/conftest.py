import itertools
import os

# Settings are read at import time; point them at throwaway values first.
os.environ.setdefault("DATABASE_URL", "sqlite:///./team_directory_test.db")
os.environ.setdefault("OPENID_CONFIG_URL", "https://login.example.test/.well-known/openid-configuration")
os.environ.setdefault("VALID_AUDIENCE", "api://team-directory-test")
os.environ.setdefault("VALID_ISSUER", "https://login.example.test/tenant/")

import pytest
from sqlalchemy import create_engine
from sqlalchemy.orm import sessionmaker
from sqlalchemy.pool import StaticPool
from starlette.testclient import TestClient

from app.auth.auth import token_required
from app.main import app
from config.database import get_db
from models import Base, EmployeeRole, Team, TeamMember, TeamType

TEST_USER = {"user_id": "test-user", "email": "admin@example.com", "token": {}}


@pytest.fixture
def db_session():
    engine = create_engine(
        "sqlite://",
        connect_args={"check_same_thread": False},
        poolclass=StaticPool,
    )
    Base.metadata.create_all(engine)
    session = sessionmaker(bind=engine, autocommit=False, autoflush=False)()
    try:
        yield session
    finally:
        session.close()
        Base.metadata.drop_all(engine)
        engine.dispose()


def _override_db(db_session):
    def override_get_db():
        yield db_session

    return override_get_db


@pytest.fixture
def client(db_session):
    app.dependency_overrides[get_db] = _override_db(db_session)
    app.dependency_overrides[token_required] = lambda: TEST_USER
    with TestClient(app) as c:
        yield c
    app.dependency_overrides.clear()


@pytest.fixture
def anonymous_client(db_session):
    app.dependency_overrides[get_db] = _override_db(db_session)
    with TestClient(app) as c:
        yield c
    app.dependency_overrides.clear()


@pytest.fixture
def make_team(db_session):
    def _make_team(name="Engineering", team_type=TeamType.INTERNAL, is_active=True, **kwargs):
        team = Team(name=name, team_type=team_type, is_active=is_active, **kwargs)
        db_session.add(team)
        db_session.commit()
        return team

    return _make_team


@pytest.fixture
def make_member(db_session):
    counter = itertools.count(1)

    def _make_member(
        team,
        first_name="Sam",
        last_name="Lee",
        role=EmployeeRole.DEVELOPER,
        reports_to=None,
        **kwargs,
    ):
        email = kwargs.pop("email", None) or f"member{next(counter)}@example.com"
        member = TeamMember(
            team_id=team.id,
            first_name=first_name,
            last_name=last_name,
            email=email,
            role=role,
            reports_to_id=reports_to.id if reports_to is not None else None,
            **kwargs,
        )
        db_session.add(member)
        db_session.commit()
        return member

    return _make_member
