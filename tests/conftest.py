import os

os.environ.setdefault("DATABASE_URL", "sqlite://")
os.environ.setdefault("TEAMS_WEBHOOK_URL", "")

import pytest
from fastapi import Depends
from fastapi.testclient import TestClient
from sqlalchemy import create_engine
from sqlalchemy.orm import sessionmaker
from sqlalchemy.pool import StaticPool

import teams_timesheet.models  # noqa: F401
from teams_timesheet.config import Settings
from teams_timesheet.database import Base, get_db
from teams_timesheet.repositories.accessors import RepositoryAccessors
from teams_timesheet.routers.dependencies import get_current_user_id, get_graph_users_service
from tests.factories import DIRECT_REPORTS, FakeDirectory, make_project, make_users


@pytest.fixture
def settings():
    return Settings(
        database_url="sqlite://",
        timesheet_freeze_day_of_month=12,
        weekly_efforts_limit=44,
        teams_webhook_url="",
    )


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
def db(engine):
    session = sessionmaker(bind=engine, autoflush=False)()
    yield session
    session.close()


@pytest.fixture
def accessors(db):
    return RepositoryAccessors(db)


@pytest.fixture
def project(db):
    """Users plus one project (Jan-Mar 2021) with two live tasks and one removed task."""
    db.add_all(make_users())
    project = make_project()
    db.add(project)
    db.commit()
    return project


@pytest.fixture
def client(db):
    from teams_timesheet.main import app

    app.dependency_overrides[get_db] = lambda: db
    yield TestClient(app)
    app.dependency_overrides.clear()


@pytest.fixture
def team_directory(client):
    """Answers Graph lookups with the caller's entry in DIRECT_REPORTS."""

    def directory(manager_id: str = Depends(get_current_user_id)):
        return FakeDirectory(reportees=DIRECT_REPORTS.get(manager_id, []))

    client.app.dependency_overrides[get_graph_users_service] = directory
    return directory
