import os

os.environ["DATABASE_URL"] = "sqlite://"
os.environ["ENABLE_SCHEDULER"] = "false"

from datetime import datetime, timedelta
from types import SimpleNamespace

import pytest
from sqlalchemy import create_engine
from sqlalchemy.orm import sessionmaker
from sqlalchemy.pool import StaticPool

from campcheck import crud
from campcheck.db.database import Base, get_db
from campcheck.models import Event, Activity, Participant, AttendanceLogEntry  # noqa: F401
from campcheck.schemas.activity import ActivityCreate, ActivitySnapshot
from campcheck.schemas.attendance import AttendanceLogSnapshot
from campcheck.schemas.event import EventCreate
from campcheck.schemas.participant import ParticipantCreate, ParticipantSnapshot

T0 = datetime(2026, 7, 1, 9, 0, 0)


def at(minutes):
    return T0 + timedelta(minutes=minutes)


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
def session_factory(engine):
    return sessionmaker(autocommit=False, autoflush=False, bind=engine)


@pytest.fixture
def db(session_factory):
    session = session_factory()
    yield session
    session.close()


def make_event(db, name, start=T0, active=True):
    return crud.event.create(db, obj_in=EventCreate(
        name=name,
        start_date=start,
        end_date=start + timedelta(days=3),
        active=active,
    ))


def make_activity(db, event, name, location=None):
    return crud.activity.create_for_event(
        db, event_id=event.id,
        obj_in=ActivityCreate(name=name, description=f"{name} class", location=location),
    )


def make_participant(db, event, name, church="", category="student", qr_code=None):
    return crud.participant.create_for_event(
        db, event_id=event.id,
        obj_in=ParticipantCreate(
            name=name,
            church=church,
            category=category,
            qr_code=qr_code or f"QR-{name.replace(' ', '-').upper()}",
        ),
    )


@pytest.fixture
def camp(db):
    """One active event with three classes and four participants, nobody checked in"""
    event = make_event(db, "Summer Camp 2026")
    archery = make_activity(db, event, "Archery", location="Field B")
    canoeing = make_activity(db, event, "Canoeing", location="Lake")
    crafts = make_activity(db, event, "Crafts", location="Hall")
    grace = make_participant(db, event, "Grace Lee", church="Oakview", category="student")
    sam = make_participant(db, event, "Sam Cho", church="Grace Chapel", category="leader")
    ana = make_participant(db, event, "ana Diaz", church="Oakview", category="student")
    ben = make_participant(db, event, "Ben Ortiz", church="Riverside", category="student")
    return SimpleNamespace(
        event=event,
        archery=archery, canoeing=canoeing, crafts=crafts,
        grace=grace, sam=sam, ana=ana, ben=ben,
    )


@pytest.fixture
def client(session_factory, monkeypatch):
    from fastapi.testclient import TestClient
    from campcheck.api.v1.endpoints import live
    from campcheck.main import app
    from campcheck.services.snapshot_service import SnapshotService

    def override_get_db():
        session = session_factory()
        try:
            yield session
        finally:
            session.close()

    monkeypatch.setattr(live, "snapshot_service", SnapshotService(session_factory=session_factory))
    app.dependency_overrides[get_db] = override_get_db
    with TestClient(app) as test_client:
        yield test_client
    app.dependency_overrides.clear()


# Snapshot builders for the pure aggregation tests

def snap_participant(id, name, church="", category="student", location=None, event_id=1):
    return ParticipantSnapshot(
        id=id,
        event_id=event_id,
        name=name,
        church=church,
        category=category,
        qr_code=f"QR{id}",
        current_activity_id=location,
    )


def snap_activity(id, name, event_id=1):
    return ActivitySnapshot(id=id, event_id=event_id, name=name)


def snap_entry(id, participant_id, activity_id, minutes=0, event_id=1):
    return AttendanceLogSnapshot(
        id=id,
        participant_id=participant_id,
        activity_id=activity_id,
        event_id=event_id,
        timestamp=at(minutes),
        sequence=id,
    )
