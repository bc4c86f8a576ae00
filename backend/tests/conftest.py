"""
Shared fixtures.

The sample collections deliberately mix identifier shapes (plain strings,
``{"$oid": ...}`` wrappers and nested ``{"_id": ...}`` references) the way
real exports do.
"""
import copy

import pytest
from fastapi.testclient import TestClient
from sqlalchemy import create_engine
from sqlalchemy.orm import sessionmaker
from sqlalchemy.pool import StaticPool

from app.db.session import get_db
from app.explorer.catalog import Catalog
from app.main import app
from app.models import Base, Event, Period, SubPeriod
from app.services.event_service import apply_document_fields

PERIODS = [
    {"_id": "p2", "name": "Monarchical Era", "slug": "monarchical", "order": 2,
     "color": "#FFD700", "startYear": 938, "endYear": 1858},
    {"_id": {"$oid": "p1"}, "name": "Ancient Vietnam", "slug": "ancient", "order": 1,
     "color": "#8B4513", "startYear": -2879, "endYear": -111},
    {"_id": "p3", "name": "Unsorted Era", "order": 2},
]

SUB_PERIODS = [
    {"_id": "sp1", "name": "Hồng Bàng", "periodId": {"$oid": "p1"}, "order": 1, "color": "#A0522D"},
    {"_id": {"$oid": "sp2"}, "name": "Âu Lạc", "periodId": "p1", "order": 2},
    {"_id": "sp3", "name": "Trần Dynasty", "periodId": {"_id": "p2"}, "order": 1},
]

EVENTS = [
    {
        "_id": {"$oid": "e1"},
        "title": "Founding of Văn Lang",
        "date": {"year": -2879},
        "periodId": "p1",
        "subPeriodId": {"$oid": "sp1"},
        "location": {"province": "Phú Thọ"},
    },
    {
        "_id": "e2",
        "title": "Cổ Loa Citadel",
        "date": {"year": -257},
        "periodId": {"$oid": "p1"},
        "subPeriodId": "sp2",
        "location": {"name": "Cổ Loa", "coordinates": {"lat": 21.1153, "lng": 105.8703}},
    },
    {
        "_id": "e3",
        "title": "Battle of Bạch Đằng",
        "titleVietnamese": "Trận Bạch Đằng",
        "description": "Tran Hung Dao defeats the Mongol fleet on the river.",
        "shortDescription": "Mongol fleet destroyed.",
        "date": {"year": 1288, "month": 3, "day": 9},
        "endDate": {"year": 1288, "month": 4},
        "periodId": "p2",
        "subPeriodId": "sp3",
        "location": {"name": "Bạch Đằng River", "province": "Quảng Ninh"},
        "keyFigures": [{"name": "Trần Hưng Đạo", "role": "Supreme Commander"}],
        "tags": ["naval", "Mongol invasions"],
    },
    {
        "_id": "e4",
        "title": "Battle of Bach Dang",
        "date": {"year": 938},
    },
    {
        "_id": "e5",
        "title": "Hung Kings Temple",
        "description": "Tran dynasty scholars record the dao of the Hung kings.",
        "date": {"year": -257},
        "periodId": "p1",
    },
]


@pytest.fixture
def periods():
    return copy.deepcopy(PERIODS)


@pytest.fixture
def sub_periods():
    return copy.deepcopy(SUB_PERIODS)


@pytest.fixture
def events():
    return copy.deepcopy(EVENTS)


@pytest.fixture
def catalog(periods, sub_periods, events):
    return Catalog(periods, sub_periods, events)


# ============================================================
# Database and API
# ============================================================

@pytest.fixture
def db_session():
    engine = create_engine(
        "sqlite://",
        connect_args={"check_same_thread": False},
        poolclass=StaticPool,
    )
    Base.metadata.create_all(bind=engine)
    TestingSession = sessionmaker(bind=engine, autoflush=False, expire_on_commit=False)
    session = TestingSession()
    try:
        yield session
    finally:
        session.close()
        Base.metadata.drop_all(bind=engine)
        engine.dispose()


@pytest.fixture
def seeded_db(db_session):
    db_session.add_all([
        Period(id="p1", name="Ancient Vietnam", slug="ancient", order=1, color="#8B4513",
               start_year=-2879, end_year=-111),
        Period(id="p2", name="Monarchical Era", slug="monarchical", order=2, start_year=938, end_year=1858),
        SubPeriod(id="sp3", name="Trần Dynasty", period_id="p2", order=2),
        SubPeriod(id="sp4", name="Ngô Dynasty", period_id="p2", order=1),
    ])
    rows = [
        ("e1", {"title": "Founding of Van Lang", "date": {"year": -2879}, "periodId": "p1",
                "location": {"province": "Phú Thọ"}}),
        ("e2", {"title": "Co Loa Citadel", "date": {"year": -257}, "periodId": "p1",
                "description": "Spiral citadel of An Duong Vuong.",
                "location": {"name": "Cổ Loa", "coordinates": {"lat": 21.1153, "lng": 105.8703}}}),
        ("e3", {"title": "Battle of Bach Dang", "date": {"year": 1288, "month": 3, "day": 9},
                "periodId": "p2", "subPeriodId": "sp3",
                "description": "Tran Hung Dao destroys the Mongol fleet.",
                "location": {"name": "Bạch Đằng", "coordinates": {"lat": 20.9489, "lng": 106.7617}}}),
        ("e4", {"title": "Relocation to Thang Long", "date": {"year": 1010, "month": 6},
                "periodId": "p2",
                "location": {"name": "Thăng Long", "coordinates": [105.8542, 21.0285]}}),
    ]
    for event_id, document in rows:
        event = Event(id=event_id)
        apply_document_fields(event, document)
        db_session.add(event)
    db_session.commit()
    return db_session


@pytest.fixture
def client(db_session):
    def override_get_db():
        yield db_session

    app.dependency_overrides[get_db] = override_get_db
    try:
        yield TestClient(app, raise_server_exceptions=False)
    finally:
        app.dependency_overrides.clear()


@pytest.fixture
def seeded_client(seeded_db, client):
    return client
