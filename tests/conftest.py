"""
Shared fixtures: in-memory SQLite database, API client and data factories
"""
import os
import tempfile

os.environ["DATABASE_URL"] = "sqlite://"
os.environ["UPLOAD_DIR"] = tempfile.mkdtemp(prefix="pesca-uploads-")
os.environ["ENVIRONMENT"] = "test"
os.environ["JWT_SECRET_KEY"] = "test-secret"
os.environ["AUTO_CREATE_TABLES"] = "False"

from datetime import date
from decimal import Decimal

import pytest
from fastapi.testclient import TestClient
from sqlalchemy import create_engine
from sqlalchemy.orm import sessionmaker
from sqlalchemy.pool import StaticPool

from main import app
from db import Base
from api.deps.db import get_db
from core.auth import get_password_hash, create_user_token
from core.roles import UserRole
from models.user import User
from models.tournament import Tournament, StructureType, TournamentStatus
from models.pond import Pond
from models.zone import Zone
from models.area import Area

PASSWORD = "secret123"

test_engine = create_engine(
    "sqlite://",
    connect_args={"check_same_thread": False},
    poolclass=StaticPool,
)
TestingSessionLocal = sessionmaker(autocommit=False, autoflush=False, bind=test_engine)


@pytest.fixture(autouse=True)
def tables():
    Base.metadata.create_all(bind=test_engine)
    yield
    Base.metadata.drop_all(bind=test_engine)


@pytest.fixture
def db():
    session = TestingSessionLocal()
    try:
        yield session
    finally:
        session.close()


@pytest.fixture
def client():
    def override_get_db():
        session = TestingSessionLocal()
        try:
            yield session
        finally:
            session.close()

    app.dependency_overrides[get_db] = override_get_db
    with TestClient(app) as test_client:
        yield test_client
    app.dependency_overrides.clear()


_password_hash = None


def _hashed_password() -> str:
    # argon2 is slow on purpose; hash the shared test password once
    global _password_hash
    if _password_hash is None:
        _password_hash = get_password_hash(PASSWORD)
    return _password_hash


@pytest.fixture
def make_user(db):
    counter = {"n": 0}

    def factory(role: UserRole = UserRole.USER, full_name: str = None, email: str = None) -> User:
        counter["n"] += 1
        n = counter["n"]
        user = User(
            full_name=full_name or f"{role.value.capitalize()} {n}",
            mobile_no=f"0812000{n:04d}",
            email=email or f"{role.value}{n}@mail.com",
            password_hash=_hashed_password(),
            role=role,
        )
        db.add(user)
        db.commit()
        db.refresh(user)
        return user

    return factory


@pytest.fixture
def organizer(make_user):
    return make_user(UserRole.ORGANIZER, full_name="Olivia Organizer")


@pytest.fixture
def participant(make_user):
    return make_user(UserRole.USER, full_name="Andi Angler")


@pytest.fixture
def auth_headers():
    def build(user: User) -> dict:
        return {"Authorization": f"Bearer {create_user_token(user)}"}
    return build


@pytest.fixture
def make_tournament(db, organizer):
    counter = {"n": 0}

    def factory(
        structure_type: StructureType = StructureType.POND_ZONE_AREA,
        status: TournamentStatus = TournamentStatus.ACTIVE,
        owner: User = None,
    ) -> Tournament:
        counter["n"] += 1
        n = counter["n"]
        tournament = Tournament(
            organizer_id=(owner or organizer).id,
            name=f"Lake Cup {n}",
            location="Danau Toba",
            structure_type=structure_type,
            status=status,
            start_date=date(2026, 11, 1),
            end_date=date(2026, 11, 2),
            registration_link=f"reg-link-{n}",
            leaderboard_link=f"lb-link-{n}",
        )
        db.add(tournament)
        db.commit()
        db.refresh(tournament)
        return tournament

    return factory


@pytest.fixture
def make_layout(db):
    """One pond with one zone and areas priced as given; returns the created rows"""

    def factory(tournament: Tournament, area_prices=(50, 30), pond_price=100, zone_price=75, zone_number=1):
        pond = Pond(tournament_id=tournament.id, pond_name="North Pond", price=Decimal(str(pond_price)))
        db.add(pond)
        db.flush()
        zone = Zone(pond_id=pond.id, zone_name="Zone A", zone_number=zone_number, price=Decimal(str(zone_price)))
        db.add(zone)
        db.flush()
        areas = []
        for number, price in enumerate(area_prices, start=1):
            area = Area(zone_id=zone.id, area_number=number, price=Decimal(str(price)))
            db.add(area)
            areas.append(area)
        db.commit()
        for row in [pond, zone, *areas]:
            db.refresh(row)
        return {"pond": pond, "zone": zone, "areas": areas}

    return factory
