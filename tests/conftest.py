import os

os.environ.setdefault("DATABASE_URL", "sqlite://")

from datetime import datetime, timezone  # noqa: E402
from decimal import Decimal  # noqa: E402

import pytest  # noqa: E402
from fastapi.testclient import TestClient  # noqa: E402
from sqlalchemy import create_engine  # noqa: E402
from sqlalchemy.orm import sessionmaker  # noqa: E402
from sqlalchemy.pool import StaticPool  # noqa: E402

from timelogs.core.database import Base, get_db, init_db  # noqa: E402
from timelogs.core.security import create_access_token, get_password_hash  # noqa: E402
from timelogs.models import Order, Organisation, Team, TeamMember, TimeLog, User, UserRole  # noqa: E402
from main import app  # noqa: E402

# Test database
SQLALCHEMY_DATABASE_URL = "sqlite://"

engine = create_engine(
    SQLALCHEMY_DATABASE_URL,
    connect_args={"check_same_thread": False},
    poolclass=StaticPool,
)
TestingSessionLocal = sessionmaker(autocommit=False, autoflush=False, bind=engine)

PASSWORD = "testpassword"
PASSWORD_HASH = get_password_hash(PASSWORD)


def override_get_db():
    try:
        db = TestingSessionLocal()
        yield db
    finally:
        db.close()


app.dependency_overrides[get_db] = override_get_db


def at(hour: int, minute: int = 0) -> datetime:
    return datetime(2025, 8, 25, hour, minute, tzinfo=timezone.utc)


def auth_headers(user: User) -> dict:
    token = create_access_token(subject=str(user.id))
    return {"Authorization": f"Bearer {token}"}


@pytest.fixture
def client():
    return TestClient(app)


@pytest.fixture(scope="function")
def db():
    init_db(engine)
    db = TestingSessionLocal()
    try:
        yield db
    finally:
        db.close()
        Base.metadata.drop_all(bind=engine)


def _add(db, obj):
    db.add(obj)
    db.commit()
    db.refresh(obj)
    return obj


@pytest.fixture
def organisation(db):
    return _add(db, Organisation(name="Nordic Plumbing"))


@pytest.fixture
def other_organisation(db):
    return _add(db, Organisation(name="Rival Roofing"))


def _user(db, username, role, organisation, **kwargs):
    return _add(
        db,
        User(
            email=f"{username}@example.com",
            username=username,
            hashed_password=PASSWORD_HASH,
            full_name=username.title(),
            role=role,
            organisation_id=organisation.id if organisation else None,
            is_active=True,
            **kwargs,
        ),
    )


@pytest.fixture
def worker(db, organisation):
    return _user(db, "worker", UserRole.WORKER, organisation, hourly_rate=Decimal("650.00"))


@pytest.fixture
def coworker(db, organisation):
    return _user(db, "coworker", UserRole.WORKER, organisation, hourly_rate=Decimal("500.00"))


@pytest.fixture
def admin(db, organisation):
    return _user(db, "admin", UserRole.ADMIN, organisation)


@pytest.fixture
def leader(db, organisation):
    return _user(db, "leader", UserRole.SALES, organisation)


@pytest.fixture
def outside_admin(db, other_organisation):
    return _user(db, "outsider", UserRole.ADMIN, other_organisation)


@pytest.fixture
def team(db, organisation, leader, worker, coworker):
    """Leader's team: worker is an active member, coworker a former one."""
    team = _add(db, Team(name="North crew", organisation_id=organisation.id, team_leader_id=leader.id))
    _add(db, TeamMember(team_id=team.id, user_id=worker.id, is_active=True))
    _add(db, TeamMember(team_id=team.id, user_id=coworker.id, is_active=False))
    return team


@pytest.fixture
def order(db, organisation):
    return _add(db, Order(title="Boiler replacement", customer_name="A. Customer", organisation_id=organisation.id))


@pytest.fixture
def other_order(db, organisation):
    return _add(db, Order(title="Leak inspection", organisation_id=organisation.id))


@pytest.fixture
def make_time_log(db):
    def factory(user, order, start_time=None, end_time=None, **kwargs):
        kwargs.setdefault("hourly_rate", Decimal("650.00"))
        return _add(
            db,
            TimeLog(
                user_id=user.id,
                order_id=order.id,
                start_time=start_time or at(9),
                end_time=end_time,
                **kwargs,
            ),
        )
    return factory
