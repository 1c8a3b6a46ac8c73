"""
Pytest Configuration and Fixtures

Provides test database setup and common fixtures.
"""
import pytest
from datetime import datetime, timedelta, timezone
from decimal import Decimal
from uuid import uuid4
from sqlalchemy import create_engine, event
from sqlalchemy.orm import sessionmaker
from sqlalchemy.pool import StaticPool
from fastapi.testclient import TestClient

# Use SQLite in-memory for testing
SQLALCHEMY_DATABASE_URL = "sqlite:///:memory:"

test_engine = create_engine(
    SQLALCHEMY_DATABASE_URL,
    connect_args={"check_same_thread": False},
    poolclass=StaticPool,
)


# pysqlite defers BEGIN on its own; emit it explicitly so SAVEPOINTs nest
# inside the per-test transaction.
@event.listens_for(test_engine, "connect")
def _sqlite_autocommit_driver(dbapi_connection, connection_record):
    dbapi_connection.isolation_level = None


@event.listens_for(test_engine, "begin")
def _sqlite_begin(conn):
    conn.exec_driver_sql("BEGIN")


TestingSessionLocal = sessionmaker(autocommit=False, autoflush=False, bind=test_engine)

OWNER_ID = uuid4()
ADMIN_ID = uuid4()
EDITOR_ID = uuid4()
SUPPORT_ID = uuid4()

SPORT_FOOTBALL = uuid4()
LEAGUE_LIGUE_1 = uuid4()
LEAGUE_CHAMPIONS = uuid4()


@pytest.fixture(scope="session", autouse=True)
def setup_test_database():
    """Setup test database schema once for all tests."""
    # Import models to register table definitions
    import rightsdesk.models  # noqa
    from rightsdesk.database import Base

    Base.metadata.create_all(bind=test_engine)

    yield

    Base.metadata.drop_all(bind=test_engine)


@pytest.fixture(scope="function")
def db_session(setup_test_database):
    """
    Create a fresh database session for each test.

    The session runs inside SAVEPOINTs of an outer transaction: service
    commits release a savepoint, service rollbacks return to it, and the
    outer transaction is rolled back at teardown.
    """
    connection = test_engine.connect()
    transaction = connection.begin()
    session = TestingSessionLocal(bind=connection, join_transaction_mode="create_savepoint")

    yield session

    session.close()
    transaction.rollback()
    connection.close()


@pytest.fixture(scope="function")
def client(db_session):
    """Create a test client with database override."""
    # Import here to avoid PostgreSQL connection at module load
    from rightsdesk.database import get_db
    from rightsdesk.main import app

    def override_get_db():
        try:
            yield db_session
        finally:
            pass

    # Override the lifespan to skip DB initialization and seeding
    original_lifespan = app.router.lifespan_context

    from contextlib import asynccontextmanager

    @asynccontextmanager
    async def test_lifespan(app):
        yield

    app.router.lifespan_context = test_lifespan
    app.dependency_overrides[get_db] = override_get_db

    with TestClient(app) as test_client:
        yield test_client

    app.dependency_overrides.clear()
    app.router.lifespan_context = original_lifespan


# ============== Identity headers ==============

def _headers(user_id, role):
    return {"X-Admin-User-Id": str(user_id), "X-Admin-Role": role}


@pytest.fixture
def owner_headers():
    return _headers(OWNER_ID, "owner")


@pytest.fixture
def admin_headers():
    return _headers(ADMIN_ID, "admin")


@pytest.fixture
def editor_headers():
    return _headers(EDITOR_ID, "editor")


@pytest.fixture
def support_headers():
    return _headers(SUPPORT_ID, "support")


# ============== Reference data ==============

@pytest.fixture
def territories(db_session):
    """Seed the default territory catalog."""
    from rightsdesk.services.territory_service import TerritoryService

    TerritoryService(db_session).seed_defaults()
    return db_session


@pytest.fixture
def tier_configs(db_session):
    """Seed the default tier bands."""
    from rightsdesk.models import PricingTierConfig
    from rightsdesk.services.tier_config_service import TierConfigService

    TierConfigService(db_session).ensure_defaults()
    return {row.tier: row for row in db_session.query(PricingTierConfig).all()}


@pytest.fixture
def admin_profile(db_session):
    """Display profile for the admin user."""
    from rightsdesk.models import AdminProfile

    profile = AdminProfile(user_id=ADMIN_ID, email="ops@example.com", full_name="Claire Martin")
    db_session.add(profile)
    db_session.commit()
    return profile


# ============== Broadcasters ==============

def _broadcaster(db_session, name, status="active"):
    from rightsdesk.models import Broadcaster

    broadcaster = Broadcaster(
        id=uuid4(),
        name=name,
        legal_name=f"{name} SA",
        logo_url=f"https://cdn.example.com/{name.lower().replace(' ', '-')}.png",
        status=status,
    )
    db_session.add(broadcaster)
    db_session.commit()
    db_session.refresh(broadcaster)
    return broadcaster


@pytest.fixture
def sample_broadcaster(db_session):
    """Active broadcaster 'Canal+'."""
    return _broadcaster(db_session, "Canal+")


@pytest.fixture
def other_broadcaster(db_session):
    """Active broadcaster 'beIN Sports'."""
    return _broadcaster(db_session, "beIN Sports")


@pytest.fixture
def suspended_broadcaster(db_session):
    """Suspended broadcaster 'RMC Sport'."""
    return _broadcaster(db_session, "RMC Sport", status="suspended")


# ============== Events ==============

@pytest.fixture
def event_date():
    return datetime.now(timezone.utc).replace(microsecond=0) + timedelta(days=2)


@pytest.fixture
def sample_event(db_session, event_date):
    """Published Ligue 1 fixture two days ahead."""
    from rightsdesk.models import Event

    event = Event(
        id=uuid4(),
        sport_id=SPORT_FOOTBALL,
        league_id=LEAGUE_LIGUE_1,
        sport="Football",
        league="Ligue 1",
        home_team="PSG",
        away_team="Marseille",
        event_date=event_date,
        status="published",
    )
    db_session.add(event)
    db_session.commit()
    db_session.refresh(event)
    return event


@pytest.fixture
def second_event(db_session, event_date):
    """Published Champions League fixture a week after sample_event."""
    from rightsdesk.models import Event

    event = Event(
        id=uuid4(),
        sport_id=SPORT_FOOTBALL,
        league_id=LEAGUE_CHAMPIONS,
        sport="Football",
        league="UEFA Champions League",
        home_team="Real Madrid",
        away_team="Bayern",
        override_title="Real Madrid - Bayern (Semi-final)",
        event_date=event_date + timedelta(days=7),
        status="published",
    )
    db_session.add(event)
    db_session.commit()
    db_session.refresh(event)
    return event


# ============== Rights ==============

@pytest.fixture
def sample_package(db_session, sample_broadcaster, territories, event_date):
    """Active Ligue 1 season package for Canal+."""
    from rightsdesk.models import RightsPackage

    package = RightsPackage(
        id=uuid4(),
        broadcaster_id=sample_broadcaster.id,
        name="Ligue 1 2024/25",
        scope_type="season",
        sport_id=SPORT_FOOTBALL,
        league_id=LEAGUE_LIGUE_1,
        season="2024/25",
        start_at=event_date - timedelta(days=60),
        end_at=event_date + timedelta(days=200),
        is_exclusive_default=True,
        territories_default=["FR", "BE"],
        status="active",
    )
    db_session.add(package)
    db_session.commit()
    db_session.refresh(package)
    return package


@pytest.fixture
def exclusive_right(db_session, sample_event, sample_broadcaster, territories):
    """Active exclusive grant: Canal+ on sample_event in FR and BE."""
    from rightsdesk.models import RightsEvent

    right = RightsEvent(
        id=uuid4(),
        event_id=sample_event.id,
        broadcaster_id=sample_broadcaster.id,
        rights_live=True,
        rights_replay=True,
        rights_highlights=True,
        replay_window_hours=72,
        territories_allowed=["FR", "BE"],
        territories_blocked=[],
        exclusivity="exclusive",
        platform="both",
        status="active",
    )
    db_session.add(right)
    db_session.commit()
    db_session.refresh(right)
    return right


# ============== Pricing ==============

@pytest.fixture
def computed_pricing(db_session, sample_event, tier_configs):
    """Computed silver / 2.49 pricing row without override."""
    from rightsdesk.models import EventPricing

    pricing = EventPricing(
        id=uuid4(),
        event_id=sample_event.id,
        computed_tier="silver",
        computed_price=Decimal("2.49"),
        computation_date=datetime.now(timezone.utc),
        is_manual_override=False,
    )
    db_session.add(pricing)
    db_session.commit()
    db_session.refresh(pricing)
    return pricing
