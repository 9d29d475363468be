import pytest
from datetime import datetime, timezone
from unittest.mock import Mock, MagicMock, patch
from fastapi.testclient import TestClient
from sqlalchemy import create_engine
from sqlalchemy.orm import sessionmaker

from main import app
from app.database import get_db
from app.auth.dependencies import get_current_user
from app.models import Base
from app.models.user import User, AppRole
from app.models.profile import Profile
from app.models.plan import PlanType


@pytest.fixture
def mock_db():
    """Mock database session; query-building calls return the session itself"""
    db = MagicMock()
    for method in ("query", "filter", "outerjoin", "join", "options", "order_by", "offset", "limit"):
        getattr(db, method).return_value = db
    db.first.return_value = None
    db.all.return_value = []
    db.count.return_value = 0
    return db


@pytest.fixture(autouse=True)
def mock_redis():
    """Revision counters never reach a real Redis in tests"""
    client = MagicMock()
    client.incr.return_value = 1
    client.mget.return_value = []
    with patch("app.services.revisions.get_redis_client", return_value=client):
        yield client


def _make_user(user_id, email, role, plan=PlanType.FREE):
    user = Mock(spec=User)
    user.id = user_id
    user.email = email
    user.role = role
    user.password_hash = "$2b$12$test_hash"
    user.created_at = datetime(2026, 1, 1, tzinfo=timezone.utc)
    profile = Mock(spec=Profile)
    profile.id = user_id
    profile.user_id = user_id
    profile.created_at = user.created_at
    profile.email = email
    profile.full_name = None
    profile.phone = None
    profile.avatar_url = None
    profile.onboarding_completed = False
    profile.current_plan = plan
    profile.is_suspended = False
    profile.is_online = False
    profile.last_seen_at = None
    user.profile = profile
    return user


@pytest.fixture
def mock_user():
    """Mock regular user on the free plan"""
    return _make_user(2, "user@test.com", AppRole.USER)


@pytest.fixture
def mock_vendor():
    """Mock reseller allowed to sell every listing kind"""
    return _make_user(4, "vendor@test.com", AppRole.VENDOR)


@pytest.fixture
def mock_manager():
    """Mock account manager"""
    return _make_user(5, "gerente@test.com", AppRole.GERENTE_CONTAS)


@pytest.fixture
def mock_admin():
    """Mock admin user"""
    return _make_user(3, "admin@test.com", AppRole.ADMIN, plan=PlanType.AGENCY)


def _client(mock_db, user):
    app.dependency_overrides[get_db] = lambda: mock_db
    app.dependency_overrides[get_current_user] = lambda: user
    return TestClient(app)


@pytest.fixture
def client_with_user(mock_db, mock_user):
    """TestClient with regular user auth and mocked DB"""
    client = _client(mock_db, mock_user)
    yield client, mock_db, mock_user
    app.dependency_overrides.clear()


@pytest.fixture
def client_with_vendor(mock_db, mock_vendor):
    """TestClient with reseller auth and mocked DB"""
    client = _client(mock_db, mock_vendor)
    yield client, mock_db, mock_vendor
    app.dependency_overrides.clear()


@pytest.fixture
def client_with_admin(mock_db, mock_admin):
    """TestClient with admin auth and mocked DB"""
    client = _client(mock_db, mock_admin)
    yield client, mock_db, mock_admin
    app.dependency_overrides.clear()


@pytest.fixture
def client_with_manager(mock_db, mock_manager):
    """TestClient with account manager auth and mocked DB"""
    client = _client(mock_db, mock_manager)
    yield client, mock_db, mock_manager
    app.dependency_overrides.clear()


@pytest.fixture
def unauthenticated_client(mock_db):
    """TestClient with mocked DB but no auth"""
    app.dependency_overrides[get_db] = lambda: mock_db
    client = TestClient(app)
    yield client, mock_db
    app.dependency_overrides.clear()


@pytest.fixture
def fake_refresh():
    """db.refresh side effect filling the values the database would generate"""
    def _refresh(obj):
        now = datetime(2026, 3, 1, tzinfo=timezone.utc)
        for column in obj.__table__.columns:
            if getattr(obj, column.key, None) is not None:
                continue
            if column.key == "id":
                obj.id = 1
            elif column.server_default is not None:
                setattr(obj, column.key, now)
            elif column.default is not None:
                default = column.default
                setattr(obj, column.key, default.arg(None) if default.is_callable else default.arg)
    return _refresh


@pytest.fixture
def sqlite_db():
    """Real session on an in-memory SQLite database with every table created"""
    engine = create_engine("sqlite://")
    Base.metadata.create_all(engine)
    db = sessionmaker(bind=engine)()
    yield db
    db.close()
    engine.dispose()
