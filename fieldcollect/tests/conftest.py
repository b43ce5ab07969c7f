"""
Pytest configuration and fixtures
"""
import pytest
from fastapi.testclient import TestClient
from sqlalchemy import create_engine, event
from sqlalchemy.engine import Engine
from sqlalchemy.orm import sessionmaker
from sqlalchemy.pool import StaticPool

from fieldcollect.main import app
from fieldcollect.db.base import Base
from fieldcollect.core.deps import get_db
from fieldcollect.core.permissions import Role
from fieldcollect.core.security import hash_password
from fieldcollect.models import User


# Use in-memory SQLite for testing
SQLALCHEMY_TEST_DATABASE_URL = "sqlite:///:memory:"

engine = create_engine(
    SQLALCHEMY_TEST_DATABASE_URL,
    connect_args={"check_same_thread": False},
    poolclass=StaticPool,
)


# Enable foreign keys for SQLite
@event.listens_for(Engine, "connect")
def set_sqlite_pragma(dbapi_conn, connection_record):
    cursor = dbapi_conn.cursor()
    cursor.execute("PRAGMA foreign_keys=ON")
    cursor.close()


TestingSessionLocal = sessionmaker(autocommit=False, autoflush=False, bind=engine)


@pytest.fixture(scope="function")
def db():
    """Create a fresh database for each test"""
    Base.metadata.drop_all(bind=engine)
    Base.metadata.create_all(bind=engine)

    db = TestingSessionLocal()
    try:
        yield db
        db.commit()
    except Exception:
        db.rollback()
        raise
    finally:
        db.close()
        Base.metadata.drop_all(bind=engine)


@pytest.fixture(scope="function")
def client(db):
    """Test client fixture with database override"""
    def override_get_db():
        try:
            yield db
        finally:
            pass

    app.dependency_overrides[get_db] = override_get_db
    yield TestClient(app)
    app.dependency_overrides.clear()


def _make_user(db, username, password, role, full_name, permissions=None, is_active=True):
    user = User(
        username=username,
        password_hash=hash_password(password),
        full_name=full_name,
        role=role.value,
        permissions=permissions,
        is_active=is_active,
    )
    db.add(user)
    db.commit()
    db.refresh(user)
    return user


@pytest.fixture
def admin_user(db):
    """Create the system administrator"""
    return _make_user(db, "admin", "adminpass", Role.ADMIN, "System Administrator")


@pytest.fixture
def agent_user(db):
    """Create a field agent"""
    return _make_user(db, "agent1", "agentpass", Role.AGENT, "John Doe")


@pytest.fixture
def other_agent(db):
    """Create a second field agent"""
    return _make_user(db, "agent2", "agentpass", Role.AGENT, "Mary Wanjiku")


@pytest.fixture
def make_secondary_admin(db):
    """Factory for secondary admins with a given permission map (password: subpass)"""
    counter = {"n": 0}

    def factory(**permissions):
        counter["n"] += 1
        return _make_user(
            db,
            f"sub{counter['n']}",
            "subpass",
            Role.SECONDARY_ADMIN,
            f"Sub Admin {counter['n']}",
            permissions=permissions,
        )
    return factory


@pytest.fixture
def auth_headers(client):
    """Log in and return bearer headers for the given credentials"""
    def login(username, password):
        response = client.post(
            "/api/v1/auth/login",
            json={"username": username, "password": password}
        )
        assert response.status_code == 200, response.text
        return {"Authorization": f"Bearer {response.json()['access_token']}"}
    return login
