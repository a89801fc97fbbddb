import os

# Cheap hashes in tests; must be set before config is imported
os.environ.setdefault("BCRYPT_ROUNDS", "4")

import pytest
from fastapi.testclient import TestClient
from sqlalchemy import create_engine, event
from sqlalchemy.orm import sessionmaker
from sqlalchemy.pool import StaticPool

from database import Base, get_db, set_sqlite_pragma
import models.users  # noqa: F401
import models.store  # noqa: F401
import models.rating  # noqa: F401
import models.log  # noqa: F401
from main import app
from models.users import UserRole
from schemas.user import UserCreate
from services import users as users_service
from utils.tokenJWT import create_access_token

DEFAULT_PASSWORD = "Passw0rd!"


@pytest.fixture
def engine():
    engine = create_engine(
        "sqlite://",
        connect_args={"check_same_thread": False},
        poolclass=StaticPool,
    )
    event.listen(engine, "connect", set_sqlite_pragma)
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
    yield TestClient(app)
    app.dependency_overrides.clear()


@pytest.fixture
def make_user(db):
    """Create an account directly through the users service."""
    counter = {"n": 0}

    def _make(role=UserRole.NORMAL_USER, email=None, name=None, password=DEFAULT_PASSWORD, address="12 Market Street"):
        counter["n"] += 1
        data = UserCreate(
            name=name or f"Test Account Number {counter['n']:04d}",
            email=email or f"user{counter['n']}@example.com",
            address=address,
            password=password,
            role=role,
        )
        return users_service.create_user(db, data, role=role)
    return _make


def auth_headers(user) -> dict:
    return {"Authorization": f"Bearer {create_access_token(user.id, user.role)}"}


@pytest.fixture
def admin(make_user):
    return make_user(role=UserRole.ADMIN, email="admin@example.com")


@pytest.fixture
def owner(make_user):
    return make_user(role=UserRole.STORE_OWNER, email="owner@example.com")


@pytest.fixture
def alice(make_user):
    return make_user(email="alice@example.com")


@pytest.fixture
def bob(make_user):
    return make_user(email="bob@example.com")


@pytest.fixture
def auth():
    return auth_headers
