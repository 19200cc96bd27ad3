import os
import sys
from pathlib import Path
from uuid import uuid4

import pytest
from fastapi.testclient import TestClient
from sqlalchemy import create_engine, event
from sqlalchemy.orm import sessionmaker


ROOT = Path(__file__).resolve().parents[1]
DB_PATH = (ROOT / "test.db").resolve()
SQLITE_URL = f"sqlite:///{DB_PATH.as_posix()}"
sys.path.append(str(ROOT))

os.environ["DATABASE_URL"] = SQLITE_URL
os.environ["JWT_SECRET"] = "test-secret"
os.environ["JWT_ALGORITHM"] = "HS256"

from medtrack.db import session as db_session  # noqa: E402
from medtrack.db.base import Base  # noqa: E402
import medtrack.models  # noqa: E402, F401
from medtrack.core.security import hash_password  # noqa: E402
from medtrack.main import app  # noqa: E402
from medtrack.models.enums import Role  # noqa: E402
from medtrack.models.user import User, UserRoleAssignment  # noqa: E402


engine = create_engine(SQLITE_URL, connect_args={"check_same_thread": False})


@event.listens_for(engine, "connect")
def _set_sqlite_pragma(dbapi_connection, _connection_record):
    cursor = dbapi_connection.cursor()
    cursor.execute("PRAGMA foreign_keys=ON")
    cursor.close()


db_session.engine = engine
db_session.SessionLocal = sessionmaker(bind=engine, autoflush=False, autocommit=False)

PASSWORD = "Password123!"


@pytest.fixture()
def db():
    Base.metadata.drop_all(bind=engine)
    Base.metadata.create_all(bind=engine)
    session = db_session.SessionLocal()
    try:
        yield session
    finally:
        session.close()


@pytest.fixture()
def client(db):
    with TestClient(app) as test_client:
        yield test_client


def create_user(db, *roles: Role) -> User:
    user = User(
        email=f"user_{uuid4().hex}@example.com",
        full_name="Test User",
        password_hash=hash_password(PASSWORD),
    )
    db.add(user)
    db.flush()
    for role in roles:
        db.add(UserRoleAssignment(user_id=user.id, role=role))
    db.commit()
    db.refresh(user)
    return user


def login(client, user: User) -> dict[str, str]:
    response = client.post("/auth/login", data={"username": user.email, "password": PASSWORD})
    assert response.status_code == 200
    return {"Authorization": f"Bearer {response.json()['access_token']}"}


@pytest.fixture()
def auth_headers(client, db):
    def _headers(*roles: Role) -> dict[str, str]:
        return login(client, create_user(db, *roles))
    return _headers


@pytest.fixture()
def make_user(db):
    def _make(*roles: Role) -> User:
        return create_user(db, *roles)
    return _make


@pytest.fixture()
def login_as(client):
    def _login(user: User) -> dict[str, str]:
        return login(client, user)
    return _login
