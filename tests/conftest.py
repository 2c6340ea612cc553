"""Shared fixtures.

Environment variables are set before any application module is imported so
that import-time side effects (data directory, default engine) land in a
temporary directory.
"""

import os
import tempfile

_DATA_DIR = tempfile.mkdtemp(prefix="loyalty-test-")
os.environ["DATA_DIR"] = _DATA_DIR
os.environ["DATABASE_URL"] = f"sqlite:///{_DATA_DIR}/default.db"
os.environ["JWT_SECRET_KEY"] = "test-secret"
os.environ["BCRYPT_ROUNDS"] = "4"
os.environ["ALLOW_CODE_REUSE"] = "false"
os.environ.pop("LOG_FILE", None)
os.environ.pop("ADMIN_USERNAME", None)
os.environ.pop("ADMIN_PASSWORD", None)

import pytest  # noqa: E402
from fastapi.testclient import TestClient  # noqa: E402
from sqlalchemy import create_engine  # noqa: E402
from sqlalchemy.orm import sessionmaker  # noqa: E402

from app import app  # noqa: E402
from core.database import get_db  # noqa: E402
from models.base import Base  # noqa: E402
from models.code import CodeModel  # noqa: E402
from models.reward import RewardModel  # noqa: E402
from models.user import UserModel  # noqa: E402
from utils.user_manager import UserManager  # noqa: E402


@pytest.fixture
def session_factory(tmp_path):
    engine = create_engine(
        f"sqlite:///{tmp_path}/test.db", connect_args={"check_same_thread": False}
    )
    Base.metadata.create_all(bind=engine)
    yield sessionmaker(autocommit=False, autoflush=False, bind=engine)
    engine.dispose()


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
    with TestClient(app) as test_client:
        yield test_client
    app.dependency_overrides.clear()


@pytest.fixture
def make_user(db):
    """Create a user with a given balance and role; returns its id."""

    def _make_user(username, password="secret123", points=0, role="user"):
        user = UserManager(db).create_user(username, password, role=role)
        if points:
            db.query(UserModel).filter(UserModel.id == user.id).update({"points": points})
            db.commit()
        return user.id

    return _make_user


@pytest.fixture
def make_reward(db):
    def _make_reward(name, points, quantity, image=""):
        db.add(RewardModel(name=name, points=points, quantity=quantity, image=image))
        db.commit()

    return _make_reward


@pytest.fixture
def make_code(db):
    def _make_code(code, points):
        db.add(CodeModel(code=code, points=points))
        db.commit()

    return _make_code


@pytest.fixture
def login(client):
    """Log in through the API and return bearer headers."""

    def _login(username, password="secret123"):
        response = client.post(
            "/api/login", json={"username": username, "password": password}
        )
        assert response.status_code == 200, response.text
        return {"Authorization": f"Bearer {response.json()['token']}"}

    return _login


@pytest.fixture
def points_of(db):
    """Read a user's current balance straight from the database."""

    def _points_of(username):
        db.expire_all()
        return db.query(UserModel).filter(UserModel.username == username).one().points

    return _points_of


@pytest.fixture
def quantity_of(db):
    def _quantity_of(name):
        db.expire_all()
        return db.query(RewardModel).filter(RewardModel.name == name).one().quantity

    return _quantity_of
