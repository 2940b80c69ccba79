"""Shared fixtures: test settings, in-memory SQLite store and an API test case."""

import unittest
from unittest.mock import MagicMock

from fastapi.testclient import TestClient
from sqlalchemy import create_engine, event
from sqlalchemy.orm import sessionmaker
from sqlalchemy.pool import StaticPool

from app.api.v1.auth import get_notifier
from app.core.config import Settings, get_settings
from app.core.database import get_db
from app.core.security import hash_password
from app.main import app
from app.models import Base, User

TEST_JWT_SECRET = "test-signing-secret-0123456789abcdefghij"
STRONG_PASSWORD = "Str0ng!Pass"
API = "/api/v1"


def make_settings(**overrides: object) -> Settings:
    """Settings independent of the environment and .env; cheap bcrypt rounds."""
    values: dict[str, object] = {
        "APP_ENV": "dev",
        "JWT_SECRET": TEST_JWT_SECRET,
        "BCRYPT_ROUNDS": 4,
    }
    values.update(overrides)
    return Settings(_env_file=None, **values)


def make_engine():
    """Single-connection in-memory SQLite with foreign keys enforced."""
    engine = create_engine(
        "sqlite+pysqlite://",
        connect_args={"check_same_thread": False},
        poolclass=StaticPool,
    )

    @event.listens_for(engine, "connect")
    def _enable_foreign_keys(dbapi_connection, _record) -> None:
        cursor = dbapi_connection.cursor()
        cursor.execute("PRAGMA foreign_keys=ON")
        cursor.close()

    Base.metadata.create_all(engine)
    return engine


def add_user(
    session_factory,
    username: str,
    email: str,
    password: str = STRONG_PASSWORD,
    role: str = "member",
    approval_status: str = "APPROVED",
) -> int:
    """Insert an account directly and return its id."""
    db = session_factory()
    try:
        user = User(
            username=username,
            email=email,
            password_hash=hash_password(password, 4),
            role=role,
            approval_status=approval_status,
            failed_attempts=0,
        )
        db.add(user)
        db.commit()
        return user.id
    finally:
        db.close()


class StoreTestCase(unittest.TestCase):
    """Fresh SQLite store per test."""

    def setUp(self) -> None:
        self.settings = make_settings()
        self.engine = make_engine()
        self.Session = sessionmaker(bind=self.engine, autoflush=False)

    def tearDown(self) -> None:
        self.engine.dispose()

    def add_user(self, username: str, email: str, **kwargs: object) -> int:
        return add_user(self.Session, username, email, **kwargs)

    def load_user(self, user_id: int) -> User | None:
        db = self.Session()
        try:
            return db.get(User, user_id)
        finally:
            db.close()


class ApiTestCase(StoreTestCase):
    """StoreTestCase plus a TestClient with the store, settings and notifier overridden."""

    def setUp(self) -> None:
        super().setUp()

        def override_get_db():
            db = self.Session()
            try:
                yield db
            finally:
                db.close()

        self.notifier = MagicMock()
        app.dependency_overrides[get_db] = override_get_db
        app.dependency_overrides[get_settings] = lambda: self.settings
        app.dependency_overrides[get_notifier] = lambda: self.notifier
        self.client = TestClient(app)

    def tearDown(self) -> None:
        app.dependency_overrides.clear()
        super().tearDown()

    def login(self, email: str, password: str = STRONG_PASSWORD):
        return self.client.post(f"{API}/users/login", json={"email": email, "password": password})

    def token_for(self, email: str, password: str = STRONG_PASSWORD) -> str:
        response = self.login(email, password)
        self.assertEqual(response.status_code, 200, response.text)
        token = response.cookies.get("access_token")
        self.assertTrue(token)
        return token

    @staticmethod
    def bearer(token: str) -> dict[str, str]:
        return {"Authorization": f"Bearer {token}"}
