import pytest
from fastapi.testclient import TestClient
from sqlalchemy.orm import Session, sessionmaker

from wheelapi.config import Settings, settings as app_settings
from wheelapi.core.security import create_identity_token
from wheelapi.database.connection import build_engine
from wheelapi.database.session import get_db
from wheelapi.deps import get_presentation_timer
from wheelapi.main import create_app
from wheelapi.models.account import Account, AccountRole
from wheelapi.models.base import Base
from wheelapi.models import points, spin  # noqa: F401
from wheelapi.schemas.account import Identity

TEST_SECRET = "test-secret-key"


class FakeTimer:
    """PresentationTimer 대역 - 대기 없이 호출만 기록"""

    def __init__(self):
        self.calls = []

    async def present(self, duration_ms: int) -> None:
        self.calls.append(duration_ms)


@pytest.fixture
def engine(tmp_path):
    """테스트마다 새 SQLite 파일 DB"""
    engine = build_engine(f"sqlite:///{tmp_path / 'wheel.db'}")
    Base.metadata.create_all(bind=engine)
    yield engine
    engine.dispose()


@pytest.fixture
def session_factory(engine):
    return sessionmaker(bind=engine, autoflush=False, expire_on_commit=False)


@pytest.fixture
def db(session_factory) -> Session:
    session = session_factory()
    yield session
    session.close()


@pytest.fixture
def test_settings():
    return Settings(
        _env_file=None,
        SECRET_KEY=TEST_SECRET,
        SPIN_COST_POINTS=20,
        SPIN_REVEAL_DELAY_MS=0,
    )


@pytest.fixture
def make_account(db):
    def _make(account_id="user-1", balance=0, role=AccountRole.USER, name="Tester"):
        account = Account(
            id=account_id,
            display_name=name,
            email=f"{account_id}@example.com",
            role=role.value,
            balance=balance,
        )
        db.add(account)
        db.commit()
        return account

    return _make


@pytest.fixture
def fake_timer():
    return FakeTimer()


@pytest.fixture
def client(monkeypatch, session_factory, fake_timer):
    """실제 라우터 + 테스트 DB"""
    monkeypatch.setattr(app_settings, "SECRET_KEY", TEST_SECRET)
    app = create_app()

    def override_get_db():
        session = session_factory()
        try:
            yield session
        finally:
            session.close()

    app.dependency_overrides[get_db] = override_get_db
    app.dependency_overrides[get_presentation_timer] = lambda: fake_timer
    return TestClient(app)


@pytest.fixture
def auth_header():
    def _header(account_id="user-1", role=AccountRole.USER, name="Tester"):
        identity = Identity(
            account_id=account_id,
            display_name=name,
            email=f"{account_id}@example.com",
            avatar_url=f"https://example.com/{account_id}.png",
            role=role,
        )
        token = create_identity_token(identity, app_settings)
        return {"Authorization": f"Bearer {token}"}

    return _header
