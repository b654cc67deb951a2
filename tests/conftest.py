import fakeredis
import pytest
from flask import Flask

from config import TestConfig
from extensions import db
from src.app_factory import create_app
from src.services import session_service


PASSWORD = "s3cret!pass"


@pytest.fixture
def app(tmp_path, monkeypatch) -> Flask:
    app = create_app(
        TestConfig,
        # Use sqlite file for stability across threads
        SQLALCHEMY_DATABASE_URI=f"sqlite:///{tmp_path / 'test_hospital.db'}",
        UPLOAD_FOLDER=str(tmp_path / "uploads"),
        CLINIC_TIMEZONE="UTC",
    )
    monkeypatch.setattr(session_service, "r", fakeredis.FakeRedis(decode_responses=True))
    yield app
    with app.app_context():
        db.session.remove()
        db.drop_all()


@pytest.fixture
def app_ctx(app: Flask):
    with app.app_context():
        yield


@pytest.fixture
def client(app: Flask):
    return app.test_client()


@pytest.fixture
def make_user(app: Flask):
    """Create an admin user and return its id."""
    from src.services.auth_service import create_admin_user

    def _make(phone="15550000001", role="admin", password=PASSWORD, **kwargs):
        with app.app_context():
            return create_admin_user(phone, password, role, **kwargs)

    return _make


@pytest.fixture
def login(client):
    def _login(phone="15550000001", password=PASSWORD, path="/auth/login"):
        return client.post(path, data={"phone": phone, "password": password})

    return _login
