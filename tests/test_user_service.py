import pytest

from src.services import user_service
from src.services.auth_service import create_admin_user
from src.services.errors import NotFoundError, ServiceError


def test_list_and_delete_admin_users(app_ctx):
    boss = create_admin_user("15550000001", "pw123456", "superadmin")
    other = create_admin_user("15550000002", "pw123456", "admin")

    users = user_service.list_admin_users()
    assert {u["id"] for u in users} == {boss, other}
    assert all("password" not in u for u in users)

    assert user_service.delete_admin_user(other, acting_uid=boss)
    assert [u["id"] for u in user_service.list_admin_users()] == [boss]


def test_cannot_delete_self(app_ctx):
    boss = create_admin_user("15550000001", "pw123456", "superadmin")
    with pytest.raises(ServiceError, match="own account"):
        user_service.delete_admin_user(boss, acting_uid=boss)


def test_delete_unknown_user(app_ctx):
    with pytest.raises(NotFoundError):
        user_service.delete_admin_user("missing", acting_uid="someone")


def test_services_work_outside_app_context(app, monkeypatch):
    from src.services import db_context as dbc

    # Route db_context to the test app
    monkeypatch.setattr(dbc, "flask_app", app)

    with app.app_context():
        create_admin_user("15550000001", "pw123456", "admin")

    assert [u["phone"] for u in user_service.list_admin_users()] == ["15550000001"]
