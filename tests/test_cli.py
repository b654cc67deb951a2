from extensions import db
from src.models import AdminUser


def test_create_superadmin_command(app):
    runner = app.test_cli_runner()
    result = runner.invoke(args=["create-superadmin", "--phone", "+1 (555) 000-0009", "--password", "pw123456"])
    assert result.exit_code == 0, result.output
    assert "Created superadmin" in result.output

    with app.app_context():
        user = AdminUser.query.filter_by(phone="+15550000009").one()
        assert user.role == "superadmin"


def test_create_superadmin_duplicate_phone(app):
    runner = app.test_cli_runner()
    args = ["create-superadmin", "--phone", "15550000009", "--password", "pw123456"]
    assert runner.invoke(args=args).exit_code == 0

    result = runner.invoke(args=args)
    assert result.exit_code != 0
    assert "already registered" in result.output
    with app.app_context():
        assert db.session.query(AdminUser).count() == 1


def test_create_superadmin_rejects_bad_phone(app):
    result = app.test_cli_runner().invoke(args=["create-superadmin", "--phone", "123", "--password", "pw123456"])
    assert result.exit_code != 0
    assert "digits" in result.output
