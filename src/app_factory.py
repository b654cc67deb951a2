import logging
import os

import click
from flask import Flask, render_template

from extensions import db, login_manager, migrate
from config import DevConfig, ProdConfig
from logging_setup import setup_logger


def create_app(config_object=None, **overrides) -> Flask:
    """Initialize Flask app with DB, Redis sessions + configuration."""
    app = Flask(__name__)

    if config_object is not None:
        app.config.from_object(config_object)
    elif os.getenv("FLASK_ENV") == "production":
        app.config.from_object(ProdConfig)
    else:
        app.config.from_object(DevConfig)
    app.config.update(overrides)

    setup_logger(app.config.get("LOG_DIR"))
    os.makedirs(app.config["UPLOAD_FOLDER"], exist_ok=True)

    db.init_app(app)
    migrate.init_app(app, db)
    login_manager.init_app(app)
    login_manager.login_view = "auth.login"
    login_manager.login_message = "Please log in to access this page."
    login_manager.login_message_category = "info"

    from src.services import session_service
    session_service.init_app(app)

    # Import models so SQLAlchemy registers tables.
    with app.app_context():
        from src.models import AdminUser, Hospital, Appointment  # noqa: F401
        # Ensure tables exist (useful for SQLite/dev). For production, prefer migrations.
        db.create_all()

    # Register HTTP blueprints
    from src.routes.auth import auth_bp
    from src.routes.dashboard import dashboard_bp
    from src.routes.hospitals import hospitals_bp
    from src.routes.appointments import appointments_bp
    from src.routes.users import users_bp
    from src.routes.settings import settings_bp
    import src.routes.guards  # noqa: F401  registers the user_loader

    app.register_blueprint(auth_bp)
    app.register_blueprint(dashboard_bp)
    app.register_blueprint(hospitals_bp)
    app.register_blueprint(appointments_bp)
    app.register_blueprint(users_bp)
    app.register_blueprint(settings_bp)

    @app.errorhandler(403)
    def forbidden(_e):
        return render_template("error.html", code=403, message="You do not have access to this page."), 403

    @app.errorhandler(404)
    def not_found(_e):
        return render_template("error.html", code=404, message="Page not found."), 404

    register_commands(app)
    logging.getLogger("hospital_admin").info("Dashboard app created")
    return app


def register_commands(app: Flask):
    @app.cli.command("create-superadmin")
    @click.option("--phone", prompt=True)
    @click.option("--password", prompt=True, hide_input=True, confirmation_prompt=True)
    def create_superadmin(phone, password):
        """Seed a superadmin account."""
        from src.schemas import normalize_phone
        from src.services.auth_service import create_admin_user
        from src.services.errors import ServiceError

        try:
            uid = create_admin_user(normalize_phone(phone), password, "superadmin")
        except (ValueError, ServiceError) as e:
            raise click.ClickException(str(e))
        click.echo(f"Created superadmin {uid}")
