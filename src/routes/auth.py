import logging

from flask import Blueprint, flash, redirect, render_template, request, session, url_for
from flask_login import current_user, login_user, logout_user
from pydantic import ValidationError

from src.schemas import HospitalSignupForm, LoginForm, SignupForm, first_error
from src.services import session_service
from src.services.errors import ServiceError


auth_bp = Blueprint("auth", __name__, url_prefix="/auth")
logger = logging.getLogger("hospital_admin.routes.auth")


def _safe_next(default: str) -> str:
    target = request.args.get("next") or ""
    # Only local paths
    if target.startswith("/") and not target.startswith("//"):
        return target
    return default


def _start(user: dict):
    session.clear()
    token = session_service.start_session(user)
    login_user(session_service.resolve_session(token))


@auth_bp.route("/login", methods=["GET", "POST"])
def login():
    """Phone + password login for admins and superadmins."""
    from src.services.auth_service import login_with_phone  # local import to avoid cycles

    if request.method == "POST":
        try:
            form = LoginForm(**request.form.to_dict())
            user = login_with_phone(form.phone, form.password)
        except ValidationError as e:
            flash(first_error(e), "error")
        except ServiceError as e:
            flash(e.message, "error")
        else:
            _start(user)
            return redirect(_safe_next(url_for("dashboard.dashboard_home")))

    return render_template("auth/login.html", phone=request.form.get("phone", ""))


@auth_bp.route("/signup", methods=["GET", "POST"])
def signup():
    from src.services.auth_service import create_admin_user

    if request.method == "POST":
        try:
            form = SignupForm(**request.form.to_dict())
            create_admin_user(form.phone, form.password, form.role)
        except ValidationError as e:
            flash(first_error(e), "error")
        except ServiceError as e:
            flash(e.message, "error")
        else:
            flash("Account created. Please log in.", "success")
            return redirect(url_for("auth.login"))

    return render_template(
        "auth/signup.html",
        phone=request.form.get("phone", ""),
        role=request.form.get("role", "admin"),
    )


@auth_bp.route("/hospital/login", methods=["GET", "POST"])
def hospital_login():
    """Login page reserved for hospital-role admins."""
    from src.services.auth_service import login_hospital_admin

    if request.method == "POST":
        try:
            form = LoginForm(**request.form.to_dict())
            user = login_hospital_admin(form.phone, form.password)
        except ValidationError as e:
            flash(first_error(e), "error")
        except ServiceError as e:
            if "Access restricted" in e.message:
                flash("This login is for hospital administrators only", "error")
            elif "Associated hospital" in e.message:
                flash("Hospital account not properly configured", "error")
            else:
                flash(e.message or "Invalid phone number or password", "error")
        else:
            _start(user)
            return redirect(url_for("hospitals.list_hospitals"))

    return render_template("auth/hospital_login.html", phone=request.form.get("phone", ""))


@auth_bp.route("/hospital/signup", methods=["GET", "POST"])
def hospital_signup():
    """Register a hospital together with its admin account, then log in."""
    from src.services.auth_service import register_hospital, login_hospital_admin

    if request.method == "POST":
        try:
            form = HospitalSignupForm(**request.form.to_dict())
            register_hospital(
                form.phone,
                form.password,
                form.hospital_name,
                form.address,
                form.description,
            )
            user = login_hospital_admin(form.phone, form.password)
        except ValidationError as e:
            flash(first_error(e), "error")
        except ServiceError as e:
            flash(e.message, "error")
        else:
            _start(user)
            return redirect(url_for("hospitals.list_hospitals"))

    form_values = request.form.to_dict()
    form_values.pop("password", None)
    form_values.pop("confirm_password", None)
    return render_template("auth/hospital_signup.html", form=form_values)


@auth_bp.route("/logout", methods=["POST"])
def logout():
    if current_user.is_authenticated:
        session_service.clear_session(current_user.get_id())
    logout_user()
    session.clear()
    return redirect(url_for("auth.login"))
