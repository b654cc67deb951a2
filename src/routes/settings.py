from flask import Blueprint, flash, redirect, render_template, request, url_for
from flask_login import current_user, login_required
from pydantic import ValidationError

from src.schemas import ChangePasswordForm, first_error, password_policy_messages, password_strength
from src.services.errors import ServiceError


settings_bp = Blueprint("settings", __name__)


@settings_bp.route("/settings", methods=["GET"])
@login_required
def settings_page():
    from src.services.hospital_service import get_hospital_by_admin_id

    hospital = get_hospital_by_admin_id(current_user.uid) if current_user.is_hospital else None
    return render_template("settings.html", active_page="settings", hospital=hospital, strength="", hints=[])


@settings_bp.route("/settings/password", methods=["POST"])
@login_required
def change_password_route():
    from src.services.auth_service import change_password  # local import to avoid cycles

    new_password = request.form.get("new_password", "")
    try:
        form = ChangePasswordForm(**request.form.to_dict())
        change_password(current_user.uid, form.current_password, form.new_password)
    except ValidationError as e:
        flash(first_error(e), "error")
    except ServiceError as e:
        flash(e.message or "Failed to change password", "error")
    else:
        flash("Password changed successfully", "success")
        return redirect(url_for("settings.settings_page"))

    return render_template(
        "settings.html",
        active_page="settings",
        strength=password_strength(new_password),
        hints=password_policy_messages(new_password),
    ), 400
