from flask import Blueprint, flash, redirect, render_template, url_for
from flask_login import current_user

from src.routes.guards import role_required
from src.services import user_service
from src.services.errors import ServiceError


users_bp = Blueprint("users", __name__)


@users_bp.route("/users", methods=["GET"])
@role_required("superadmin")
def users_page():
    return render_template("users.html", active_page="users", users=user_service.list_admin_users())


@users_bp.route("/users/<uid>/delete", methods=["POST"])
@role_required("superadmin")
def delete_user_route(uid: str):
    try:
        user_service.delete_admin_user(uid, acting_uid=current_user.uid)
        flash("User deleted.", "success")
    except ServiceError as e:
        flash(e.message, "error")
    return redirect(url_for("users.users_page"))
