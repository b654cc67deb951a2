from flask import Blueprint, render_template
from flask_login import current_user, login_required


dashboard_bp = Blueprint("dashboard", __name__)


@dashboard_bp.route("/", methods=["GET"])
@dashboard_bp.route("/dashboard", methods=["GET"])
@login_required
def dashboard_home():
    """
    Overview: today's appointments and totals. Hospital admins only see
    their own hospital; superadmins also get the live session list.
    """
    # Local import to avoid circular dependency during app startup.
    from src.services.appointment_service import get_dashboard_snapshot
    from src.services.session_service import list_active_sessions

    hospital_id = current_user.hospital_id if current_user.is_hospital else None
    context = get_dashboard_snapshot(hospital_id=hospital_id)
    context["live_sessions"] = list_active_sessions() if current_user.is_superadmin else []
    return render_template("dashboard.html", active_page="overview", **context)
