from flask import Blueprint, abort, flash, redirect, render_template, request, url_for
from flask_login import current_user, login_required
from pydantic import ValidationError

from src.schemas import AppointmentForm, first_error
from src.services import appointment_service, hospital_service
from src.services.errors import NotFoundError, ServiceError


appointments_bp = Blueprint("appointments", __name__)


def _scope() -> str | None:
    """Hospital admins are limited to their own hospital."""
    return current_user.hospital_id if current_user.is_hospital else None


def _hospital_choices() -> list[dict]:
    try:
        hospitals = hospital_service.fetch_hospitals()
    except ServiceError:
        return []
    scope = _scope()
    return [h for h in hospitals if not scope or h["id"] == scope]


@appointments_bp.route("/appointments", methods=["GET"])
@login_required
def appointments_page():
    """List appointments; ``?edit=<id>`` prefills the form with that record."""
    try:
        appointments = appointment_service.fetch_appointments(hospital_id=_scope())
    except ServiceError as e:
        flash(e.message, "error")
        appointments = []

    form = {}
    edit_id = request.args.get("edit")
    if edit_id:
        form = next((a for a in appointments if a["id"] == edit_id), None)
        if form is None:
            flash("Appointment not found", "error")
            return redirect(url_for("appointments.appointments_page"))

    return render_template(
        "appointments.html",
        active_page="appointments",
        appointments=appointments,
        hospitals=_hospital_choices(),
        form=form,
        edit_id=edit_id,
    )


@appointments_bp.route("/appointments/save", methods=["POST"])
@login_required
def save_appointment():
    """Create or update an appointment from the dashboard form."""
    values = request.form.to_dict()
    appointment_id = values.pop("appointment_id", None) or None
    scope = _scope()

    if scope:
        values["hospital_id"] = scope

    # hospital_name is a denormalised copy of the selected hospital
    if values.get("hospital_id"):
        try:
            values["hospital_name"] = hospital_service.fetch_hospital_by_id(values["hospital_id"])["name"]
        except NotFoundError as e:
            flash(e.message, "error")
            return redirect(url_for("appointments.appointments_page"))

    try:
        if appointment_id and scope:
            existing = appointment_service.get_appointment(appointment_id)
            if existing["hospital_id"] != scope:
                abort(403)
        form = AppointmentForm(**values)
        appointment_service.upsert_appointment(appointment_id, form.to_record())
    except ValidationError as e:
        flash(first_error(e), "error")
    except ServiceError as e:
        flash(e.message, "error")
    else:
        flash("Appointment updated." if appointment_id else "Appointment created.", "success")

    return redirect(url_for("appointments.appointments_page"))


@appointments_bp.route("/appointments/<appointment_id>/delete", methods=["POST"])
@login_required
def delete_appointment_route(appointment_id: str):
    scope = _scope()
    try:
        if scope and appointment_service.get_appointment(appointment_id)["hospital_id"] != scope:
            abort(403)
    except NotFoundError as e:
        flash(e.message, "error")
        return redirect(url_for("appointments.appointments_page"))

    if appointment_service.delete_appointment(appointment_id):
        flash("Appointment deleted.", "success")
    else:
        flash("Appointment not found", "error")
    return redirect(url_for("appointments.appointments_page"))
