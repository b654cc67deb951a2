from datetime import datetime
import logging

import pytz
from flask import current_app
from sqlalchemy.exc import SQLAlchemyError

from extensions import db
from src.models import Appointment, Hospital
from src.services.db_context import db_context
from src.services.errors import NotFoundError, ServiceError


logger = logging.getLogger("hospital_admin.appointments")

FIELDS = (
    "full_name",
    "email",
    "phone_number",
    "hospital_name",
    "hospital_id",
    "app_date",
    "address",
    "description",
)


def appointment_to_dict(a: Appointment) -> dict:
    data = {name: getattr(a, name) or "" for name in FIELDS}
    data["id"] = a.id
    return data


# -------------------------------
# 📅 APPOINTMENT CRUD
# -------------------------------

def fetch_appointments(hospital_id: str | None = None) -> list[dict]:
    """All appointments by date, optionally only one hospital's."""
    try:
        with db_context():
            query = Appointment.query
            if hospital_id:
                query = query.filter(Appointment.hospital_id == hospital_id)
            rows = query.order_by(Appointment.app_date.asc(), Appointment.full_name.asc()).all()
            return [appointment_to_dict(a) for a in rows]
    except SQLAlchemyError as e:
        logger.exception(f"[fetch_appointments] Failed for hospital_id={hospital_id}: {e}")
        raise ServiceError("Failed to fetch appointments")


def get_appointment(appointment_id: str) -> dict:
    with db_context():
        appt = db.session.get(Appointment, appointment_id)
        if not appt:
            raise NotFoundError("Appointment not found")
        return appointment_to_dict(appt)


def upsert_appointment(appointment_id: str | None, data: dict) -> dict:
    """
    Create or update an appointment from the dashboard form.
    - If appointment_id is provided, update that appointment.
    - Otherwise, create a new one.
    """
    with db_context():
        if appointment_id:
            appt = db.session.get(Appointment, appointment_id)
            if not appt:
                raise NotFoundError("Appointment not found")
        else:
            appt = Appointment(created_at=datetime.utcnow())
            db.session.add(appt)

        for name in FIELDS:
            setattr(appt, name, data[name])
        appt.updated_at = datetime.utcnow()

        try:
            db.session.commit()
        except SQLAlchemyError as e:
            db.session.rollback()
            logger.exception(f"[upsert_appointment] Failed for appointment_id={appointment_id}: {e}")
            raise ServiceError("Failed to save appointment")

        logger.info(f"[upsert_appointment] Saved appointment {appt.id}")
        return appointment_to_dict(appt)


def delete_appointment(appointment_id: str) -> bool:
    """Returns True if deleted, False if there was nothing to delete."""
    with db_context():
        appt = db.session.get(Appointment, appointment_id)
        if not appt:
            return False

        db.session.delete(appt)
        db.session.commit()
        logger.info(f"[delete_appointment] Deleted appointment {appointment_id}")
        return True


# -------------------------------
# 📊 DASHBOARD
# -------------------------------

def _clinic_tz():
    try:
        return pytz.timezone(current_app.config.get("CLINIC_TIMEZONE", "UTC"))
    except pytz.UnknownTimeZoneError:
        return pytz.UTC


def get_dashboard_snapshot(hospital_id: str | None = None):
    """
    Aggregate data for the overview page:
    - Today's appointments
    - Totals and upcoming count
    Scoped to one hospital when hospital_id is given.
    """
    try:
        with db_context():
            tz = _clinic_tz()
            now = datetime.now(tz)
            today_str = now.strftime("%Y-%m-%d")

            query = Appointment.query
            if hospital_id:
                query = query.filter(Appointment.hospital_id == hospital_id)

            todays = query.filter(Appointment.app_date == today_str).order_by(Appointment.full_name.asc()).all()
            upcoming = query.filter(Appointment.app_date > today_str).count()
            total_appointments = query.count()
            total_hospitals = 1 if hospital_id else Hospital.query.count()

            stats = {
                "total_hospitals": total_hospitals,
                "total_appointments": total_appointments,
                "today_total": len(todays),
                "upcoming_total": upcoming,
                "timezone": str(tz),
                "today_label": now.strftime("%A, %b %d"),
                "as_of_human": now.strftime("%b %d, %Y %I:%M %p"),
            }

            return {
                "stats": stats,
                "today_appointments": [appointment_to_dict(a) for a in todays],
            }

    except SQLAlchemyError as e:
        logger.exception(f"[get_dashboard_snapshot] Failed: {e}")
        # In case of failure, return safe empty structures so UI still loads.
        return {
            "stats": {
                "total_hospitals": 0,
                "total_appointments": 0,
                "today_total": 0,
                "upcoming_total": 0,
                "timezone": "UTC",
                "today_label": "",
                "as_of_human": "",
            },
            "today_appointments": [],
        }
