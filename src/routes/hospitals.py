import os

from flask import Blueprint, abort, flash, redirect, render_template, request, send_from_directory, url_for, current_app
from flask_login import current_user, login_required
from pydantic import ValidationError

from src.schemas import HospitalForm, first_error
from src.services import hospital_service, storage_service
from src.services.errors import NotFoundError, ServiceError


hospitals_bp = Blueprint("hospitals", __name__)


def _can_manage(hospital_id: str) -> bool:
    if not current_user.is_hospital:
        return True
    return current_user.hospital_id == hospital_id


def _photo_upload():
    file = request.files.get("photo")
    return file if file and file.filename else None


@hospitals_bp.route("/hospitals", methods=["GET"])
@login_required
def list_hospitals():
    try:
        hospitals = hospital_service.fetch_hospitals()
    except ServiceError as e:
        flash(e.message, "error")
        hospitals = []

    if current_user.is_hospital:
        hospitals = [h for h in hospitals if h["id"] == current_user.hospital_id]

    return render_template("hospitals/list.html", active_page="hospitals", hospitals=hospitals)


@hospitals_bp.route("/hospitals/new", methods=["GET", "POST"])
@login_required
def new_hospital():
    if current_user.is_hospital:
        abort(403)

    if request.method == "POST":
        try:
            form = HospitalForm(**request.form.to_dict())
            hospital_service.create_hospital(form.model_dump(), image_file=_photo_upload())
        except ValidationError as e:
            flash(first_error(e), "error")
        except ServiceError as e:
            flash(e.message, "error")
        else:
            flash("Hospital added.", "success")
            return redirect(url_for("hospitals.list_hospitals"))

    return render_template(
        "hospitals/form.html",
        active_page="hospitals",
        hospital=request.form.to_dict(),
        is_edit=False,
    )


@hospitals_bp.route("/hospitals/<hospital_id>/edit", methods=["GET", "POST"])
@login_required
def edit_hospital(hospital_id: str):
    if not _can_manage(hospital_id):
        abort(403)

    try:
        hospital = hospital_service.fetch_hospital_by_id(hospital_id)
    except NotFoundError:
        abort(404)

    if request.method == "POST":
        try:
            form = HospitalForm(**request.form.to_dict())
            hospital_service.update_hospital(hospital_id, form.model_dump(), image_file=_photo_upload())
        except ValidationError as e:
            flash(first_error(e), "error")
        except ServiceError as e:
            flash(e.message, "error")
        else:
            flash("Hospital updated.", "success")
            return redirect(url_for("hospitals.list_hospitals"))
        hospital.update(request.form.to_dict())

    return render_template("hospitals/form.html", active_page="hospitals", hospital=hospital, is_edit=True)


@hospitals_bp.route("/hospitals/<hospital_id>/delete", methods=["POST"])
@login_required
def delete_hospital_route(hospital_id: str):
    if current_user.is_hospital:
        abort(403)

    try:
        hospital_service.delete_hospital(hospital_id)
        flash("Hospital deleted.", "success")
    except ServiceError as e:
        flash(e.message, "error")
    return redirect(url_for("hospitals.list_hospitals"))


@hospitals_bp.route("/uploads/<path:key>", methods=["GET"])
@login_required
def hospital_photo(key: str):
    try:
        storage_service.photo_path(key)
    except ServiceError:
        abort(404)
    return send_from_directory(os.path.abspath(current_app.config["UPLOAD_FOLDER"]), key)
