from datetime import datetime
import logging

from sqlalchemy.exc import SQLAlchemyError

from extensions import db
from src.models import Hospital
from src.services.db_context import db_context
from src.services.errors import NotFoundError, ServiceError
from src.services import storage_service


logger = logging.getLogger("hospital_admin.hospitals")


def hospital_to_dict(h: Hospital) -> dict:
    return {
        "id": h.id,
        "name": h.name or "",
        "address": h.address or "",
        "description": h.description or "",
        "photo": h.photo or "",
        "status": h.status or "",
        "admin_id": h.admin_id,
        "created_at": h.created_at,
        "updated_at": h.updated_at,
    }


def create_hospital(data: dict, image_file=None) -> dict:
    """Create a hospital, uploading its photo first when one is given."""
    with db_context():
        photo_key = ""
        try:
            if image_file:
                photo_key = storage_service.upload_photo(image_file)

            now = datetime.utcnow()
            hospital = Hospital(
                name=data["name"],
                address=data.get("address", ""),
                description=data.get("description", ""),
                photo=photo_key,
                status="active",
                created_at=now,
                updated_at=now,
            )
            db.session.add(hospital)
            db.session.commit()
        except ServiceError:
            raise
        except (SQLAlchemyError, KeyError) as e:
            db.session.rollback()
            logger.exception(f"[create_hospital] Failed for name={data.get('name')}: {e}")
            # Don't leave an orphaned photo behind
            storage_service.delete_photo(photo_key)
            raise ServiceError("Failed to create hospital")

        logger.info(f"[create_hospital] Created hospital {hospital.id}")
        return hospital_to_dict(hospital)


def fetch_hospitals() -> list[dict]:
    try:
        with db_context():
            hospitals = Hospital.query.order_by(Hospital.name.asc()).all()
            return [hospital_to_dict(h) for h in hospitals]
    except SQLAlchemyError as e:
        logger.exception(f"[fetch_hospitals] Failed: {e}")
        raise ServiceError("Failed to fetch hospitals")


def fetch_hospital_by_id(hospital_id: str) -> dict:
    with db_context():
        hospital = db.session.get(Hospital, hospital_id)
        if not hospital:
            raise NotFoundError("Hospital not found")
        return hospital_to_dict(hospital)


def get_hospital_by_admin_id(admin_id: str) -> dict | None:
    with db_context():
        hospital = Hospital.query.filter_by(admin_id=admin_id).first()
        return hospital_to_dict(hospital) if hospital else None


def update_hospital(hospital_id: str, data: dict, image_file=None) -> dict:
    """
    Update hospital fields. A new image replaces the old photo,
    otherwise the current photo is kept.
    """
    with db_context():
        hospital = db.session.get(Hospital, hospital_id)
        if not hospital:
            raise NotFoundError("Hospital not found")

        old_key = hospital.photo
        new_key = ""
        if image_file:
            new_key = storage_service.upload_photo(image_file)
            hospital.photo = new_key

        hospital.name = data["name"]
        hospital.address = data.get("address", hospital.address)
        hospital.description = data.get("description", hospital.description)
        hospital.updated_at = datetime.utcnow()

        try:
            db.session.commit()
        except SQLAlchemyError as e:
            db.session.rollback()
            logger.exception(f"[update_hospital] Failed for hospital_id={hospital_id}: {e}")
            # The old photo is still referenced, only drop the new upload
            storage_service.delete_photo(new_key)
            raise ServiceError("Failed to update hospital")

        if new_key and old_key:
            storage_service.delete_photo(old_key)

        logger.info(f"[update_hospital] Updated hospital {hospital_id}")
        return hospital_to_dict(hospital)


def delete_hospital(hospital_id: str) -> bool:
    with db_context():
        hospital = db.session.get(Hospital, hospital_id)
        if not hospital:
            raise NotFoundError("Hospital not found")

        if hospital.photo:
            storage_service.delete_photo(hospital.photo)

        db.session.delete(hospital)
        db.session.commit()

        logger.info(f"[delete_hospital] Deleted hospital {hospital_id}")
        return True
