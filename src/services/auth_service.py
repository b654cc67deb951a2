from datetime import datetime
import logging

import bcrypt
from flask import current_app
from sqlalchemy.exc import IntegrityError

from extensions import db
from src.models import AdminUser, Hospital, ROLES
from src.services.db_context import db_context
from src.services.errors import AuthError, DuplicateError, NotFoundError, ServiceError


logger = logging.getLogger("hospital_admin.auth")


# -------------------------------
# 🔑 PASSWORD HASHING
# -------------------------------

def hash_password(password: str) -> str:
    rounds = current_app.config.get("BCRYPT_ROUNDS", 10)
    return bcrypt.hashpw(password.encode("utf-8"), bcrypt.gensalt(rounds=rounds)).decode("utf-8")


def verify_password(password: str, hashed: str) -> bool:
    try:
        return bcrypt.checkpw(password.encode("utf-8"), (hashed or "").encode("utf-8"))
    except ValueError:
        # Malformed or empty stored hash
        return False


def user_payload(user: AdminUser) -> dict:
    return {
        "uid": user.id,
        "phone": user.phone,
        "role": user.role,
        "name": user.name,
        "hospital_id": user.hospital_id,
        "hospital_name": user.hospital_name,
    }


# -------------------------------
# 👤 SIGN UP / LOGIN
# -------------------------------

def _new_admin_user(phone, password, role, hospital_id=None, hospital_name=None) -> AdminUser:
    """Stage an AdminUser on the session without committing."""
    if role not in ROLES:
        raise ServiceError(f"Unknown role: {role}")

    if AdminUser.query.filter_by(phone=phone).first():
        raise DuplicateError("Phone number is already registered.")

    user = AdminUser(
        phone=phone,
        password=hash_password(password),
        role=role,
        hospital_id=hospital_id,
        hospital_name=hospital_name,
        created_at=datetime.utcnow(),
    )
    db.session.add(user)
    return user


def create_admin_user(
    phone: str,
    password: str,
    role: str,
    hospital_id: str | None = None,
    hospital_name: str | None = None,
) -> str:
    """Register an admin and return the new user id."""
    with db_context():
        try:
            user = _new_admin_user(phone, password, role, hospital_id, hospital_name)
            db.session.commit()
        except IntegrityError:
            # Lost a race with another signup for the same phone
            db.session.rollback()
            raise DuplicateError("Phone number is already registered.")
        except ServiceError:
            db.session.rollback()
            raise

        logger.info(f"[create_admin_user] Created {role} user {user.id}")
        return user.id


def login_with_phone(phone: str, password: str, required_role: str | None = None) -> dict:
    """
    Check phone + password and return the user payload stored in the session.
    When required_role is given, other roles are refused.
    """
    with db_context():
        user = AdminUser.query.filter_by(phone=phone).first()

        if not user:
            logger.warning(f"[login_with_phone] Unknown phone={phone}")
            raise AuthError("User not found. Please sign up.")

        if not verify_password(password, user.password):
            logger.warning(f"[login_with_phone] Bad password for user={user.id}")
            raise AuthError("Invalid password")

        if not user.phone or not user.role:
            raise AuthError("Invalid user data")

        if required_role and user.role != required_role:
            raise AuthError(f"Access restricted to {required_role} administrators")

        if required_role == "hospital" and not user.hospital_id:
            raise AuthError("Associated hospital not found for this account")

        return user_payload(user)


def login_hospital_admin(phone: str, password: str) -> dict:
    return login_with_phone(phone, password, required_role="hospital")


def register_hospital(
    phone: str,
    password: str,
    hospital_name: str,
    address: str,
    description: str | None = None,
) -> dict:
    """
    Create a hospital and its hospital-role admin in one transaction.
    A duplicate phone leaves no hospital behind.
    """
    with db_context():
        try:
            hospital = Hospital(
                name=hospital_name,
                address=address,
                description=description or "",
                status="active",
                created_at=datetime.utcnow(),
            )
            db.session.add(hospital)
            db.session.flush()

            user = _new_admin_user(phone, password, "hospital", hospital.id, hospital_name)
            db.session.flush()

            hospital.admin_id = user.id
            db.session.commit()
        except IntegrityError:
            db.session.rollback()
            raise DuplicateError("Phone number is already registered.")
        except ServiceError:
            db.session.rollback()
            raise

        logger.info(f"[register_hospital] Hospital {hospital.id} registered by user {user.id}")
        return {"user_id": user.id, "hospital_id": hospital.id}


# -------------------------------
# ⚙️ ACCOUNT SETTINGS
# -------------------------------

def change_password(uid: str, current_password: str, new_password: str) -> bool:
    with db_context():
        user = db.session.get(AdminUser, uid)
        if not user:
            raise NotFoundError("User not found")

        if not verify_password(current_password, user.password):
            logger.warning(f"[change_password] Wrong current password for user={uid}")
            raise AuthError("Current password is incorrect")

        user.password = hash_password(new_password)
        user.updated_at = datetime.utcnow()
        db.session.commit()

        logger.info(f"[change_password] Password changed for user={uid}")
        return True
