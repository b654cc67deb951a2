import logging

from extensions import db
from src.models import AdminUser
from src.services.db_context import db_context
from src.services.errors import NotFoundError, ServiceError


logger = logging.getLogger("hospital_admin.users")


def list_admin_users() -> list[dict]:
    with db_context():
        users = AdminUser.query.order_by(AdminUser.created_at.desc()).all()
        return [
            {
                "id": u.id,
                "phone": u.phone or "",
                "role": u.role or "",
                "hospital_name": u.hospital_name or "",
            }
            for u in users
        ]


def delete_admin_user(uid: str, acting_uid: str | None = None) -> bool:
    """Delete an admin account. Open sessions die on their next request."""
    if acting_uid and uid == acting_uid:
        raise ServiceError("You cannot delete your own account")

    with db_context():
        user = db.session.get(AdminUser, uid)
        if not user:
            raise NotFoundError("User not found")

        db.session.delete(user)
        db.session.commit()
        logger.info(f"[delete_admin_user] User {uid} deleted by {acting_uid}")
        return True
