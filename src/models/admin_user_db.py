from datetime import datetime
from uuid import uuid4

from extensions import db

ROLES = ("admin", "superadmin", "hospital")

class AdminUser(db.Model):
    __tablename__ = "adminuser"

    id = db.Column(db.String(32), primary_key=True, default=lambda: uuid4().hex)
    phone = db.Column(db.String(20), unique=True, nullable=False)
    password = db.Column(db.String(128), nullable=False)  # bcrypt hash
    role = db.Column(db.String(20), nullable=False, default="admin")
    name = db.Column(db.String(100))

    # Only set for hospital-role admins
    hospital_id = db.Column(db.String(32))
    hospital_name = db.Column(db.String(200))

    created_at = db.Column(db.DateTime, default=datetime.utcnow)
    updated_at = db.Column(db.DateTime, default=datetime.utcnow, onupdate=datetime.utcnow)
