from datetime import datetime
from uuid import uuid4

from extensions import db

class Hospital(db.Model):
    __tablename__ = "hospitals"

    id = db.Column(db.String(32), primary_key=True, default=lambda: uuid4().hex)
    name = db.Column(db.String(200), nullable=False)
    address = db.Column(db.String(300), default="")
    description = db.Column(db.Text, default="")
    photo = db.Column(db.String(300), default="")  # storage key under UPLOAD_FOLDER
    status = db.Column(db.String(20), default="active")
    admin_id = db.Column(db.String(32))
    created_at = db.Column(db.DateTime, default=datetime.utcnow)
    updated_at = db.Column(db.DateTime, default=datetime.utcnow, onupdate=datetime.utcnow)
