from extensions import db
from datetime import datetime
from uuid import uuid4

class Appointment(db.Model):
    __tablename__ = "appointments"

    id = db.Column(db.String(32), primary_key=True, default=lambda: uuid4().hex)
    full_name = db.Column(db.String(100), nullable=False)
    email = db.Column(db.String(120), nullable=False)
    phone_number = db.Column(db.String(20), nullable=False)

    # Denormalised copy of the hospital, no foreign key
    hospital_id = db.Column(db.String(32), nullable=False)
    hospital_name = db.Column(db.String(200), nullable=False)

    app_date = db.Column(db.String(20), nullable=False)  # YYYY-MM-DD
    address = db.Column(db.String(300), nullable=False)
    description = db.Column(db.Text, nullable=False)
    created_at = db.Column(db.DateTime, default=datetime.utcnow)
    updated_at = db.Column(db.DateTime, default=datetime.utcnow, onupdate=datetime.utcnow)
