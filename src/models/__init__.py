from src.models.admin_user_db import AdminUser, ROLES
from src.models.hospital_db import Hospital
from src.models.appointments_db import Appointment

__all__ = ["AdminUser", "ROLES", "Hospital", "Appointment"]
