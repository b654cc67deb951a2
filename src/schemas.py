"""
Form payloads for the dashboard.

Each model validates one HTML form. Routes build them from ``request.form``
and turn a ``ValidationError`` into a single flashed message with
:func:`first_error`.
"""

import re
from datetime import date
from typing import Literal

from pydantic import BaseModel, EmailStr, Field, ValidationError, field_validator, model_validator

SPECIAL_CHARS = '!@#$%^&*(),.?":{}|<>'
MIN_PASSWORD_LENGTH = 6
RECOMMENDED_PASSWORD_LENGTH = 8


def normalize_phone(v: str) -> str:
    # Remove everything except digits, keep a leading +
    clean = re.sub(r"[^\d]", "", v or "")
    if (v or "").strip().startswith("+"):
        clean = "+" + clean

    digits_only = clean.lstrip("+")
    if not (10 <= len(digits_only) <= 15):
        raise ValueError("Phone number must contain 10–15 digits.")
    return clean


def _require(values: dict, fields: tuple[str, ...], message: str) -> dict:
    if not isinstance(values, dict):
        return values
    for name in fields:
        if not str(values.get(name) or "").strip():
            raise ValueError(message)
    return values


def first_error(exc: ValidationError) -> str:
    """Return the first validation problem as plain text."""
    errors = exc.errors()
    if not errors:
        return "Invalid form data"
    err = errors[0]
    ctx_error = (err.get("ctx") or {}).get("error")
    if ctx_error is not None:
        return str(ctx_error)
    field = ".".join(str(p) for p in err.get("loc", ()))
    return f"{field}: {err.get('msg')}" if field else err.get("msg", "Invalid form data")


# -------------------------------
# 🔐 PASSWORD POLICY
# -------------------------------

def password_strength(password: str) -> str:
    if not password:
        return ""
    if len(password) < 6:
        return "Weak"
    if len(password) < 10:
        return "Medium"
    return "Strong"


def password_policy_messages(password: str) -> list[str]:
    """Hints shown under the new-password field; empty when the password is good."""
    messages = []
    if len(password or "") < RECOMMENDED_PASSWORD_LENGTH:
        messages.append(f"At least {RECOMMENDED_PASSWORD_LENGTH} characters")
    if not re.search(r"\d", password or ""):
        messages.append("At least one number")
    if not any(c in SPECIAL_CHARS for c in password or ""):
        messages.append("At least one special character")
    return messages


# -------------------------------
# 👤 AUTH FORMS
# -------------------------------

class LoginForm(BaseModel):
    phone: str
    password: str

    @model_validator(mode="before")
    @classmethod
    def check_required(cls, values):
        return _require(values, ("phone", "password"), "Phone number and password are required.")

    @field_validator("phone")
    @classmethod
    def validate_phone(cls, v):
        return normalize_phone(v)


class SignupForm(BaseModel):
    phone: str
    password: str
    role: Literal["admin", "superadmin"] = "admin"

    @model_validator(mode="before")
    @classmethod
    def check_required(cls, values):
        return _require(values, ("phone", "password", "role"), "Phone number, password, and role are required.")

    @field_validator("phone")
    @classmethod
    def validate_phone(cls, v):
        return normalize_phone(v)


class HospitalSignupForm(BaseModel):
    phone: str
    password: str
    confirm_password: str = ""
    hospital_name: str
    address: str = ""
    description: str = ""

    @model_validator(mode="before")
    @classmethod
    def check_required(cls, values):
        return _require(
            values,
            ("phone", "password", "hospital_name"),
            "Phone number, password, and hospital name are required.",
        )

    @field_validator("phone")
    @classmethod
    def validate_phone(cls, v):
        return normalize_phone(v)

    @field_validator("hospital_name", "address", "description")
    @classmethod
    def strip_text(cls, v):
        return v.strip()

    @model_validator(mode="after")
    def check_passwords_match(self):
        if self.password != self.confirm_password:
            raise ValueError("Passwords do not match")
        return self


class ChangePasswordForm(BaseModel):
    current_password: str
    new_password: str
    confirm_password: str

    @model_validator(mode="before")
    @classmethod
    def check_required(cls, values):
        return _require(
            values,
            ("current_password", "new_password", "confirm_password"),
            "Please fill all fields correctly",
        )

    @model_validator(mode="after")
    def check_new_password(self):
        if self.new_password != self.confirm_password:
            raise ValueError("New passwords do not match")
        if len(self.new_password) < MIN_PASSWORD_LENGTH:
            raise ValueError(f"New password must be at least {MIN_PASSWORD_LENGTH} characters")
        return self


# -------------------------------
# 🏥 RECORD FORMS
# -------------------------------

class HospitalForm(BaseModel):
    name: str
    address: str = ""
    description: str

    @model_validator(mode="before")
    @classmethod
    def check_required(cls, values):
        return _require(values, ("name", "description"), "Hospital name and description are required.")

    @field_validator("name", "address", "description")
    @classmethod
    def strip_text(cls, v):
        return v.strip()


class AppointmentForm(BaseModel):
    full_name: str = Field(min_length=1)
    email: EmailStr
    phone_number: str
    hospital_name: str = Field(min_length=1)
    hospital_id: str = Field(min_length=1)
    app_date: date
    address: str = Field(min_length=1)
    description: str = Field(min_length=1)

    @model_validator(mode="before")
    @classmethod
    def check_required(cls, values):
        return _require(
            values,
            ("full_name", "email", "phone_number", "hospital_name", "hospital_id", "app_date", "address", "description"),
            "All appointment fields are required.",
        )

    @field_validator("full_name", "hospital_name", "hospital_id", "address", "description", mode="before")
    @classmethod
    def strip_text(cls, v):
        return v.strip() if isinstance(v, str) else v

    @field_validator("phone_number")
    @classmethod
    def validate_phone(cls, v):
        return normalize_phone(v)

    def to_record(self) -> dict:
        data = self.model_dump()
        data["email"] = str(self.email)
        data["app_date"] = self.app_date.isoformat()
        return data
