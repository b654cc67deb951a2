from datetime import date

import pytest
from pydantic import ValidationError

from src.schemas import (
    AppointmentForm,
    ChangePasswordForm,
    HospitalForm,
    HospitalSignupForm,
    LoginForm,
    SignupForm,
    first_error,
    normalize_phone,
    password_policy_messages,
    password_strength,
)


def _error(model, **data) -> str:
    with pytest.raises(ValidationError) as exc:
        model(**data)
    return first_error(exc.value)


def test_normalize_phone_strips_formatting():
    assert normalize_phone("(555) 123-4567") == "5551234567"
    assert normalize_phone("+1 555 123 4567") == "+15551234567"


def test_normalize_phone_rejects_short_numbers():
    with pytest.raises(ValueError):
        normalize_phone("12345")


def test_login_requires_phone_and_password():
    assert _error(LoginForm, phone="", password="x") == "Phone number and password are required."
    assert _error(LoginForm, phone="15550000001") == "Phone number and password are required."


def test_signup_rejects_hospital_role():
    # hospital admins go through the hospital signup flow
    msg = _error(SignupForm, phone="15550000001", password="pw", role="hospital")
    assert "role" in msg


def test_signup_missing_fields_message():
    assert _error(SignupForm, phone="", password="", role="admin") == "Phone number, password, and role are required."


def test_hospital_signup_password_mismatch():
    msg = _error(
        HospitalSignupForm,
        phone="15550000001",
        password="abc",
        confirm_password="abd",
        hospital_name="City",
    )
    assert msg == "Passwords do not match"


def test_hospital_signup_requires_name():
    msg = _error(HospitalSignupForm, phone="15550000001", password="abc", confirm_password="abc", hospital_name=" ")
    assert msg == "Phone number, password, and hospital name are required."


def test_hospital_form_trims_and_requires_description():
    form = HospitalForm(name="  City General ", description=" Beds ")
    assert form.name == "City General"
    assert form.address == ""
    assert _error(HospitalForm, name="City", description="") == "Hospital name and description are required."


def test_appointment_form_to_record():
    form = AppointmentForm(
        full_name=" Jane Doe ",
        email="jane@example.com",
        phone_number="555-123-4567",
        hospital_name="City General",
        hospital_id="abc",
        app_date="2030-01-15",
        address="1 Main St",
        description="Checkup",
    )
    record = form.to_record()
    assert record["app_date"] == "2030-01-15"
    assert record["full_name"] == "Jane Doe"
    assert record["phone_number"] == "5551234567"
    assert form.app_date == date(2030, 1, 15)


def test_appointment_form_requires_every_field():
    assert _error(AppointmentForm, full_name="Jane") == "All appointment fields are required."


def test_appointment_form_rejects_bad_email():
    with pytest.raises(ValidationError):
        AppointmentForm(
            full_name="Jane",
            email="not-an-email",
            phone_number="5551234567",
            hospital_name="City",
            hospital_id="abc",
            app_date="2030-01-15",
            address="1 Main St",
            description="Checkup",
        )


def test_change_password_rules():
    assert _error(ChangePasswordForm, current_password="a", new_password="", confirm_password="") == (
        "Please fill all fields correctly"
    )
    assert _error(ChangePasswordForm, current_password="a", new_password="abcdef", confirm_password="abcdeg") == (
        "New passwords do not match"
    )
    assert "at least 6" in _error(ChangePasswordForm, current_password="a", new_password="abc", confirm_password="abc")
    assert ChangePasswordForm(current_password="a", new_password="abcdef", confirm_password="abcdef")


@pytest.mark.parametrize(
    "password, expected",
    [("", ""), ("abc", "Weak"), ("abcdefg", "Medium"), ("abcdefghijk", "Strong")],
)
def test_password_strength(password, expected):
    assert password_strength(password) == expected


def test_password_policy_messages():
    assert password_policy_messages("short") == [
        "At least 8 characters",
        "At least one number",
        "At least one special character",
    ]
    assert password_policy_messages("longenough1!") == []
