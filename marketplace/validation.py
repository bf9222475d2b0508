import re
import uuid

from marketplace.services.errors import ValidationError

EMAIL_REGEX = r'^[a-zA-Z0-9_.+-]+@[a-zA-Z0-9-]+\.[a-zA-Z0-9-.]+$'
CONTACT_NUMBER_REGEX = r'^\d{10}$'
MIN_PASSWORD_LENGTH = 8


def parse_uuid(value, field):
    if isinstance(value, uuid.UUID):
        return value
    if not value or not isinstance(value, str):
        raise ValidationError(f"Missing field: {field}")
    try:
        return uuid.UUID(value)
    except ValueError:
        raise ValidationError(f"Invalid {field}: {value}")


def require_fields(data, fields):
    missing = [f for f in fields if data.get(f) in (None, "")]
    if missing:
        raise ValidationError(f"Missing fields: {', '.join(missing)}")


def validate_email(email):
    if not isinstance(email, str) or not re.match(EMAIL_REGEX, email):
        raise ValidationError("Invalid email format")


def validate_contact_number(contact_number):
    if not re.match(CONTACT_NUMBER_REGEX, str(contact_number)):
        raise ValidationError("Contact number must be 10 digits")


def validate_age(age):
    if isinstance(age, bool) or not isinstance(age, int) or age < 1:
        raise ValidationError("Age must be a positive integer")


def validate_password(password):
    if not isinstance(password, str) or len(password) < MIN_PASSWORD_LENGTH:
        raise ValidationError(f"Password must be at least {MIN_PASSWORD_LENGTH} characters")


def json_object(data):
    """Body of a JSON request; anything but an object is rejected."""
    if data is None:
        return {}
    if not isinstance(data, dict):
        raise ValidationError("Request body must be a JSON object")
    return data


def require_str(data, fields):
    for field in fields:
        if data.get(field) is not None and not isinstance(data[field], str):
            raise ValidationError(f"{field} must be a string")
