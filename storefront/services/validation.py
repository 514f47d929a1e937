"""
Checkout form validation.

Each field validator takes a raw value and returns None when the value is
acceptable, or the message to show next to the field.
"""

import re
from dataclasses import asdict, dataclass
from typing import Any, Callable, Mapping, Optional

PHONE_REGEX = re.compile(r"^\+?(\d{1,3})?[-.\s]?(\(?\d{3}\)?[-.\s]?)?(\d[-.\s]?){6,15}\d$")
EMAIL_REGEX = re.compile(r"^[^\s@]+@[^\s@]+\.[^\s@]+$")
MIN_PHONE_DIGITS = 7
MAX_PHONE_DIGITS = 16

REQUIRED_FIELDS = ("name", "phone", "email", "address")


@dataclass
class CheckoutForm:
    """Values typed into the checkout form"""
    name: str = ""
    phone: str = ""
    email: str = ""
    address: str = ""
    organization: str = ""
    notes: str = ""

    def to_dict(self) -> dict[str, str]:
        return asdict(self)

    def customer(self) -> dict[str, str]:
        """Customer block of an order request"""
        return {
            "name": self.name.strip(),
            "organization": self.organization.strip(),
            "phone": self.phone.strip(),
            "email": self.email.strip(),
            "address": self.address.strip(),
        }


def _text(value: Any) -> str:
    return value.strip() if isinstance(value, str) else ""


def validate_name(value: Any) -> Optional[str]:
    name = _text(value)
    if not name:
        return "Name is required"
    if len(name) < 2:
        return "Name must be at least 2 characters"
    return None


def validate_phone(value: Any) -> Optional[str]:
    phone = _text(value)
    if not phone:
        return "Phone number is required"
    digits = sum(ch.isdigit() for ch in phone)
    if not PHONE_REGEX.match(phone) or not MIN_PHONE_DIGITS <= digits <= MAX_PHONE_DIGITS:
        return "Please enter a valid phone number (e.g., +1-555-123-4567)"
    return None


def validate_email(value: Any) -> Optional[str]:
    email = _text(value)
    if not email:
        return "Email is required"
    if not EMAIL_REGEX.match(email):
        return "Please enter a valid email address"
    return None


def validate_address(value: Any) -> Optional[str]:
    address = _text(value)
    if not address:
        return "Address is required"
    if len(address) < 10:
        return "Address must be at least 10 characters"
    return None


FIELD_VALIDATORS: dict[str, Callable[[Any], Optional[str]]] = {
    "name": validate_name,
    "phone": validate_phone,
    "email": validate_email,
    "address": validate_address,
}


def validate_field(name: str, value: Any) -> Optional[str]:
    """Validate one field; optional fields always pass"""
    validator = FIELD_VALIDATORS.get(name)
    return validator(value) if validator else None


def validate_checkout_form(form: Mapping[str, Any]) -> dict[str, str]:
    """Run every required-field validator and collect all errors by field"""
    errors = {}
    for field_name in REQUIRED_FIELDS:
        error = validate_field(field_name, form.get(field_name))
        if error:
            errors[field_name] = error
    return errors
