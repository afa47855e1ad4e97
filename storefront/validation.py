# Copyright 2026 StyleHub Authors
#
# Licensed under the Apache License, Version 2.0 (the "License");
# you may not use this file except in compliance with the License.
# You may obtain a copy of the License at
#
#     http://www.apache.org/licenses/LICENSE-2.0
#
# Unless required by applicable law or agreed to in writing, software
# distributed under the License is distributed on an "AS IS" BASIS,
# WITHOUT WARRANTIES OR CONDITIONS OF ANY KIND, either express or implied.
# See the License for the specific language governing permissions and
# limitations under the License.

"""Shipping form validation."""

import re
from typing import Dict

from .errors import ValidationError
from .models import ShippingInfo

EMAIL_PATTERN = re.compile(r"\S+@\S+\.\S+")
NON_DIGITS = re.compile(r"\D")
PHONE_DIGITS = 10

REQUIRED_FIELDS = {
    "full_name": "Full name is required",
    "email": "Email is required",
    "phone": "Phone number is required",
    "address": "Address is required",
    "city": "City is required",
    "state": "State is required",
    "zip_code": "ZIP code is required",
}


def normalize_phone(phone: str) -> str:
    """Strip everything but digits from a phone number."""
    return NON_DIGITS.sub("", phone)


def validate_shipping(info: ShippingInfo) -> Dict[str, str]:
    """
    Validate a shipping form submission.

    Args:
        info: Shipping details as entered

    Returns:
        Mapping of field name to error message; empty when the form is valid
    """
    errors: Dict[str, str] = {}

    for field_name, message in REQUIRED_FIELDS.items():
        if not getattr(info, field_name).strip():
            errors[field_name] = message

    if "email" not in errors and not EMAIL_PATTERN.search(info.email):
        errors["email"] = "Invalid email format"

    if "phone" not in errors and len(normalize_phone(info.phone)) != PHONE_DIGITS:
        errors["phone"] = "Invalid phone number"

    return errors


def ensure_valid_shipping(info: ShippingInfo) -> None:
    """Raise ValidationError if the shipping form has any field errors."""
    errors = validate_shipping(info)
    if errors:
        raise ValidationError("Please fill in all required fields", field_errors=errors)
