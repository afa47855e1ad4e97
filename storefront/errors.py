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

"""
Storefront error taxonomy.

- ValidationError: field-level, user-correctable, blocks submission
- PaymentError: a payment driver could not confirm; the user may retry
- ConfigurationError: a required secret or endpoint is missing
- ProcessingError: unexpected failure inside the payment intent function
- CheckoutError / EmptyCartError: the checkout flow was driven out of order
- NotFoundError: unknown session, product or review
"""

from enum import Enum
from typing import Dict, Optional


class ErrorCode(str, Enum):
    """Machine-readable error codes returned in API error bodies."""
    VALIDATION_FAILED = "validation_failed"
    PAYMENT_FAILED = "payment_failed"
    CONFIGURATION_MISSING = "configuration_missing"
    PROCESSING_FAILED = "processing_failed"
    INVALID_STATE = "invalid_state"
    CART_EMPTY = "cart_empty"
    NOT_FOUND = "not_found"


class StorefrontError(Exception):
    """Base class for all storefront errors."""

    code = ErrorCode.PROCESSING_FAILED
    http_status = 500

    def __init__(self, message: str, details: Optional[str] = None):
        super().__init__(message)
        self.message = message
        self.details = details

    def to_dict(self) -> dict:
        data = {"code": self.code.value, "message": self.message}
        if self.details:
            data["details"] = self.details
        return data


class ValidationError(StorefrontError):
    """Raised when user input fails validation."""

    code = ErrorCode.VALIDATION_FAILED
    http_status = 400

    def __init__(self, message: str, field_errors: Optional[Dict[str, str]] = None):
        super().__init__(message)
        self.field_errors = dict(field_errors or {})

    def to_dict(self) -> dict:
        data = super().to_dict()
        if self.field_errors:
            data["errors"] = self.field_errors
        return data


class PaymentError(StorefrontError):
    """Raised when a payment driver cannot confirm a payment."""

    code = ErrorCode.PAYMENT_FAILED
    http_status = 402


class ConfigurationError(StorefrontError):
    """Raised when a secret or endpoint needed at call time is missing."""

    code = ErrorCode.CONFIGURATION_MISSING
    http_status = 500


class ProcessingError(StorefrontError):
    """Raised for unexpected failures while processing a request."""

    code = ErrorCode.PROCESSING_FAILED


class CheckoutError(StorefrontError):
    """Raised when a checkout operation is not allowed in the current state."""

    code = ErrorCode.INVALID_STATE
    http_status = 409


class EmptyCartError(CheckoutError):
    """Raised when checkout starts with nothing in the cart."""

    code = ErrorCode.CART_EMPTY
    http_status = 400

    def __init__(self, message: str = "Your cart is empty", redirect_to: str = "/cart"):
        super().__init__(message)
        self.redirect_to = redirect_to

    def to_dict(self) -> dict:
        data = super().to_dict()
        data["redirect_to"] = self.redirect_to
        return data


class NotFoundError(StorefrontError):
    """Raised when a session, product or review does not exist."""

    code = ErrorCode.NOT_FOUND
    http_status = 404
