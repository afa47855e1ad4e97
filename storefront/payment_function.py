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
Stripe Payment Intent Function

A stateless handler that brokers Stripe calls for the storefront. Every
request is a POST with a JSON body carrying an ``action``:

- create_payment_intent: ``{amount, currency="inr", orderData}``. Creates a
  Stripe PaymentIntent for ``amount`` rupees and returns its client secret.
- webhook: a Stripe event posted by Stripe itself. The event is dispatched on
  its type and a summary is logged; nothing is stored.

Responses are JSON objects with a ``success`` flag. Errors carry ``error``
and, where useful, ``details``.

The webhook only checks that a ``stripe-signature`` header and a webhook
secret are both present. The signature is NOT verified against the payload,
so the event body must not be trusted for anything beyond logging until
verification is added.
"""

import json
import logging
import math
from dataclasses import dataclass, field
from datetime import datetime, timezone
from typing import Any, Callable, Dict, Mapping, Optional

import httpx

from .config import EnvSecretStore, SecretStore
from .constants import Constants
from .errors import ConfigurationError, ProcessingError, ValidationError
from .models import generate_order_id, round_half_up

logger = logging.getLogger(__name__)


@dataclass
class FunctionResponse:
    """HTTP status and JSON body produced by the function."""
    status_code: int
    body: Dict[str, Any] = field(default_factory=dict)


def _error(status_code: int, error: str, details: Optional[str] = None) -> FunctionResponse:
    body: Dict[str, Any] = {"success": False, "error": error}
    if details is not None:
        body["details"] = details
    return FunctionResponse(status_code, body)


def _now_iso() -> str:
    return datetime.now(timezone.utc).isoformat(timespec="milliseconds").replace("+00:00", "Z")


# ============================================================================
# Webhook event handlers
# ============================================================================

def _metadata(payment_intent: Dict[str, Any]) -> Dict[str, Any]:
    return payment_intent.get("metadata") or {}


def handle_payment_success(payment_intent: Dict[str, Any]) -> Dict[str, Any]:
    """Summarise a succeeded payment intent."""
    metadata = _metadata(payment_intent)
    record = {
        "payment_intent_id": payment_intent.get("id"),
        "order_id": metadata.get("order_id"),
        "amount": (payment_intent.get("amount") or 0) / 100,
        "currency": payment_intent.get("currency"),
        "status": "paid",
        "customer_email": metadata.get("customer_email"),
        "timestamp": _now_iso(),
    }
    logger.info(f"Payment succeeded: {record}")
    return record


def handle_payment_failure(payment_intent: Dict[str, Any]) -> Dict[str, Any]:
    """Summarise a failed payment intent."""
    last_error = payment_intent.get("last_payment_error") or {}
    record = {
        "payment_intent_id": payment_intent.get("id"),
        "order_id": _metadata(payment_intent).get("order_id"),
        "failure_reason": last_error.get("message") or "Unknown error",
        "timestamp": _now_iso(),
    }
    logger.info(f"Payment failed: {record}")
    return record


def handle_payment_cancellation(payment_intent: Dict[str, Any]) -> Dict[str, Any]:
    """Summarise a canceled payment intent."""
    record = {
        "payment_intent_id": payment_intent.get("id"),
        "order_id": _metadata(payment_intent).get("order_id"),
        "cancellation_reason": payment_intent.get("cancellation_reason") or "User cancelled",
        "timestamp": _now_iso(),
    }
    logger.info(f"Payment cancelled: {record}")
    return record


EVENT_HANDLERS: Dict[str, Callable[[Dict[str, Any]], Dict[str, Any]]] = {
    Constants.EVENT_PAYMENT_SUCCEEDED: handle_payment_success,
    Constants.EVENT_PAYMENT_FAILED: handle_payment_failure,
    Constants.EVENT_PAYMENT_CANCELED: handle_payment_cancellation,
}


# ============================================================================
# Payment intent creation
# ============================================================================

def validate_amount(amount: Any) -> float:
    """
    Check the requested amount is at least the Stripe minimum.

    Raises:
        ValidationError: Missing, non-numeric, not finite or below the minimum
    """
    if isinstance(amount, bool) or not isinstance(amount, (int, float)):
        raise ValidationError("Invalid amount. Minimum amount is ₹0.50")
    if isinstance(amount, float) and not math.isfinite(amount):
        raise ValidationError("Invalid amount. Minimum amount is ₹0.50")
    if amount < Constants.MIN_PAYMENT_AMOUNT:
        raise ValidationError("Invalid amount. Minimum amount is ₹0.50")
    return float(amount)


def build_payment_intent_form(
    amount: float,
    currency: str,
    order_data: Optional[Dict[str, Any]],
) -> Dict[str, str]:
    """Stripe form-encoded parameters for a new PaymentIntent."""
    order_data = order_data or {}
    shipping = order_data.get("shipping") or {}
    items = order_data.get("items") or []

    return {
        "amount": str(round_half_up(amount * 100)),
        "currency": currency.lower(),
        "automatic_payment_methods[enabled]": "true",
        "metadata[order_id]": order_data.get("orderId") or generate_order_id(),
        "metadata[customer_email]": shipping.get("email") or "",
        "metadata[customer_phone]": shipping.get("phone") or "",
        "metadata[items_count]": str(len(items)),
    }


# ============================================================================
# Function
# ============================================================================

HttpClientFactory = Callable[[], httpx.AsyncClient]


class PaymentIntentFunction:
    """
    The payment intent function.

    Args:
        secrets: Where STRIPE_SECRET_KEY / STRIPE_WEBHOOK_SECRET are resolved
        http_client_factory: Builds the client used to call Stripe
        stripe_api_url: PaymentIntents endpoint
    """

    def __init__(
        self,
        secrets: Optional[SecretStore] = None,
        http_client_factory: Optional[HttpClientFactory] = None,
        stripe_api_url: str = Constants.STRIPE_API_URL,
    ):
        self.secrets = secrets or EnvSecretStore()
        self.http_client_factory = http_client_factory or (lambda: httpx.AsyncClient(timeout=30.0))
        self.stripe_api_url = stripe_api_url

    async def handle(
        self,
        method: str,
        headers: Mapping[str, str],
        body: bytes,
    ) -> FunctionResponse:
        """
        Entry point: route a raw HTTP request to an action.

        Args:
            method: HTTP method
            headers: Request headers (case-insensitive mapping expected)
            body: Raw request body

        Returns:
            FunctionResponse to send back
        """
        try:
            if method.upper() != "POST":
                return _error(405, "Method not allowed")

            payload = json.loads(body or b"null")
            if not isinstance(payload, dict):
                raise ProcessingError("Request body must be a JSON object")

            action = payload.get("action")
            if action == Constants.ACTION_CREATE_PAYMENT_INTENT:
                return await self.create_payment_intent(payload)
            if action == Constants.ACTION_WEBHOOK:
                return await self.handle_webhook(headers, payload)

            return _error(400, "Invalid action")

        except Exception as e:
            logger.exception("Unexpected error in payment function")
            return _error(500, "Internal server error", details=str(e))

    async def create_payment_intent(self, data: Dict[str, Any]) -> FunctionResponse:
        """Create a Stripe PaymentIntent for the requested amount."""
        try:
            amount = validate_amount(data.get("amount"))
            currency = data.get("currency") or Constants.DEFAULT_CURRENCY

            secret_key = self.secrets.get_secret(Constants.STRIPE_SECRET_KEY)
            if not secret_key:
                raise ConfigurationError("Stripe configuration missing")

            form = build_payment_intent_form(amount, currency, data.get("orderData"))

            async with self.http_client_factory() as client:
                response = await client.post(
                    self.stripe_api_url,
                    data=form,
                    headers={"Authorization": f"Bearer {secret_key}"},
                )

            if not response.is_success:
                details = _stripe_error_message(response)
                logger.warning(f"Stripe rejected payment intent ({response.status_code}): {details}")
                return _error(response.status_code, "Failed to create payment intent", details=details)

            payment_intent = response.json()
            logger.info(f"Created payment intent {payment_intent.get('id')} for {form['amount']} {form['currency']}")

            return FunctionResponse(200, {
                "success": True,
                "client_secret": payment_intent.get("client_secret"),
                "payment_intent_id": payment_intent.get("id"),
                "amount": payment_intent.get("amount"),
                "currency": payment_intent.get("currency"),
            })

        except ValidationError as e:
            return _error(400, e.message)
        except ConfigurationError as e:
            logger.error(f"{Constants.STRIPE_SECRET_KEY} is not configured")
            return _error(500, e.message)
        except Exception as e:
            logger.exception("Failed to create payment intent")
            return _error(500, "Failed to create payment intent", details=str(e))

    async def handle_webhook(
        self,
        headers: Mapping[str, str],
        event: Dict[str, Any],
    ) -> FunctionResponse:
        """Acknowledge a Stripe event and log its summary."""
        try:
            signature = headers.get(Constants.STRIPE_SIGNATURE_HEADER)
            webhook_secret = self.secrets.get_secret(Constants.STRIPE_WEBHOOK_SECRET)

            if not signature or not webhook_secret:
                return _error(400, "Missing signature or webhook secret")

            logger.warning("Webhook signature present but not verified; treat event data as untrusted")

            event_type = event.get("type")
            handler = EVENT_HANDLERS.get(event_type)
            if handler is None:
                logger.info(f"Unhandled event type: {event_type}")
            else:
                payment_intent = event["data"]["object"]
                handler(payment_intent)

            return FunctionResponse(200, {"success": True})

        except Exception as e:
            logger.exception("Webhook processing failed")
            return _error(500, "Webhook processing failed", details=str(e))


def _stripe_error_message(response: httpx.Response) -> str:
    try:
        data = response.json()
    except ValueError:
        return "Unknown error"
    error = data.get("error") if isinstance(data, dict) else None
    if isinstance(error, dict) and error.get("message"):
        return error["message"]
    return "Unknown error"
