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

"""HTTP client for the payment intent function."""

import logging
from typing import Any, Dict, Optional

import httpx

from ..constants import Constants
from ..errors import PaymentError

logger = logging.getLogger(__name__)


class PaymentIntentClient:
    """
    Calls the payment intent function's ``create_payment_intent`` action.

    Args:
        url: Full URL of the payment function; None means not configured
        timeout: Request timeout in seconds
        transport: Optional httpx transport (used to route calls in-process)
    """

    def __init__(
        self,
        url: Optional[str],
        timeout: float = 30.0,
        transport: Optional[httpx.AsyncBaseTransport] = None,
    ):
        self.url = url
        self.timeout = timeout
        self.transport = transport

    async def create_payment_intent(
        self,
        amount: float,
        currency: str = Constants.DEFAULT_CURRENCY,
        order_data: Optional[Dict[str, Any]] = None,
    ) -> Dict[str, Any]:
        """
        Ask the payment function to create a payment intent.

        Returns:
            The function's success payload (client_secret, payment_intent_id,
            amount, currency)

        Raises:
            PaymentError: The function is not configured, unreachable, or
                answered with a non-2xx status
        """
        if not self.url:
            raise PaymentError("Card payments are not configured")

        body = {
            "action": Constants.ACTION_CREATE_PAYMENT_INTENT,
            "amount": amount,
            "currency": currency,
            "orderData": order_data or {},
        }

        try:
            async with httpx.AsyncClient(timeout=self.timeout, transport=self.transport) as client:
                response = await client.post(self.url, json=body)
        except httpx.HTTPError as e:
            logger.warning(f"Payment function unreachable at {self.url}: {e}")
            raise PaymentError("Payment failed. Please try again.", details=str(e)) from e

        if not response.is_success:
            details = _error_details(response)
            logger.warning(f"Payment intent rejected ({response.status_code}): {details}")
            raise PaymentError("Payment failed. Please try again.", details=details)

        return response.json()


def _error_details(response: httpx.Response) -> str:
    try:
        data = response.json()
    except ValueError:
        return response.text or f"HTTP {response.status_code}"
    return data.get("details") or data.get("error") or f"HTTP {response.status_code}"
