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
Card payments through Stripe.

The driver creates a payment intent via the payment intent function. Card
entry and client-side confirmation happen in Stripe Elements on the page;
here the confirmation is simulated with a fixed wait once the intent exists.
"""

import logging
from typing import Optional

from ..constants import Constants
from ..models import PaymentConfirmation, PaymentMethod
from .base import PaymentDriver, PendingOrder, UpdateCallback
from .intent_client import PaymentIntentClient

logger = logging.getLogger(__name__)


def build_order_data(order: PendingOrder) -> dict:
    """Order details forwarded to Stripe as payment intent metadata."""
    return {
        "shipping": {
            "email": order.shipping.email,
            "phone": order.shipping.phone,
        },
        "items": [item.to_json_dict() for item in order.items],
        "totals": order.totals.to_json_dict(),
    }


class CardDriver(PaymentDriver):
    """Creates a Stripe payment intent, then reports the simulated charge."""

    method = PaymentMethod.STRIPE

    def __init__(self, client: PaymentIntentClient, delay: float = 3.0):
        super().__init__(delay=delay)
        self.client = client

    async def attempt_payment(
        self,
        order: PendingOrder,
        on_update: Optional[UpdateCallback] = None,
    ) -> PaymentConfirmation:
        # PaymentError from the client propagates before anything is confirmed
        intent = await self.client.create_payment_intent(
            amount=order.totals.total,
            currency=Constants.DEFAULT_CURRENCY,
            order_data=build_order_data(order),
        )
        intent_id = intent.get("payment_intent_id")
        logger.info(f"Payment intent {intent_id} created for {intent.get('amount')} {intent.get('currency')}")

        if on_update is not None:
            on_update(intent)

        await self._simulate_processing()

        return PaymentConfirmation(
            payment_method=self.method,
            message="Payment successful!",
            reference=intent_id,
        )
