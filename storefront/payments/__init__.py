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
Payment confirmation drivers.

- CashOnDeliveryDriver: implicit confirmation after a short delay
- UPIDriver: QR code display, then simulated verification
- CardDriver: Stripe payment intent creation, then simulated confirmation
"""

from typing import Dict, Optional

from ..config import Settings
from ..models import PaymentMethod
from .base import PaymentDriver, PendingOrder
from .card import CardDriver
from .cod import CashOnDeliveryDriver
from .intent_client import PaymentIntentClient
from .upi import UPIDriver, create_upi_request


def build_drivers(
    settings: Settings,
    intent_client: Optional[PaymentIntentClient] = None,
) -> Dict[PaymentMethod, PaymentDriver]:
    """Create one driver per payment method from settings."""
    client = intent_client or PaymentIntentClient(
        settings.payment_function_url,
        timeout=settings.payment_function_timeout,
    )
    return {
        PaymentMethod.COD: CashOnDeliveryDriver(delay=settings.cod_delay),
        PaymentMethod.UPI: UPIDriver(
            settings.upi_id,
            payee_name=settings.upi_payee_name,
            delay=settings.upi_delay,
        ),
        PaymentMethod.STRIPE: CardDriver(client, delay=settings.card_delay),
    }


__all__ = [
    "PaymentDriver",
    "PendingOrder",
    "CashOnDeliveryDriver",
    "UPIDriver",
    "CardDriver",
    "PaymentIntentClient",
    "build_drivers",
    "create_upi_request",
]
