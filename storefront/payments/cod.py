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

"""Cash on delivery: settlement happens at the door, so confirmation is implicit."""

import logging
from typing import Optional

from ..models import PaymentConfirmation, PaymentMethod
from .base import PaymentDriver, PendingOrder, UpdateCallback

logger = logging.getLogger(__name__)


class CashOnDeliveryDriver(PaymentDriver):
    """Always succeeds after a short simulated processing delay."""

    method = PaymentMethod.COD

    async def attempt_payment(
        self,
        order: PendingOrder,
        on_update: Optional[UpdateCallback] = None,
    ) -> PaymentConfirmation:
        logger.info(f"Placing cash on delivery order for {order.totals.total}")
        await self._simulate_processing()
        return PaymentConfirmation(
            payment_method=self.method,
            message="Order placed successfully! Cash on Delivery selected.",
        )
