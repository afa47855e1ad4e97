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

"""Common interface for payment confirmation drivers."""

import asyncio
from abc import ABC, abstractmethod
from dataclasses import dataclass
from typing import Any, Callable, List, Optional

from ..models import CartItem, OrderTotals, PaymentConfirmation, PaymentMethod, ShippingInfo


@dataclass(frozen=True)
class PendingOrder:
    """Everything a driver needs to take payment for the current cart."""
    items: List[CartItem]
    shipping: ShippingInfo
    payment_method: PaymentMethod
    totals: OrderTotals


# Called by a driver when it has something to show the buyer mid-payment
UpdateCallback = Callable[[Any], None]


class PaymentDriver(ABC):
    """
    Confirms payment for a pending order.

    ``attempt_payment`` either returns a PaymentConfirmation or raises
    PaymentError. Cancelling the awaiting task abandons the attempt.
    """

    method: PaymentMethod

    def __init__(self, delay: float = 0.0):
        self.delay = delay

    async def _simulate_processing(self) -> None:
        """Stand-in for waiting on the provider's confirmation."""
        await asyncio.sleep(max(self.delay, 0))

    @abstractmethod
    async def attempt_payment(
        self,
        order: PendingOrder,
        on_update: Optional[UpdateCallback] = None,
    ) -> PaymentConfirmation:
        """Take payment for the order."""
