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
Order finalization and confirmation read-back.

``OrderFinalizer.finalize`` turns a confirmed payment into an order snapshot,
writes it to session storage as a single JSON value (replacing any previous
order), empties the cart and hands off to the confirmation page.

``load_last_order`` and ``build_confirmation`` serve the confirmation page:
the stored snapshot plus display-only data derived from it.
"""

import logging
from datetime import date, datetime, timedelta, timezone
from typing import Callable, List, Optional

from pydantic import BaseModel

from .cart import CartStore
from .constants import Constants
from .models import (
    CartItem,
    OrderSnapshot,
    OrderTotals,
    PaymentMethod,
    ShippingInfo,
    generate_order_id,
)
from .session_store import SessionStorage

logger = logging.getLogger(__name__)

Navigate = Callable[[str], None]


class OrderFinalizer:
    """
    Builds and stores the order snapshot once payment is confirmed.

    Calling ``finalize`` twice creates two orders; callers are responsible for
    invoking it once per confirmed payment.
    """

    def __init__(
        self,
        storage: SessionStorage,
        cart: CartStore,
        navigate: Optional[Navigate] = None,
    ):
        self.storage = storage
        self.cart = cart
        self.navigate = navigate

    def finalize(
        self,
        items: List[CartItem],
        shipping: ShippingInfo,
        payment_method: PaymentMethod,
        totals: OrderTotals,
        now: Optional[datetime] = None,
    ) -> OrderSnapshot:
        """
        Create the order snapshot, persist it, clear the cart and navigate.

        Args:
            items: Cart lines at confirmation time (copied into the snapshot)
            shipping: Validated shipping details
            payment_method: Method that confirmed the payment
            totals: Totals shown to the buyer at checkout
            now: Creation time; defaults to the current UTC time

        Returns:
            The stored OrderSnapshot
        """
        now = now or datetime.now(timezone.utc)
        snapshot = OrderSnapshot(
            order_id=generate_order_id(now),
            items=[item.model_copy(deep=True) for item in items],
            shipping=shipping.model_copy(deep=True),
            payment_method=payment_method,
            totals=totals.model_copy(),
            status=Constants.ORDER_STATUS_CONFIRMED,
            timestamp=now.isoformat(timespec="milliseconds").replace("+00:00", "Z"),
        )

        self.storage.set_item(
            Constants.SESSION_LAST_ORDER_KEY,
            snapshot.model_dump_json(by_alias=True),
        )
        self.cart.complete_checkout()

        logger.info(
            f"Order {snapshot.order_id} confirmed: {len(snapshot.items)} item(s), "
            f"{payment_method.value}, total {totals.total}"
        )

        if self.navigate is not None:
            self.navigate(Constants.CONFIRMATION_PATH)

        return snapshot


def load_last_order(storage: SessionStorage) -> Optional[OrderSnapshot]:
    """Return the stored order snapshot, or None when there is none."""
    raw = storage.get_item(Constants.SESSION_LAST_ORDER_KEY)
    if raw is None:
        return None
    return OrderSnapshot.model_validate_json(raw)


def estimated_delivery(payment_method: PaymentMethod, today: date) -> date:
    days = (
        Constants.COD_DELIVERY_DAYS
        if payment_method == PaymentMethod.COD
        else Constants.PREPAID_DELIVERY_DAYS
    )
    return today + timedelta(days=days)


def format_display_date(value: date) -> str:
    """e.g. ``Monday, 26 October 2026``"""
    return f"{value:%A}, {value.day} {value:%B} {value.year}"


class OrderConfirmation(BaseModel):
    """What the confirmation page shows for the last order."""
    order: OrderSnapshot
    payment_method_name: str
    payment_method_icon: str
    estimated_delivery: date
    estimated_delivery_display: str
    item_count_label: str
    amount_due_on_delivery: Optional[float] = None

    def to_json_dict(self) -> dict:
        data = self.model_dump(mode="json", exclude={"order"})
        data["order"] = self.order.to_json_dict()
        return data


def build_confirmation(snapshot: OrderSnapshot, now: Optional[datetime] = None) -> OrderConfirmation:
    """Derive the confirmation page view from a stored snapshot."""
    now = now or datetime.now(timezone.utc)
    delivery = estimated_delivery(snapshot.payment_method, now.date())
    count = len(snapshot.items)

    return OrderConfirmation(
        order=snapshot,
        payment_method_name=snapshot.payment_method.display_name,
        payment_method_icon=snapshot.payment_method.icon,
        estimated_delivery=delivery,
        estimated_delivery_display=format_display_date(delivery),
        item_count_label=f"{count} {'item' if count == 1 else 'items'}",
        amount_due_on_delivery=(
            snapshot.totals.total if snapshot.payment_method == PaymentMethod.COD else None
        ),
    )
