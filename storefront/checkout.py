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
Checkout Flow

Drives one buyer through checkout:

    start -> fill shipping -> pick payment method -> submit
          -> driver confirms (COD / UPI / card) -> finalize -> confirmation

Each submit starts a payment *attempt*: an asyncio task tagged with an
increasing attempt number. Cancelling, switching payment method or closing
the flow moves the current attempt number on, so a driver that finishes late
(for example the UPI timer after the buyer left the page) is ignored instead
of finalizing an order nobody is looking at.

The flow also keeps the state a checkout page renders: busy flag, field
errors, toast messages, the UPI QR request and where to navigate next.
"""

import asyncio
import logging
from enum import Enum
from typing import Any, Dict, List, Optional

from pydantic import BaseModel, Field

from .cart import CartStore
from .constants import Constants
from .errors import CheckoutError, EmptyCartError, PaymentError, ValidationError
from .models import (
    OrderSnapshot,
    OrderTotals,
    PaymentMethod,
    ShippingInfo,
    UPIPaymentRequest,
    compute_order_totals,
)
from .orders import OrderFinalizer
from .payments.base import PaymentDriver, PendingOrder
from .session_store import SessionStorage
from .validation import validate_shipping

logger = logging.getLogger(__name__)


def _log_unobserved_failure(task: asyncio.Task) -> None:
    # Attempts started in the background may never be awaited
    if task.cancelled():
        return
    error = task.exception()
    if error is not None and not isinstance(error, PaymentError):
        logger.error("Payment attempt crashed", exc_info=error)


class CheckoutStatus(str, Enum):
    """Where the buyer is in the checkout."""
    IDLE = "idle"
    PROCESSING = "processing"
    AWAITING_UPI = "awaiting_upi"
    CONFIRMED = "confirmed"


class ToastLevel(str, Enum):
    INFO = "info"
    SUCCESS = "success"
    ERROR = "error"


class Toast(BaseModel):
    """A transient notification for the buyer."""
    type: ToastLevel
    content: str


class CheckoutState(BaseModel):
    """Snapshot of the flow for rendering."""
    status: CheckoutStatus
    busy: bool
    payment_method: PaymentMethod
    shipping: Dict[str, Any]
    errors: Dict[str, str] = Field(default_factory=dict)
    totals: Optional[Dict[str, Any]] = None
    upi_request: Optional[Dict[str, Any]] = None
    messages: List[Toast] = Field(default_factory=list)
    redirect_to: Optional[str] = None
    order_id: Optional[str] = None


class CheckoutFlow:
    """
    Orchestrates shipping validation, payment and order finalization.

    Args:
        cart: The session's cart
        storage: The session's storage (receives the order snapshot)
        drivers: Payment driver per payment method
    """

    def __init__(
        self,
        cart: CartStore,
        storage: SessionStorage,
        drivers: Dict[PaymentMethod, PaymentDriver],
    ):
        self.cart = cart
        self.storage = storage
        self.drivers = drivers
        self.finalizer = OrderFinalizer(storage, cart, navigate=self._navigate)

        self.shipping = ShippingInfo()
        self.payment_method = PaymentMethod.COD
        self.errors: Dict[str, str] = {}
        self.totals: Optional[OrderTotals] = None

        self.status = CheckoutStatus.IDLE
        self.busy = False
        self.upi_request: Optional[UPIPaymentRequest] = None
        self.order: Optional[OrderSnapshot] = None
        self.redirect_to: Optional[str] = None

        self._messages: List[Toast] = []
        self._attempt = 0
        self._task: Optional[asyncio.Task] = None
        self._closed = False

    # ------------------------------------------------------------------
    # Page state
    # ------------------------------------------------------------------

    def notify(self, level: ToastLevel, content: str) -> None:
        self._messages.append(Toast(type=level, content=content))

    def drain_messages(self) -> List[Toast]:
        """Return and forget pending toasts."""
        messages, self._messages = self._messages, []
        return messages

    def _navigate(self, path: str) -> None:
        self.redirect_to = path

    def get_state(self, drain: bool = True) -> CheckoutState:
        messages = self.drain_messages() if drain else list(self._messages)
        show_qr = self.upi_request is not None and self.payment_method == PaymentMethod.UPI
        return CheckoutState(
            status=self.status,
            busy=self.busy,
            payment_method=self.payment_method,
            shipping=self.shipping.to_json_dict(),
            errors=dict(self.errors),
            totals=self.totals.to_json_dict() if self.totals else None,
            upi_request=self.upi_request.to_json_dict() if show_qr else None,
            messages=messages,
            redirect_to=self.redirect_to,
            order_id=self.order.order_id if self.order else None,
        )

    @property
    def is_pending(self) -> bool:
        return self._task is not None and not self._task.done()

    # ------------------------------------------------------------------
    # Form input
    # ------------------------------------------------------------------

    def start(self) -> OrderTotals:
        """
        Enter checkout for the current cart.

        Raises:
            EmptyCartError: The cart has no items
        """
        if self.cart.count == 0:
            self.notify(ToastLevel.ERROR, "Your cart is empty")
            self.redirect_to = Constants.CART_PATH
            raise EmptyCartError(redirect_to=Constants.CART_PATH)

        self.totals = compute_order_totals(self.cart.total)
        self.cart.start_checkout(self.totals)
        self.redirect_to = None
        return self.totals

    def update_shipping(self, **fields: str) -> ShippingInfo:
        """Update shipping fields and clear their stale errors."""
        self._ensure_open()
        unknown = set(fields) - set(ShippingInfo.model_fields)
        if unknown:
            raise ValidationError(f"Unknown shipping field(s): {', '.join(sorted(unknown))}")

        self.shipping = self.shipping.model_copy(update=fields)
        for name in fields:
            self.errors.pop(name, None)
        return self.shipping

    def select_method(self, method: PaymentMethod) -> None:
        """Switch payment method; a pending attempt for another method is abandoned."""
        self._ensure_open()
        method = PaymentMethod(method)
        if method != self.payment_method and self.is_pending:
            logger.info(f"Payment method switched to {method.value}, abandoning pending attempt")
            self._abandon_attempt()
        self.payment_method = method

    # ------------------------------------------------------------------
    # Payment
    # ------------------------------------------------------------------

    def validate(self) -> bool:
        self.errors = validate_shipping(self.shipping)
        return not self.errors

    async def submit(self) -> "asyncio.Task[Optional[OrderSnapshot]]":
        """
        Validate the form and start a payment attempt.

        Returns:
            The task running the attempt. It resolves to the order snapshot,
            to None if the attempt was superseded, or raises PaymentError.

        Raises:
            EmptyCartError: The cart was emptied after checkout started
            ValidationError: Shipping details are incomplete or invalid
            CheckoutError: An attempt is already running or the order is placed
        """
        self._ensure_open()
        if self.is_pending:
            raise CheckoutError("A payment is already in progress")

        # Reprice the cart as it is now
        self.start()

        if not self.validate():
            self.notify(ToastLevel.ERROR, "Please fill in all required fields")
            raise ValidationError("Please fill in all required fields", field_errors=self.errors)

        driver = self.drivers.get(self.payment_method)
        if driver is None:
            raise CheckoutError(f"Payment method {self.payment_method.value} is not available")

        self._attempt += 1
        attempt = self._attempt
        pending = PendingOrder(
            items=self.cart.items,
            shipping=self.shipping.model_copy(),
            payment_method=self.payment_method,
            totals=self.totals,
        )

        self.busy = True
        if self.payment_method == PaymentMethod.UPI:
            self.status = CheckoutStatus.AWAITING_UPI
        else:
            self.status = CheckoutStatus.PROCESSING
            if self.payment_method == PaymentMethod.STRIPE:
                self.notify(ToastLevel.INFO, "Redirecting to Stripe payment...")

        logger.info(f"Starting payment attempt {attempt} via {self.payment_method.value}")
        task = asyncio.create_task(self._run_attempt(attempt, driver, pending))
        task.add_done_callback(_log_unobserved_failure)
        self._task = task

        # Let the driver run up to its first wait so the UPI QR is ready to show
        await asyncio.sleep(0)
        return task

    async def pay(self) -> Optional[OrderSnapshot]:
        """
        Submit and wait for the attempt to finish.

        Returns None when the attempt is cancelled or superseded while waiting.
        """
        task = await self.submit()
        # wait() does not re-raise the attempt's own cancellation
        await asyncio.wait({task})
        if task.cancelled():
            logger.info("Payment attempt was abandoned while waiting for it")
            return None
        return task.result()

    def _is_current(self, attempt: int) -> bool:
        return attempt == self._attempt and not self._closed

    def _on_driver_update(self, attempt: int, update: Any) -> None:
        if not self._is_current(attempt):
            return
        if isinstance(update, UPIPaymentRequest):
            self.upi_request = update
            self.notify(ToastLevel.INFO, "Scan the QR code to pay via UPI")

    async def _run_attempt(
        self,
        attempt: int,
        driver: PaymentDriver,
        pending: PendingOrder,
    ) -> Optional[OrderSnapshot]:
        try:
            confirmation = await driver.attempt_payment(
                pending,
                on_update=lambda update: self._on_driver_update(attempt, update),
            )
        except PaymentError as e:
            if self._is_current(attempt):
                self.busy = False
                self.status = CheckoutStatus.IDLE
                self.upi_request = None
                self.notify(ToastLevel.ERROR, e.message)
            logger.warning(f"Payment attempt {attempt} failed: {e.message} ({e.details})")
            raise

        if not self._is_current(attempt):
            logger.info(f"Discarding stale confirmation from attempt {attempt}")
            return None

        self.notify(ToastLevel.SUCCESS, confirmation.message)
        snapshot = self.finalizer.finalize(
            items=pending.items,
            shipping=pending.shipping,
            payment_method=pending.payment_method,
            totals=pending.totals,
        )
        self.order = snapshot
        self.status = CheckoutStatus.CONFIRMED
        self.busy = False
        self.upi_request = None
        return snapshot

    # ------------------------------------------------------------------
    # Teardown
    # ------------------------------------------------------------------

    def _abandon_attempt(self) -> None:
        self._attempt += 1
        if self._task is not None and not self._task.done():
            self._task.cancel()
        self._task = None
        self.busy = False
        self.upi_request = None
        if self.status != CheckoutStatus.CONFIRMED:
            self.status = CheckoutStatus.IDLE

    def cancel(self) -> None:
        """Abandon the pending attempt, if any, and return to the form."""
        if self.is_pending:
            logger.info(f"Payment attempt {self._attempt} cancelled")
        self._abandon_attempt()

    def close(self) -> None:
        """Tear the flow down; late driver results are ignored from now on."""
        self._abandon_attempt()
        self._closed = True

    def _ensure_open(self) -> None:
        if self._closed:
            raise CheckoutError("Checkout session is closed")
        if self.status == CheckoutStatus.CONFIRMED:
            raise CheckoutError("This order has already been placed")
