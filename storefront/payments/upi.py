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
UPI QR payments.

The driver builds a ``upi://pay`` request URI, renders it as a QR image URL
through the public QR Server API and shows it to the buyer. There is no UPI
callback wired in yet: after a fixed wait the payment is reported as verified.
A real integration replaces that wait with a webhook or a short poll against
the PSP.
"""

import logging
from datetime import datetime
from typing import Optional
from urllib.parse import quote, urlencode

from ..constants import Constants
from ..models import PaymentConfirmation, PaymentMethod, UPIPaymentRequest, generate_order_id
from .base import PaymentDriver, PendingOrder, UpdateCallback

logger = logging.getLogger(__name__)

# Characters encodeURIComponent leaves alone
_URI_COMPONENT_SAFE = "-_.!~*'()"


def format_amount(amount: float) -> str:
    """Render an amount without a trailing ``.0`` for whole numbers."""
    if float(amount).is_integer():
        return str(int(amount))
    return str(amount)


def build_upi_uri(upi_id: str, payee_name: str, amount: float, order_id: str) -> str:
    return (
        f"upi://pay?pa={upi_id}&pn={payee_name}&am={format_amount(amount)}"
        f"&cu={Constants.UPI_CURRENCY}&tn=Payment for Order {order_id}"
    )


def build_qr_image_url(data: str) -> str:
    query = urlencode({"size": Constants.QR_SIZE})
    return f"{Constants.QR_SERVER_URL}?{query}&data={quote(data, safe=_URI_COMPONENT_SAFE)}"


def create_upi_request(
    upi_id: str,
    payee_name: str,
    amount: float,
    now: Optional[datetime] = None,
) -> UPIPaymentRequest:
    """
    Build the UPI request shown to the buyer.

    Args:
        upi_id: Merchant VPA receiving the payment
        payee_name: Name shown in the buyer's UPI app
        amount: Order total in rupees
        now: Creation time used for the generated order id

    Returns:
        UPIPaymentRequest with the request URI and its QR image URL
    """
    order_id = generate_order_id(now)
    upi_uri = build_upi_uri(upi_id, payee_name, amount, order_id)
    return UPIPaymentRequest(
        upi_id=upi_id,
        amount=amount,
        generated_order_id=order_id,
        upi_uri=upi_uri,
        qr_image_url=build_qr_image_url(upi_uri),
    )


class UPIDriver(PaymentDriver):
    """Shows a UPI QR code, then reports success after the confirmation delay."""

    method = PaymentMethod.UPI

    def __init__(self, upi_id: str, payee_name: str = Constants.MERCHANT_NAME, delay: float = 10.0):
        super().__init__(delay=delay)
        self.upi_id = upi_id
        self.payee_name = payee_name

    async def attempt_payment(
        self,
        order: PendingOrder,
        on_update: Optional[UpdateCallback] = None,
    ) -> PaymentConfirmation:
        request = create_upi_request(self.upi_id, self.payee_name, order.totals.total)
        logger.info(f"Waiting for UPI payment {request.generated_order_id} of {request.amount}")

        if on_update is not None:
            on_update(request)

        # TODO: replace the fixed wait with the PSP's collect-status callback
        await self._simulate_processing()

        return PaymentConfirmation(
            payment_method=self.method,
            message="UPI payment verified!",
            reference=request.generated_order_id,
        )
