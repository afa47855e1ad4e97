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
Checkout data model.

All models serialize with camelCase keys (``fullName``, ``orderId``...) so the
stored order snapshot keeps the same JSON shape the storefront pages read,
while Python code uses snake_case attributes.
"""

from datetime import datetime, timezone
from decimal import Decimal, ROUND_HALF_UP
from enum import Enum
from typing import List, Optional

from pydantic import BaseModel, ConfigDict, Field
from pydantic.alias_generators import to_camel

from .constants import Constants


class CamelModel(BaseModel):
    """Base model with camelCase JSON aliases."""
    model_config = ConfigDict(alias_generator=to_camel, populate_by_name=True)

    def to_json_dict(self) -> dict:
        return self.model_dump(mode="json", by_alias=True)


class PaymentMethod(str, Enum):
    """Payment methods offered at checkout."""
    COD = "cod"
    UPI = "upi"
    STRIPE = "stripe"

    @property
    def display_name(self) -> str:
        return _PAYMENT_DISPLAY[self][0]

    @property
    def icon(self) -> str:
        return _PAYMENT_DISPLAY[self][1]


_PAYMENT_DISPLAY = {
    PaymentMethod.COD: ("Cash on Delivery", "Truck"),
    PaymentMethod.UPI: ("UPI Payment", "Smartphone"),
    PaymentMethod.STRIPE: ("Credit/Debit Card", "CreditCard"),
}


class ShippingInfo(CamelModel):
    """Shipping address entered on the checkout form."""
    full_name: str = ""
    email: str = ""
    phone: str = ""
    address: str = ""
    city: str = ""
    state: str = ""
    zip_code: str = ""
    country: str = "India"


class CartItem(CamelModel):
    """A line in the cart: one product in one size."""
    product_id: int
    name: str
    brand: Optional[str] = None
    price: float = Field(..., ge=0)
    quantity: int = Field(1, ge=1)
    selected_size: Optional[str] = None
    image: Optional[str] = None

    @property
    def line_total(self) -> float:
        return self.price * self.quantity


class OrderTotals(CamelModel):
    """Derived order amounts in currency units."""
    subtotal: float = Field(..., ge=0)
    shipping: float = Field(..., ge=0)
    tax: float = Field(..., ge=0)
    total: float = Field(..., ge=0)


def round_half_up(value: float, places: int = 0) -> float:
    """Round like the storefront's currency display does (0.5 always rounds up)."""
    quantum = Decimal(1).scaleb(-places)
    rounded = Decimal(str(value)).quantize(quantum, rounding=ROUND_HALF_UP)
    return int(rounded) if places == 0 else float(rounded)


def compute_order_totals(subtotal: float) -> OrderTotals:
    """
    Derive shipping, tax and total from a cart subtotal.

    Shipping is free strictly above the threshold; tax is rounded to whole
    currency units.

    Args:
        subtotal: Sum of line totals in the cart

    Returns:
        OrderTotals for the subtotal
    """
    shipping = 0 if subtotal > Constants.FREE_SHIPPING_THRESHOLD else Constants.SHIPPING_FEE
    tax = round_half_up(float(Decimal(str(subtotal)) * Decimal(Constants.TAX_RATE)))
    return OrderTotals(
        subtotal=subtotal,
        shipping=shipping,
        tax=tax,
        total=subtotal + shipping + tax,
    )


class OrderSnapshot(CamelModel):
    """Immutable copy of an order taken when payment is confirmed."""
    model_config = ConfigDict(alias_generator=to_camel, populate_by_name=True, frozen=True)

    order_id: str
    items: List[CartItem]
    shipping: ShippingInfo
    payment_method: PaymentMethod
    totals: OrderTotals
    status: str = Constants.ORDER_STATUS_CONFIRMED
    timestamp: str


class UPIPaymentRequest(CamelModel):
    """A UPI collect request rendered as a QR code while the buyer pays."""
    upi_id: str
    amount: float
    generated_order_id: str
    upi_uri: str
    qr_image_url: str


class PaymentConfirmation(CamelModel):
    """Successful outcome of a payment driver."""
    payment_method: PaymentMethod
    message: str
    reference: Optional[str] = None


def generate_order_id(now: Optional[datetime] = None) -> str:
    """Order ids are the creation time in epoch milliseconds."""
    now = now or datetime.now(timezone.utc)
    return f"{Constants.ORDER_ID_PREFIX}{int(now.timestamp() * 1000)}"
