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
StyleHub Storefront Package

Checkout and payment confirmation for the StyleHub fashion storefront:
- Shipping form validation and order totals
- Payment confirmation drivers (Cash on Delivery, UPI, card via Stripe)
- Order finalization into session storage and confirmation read-back
- A stateless Stripe payment intent function with webhook handling

The HTTP server lives in ``storefront.server``.
"""

from .cart import CartStore
from .checkout import CheckoutFlow, CheckoutStatus
from .config import Settings
from .models import CartItem, OrderSnapshot, OrderTotals, PaymentMethod, ShippingInfo
from .orders import OrderFinalizer, build_confirmation, load_last_order
from .payment_function import PaymentIntentFunction
from .session_store import SessionStorage
from .validation import validate_shipping

__all__ = [
    "CartStore",
    "CheckoutFlow",
    "CheckoutStatus",
    "Settings",
    "CartItem",
    "OrderSnapshot",
    "OrderTotals",
    "PaymentMethod",
    "ShippingInfo",
    "OrderFinalizer",
    "build_confirmation",
    "load_last_order",
    "PaymentIntentFunction",
    "SessionStorage",
    "validate_shipping",
]
