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

"""Shopping cart for a storefront session."""

import logging
from typing import List, Optional

from .errors import NotFoundError
from .models import CartItem, OrderTotals

logger = logging.getLogger(__name__)


class CartStore:
    """
    Holds the cart's line items and the totals frozen when checkout starts.

    Items with the same product id and size are merged into one line.
    """

    def __init__(self, items: Optional[List[CartItem]] = None):
        self._items: List[CartItem] = list(items or [])
        self.checkout_totals: Optional[OrderTotals] = None
        self.is_checking_out = False

    @property
    def items(self) -> List[CartItem]:
        return list(self._items)

    @property
    def total(self) -> float:
        return sum(item.line_total for item in self._items)

    @property
    def count(self) -> int:
        return sum(item.quantity for item in self._items)

    def _find(self, product_id: int, size: Optional[str]) -> Optional[int]:
        for index, item in enumerate(self._items):
            if item.product_id == product_id and item.selected_size == size:
                return index
        return None

    def add_item(self, item: CartItem) -> CartItem:
        """Add a line, or bump the quantity of a matching line."""
        index = self._find(item.product_id, item.selected_size)
        if index is None:
            self._items.append(item)
            return item

        existing = self._items[index]
        merged = existing.model_copy(update={"quantity": existing.quantity + item.quantity})
        self._items[index] = merged
        return merged

    def update_quantity(self, product_id: int, size: Optional[str], quantity: int) -> None:
        """Set a line's quantity; zero or less removes the line."""
        index = self._find(product_id, size)
        if index is None:
            raise NotFoundError(f"Product {product_id} (size {size}) is not in the cart")
        if quantity <= 0:
            del self._items[index]
            return
        self._items[index] = self._items[index].model_copy(update={"quantity": quantity})

    def remove_item(self, product_id: int, size: Optional[str] = None) -> None:
        before = len(self._items)
        self._items = [
            item for item in self._items
            if not (item.product_id == product_id and (size is None or item.selected_size == size))
        ]
        if len(self._items) == before:
            raise NotFoundError(f"Product {product_id} is not in the cart")

    def start_checkout(self, totals: OrderTotals) -> None:
        self.checkout_totals = totals
        self.is_checking_out = True

    def complete_checkout(self) -> None:
        """Empty the cart after an order is placed."""
        logger.info(f"Checkout completed, clearing {len(self._items)} cart line(s)")
        self._items = []
        self.checkout_totals = None
        self.is_checking_out = False
