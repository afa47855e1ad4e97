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
Product catalog and browsing filters.

Filters are four independent sets: categories, brands, sizes and colors. An
empty set does not filter. A product passes when its category and brand are
in their sets and it offers at least one selected size and one selected color.
"""

import logging
from typing import Iterable, List, Optional, Set

from pydantic import BaseModel, Field

from .errors import NotFoundError

logger = logging.getLogger(__name__)


class Product(BaseModel):
    """A product listed in the storefront."""
    id: int
    name: str
    brand: str
    category: str
    price: float = Field(..., ge=0)
    sizes: List[str] = Field(default_factory=list)
    colors: List[str] = Field(default_factory=list)
    image: Optional[str] = None
    rating: float = 0.0
    description: Optional[str] = None


class FilterChip(BaseModel):
    """An active filter shown above the product grid."""
    type: str
    value: str
    label: str


class ProductFilters(BaseModel):
    """Selected browsing filters."""
    categories: Set[str] = Field(default_factory=set)
    brands: Set[str] = Field(default_factory=set)
    sizes: Set[str] = Field(default_factory=set)
    colors: Set[str] = Field(default_factory=set)

    @staticmethod
    def _toggle(values: Set[str], value: str) -> None:
        if value in values:
            values.discard(value)
        else:
            values.add(value)

    def toggle_category(self, value: str) -> None:
        self._toggle(self.categories, value)

    def toggle_brand(self, value: str) -> None:
        self._toggle(self.brands, value)

    def toggle_size(self, value: str) -> None:
        self._toggle(self.sizes, value)

    def toggle_color(self, value: str) -> None:
        self._toggle(self.colors, value)

    def clear_all(self) -> None:
        self.categories.clear()
        self.brands.clear()
        self.sizes.clear()
        self.colors.clear()

    @property
    def active_count(self) -> int:
        return len(self.categories) + len(self.brands) + len(self.sizes) + len(self.colors)

    def chips(self) -> List[FilterChip]:
        """Active filters in display order: categories, brands, sizes, colors."""
        chips = [FilterChip(type="category", value=v, label=v) for v in sorted(self.categories)]
        chips += [FilterChip(type="brand", value=v, label=v) for v in sorted(self.brands)]
        chips += [FilterChip(type="size", value=v, label=f"Size: {v}") for v in sorted(self.sizes)]
        chips += [FilterChip(type="color", value=v, label=f"Color: {v}") for v in sorted(self.colors)]
        return chips

    def matches(self, product: Product) -> bool:
        if self.categories and product.category not in self.categories:
            return False
        if self.brands and product.brand not in self.brands:
            return False
        if self.sizes and not self.sizes.intersection(product.sizes):
            return False
        if self.colors and not self.colors.intersection(product.colors):
            return False
        return True


class Catalog:
    """In-memory product catalog."""

    def __init__(self, products: Optional[Iterable[Product]] = None):
        self._products = {p.id: p for p in (products if products is not None else SAMPLE_PRODUCTS)}

    def get_product(self, product_id: int) -> Product:
        product = self._products.get(product_id)
        if product is None:
            raise NotFoundError(f"Product with ID {product_id} was not found")
        return product

    def list_products(self, filters: Optional[ProductFilters] = None) -> List[Product]:
        products = sorted(self._products.values(), key=lambda p: p.id)
        if filters is None:
            return products
        result = [p for p in products if filters.matches(p)]
        logger.debug(f"{len(result)} of {len(products)} products match {filters.active_count} filter(s)")
        return result


# Demo catalog
SAMPLE_PRODUCTS = [
    Product(
        id=1, name="Classic Denim Jacket", brand="Levi's", category="Jackets",
        price=3499, sizes=["S", "M", "L", "XL"], colors=["Blue", "Black"],
        image="/images/denim-jacket.jpg", rating=4.7,
    ),
    Product(
        id=2, name="Everyday Runner Sneakers", brand="Nike", category="Shoes",
        price=4299, sizes=["7", "8", "9", "10"], colors=["White", "Black"],
        image="/images/runner-sneakers.jpg", rating=4.5,
    ),
    Product(
        id=3, name="Organic Cotton Tee", brand="H&M", category="T-Shirts",
        price=599, sizes=["XS", "S", "M", "L"], colors=["White", "Grey", "Navy"],
        image="/images/cotton-tee.jpg", rating=4.2,
    ),
    Product(
        id=4, name="Slim Fit Chinos", brand="Zara", category="Trousers",
        price=1799, sizes=["30", "32", "34", "36"], colors=["Beige", "Olive"],
        image="/images/slim-chinos.jpg", rating=4.1,
    ),
    Product(
        id=5, name="Wool Blend Overcoat", brand="Zara", category="Jackets",
        price=6999, sizes=["M", "L", "XL"], colors=["Camel", "Grey"],
        image="/images/overcoat.jpg", rating=4.6,
    ),
    Product(
        id=6, name="Canvas Low-Top", brand="Converse", category="Shoes",
        price=2999, sizes=["6", "7", "8", "9"], colors=["White", "Red"],
        image="/images/canvas-lowtop.jpg", rating=4.4,
    ),
    Product(
        id=7, name="Linen Summer Shirt", brand="H&M", category="Shirts",
        price=1299, sizes=["S", "M", "L"], colors=["White", "Blue"],
        image="/images/linen-shirt.jpg", rating=4.0,
    ),
    Product(
        id=8, name="Graphic Hoodie", brand="Nike", category="Hoodies",
        price=2499, sizes=["S", "M", "L", "XL"], colors=["Black", "Grey"],
        image="/images/graphic-hoodie.jpg", rating=4.3,
    ),
]
