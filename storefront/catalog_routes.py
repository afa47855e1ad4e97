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
FastAPI Routes for the Product Catalog

Product listing with filters, product details and product reviews.
"""

from fastapi import APIRouter, Depends, HTTPException, Query
from fastapi.responses import JSONResponse
from typing import List
import logging

from .catalog import Catalog, ProductFilters
from .errors import StorefrontError
from .reviews import ReviewCreate, ReviewService

logger = logging.getLogger(__name__)

router = APIRouter(prefix="/products", tags=["Catalog"])

catalog = Catalog()
review_service = ReviewService()


def get_catalog() -> Catalog:
    return catalog


def get_review_service() -> ReviewService:
    return review_service


def to_http_exception(error: StorefrontError) -> HTTPException:
    """Translate a storefront error into an HTTP error response."""
    return HTTPException(status_code=error.http_status, detail=error.to_dict())


@router.get("")
async def list_products(
    category: List[str] = Query(default=[]),
    brand: List[str] = Query(default=[]),
    size: List[str] = Query(default=[]),
    color: List[str] = Query(default=[]),
    product_catalog: Catalog = Depends(get_catalog),
):
    """List products matching the selected filters."""
    filters = ProductFilters(
        categories=set(category),
        brands=set(brand),
        sizes=set(size),
        colors=set(color),
    )
    products = product_catalog.list_products(filters)

    return JSONResponse({
        "status": "success",
        "products": [p.model_dump(mode="json") for p in products],
        "count": len(products),
        "active_filters": filters.active_count,
        "chips": [c.model_dump(mode="json") for c in filters.chips()],
    })


@router.get("/{product_id}")
async def get_product(product_id: int, product_catalog: Catalog = Depends(get_catalog)):
    try:
        product = product_catalog.get_product(product_id)
    except StorefrontError as e:
        raise to_http_exception(e)

    return JSONResponse({"status": "success", "product": product.model_dump(mode="json")})


@router.get("/{product_id}/reviews")
async def get_reviews(
    product_id: int,
    product_catalog: Catalog = Depends(get_catalog),
    reviews: ReviewService = Depends(get_review_service),
):
    """Reviews for a product, newest first, with the average rating."""
    try:
        product_catalog.get_product(product_id)
    except StorefrontError as e:
        raise to_http_exception(e)

    result = reviews.get_reviews_by_product_id(product_id)
    return JSONResponse({"status": "success", **result.to_json_dict()})


@router.post("/{product_id}/reviews", status_code=201)
async def add_review(
    product_id: int,
    submission: ReviewCreate,
    product_catalog: Catalog = Depends(get_catalog),
    reviews: ReviewService = Depends(get_review_service),
):
    """Submit a review for a product."""
    try:
        product_catalog.get_product(product_id)
        review = reviews.add_review(product_id, submission)
    except StorefrontError as e:
        raise to_http_exception(e)

    return JSONResponse(
        {"status": "success", "review": review.to_json_dict()},
        status_code=201,
    )
