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
Product reviews.

Reviews are kept behind a small repository interface; the in-memory
implementation keys reviews by id and hands out ids from a counter.
"""

import logging
from abc import ABC, abstractmethod
from datetime import datetime, timezone
from typing import Dict, Iterable, List, Optional

from pydantic import Field

from .errors import ValidationError
from .models import CamelModel, round_half_up

logger = logging.getLogger(__name__)


class Review(CamelModel):
    """A buyer's review of a product."""
    id: int
    product_id: int
    user_name: str
    rating: int = Field(..., ge=1, le=5)
    comment: str
    date: datetime


class ReviewCreate(CamelModel):
    """Review submission as entered on the form."""
    user_name: str = ""
    rating: int = 0
    comment: str = ""


class ProductReviews(CamelModel):
    """Reviews for one product, newest first, with their average rating."""
    reviews: List[Review]
    average_rating: float
    total_count: int


class ReviewRepository(ABC):
    """Storage for reviews."""

    @abstractmethod
    def list_for_product(self, product_id: int) -> List[Review]:
        """All reviews of a product, in no particular order."""

    @abstractmethod
    def add(self, product_id: int, user_name: str, rating: int, comment: str, date: datetime) -> Review:
        """Store a new review and return it with its id."""


class InMemoryReviewRepository(ReviewRepository):
    """Reviews in a dict keyed by id."""

    def __init__(self, seed: Optional[Iterable[Review]] = None):
        self._reviews: Dict[int, Review] = {}
        for review in seed or []:
            self._reviews[review.id] = review
        self._next_id = max(self._reviews, default=0) + 1

    def list_for_product(self, product_id: int) -> List[Review]:
        return [r for r in self._reviews.values() if r.product_id == product_id]

    def add(self, product_id: int, user_name: str, rating: int, comment: str, date: datetime) -> Review:
        review = Review(
            id=self._next_id,
            product_id=product_id,
            user_name=user_name,
            rating=rating,
            comment=comment,
            date=date,
        )
        self._reviews[review.id] = review
        self._next_id += 1
        return review


class ReviewService:
    """Lists and accepts product reviews."""

    def __init__(self, repository: Optional[ReviewRepository] = None):
        self.repository = repository or InMemoryReviewRepository(SAMPLE_REVIEWS)

    def get_reviews_by_product_id(self, product_id: int) -> ProductReviews:
        reviews = sorted(
            self.repository.list_for_product(product_id),
            key=lambda r: r.date,
            reverse=True,
        )
        average = sum(r.rating for r in reviews) / len(reviews) if reviews else 0
        return ProductReviews(
            reviews=reviews,
            average_rating=round_half_up(average, 1),
            total_count=len(reviews),
        )

    def add_review(self, product_id: int, submission: ReviewCreate) -> Review:
        """
        Validate and store a review.

        Raises:
            ValidationError: Missing name, rating outside 1-5, or empty comment
        """
        user_name = submission.user_name.strip()
        comment = submission.comment.strip()

        if not user_name:
            raise ValidationError("Please enter your name", field_errors={"user_name": "Please enter your name"})
        if not 1 <= submission.rating <= 5:
            raise ValidationError("Please select a rating", field_errors={"rating": "Please select a rating"})
        if not comment:
            raise ValidationError("Please write a review", field_errors={"comment": "Please write a review"})

        review = self.repository.add(
            product_id=product_id,
            user_name=user_name,
            rating=submission.rating,
            comment=comment,
            date=datetime.now(timezone.utc),
        )
        logger.info(f"Review {review.id} added for product {product_id} ({review.rating}/5)")
        return review


def _utc(value: str) -> datetime:
    return datetime.fromisoformat(value.replace("Z", "+00:00"))


SAMPLE_REVIEWS = [
    Review(
        id=1, product_id=1, user_name="Sarah Johnson", rating=5,
        comment="Absolutely love this jacket! The quality is exceptional and it fits perfectly. "
                "The fabric feels premium and the construction is solid. Definitely worth the investment.",
        date=_utc("2024-01-15T10:30:00Z"),
    ),
    Review(
        id=2, product_id=1, user_name="Michael Chen", rating=4,
        comment="Great jacket overall. The design is stylish and it's comfortable to wear. Only minor "
                "complaint is that it runs slightly small, so I'd recommend ordering a size up.",
        date=_utc("2024-01-10T14:22:00Z"),
    ),
    Review(
        id=3, product_id=1, user_name="Emma Wilson", rating=5,
        comment="Perfect for the winter season! Keeps me warm without being too bulky. The color is "
                "exactly as shown in the photos. Fast shipping and excellent customer service.",
        date=_utc("2024-01-08T16:45:00Z"),
    ),
    Review(
        id=4, product_id=2, user_name="David Rodriguez", rating=4,
        comment="Comfortable sneakers with great support. Perfect for daily wear and light workouts. "
                "The design is clean and goes well with most outfits.",
        date=_utc("2024-01-12T09:15:00Z"),
    ),
    Review(
        id=5, product_id=2, user_name="Lisa Thompson", rating=5,
        comment="Best sneakers I've purchased in years! Super comfortable from day one, no break-in "
                "period needed. The quality is outstanding and they look great.",
        date=_utc("2024-01-06T11:30:00Z"),
    ),
]
