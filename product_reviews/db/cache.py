import logging
import threading
from typing import Iterable, List, Optional
from fastapi import Request

from product_reviews.reviews.schemas import ProductReviewModel

logger = logging.getLogger(__name__)


class ReviewCache:
    """Process-local mirror of the whole review collection.

    The cache starts unpopulated and only becomes populated through
    ``populate``. Once populated it is patched in place on writes and never
    expires or evicts. Writes against an unpopulated cache are dropped.

    Every access to the collection happens under one lock, so appends and
    replace-by-id from concurrent requests cannot interleave.
    """

    def __init__(self):
        self._reviews: Optional[List[ProductReviewModel]] = None
        self._lock = threading.Lock()

    @property
    def is_populated(self) -> bool:
        with self._lock:
            return self._reviews is not None

    def populate(self, reviews: Iterable[ProductReviewModel]) -> None:
        with self._lock:
            self._reviews = list(reviews)
            logger.info(f"Review cache populated with {len(self._reviews)} reviews")

    def get_all(self) -> Optional[List[ProductReviewModel]]:
        """Return the cached collection, or None when nothing is cached."""
        with self._lock:
            if self._reviews is None:
                return None
            return list(self._reviews)

    def find(self, review_id: int) -> Optional[ProductReviewModel]:
        with self._lock:
            if self._reviews is None:
                return None
            for review in self._reviews:
                if review.id == review_id:
                    return review
            return None

    def add(self, review: ProductReviewModel) -> bool:
        with self._lock:
            if self._reviews is None:
                return False
            self._reviews.append(review)
            return True

    def add_if_absent(self, review: ProductReviewModel) -> bool:
        """Append only when no entry with the same id is cached."""
        with self._lock:
            if self._reviews is None:
                return False
            if any(r.id == review.id for r in self._reviews):
                return False
            self._reviews.append(review)
            return True

    def replace(self, review: ProductReviewModel) -> bool:
        with self._lock:
            if self._reviews is None:
                return False
            self._reviews = [r for r in self._reviews if r.id != review.id]
            self._reviews.append(review)
            return True

    def count(self) -> int:
        with self._lock:
            return len(self._reviews) if self._reviews is not None else 0


def get_review_cache(request: Request) -> ReviewCache:
    return request.app.state.review_cache
