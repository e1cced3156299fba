"""
Rating aggregation for products.

Keeps `Product.review_count` and `Product.average_rating` consistent with the
product's reviews, and answers rating-breakdown queries. Statistics are always
recomputed from the full review set rather than updated incrementally, so a
failed earlier update can never leave a drifted partial sum behind.

The engine never commits; it runs inside the caller's transaction. Writers of
one product serialise on `product_lock(product_id)`.
"""
import logging
import threading
from collections import namedtuple
from contextlib import contextmanager
from decimal import Decimal, ROUND_HALF_UP

from sqlalchemy.exc import SQLAlchemyError
from sqlalchemy.orm import Session

from .exceptions import NotFoundError, StorageError
from .product_repository import ProductRepository
from .review_repository import ReviewRepository

logger = logging.getLogger(__name__)

STARS = (1, 2, 3, 4, 5)
ONE_DECIMAL = Decimal('0.1')

RatingStats = namedtuple('RatingStats', ['review_count', 'average_rating'])

# product id -> [lock, holders + waiters]; entries go away with their last user
_product_locks = {}
_product_locks_guard = threading.Lock()


@contextmanager
def product_lock(product_id):
    """Serialise save+recompute for one product within this process."""
    with _product_locks_guard:
        entry = _product_locks.setdefault(product_id, [threading.Lock(), 0])
        entry[1] += 1
    try:
        with entry[0]:
            yield
    finally:
        with _product_locks_guard:
            entry[1] -= 1
            if entry[1] == 0:
                del _product_locks[product_id]


def round_rating(value):
    """Round to one decimal, half away from zero (4.05 -> 4.1, 4.75 -> 4.8)."""
    if not isinstance(value, Decimal):
        value = Decimal(str(value))
    return float(value.quantize(ONE_DECIMAL, rounding=ROUND_HALF_UP))


def compute_stats(ratings):
    """Unweighted mean of raw integer ratings; (0, 0.0) for no ratings."""
    ratings = list(ratings)
    if not ratings:
        return RatingStats(0, 0.0)
    # exact decimal mean so e.g. 81/20 rounds as 4.05 rather than 4.0499999
    mean = Decimal(sum(ratings)) / Decimal(len(ratings))
    return RatingStats(len(ratings), round_rating(mean))


def empty_breakdown():
    return {star: 0 for star in STARS}


class AggregationEngine:
    def __init__(self, db: Session):
        self.db = db
        self.products = ProductRepository(db)
        self.reviews = ReviewRepository(db)

    def recompute_stats(self, product_id) -> RatingStats:
        """Recompute count and average from all of the product's reviews and write them back.

        Idempotent: with no intervening review writes, repeated calls return
        and store the same values. Raises NotFoundError for an unknown product
        and StorageError if the database fails; nothing is committed here, so
        the caller's rollback leaves the previous stats intact.
        """
        try:
            product = self.products.get_for_update(product_id)
            if product is None:
                raise NotFoundError('Product', product_id)
            ratings = [review.rating for review in self.reviews.find_by_product(product_id)]
            stats = compute_stats(ratings)
            self.products.update_stats(product, stats.review_count, stats.average_rating)
        except SQLAlchemyError as e:
            logger.error(
                "Rating recompute failed",
                extra={"product_id": product_id, "error": str(e), "error_type": type(e).__name__},
            )
            raise StorageError('recompute stats', e) from e

        logger.debug(
            "Recomputed rating stats",
            extra={
                "product_id": product_id,
                "review_count": stats.review_count,
                "average_rating": stats.average_rating,
            },
        )
        return stats

    def rating_breakdown(self, product_id):
        """Histogram of star value -> review count, always with keys 1..5."""
        breakdown = empty_breakdown()
        try:
            counts = self.reviews.count_by_rating_for_product(product_id)
        except SQLAlchemyError as e:
            raise StorageError('rating breakdown', e) from e
        for rating, count in counts:
            if rating in breakdown:
                breakdown[rating] = count
        return breakdown
