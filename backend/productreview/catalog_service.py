"""
Catalog service: product and review queries, review submission and helpful votes.

This is the contract the HTTP routes and scripts use. It validates input
before touching the database, owns transaction boundaries, and returns wire
schemas rather than ORM rows.
"""
import logging
from contextlib import contextmanager
from typing import Optional

from sqlalchemy.exc import SQLAlchemyError
from sqlalchemy.orm import Session

from . import product_schemas, review_schemas
from .aggregation import AggregationEngine, product_lock
from .exceptions import CatalogError, NotFoundError, StorageError, ValidationError
from .pagination import PageRequest
from .product_models import Product
from .product_repository import ProductRepository
from .review_models import Review
from .review_repository import ReviewRepository
from .schemas import Page

logger = logging.getLogger(__name__)

MIN_COMMENT_LENGTH = 10
DEFAULT_REVIEWER_NAME = 'Anonymous'
MIN_RATING, MAX_RATING = 1, 5


def validate_rating(rating, field='rating'):
    if isinstance(rating, bool) or not isinstance(rating, int) or not MIN_RATING <= rating <= MAX_RATING:
        raise ValidationError(
            f"{field} must be an integer between {MIN_RATING} and {MAX_RATING}",
            {field: rating},
        )
    return rating


def validate_review(reviewer_name, comment, rating):
    """Check a submission and return (reviewer_name, comment, rating) normalised."""
    validate_rating(rating)
    comment = (comment or '').strip()
    if len(comment) < MIN_COMMENT_LENGTH:
        raise ValidationError(
            f"comment must be at least {MIN_COMMENT_LENGTH} characters",
            {"comment_length": len(comment)},
        )
    reviewer_name = (reviewer_name or '').strip() or DEFAULT_REVIEWER_NAME
    return reviewer_name, comment, rating


class CatalogService:
    def __init__(self, db: Session):
        self.db = db
        self.products = ProductRepository(db)
        self.reviews = ReviewRepository(db)
        self.aggregation = AggregationEngine(db)

    @contextmanager
    def _transaction(self, operation):
        """Commit on success; roll back on any error and surface db failures as StorageError."""
        try:
            yield
            self.db.commit()
        except CatalogError:
            self.db.rollback()
            raise
        except SQLAlchemyError as e:
            self.db.rollback()
            logger.error(
                "Transaction rolled back",
                extra={"operation": operation, "error": str(e), "error_type": type(e).__name__},
            )
            raise StorageError(operation, e) from e
        except Exception:
            self.db.rollback()
            raise

    def _require_product(self, product_id, operation):
        try:
            found = self.products.exists(product_id)
        except SQLAlchemyError as e:
            self.db.rollback()
            raise StorageError(operation, e) from e
        if not found:
            raise NotFoundError('Product', product_id)

    # ===== PRODUCTS =====

    def list_products(self, category=None, search=None, page=0, size=None, sort=None):
        page_request = PageRequest.of(page, size, sort, allowed=ProductRepository.SORT_COLUMNS)
        try:
            items, total = self.products.find_all(page_request, category=category, search=search)
        except SQLAlchemyError as e:
            raise StorageError('list products', e) from e
        return Page[product_schemas.ProductSummary].of(
            [product_schemas.ProductSummary.model_validate(p) for p in items],
            page_request.page,
            page_request.size,
            total,
        )

    def get_product(self, product_id) -> product_schemas.ProductDetail:
        try:
            product = self.products.get(product_id)
        except SQLAlchemyError as e:
            raise StorageError('get product', e) from e
        if product is None:
            raise NotFoundError('Product', product_id)
        # breakdown only for the single-product view
        summary = product_schemas.ProductSummary.model_validate(product)
        return product_schemas.ProductDetail(
            **summary.model_dump(),
            rating_breakdown=self.aggregation.rating_breakdown(product_id),
        )

    def create_product(self, name, description=None, category=None, price=0.0, image_url=None):
        """Add a catalog product with zeroed stats (catalog seed/import)."""
        if not name or not name.strip():
            raise ValidationError("name is required")
        if price is None or price < 0:
            raise ValidationError("price must be non-negative", {"price": price})
        with self._transaction('create product'):
            product = self.products.save(Product(
                name=name.strip(),
                description=description,
                category=category,
                price=price,
                image_url=image_url,
                average_rating=0.0,
                review_count=0,
            ))
        logger.info("Product created", extra={"product_id": product.id, "product_name": product.name})
        return product_schemas.ProductSummary.model_validate(product)

    # ===== REVIEWS =====

    def list_reviews(self, product_id, rating=None, page=0, size=None, sort=None):
        if rating is not None:
            validate_rating(rating)
        page_request = PageRequest.of(
            page, size, sort,
            allowed=ReviewRepository.SORT_COLUMNS,
            default_sort='createdAt,asc',
        )
        try:
            if not self.products.exists(product_id):
                raise NotFoundError('Product', product_id)
            items, total = self.reviews.find_by_product_paged(product_id, page_request, rating=rating)
        except SQLAlchemyError as e:
            raise StorageError('list reviews', e) from e
        return Page[review_schemas.Review].of(
            [review_schemas.Review.model_validate(r) for r in items],
            page_request.page,
            page_request.size,
            total,
        )

    def submit_review(self, product_id, reviewer_name: Optional[str], comment: str, rating: int):
        """Persist a review and synchronously refresh the product's stats.

        Save and recompute share one transaction under the product's lock, so
        on success the caller's next read sees the new stats, and on failure
        neither the review nor a partial stats update is committed.
        """
        reviewer_name, comment, rating = validate_review(reviewer_name, comment, rating)
        # products are never deleted, so checking before locking is safe
        self._require_product(product_id, 'submit review')
        with product_lock(product_id):
            with self._transaction('submit review'):
                review = self.reviews.save(Review(
                    product_id=product_id,
                    reviewer_name=reviewer_name,
                    comment=comment,
                    rating=rating,
                    helpful_count=0,
                ))
                stats = self.aggregation.recompute_stats(product_id)
        logger.info(
            "Review submitted",
            extra={
                "product_id": product_id,
                "review_id": review.id,
                "rating": rating,
                "review_count": stats.review_count,
                "average_rating": stats.average_rating,
            },
        )
        return review_schemas.Review.model_validate(review)

    def mark_helpful(self, review_id):
        """Increment a review's helpful count by one (atomic in SQL)."""
        with self._transaction('mark review helpful'):
            if self.reviews.increment_helpful(review_id) == 0:
                raise NotFoundError('Review', review_id)
        try:
            review = self.reviews.get(review_id)
        except SQLAlchemyError as e:
            raise StorageError('mark review helpful', e) from e
        return review_schemas.Review.model_validate(review)

    # ===== STATS =====

    def recompute_stats(self, product_id) -> product_schemas.ProductStats:
        """Standalone recompute, e.g. to retry after a failed submission."""
        self._require_product(product_id, 'recompute stats')
        with product_lock(product_id):
            with self._transaction('recompute stats'):
                stats = self.aggregation.recompute_stats(product_id)
        return product_schemas.ProductStats(
            product_id=product_id,
            review_count=stats.review_count,
            average_rating=stats.average_rating,
        )
