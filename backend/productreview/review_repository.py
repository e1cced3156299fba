"""
Query interface over stored reviews.

Repositories never commit: the caller owns the transaction.
"""
from sqlalchemy import func
from sqlalchemy.orm import Session

from .pagination import PageRequest, order_by_clauses
from .review_models import Review


class ReviewRepository:
    SORT_COLUMNS = {
        'id': Review.id,
        'createdAt': Review.created_at,
        'rating': Review.rating,
        'helpfulCount': Review.helpful_count,
        'reviewerName': Review.reviewer_name,
    }

    def __init__(self, db: Session):
        self.db = db

    def get(self, review_id):
        return self.db.query(Review).filter(Review.id == review_id).first()

    def find_by_product(self, product_id):
        """All reviews of a product in insertion order."""
        return self.db.query(Review).filter(
            Review.product_id == product_id
        ).order_by(Review.id.asc()).all()

    def find_by_product_paged(self, product_id, page_request: PageRequest, rating=None):
        """Returns (items, total) for one page, optionally restricted to one exact rating."""
        q = self.db.query(Review).filter(Review.product_id == product_id)
        if rating is not None:
            q = q.filter(Review.rating == rating)
        total = q.count()
        items = q.order_by(
            *order_by_clauses(page_request.sort, self.SORT_COLUMNS)
        ).offset(page_request.offset).limit(page_request.size).all()
        return items, total

    def count_by_rating_for_product(self, product_id):
        """(rating, count) pairs for the ratings present; absent ratings are omitted."""
        rows = self.db.query(Review.rating, func.count(Review.id)).filter(
            Review.product_id == product_id
        ).group_by(Review.rating).all()
        return [(int(rating), int(count)) for rating, count in rows]

    def save(self, review: Review):
        self.db.add(review)
        # flush so id and created_at are assigned before the caller recomputes
        self.db.flush()
        return review

    def increment_helpful(self, review_id):
        """Atomic `helpful_count = helpful_count + 1`; returns the number of rows updated."""
        return self.db.query(Review).filter(Review.id == review_id).update(
            {Review.helpful_count: Review.helpful_count + 1},
            synchronize_session=False,
        )
