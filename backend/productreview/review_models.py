from sqlalchemy import Column, Integer, String, Text, DateTime, ForeignKey, CheckConstraint
from .database import Base, utcnow


class Review(Base):
    """Customer review of a product. Append-only: only helpful_count changes after insert."""
    __tablename__ = 'reviews'
    __table_args__ = (
        CheckConstraint('rating >= 1 AND rating <= 5', name='ck_reviews_rating_range'),
        CheckConstraint('helpful_count >= 0', name='ck_reviews_helpful_count_non_negative'),
    )

    id = Column(Integer, primary_key=True, index=True)
    product_id = Column(Integer, ForeignKey('products.id'), nullable=False, index=True)
    reviewer_name = Column(String(200), nullable=False, default='Anonymous')
    comment = Column(Text, nullable=False)
    rating = Column(Integer, nullable=False)  # 1-5 stars
    helpful_count = Column(Integer, nullable=False, default=0)
    created_at = Column(DateTime, default=utcnow, nullable=False, index=True)
