from sqlalchemy import Column, Integer, String, Text, Float, Numeric, CheckConstraint
from .database import Base


class Product(Base):
    """Catalog product. average_rating and review_count are derived from the
    product's reviews and are written only by the aggregation engine."""
    __tablename__ = 'products'
    __table_args__ = (
        CheckConstraint('price >= 0', name='ck_products_price_non_negative'),
        CheckConstraint('review_count >= 0', name='ck_products_review_count_non_negative'),
        CheckConstraint('average_rating >= 0 AND average_rating <= 5', name='ck_products_average_rating_range'),
    )

    id = Column(Integer, primary_key=True, index=True)
    name = Column(String(200), nullable=False, index=True)
    description = Column(Text, nullable=True)
    category = Column(String(100), nullable=True, index=True)  # Electronics, Laptops, ...
    price = Column(Numeric(10, 2, asdecimal=False), nullable=False, default=0.0)
    image_url = Column(String(1000), nullable=True)

    # Derived statistics
    average_rating = Column(Float, nullable=False, default=0.0)  # 0.0 - 5.0, one decimal
    review_count = Column(Integer, nullable=False, default=0)
