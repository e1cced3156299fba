"""
Query interface over stored products.
"""
from sqlalchemy import func
from sqlalchemy.orm import Session

from .pagination import PageRequest, order_by_clauses
from .product_models import Product


class ProductRepository:
    SORT_COLUMNS = {
        'id': Product.id,
        'name': Product.name,
        'category': Product.category,
        'price': Product.price,
        'averageRating': Product.average_rating,
        'reviewCount': Product.review_count,
    }

    def __init__(self, db: Session):
        self.db = db

    def get(self, product_id):
        return self.db.query(Product).filter(Product.id == product_id).first()

    def get_for_update(self, product_id):
        """Load the product row locked for writing (SELECT ... FOR UPDATE where supported)."""
        return self.db.query(Product).filter(
            Product.id == product_id
        ).with_for_update().first()

    def exists(self, product_id):
        return self.db.query(Product.id).filter(Product.id == product_id).first() is not None

    def count(self):
        return self.db.query(func.count(Product.id)).scalar()

    def all_ids(self):
        return [row[0] for row in self.db.query(Product.id).order_by(Product.id).all()]

    def find_all(self, page_request: PageRequest, category=None, search=None):
        """Returns (items, total) for one page.

        category 'All' (any case) means no category filter; search is a
        case-insensitive substring match on the product name.
        """
        q = self.db.query(Product)
        if category and category.strip().lower() != 'all':
            q = q.filter(Product.category == category)
        if search and search.strip():
            q = q.filter(Product.name.icontains(search.strip(), autoescape=True))
        total = q.count()
        items = q.order_by(
            *order_by_clauses(page_request.sort, self.SORT_COLUMNS)
        ).offset(page_request.offset).limit(page_request.size).all()
        return items, total

    def save(self, product: Product):
        self.db.add(product)
        self.db.flush()
        return product

    def update_stats(self, product: Product, review_count, average_rating):
        # Only AggregationEngine.recompute_stats calls this.
        product.review_count = review_count
        product.average_rating = average_rating
        self.db.flush()
        return product
