"""
Recompute review count and average rating for every product from its stored
reviews, e.g. after a failed submission or a manual data import.
Run: python backend/recompute_stats.py [product_id ...]
"""
import sys
from pathlib import Path

# Add backend to path
sys.path.insert(0, str(Path(__file__).resolve().parent))

from productreview.catalog_service import CatalogService
from productreview.database import SessionLocal
from productreview.exceptions import CatalogError
from productreview.product_repository import ProductRepository


def recompute_all(db, product_ids=None):
    catalog = CatalogService(db)
    product_ids = product_ids or ProductRepository(db).all_ids()
    failures = 0
    for product_id in product_ids:
        try:
            stats = catalog.recompute_stats(product_id)
        except CatalogError as e:
            failures += 1
            print(f"❌ Product {product_id}: {e.message}")
            continue
        print(f"✅ Product {product_id}: {stats.review_count} reviews, average {stats.average_rating}")
    return failures


if __name__ == "__main__":
    db = SessionLocal()
    try:
        failed = recompute_all(db, [int(arg) for arg in sys.argv[1:]])
    finally:
        db.close()
    sys.exit(1 if failed else 0)
