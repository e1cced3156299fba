"""
Seed the catalog with sample products and a few initial reviews.
Only runs when the catalog is empty. Run: python backend/seed_products.py
"""
import sys
from pathlib import Path

# Add backend to path
backend_path = Path(__file__).resolve().parent
sys.path.insert(0, str(backend_path))

from productreview.catalog_service import CatalogService
from productreview.database import SessionLocal
from productreview.product_repository import ProductRepository
from init_db import init

PRODUCTS = [
    {"name": "iPhone 15 Pro", "description": "The latest iPhone with A17 Pro chip and Titanium design.", "category": "Electronics", "price": 999.99},
    {"name": "Sony WH-1000XM5", "description": "Industry-leading noise canceling headphones.", "category": "Electronics", "price": 349.99},
    {"name": "MacBook Air M2", "description": "Strikingly thin design and incredible speed.", "category": "Laptops", "price": 1099.00},
    {"name": "iPad Pro 12.9", "description": "The ultimate iPad experience with M2 chip.", "category": "Tablets", "price": 1099.00},
    {"name": "Apple Watch Series 9", "description": "Smarter, brighter, and more powerful.", "category": "Wearables", "price": 399.00},
]

# (product name, reviewer, comment, rating)
REVIEWS = [
    ("iPhone 15 Pro", "John Doe", "Amazing phone! The camera is incredible.", 5),
    ("iPhone 15 Pro", "Jane Smith", "Battery life could be better, but overall great.", 4),
    ("Sony WH-1000XM5", "Alice Brown", "Best noise canceling I've ever experienced.", 5),
    ("MacBook Air M2", "Bob Wilson", "Fast and light, perfect for my work.", 5),
]


def seed_products(db):
    if ProductRepository(db).count() > 0:
        print("⏭️  Catalog already has products, skipping seed")
        return 0

    catalog = CatalogService(db)
    ids = {}
    for p_data in PRODUCTS:
        product = catalog.create_product(**p_data)
        ids[product.name] = product.id
        print(f"✅ Added: {product.name}")

    # Reviews go through submit_review so the stats are derived, not hand-set
    for product_name, reviewer, comment, rating in REVIEWS:
        catalog.submit_review(ids[product_name], reviewer, comment, rating)
        print(f"✅ Review by {reviewer} on {product_name}")
    return len(PRODUCTS)


if __name__ == "__main__":
    init()
    db = SessionLocal()
    try:
        seed_products(db)
    finally:
        db.close()
    print("\n🎉 Seeding completed!")
