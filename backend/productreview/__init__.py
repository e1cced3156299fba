"""Product catalog and review service.

Products, customer reviews, and per-product rating statistics (review count,
average rating, 1-5 star breakdown) kept consistent with the stored reviews.
"""

__version__ = "0.1.0"
