from typing import Dict, Optional
from .schemas import APIModel


class ProductBase(APIModel):
    name: str
    description: Optional[str] = None
    category: Optional[str] = None
    price: float = 0.0
    image_url: Optional[str] = None


class ProductSummary(ProductBase):
    """List view of a product; no rating breakdown."""
    id: int
    average_rating: float
    review_count: int


class ProductDetail(ProductSummary):
    """Single-product view with the 1-5 star histogram."""
    rating_breakdown: Dict[int, int]


class ProductStats(APIModel):
    product_id: int
    review_count: int
    average_rating: float
