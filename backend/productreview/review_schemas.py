from datetime import datetime
from typing import Optional
from .schemas import APIModel


class ReviewCreate(APIModel):
    # Range and length checks happen in CatalogService.submit_review
    reviewer_name: Optional[str] = None
    comment: str
    rating: int  # 1-5


class Review(APIModel):
    id: int
    product_id: int
    reviewer_name: str
    comment: str
    rating: int
    helpful_count: int
    created_at: datetime
