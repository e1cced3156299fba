"""
API endpoints acting on a single review
"""
from fastapi import APIRouter, Depends

from . import review_schemas
from .catalog_service import CatalogService
from .product_routes import get_catalog

router = APIRouter(prefix="/api", tags=["Reviews"])


@router.put('/reviews/{review_id}/helpful', response_model=review_schemas.Review)
@router.put('/products/reviews/{review_id}/helpful', response_model=review_schemas.Review)
def mark_review_helpful(review_id: int, catalog: CatalogService = Depends(get_catalog)):
    """Count one more 'helpful' vote for a review"""
    return catalog.mark_helpful(review_id)
