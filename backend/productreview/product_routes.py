"""
API endpoints for products, their reviews and rating statistics
"""
from fastapi import APIRouter, Depends, HTTPException, Query, Request
from sqlalchemy.orm import Session
from typing import List, Optional
import os

from . import product_schemas, review_schemas
from .catalog_service import CatalogService
from .database import get_db
from .schemas import Page

router = APIRouter(prefix="/api", tags=["Products & Reviews"])


def get_catalog(db: Session = Depends(get_db)) -> CatalogService:
    return CatalogService(db)


def require_admin_key(request: Request):
    # Simple API key protection for admin actions; open when ADMIN_API_KEY is unset.
    admin_key = os.getenv('ADMIN_API_KEY')
    if admin_key and request.headers.get('x-api-key') != admin_key:
        raise HTTPException(status_code=401, detail='Unauthorized')


@router.get("/products", response_model=Page[product_schemas.ProductSummary])
def list_products(
    category: Optional[str] = None,
    search: Optional[str] = None,
    page: int = Query(0, ge=0),
    size: Optional[int] = Query(None, ge=1),
    sort: Optional[List[str]] = Query(None),
    catalog: CatalogService = Depends(get_catalog),
):
    """Page through the catalog (optionally by category or name search); no rating breakdown"""
    return catalog.list_products(category=category, search=search, page=page, size=size, sort=sort)


@router.get("/products/{product_id}", response_model=product_schemas.ProductDetail)
def get_product(product_id: int, catalog: CatalogService = Depends(get_catalog)):
    """Get a single product with its 1-5 star rating breakdown"""
    return catalog.get_product(product_id)


@router.get("/products/{product_id}/reviews", response_model=Page[review_schemas.Review])
def list_reviews(
    product_id: int,
    rating: Optional[int] = None,
    page: int = Query(0, ge=0),
    size: Optional[int] = Query(None, ge=1),
    sort: Optional[List[str]] = Query(None),
    catalog: CatalogService = Depends(get_catalog),
):
    """Page through a product's reviews, newest first unless sorted otherwise"""
    return catalog.list_reviews(product_id, rating=rating, page=page, size=size, sort=sort)


@router.post("/products/{product_id}/reviews", response_model=review_schemas.Review, status_code=201)
def submit_review(
    product_id: int,
    payload: review_schemas.ReviewCreate,
    catalog: CatalogService = Depends(get_catalog),
):
    """Submit a review (1-5 stars, comment of at least 10 characters); product stats update before this returns"""
    return catalog.submit_review(
        product_id,
        reviewer_name=payload.reviewer_name,
        comment=payload.comment,
        rating=payload.rating,
    )


@router.post(
    "/products/{product_id}/stats/recompute",
    response_model=product_schemas.ProductStats,
    dependencies=[Depends(require_admin_key)],
)
def recompute_stats(product_id: int, catalog: CatalogService = Depends(get_catalog)):
    """Recompute review count and average rating from the stored reviews"""
    return catalog.recompute_stats(product_id)
