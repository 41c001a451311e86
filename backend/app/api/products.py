"""
Products API Endpoints
Public catalog: listing (home, products and category pages), product page,
and the category list
"""
from fastapi import APIRouter, HTTPException, Query
from typing import Optional

from app.domain.product import PRICE_RANGES, SORT_OPTIONS
from app.repositories.product_repository import ProductRepository

router = APIRouter()


@router.get("/")
async def get_products(
    category: Optional[str] = Query(None, description="Filter by category (case-insensitive, partial)"),
    search: Optional[str] = Query(None, description="Search by name, category or description"),
    price_range: Optional[str] = Query(None, description="under-2000, 2000-5000 or above-5000"),
    sort: str = Query("newest", description="newest, price-low, price-high or name"),
    limit: int = Query(100, ge=1, le=500),
    offset: int = Query(0, ge=0)
):
    """
    Get active products with optional filters

    Newest first unless another sort is requested.
    """
    if price_range and price_range not in PRICE_RANGES:
        raise HTTPException(
            status_code=400,
            detail=f"Invalid price_range. Valid: {', '.join(PRICE_RANGES)}"
        )
    if sort not in SORT_OPTIONS:
        raise HTTPException(
            status_code=400,
            detail=f"Invalid sort. Valid: {', '.join(SORT_OPTIONS)}"
        )

    try:
        repo = ProductRepository()

        products, total = repo.find_all(
            category=category,
            search=search,
            price_range=price_range,
            sort=sort,
            limit=limit,
            offset=offset
        )

        return {
            "status": "success",
            "total": total,
            "limit": limit,
            "offset": offset,
            "count": len(products),
            "data": [product.to_dict() for product in products]
        }

    except Exception as e:
        raise HTTPException(status_code=500, detail=f"Error fetching products: {str(e)}")


@router.get("/categories")
async def get_categories():
    """Distinct categories of active products with product counts"""
    try:
        repo = ProductRepository()
        categories = repo.get_categories()

        return {
            "status": "success",
            "count": len(categories),
            "data": categories
        }

    except Exception as e:
        raise HTTPException(status_code=500, detail=f"Error fetching categories: {str(e)}")


@router.get("/{id_or_slug}")
async def get_product(id_or_slug: str):
    """
    Get a single product by ID or slug

    Inactive products are not shown in the storefront.
    """
    try:
        repo = ProductRepository()
        product = repo.find_by_id_or_slug(id_or_slug)

        if not product or not product.is_active:
            raise HTTPException(status_code=404, detail=f"Product {id_or_slug} not found")

        return {
            "status": "success",
            "data": product.to_dict()
        }

    except HTTPException:
        raise
    except Exception as e:
        raise HTTPException(status_code=500, detail=f"Error fetching product: {str(e)}")
