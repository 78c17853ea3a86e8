from fastapi import APIRouter, Query
from starlette import status

from schemas.product_schemas import ProductCreate, ProductResponse, ProductCountResponse
from services.product_service import ProductService
from utils.deps import db_dependency, staff_dependency, product_cache_dependency
from utils.logger import get_logger

logger = get_logger(__name__)


router = APIRouter(tags=["products"])


@router.get("/api/customer/products", response_model=list[ProductResponse])
async def list_products(db: db_dependency, skip: int = Query(0, ge=0), limit: int = Query(50, ge=1, le=200)):
    return ProductService.list_active(db, skip=skip, limit=limit)


@router.get("/api/customer/products/count", response_model=ProductCountResponse)
async def count_products(db: db_dependency, cache: product_cache_dependency):
    return {"count": ProductService.count_active(db, cache)}


@router.post("/api/products", response_model=ProductResponse, status_code=status.HTTP_201_CREATED)
async def create_product(body: ProductCreate, user: staff_dependency, db: db_dependency,
                         cache: product_cache_dependency):
    return ProductService.create_product(db, body, cache)


@router.delete("/api/products/{product_id}", status_code=status.HTTP_204_NO_CONTENT)
async def delete_product(product_id: int, user: staff_dependency, db: db_dependency,
                         cache: product_cache_dependency):
    ProductService.soft_delete(db, product_id, cache)
