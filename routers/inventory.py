from fastapi import APIRouter

from schemas.inventory_schemas import (
    InventoryQuantityUpdate, InventoryResponse, ValidateCartStockRequest, ValidateCartStockResponse,
)
from services.inventory_service import InventoryService
from utils.deps import db_dependency, staff_dependency


router = APIRouter(
    prefix="/api/inventory",
    tags=["inventory"]
)


@router.get("", response_model=list[InventoryResponse])
async def list_inventory(user: staff_dependency, db: db_dependency):
    return InventoryService.list_inventory(db)


@router.get("/product/{product_id}", response_model=InventoryResponse)
async def get_product_inventory(product_id: int, user: staff_dependency, db: db_dependency):
    return InventoryService.get_by_product(db, product_id)


@router.patch("/product/{product_id}/quantity", response_model=InventoryResponse)
async def set_product_quantity(product_id: int, body: InventoryQuantityUpdate, user: staff_dependency,
                               db: db_dependency):
    return InventoryService.set_quantity(db, product_id, body.quantity, note=body.note)


@router.post("/customer/validate-cart-stock", response_model=ValidateCartStockResponse)
async def validate_cart_stock(body: ValidateCartStockRequest, db: db_dependency):
    """Advisory only: stock can still run out before checkout."""
    return InventoryService.validate_cart_stock(db, body.items)
