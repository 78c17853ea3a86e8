from fastapi import APIRouter
from starlette import status

from schemas.cart_schemas import AddCartItemRequest, UpdateCartItemRequest, CartItemResponse, CartResponse
from services.cart_service import CartService
from utils.deps import db_dependency, customer_dependency


router = APIRouter(
    prefix="/api/customer/cart",
    tags=["cart"]
)


@router.get("", response_model=CartResponse)
async def get_cart(user: customer_dependency, db: db_dependency):
    items = CartService.get_items(db, user["user_id"])
    return {"items": items, "total": CartService.total(items)}


@router.get("/total")
async def get_cart_total(user: customer_dependency, db: db_dependency):
    items = CartService.get_items(db, user["user_id"])
    return {"total": CartService.total(items), "item_count": len(items)}


@router.post("/items", response_model=CartItemResponse, status_code=status.HTTP_201_CREATED)
async def add_item(body: AddCartItemRequest, user: customer_dependency, db: db_dependency):
    return CartService.add_item(db, user["user_id"], body.product_id, body.quantity)


@router.put("/items/{item_id}", response_model=CartItemResponse)
async def update_item(item_id: int, body: UpdateCartItemRequest, user: customer_dependency, db: db_dependency):
    return CartService.update_quantity(db, user["user_id"], item_id, body.quantity)


@router.delete("/items/{item_id}", status_code=status.HTTP_204_NO_CONTENT)
async def remove_item(item_id: int, user: customer_dependency, db: db_dependency):
    CartService.remove_item(db, user["user_id"], item_id)


@router.delete("", status_code=status.HTTP_204_NO_CONTENT)
async def clear_cart(user: customer_dependency, db: db_dependency):
    CartService.clear(db, user["user_id"])
