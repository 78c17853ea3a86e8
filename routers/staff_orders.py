from fastapi import APIRouter, Query, Request
from starlette import status

from middleware.rate_limiter import limiter, PAYMENT_LIMIT
from models.enums import PayStatus
from schemas.order_schemas import OrderResponse, PaymentRequest, StaffOrderRequest
from services.order_service import OrderService
from services.payment_service import PaymentService
from utils.deps import db_dependency, staff_dependency


router = APIRouter(
    prefix="/api/order",
    tags=["orders"]
)


@router.get("", response_model=list[OrderResponse])
async def list_orders(user: staff_dependency, db: db_dependency, customer_id: int | None = None,
                      pay_status: PayStatus | None = None,
                      skip: int = Query(0, ge=0), limit: int = Query(50, ge=1, le=200)):
    return OrderService.list_orders(db, customer_id=customer_id, pay_status=pay_status, skip=skip, limit=limit)


@router.get("/{order_id}", response_model=OrderResponse)
async def get_order(order_id: int, user: staff_dependency, db: db_dependency):
    return OrderService.get_order(db, order_id)


@router.post("", response_model=OrderResponse, status_code=status.HTTP_201_CREATED)
async def create_order(body: StaffOrderRequest, user: staff_dependency, db: db_dependency):
    order = OrderService.create_staff_order(db, user["user_id"], body)
    return OrderService.get_order(db, order.id)


@router.post("/{order_id}/payments", response_model=OrderResponse)
@limiter.limit(PAYMENT_LIMIT)
async def record_payment(request: Request, order_id: int, body: PaymentRequest, user: staff_dependency,
                         db: db_dependency):
    PaymentService.record_payment(db, order_id, body.amount, body.payment_method)
    return OrderService.get_order(db, order_id)


@router.put("/{order_id}/cancel", response_model=OrderResponse)
async def cancel_order(order_id: int, user: staff_dependency, db: db_dependency):
    OrderService.cancel_order(db, order_id)
    return OrderService.get_order(db, order_id)
