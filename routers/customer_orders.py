from fastapi import APIRouter, Request, Response
from starlette import status

from middleware.rate_limiter import limiter, CHECKOUT_LIMIT, PAYMENT_LIMIT
from models.enums import PayStatus
from schemas.order_schemas import CheckoutRequest, OrderPreviewResponse, OrderResponse, PaymentRequest
from services.invoice_pdf_service import InvoicePdfService
from services.order_service import OrderService
from services.payment_service import PaymentService
from utils.deps import db_dependency, customer_dependency


router = APIRouter(
    prefix="/api/customer/orders",
    tags=["customer orders"]
)


@router.post("/preview", response_model=OrderPreviewResponse)
async def preview_order(body: CheckoutRequest, user: customer_dependency, db: db_dependency):
    return OrderService.preview(db, user["user_id"], body)


@router.post("/checkout", response_model=OrderResponse, status_code=status.HTTP_201_CREATED)
@limiter.limit(CHECKOUT_LIMIT)
async def checkout(request: Request, body: CheckoutRequest, user: customer_dependency, db: db_dependency):
    """
    Places an order from the customer's cart.

    Cash and e-wallet orders come back paid and confirmed; card and bank
    transfer orders stay pending until paid.
    """
    order = OrderService.checkout(db, user["user_id"], body)
    return OrderService.get_order(db, order.id)


@router.get("", response_model=list[OrderResponse])
async def list_my_orders(user: customer_dependency, db: db_dependency, pay_status: PayStatus | None = None):
    return OrderService.list_orders(db, customer_id=user["user_id"], pay_status=pay_status)


@router.get("/{order_id}", response_model=OrderResponse)
async def get_my_order(order_id: int, user: customer_dependency, db: db_dependency):
    return OrderService.get_order(db, order_id, customer_id=user["user_id"])


@router.post("/{order_id}/pay", response_model=OrderResponse)
@limiter.limit(PAYMENT_LIMIT)
async def pay_order(request: Request, order_id: int, body: PaymentRequest, user: customer_dependency, db: db_dependency):
    PaymentService.record_payment(db, order_id, body.amount, body.payment_method, customer_id=user["user_id"])
    return OrderService.get_order(db, order_id)


@router.post("/{order_id}/cancel", response_model=OrderResponse)
async def cancel_my_order(order_id: int, user: customer_dependency, db: db_dependency):
    OrderService.cancel_order(db, order_id, customer_id=user["user_id"])
    return OrderService.get_order(db, order_id)


@router.get("/{order_id}/invoice-pdf")
async def download_invoice(order_id: int, user: customer_dependency, db: db_dependency):
    order = OrderService.get_order(db, order_id, customer_id=user["user_id"])
    pdf = InvoicePdfService.render(order)
    return Response(
        content=pdf,
        media_type="application/pdf",
        headers={"Content-Disposition": f'attachment; filename="invoice-{order.id}.pdf"'},
    )
