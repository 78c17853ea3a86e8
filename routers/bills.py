from datetime import datetime
from fastapi import APIRouter
from starlette import status

from models.enums import BillStatus
from schemas.bill_schemas import BillResponse, BillStatusUpdate, RevenueResponse
from services.bill_service import BillService
from utils.deps import db_dependency, customer_dependency, staff_dependency


customer_router = APIRouter(
    prefix="/api/customer/bills",
    tags=["customer bills"]
)

router = APIRouter(
    prefix="/api/bill",
    tags=["bills"]
)


@customer_router.get("", response_model=list[BillResponse])
async def list_my_bills(user: customer_dependency, db: db_dependency, status: BillStatus | None = None):
    return BillService.list_for_customer(db, user["user_id"], status=status)


@customer_router.get("/order/{order_id}", response_model=BillResponse)
async def get_my_bill_by_order(order_id: int, user: customer_dependency, db: db_dependency):
    return BillService.get_by_order(db, order_id, customer_id=user["user_id"])


@customer_router.get("/{bill_id}", response_model=BillResponse)
async def get_my_bill(bill_id: int, user: customer_dependency, db: db_dependency):
    return BillService.get_bill(db, bill_id, customer_id=user["user_id"])


@router.get("/revenue", response_model=RevenueResponse)
async def get_revenue(user: staff_dependency, db: db_dependency,
                      start: datetime | None = None, end: datetime | None = None):
    return {"total_revenue": BillService.revenue(db, start=start, end=end), "start": start, "end": end}


@router.get("/{bill_id}", response_model=BillResponse)
async def get_bill(bill_id: int, user: staff_dependency, db: db_dependency):
    return BillService.get_bill(db, bill_id)


@router.post("/order/{order_id}", response_model=BillResponse, status_code=status.HTTP_201_CREATED)
async def create_bill_for_order(order_id: int, user: staff_dependency, db: db_dependency):
    return BillService.create_from_order(db, order_id)


@router.put("/{bill_id}/status", response_model=BillResponse)
async def update_bill_status(bill_id: int, body: BillStatusUpdate, user: staff_dependency, db: db_dependency):
    return BillService.update_status(db, bill_id, body.pay_status)


@router.put("/{bill_id}/cancel", response_model=BillResponse)
async def cancel_bill(bill_id: int, user: staff_dependency, db: db_dependency):
    return BillService.cancel(db, bill_id)
