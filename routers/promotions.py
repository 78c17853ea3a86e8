from fastapi import APIRouter
from starlette import status

from schemas.promotion_schemas import (
    ApplyPromoRequest, ApplyPromoResponse, PromotionCreate, PromotionResponse, PromotionUpdate,
)
from services.promotion_service import PromotionService
from utils.deps import db_dependency, staff_dependency


router = APIRouter(
    prefix="/api/promotion",
    tags=["promotions"]
)


@router.post("/apply", response_model=ApplyPromoResponse)
async def apply_promotion(body: ApplyPromoRequest, db: db_dependency):
    """Prices a promotion code against a total without using it."""
    return PromotionService.apply(db, body.promo_code, body.total_amount)


@router.get("", response_model=list[PromotionResponse])
async def list_promotions(user: staff_dependency, db: db_dependency):
    return PromotionService.list_promotions(db)


@router.get("/{promo_id}", response_model=PromotionResponse)
async def get_promotion(promo_id: int, user: staff_dependency, db: db_dependency):
    return PromotionService.get_promotion(db, promo_id)


@router.post("", response_model=PromotionResponse, status_code=status.HTTP_201_CREATED)
async def create_promotion(body: PromotionCreate, user: staff_dependency, db: db_dependency):
    return PromotionService.create_promotion(db, body)


@router.put("/{promo_id}", response_model=PromotionResponse)
async def update_promotion(promo_id: int, body: PromotionUpdate, user: staff_dependency, db: db_dependency):
    return PromotionService.update_promotion(db, promo_id, body)


@router.delete("/{promo_id}", status_code=status.HTTP_204_NO_CONTENT)
async def delete_promotion(promo_id: int, user: staff_dependency, db: db_dependency):
    PromotionService.delete_promotion(db, promo_id)
