from datetime import date
from decimal import Decimal
import pytest
from pydantic import ValidationError

from models.enums import DiscountType
from schemas.promotion_schemas import PromotionCreate
from services.promotion_service import compute_discount
from utils.money import to_money, percent_of


def test_percent_discount_rounds_half_up():
    assert compute_discount(DiscountType.PERCENT, Decimal("15"), Decimal("33.33")) == Decimal("5.00")
    assert compute_discount(DiscountType.PERCENT, Decimal("10"), Decimal("0.05")) == Decimal("0.01")


def test_fixed_discount():
    assert compute_discount(DiscountType.FIXED, Decimal("5.00"), Decimal("40.00")) == Decimal("5.00")


def test_fixed_discount_capped_at_total():
    assert compute_discount(DiscountType.FIXED, Decimal("50.00"), Decimal("30.00")) == Decimal("30.00")


def test_money_helpers():
    assert to_money("2.005") == Decimal("2.01")
    assert to_money(None) == Decimal("0.00")
    assert percent_of(Decimal("200"), 12.5) == Decimal("25.00")


def _promo(**overrides):
    data = dict(
        code=" summer ",
        discount_type=DiscountType.PERCENT,
        discount_value="10",
        start_date=date(2026, 6, 1),
        end_date=date(2026, 6, 30),
    )
    data.update(overrides)
    return PromotionCreate(**data)


def test_promotion_code_is_normalized():
    assert _promo().code == "SUMMER"


@pytest.mark.parametrize("overrides", [
    {"discount_value": "150"},
    {"discount_value": "0"},
    {"end_date": date(2026, 5, 1)},
    {"usage_limit": -1},
])
def test_invalid_promotion_definitions(overrides):
    with pytest.raises(ValidationError):
        _promo(**overrides)


def test_fixed_promotion_may_exceed_hundred():
    assert _promo(discount_type=DiscountType.FIXED, discount_value="250").discount_value == Decimal("250.00")
