from decimal import Decimal
import pytest

from core.exceptions import InvalidOrderLine
from services.order_service import build_order_items


def test_subtotals_are_recomputed():
    lines = build_order_items([(1, 2, Decimal("10.00")), (2, 3, "5")])

    assert [line.subtotal for line in lines] == [Decimal("20.00"), Decimal("15.00")]
    assert lines[1].price == Decimal("5.00")


def test_free_line_is_allowed():
    [line] = build_order_items([(3, 1, Decimal("0"))])

    assert line.subtotal == Decimal("0.00")


def test_product_name_is_carried():
    [line] = build_order_items([(1, 1, Decimal("2.50"), "Milk")])

    assert line.product_name == "Milk"


@pytest.mark.parametrize("bad_line", [
    (0, 1, Decimal("1.00")),
    (1, 0, Decimal("1.00")),
    (1, -2, Decimal("1.00")),
    (1, 1, Decimal("-0.01")),
])
def test_invalid_line_rejects_whole_batch(bad_line):
    with pytest.raises(InvalidOrderLine) as exc:
        build_order_items([(5, 1, Decimal("1.00")), bad_line])

    assert exc.value.status_code == 400
    assert "Line 1" in exc.value.detail


def test_empty_input_gives_empty_output():
    assert build_order_items([]) == []
