"""
Domain errors raised by the service layer.

Every error is an HTTPException so routers can let them propagate and
FastAPI (or the StoreError handler in main.py) turns them into responses.
The `code` attribute is a stable machine-readable identifier, the `detail`
is the human-readable message shown to the client.
"""

from decimal import Decimal
from fastapi import HTTPException
from starlette import status


class StoreError(HTTPException):
    status_code = status.HTTP_400_BAD_REQUEST
    code = "store_error"

    def __init__(self, detail: str, **context):
        super().__init__(status_code=self.status_code, detail=detail)
        self.context = context


# Taxonomy

class ValidationFailed(StoreError):
    status_code = status.HTTP_400_BAD_REQUEST
    code = "validation_failed"


class NotFound(StoreError):
    status_code = status.HTTP_404_NOT_FOUND
    code = "not_found"


class BusinessRuleViolation(StoreError):
    status_code = status.HTTP_400_BAD_REQUEST
    code = "business_rule"


class Conflict(StoreError):
    status_code = status.HTTP_409_CONFLICT
    code = "conflict"


class OwnershipError(StoreError):
    status_code = status.HTTP_403_FORBIDDEN
    code = "forbidden"

    def __init__(self, detail: str = "You do not have access to this resource", **context):
        super().__init__(detail, **context)


# Cart / order assembly

class EmptyCart(ValidationFailed):
    code = "empty_cart"

    def __init__(self):
        super().__init__("Cart is empty")


class InvalidOrderLine(ValidationFailed):
    code = "invalid_order_line"


class InvalidQuantity(ValidationFailed):
    code = "invalid_quantity"


class PriceMismatch(Conflict):
    code = "price_mismatch"


# Catalog / inventory

class ProductNotFound(NotFound):
    code = "product_not_found"

    def __init__(self, product_id: int):
        super().__init__(f"Product {product_id} not found", product_id=product_id)


class ProductUnavailable(BusinessRuleViolation):
    code = "product_unavailable"

    def __init__(self, product_id: int, product_name: str):
        super().__init__(
            f"Product '{product_name}' is no longer available",
            product_id=product_id,
        )


class InsufficientStock(BusinessRuleViolation):
    code = "insufficient_stock"

    def __init__(self, product_id: int, product_name: str, requested: int, available: int):
        super().__init__(
            f"Insufficient stock for '{product_name}': requested {requested}, available {available}",
            product_id=product_id,
            requested=requested,
            available=available,
        )


# Promotions

class PromotionNotFound(NotFound):
    code = "promotion_not_found"

    def __init__(self):
        super().__init__("Promotion not found")


class PromotionInactive(BusinessRuleViolation):
    code = "promotion_inactive"

    def __init__(self):
        super().__init__("Promotion is not active")


class PromotionNotYetValid(BusinessRuleViolation):
    code = "promotion_not_yet_valid"

    def __init__(self):
        super().__init__("Promotion is not valid yet")


class PromotionExpired(BusinessRuleViolation):
    code = "promotion_expired"

    def __init__(self):
        super().__init__("Promotion has expired")


class PromotionUsageExceeded(BusinessRuleViolation):
    code = "promotion_usage_exceeded"

    def __init__(self):
        super().__init__("Promotion usage limit reached")


class PromotionBelowMinimum(BusinessRuleViolation):
    code = "promotion_below_minimum"

    def __init__(self, min_order_amount: Decimal):
        super().__init__(
            f"Order total must be at least {min_order_amount:.2f} to use this promotion",
            min_order_amount=str(min_order_amount),
        )


# Orders / payments / bills

class OrderNotFound(NotFound):
    code = "order_not_found"

    def __init__(self):
        super().__init__("Order not found")


class BillNotFound(NotFound):
    code = "bill_not_found"

    def __init__(self):
        super().__init__("Bill not found")


class OrderAlreadyCanceled(BusinessRuleViolation):
    code = "order_already_canceled"

    def __init__(self):
        super().__init__("Order has already been canceled")


class CancellationWindowClosed(BusinessRuleViolation):
    code = "cancellation_window_closed"

    def __init__(self):
        super().__init__("Paid orders can only be canceled on the day they were placed")


class OrderNotPayable(BusinessRuleViolation):
    code = "order_not_payable"


class PaymentExceedsTotal(BusinessRuleViolation):
    code = "payment_exceeds_total"

    def __init__(self, amount_due: Decimal):
        super().__init__(
            f"Payment exceeds the remaining amount due ({amount_due:.2f})",
            amount_due=str(amount_due),
        )


class DuplicateBill(Conflict):
    code = "duplicate_bill"

    def __init__(self):
        super().__init__("Order already has a bill")
