import enum
from sqlalchemy import Enum


class PaymentMethod(str, enum.Enum):
    CASH = "cash"
    CARD = "card"
    BANK_TRANSFER = "bank_transfer"
    E_WALLET = "e-wallet"


# Methods that confirm payment without a gateway round-trip
INSTANT_SETTLEMENT_METHODS = frozenset({PaymentMethod.CASH, PaymentMethod.E_WALLET})


def is_instant_settlement(method: PaymentMethod) -> bool:
    return PaymentMethod(method) in INSTANT_SETTLEMENT_METHODS


class PayStatus(str, enum.Enum):
    PENDING = "pending"
    PAID = "paid"
    CANCELED = "canceled"


class FulfillmentStatus(str, enum.Enum):
    PENDING = "pending"
    CONFIRMED = "confirmed"
    CANCELLED = "cancelled"


class OrderType(str, enum.Enum):
    ONLINE = "online"
    OFFLINE = "offline"


class BillStatus(str, enum.Enum):
    UNPAID = "unpaid"
    PAID = "paid"
    CANCELLED = "cancelled"


class TransactionStatus(str, enum.Enum):
    PENDING = "pending"
    SUCCESS = "success"
    FAILED = "failed"


class DiscountType(str, enum.Enum):
    PERCENT = "percent"
    FIXED = "fixed"


class PromotionStatus(str, enum.Enum):
    ACTIVE = "active"
    INACTIVE = "inactive"


class InventoryReason(str, enum.Enum):
    INCREMENT = "increment"
    DECREMENT = "decrement"


def enum_column(enum_cls, name: str) -> Enum:
    """String-backed column storing the enum's values (not its member names)."""
    return Enum(
        enum_cls,
        name=name,
        native_enum=False,
        values_callable=lambda members: [m.value for m in members],
        validate_strings=True,
    )
