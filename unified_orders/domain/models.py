from datetime import datetime
from decimal import Decimal
from enum import Enum, IntEnum
from typing import Optional
from pydantic import BaseModel


class OrderType(str, Enum):
    FOOD = "FOOD"
    HOTEL = "HOTEL"
    SHOPPING = "SHOPPING"
    TRAVEL = "TRAVEL"
    PAYMENT = "PAYMENT"


class PaymentStatus(IntEnum):
    UNPAID = 0
    PAID = 1
    CANCELLED = 2
    COMPLETED = 3
    REFUNDED = 4


DELETABLE_STATUSES = (
    PaymentStatus.UNPAID,
    PaymentStatus.CANCELLED,
    PaymentStatus.COMPLETED,
    PaymentStatus.REFUNDED,
)

TYPE_LABELS = {
    OrderType.FOOD: "Food delivery",
    OrderType.HOTEL: "Hotel booking",
    OrderType.SHOPPING: "Shopping",
    OrderType.TRAVEL: "Travel",
    OrderType.PAYMENT: "Utility bill",
}

STATUS_LABELS = {
    PaymentStatus.UNPAID: "Awaiting payment",
    PaymentStatus.PAID: "Paid",
    PaymentStatus.CANCELLED: "Cancelled",
    PaymentStatus.COMPLETED: "Completed",
    PaymentStatus.REFUNDED: "Refunded",
}


class UnifiedOrder(BaseModel):
    """Domain Entity — cross-domain order wrapping one module order"""
    id: Optional[int] = None
    order_no: str
    user_id: int
    order_type: OrderType
    module_order_id: Optional[int] = None
    order_title: str
    order_description: Optional[str] = None
    total_amount: Decimal
    payment_status: PaymentStatus
    payment_method: Optional[str] = None
    payment_time: Optional[datetime] = None
    create_time: datetime
    update_time: Optional[datetime] = None

    def can_pay(self) -> bool:
        """Only an unpaid order can be paid"""
        return self.payment_status == PaymentStatus.UNPAID

    def can_cancel(self) -> bool:
        """Paid orders are not self-service cancellable"""
        return self.payment_status == PaymentStatus.UNPAID

    def can_delete(self) -> bool:
        """A paid order awaiting fulfilment must stay"""
        return self.payment_status in DELETABLE_STATUSES

    def is_owned_by(self, user_id: int) -> bool:
        return self.user_id == user_id

    @property
    def type_text(self) -> str:
        return TYPE_LABELS.get(self.order_type, "Unknown type")

    @property
    def status_text(self) -> str:
        return STATUS_LABELS.get(self.payment_status, "Unknown status")


class OrderStats(BaseModel):
    """Value Object — per-user order counters"""
    total: int = 0
    unpaid: int = 0
    paid: int = 0
    cancelled: int = 0
    completed: int = 0
    refunded: int = 0


class SyncFailure(BaseModel):
    """A module order that could not be brought in line with its unified order"""
    id: int
    order_no: str
    order_type: OrderType
    module_order_id: int
    action: str
    error: str
    created_at: datetime
