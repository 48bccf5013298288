from decimal import Decimal
from pydantic import BaseModel, Field
from datetime import datetime
from typing import Optional

from unified_orders.domain.models import OrderType, PaymentStatus


class CreateOrderRequest(BaseModel):
    user_id: int
    order_type: OrderType
    module_order_id: Optional[int] = None
    order_title: str
    order_description: Optional[str] = None
    total_amount: Decimal = Field(ge=0)


class CreateOrderResponse(BaseModel):
    order_no: str


class OrderResponse(BaseModel):
    order_no: str
    user_id: int
    order_type: OrderType
    type_text: str
    module_order_id: Optional[int] = None
    order_title: str
    order_description: Optional[str] = None
    total_amount: Decimal
    payment_status: PaymentStatus
    status_text: str
    payment_method: Optional[str] = None
    payment_time: Optional[datetime] = None
    create_time: datetime

    @classmethod
    def from_domain(cls, order):
        return cls(
            order_no=order.order_no,
            user_id=order.user_id,
            order_type=order.order_type,
            type_text=order.type_text,
            module_order_id=order.module_order_id,
            order_title=order.order_title,
            order_description=order.order_description,
            total_amount=order.total_amount,
            payment_status=order.payment_status,
            status_text=order.status_text,
            payment_method=order.payment_method,
            payment_time=order.payment_time,
            create_time=order.create_time
        )


class PaymentRequest(BaseModel):
    user_id: int
    payment_method: str


class OwnerRequest(BaseModel):
    user_id: int


class TotalAmountRequest(BaseModel):
    user_id: int
    total_amount: Decimal = Field(ge=0)


class ModuleOrderRequest(BaseModel):
    user_id: int
    module_order_id: int


class OrderActionsResponse(BaseModel):
    can_pay: bool
    can_cancel: bool
    can_delete: bool


class ActionResponse(BaseModel):
    success: bool = True
    message: str


class ErrorResponse(BaseModel):
    detail: str
