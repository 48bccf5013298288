import logging
from datetime import datetime
from decimal import Decimal
from typing import Optional, Callable
from pydantic import BaseModel, Field

from unified_orders.domain.models import UnifiedOrder, OrderType, PaymentStatus
from unified_orders.domain.order_number import generate_order_no


logger = logging.getLogger(__name__)


class CreateOrderDTO(BaseModel):
    user_id: int
    order_type: OrderType
    module_order_id: Optional[int] = None
    order_title: str
    order_description: Optional[str] = None
    total_amount: Decimal = Field(ge=0)


class CreateOrderUseCase:
    def __init__(self, unit_of_work, order_no_factory: Callable[[OrderType], str] = generate_order_no):
        self._uow = unit_of_work
        self._order_no_factory = order_no_factory

    async def __call__(self, order_data: CreateOrderDTO) -> Optional[str]:
        logger.info(f"Creating {order_data.order_type.value} order for user {order_data.user_id}")

        order = UnifiedOrder(
            order_no=self._order_no_factory(order_data.order_type),
            user_id=order_data.user_id,
            order_type=order_data.order_type,
            module_order_id=order_data.module_order_id,
            order_title=order_data.order_title,
            order_description=order_data.order_description,
            total_amount=order_data.total_amount,
            payment_status=PaymentStatus.UNPAID,
            create_time=datetime.now()
        )

        async with self._uow() as uow:
            inserted = await uow.orders.create(order)
            if inserted <= 0:
                logger.error(f"Order {order.order_no} was not persisted")
                return None
            await uow.commit()

        logger.info(f"Order created: {order.order_no}")
        return order.order_no
