import logging
from decimal import Decimal
from typing import Optional

from unified_orders.domain.models import UnifiedOrder, OrderType

logger = logging.getLogger(__name__)


class FindUnpaidOrderUseCase:
    """Looks up an in-progress checkout so revisiting it does not open a second order."""

    def __init__(self, unit_of_work):
        self._uow = unit_of_work

    async def by_module_order_id(self, module_order_id: Optional[int], order_type: Optional[OrderType]) -> Optional[UnifiedOrder]:
        if module_order_id is None or order_type is None:
            return None
        async with self._uow() as uow:
            return await uow.orders.find_unpaid_by_module_order_id(module_order_id, order_type)

    async def by_user_id_and_type(self, user_id: Optional[int], order_type: Optional[OrderType]) -> Optional[UnifiedOrder]:
        if user_id is None or order_type is None:
            return None
        async with self._uow() as uow:
            return await uow.orders.find_unpaid_by_user_id_and_type(user_id, order_type)


class UpdateTotalAmountUseCase:
    def __init__(self, unit_of_work):
        self._uow = unit_of_work

    async def __call__(self, order_no: str, total_amount: Decimal) -> bool:
        async with self._uow() as uow:
            updated = await uow.orders.update_total_amount(order_no, total_amount)
            if updated <= 0:
                return False
            await uow.commit()

        logger.info(f"Order {order_no} total set to {total_amount}")
        return True


class AttachModuleOrderUseCase:
    def __init__(self, unit_of_work):
        self._uow = unit_of_work

    async def __call__(self, order_no: str, module_order_id: int) -> bool:
        async with self._uow() as uow:
            updated = await uow.orders.update_module_order_id(order_no, module_order_id)
            if updated <= 0:
                return False
            await uow.commit()

        logger.info(f"Order {order_no} linked to module order {module_order_id}")
        return True
