from typing import Optional

from unified_orders.domain.models import UnifiedOrder


class OrderActionChecks:
    """Read-only pre-checks so a client can grey out actions before calling them."""

    def __init__(self, unit_of_work):
        self._uow = unit_of_work

    async def can_pay(self, order_no: str) -> bool:
        order = await self._load(order_no)
        return order is not None and order.can_pay()

    async def can_cancel(self, order_no: str, user_id: int) -> bool:
        order = await self._load(order_no)
        return order is not None and order.is_owned_by(user_id) and order.can_cancel()

    async def can_delete(self, order_no: str, user_id: int) -> bool:
        order = await self._load(order_no)
        return order is not None and order.is_owned_by(user_id) and order.can_delete()

    async def _load(self, order_no: str) -> Optional[UnifiedOrder]:
        async with self._uow() as uow:
            return await uow.orders.get_by_order_no(order_no)
