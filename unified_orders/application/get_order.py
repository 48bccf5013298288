from typing import Optional, List

from unified_orders.domain.models import UnifiedOrder, OrderType, PaymentStatus, OrderStats


class GetOrderUseCase:
    def __init__(self, unit_of_work):
        self._uow = unit_of_work

    async def __call__(self, order_no: str) -> Optional[UnifiedOrder]:
        async with self._uow() as uow:
            return await uow.orders.get_by_order_no(order_no)


class ListUserOrdersUseCase:
    """Orders of one user, newest first; omitted filters match everything."""

    def __init__(self, unit_of_work):
        self._uow = unit_of_work

    async def __call__(
        self,
        user_id: int,
        order_type: Optional[OrderType] = None,
        payment_status: Optional[PaymentStatus] = None
    ) -> List[UnifiedOrder]:
        async with self._uow() as uow:
            return await uow.orders.list_by_user(user_id, order_type, payment_status)


class GetOrderStatsUseCase:
    def __init__(self, unit_of_work):
        self._uow = unit_of_work

    async def __call__(self, user_id: int) -> OrderStats:
        async with self._uow() as uow:
            return await uow.orders.get_stats(user_id)
