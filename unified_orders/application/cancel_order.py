import logging

from unified_orders.application.module_sync import ModuleOrderSync

logger = logging.getLogger(__name__)


class CancelOrderUseCase:
    def __init__(self, unit_of_work, module_sync: ModuleOrderSync = None):
        self._uow = unit_of_work
        self._module_sync = module_sync or ModuleOrderSync(unit_of_work)

    async def __call__(self, order_no: str, user_id: int) -> bool:
        async with self._uow() as uow:
            order = await uow.orders.get_by_order_no(order_no)
            if not order or not order.is_owned_by(user_id):
                logger.warning(f"Order {order_no} not found for user {user_id}")
                return False
            if not order.can_cancel():
                logger.warning(f"Order {order_no} cannot be cancelled (status: {order.payment_status.name})")
                return False

            updated = await uow.orders.mark_cancelled(order_no)
            if updated <= 0:
                logger.warning(f"Order {order_no} was not marked CANCELLED")
                return False
            await uow.commit()

        logger.info(f"Order {order_no} marked CANCELLED")

        await self._module_sync.mark_cancelled(order)
        return True
