import logging

logger = logging.getLogger(__name__)


class DeleteOrderUseCase:
    """Removes the unified order row only; the module order is kept for accounting."""

    def __init__(self, unit_of_work):
        self._uow = unit_of_work

    async def __call__(self, order_no: str, user_id: int) -> bool:
        async with self._uow() as uow:
            order = await uow.orders.get_by_order_no(order_no)
            if not order or not order.is_owned_by(user_id):
                logger.warning(f"Order {order_no} not found for user {user_id}")
                return False
            if not order.can_delete():
                logger.warning(f"Order {order_no} cannot be deleted (status: {order.payment_status.name})")
                return False

            deleted = await uow.orders.delete(order_no, user_id)
            if deleted <= 0:
                return False
            await uow.commit()

        logger.info(f"Order {order_no} deleted")
        return True
