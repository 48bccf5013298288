import logging
from datetime import datetime
from pydantic import BaseModel

from unified_orders.application.module_sync import ModuleOrderSync

logger = logging.getLogger(__name__)


class PaymentDTO(BaseModel):
    order_no: str
    payment_method: str


class ProcessPaymentUseCase:
    def __init__(self, unit_of_work, module_sync: ModuleOrderSync = None):
        self._uow = unit_of_work
        self._module_sync = module_sync or ModuleOrderSync(unit_of_work)

    async def __call__(self, dto: PaymentDTO) -> bool:
        logger.info(f"Processing payment for {dto.order_no} via {dto.payment_method}")

        async with self._uow() as uow:
            order = await uow.orders.get_by_order_no(dto.order_no)
            if not order:
                logger.warning(f"Order {dto.order_no} not found")
                return False
            if not order.can_pay():
                logger.warning(f"Order {dto.order_no} cannot be paid (status: {order.payment_status.name})")
                return False

            payment_time = datetime.now()
            updated = await uow.orders.mark_paid(dto.order_no, dto.payment_method, payment_time)
            if updated <= 0:
                # Another payment won the race since the order was read
                logger.warning(f"Order {dto.order_no} was not marked PAID")
                return False
            await uow.commit()

        logger.info(f"Order {dto.order_no} marked PAID")

        # Outside the committed transaction; never changes the outcome
        await self._module_sync.mark_paid(order, payment_time)
        return True
