import logging
from datetime import datetime
from typing import List

from unified_orders.domain.models import UnifiedOrder, SyncFailure
from unified_orders.domain.exceptions import UnsupportedOrderTypeError, ModuleSyncError

logger = logging.getLogger(__name__)

ACTION_PAID = "paid"
ACTION_CANCELLED = "cancelled"


class ModuleOrderSync:
    """Pushes a unified order's new status down to the module order it wraps.

    Runs after the unified order change has been committed, in its own unit
    of work. Failures are logged and recorded in the sync failure table and
    never reach the caller: the unified order is the source of truth for
    whether the user paid.
    """

    def __init__(self, unit_of_work):
        self._uow = unit_of_work

    async def mark_paid(self, order: UnifiedOrder, paid_at: datetime) -> bool:
        return await self._sync(order, ACTION_PAID, paid_at)

    async def mark_cancelled(self, order: UnifiedOrder) -> bool:
        return await self._sync(order, ACTION_CANCELLED, None)

    async def _sync(self, order: UnifiedOrder, action: str, paid_at) -> bool:
        if order.module_order_id is None:
            return True

        try:
            async with self._uow() as uow:
                gateway = uow.module_orders.get(order.order_type)
                if gateway is None:
                    raise UnsupportedOrderTypeError(order.order_type)

                if action == ACTION_PAID:
                    updated = await gateway.mark_paid(order.module_order_id, paid_at)
                else:
                    updated = await gateway.mark_cancelled(order.module_order_id)
                await uow.commit()

        except Exception as e:
            error = ModuleSyncError(order.order_no, action, e)
            logger.error(
                f"{error} (order_type={order.order_type.value}, module_order_id={order.module_order_id})",
                exc_info=True
            )
            await self._record_failure(order, action, error)
            return False

        if updated:
            logger.info(f"Module order {order.order_type.value}:{order.module_order_id} marked {action}")
        else:
            logger.warning(
                f"Module order {order.order_type.value}:{order.module_order_id} not updated on {action}"
            )
        return True

    async def _record_failure(self, order: UnifiedOrder, action: str, error: ModuleSyncError) -> None:
        try:
            async with self._uow() as uow:
                await uow.sync_failures.create(order, action, str(error.cause))
                await uow.commit()
        except Exception as e:
            logger.error(f"Could not record sync failure for {order.order_no}: {e}", exc_info=True)


class ListSyncFailuresUseCase:
    def __init__(self, unit_of_work):
        self._uow = unit_of_work

    async def __call__(self, limit: int = 50) -> List[SyncFailure]:
        async with self._uow() as uow:
            return await uow.sync_failures.get_recent(limit=limit)
