import logging
from datetime import datetime
from typing import Dict, Callable
from sqlalchemy import update
from sqlalchemy.ext.asyncio import AsyncSession

from unified_orders.domain.models import OrderType
from unified_orders.application.interfaces import ModuleOrderGateway
from unified_orders.infrastructure.db_schema import (
    hotel_order_tbl, shop_order_tbl, travel_order_tbl, payment_bills_tbl, restaurant_order_tbl
)

logger = logging.getLogger(__name__)

# Status codes shared by the hotel, shop, travel and restaurant order tables
MODULE_STATUS_PAID = 1
MODULE_STATUS_CANCELLED = 2

BILL_STATUS_PAID = 1


class _StatusColumnGateway(ModuleOrderGateway):
    """Domain order table whose lifecycle is a single integer status column."""

    table = None
    status_column = "order_status"
    touches_update_time = False

    def __init__(self, session: AsyncSession):
        self._session = session

    async def mark_paid(self, module_order_id: int, paid_at: datetime) -> int:
        return await self._set_status(module_order_id, MODULE_STATUS_PAID)

    async def mark_cancelled(self, module_order_id: int) -> int:
        return await self._set_status(module_order_id, MODULE_STATUS_CANCELLED)

    async def _set_status(self, module_order_id: int, status: int) -> int:
        values = {self.status_column: status}
        if self.touches_update_time:
            values["update_time"] = datetime.now()
        stmt = (
            update(self.table)
            .where(self.table.c.id == module_order_id)
            .values(**values)
        )
        result = await self._session.execute(stmt)
        return result.rowcount


class HotelOrderGateway(_StatusColumnGateway):
    table = hotel_order_tbl
    status_column = "status"


class ShopOrderGateway(_StatusColumnGateway):
    table = shop_order_tbl
    touches_update_time = True


class TravelOrderGateway(_StatusColumnGateway):
    table = travel_order_tbl
    touches_update_time = True


class RestaurantOrderGateway(_StatusColumnGateway):
    table = restaurant_order_tbl


class PaymentBillGateway(ModuleOrderGateway):
    def __init__(self, session: AsyncSession):
        self._session = session

    async def mark_paid(self, module_order_id: int, paid_at: datetime) -> int:
        stmt = (
            update(payment_bills_tbl)
            .where(payment_bills_tbl.c.id == module_order_id)
            .values(
                bill_status=BILL_STATUS_PAID,
                paid_time=paid_at
            )
        )
        result = await self._session.execute(stmt)
        return result.rowcount

    async def mark_cancelled(self, module_order_id: int) -> int:
        # Bills have no cancelled state
        logger.info(f"Bill {module_order_id} left unchanged on cancel")
        return 0


GatewayFactory = Callable[[AsyncSession], ModuleOrderGateway]

DEFAULT_MODULE_GATEWAYS: Dict[OrderType, GatewayFactory] = {
    OrderType.HOTEL: HotelOrderGateway,
    OrderType.SHOPPING: ShopOrderGateway,
    OrderType.TRAVEL: TravelOrderGateway,
    OrderType.PAYMENT: PaymentBillGateway,
    OrderType.FOOD: RestaurantOrderGateway,
}


def build_module_gateways(session: AsyncSession, factories: Dict[OrderType, GatewayFactory]) -> Dict[OrderType, ModuleOrderGateway]:
    return {order_type: factory(session) for order_type, factory in factories.items()}
