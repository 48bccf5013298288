from conftest import ExplodingGateway
from unified_orders.application.cancel_order import CancelOrderUseCase
from unified_orders.application.delete_order import DeleteOrderUseCase
from unified_orders.application.get_order import GetOrderUseCase, GetOrderStatsUseCase
from unified_orders.application.module_sync import ListSyncFailuresUseCase
from unified_orders.application.order_checks import OrderActionChecks
from unified_orders.application.process_payment import ProcessPaymentUseCase, PaymentDTO
from unified_orders.domain.models import OrderType, PaymentStatus
from unified_orders.infrastructure.db_schema import (
    hotel_order_tbl, shop_order_tbl, travel_order_tbl, payment_bills_tbl, restaurant_order_tbl
)
from unified_orders.infrastructure.module_orders import DEFAULT_MODULE_GATEWAYS
from unified_orders.infrastructure.unit_of_work import UnitOfWork


async def status_of(uow, order_no):
    order = await GetOrderUseCase(uow)(order_no)
    return order.payment_status if order else None


async def test_cancel_by_another_user_is_rejected(uow, new_order):
    order_no = await new_order(user_id=1)

    assert await CancelOrderUseCase(uow)(order_no, 2) is False
    assert await status_of(uow, order_no) == PaymentStatus.UNPAID


async def test_cancel_after_payment_is_rejected(uow, new_order):
    order_no = await new_order(user_id=1)
    await ProcessPaymentUseCase(uow)(PaymentDTO(order_no=order_no, payment_method="alipay"))

    assert await CancelOrderUseCase(uow)(order_no, 1) is False
    assert await status_of(uow, order_no) == PaymentStatus.PAID


async def test_cancel_unknown_order_fails(uow):
    assert await CancelOrderUseCase(uow)("UOTRAVEL0000000000000000", 1) is False


async def test_cancel_marks_module_orders_cancelled(uow, new_order, db_row):
    await db_row.insert(hotel_order_tbl, id=1, status=0)
    await db_row.insert(shop_order_tbl, id=2, order_status=0)
    await db_row.insert(travel_order_tbl, id=3, order_status=0)
    await db_row.insert(restaurant_order_tbl, id=4, order_status=0)
    orders = [
        await new_order(order_type="HOTEL", module_order_id=1),
        await new_order(order_type="SHOPPING", module_order_id=2),
        await new_order(order_type="TRAVEL", module_order_id=3),
        await new_order(order_type="FOOD", module_order_id=4),
    ]

    for order_no in orders:
        assert await CancelOrderUseCase(uow)(order_no, 1) is True
        assert await status_of(uow, order_no) == PaymentStatus.CANCELLED

    assert (await db_row.get(hotel_order_tbl, 1)).status == 2
    assert (await db_row.get(shop_order_tbl, 2)).order_status == 2
    assert (await db_row.get(travel_order_tbl, 3)).order_status == 2
    assert (await db_row.get(restaurant_order_tbl, 4)).order_status == 2


async def test_cancel_leaves_bill_untouched(uow, new_order, db_row):
    await db_row.insert(payment_bills_tbl, id=5, bill_status=0)
    order_no = await new_order(order_type="PAYMENT", module_order_id=5)

    assert await CancelOrderUseCase(uow)(order_no, 1) is True

    bill = await db_row.get(payment_bills_tbl, 5)
    assert bill.bill_status == 0
    assert bill.paid_time is None


async def test_failing_module_sync_does_not_fail_cancel(session_factory, new_order):
    gateways = {**DEFAULT_MODULE_GATEWAYS, OrderType.FOOD: ExplodingGateway}
    uow = UnitOfWork(session_factory, module_gateways=gateways)
    order_no = await new_order(order_type="FOOD", module_order_id=6)

    assert await CancelOrderUseCase(uow)(order_no, 1) is True
    assert await status_of(uow, order_no) == PaymentStatus.CANCELLED

    failures = await ListSyncFailuresUseCase(uow)()
    assert [(f.order_no, f.action) for f in failures] == [(order_no, "cancelled")]


async def test_delete_cancelled_order_keeps_module_order(uow, new_order, db_row):
    await db_row.insert(shop_order_tbl, id=2, order_status=0)
    order_no = await new_order(order_type="SHOPPING", module_order_id=2)
    await CancelOrderUseCase(uow)(order_no, 1)

    assert await DeleteOrderUseCase(uow)(order_no, 1) is True

    assert await GetOrderUseCase(uow)(order_no) is None
    assert (await db_row.get(shop_order_tbl, 2)).order_status == 2


async def test_delete_unpaid_order(uow, new_order):
    order_no = await new_order()
    assert await DeleteOrderUseCase(uow)(order_no, 1) is True
    assert await GetOrderUseCase(uow)(order_no) is None


async def test_paid_order_cannot_be_deleted(uow, new_order):
    order_no = await new_order()
    await ProcessPaymentUseCase(uow)(PaymentDTO(order_no=order_no, payment_method="alipay"))

    assert await DeleteOrderUseCase(uow)(order_no, 1) is False
    assert await status_of(uow, order_no) == PaymentStatus.PAID


async def test_delete_by_another_user_is_rejected(uow, new_order):
    order_no = await new_order(user_id=1)
    assert await DeleteOrderUseCase(uow)(order_no, 2) is False
    assert await status_of(uow, order_no) == PaymentStatus.UNPAID


async def test_action_checks_follow_state_and_owner(uow, new_order):
    checks = OrderActionChecks(uow)
    order_no = await new_order(user_id=1)

    assert await checks.can_pay(order_no)
    assert await checks.can_cancel(order_no, 1)
    assert not await checks.can_cancel(order_no, 2)
    assert await checks.can_delete(order_no, 1)
    assert not await checks.can_delete(order_no, 2)

    await ProcessPaymentUseCase(uow)(PaymentDTO(order_no=order_no, payment_method="alipay"))

    assert not await checks.can_pay(order_no)
    assert not await checks.can_cancel(order_no, 1)
    assert not await checks.can_delete(order_no, 1)
    assert not await checks.can_pay("UOHOTEL0000000000000000")


async def test_stats_count_by_status(uow, new_order):
    for _ in range(3):
        await new_order(user_id=9)
    paid = [await new_order(user_id=9) for _ in range(2)]
    cancelled = await new_order(user_id=9)
    await new_order(user_id=10)

    for order_no in paid:
        await ProcessPaymentUseCase(uow)(PaymentDTO(order_no=order_no, payment_method="alipay"))
    await CancelOrderUseCase(uow)(cancelled, 9)

    stats = await GetOrderStatsUseCase(uow)(9)
    assert stats.total == 6
    assert stats.unpaid == 3
    assert stats.paid == 2
    assert stats.cancelled == 1
    assert stats.completed == 0
    assert stats.refunded == 0


async def test_stats_for_user_without_orders(uow):
    stats = await GetOrderStatsUseCase(uow)(99)
    assert stats.total == 0
    assert stats.unpaid == 0
