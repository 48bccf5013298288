from typing import List, Optional
from fastapi import APIRouter, Depends, HTTPException, Query, status

from unified_orders.database import AsyncSessionLocal
from unified_orders.domain.models import UnifiedOrder, OrderType, PaymentStatus, OrderStats, SyncFailure
from unified_orders.presentation.schemas import (
    CreateOrderRequest, CreateOrderResponse, OrderResponse, PaymentRequest, OwnerRequest,
    TotalAmountRequest, ModuleOrderRequest, OrderActionsResponse, ActionResponse, ErrorResponse
)
from unified_orders.application.create_order import CreateOrderUseCase, CreateOrderDTO
from unified_orders.application.get_order import GetOrderUseCase, ListUserOrdersUseCase, GetOrderStatsUseCase
from unified_orders.application.process_payment import ProcessPaymentUseCase, PaymentDTO
from unified_orders.application.cancel_order import CancelOrderUseCase
from unified_orders.application.delete_order import DeleteOrderUseCase
from unified_orders.application.order_checks import OrderActionChecks
from unified_orders.application.checkout import (
    FindUnpaidOrderUseCase, UpdateTotalAmountUseCase, AttachModuleOrderUseCase
)
from unified_orders.application.module_sync import ListSyncFailuresUseCase
from unified_orders.infrastructure.unit_of_work import UnitOfWork

router = APIRouter()


def get_unit_of_work() -> UnitOfWork:
    return UnitOfWork(AsyncSessionLocal)


# Use case factories
def get_create_order_use_case(uow: UnitOfWork = Depends(get_unit_of_work)):
    return CreateOrderUseCase(uow)


def get_get_order_use_case(uow: UnitOfWork = Depends(get_unit_of_work)):
    return GetOrderUseCase(uow)


def get_list_orders_use_case(uow: UnitOfWork = Depends(get_unit_of_work)):
    return ListUserOrdersUseCase(uow)


def get_order_stats_use_case(uow: UnitOfWork = Depends(get_unit_of_work)):
    return GetOrderStatsUseCase(uow)


def get_process_payment_use_case(uow: UnitOfWork = Depends(get_unit_of_work)):
    return ProcessPaymentUseCase(uow)


def get_cancel_order_use_case(uow: UnitOfWork = Depends(get_unit_of_work)):
    return CancelOrderUseCase(uow)


def get_delete_order_use_case(uow: UnitOfWork = Depends(get_unit_of_work)):
    return DeleteOrderUseCase(uow)


def get_order_checks(uow: UnitOfWork = Depends(get_unit_of_work)):
    return OrderActionChecks(uow)


def get_find_unpaid_use_case(uow: UnitOfWork = Depends(get_unit_of_work)):
    return FindUnpaidOrderUseCase(uow)


def get_update_total_use_case(uow: UnitOfWork = Depends(get_unit_of_work)):
    return UpdateTotalAmountUseCase(uow)


def get_attach_module_order_use_case(uow: UnitOfWork = Depends(get_unit_of_work)):
    return AttachModuleOrderUseCase(uow)


def get_list_sync_failures_use_case(uow: UnitOfWork = Depends(get_unit_of_work)):
    return ListSyncFailuresUseCase(uow)


@router.post(
    "/unified-orders",
    response_model=CreateOrderResponse,
    responses={400: {"model": ErrorResponse}},
    status_code=status.HTTP_201_CREATED
)
async def create_order(
    request: CreateOrderRequest,
    use_case: CreateOrderUseCase = Depends(get_create_order_use_case)
):
    """Create a unified order in UNPAID state"""
    dto = CreateOrderDTO(**request.model_dump())
    order_no = await use_case(dto)
    if not order_no:
        raise HTTPException(status_code=400, detail="Order was not created")
    return CreateOrderResponse(order_no=order_no)


@router.get(
    "/unified-orders/unpaid",
    response_model=OrderResponse,
    responses={404: {"model": ErrorResponse}}
)
async def find_unpaid_order(
    order_type: OrderType,
    module_order_id: Optional[int] = None,
    user_id: Optional[int] = None,
    use_case: FindUnpaidOrderUseCase = Depends(get_find_unpaid_use_case)
):
    """Find the open checkout for a module order, or else for a user"""
    if module_order_id is not None:
        order = await use_case.by_module_order_id(module_order_id, order_type)
    else:
        order = await use_case.by_user_id_and_type(user_id, order_type)
    if not order:
        raise HTTPException(status_code=404, detail="No unpaid order")
    return OrderResponse.from_domain(order)


@router.get("/unified-orders/sync-failures", response_model=List[SyncFailure])
async def list_sync_failures(
    limit: int = Query(50, ge=1, le=500),
    use_case: ListSyncFailuresUseCase = Depends(get_list_sync_failures_use_case)
):
    """Module orders that could not be synced and need manual reconciliation"""
    return await use_case(limit=limit)


@router.get(
    "/unified-orders/{order_no}",
    response_model=OrderResponse,
    responses={404: {"model": ErrorResponse}}
)
async def get_order(
    order_no: str,
    use_case: GetOrderUseCase = Depends(get_get_order_use_case)
):
    """Get an order by its number"""
    order = await use_case(order_no)
    if not order:
        raise HTTPException(status_code=404, detail="Order not found")
    return OrderResponse.from_domain(order)


@router.get("/users/{user_id}/unified-orders", response_model=List[OrderResponse])
async def list_user_orders(
    user_id: int,
    order_type: Optional[OrderType] = None,
    payment_status: Optional[PaymentStatus] = None,
    use_case: ListUserOrdersUseCase = Depends(get_list_orders_use_case)
):
    """List a user's orders, newest first"""
    orders = await use_case(user_id, order_type, payment_status)
    return [OrderResponse.from_domain(order) for order in orders]


@router.get("/users/{user_id}/unified-orders/stats", response_model=OrderStats)
async def order_stats(
    user_id: int,
    use_case: GetOrderStatsUseCase = Depends(get_order_stats_use_case)
):
    return await use_case(user_id)


async def get_owned_order(order_no: str, user_id: int, get_order_use_case: GetOrderUseCase) -> UnifiedOrder:
    """Load the order for a mutation by its owner, or answer 404/403"""
    order = await get_order_use_case(order_no)
    if not order:
        raise HTTPException(status_code=404, detail="Order not found")
    if not order.is_owned_by(user_id):
        raise HTTPException(status_code=403, detail="Order belongs to another user")
    return order


@router.post(
    "/unified-orders/{order_no}/payment",
    response_model=ActionResponse,
    responses={403: {"model": ErrorResponse}, 404: {"model": ErrorResponse}, 409: {"model": ErrorResponse}}
)
async def pay_order(
    order_no: str,
    request: PaymentRequest,
    get_order_use_case: GetOrderUseCase = Depends(get_get_order_use_case),
    use_case: ProcessPaymentUseCase = Depends(get_process_payment_use_case)
):
    """Pay an order owned by the caller"""
    await get_owned_order(order_no, request.user_id, get_order_use_case)

    paid = await use_case(PaymentDTO(order_no=order_no, payment_method=request.payment_method))
    if not paid:
        raise HTTPException(status_code=409, detail="Order cannot be paid")
    return ActionResponse(message="Payment succeeded")


@router.post(
    "/unified-orders/{order_no}/cancel",
    response_model=ActionResponse,
    responses={403: {"model": ErrorResponse}, 404: {"model": ErrorResponse}, 409: {"model": ErrorResponse}}
)
async def cancel_order(
    order_no: str,
    request: OwnerRequest,
    get_order_use_case: GetOrderUseCase = Depends(get_get_order_use_case),
    use_case: CancelOrderUseCase = Depends(get_cancel_order_use_case)
):
    await get_owned_order(order_no, request.user_id, get_order_use_case)

    if not await use_case(order_no, request.user_id):
        raise HTTPException(status_code=409, detail="Order cannot be cancelled")
    return ActionResponse(message="Order cancelled")


@router.delete(
    "/unified-orders/{order_no}",
    response_model=ActionResponse,
    responses={403: {"model": ErrorResponse}, 404: {"model": ErrorResponse}, 409: {"model": ErrorResponse}}
)
async def delete_order(
    order_no: str,
    user_id: int,
    get_order_use_case: GetOrderUseCase = Depends(get_get_order_use_case),
    use_case: DeleteOrderUseCase = Depends(get_delete_order_use_case)
):
    await get_owned_order(order_no, user_id, get_order_use_case)

    if not await use_case(order_no, user_id):
        raise HTTPException(status_code=409, detail="Order cannot be deleted")
    return ActionResponse(message="Order deleted")


@router.get("/unified-orders/{order_no}/actions", response_model=OrderActionsResponse)
async def order_actions(
    order_no: str,
    user_id: int,
    checks: OrderActionChecks = Depends(get_order_checks)
):
    """Which actions the caller may take on the order right now"""
    return OrderActionsResponse(
        can_pay=await checks.can_pay(order_no),
        can_cancel=await checks.can_cancel(order_no, user_id),
        can_delete=await checks.can_delete(order_no, user_id)
    )


# Checkout only adjusts orders that are still awaiting payment
@router.patch(
    "/unified-orders/{order_no}/total-amount",
    response_model=ActionResponse,
    responses={403: {"model": ErrorResponse}, 404: {"model": ErrorResponse}, 409: {"model": ErrorResponse}}
)
async def update_total_amount(
    order_no: str,
    request: TotalAmountRequest,
    get_order_use_case: GetOrderUseCase = Depends(get_get_order_use_case),
    use_case: UpdateTotalAmountUseCase = Depends(get_update_total_use_case)
):
    await get_owned_order(order_no, request.user_id, get_order_use_case)

    if not await use_case(order_no, request.total_amount):
        raise HTTPException(status_code=409, detail="Order is no longer awaiting payment")
    return ActionResponse(message="Total amount updated")


@router.patch(
    "/unified-orders/{order_no}/module-order",
    response_model=ActionResponse,
    responses={403: {"model": ErrorResponse}, 404: {"model": ErrorResponse}, 409: {"model": ErrorResponse}}
)
async def attach_module_order(
    order_no: str,
    request: ModuleOrderRequest,
    get_order_use_case: GetOrderUseCase = Depends(get_get_order_use_case),
    use_case: AttachModuleOrderUseCase = Depends(get_attach_module_order_use_case)
):
    await get_owned_order(order_no, request.user_id, get_order_use_case)

    if not await use_case(order_no, request.module_order_id):
        raise HTTPException(status_code=409, detail="Order is no longer awaiting payment")
    return ActionResponse(message="Module order attached")
