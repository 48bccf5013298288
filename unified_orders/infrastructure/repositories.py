from datetime import datetime
from decimal import Decimal
from typing import Optional, List
from sqlalchemy import select, insert, update, delete, func, case
from sqlalchemy.ext.asyncio import AsyncSession

from unified_orders.domain.models import (
    UnifiedOrder, OrderType, PaymentStatus, OrderStats, SyncFailure, DELETABLE_STATUSES
)
from unified_orders.infrastructure.db_schema import unified_order_tbl, order_sync_failures_tbl
from unified_orders.application.interfaces import UnifiedOrderRepository, SyncFailureRepository


def _count_status(status: PaymentStatus):
    return func.coalesce(
        func.sum(case((unified_order_tbl.c.payment_status == int(status), 1), else_=0)),
        0
    )


class SQLAlchemyUnifiedOrderRepository(UnifiedOrderRepository):
    def __init__(self, session: AsyncSession):
        self._session = session

    async def get_by_order_no(self, order_no: str) -> Optional[UnifiedOrder]:
        result = await self._session.execute(
            select(unified_order_tbl).where(unified_order_tbl.c.order_no == order_no)
        )
        row = result.fetchone()
        return self._to_domain(row) if row else None

    async def list_by_user(
        self,
        user_id: int,
        order_type: Optional[OrderType] = None,
        payment_status: Optional[PaymentStatus] = None
    ) -> List[UnifiedOrder]:
        stmt = select(unified_order_tbl).where(unified_order_tbl.c.user_id == user_id)
        if order_type is not None:
            stmt = stmt.where(unified_order_tbl.c.order_type == OrderType(order_type).value)
        if payment_status is not None:
            stmt = stmt.where(unified_order_tbl.c.payment_status == int(payment_status))
        stmt = stmt.order_by(unified_order_tbl.c.create_time.desc(), unified_order_tbl.c.id.desc())

        result = await self._session.execute(stmt)
        return [self._to_domain(row) for row in result.fetchall()]

    async def create(self, order: UnifiedOrder) -> int:
        stmt = insert(unified_order_tbl).values(
            order_no=order.order_no,
            user_id=order.user_id,
            order_type=order.order_type.value,
            module_order_id=order.module_order_id,
            order_title=order.order_title,
            order_description=order.order_description,
            total_amount=order.total_amount,
            payment_status=int(order.payment_status),
            create_time=order.create_time,
            update_time=order.create_time
        )
        result = await self._session.execute(stmt)
        return result.rowcount

    async def mark_paid(self, order_no: str, payment_method: str, payment_time: datetime) -> int:
        # compare-and-swap: a concurrent payment that already won leaves nothing to update
        stmt = (
            update(unified_order_tbl)
            .where(
                unified_order_tbl.c.order_no == order_no,
                unified_order_tbl.c.payment_status == int(PaymentStatus.UNPAID)
            )
            .values(
                payment_status=int(PaymentStatus.PAID),
                payment_method=payment_method,
                payment_time=payment_time,
                update_time=datetime.now()
            )
        )
        result = await self._session.execute(stmt)
        return result.rowcount

    async def mark_cancelled(self, order_no: str) -> int:
        stmt = (
            update(unified_order_tbl)
            .where(
                unified_order_tbl.c.order_no == order_no,
                unified_order_tbl.c.payment_status == int(PaymentStatus.UNPAID)
            )
            .values(
                payment_status=int(PaymentStatus.CANCELLED),
                update_time=datetime.now()
            )
        )
        result = await self._session.execute(stmt)
        return result.rowcount

    async def delete(self, order_no: str, user_id: int) -> int:
        stmt = (
            delete(unified_order_tbl)
            .where(
                unified_order_tbl.c.order_no == order_no,
                unified_order_tbl.c.user_id == user_id,
                unified_order_tbl.c.payment_status.in_([int(s) for s in DELETABLE_STATUSES])
            )
        )
        result = await self._session.execute(stmt)
        return result.rowcount

    async def get_stats(self, user_id: int) -> OrderStats:
        result = await self._session.execute(
            select(
                func.count().label("total"),
                _count_status(PaymentStatus.UNPAID).label("unpaid"),
                _count_status(PaymentStatus.PAID).label("paid"),
                _count_status(PaymentStatus.CANCELLED).label("cancelled"),
                _count_status(PaymentStatus.COMPLETED).label("completed"),
                _count_status(PaymentStatus.REFUNDED).label("refunded"),
            )
            .select_from(unified_order_tbl)
            .where(unified_order_tbl.c.user_id == user_id)
        )
        row = result.one()
        return OrderStats(
            total=row.total,
            unpaid=row.unpaid,
            paid=row.paid,
            cancelled=row.cancelled,
            completed=row.completed,
            refunded=row.refunded
        )

    async def find_unpaid_by_module_order_id(self, module_order_id: int, order_type: OrderType) -> Optional[UnifiedOrder]:
        return await self._find_newest_unpaid(
            unified_order_tbl.c.module_order_id == module_order_id,
            unified_order_tbl.c.order_type == OrderType(order_type).value
        )

    async def find_unpaid_by_user_id_and_type(self, user_id: int, order_type: OrderType) -> Optional[UnifiedOrder]:
        return await self._find_newest_unpaid(
            unified_order_tbl.c.user_id == user_id,
            unified_order_tbl.c.order_type == OrderType(order_type).value
        )

    async def update_total_amount(self, order_no: str, total_amount: Decimal) -> int:
        stmt = (
            update(unified_order_tbl)
            .where(
                unified_order_tbl.c.order_no == order_no,
                unified_order_tbl.c.payment_status == int(PaymentStatus.UNPAID)
            )
            .values(
                total_amount=total_amount,
                update_time=datetime.now()
            )
        )
        result = await self._session.execute(stmt)
        return result.rowcount

    async def update_module_order_id(self, order_no: str, module_order_id: int) -> int:
        stmt = (
            update(unified_order_tbl)
            .where(
                unified_order_tbl.c.order_no == order_no,
                unified_order_tbl.c.payment_status == int(PaymentStatus.UNPAID)
            )
            .values(
                module_order_id=module_order_id,
                update_time=datetime.now()
            )
        )
        result = await self._session.execute(stmt)
        return result.rowcount

    async def _find_newest_unpaid(self, *criteria) -> Optional[UnifiedOrder]:
        result = await self._session.execute(
            select(unified_order_tbl)
            .where(
                *criteria,
                unified_order_tbl.c.payment_status == int(PaymentStatus.UNPAID)
            )
            .order_by(unified_order_tbl.c.create_time.desc(), unified_order_tbl.c.id.desc())
            .limit(1)
        )
        row = result.fetchone()
        return self._to_domain(row) if row else None

    def _to_domain(self, row) -> UnifiedOrder:
        """DB row → Domain"""
        return UnifiedOrder(
            id=row.id,
            order_no=row.order_no,
            user_id=row.user_id,
            order_type=OrderType(row.order_type),
            module_order_id=row.module_order_id,
            order_title=row.order_title,
            order_description=row.order_description,
            total_amount=row.total_amount,
            payment_status=PaymentStatus(row.payment_status),
            payment_method=row.payment_method,
            payment_time=row.payment_time,
            create_time=row.create_time,
            update_time=row.update_time
        )


class SQLAlchemySyncFailureRepository(SyncFailureRepository):
    def __init__(self, session: AsyncSession):
        self._session = session

    async def create(self, order: UnifiedOrder, action: str, error: str) -> int:
        stmt = insert(order_sync_failures_tbl).values(
            order_no=order.order_no,
            order_type=order.order_type.value,
            module_order_id=order.module_order_id,
            action=action,
            error=error,
            created_at=datetime.now()
        )
        result = await self._session.execute(stmt)
        return result.inserted_primary_key[0]

    async def get_recent(self, limit: int = 50) -> List[SyncFailure]:
        result = await self._session.execute(
            select(order_sync_failures_tbl)
            .order_by(order_sync_failures_tbl.c.created_at.desc(), order_sync_failures_tbl.c.id.desc())
            .limit(limit)
        )
        return [
            SyncFailure(
                id=row.id,
                order_no=row.order_no,
                order_type=OrderType(row.order_type),
                module_order_id=row.module_order_id,
                action=row.action,
                error=row.error,
                created_at=row.created_at
            )
            for row in result.fetchall()
        ]
