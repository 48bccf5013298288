from contextlib import asynccontextmanager
from typing import Dict, Optional
from sqlalchemy.ext.asyncio import AsyncSession, async_sessionmaker

from unified_orders.domain.models import OrderType
from unified_orders.infrastructure.repositories import (
    SQLAlchemyUnifiedOrderRepository,
    SQLAlchemySyncFailureRepository
)
from unified_orders.infrastructure.module_orders import (
    DEFAULT_MODULE_GATEWAYS,
    GatewayFactory,
    build_module_gateways
)


class UnitOfWork:
    def __init__(
        self,
        session_factory: async_sessionmaker[AsyncSession],
        module_gateways: Optional[Dict[OrderType, GatewayFactory]] = None
    ):
        self._session_factory = session_factory
        self._module_gateways = module_gateways if module_gateways is not None else DEFAULT_MODULE_GATEWAYS

    @asynccontextmanager
    async def __call__(self):
        async with self._session_factory() as session:
            try:
                uow_impl = _UnitOfWorkImpl(session, self._module_gateways)
                yield uow_impl
                # Anything not committed explicitly is discarded
                await session.rollback()
            except Exception:
                await session.rollback()
                raise


class _UnitOfWorkImpl:
    def __init__(self, session: AsyncSession, module_gateways: Dict[OrderType, GatewayFactory]):
        self._session = session
        self.orders = SQLAlchemyUnifiedOrderRepository(session)
        self.sync_failures = SQLAlchemySyncFailureRepository(session)
        self.module_orders = build_module_gateways(session, module_gateways)

    async def commit(self):
        await self._session.commit()

    async def rollback(self):
        await self._session.rollback()
