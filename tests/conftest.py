import itertools
from decimal import Decimal

import pytest
from sqlalchemy import insert, select
from sqlalchemy.ext.asyncio import async_sessionmaker, create_async_engine

from unified_orders.application.create_order import CreateOrderUseCase, CreateOrderDTO
from unified_orders.domain.order_number import generate_order_no
from unified_orders.infrastructure.db_schema import metadata, module_metadata
from unified_orders.infrastructure.unit_of_work import UnitOfWork


def sequential_order_nos():
    """Order number factory whose suffix never repeats within a test."""
    counter = itertools.count()
    return lambda order_type: generate_order_no(order_type, suffix=next(counter) % 1000)


@pytest.fixture
async def engine(tmp_path):
    # File-backed so that separate sessions use separate connections
    engine = create_async_engine(f"sqlite+aiosqlite:///{tmp_path / 'orders.db'}")
    async with engine.begin() as conn:
        await conn.run_sync(metadata.create_all)
        await conn.run_sync(module_metadata.create_all)
    yield engine
    await engine.dispose()


@pytest.fixture
def session_factory(engine):
    return async_sessionmaker(engine, expire_on_commit=False)


@pytest.fixture
def uow(session_factory):
    return UnitOfWork(session_factory)


@pytest.fixture
def new_order(uow):
    """Creates a unified order and returns its number."""
    use_case = CreateOrderUseCase(uow, order_no_factory=sequential_order_nos())

    async def _create(
        user_id=1,
        order_type="HOTEL",
        module_order_id=None,
        title="Lakeside room",
        description="2 nights",
        total_amount="199.00"
    ):
        return await use_case(CreateOrderDTO(
            user_id=user_id,
            order_type=order_type,
            module_order_id=module_order_id,
            order_title=title,
            order_description=description,
            total_amount=Decimal(total_amount)
        ))

    return _create


@pytest.fixture
def db_row(session_factory):
    """Insert/read helpers for module order tables."""

    class _Rows:
        async def insert(self, table, **values):
            async with session_factory() as session:
                await session.execute(insert(table).values(**values))
                await session.commit()

        async def get(self, table, row_id):
            async with session_factory() as session:
                result = await session.execute(select(table).where(table.c.id == row_id))
                return result.fetchone()

    return _Rows()


class RecordingGateway:
    def __init__(self, calls):
        self._calls = calls

    async def mark_paid(self, module_order_id, paid_at):
        self._calls.append(("paid", module_order_id, paid_at))
        return 1

    async def mark_cancelled(self, module_order_id):
        self._calls.append(("cancelled", module_order_id))
        return 1


class ExplodingGateway:
    def __init__(self, session):
        pass

    async def mark_paid(self, module_order_id, paid_at):
        raise RuntimeError("restaurant store unavailable")

    async def mark_cancelled(self, module_order_id):
        raise RuntimeError("restaurant store unavailable")
