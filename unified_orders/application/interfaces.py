from abc import ABC, abstractmethod
from datetime import datetime
from decimal import Decimal
from typing import Optional, List, Mapping
from unified_orders.domain.models import UnifiedOrder, OrderType, PaymentStatus, OrderStats, SyncFailure


class UnifiedOrderRepository(ABC):
    @abstractmethod
    async def get_by_order_no(self, order_no: str) -> Optional[UnifiedOrder]:
        pass

    @abstractmethod
    async def list_by_user(
        self,
        user_id: int,
        order_type: Optional[OrderType] = None,
        payment_status: Optional[PaymentStatus] = None
    ) -> List[UnifiedOrder]:
        pass

    @abstractmethod
    async def create(self, order: UnifiedOrder) -> int:
        pass

    @abstractmethod
    async def mark_paid(self, order_no: str, payment_method: str, payment_time: datetime) -> int:
        pass

    @abstractmethod
    async def mark_cancelled(self, order_no: str) -> int:
        pass

    @abstractmethod
    async def delete(self, order_no: str, user_id: int) -> int:
        pass

    @abstractmethod
    async def get_stats(self, user_id: int) -> OrderStats:
        pass

    @abstractmethod
    async def find_unpaid_by_module_order_id(self, module_order_id: int, order_type: OrderType) -> Optional[UnifiedOrder]:
        pass

    @abstractmethod
    async def find_unpaid_by_user_id_and_type(self, user_id: int, order_type: OrderType) -> Optional[UnifiedOrder]:
        pass

    @abstractmethod
    async def update_total_amount(self, order_no: str, total_amount: Decimal) -> int:
        pass

    @abstractmethod
    async def update_module_order_id(self, order_no: str, module_order_id: int) -> int:
        pass


class SyncFailureRepository(ABC):
    @abstractmethod
    async def create(self, order: UnifiedOrder, action: str, error: str) -> int:
        pass

    @abstractmethod
    async def get_recent(self, limit: int = 50) -> List[SyncFailure]:
        pass


class ModuleOrderGateway(ABC):
    """Status updates on one domain's own order table.

    Both methods return the number of domain rows touched.
    """

    @abstractmethod
    async def mark_paid(self, module_order_id: int, paid_at: datetime) -> int:
        pass

    @abstractmethod
    async def mark_cancelled(self, module_order_id: int) -> int:
        pass


class UnitOfWork(ABC):
    @property
    @abstractmethod
    def orders(self) -> UnifiedOrderRepository:
        pass

    @property
    @abstractmethod
    def sync_failures(self) -> SyncFailureRepository:
        pass

    @property
    @abstractmethod
    def module_orders(self) -> Mapping[OrderType, ModuleOrderGateway]:
        pass

    @abstractmethod
    async def __call__(self):
        pass

    @abstractmethod
    async def commit(self):
        pass

    @abstractmethod
    async def rollback(self):
        pass
