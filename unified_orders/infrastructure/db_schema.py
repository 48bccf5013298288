from sqlalchemy import Table, Column, String, Integer, Numeric, DateTime, Text, MetaData
from sqlalchemy.sql import func

metadata = MetaData()


unified_order_tbl = Table(
    "unified_order",
    metadata,
    Column("id", Integer, primary_key=True, autoincrement=True),
    Column("order_no", String(64), unique=True, nullable=False, index=True),
    Column("user_id", Integer, nullable=False, index=True),
    Column("order_type", String(20), nullable=False),
    Column("module_order_id", Integer, nullable=True),
    Column("order_title", String(255), nullable=False),
    Column("order_description", Text, nullable=True),
    Column("total_amount", Numeric(10, 2), nullable=False),
    Column("payment_status", Integer, nullable=False, default=0),
    Column("payment_method", String(32), nullable=True),
    Column("payment_time", DateTime, nullable=True),
    Column("create_time", DateTime, server_default=func.now()),
    Column("update_time", DateTime, server_default=func.now(), onupdate=func.now())
)


order_sync_failures_tbl = Table(
    "order_sync_failures",
    metadata,
    Column("id", Integer, primary_key=True, autoincrement=True),
    Column("order_no", String(64), nullable=False, index=True),
    Column("order_type", String(20), nullable=False),
    Column("module_order_id", Integer, nullable=False),
    Column("action", String(20), nullable=False),
    Column("error", Text, nullable=False),
    Column("created_at", DateTime, server_default=func.now())
)


# Module order tables are owned by the hotel, shop, travel, bills and
# restaurant services; only the columns touched here are declared.
module_metadata = MetaData()

hotel_order_tbl = Table(
    "hotel_order",
    module_metadata,
    Column("id", Integer, primary_key=True),
    Column("status", Integer, nullable=False, default=0),
    Column("unified_order_no", String(64), nullable=True)
)

shop_order_tbl = Table(
    "shop_order",
    module_metadata,
    Column("id", Integer, primary_key=True),
    Column("order_status", Integer, nullable=False, default=0),
    Column("unified_order_no", String(64), nullable=True),
    Column("update_time", DateTime, server_default=func.now(), onupdate=func.now())
)

travel_order_tbl = Table(
    "travel_order",
    module_metadata,
    Column("id", Integer, primary_key=True),
    Column("order_status", Integer, nullable=False, default=0),
    Column("update_time", DateTime, server_default=func.now(), onupdate=func.now())
)

payment_bills_tbl = Table(
    "payment_bills",
    module_metadata,
    Column("id", Integer, primary_key=True),
    Column("bill_status", Integer, nullable=False, default=0),
    Column("paid_time", DateTime, nullable=True)
)

restaurant_order_tbl = Table(
    "restaurant_order",
    module_metadata,
    Column("id", Integer, primary_key=True),
    Column("order_status", Integer, nullable=False, default=0),
    Column("unified_order_no", String(64), nullable=True)
)
