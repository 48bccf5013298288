import random
import time
from typing import Optional

from unified_orders.domain.models import OrderType

ORDER_NO_PREFIX = "UO"

TYPE_TAGS = {
    OrderType.FOOD: "FOOD",
    OrderType.HOTEL: "HOTEL",
    OrderType.SHOPPING: "SHOP",
    OrderType.TRAVEL: "TRAVEL",
    OrderType.PAYMENT: "PAY",
}


def type_tag(order_type) -> str:
    try:
        return TYPE_TAGS[OrderType(order_type)]
    except ValueError:
        return "UNKNOWN"


def generate_order_no(order_type, timestamp_ms: Optional[int] = None, suffix: Optional[int] = None) -> str:
    """UO + type tag + 13-digit epoch millis + 3-digit random suffix.

    Uniqueness is probabilistic; no lookup is made against existing orders.
    """
    if timestamp_ms is None:
        timestamp_ms = int(time.time() * 1000)
    if suffix is None:
        suffix = random.randint(0, 999)
    return f"{ORDER_NO_PREFIX}{type_tag(order_type)}{timestamp_ms:013d}{suffix:03d}"
