# storefront/domain/stages.py
"""
Order status classification for tracking.

Server statuses fan in to a fixed linear progression. CONFIRMED and
PROCESSING share a rank; CANCELLED sits outside the progression.
"""
from dataclasses import dataclass
from enum import Enum
from typing import List


class OrderStatus(str, Enum):
    PENDING = "PENDING"
    CONFIRMED = "CONFIRMED"
    PROCESSING = "PROCESSING"
    SHIPPED = "SHIPPED"
    DELIVERED = "DELIVERED"
    CANCELLED = "CANCELLED"


class Stage(Enum):
    PLACED = 0
    PROCESSING = 1
    SHIPPED = 2
    DELIVERED = 3
    CANCELLED = -1


_STAGE_BY_STATUS = {
    OrderStatus.PENDING: Stage.PLACED,
    OrderStatus.CONFIRMED: Stage.PROCESSING,
    OrderStatus.PROCESSING: Stage.PROCESSING,
    OrderStatus.SHIPPED: Stage.SHIPPED,
    OrderStatus.DELIVERED: Stage.DELIVERED,
    OrderStatus.CANCELLED: Stage.CANCELLED,
}


@dataclass(frozen=True)
class Step:
    key: OrderStatus
    label: str
    completed: bool


#(status key, label, stage that completes the step)
_STEPS = (
    (OrderStatus.PENDING, "Order Placed", Stage.PLACED),
    (OrderStatus.CONFIRMED, "Confirmed", Stage.PROCESSING),
    (OrderStatus.PROCESSING, "Processing", Stage.PROCESSING),
    (OrderStatus.SHIPPED, "Shipped", Stage.SHIPPED),
    (OrderStatus.DELIVERED, "Delivered", Stage.DELIVERED),
)


def parse_status(status: str | None) -> OrderStatus:
    """Unknown or missing status strings read as PENDING."""
    try:
        return OrderStatus(str(status).strip().upper())
    except ValueError:
        return OrderStatus.PENDING


def classify(status: str | OrderStatus | None) -> Stage:
    if not isinstance(status, OrderStatus):
        status = parse_status(status)
    return _STAGE_BY_STATUS[status]


def steps_for(status: str | OrderStatus | None) -> List[Step]:
    stage = classify(status)

    if stage is Stage.CANCELLED:
        #only the placement happened
        return [
            Step(key=key, label=label, completed=required is Stage.PLACED)
            for key, label, required in _STEPS
        ]

    return [
        Step(key=key, label=label, completed=stage.value >= required.value)
        for key, label, required in _STEPS
    ]


def is_cancelled(status: str | OrderStatus | None) -> bool:
    return classify(status) is Stage.CANCELLED
