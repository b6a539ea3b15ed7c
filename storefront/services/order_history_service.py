# storefront/services/order_history_service.py
from datetime import datetime, timedelta, timezone
from typing import Dict, List

from requests import HTTPError, RequestException

from storefront.domain.schemas import OrderRecord
from storefront.services.order_client import OrderClient
from storefront.utils.formatting import KIGALI_TZ, parse_backend_date
from storefront.utils.logging import get_logger

logger = get_logger(__name__)

FILTERS = ("all", "recent", "thisMonth")
SORTS = ("newest", "oldest", "amount")

_EPOCH = datetime(1970, 1, 1, tzinfo=timezone.utc)


def _created(order: OrderRecord) -> datetime:
    return parse_backend_date(order.created_at) or _EPOCH


class OrderHistoryService:
    def __init__(self, client: OrderClient):
        self.client = client

    def load(self) -> List[OrderRecord]:
        """Orders of the signed-in customer; an empty list when they cannot be loaded."""
        try:
            return self.client.my_orders()
        except HTTPError as e:
            status = e.response.status_code if e.response is not None else None
            if status in (401, 403):
                logger.warning("Not authorised to list orders, customer has to login again")
            else:
                logger.error(f"Failed to load my orders: {e}")
        except (RequestException, ValueError) as e:
            logger.error(f"Failed to load my orders: {e}")
        return []

    @staticmethod
    def filter_orders(
        orders: List[OrderRecord],
        period: str = "all",
        now: datetime | None = None,
    ) -> List[OrderRecord]:
        if period not in FILTERS:
            raise ValueError(f"Unknown order filter: {period}")
        if period == "all":
            return list(orders)

        now = (now or datetime.now(timezone.utc)).astimezone(KIGALI_TZ)
        if period == "recent":
            since = now - timedelta(days=7)
        else:
            since = now.replace(day=1, hour=0, minute=0, second=0, microsecond=0)

        #orders without a creation date never match a period
        return [
            o for o in orders
            if o.created_at is not None and _created(o) >= since
        ]

    @staticmethod
    def sort_orders(orders: List[OrderRecord], sort_by: str = "newest") -> List[OrderRecord]:
        if sort_by == "newest":
            return sorted(orders, key=_created, reverse=True)
        if sort_by == "oldest":
            return sorted(orders, key=_created)
        if sort_by == "amount":
            return sorted(orders, key=lambda o: o.total, reverse=True)
        raise ValueError(f"Unknown order sort: {sort_by}")

    @staticmethod
    def display_numbers(orders: List[OrderRecord]) -> Dict[int, int]:
        """Per-customer order numbers, 1 for the earliest order."""
        return {
            order.id: idx
            for idx, order in enumerate(sorted(orders, key=_created), start=1)
        }

    @staticmethod
    def total_spent(orders: List[OrderRecord]) -> int:
        return sum(o.total for o in orders)
