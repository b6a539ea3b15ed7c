# storefront/services/order_client.py
import requests

from storefront.domain.schemas import TrackingInfo, OrderRecord
from storefront.utils.formatting import normalize_phone
from storefront.utils.retry import http_retry
from storefront.utils.settings import API_BASE_URL, BEACON_TIMEOUT_SECONDS, HTTP_TIMEOUT_SECONDS
from storefront.utils.logging import get_logger

logger = get_logger(__name__)


class OrderClient:
    """REST client for the orders backend."""

    def __init__(
        self,
        base_url: str | None = None,
        timeout: float = HTTP_TIMEOUT_SECONDS,
        session: requests.Session | None = None,
        token: str | None = None,
        beacon_timeout: float = BEACON_TIMEOUT_SECONDS,
    ):
        self.base_url = (base_url or API_BASE_URL).rstrip("/")
        self.timeout = timeout
        self.session = session or requests.Session()
        self.token = token
        self.beacon_timeout = beacon_timeout

    def _headers(self) -> dict:
        if self.token:
            return {"Authorization": f"Bearer {self.token}"}
        return {}

    def send_beacon(self, body: str) -> None:
        """
        Single POST of an order; the response is not inspected.
        No retry; the request gives up after ``beacon_timeout`` seconds.
        """
        url = f"{self.base_url}/orders/beacon"
        logger.info(f"OrderClient POST {url}")
        self.session.post(
            url,
            data=body.encode("utf-8"),
            headers={"Content-Type": "text/plain;charset=UTF-8"},
            timeout=self.beacon_timeout,
        )

    def track_order(self, order_id: int) -> TrackingInfo:
        url = f"{self.base_url}/orders/{order_id}/track"
        logger.info(f"OrderClient GET {url}")

        resp = self.session.get(url, headers=self._headers(), timeout=self.timeout)
        resp.raise_for_status()
        return TrackingInfo.model_validate(resp.json() or {})

    def track_order_by_number(self, order_number: str, phone: str) -> TrackingInfo:
        url = f"{self.base_url}/orders/track"
        logger.info(f"OrderClient POST {url} for order #{order_number}")

        resp = self.session.post(
            url,
            json={"orderNumber": order_number, "phone": normalize_phone(phone) or phone},
            timeout=self.timeout,
        )
        resp.raise_for_status()
        return TrackingInfo.model_validate(resp.json() or {})

    @http_retry()
    def my_orders(self) -> list[OrderRecord]:
        url = f"{self.base_url}/orders/my-orders"
        logger.info(f"OrderClient GET {url}")

        resp = self.session.get(url, headers=self._headers(), timeout=self.timeout)
        resp.raise_for_status()
        data = resp.json()
        #backend returns a bare list
        if not isinstance(data, list):
            return []
        return [OrderRecord.model_validate(o) for o in data]
