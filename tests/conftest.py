import pytest
import requests

from storefront.domain.schemas import CheckoutDraft, DeliveryOption, ProductIn, TrackingInfo
from storefront.repos.cart_repo import InMemoryCartStorage
from storefront.services.cart_service import CartStore


class RecordingSubmitter:
    """Keeps beacon bodies instead of sending them."""

    def __init__(self):
        self.bodies = []

    def __call__(self, body: str) -> None:
        self.bodies.append(body)


class FailingStorage:
    def load(self):
        raise OSError("disk unavailable")

    def save(self, items):
        raise OSError("disk unavailable")


class FakeOrderClient:
    """
    Stand-in for OrderClient. Each tracking call pops the next scripted
    response; exceptions in the script are raised.
    """

    base_url = "http://orders.test/api"
    timeout = 1
    session = None

    def __init__(self, responses=None, orders=None, beacon_error=None):
        self.responses = list(responses or [])
        self.orders = orders or []
        self.beacon_error = beacon_error
        self.calls = []
        self.beacons = []

    def _next(self):
        if not self.responses:
            raise requests.ConnectionError("no scripted response")
        result = self.responses.pop(0)
        if isinstance(result, Exception):
            raise result
        return result

    def track_order(self, order_id):
        self.calls.append(("id", order_id))
        return self._next()

    def track_order_by_number(self, order_number, phone):
        self.calls.append(("number", order_number, phone))
        return self._next()

    def send_beacon(self, body):
        self.beacons.append(body)
        if self.beacon_error:
            raise self.beacon_error

    def my_orders(self):
        if isinstance(self.orders, Exception):
            raise self.orders
        return self.orders


def tracking(status, **extra):
    data = {"status": status, "orderId": 7, "orderNumber": 3}
    data.update(extra)
    return TrackingInfo.model_validate(data)


@pytest.fixture
def storage():
    return InMemoryCartStorage()


@pytest.fixture
def cart(storage):
    return CartStore(storage)


@pytest.fixture
def submitter():
    return RecordingSubmitter()


@pytest.fixture
def dress():
    return ProductIn(id=1, name="Kitenge Dress", price=15000, image="/img/dress.jpg")


@pytest.fixture
def scarf():
    return ProductIn(id=2, name="Ankara Scarf", price=4500)


@pytest.fixture
def kigali_draft():
    return CheckoutDraft(
        customer_name="Aline",
        customer_phone="0788123456",
        delivery_option=DeliveryOption.KIGALI,
        delivery_location="KG 11 Ave",
    )
